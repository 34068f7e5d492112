from datetime import date
from decimal import Decimal

from domain.boq.entities import BOQItem
from domain.shared.value_objects import WIRResult, WIRStatus
from domain.wir.entities import WIR
from domain.wir.reporting import available_invoice_months, financial_summary, monthly_invoice


def completed(result, amount, received, linked=()):
    return WIR(
        wir_number=f'WIR-{received}',
        status=WIRStatus.COMPLETED,
        result=result,
        calculated_amount=Decimal(amount) if amount is not None else None,
        received_date=received,
        linked_boq_items=list(linked),
    )


def test_financial_summary_counts_distinct_linked_boq_items():
    boq = BOQItem(code='1.1', quantity=Decimal('10'), unit_rate=Decimal('100'))
    other = BOQItem(code='1.2', quantity=Decimal('1'), unit_rate=Decimal('50'))
    wirs = [
        completed(WIRResult.APPROVED, '300', date(2025, 1, 5), [boq.id]),
        completed(WIRResult.CONDITIONAL, '200', date(2025, 1, 6), [boq.id]),
        completed(WIRResult.REJECTED, None, date(2025, 1, 7), [other.id]),
    ]

    summary = financial_summary(wirs, [boq, other])

    assert summary.total_approved_wirs == 1
    assert summary.total_conditional_wirs == 1
    assert summary.total_rejected_wirs == 1
    assert summary.total_approved_amount == Decimal('300')
    assert summary.total_conditional_amount == Decimal('200')
    assert summary.total_boq_amount == Decimal('1000')
    assert summary.cost_variance_against_boq == Decimal('-500')


def test_monthly_invoice_splits_previous_and_current():
    leaves = [
        BOQItem(code='1.1', quantity=Decimal('10'), unit_rate=Decimal('100')),
        BOQItem(code='1.2', quantity=Decimal('2'), unit_rate=Decimal('25')),
    ]
    wirs = [
        completed(WIRResult.APPROVED, '100', date(2025, 1, 31)),
        completed(WIRResult.APPROVED, '40', date(2025, 2, 1)),
        completed(WIRResult.APPROVED, '60', date(2025, 2, 20)),
        completed(WIRResult.CONDITIONAL, '999', date(2025, 2, 21)),
        completed(WIRResult.APPROVED, '7', date(2025, 3, 1)),
    ]

    invoice = monthly_invoice(wirs, leaves, '2025-02')

    assert invoice.previous_amount == Decimal('100')
    assert invoice.current_amount == Decimal('100')
    assert invoice.cumulative_amount == Decimal('200')
    assert invoice.total_boq_amount == Decimal('1050')
    assert len(invoice.approved_wirs) == 2
    assert available_invoice_months(wirs) == ['2025-01', '2025-02', '2025-03']
