"""
Report Services.

Feed the financial reporting functions with rows from the store.
"""

from typing import List

from domain.wir.reporting import (
    FinancialSummary,
    MonthlyInvoice,
    available_invoice_months,
    financial_summary,
    monthly_invoice,
)


def _completed_wirs():
    from infrastructure.persistence.models import WIR

    return [wir.to_entity() for wir in WIR.objects.filter(result__isnull=False).order_by('received_date')]


def get_financial_summary() -> FinancialSummary:
    from infrastructure.persistence.models import BOQItem

    return financial_summary(_completed_wirs(), [item.to_entity() for item in BOQItem.objects.all()])


def get_invoice_months() -> List[str]:
    return available_invoice_months(_completed_wirs())


def get_monthly_invoice(month: str) -> MonthlyInvoice:
    from infrastructure.persistence.models import BOQItem

    leaves = BOQItem.objects.filter(children__isnull=True)
    return monthly_invoice(_completed_wirs(), [item.to_entity() for item in leaves], month)
