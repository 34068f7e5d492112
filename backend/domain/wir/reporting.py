"""
WIR Domain - Financial reporting.

Summaries over approved/conditional WIRs and month-by-month invoice data.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from domain.boq.entities import BOQItem
from domain.shared.value_objects import WIRResult

from .entities import WIR


@dataclass(frozen=True)
class FinancialSummary:
    total_approved_wirs: int
    total_conditional_wirs: int
    total_rejected_wirs: int
    total_approved_amount: Decimal
    total_conditional_amount: Decimal
    total_boq_amount: Decimal
    cost_variance_against_boq: Decimal


@dataclass(frozen=True)
class MonthlyInvoice:
    month: str
    previous_amount: Decimal
    current_amount: Decimal
    total_boq_amount: Decimal
    approved_wirs: List[WIR] = field(default_factory=list)

    @property
    def cumulative_amount(self) -> Decimal:
        return self.previous_amount + self.current_amount


def _month_of(wir: WIR) -> Optional[str]:
    return wir.received_date.strftime('%Y-%m') if wir.received_date else None


def financial_summary(wirs: Iterable[WIR], boq_items: Iterable[BOQItem]) -> FinancialSummary:
    """
    Counts and amounts by result.

    Cost variance compares the approved + conditional amount with the
    budget of the distinct BOQ items those WIRs are linked to.
    """
    boq_by_id: Dict[str, BOQItem] = {item.key: item for item in boq_items}
    counts = {result: 0 for result in WIRResult}
    amounts = {result: Decimal('0') for result in WIRResult}
    linked: Dict[str, BOQItem] = {}

    for wir in wirs:
        if wir.result is None:
            continue
        counts[wir.result] += 1
        if not wir.result.is_payable:
            continue
        amounts[wir.result] += wir.calculated_amount or Decimal('0')
        for boq_id in wir.linked_boq_items:
            boq = boq_by_id.get(str(boq_id))
            if boq is not None:
                linked[boq.key] = boq

    total_boq = sum((boq.boq_amount for boq in linked.values()), Decimal('0'))
    total_wir = amounts[WIRResult.APPROVED] + amounts[WIRResult.CONDITIONAL]
    return FinancialSummary(
        total_approved_wirs=counts[WIRResult.APPROVED],
        total_conditional_wirs=counts[WIRResult.CONDITIONAL],
        total_rejected_wirs=counts[WIRResult.REJECTED],
        total_approved_amount=amounts[WIRResult.APPROVED],
        total_conditional_amount=amounts[WIRResult.CONDITIONAL],
        total_boq_amount=total_boq,
        cost_variance_against_boq=total_wir - total_boq,
    )


def _invoiceable(wirs: Iterable[WIR]) -> List[WIR]:
    return [
        wir for wir in wirs
        if wir.result == WIRResult.APPROVED
        and wir.calculated_amount is not None
        and wir.received_date is not None
    ]


def available_invoice_months(wirs: Iterable[WIR]) -> List[str]:
    return sorted({_month_of(wir) for wir in _invoiceable(wirs)})


def monthly_invoice(wirs: Iterable[WIR], leaf_boq_items: Iterable[BOQItem], month: str) -> MonthlyInvoice:
    """
    Invoice figures for `month` (YYYY-MM).

    The BOQ total is taken over leaf items only so that parent rows,
    whose totals already include their children, are not counted twice.
    """
    approved = _invoiceable(wirs)
    current = [wir for wir in approved if _month_of(wir) == month]
    previous = [wir for wir in approved if _month_of(wir) < month]
    return MonthlyInvoice(
        month=month,
        previous_amount=sum((wir.calculated_amount for wir in previous), Decimal('0')),
        current_amount=sum((wir.calculated_amount for wir in current), Decimal('0')),
        total_boq_amount=sum((item.boq_amount for item in leaf_boq_items), Decimal('0')),
        approved_wirs=current,
    )
