"""
WIR Domain - Amount Calculator.

calculated amount = sum(WIR value x percentage) over the selected
breakdown sub-items. The breakdown item's own `value` is illustrative
only and never enters the calculation.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, NamedTuple, Optional

from domain.boq.entities import BOQItem, BreakdownItem
from domain.shared.value_objects import Money

from .entities import WIR


EMPTY_SELECTION_EQUATION = "No breakdown items selected"


class CalculationTerm(NamedTuple):
    breakdown_item: BreakdownItem
    amount: Decimal


@dataclass(frozen=True)
class CalculationResult:
    amount: Optional[Decimal]
    equation: str
    terms: tuple = ()

    @property
    def is_calculated(self) -> bool:
        return self.amount is not None


def resolve_selected(
    wir: WIR,
    breakdown_items: Iterable[BreakdownItem],
    boq_items: Optional[Iterable[BOQItem]] = None,
) -> List[BreakdownItem]:
    """
    Selected breakdown items in selection order.

    Ids that no longer resolve are dropped, as are breakdown items whose
    BOQ item is gone when a BOQ collection is given.
    """
    by_id: Dict[str, BreakdownItem] = {item.key: item for item in breakdown_items}
    boq_ids = {boq.key for boq in boq_items} if boq_items is not None else None

    resolved = []
    seen = set()
    for selected_id in wir.selected_breakdown_items:
        key = str(selected_id)
        item = by_id.get(key)
        if item is None or key in seen:
            continue
        if boq_ids is not None and str(item.boq_item_id) not in boq_ids:
            continue
        seen.add(key)
        resolved.append(item)
    return resolved


def calculate_wir_amount(
    wir: WIR,
    breakdown_items: Iterable[BreakdownItem],
    boq_items: Optional[Iterable[BOQItem]] = None,
    currency: str = "SAR",
) -> CalculationResult:
    """
    Calculate the amount and a readable equation for a WIR.

    Nothing is calculated unless the result is A or B.
    """
    if not wir.is_payable:
        return CalculationResult(amount=None, equation="")

    selected = resolve_selected(wir, breakdown_items, boq_items)
    if not selected:
        return CalculationResult(amount=Decimal('0'), equation=EMPTY_SELECTION_EQUATION)

    base = Money(wir.value or Decimal('0'), currency)
    terms = [
        CalculationTerm(item, base.amount * item.percentage)
        for item in selected
    ]
    total = sum((term.amount for term in terms), Decimal('0'))

    parts = [
        f"{term.breakdown_item.label}: {base.display} × {term.breakdown_item.share}"
        for term in terms
    ]
    equation = f"{' + '.join(parts)} = {Money(total, currency)}"
    return CalculationResult(amount=total, equation=equation, terms=tuple(terms))
