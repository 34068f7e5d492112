"""
Rate Propagation Sync.

BreakdownItem.unit_rate is a copy of its BOQ item's unit rate. When a
BOQ item changes, every referencing breakdown item is rewritten with the
current rate. Each write is independent: a failure is counted and the
remaining items are still updated, nothing is rolled back.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Tuple

from django.db import DatabaseError, transaction
from django.db.models import F

from domain.shared.events import ChangeKind, RowChanged
from domain.shared.exceptions import EntityNotFoundException

from application import realtime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateSyncResult:
    boq_item_id: str
    unit_rate: Decimal
    total: int
    updated: int
    failed_ids: Tuple[str, ...] = ()

    @property
    def failed(self) -> int:
        return len(self.failed_ids)

    @property
    def is_complete(self) -> bool:
        return self.updated == self.total

    @property
    def message(self) -> str:
        return f"updated {self.updated} of {self.total}"

    def as_dict(self) -> dict:
        return {
            'boq_item_id': self.boq_item_id,
            'unit_rate': str(self.unit_rate),
            'total': self.total,
            'updated': self.updated,
            'failed_ids': list(self.failed_ids),
            'message': self.message,
        }


def _apply_rate(item, unit_rate):
    item.unit_rate = unit_rate
    item.save(update_fields=['unit_rate', 'updated_at'])


def propagate_unit_rate(boq_item_id) -> RateSyncResult:
    """Copy the BOQ item's unit rate onto every breakdown item that references it."""
    from infrastructure.persistence.models import BOQItem, BreakdownItem

    try:
        boq_item = BOQItem.objects.get(pk=boq_item_id)
    except BOQItem.DoesNotExist:
        raise EntityNotFoundException('BOQItem', boq_item_id)

    rate = boq_item.unit_rate
    items = list(BreakdownItem.objects.filter(boq_item_id=boq_item.id))

    updated = 0
    failed: List[str] = []
    for item in items:
        try:
            with transaction.atomic():
                _apply_rate(item, rate)
        except DatabaseError as exc:
            logger.warning(
                "Rate sync failed for breakdown item %s (BOQ %s): %s",
                item.id, boq_item.code, exc,
            )
            failed.append(str(item.id))
        else:
            updated += 1

    result = RateSyncResult(
        boq_item_id=str(boq_item.id),
        unit_rate=rate,
        total=len(items),
        updated=updated,
        failed_ids=tuple(failed),
    )
    log = logger.info if result.is_complete else logger.warning
    log("Rate sync for BOQ %s: %s", boq_item.code, result.message)
    return result


def stale_boq_item_ids() -> List[str]:
    """BOQ items that have at least one breakdown item with an outdated rate."""
    from infrastructure.persistence.models import BreakdownItem

    ids = (
        BreakdownItem.objects
        .exclude(unit_rate=F('boq_item__unit_rate'))
        .order_by()
        .values_list('boq_item_id', flat=True)
        .distinct()
    )
    return [str(pk) for pk in ids]


def reconcile_all_unit_rates() -> List[RateSyncResult]:
    """Idempotent repair: re-sync every BOQ item with stale breakdown copies."""
    results = [propagate_unit_rate(boq_id) for boq_id in stale_boq_item_ids()]
    logger.info("Rate reconciliation touched %d BOQ items", len(results))
    return results


def has_stale_copies(boq_item_id, unit_rate) -> bool:
    from infrastructure.persistence.models import BreakdownItem

    return (
        BreakdownItem.objects
        .filter(boq_item_id=boq_item_id)
        .exclude(unit_rate=unit_rate)
        .exists()
    )


def on_boq_item_updated(change: RowChanged) -> None:
    """Feed subscriber: enqueue propagation when a BOQ item's copies went stale."""
    from application.tasks.boq_tasks import propagate_boq_unit_rate

    boq_item_id = change.row.get('id')
    unit_rate = change.row.get('unit_rate')
    if boq_item_id is None or unit_rate is None:
        return
    if not has_stale_copies(boq_item_id, Decimal(str(unit_rate))):
        return
    transaction.on_commit(lambda: propagate_boq_unit_rate.delay(str(boq_item_id)))


def connect() -> None:
    realtime.subscribe('boq_items', ChangeKind.UPDATE, on_boq_item_updated)
