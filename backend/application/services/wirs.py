"""
WIR Services.

Creation with collision-safe numbering, result submission with amount
calculation, and the revision chain of rejected WIRs.
"""

import logging
import uuid
from decimal import Decimal
from typing import Iterable, List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from domain.boq.breakdown import invalid_selection
from domain.shared.exceptions import ValidationException, WIRNumberCollisionException
from domain.shared.value_objects import WIRResult, WIRStatus
from domain.wir.calculator import CalculationResult, calculate_wir_amount
from domain.wir.lifecycle import (
    check_can_request_revision,
    check_result_submission,
    walk_to_origin,
)
from domain.wir.numbering import WIR_PREFIX, next_wir_number, revision_wir_number
from infrastructure.persistence.errors import is_unique_violation

from application.context import ActorContext
from application.services.audit import record_audit

logger = logging.getLogger(__name__)

AMOUNT_PLACES = Decimal('0.0001')

# Fields a revision copies from the WIR it supersedes.
REVISION_COPY_FIELDS = (
    'description',
    'description_ar',
    'start_on_site_date',
    'contractor_id',
    'engineer_id',
    'region',
    'zone',
    'road',
    'line',
    'manhole_from',
    'manhole_to',
    'length_of_line',
    'diameter_of_line',
    'line_no',
    'value',
    'linked_boq_items',
    'selected_breakdown_items',
)


def _uuid_list(values: Iterable) -> List[uuid.UUID]:
    result = []
    for value in values or []:
        try:
            result.append(value if isinstance(value, uuid.UUID) else uuid.UUID(str(value)))
        except ValueError:
            continue
    return result


# =============================================================================
# NUMBERING
# =============================================================================

def existing_wir_numbers() -> List[str]:
    from infrastructure.persistence.models import WIR

    return list(
        WIR.objects.filter(wir_number__startswith=WIR_PREFIX)
        .values_list('wir_number', flat=True)
    )


def generate_wir_number(today=None) -> str:
    """Next WIR-DD-MM-YYYY-NNNNNN; the sequence is global, not per day."""
    return next_wir_number(existing_wir_numbers(), today or timezone.localdate())


# =============================================================================
# SELECTION
# =============================================================================

def check_selection(linked_boq_items, selected_breakdown_items) -> None:
    """Reject selected breakdown items that are not leaf sub-items of the linked BOQ items."""
    from infrastructure.persistence.models import BreakdownItem

    selected = _uuid_list(selected_breakdown_items)
    if not selected:
        return
    items = [item.to_entity() for item in BreakdownItem.objects.filter(id__in=selected)]
    invalid = invalid_selection(selected, items, _uuid_list(linked_boq_items))
    if invalid:
        raise ValidationException(
            "Only leaf breakdown sub-items of the linked BOQ items can be selected",
            field='selected_breakdown_items',
            value=', '.join(invalid),
        )


def calculate_for(wir) -> CalculationResult:
    """Run the amount calculator for a WIR row against the current store."""
    from infrastructure.persistence.models import BOQItem, BreakdownItem

    entity = wir.to_entity()
    breakdown_items = [
        item.to_entity()
        for item in BreakdownItem.objects.filter(id__in=_uuid_list(entity.selected_breakdown_items))
    ]
    boq_items = [
        item.to_entity()
        for item in BOQItem.objects.filter(id__in=[item.boq_item_id for item in breakdown_items])
    ]
    return calculate_wir_amount(
        entity,
        breakdown_items,
        boq_items,
        currency=getattr(settings, 'WIR_CURRENCY', 'SAR'),
    )


def apply_calculation(wir, calculation: CalculationResult) -> None:
    if calculation.amount is None:
        wir.calculated_amount = None
        wir.calculation_equation = ''
    else:
        wir.calculated_amount = calculation.amount.quantize(AMOUNT_PLACES)
        wir.calculation_equation = calculation.equation


def refresh_calculation(wir):
    """Recompute a WIR's amount after its value or selection changed."""
    apply_calculation(wir, calculate_for(wir))
    wir.save(update_fields=['calculated_amount', 'calculation_equation', 'updated_at'])
    return wir


# =============================================================================
# CREATE
# =============================================================================

def create_wir(data: dict, actor: Optional[ActorContext] = None):
    """
    Insert a new submitted WIR.

    A generated number that collides with a concurrent insert is
    regenerated once; a second collision raises
    WIRNumberCollisionException. A client-supplied number is tried once.
    """
    from infrastructure.persistence.models import WIR

    actor = actor or ActorContext.system()
    fields = dict(data)
    attachments = fields.pop('attachments', None)
    supplied = fields.pop('wir_number', None) or None
    fields.pop('status', None)
    fields.pop('result', None)
    fields.setdefault('submittal_date', timezone.localdate())

    check_selection(fields.get('linked_boq_items'), fields.get('selected_breakdown_items'))

    attempts = 1 if supplied else 2
    number = supplied
    for attempt in range(1, attempts + 1):
        number = supplied or generate_wir_number()
        try:
            with transaction.atomic():
                wir = WIR.objects.create(
                    wir_number=number,
                    status=WIRStatus.SUBMITTED.value,
                    result=None,
                    created_by=actor.user,
                    updated_by=actor.user,
                    **fields,
                )
                if attachments:
                    wir.attachments.set(attachments)
        except IntegrityError as exc:
            if not is_unique_violation(exc, 'wir_number'):
                raise
            logger.warning("WIR number %s collided (attempt %d of %d)", number, attempt, attempts)
            continue

        record_audit(actor, 'create', wir, changes={'wir_number': wir.wir_number})
        logger.info("Created WIR %s", wir.wir_number)
        return wir

    raise WIRNumberCollisionException(number, attempts)


# =============================================================================
# RESULT
# =============================================================================

def submit_result(
    wir,
    result,
    received_date=None,
    status_conditions: str = '',
    actor: Optional[ActorContext] = None,
):
    """
    Complete a submitted WIR with result A, B or C.

    A and B get a calculated amount and equation; C leaves both empty.
    """
    from infrastructure.persistence.models import WIR

    actor = actor or ActorContext.system()
    result = WIRResult(result)

    with transaction.atomic():
        wir = WIR.objects.select_for_update().get(pk=wir.pk)
        check_result_submission(wir.to_entity(), result, status_conditions)

        wir.status = WIRStatus.COMPLETED.value
        wir.result = result.value
        wir.received_date = received_date or timezone.localdate()
        wir.status_conditions = (status_conditions or '').strip()
        apply_calculation(wir, calculate_for(wir))
        wir.updated_by = actor.user
        wir.save()

    record_audit(
        actor,
        'submit_result',
        wir,
        changes={
            'status': {'old': WIRStatus.SUBMITTED.value, 'new': wir.status},
            'result': {'old': None, 'new': wir.result},
            'calculated_amount': {'old': None, 'new': wir.calculated_amount},
        },
    )
    logger.info("WIR %s completed with result %s (%s)", wir.wir_number, wir.result, wir.calculated_amount)
    return wir


# =============================================================================
# REVISIONS
# =============================================================================

def _max_revision_depth() -> int:
    return getattr(settings, 'WIR_MAX_REVISION_DEPTH', 50)


def _load_parent_entity(wir_id):
    from infrastructure.persistence.models import WIR

    parent = WIR.objects.filter(pk=wir_id).first()
    return parent.to_entity() if parent is not None else None


def request_revision(wir, actor: Optional[ActorContext] = None):
    """Create the revision that supersedes a rejected WIR."""
    from infrastructure.persistence.models import WIR

    actor = actor or ActorContext.system()

    with transaction.atomic():
        source = WIR.objects.select_for_update().get(pk=wir.pk)
        check_can_request_revision(source.to_entity(), source.revisions.exists())

        chain = walk_to_origin(source.to_entity(), _load_parent_entity, _max_revision_depth())
        origin = chain[-1]
        revision_number = source.revision_number + 1

        revision = WIR(
            wir_number=revision_wir_number(origin.wir_number, revision_number),
            status=WIRStatus.SUBMITTED.value,
            submittal_date=timezone.localdate(),
            parent_wir=source,
            original_wir_id=origin.id,
            revision_number=revision_number,
            created_by=actor.user,
            updated_by=actor.user,
        )
        for name in REVISION_COPY_FIELDS:
            setattr(revision, name, getattr(source, name))
        revision.save()
        revision.attachments.set(source.attachments.all())

    record_audit(
        actor,
        'request_revision',
        revision,
        changes={'parent_wir': str(source.id), 'revision_number': revision_number},
    )
    logger.info("WIR %s revised as %s", source.wir_number, revision.wir_number)
    return revision


def revision_chain(wir) -> list:
    """WIR rows from the origin of the chain down to `wir`."""
    from infrastructure.persistence.models import WIR

    chain = walk_to_origin(wir.to_entity(), _load_parent_entity, _max_revision_depth())
    rows = WIR.objects.in_bulk([entity.id for entity in chain])
    return [rows[entity.id] for entity in reversed(chain) if entity.id in rows]
