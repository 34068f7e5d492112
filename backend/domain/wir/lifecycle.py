"""
WIR Domain - Lifecycle rules.

Result submission and the revision chain of rejected WIRs. Functions
here only validate and derive values; persistence happens in the
application layer.
"""

from __future__ import annotations
from typing import Callable, List, Optional
from uuid import UUID

from domain.shared.exceptions import (
    BusinessRuleViolationException,
    CircularReferenceException,
    StatusTransitionException,
    ValidationException,
)
from domain.shared.value_objects import WIRResult, WIRStatus

from .entities import WIR


DEFAULT_MAX_REVISION_DEPTH = 50


def check_result_submission(
    wir: WIR,
    result: WIRResult,
    status_conditions: Optional[str] = None,
) -> None:
    """A result can be recorded once, on a submitted WIR."""
    if wir.status != WIRStatus.SUBMITTED:
        raise StatusTransitionException(
            "WIR",
            wir.status.value,
            WIRStatus.COMPLETED.value,
            allowed_transitions=[] if wir.status == WIRStatus.COMPLETED else [WIRStatus.COMPLETED.value],
        )
    if result == WIRResult.CONDITIONAL and not (status_conditions or "").strip():
        raise ValidationException(
            "Conditions are required for a conditionally approved WIR",
            field="status_conditions",
        )


def check_can_request_revision(wir: WIR, has_revision: bool) -> None:
    """Only a completed, rejected WIR without an existing revision can be revised."""
    if wir.status != WIRStatus.COMPLETED or wir.result != WIRResult.REJECTED:
        raise BusinessRuleViolationException(
            "REVISION_REQUIRES_REJECTION",
            "Revisions can only be requested for completed WIRs rejected with result C",
        )
    if has_revision:
        raise BusinessRuleViolationException(
            "REVISION_ALREADY_EXISTS",
            f"WIR {wir.wir_number} already has a revision",
        )


def walk_to_origin(
    wir: WIR,
    get_parent: Callable[[UUID], Optional[WIR]],
    max_depth: int = DEFAULT_MAX_REVISION_DEPTH,
) -> List[WIR]:
    """
    The chain from `wir` back to the first WIR, nearest first.

    Raises CircularReferenceException on a repeated id or when the
    chain is longer than `max_depth`. A parent that no longer exists
    ends the chain.
    """
    chain = [wir]
    seen = {wir.id}
    current = wir
    while current.parent_wir_id is not None:
        if len(chain) > max_depth:
            raise CircularReferenceException([item.id for item in chain])
        parent = get_parent(current.parent_wir_id)
        if parent is None:
            break
        if parent.id in seen:
            raise CircularReferenceException([item.id for item in chain] + [parent.id])
        seen.add(parent.id)
        chain.append(parent)
        current = parent
    return chain


def origin_of(
    wir: WIR,
    get_parent: Callable[[UUID], Optional[WIR]],
    max_depth: int = DEFAULT_MAX_REVISION_DEPTH,
) -> WIR:
    return walk_to_origin(wir, get_parent, max_depth)[-1]
