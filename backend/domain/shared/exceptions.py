"""
Domain Exceptions.

Errors raised by the BOQ, breakdown and WIR rules. The API exception
handler maps each class to an HTTP status.
"""

from typing import Optional, Any, Dict


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "DOMAIN_ERROR"
        self.details = details or {}


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            message=f"{entity_type} with id '{entity_id}' not found",
            code="ENTITY_NOT_FOUND",
            details={"entity_type": entity_type, "entity_id": str(entity_id)}
        )


class ValidationException(DomainException):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field, "value": str(value) if value is not None else None}
        )


class CircularReferenceException(DomainException):
    """A WIR revision chain that leads back to one of its own WIRs."""

    def __init__(self, item_ids: list, entity_type: str = "WIR"):
        super().__init__(
            message=f"Circular reference detected in {entity_type} chain",
            code="CIRCULAR_REFERENCE",
            details={"entity_type": entity_type, "item_ids": [str(id) for id in item_ids]}
        )


class StatusTransitionException(DomainException):
    """Result submitted for a WIR that is not in the submitted state."""

    def __init__(
        self,
        entity_type: str,
        current_status: str,
        target_status: str,
        allowed_transitions: Optional[list] = None
    ):
        super().__init__(
            message=f"Cannot transition {entity_type} from '{current_status}' to '{target_status}'",
            code="INVALID_STATUS_TRANSITION",
            details={
                "entity_type": entity_type,
                "current_status": current_status,
                "target_status": target_status,
                "allowed_transitions": allowed_transitions or []
            }
        )


class BusinessRuleViolationException(DomainException):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str):
        super().__init__(
            message=message,
            code="BUSINESS_RULE_VIOLATION",
            details={"rule": rule}
        )


class WIRNumberCollisionException(DomainException):
    """Raised when a generated WIR number collides twice in a row."""

    def __init__(self, wir_number: str, attempts: int):
        super().__init__(
            message=f"WIR number '{wir_number}' is already taken after {attempts} attempts",
            code="WIR_NUMBER_COLLISION",
            details={"wir_number": wir_number, "attempts": attempts}
        )
