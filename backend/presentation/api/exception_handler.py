import logging

from django.db import DatabaseError, IntegrityError
from django.db.models.deletion import ProtectedError, RestrictedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from domain.shared.exceptions import (
    BusinessRuleViolationException,
    CircularReferenceException,
    DomainException,
    EntityNotFoundException,
    StatusTransitionException,
    ValidationException,
    WIRNumberCollisionException,
)
from infrastructure.persistence.errors import CONNECTION, classify_store_error

logger = logging.getLogger(__name__)

DOMAIN_STATUS = (
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (WIRNumberCollisionException, status.HTTP_409_CONFLICT),
    (StatusTransitionException, status.HTTP_409_CONFLICT),
    (BusinessRuleViolationException, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (CircularReferenceException, status.HTTP_422_UNPROCESSABLE_ENTITY),
)


def _domain_status(exc: DomainException) -> int:
    for exc_type, code in DOMAIN_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc, context):
    """
    DRF exception handler.

    Domain exceptions become {detail, error, details} responses, database
    reference/constraint failures become 409, and other store errors are
    classified into a tailored message.
    """
    if isinstance(exc, DomainException):
        return Response(
            {
                'detail': exc.message,
                'error': exc.code.lower(),
                'details': exc.details,
            },
            status=_domain_status(exc),
        )

    if isinstance(exc, (ProtectedError, RestrictedError)):
        objects = exc.protected_objects if isinstance(exc, ProtectedError) else exc.restricted_objects
        protected = [str(o) for o in list(objects)[:5]]

        return Response(
            {
                'detail': 'Cannot delete this record: it is referenced by other records.',
                'error': 'protected_error',
                'protected_objects_sample': protected,
            },
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, IntegrityError):
        classified = classify_store_error(exc)
        return Response(
            {
                'detail': classified.message,
                'error': 'integrity_error',
                'category': classified.category,
            },
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, DatabaseError):
        classified = classify_store_error(exc)
        logger.error("Store error (%s): %s", classified.category, classified.detail)
        return Response(
            {
                'detail': classified.message,
                'error': 'store_error',
                'category': classified.category,
            },
            status=(
                status.HTTP_503_SERVICE_UNAVAILABLE
                if classified.category == CONNECTION
                else status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
        )

    return exception_handler(exc, context)
