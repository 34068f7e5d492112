import pytest
from django.db import DatabaseError, IntegrityError, InterfaceError, OperationalError
from django.db.models.deletion import ProtectedError

from domain.shared.exceptions import (
    CircularReferenceException,
    EntityNotFoundException,
    WIRNumberCollisionException,
)
from infrastructure.persistence.errors import (
    AUTH,
    CONNECTION,
    CONSTRAINT,
    PERMISSION,
    UNKNOWN,
    classify_store_error,
    is_unique_violation,
)
from presentation.api.exception_handler import custom_exception_handler


@pytest.mark.parametrize('exc, category', [
    (IntegrityError('UNIQUE constraint failed: wirs.wir_number'), CONSTRAINT),
    (InterfaceError('connection already closed'), CONNECTION),
    (OperationalError('could not connect to server'), CONNECTION),
    (OperationalError('something odd'), CONNECTION),
    (DatabaseError('password authentication failed for user "wir"'), AUTH),
    (DatabaseError('permission denied for table wirs'), PERMISSION),
    (DatabaseError('weird failure'), UNKNOWN),
])
def test_classify_store_error(exc, category):
    classified = classify_store_error(exc)
    assert classified.category == category
    assert classified.detail == str(exc)


def test_is_unique_violation():
    assert is_unique_violation(IntegrityError('UNIQUE constraint failed: wirs.wir_number'), 'wir_number')
    assert not is_unique_violation(IntegrityError('NOT NULL constraint failed: wirs.value'), 'wir_number')
    assert not is_unique_violation(DatabaseError('unique wir_number'), 'wir_number')


def test_domain_exceptions_map_to_status_codes():
    not_found = custom_exception_handler(EntityNotFoundException('WIR', 'x'), {})
    collision = custom_exception_handler(WIRNumberCollisionException('WIR-1', 2), {})
    cycle = custom_exception_handler(CircularReferenceException(['a', 'b']), {})

    assert not_found.status_code == 404
    assert not_found.data['error'] == 'entity_not_found'
    assert collision.status_code == 409
    assert collision.data['details'] == {'wir_number': 'WIR-1', 'attempts': 2}
    assert cycle.status_code == 422


def test_store_errors_map_to_status_codes():
    protected = custom_exception_handler(ProtectedError('referenced', []), {})
    integrity = custom_exception_handler(IntegrityError('duplicate key'), {})
    offline = custom_exception_handler(OperationalError('could not connect'), {})
    unknown = custom_exception_handler(DatabaseError('weird failure'), {})

    assert protected.status_code == 409
    assert integrity.status_code == 409
    assert integrity.data['category'] == CONSTRAINT
    assert offline.status_code == 503
    assert unknown.status_code == 500


def test_other_exceptions_are_left_to_drf():
    assert custom_exception_handler(ValueError('nope'), {}) is None
