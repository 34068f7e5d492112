import pytest

from application import realtime
from infrastructure.persistence.models import Contractor

pytestmark = pytest.mark.django_db


@pytest.fixture
def received():
    changes = []
    handler = changes.append
    realtime.subscribe('contractors', None, handler)
    yield changes
    realtime.unsubscribe('contractors', None, handler)


def test_rows_are_published_after_commit(received, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        contractor = Contractor.objects.create(name='Delta')

    assert received == []
    for callback in callbacks:
        callback()

    assert [(c.event.value, c.row['name']) for c in received] == [('insert', 'Delta')]
    assert received[0].row['id'] == str(contractor.pk)


def test_update_and_delete_are_published(received, django_capture_on_commit_callbacks):
    contractor = Contractor.objects.create(name='Delta')

    with django_capture_on_commit_callbacks(execute=True):
        contractor.phone = '123'
        contractor.save()
        contractor.delete()

    assert [c.event.value for c in received] == ['update', 'delete']
    assert received[0].row['phone'] == '123'
