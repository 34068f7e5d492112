from decimal import Decimal
from uuid import uuid4

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError

from application import realtime
from application.services import rate_sync
from application.tasks.boq_tasks import propagate_boq_unit_rate, reconcile_breakdown_rates
from infrastructure.persistence.models import BOQItem, BreakdownItem

pytestmark = pytest.mark.django_db


def rates(boq_item):
    return sorted(
        BreakdownItem.objects.filter(boq_item=boq_item).values_list('unit_rate', flat=True)
    )


def test_breakdown_item_copies_rate_on_create(priced_boq):
    assert rates(priced_boq['leaf']) == [Decimal('50')] * 3


def test_propagate_unit_rate_updates_every_copy(priced_boq):
    leaf = priced_boq['leaf']
    BreakdownItem.objects.filter(boq_item=leaf).update(unit_rate=Decimal('1'))
    leaf.unit_rate = Decimal('75')
    leaf.save()

    result = rate_sync.propagate_unit_rate(leaf.pk)

    assert result.total == 3
    assert result.updated == 3
    assert result.is_complete
    assert result.message == 'updated 3 of 3'
    assert rates(leaf) == [Decimal('75')] * 3


def test_failure_on_one_item_does_not_stop_the_rest(priced_boq, monkeypatch):
    leaf = priced_boq['leaf']
    failing_id = priced_boq['laying'].pk
    original = rate_sync._apply_rate

    def flaky(item, unit_rate):
        if item.pk == failing_id:
            raise DatabaseError('simulated write failure')
        original(item, unit_rate)

    monkeypatch.setattr(rate_sync, '_apply_rate', flaky)
    BOQItem.objects.filter(pk=leaf.pk).update(unit_rate=Decimal('75'))

    result = rate_sync.propagate_unit_rate(leaf.pk)

    assert result.message == 'updated 2 of 3'
    assert result.failed_ids == (str(failing_id),)
    assert not result.is_complete
    priced_boq['laying'].refresh_from_db()
    priced_boq['excavation'].refresh_from_db()
    assert priced_boq['laying'].unit_rate == Decimal('50')
    assert priced_boq['excavation'].unit_rate == Decimal('75')


def test_saving_a_boq_item_propagates_after_commit(priced_boq, django_capture_on_commit_callbacks):
    leaf = priced_boq['leaf']

    with django_capture_on_commit_callbacks(execute=True):
        leaf.unit_rate = Decimal('75')
        leaf.save()

    assert rates(leaf) == [Decimal('75')] * 3


def test_publish_calls_in_process_subscribers():
    seen = []

    def handler(change):
        seen.append((change.event.value, change.table, change.row['id']))

    realtime.subscribe('engineers', None, handler)
    try:
        realtime.publish_row_change('insert', 'engineers', {'id': 'abc'})
    finally:
        realtime.unsubscribe('engineers', None, handler)

    assert seen == [('insert', 'engineers', 'abc')]


def test_failing_subscriber_does_not_block_others():
    seen = []

    def broken(change):
        raise RuntimeError('boom')

    realtime.subscribe('contractors', None, broken)
    realtime.subscribe('contractors', None, seen.append)
    try:
        realtime.publish_row_change('update', 'contractors', {'id': '1'})
    finally:
        realtime.unsubscribe('contractors', None, broken)
        realtime.unsubscribe('contractors', None, seen.append)

    assert len(seen) == 1


def test_reconcile_only_touches_stale_items(priced_boq, make_boq_item, make_breakdown_item):
    fresh = make_boq_item('2', quantity='1', unit_rate='10')
    make_breakdown_item(fresh, 'Fresh', '0.5')
    BreakdownItem.objects.filter(boq_item=priced_boq['leaf']).update(unit_rate=Decimal('0'))

    assert rate_sync.stale_boq_item_ids() == [str(priced_boq['leaf'].pk)]

    results = rate_sync.reconcile_all_unit_rates()

    assert [r.boq_item_id for r in results] == [str(priced_boq['leaf'].pk)]
    assert rate_sync.stale_boq_item_ids() == []


def test_sync_breakdown_rates_command(priced_boq):
    BreakdownItem.objects.filter(boq_item=priced_boq['leaf']).update(unit_rate=Decimal('0'))

    call_command('sync_breakdown_rates')

    assert rates(priced_boq['leaf']) == [Decimal('50')] * 3


def test_sync_breakdown_rates_command_reports_failures(priced_boq, monkeypatch):
    def always_fail(item, unit_rate):
        raise DatabaseError('read-only')

    monkeypatch.setattr(rate_sync, '_apply_rate', always_fail)

    with pytest.raises(CommandError):
        call_command('sync_breakdown_rates', boq_item=str(priced_boq['leaf'].pk))


def test_propagate_task_for_missing_item():
    result = propagate_boq_unit_rate.delay(str(uuid4())).get()

    assert result['error'] == 'BOQ item not found'


def test_reconcile_task_summarises(priced_boq):
    BreakdownItem.objects.filter(boq_item=priced_boq['leaf']).update(unit_rate=Decimal('0'))

    summary = reconcile_breakdown_rates.delay().get()

    assert summary['boq_items'] == 1
    assert summary['updated'] == 3
    assert summary['failed'] == 0
