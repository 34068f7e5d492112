from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from application.services import spreadsheets
from infrastructure.persistence.models import BOQItem, BreakdownItem

pytestmark = pytest.mark.django_db

BOQ_URL = '/api/v1/boq-items/'
BREAKDOWN_URL = '/api/v1/breakdown-items/'


def test_tree_nests_children(api_client, priced_boq):
    response = api_client.get(f'{BOQ_URL}tree/')

    assert response.status_code == 200
    assert len(response.data) == 1
    root = response.data[0]
    assert root['code'] == '1'
    assert root['is_selectable'] is False
    assert [child['code'] for child in root['children']] == ['1.1']
    assert root['children'][0]['is_selectable'] is True
    assert root['children'][0]['level'] == 1


def test_tree_code_ordering(api_client, make_boq_item):
    root = make_boq_item('1', quantity='0')
    start = timezone.now()
    for offset, code in enumerate(('1.10', '1.9', '1.2'), start=1):
        child = make_boq_item(code, parent=root)
        BOQItem.objects.filter(pk=child.pk).update(created_at=start + timedelta(seconds=offset))

    input_order = api_client.get(f'{BOQ_URL}tree/').data[0]['children']
    code_order = api_client.get(f'{BOQ_URL}tree/', {'ordering': 'code'}).data[0]['children']

    assert [c['code'] for c in input_order] == ['1.10', '1.9', '1.2']
    assert [c['code'] for c in code_order] == ['1.2', '1.9', '1.10']


def test_flat_selectable_and_level(api_client, priced_boq):
    selectable = api_client.get(f'{BOQ_URL}flat/', {'selectable': 'true'})
    level0 = api_client.get(f'{BOQ_URL}flat/', {'level': '0'})
    bad = api_client.get(f'{BOQ_URL}flat/', {'level': 'top'})

    assert [row['code'] for row in selectable.data] == ['1.1']
    assert [row['code'] for row in level0.data] == ['1']
    assert level0.data[0]['has_children'] is True
    assert 'children' not in level0.data[0]
    assert bad.status_code == 400


def test_create_derives_level_and_total(api_client, priced_boq):
    response = api_client.post(BOQ_URL, {
        'code': '1.2',
        'description': 'Manholes',
        'quantity': '4',
        'unit': 'nr',
        'unit_rate': '2500',
        'parent': str(priced_boq['root'].pk),
    }, format='json')

    assert response.status_code == 201, response.data
    assert response.data['level'] == 1
    assert Decimal(response.data['total_amount']) == Decimal('10000')
    assert response.data['parent_code'] == '1'


def test_parent_cannot_be_a_descendant(api_client, priced_boq):
    response = api_client.patch(
        f"{BOQ_URL}{priced_boq['root'].pk}/",
        {'parent': str(priced_boq['leaf'].pk)},
        format='json',
    )

    assert response.status_code == 400
    assert 'parent' in response.data


def test_rate_change_reaches_breakdown_items(api_client, priced_boq, django_capture_on_commit_callbacks):
    leaf = priced_boq['leaf']

    with django_capture_on_commit_callbacks(execute=True):
        response = api_client.patch(f'{BOQ_URL}{leaf.pk}/', {'unit_rate': '75'}, format='json')

    assert response.status_code == 200, response.data
    assert Decimal(response.data['total_amount']) == Decimal('7500')
    assert set(BreakdownItem.objects.filter(boq_item=leaf).values_list('unit_rate', flat=True)) == {Decimal('75')}


def test_sync_rates_action(api_client, priced_boq):
    leaf = priced_boq['leaf']
    BreakdownItem.objects.filter(boq_item=leaf).update(unit_rate=Decimal('1'))

    response = api_client.post(f'{BOQ_URL}{leaf.pk}/sync_rates/')

    assert response.status_code == 200
    assert response.data['message'] == 'updated 3 of 3'


def test_history_action(api_client, priced_boq):
    leaf = priced_boq['leaf']
    api_client.patch(f'{BOQ_URL}{leaf.pk}/', {'description': 'HDPE pipe DN200'}, format='json')

    response = api_client.get(f'{BOQ_URL}{leaf.pk}/history/')

    assert response.status_code == 200
    assert [entry['type'] for entry in response.data][:2] == ['~', '+']


def test_selectable_breakdown_items(api_client, priced_boq):
    response = api_client.get(f'{BREAKDOWN_URL}selectable/', {'boq_item': str(priced_boq['leaf'].pk)})

    assert response.status_code == 200
    assert [row['keyword'] for row in response.data] == ['Excavation', 'Laying']
    assert all(row['is_selectable'] for row in response.data)


def test_selectable_requires_uuid(api_client):
    response = api_client.get(f'{BREAKDOWN_URL}selectable/', {'boq_item': 'nope'})
    assert response.status_code == 400


def test_breakdown_parent_must_share_boq_item(api_client, priced_boq, make_boq_item):
    other = make_boq_item('2', quantity='1')

    response = api_client.post(BREAKDOWN_URL, {
        'boq_item': str(other.pk),
        'parent_breakdown': str(priced_boq['group'].pk),
        'keyword': 'Stray',
        'percentage': '0.1',
        'is_leaf': True,
    }, format='json')

    assert response.status_code == 400
    assert 'parent_breakdown' in response.data


def test_breakdown_item_copies_rate(api_client, priced_boq):
    response = api_client.post(BREAKDOWN_URL, {
        'boq_item': str(priced_boq['leaf'].pk),
        'parent_breakdown': str(priced_boq['group'].pk),
        'keyword': 'Testing',
        'percentage': '0.05',
        'is_leaf': True,
    }, format='json')

    assert response.status_code == 201, response.data
    assert Decimal(response.data['unit_rate']) == Decimal('50')


def test_export_and_import_round_trip(api_client, priced_boq):
    export = api_client.get(f'{BOQ_URL}export/')

    assert export.status_code == 200
    assert export['Content-Type'] == spreadsheets.XLSX_CONTENT_TYPE

    BOQItem.objects.filter(code='1.1').update(description='changed')
    upload = _upload(export.content, 'boq.xlsx')
    response = api_client.post(f'{BOQ_URL}import_excel/', {'file': upload}, format='multipart')

    assert response.status_code == 200, response.data
    assert response.data['created'] == 0
    assert response.data['updated'] == 2
    assert response.data['errors'] == []
    assert BOQItem.objects.get(code='1.1').description == 'HDPE pipe'


def test_import_rejects_other_formats(api_client):
    upload = _upload(b'code,description\n', 'boq.csv')
    response = api_client.post(f'{BOQ_URL}import_excel/', {'file': upload}, format='multipart')
    assert response.status_code == 400


def test_import_reports_unreadable_workbook(api_client):
    upload = _upload(b'not a zip file', 'boq.xlsx')
    response = api_client.post(f'{BOQ_URL}import_excel/', {'file': upload}, format='multipart')
    assert response.status_code == 400


def _upload(content, name):
    return SimpleUploadedFile(name, content, content_type='application/octet-stream')
