import pytest
from rest_framework.test import APIClient

from infrastructure.persistence.models import AuditLog, WIR

pytestmark = pytest.mark.django_db

WIRS_URL = '/api/v1/wirs/'


@pytest.fixture
def payload(priced_boq, contractor, engineer):
    return {
        'description': 'HDPE line inspection',
        'value': '1000',
        'contractor': str(contractor.pk),
        'engineer': str(engineer.pk),
        'linked_boq_items': [str(priced_boq['leaf'].pk)],
        'selected_breakdown_items': [
            str(priced_boq['excavation'].pk),
            str(priced_boq['laying'].pk),
        ],
    }


@pytest.fixture
def created_wir(api_client, payload):
    response = api_client.post(WIRS_URL, payload, format='json')
    assert response.status_code == 201, response.data
    return response.data


def test_requires_authentication():
    response = APIClient().get(WIRS_URL)
    assert response.status_code == 401


def test_create_assigns_number_and_submitted_status(created_wir):
    assert created_wir['wir_number'].startswith('WIR-')
    assert created_wir['wir_number'].endswith('-000001')
    assert created_wir['status'] == 'submitted'
    assert created_wir['result'] is None
    assert created_wir['calculated_amount'] is None


def test_create_rejects_composite_breakdown_selection(api_client, payload, priced_boq):
    payload['selected_breakdown_items'] = [str(priced_boq['group'].pk)]

    response = api_client.post(WIRS_URL, payload, format='json')

    assert response.status_code == 400
    assert 'selected_breakdown_items' in response.data


def test_create_rejects_non_leaf_boq_item(api_client, payload, priced_boq):
    payload['linked_boq_items'] = [str(priced_boq['root'].pk)]
    payload['selected_breakdown_items'] = []

    response = api_client.post(WIRS_URL, payload, format='json')

    assert response.status_code == 400
    assert 'linked_boq_items' in response.data


def test_submit_result_and_calculation(api_client, created_wir):
    url = f"{WIRS_URL}{created_wir['id']}/submit_result/"

    response = api_client.post(url, {'result': 'A', 'received_date': '2025-02-03'}, format='json')

    assert response.status_code == 200, response.data
    assert response.data['status'] == 'completed'
    assert response.data['result'] == 'A'
    assert response.data['calculated_amount'] == '300.0000'
    assert response.data['calculation_equation'].endswith('= 300.00 SAR')


def test_conditional_result_needs_conditions(api_client, created_wir):
    url = f"{WIRS_URL}{created_wir['id']}/submit_result/"

    response = api_client.post(url, {'result': 'B'}, format='json')

    assert response.status_code == 400
    assert 'status_conditions' in response.data


def test_second_result_is_a_conflict(api_client, created_wir):
    url = f"{WIRS_URL}{created_wir['id']}/submit_result/"
    api_client.post(url, {'result': 'C'}, format='json')

    response = api_client.post(url, {'result': 'A'}, format='json')

    assert response.status_code == 409
    assert response.data['error'] == 'invalid_status_transition'


def test_revision_flow(api_client, created_wir):
    wir_id = created_wir['id']
    api_client.post(f'{WIRS_URL}{wir_id}/submit_result/', {'result': 'C'}, format='json')

    response = api_client.post(f'{WIRS_URL}{wir_id}/request_revision/')

    assert response.status_code == 201, response.data
    assert response.data['wir_number'] == f"{created_wir['wir_number']}-R1"
    assert str(response.data['parent_wir']) == wir_id
    assert response.data['revision_number'] == 1

    again = api_client.post(f'{WIRS_URL}{wir_id}/request_revision/')
    assert again.status_code == 422
    assert again.data['error'] == 'business_rule_violation'

    chain = api_client.get(f"{WIRS_URL}{response.data['id']}/revision_chain/")
    assert [row['id'] for row in chain.data] == [wir_id, response.data['id']]


def test_revision_of_approved_wir_is_refused(api_client, created_wir):
    wir_id = created_wir['id']
    api_client.post(f'{WIRS_URL}{wir_id}/submit_result/', {'result': 'A'}, format='json')

    response = api_client.post(f'{WIRS_URL}{wir_id}/request_revision/')

    assert response.status_code == 422


def test_reports(api_client, created_wir):
    api_client.post(
        f"{WIRS_URL}{created_wir['id']}/submit_result/",
        {'result': 'A', 'received_date': '2025-02-03'},
        format='json',
    )

    summary = api_client.get(f'{WIRS_URL}financial_summary/')
    assert summary.status_code == 200
    assert summary.data['total_approved_wirs'] == 1
    assert summary.data['total_approved_amount'] == '300.00'
    assert summary.data['total_boq_amount'] == '5000.00'

    months = api_client.get(f'{WIRS_URL}invoice/')
    assert months.data == {'months': ['2025-02']}

    invoice = api_client.get(f'{WIRS_URL}invoice/', {'month': '2025-02'})
    assert invoice.status_code == 200
    assert invoice.data['current_amount'] == '300.00'
    assert invoice.data['previous_amount'] == '0.00'
    assert [row['wir_number'] for row in invoice.data['approved_wirs']] == [created_wir['wir_number']]

    bad = api_client.get(f'{WIRS_URL}invoice/', {'month': 'February'})
    assert bad.status_code == 400


def test_next_number_preview(api_client, created_wir):
    response = api_client.get(f'{WIRS_URL}next_number/')
    assert response.data['wir_number'].endswith('-000002')


def test_editing_a_completed_wir_recalculates(api_client, created_wir):
    wir_id = created_wir['id']
    api_client.post(f'{WIRS_URL}{wir_id}/submit_result/', {'result': 'A'}, format='json')

    response = api_client.patch(f'{WIRS_URL}{wir_id}/', {'value': '2000'}, format='json')

    assert response.status_code == 200, response.data
    assert WIR.objects.get(pk=wir_id).calculated_amount == 600


def test_referenced_contractor_cannot_be_deleted(api_client, created_wir, contractor):
    response = api_client.delete(f'/api/v1/contractors/{contractor.pk}/')

    assert response.status_code == 409
    assert response.data['error'] == 'protected_error'


def test_actions_are_audited(api_client, created_wir):
    api_client.post(f"{WIRS_URL}{created_wir['id']}/submit_result/", {'result': 'C'}, format='json')

    actions = set(AuditLog.objects.filter(object_id=created_wir['id']).values_list('action', flat=True))
    assert actions == {'create', 'submit_result'}

    response = api_client.get('/api/v1/audit-logs/', {'action': 'submit_result'})
    assert response.status_code == 200
    assert response.data['count'] == 1
    assert response.data['results'][0]['username'] == 'inspector'


def test_list_uses_list_serializer(api_client, created_wir):
    response = api_client.get(WIRS_URL)

    assert response.status_code == 200
    assert response.data['count'] == 1
    row = response.data['results'][0]
    assert row['wir_number'] == created_wir['wir_number']
    assert 'selected_breakdown_items' not in row


def test_blank_number_on_create_is_generated(api_client, payload):
    payload['wir_number'] = '  '

    response = api_client.post(WIRS_URL, payload, format='json')

    assert response.status_code == 201, response.data
    assert response.data['wir_number'].endswith('-000001')


def test_number_cannot_be_cleared(api_client, created_wir):
    url = f"{WIRS_URL}{created_wir['id']}/"

    response = api_client.patch(url, {'wir_number': ''}, format='json')

    assert response.status_code == 400
    assert 'wir_number' in response.data
    assert WIR.objects.get(pk=created_wir['id']).wir_number == created_wir['wir_number']
