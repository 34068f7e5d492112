import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from infrastructure.persistence.models import Attachment

pytestmark = pytest.mark.django_db


def test_contractor_crud(api_client):
    created = api_client.post('/api/v1/contractors/', {'name': ' Delta Civil ', 'company': 'Delta'}, format='json')
    assert created.status_code == 201, created.data
    assert created.data['name'] == 'Delta Civil'
    assert created.data['wir_count'] == 0

    url = f"/api/v1/contractors/{created.data['id']}/"
    updated = api_client.patch(url, {'phone': '+966 11 000 0000'}, format='json')
    assert updated.data['phone'] == '+966 11 000 0000'

    assert api_client.delete(url).status_code == 204


def test_contractor_name_is_required(api_client):
    response = api_client.post('/api/v1/contractors/', {'name': '   '}, format='json')
    assert response.status_code == 400


def test_engineers_are_ordered_by_name(api_client):
    for name in ('Zaid', 'Amal', 'Maha'):
        api_client.post('/api/v1/engineers/', {'name': name}, format='json')

    response = api_client.get('/api/v1/engineers/')

    assert [row['name'] for row in response.data['results']] == ['Amal', 'Maha', 'Zaid']


def test_engineer_search(api_client, engineer):
    response = api_client.get('/api/v1/engineers/', {'search': 'QA'})
    assert response.data['count'] == 1


def test_attachment_upload(api_client, user):
    upload = SimpleUploadedFile('report.pdf', b'%PDF-1.4 test', content_type='application/pdf')

    response = api_client.post(
        '/api/v1/attachments/',
        {'file': upload, 'description': 'Site photos'},
        format='multipart',
    )

    assert response.status_code == 201, response.data
    attachment = Attachment.objects.get(pk=response.data['id'])
    assert attachment.file_name == 'report.pdf'
    assert attachment.file_size == len(b'%PDF-1.4 test')
    assert attachment.file_type == 'application/pdf'
    assert attachment.uploaded_by == user
    assert attachment.is_active
    assert response.data['url'].startswith('http://testserver/media/attachments/')


def test_wir_links_attachments(api_client, priced_boq):
    attachment = Attachment.objects.create(
        file=SimpleUploadedFile('plan.png', b'png', content_type='image/png'),
    )

    response = api_client.post('/api/v1/wirs/', {
        'description': 'With drawing',
        'linked_boq_items': [str(priced_boq['leaf'].pk)],
        'attachments': [str(attachment.pk)],
    }, format='json')

    assert response.status_code == 201, response.data
    assert [str(pk) for pk in response.data['attachments']] == [str(attachment.pk)]
