"""
Shared pytest fixtures.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from infrastructure.persistence.models import (
    BOQItem,
    BreakdownItem,
    Contractor,
    Engineer,
)


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        username='inspector',
        email='inspector@example.com',
        password='secret-pass',
    )


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def contractor(db):
    return Contractor.objects.create(name='Gulf Pipelines', company='GP Co.')


@pytest.fixture
def engineer(db):
    return Engineer.objects.create(name='Sara Ali', department='QA/QC')


@pytest.fixture
def make_boq_item(db):
    def _make(code, parent=None, quantity='10', unit_rate='100', **extra):
        return BOQItem.objects.create(
            code=code,
            description=extra.pop('description', f'Item {code}'),
            quantity=Decimal(quantity),
            unit_rate=Decimal(unit_rate),
            unit=extra.pop('unit', 'm'),
            parent=parent,
            **extra,
        )
    return _make


@pytest.fixture
def make_breakdown_item(db):
    def _make(boq_item, keyword, percentage='0', parent=None, is_leaf=True, **extra):
        return BreakdownItem.objects.create(
            boq_item=boq_item,
            keyword=keyword,
            percentage=Decimal(percentage),
            parent_breakdown=parent,
            is_leaf=is_leaf,
            **extra,
        )
    return _make


@pytest.fixture
def priced_boq(make_boq_item, make_breakdown_item):
    """
    1 Pipework
    └── 1.1 HDPE pipe (leaf, 100 m at 50)
        └── Installation (composite)
            ├── Excavation 20%
            └── Laying 10%
    """
    root = make_boq_item('1', quantity='0', unit_rate='0', description='Pipework')
    leaf = make_boq_item('1.1', parent=root, quantity='100', unit_rate='50', description='HDPE pipe')
    group = make_breakdown_item(leaf, 'Installation', is_leaf=False)
    excavation = make_breakdown_item(leaf, 'Excavation', '0.20', parent=group)
    laying = make_breakdown_item(leaf, 'Laying', '0.10', parent=group)
    return {
        'root': root,
        'leaf': leaf,
        'group': group,
        'excavation': excavation,
        'laying': laying,
    }
