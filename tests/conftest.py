"""
Shared pytest fixtures for the integration tests.
"""
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

User = get_user_model()


def _create_user(prefix):
    unique_id = uuid.uuid4().hex[:8]
    email = f'{prefix}_{unique_id}@test.com'
    return User.objects.create_user(
        username=email,
        email=email,
        password='testpass123',
        name=f'{prefix.title()} Farmer',
    )


@pytest.fixture
def farmer(db):
    """Farm owner the tests act as."""
    return _create_user('farmer')


@pytest.fixture
def other_farmer(db):
    """A second owner whose records must stay invisible to ``farmer``."""
    return _create_user('neighbour')


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def farmer_client(farmer):
    """API client authenticated as ``farmer``."""
    client = APIClient()
    client.force_authenticate(user=farmer)
    return client


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def make_batch(farmer, today):
    """Factory creating batches through the service for ``farmer``."""
    from batches.services import BatchService

    def _make_batch(owner=None, **overrides):
        params = {
            'name': 'Layers A',
            'breed': 'Isa Brown',
            'initial_size': 100,
            'start_date': today - timedelta(days=10),
        }
        params.update(overrides)
        return BatchService(owner or farmer).create_batch(**params)

    return _make_batch


@pytest.fixture
def make_template(farmer):
    """Factory creating vaccine templates for ``farmer``."""
    from vaccinations.services import VaccineTemplateService

    def _make_template(name='Newcastle', age_in_days=7, owner=None, **overrides):
        params = {'default_cost': Decimal('20.00')}
        params.update(overrides)
        return VaccineTemplateService(owner or farmer).create_template(
            name=name, age_in_days=age_in_days, **params
        )

    return _make_template
