"""
Accounts and API Error Integration Tests

Tests the outer surface every endpoint shares:
- Registration, JWT login and profile
- Authentication required on farm records
- Uniform {'error', 'code'} error payloads for 400 / 401 / 404 / 409 / 503

SCENARIO:
=========
A new farmer registers, logs in with email and password and reads their
profile. Anonymous requests and lookups of other farmers' records fail
with consistent error bodies.
"""

import uuid

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import OperationalError

pytestmark = pytest.mark.django_db

STRONG_PASSWORD = 'Brooder-Lamp-2025!'


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def registered(api_client):
    response = api_client.post('/api/auth/register/', {
        'email': 'Kofi.Mensah@Example.com',
        'name': 'Kofi Mensah',
        'password': STRONG_PASSWORD,
    }, format='json')
    assert response.status_code == 201
    return response


# =============================================================================
# ACCOUNTS
# =============================================================================

class TestRegistration:

    def test_register_returns_tokens(self, registered):
        assert registered.data['user']['email'] == 'kofi.mensah@example.com'
        assert registered.data['user']['receive_email_reminders'] is True
        assert registered.data['tokens']['access']
        assert registered.data['tokens']['refresh']

    def test_duplicate_email_rejected(self, api_client, registered):
        response = api_client.post('/api/auth/register/', {
            'email': 'kofi.mensah@example.com',
            'name': 'Someone Else',
            'password': STRONG_PASSWORD,
        }, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'validation_error'
        assert 'email' in response.data['details']

    def test_login_and_use_token(self, api_client, registered):
        response = api_client.post('/api/auth/login/', {
            'email': 'kofi.mensah@example.com',
            'password': STRONG_PASSWORD,
        }, format='json')
        assert response.status_code == 200
        assert response.data['user']['name'] == 'Kofi Mensah'

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = api_client.get('/api/batches/')
        assert response.status_code == 200
        assert response.data['count'] == 0

    def test_wrong_password(self, api_client, registered):
        response = api_client.post('/api/auth/login/', {
            'email': 'kofi.mensah@example.com',
            'password': 'not-it',
        }, format='json')
        assert response.status_code == 401
        assert 'error' in response.data

    def test_weak_password_rejected(self, api_client):
        response = api_client.post('/api/auth/register/', {
            'email': 'ama@example.com', 'name': 'Ama', 'password': 'password',
        }, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'validation_error'

    def test_profile_toggle_reminders(self, farmer_client, farmer):
        response = farmer_client.patch('/api/auth/me/', {'receive_email_reminders': False}, format='json')

        assert response.status_code == 200
        assert response.data['email'] == farmer.email
        farmer.refresh_from_db()
        assert farmer.receive_email_reminders is False

    def test_logout_revokes_refresh_token(self, api_client, registered):
        tokens = registered.data['tokens']
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = api_client.post('/api/auth/logout/', {'refresh': tokens['refresh']}, format='json')
        assert response.status_code == 200

        response = api_client.post('/api/auth/token/refresh/', {'refresh': tokens['refresh']}, format='json')
        assert response.status_code == 401


# =============================================================================
# ERROR PAYLOADS
# =============================================================================

class TestErrorPayloads:

    @pytest.mark.parametrize('path', [
        '/api/batches/',
        '/api/vaccinations/',
        '/api/transactions/',
        '/api/notifications/',
    ])
    def test_anonymous_is_401(self, api_client, path):
        response = api_client.get(path)

        assert response.status_code == 401
        assert response.data['code'] == 'not_authenticated'
        assert set(response.data) == {'error', 'code'}

    def test_missing_record_is_404(self, farmer_client):
        response = farmer_client.get(f'/api/mortality/{uuid.uuid4()}/')

        assert response.status_code == 404
        assert response.data == {'error': 'Mortality record not found', 'code': 'not_found'}

    def test_invalid_payload_is_400_with_details(self, farmer_client):
        response = farmer_client.post('/api/batches/', {'name': 'No size'}, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'validation_error'
        assert {'breed', 'initial_size', 'start_date'} <= set(response.data['details'])

    def test_duplicate_batch_code_is_409(self, farmer_client, make_batch, today):
        make_batch(batch_code='LAYERS-1')

        response = farmer_client.post('/api/batches/', {
            'name': 'Copy', 'breed': 'Sasso', 'initial_size': 10,
            'start_date': str(today), 'batch_code': 'layers-1',
        }, format='json')

        assert response.status_code == 409
        assert response.data == {'error': 'Batch code LAYERS-1 already exists', 'code': 'conflict'}


class TestExceptionHandler:

    def test_database_outage_is_503(self):
        from core.exceptions import api_exception_handler

        response = api_exception_handler(OperationalError('connection refused'), {'view': None})

        assert response.status_code == 503
        assert response.data['code'] == 'store_unavailable'

    def test_model_validation_is_400(self):
        from core.exceptions import api_exception_handler

        error = DjangoValidationError({'amount': ['Ensure this value is greater than or equal to 0.00.']})
        response = api_exception_handler(error, {'view': None})

        assert response.status_code == 400
        assert response.data['error'] == 'Ensure this value is greater than or equal to 0.00.'
        assert response.data['details'] == {'amount': ['Ensure this value is greater than or equal to 0.00.']}

    def test_unhandled_errors_pass_through(self):
        from core.exceptions import api_exception_handler

        assert api_exception_handler(KeyError('boom'), {'view': None}) is None
