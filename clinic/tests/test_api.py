"""
Endpoint tests for the Tele Heal API.

These tests exercise request validation, bearer authentication against
the backend, role checks, envelope-to-status mapping and response
caching.  The backend client factory is swapped for the in-memory fake,
so no database or network is involved and Django REST Framework's
APIClient is used within the APISimpleTestCase base class.
"""
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from rest_framework import status
from rest_framework.test import APIClient, APISimpleTestCase

from clinic.tests import fakes
from clinic.tests.conftest import PATIENT_TOKEN, PROVIDER_TOKEN
from clinic.tests.fakes import FakeResponse, RemoteAuthError

PATIENT_ID = 'patient-1'
PROVIDER_ID = 'provider-1'
PROVIDER_UUID = '6f1c2a9e-4b7d-4e2f-9a51-3c8d0e7b2f14'


async def broken_factory(access_token=None):
    raise ConnectionError('backend unreachable')


@override_settings(BACKEND_CLIENT_FACTORY='clinic.tests.fakes.connect')
class BackendAPITestCase(APISimpleTestCase):
    def setUp(self) -> None:
        """Install a fresh fake backend and start from an empty cache."""
        self.backend = fakes.FakeBackend()
        fakes.install(self.backend)
        cache.clear()

    def tearDown(self) -> None:
        fakes.install(None)
        cache.clear()

    def authenticate(self, token: str, user_id: str, user_type: str = 'patient', **account) -> APIClient:
        """Return an APIClient carrying ``token`` for a user the backend knows."""
        self.backend.add_user(token, user_id, user_type, **account)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        return client

    def patient(self) -> APIClient:
        return self.authenticate(PATIENT_TOKEN, PATIENT_ID, 'patient')

    def provider(self) -> APIClient:
        return self.authenticate(PROVIDER_TOKEN, PROVIDER_ID, 'provider')


class AuthEndpointTests(BackendAPITestCase):

    def test_signup_creates_account(self):
        """Sign-up returns the new identity and session and writes the account row."""
        response = APIClient().post('/api/auth/signup', {
            'email': 'ama@example.com', 'phone': '0241234567', 'password': 'Str0ng!pass', 'fullName': 'Ama Mensah',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIs(response.data['success'], True)
        self.assertEqual(response.data['user']['id'], 'user-ama@example.com')
        self.assertEqual(response.data['session']['access_token'], 'token-ama@example.com')
        self.assertEqual(self.backend.calls_to('users', 'insert')[0].payload['full_name'], 'Ama Mensah')

    def test_signup_rejects_weak_password(self):
        """A weak password is refused before anything reaches the backend."""
        response = APIClient().post('/api/auth/signup', {
            'email': 'ama@example.com', 'phone': '0241234567', 'password': 'short', 'fullName': 'Ama',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIs(response.data['success'], False)
        self.assertTrue(response.data['error'].startswith('password: Password must be at least 8 characters long'))
        self.assertIn('password', response.data['fields'])
        self.assertEqual(self.backend.calls, [])

    def test_signin_unknown_phone(self):
        response = APIClient().post('/api/auth/signin', {'phone': '0200000000', 'password': 'whatever'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'error': 'Phone number not found'})

    def test_provider_signin_wrong_password(self):
        """The backend's rejection message is passed through unchanged."""
        self.backend.on('users', 'select', FakeResponse(data={'email': 'kofi@example.com', 'user_type': 'provider'}))
        self.backend.on('auth', 'sign_in_with_password', RemoteAuthError('Invalid login credentials'))

        response = APIClient().post('/api/provider/signin', {'phone': '0201234567', 'password': 'nope'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'error': 'Invalid login credentials'})

    def test_backend_unreachable_is_an_envelope(self):
        with self.settings(BACKEND_CLIENT_FACTORY='clinic.tests.test_api.broken_factory'):
            response = APIClient().post('/api/auth/signin', {'phone': '0200000000', 'password': 'x'},
                                        format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'error': 'backend unreachable'})

    def test_sign_out_revokes_token_and_forgets_it(self):
        """Sign-out revokes the caller's token remotely and drops the cached identity."""
        client = self.patient()
        self.assertEqual(client.get('/api/auth/user').status_code, status.HTTP_200_OK)

        response = client.post('/api/auth/signout')
        self.assertEqual(response.data, {'success': True})
        revoked = self.backend.calls_to('auth', 'admin_sign_out')
        self.assertEqual([c.payload['jwt'] for c in revoked], [PATIENT_TOKEN])

        client.get('/api/auth/user')
        self.assertEqual(len(self.backend.calls_to('auth', 'get_user')), 4)

    def test_update_password_for_caller(self):
        """The caller's token becomes the session the password change applies to."""
        client = self.patient()
        response = client.post('/api/auth/update-password', {'newPassword': 'N3w!passw0rd'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['id'], PATIENT_ID)
        opened = self.backend.calls_to('auth', 'set_session')[0]
        self.assertEqual(opened.payload['access_token'], PATIENT_TOKEN)
        self.assertEqual(self.backend.calls_to('auth', 'update_user')[0].payload, {'password': 'N3w!passw0rd'})


class AccessControlTests(BackendAPITestCase):

    def test_missing_token(self):
        response = APIClient().get('/api/profile')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIs(response.data['success'], False)
        self.assertEqual(response['WWW-Authenticate'], 'Bearer')

    def test_invalid_token(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer expired')
        response = client.get('/api/profile')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'invalid JWT: unable to parse or verify signature')

    def test_token_is_checked_once_and_forwarded(self):
        """One identity lookup serves a burst of requests; every call carries the caller's token."""
        client = self.patient()
        self.backend.on('users', 'select', FakeResponse(data={'id': PATIENT_ID, 'full_name': 'Ama'}))

        first = client.get('/api/profile')
        second = client.get('/api/profile/allergies')
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data, {'success': True, 'data': {'id': PATIENT_ID, 'full_name': 'Ama'}})
        self.assertEqual(len(self.backend.calls_to('auth', 'get_user')), 1)
        self.assertEqual(self.backend.tokens_seen.count(PATIENT_TOKEN), 3)
        self.assertEqual(self.backend.calls_to('allergies', 'select')[0].eq('user_id'), PATIENT_ID)

    def test_patients_cannot_use_provider_endpoints(self):
        response = self.patient().get('/api/provider/stats')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data, {'success': False, 'error': 'This endpoint is only available to providers'})

    def test_role_comes_from_account_row_not_user_metadata(self):
        """A patient who writes ``user_type: provider`` into their own metadata stays a patient."""
        client = self.authenticate('tok-x', 'patient-9', 'patient', metadata={'user_type': 'provider'})

        response = client.get('/api/provider/stats')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        lookup = self.backend.calls_to('users', 'select')[0]
        self.assertEqual(lookup.eq('id'), 'patient-9')

    def test_account_without_row_is_treated_as_patient(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer tok-orphan')
        self.backend.users_by_token['tok-orphan'] = fakes.FakeUser(id='orphan-1', email='orphan@teleheal.test',
                                                                  user_metadata={'user_type': 'provider'})

        response = client.get('/api/provider/stats')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ProfileEndpointTests(BackendAPITestCase):

    def test_profile_cache_invalidated_on_update(self):
        """Profile reads are cached until the caller updates the profile."""
        client = self.patient()
        self.backend.on('users', 'select', FakeResponse(data={'id': PATIENT_ID, 'full_name': 'Ama'}))

        client.get('/api/profile')
        client.get('/api/profile')
        # one role lookup at authentication plus one profile read
        self.assertEqual(len(self.backend.calls_to('users', 'select')), 2)

        response = client.post('/api/profile/update', {'fullName': 'Ama <b>M</b>'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.backend.calls_to('users', 'update')[0].payload, {'full_name': 'Ama M'})

        client.get('/api/profile')
        self.assertEqual(len(self.backend.calls_to('users', 'select')), 3)


class CareEndpointTests(BackendAPITestCase):

    def test_provider_stats(self):
        client = self.provider()
        response = client.get('/api/provider/stats')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['completionRate'], 0)
        client.get('/api/provider/stats')
        self.assertEqual(len([c for c in self.backend.calls if c.options.get('count')]), 3)

    def test_book_appointment_for_caller(self):
        """The booking patient is always the caller; free-text notes are sanitised."""
        response = self.patient().post('/api/appointments', {
            'providerId': PROVIDER_ID,
            'appointmentDate': '2026-10-21T10:00:00Z',
            'appointmentType': 'consultation',
            'notes': 'Headache <script>x</script>',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        row = self.backend.calls_to('appointments', 'insert')[0].payload
        self.assertEqual(row['patient_id'], PATIENT_ID)
        self.assertTrue(row['appointment_date'].startswith('2026-10-21T10:00:00'))
        self.assertNotIn('<script>', row['notes'])

    def test_appointment_list_defaults_to_caller_role(self):
        self.patient().get('/api/appointments')
        self.provider().get('/api/appointments')

        patient_call, provider_call = self.backend.calls_to('appointments', 'select')
        self.assertEqual(patient_call.eq('patient_id'), PATIENT_ID)
        self.assertEqual(provider_call.eq('provider_id'), PROVIDER_ID)

    def test_status_change_refreshes_both_parties_lists(self):
        """A status change made by one side is visible in the other side's cached list."""
        patient, provider = self.patient(), self.provider()
        patient.get('/api/appointments')
        provider.get('/api/appointments')
        self.backend.on('appointments', 'update', FakeResponse(data=[{
            'id': 'appt-1', 'patient_id': PATIENT_ID, 'provider_id': PROVIDER_ID, 'status': 'completed',
        }]))

        response = provider.post('/api/appointments/appt-1/status', {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(cache.get(f'appointment:list:patient:{PATIENT_ID}'))
        self.assertIsNone(cache.get(f'appointment:list:provider:{PROVIDER_ID}'))

        patient.get('/api/appointments')
        self.assertEqual(len(self.backend.calls_to('appointments', 'select')), 3)

    def test_only_providers_open_consultations(self):
        patient, provider = self.patient(), self.provider()
        body = {'appointmentId': 'appt-1', 'patientId': PATIENT_ID}

        self.assertEqual(patient.post('/api/consultations', body, format='json').status_code,
                         status.HTTP_403_FORBIDDEN)
        response = provider.post('/api/consultations', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.backend.calls_to('consultations', 'insert')[0].payload['provider_id'], PROVIDER_ID)
        self.assertEqual(patient.get('/api/consultations').status_code, status.HTTP_200_OK)

    def test_task_update_and_status(self):
        client = self.provider()
        response = client.post('/api/provider/tasks/task-1', {'priority': 'high'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = client.post('/api/provider/tasks/task-1/status', {'status': 'archived'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['error'].startswith('status:'))


class PaymentEndpointTests(BackendAPITestCase):

    def test_payment_verification_failure(self):
        self.backend.on('functions', 'verify-payment', {'status': 'failed'})
        response = self.patient().post('/api/payments/verify', {'reference': 'ref_1', 'appointmentId': 'appt-1'},
                                       format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'error': 'Payment verification failed'})

    def test_payment_amount_bounds(self):
        """Out-of-range amounts never reach the payment function."""
        response = self.patient().post('/api/payments/initialize', {
            'appointmentId': 'appt-1', 'amount': '0', 'email': 'ama@example.com', 'fullName': 'Ama',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['error'].startswith('amount:'))
        self.assertEqual(self.backend.calls_to('functions'), [])


class MessagingEndpointTests(BackendAPITestCase):

    def test_send_message_from_caller(self):
        response = self.patient().post('/api/messages', {'recipientId': PROVIDER_UUID, 'messageText': 'Hello'},
                                       format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        row = self.backend.calls_to('messages', 'insert')[0].payload
        self.assertEqual(row['sender_id'], PATIENT_ID)
        self.assertEqual(row['recipient_id'], PROVIDER_UUID)

    def test_conversation_with_user_id(self):
        response = self.patient().get('/api/messages', {'otherUserId': PROVIDER_UUID})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        _, _, expression = self.backend.calls_to('messages', 'select')[0].filters[0]
        self.assertIn(f'recipient_id.eq."{PROVIDER_UUID}"', expression)

    def test_crafted_other_user_id_is_rejected(self):
        """Filter syntax in a user id is refused before any query is built."""
        client = self.patient()
        crafted = f'{PROVIDER_UUID}),recipient_id.neq.(x'

        response = client.get('/api/messages', {'otherUserId': crafted})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('otherUserId', response.data['fields'])

        response = client.post('/api/messages/read-conversation', {'otherUserId': crafted}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.backend.calls_to('messages'), [])

    def test_recipient_must_be_a_user_id(self):
        response = self.patient().post('/api/messages', {'recipientId': 'provider-1', 'messageText': 'Hello'},
                                       format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.backend.calls_to('messages'), [])


class FileEndpointTests(BackendAPITestCase):

    def test_document_upload(self):
        upload = SimpleUploadedFile('lab.pdf', b'%PDF-1.4 body', content_type='application/pdf')
        response = self.patient().post('/api/files/documents', {'file': upload, 'documentType': 'lab-reports'},
                                       format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['data']['path'].startswith(f'{PATIENT_ID}/lab-reports/'))
        self.assertEqual(self.backend.calls_to('storage:documents', 'upload')[0].payload['size'],
                         len(b'%PDF-1.4 body'))

    def test_rejected_upload_type(self):
        upload = SimpleUploadedFile('run.sh', b'#!/bin/sh', content_type='text/x-shellscript')
        response = self.patient().post('/api/files/documents', {'file': upload, 'documentType': 'misc'},
                                       format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'error': 'Unsupported file type'})


class HealthTests(BackendAPITestCase):

    def test_healthz(self):
        response = APIClient().get('/healthz')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'success': True, 'backend': True})

    def test_healthz_when_backend_down(self):
        with self.settings(BACKEND_CLIENT_FACTORY='clinic.tests.test_api.broken_factory'):
            response = APIClient().get('/healthz')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.json(), {'success': False, 'error': 'backend unreachable'})
