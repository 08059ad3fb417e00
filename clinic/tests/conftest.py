import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from clinic.tests import fakes

PATIENT_TOKEN = 'tok-patient'
PROVIDER_TOKEN = 'tok-provider'


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def backend(settings):
    fake = fakes.FakeBackend()
    fakes.install(fake)
    settings.BACKEND_CLIENT_FACTORY = 'clinic.tests.fakes.connect'
    yield fake
    fakes.install(None)


@pytest.fixture
def remote(backend):
    return backend.client('service-token')


@pytest.fixture
def patient_api(backend):
    backend.add_user(PATIENT_TOKEN, 'patient-1', 'patient')
    api = APIClient()
    api.credentials(HTTP_AUTHORIZATION=f'Bearer {PATIENT_TOKEN}')
    return api


@pytest.fixture
def provider_api(backend):
    backend.add_user(PROVIDER_TOKEN, 'provider-1', 'provider')
    api = APIClient()
    api.credentials(HTTP_AUTHORIZATION=f'Bearer {PROVIDER_TOKEN}')
    return api
