"""Management commands."""
from io import StringIO

import pytest
from django.core.cache import cache
from django.core.management import CommandError, call_command

from clinic.services.cache import provider_rating_key, provider_stats_key
from clinic.tests.fakes import FakeResponse, RemoteAuthError


async def unreachable(access_token=None):
    raise ConnectionError('connection refused')


def run(*args):
    out = StringIO()
    call_command(*args, stdout=out, stderr=StringIO())
    return out.getvalue()


def test_check_backend(backend):
    assert 'backend reachable' in run('check_backend')
    assert backend.calls[0].options['count'] == 'exact'


def test_check_backend_failure(backend, settings):
    settings.BACKEND_CLIENT_FACTORY = 'clinic.tests.test_commands.unreachable'

    with pytest.raises(CommandError, match='backend unreachable: connection refused'):
        run('check_backend')


def test_ensure_demo_accounts(backend):
    backend.on('auth', 'sign_up', lambda call: RemoteAuthError('User already registered')
               if call.payload['email'].startswith('patient') else None)

    out = run('ensure_demo_accounts')

    assert 'skipped: patient.demo@teleheal.test (patient): User already registered' in out
    assert 'ok: provider.demo@teleheal.test (provider)' in out
    profile = backend.calls_to('provider_profiles', 'insert')[0].payload
    assert profile['license_number'] == 'LIC-DEMO01'


def test_refresh_caches(backend):
    backend.on('provider_reviews', 'select', FakeResponse(data=[{'rating': 4}, {'rating': 5}]))
    cache.set(provider_stats_key('p-1'), {'success': True, 'data': 'stale'})

    out = run('refresh_caches', 'p-1')

    assert 'Refreshed 2 keys' in out
    assert cache.get(provider_stats_key('p-1'))['data']['totalConsultations'] == 0
    assert cache.get(provider_rating_key('p-1'))['data'] == {'averageRating': 4.5, 'totalReviews': 2}
