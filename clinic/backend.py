"""
Construction of, and calls around, the hosted-backend client.

Services never reach for a shared client: every service coroutine takes
the client as its first argument.  Views, consumers and management
commands obtain one through :func:`get_client_factory`, which resolves the
``BACKEND_CLIENT_FACTORY`` setting so tests can substitute an in-memory
double without patching module globals.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from django.conf import settings
from django.utils.module_loading import import_string
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Awaitable[AsyncClient]]


async def connect(access_token: Optional[str] = None) -> AsyncClient:
    """Build an async client from settings.

    When ``access_token`` is given it is sent as the bearer token on table
    queries, storage requests, function invocations and realtime joins, so
    row-level policies see that user.  The auth client holds no session
    until a service opens one with :func:`clinic.services.auth.open_session`.
    """
    timeout = settings.SUPABASE_TIMEOUT
    options = AsyncClientOptions(
        postgrest_client_timeout=timeout,
        storage_client_timeout=timeout,
        function_client_timeout=timeout,
        auto_refresh_token=False,
        persist_session=False,
    )
    if access_token:
        options.headers['Authorization'] = f'Bearer {access_token}'
    client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, options=options)
    if access_token:
        await client.realtime.set_auth(access_token)
    logger.debug("backend client ready (user token: %s)", bool(access_token))
    return client


def get_client_factory() -> ClientFactory:
    return import_string(settings.BACKEND_CLIENT_FACTORY)


async def invoke_function(client, name: str, body: dict):
    """Invoke a serverless function and return its decoded JSON reply."""
    return await client.functions.invoke(name, invoke_options={'body': body, 'responseType': 'json'})
