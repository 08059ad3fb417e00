"""
Glue between synchronous DRF views and the async service layer.

``call_service`` opens a backend client for the caller's token, awaits
one service coroutine and turns the envelope into a response: 200 for
success, 400 for failure, with the envelope as the body in both cases.
"""
from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Awaitable, Callable, Iterable, Optional, Tuple

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.response import Response

from clinic.backend import get_client_factory
from clinic.services import cache as service_cache
from clinic.services.envelope import error_message, fail

logger = logging.getLogger(__name__)

Service = Callable[..., Awaitable[dict]]


def to_primitive(value: Any) -> Any:
    """Make SDK models and dataclasses JSON-renderable."""
    if hasattr(value, 'model_dump'):
        return value.model_dump(mode='json')
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_primitive(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {k: to_primitive(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_primitive(v) for v in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def caller_token(request) -> Optional[str]:
    return getattr(request.user, 'token', None) if request.user else None


async def open_client(token: Optional[str]):
    return await get_client_factory()(access_token=token)


async def run_service(token: Optional[str], service: Service, args: tuple, kwargs: dict,
                      cache_as: Optional[Tuple[str, int]], invalidates: Iterable[str]) -> dict:
    try:
        client = await open_client(token)
    except Exception as e:
        logger.exception("could not open backend client")
        return fail(error_message(e))

    async def produce():
        return await service(client, *args, **kwargs)

    if cache_as:
        key, ttl = cache_as
        result = await service_cache.cached(key, ttl, produce)
    else:
        result = await produce()
    keys = list(invalidates)
    if keys and result.get('success'):
        await service_cache.invalidate(*keys)
    return result


def envelope_response(result: dict, success_status: int = status.HTTP_200_OK) -> Response:
    code = success_status if result.get('success') else status.HTTP_400_BAD_REQUEST
    return Response(to_primitive(result), status=code)


def call_service(request, service: Service, *args: Any, cache_as: Optional[Tuple[str, int]] = None,
                 invalidates: Iterable[str] = (), success_status: int = status.HTTP_200_OK,
                 **kwargs: Any) -> Response:
    result = async_to_sync(run_service)(caller_token(request), service, args, kwargs, cache_as, invalidates)
    return envelope_response(result, success_status)


def iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def user_type_of(request) -> str:
    return request.query_params.get('userType') or request.user.user_type
