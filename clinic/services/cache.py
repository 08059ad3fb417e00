"""
Short-lived caching of read envelopes in the Django cache.

Only successful envelopes are stored, so a transient backend failure is
never replayed to later callers.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable

from django.core.cache import cache

logger = logging.getLogger(__name__)

# seconds
TTL_SHORT = 60
TTL_MEDIUM = 5 * 60
TTL_LONG = 15 * 60
TTL_VERY_LONG = 60 * 60


def user_profile_key(user_id: str) -> str:
    return f'user:profile:{user_id}'


def provider_profile_key(provider_id: str) -> str:
    return f'provider:profile:{provider_id}'


def provider_rating_key(provider_id: str) -> str:
    return f'provider:rating:{provider_id}'


def consultation_queue_key(provider_id: str) -> str:
    return f'provider:queue:{provider_id}'


def provider_tasks_key(provider_id: str) -> str:
    return f'provider:tasks:{provider_id}'


def provider_stats_key(provider_id: str) -> str:
    return f'provider:stats:{provider_id}'


def payment_history_key(user_id: str) -> str:
    return f'payment:history:{user_id}'


def appointment_list_key(user_id: str) -> str:
    return f'appointment:list:{user_id}'


def appointment_party_keys(row: dict) -> list:
    """List keys of both sides of an appointment row."""
    keys = []
    if row.get('patient_id'):
        keys.append(appointment_list_key(f"patient:{row['patient_id']}"))
    if row.get('provider_id'):
        keys.append(appointment_list_key(f"provider:{row['provider_id']}"))
    return keys


async def cached(key: str, ttl: int, produce: Callable[[], Awaitable[dict]]) -> dict:
    hit = await cache.aget(key)
    if hit is not None:
        return hit
    result = await produce()
    if result.get('success'):
        await cache.aset(key, result, ttl)
    else:
        logger.debug("not caching failed envelope for %s", key)
    return result


async def invalidate(*keys: str) -> None:
    await cache.adelete_many(list(keys))
