"""
Realtime row-change subscriptions.

Each subscription opens one backend channel filtered to a single user's
rows and hands every changed row to ``callback``.  The envelope carries
the channel so the caller can pass it back to :func:`unsubscribe`.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from clinic.services.appointments import owner_column
from clinic.services.envelope import ok, service_call

logger = logging.getLogger(__name__)

RowCallback = Callable[[dict], Any]


def changed_row(payload: dict) -> Optional[dict]:
    data = payload.get('data', payload) if isinstance(payload, dict) else {}
    return data.get('record') or data.get('new') or data.get('old_record') or data.get('old')


async def subscribe(client, table: str, column: str, value: str, event: str, callback: RowCallback):
    def handle(payload):
        row = changed_row(payload)
        if row is not None:
            callback(row)

    channel = client.channel(f'{table}:{column}={value}')
    channel.on_postgres_changes(event, schema='public', table=table, filter=f'{column}=eq.{value}', callback=handle)
    await channel.subscribe()
    logger.debug("subscribed to %s %s where %s=%s", event, table, column, value)
    return ok(channel=channel)


@service_call
async def subscribe_to_messages(client, user_id: str, callback: RowCallback) -> dict:
    return await subscribe(client, 'messages', 'recipient_id', user_id, 'INSERT', callback)


@service_call
async def subscribe_to_appointments(client, user_id: str, user_type: str, callback: RowCallback) -> dict:
    return await subscribe(client, 'appointments', owner_column(user_type), user_id, '*', callback)


@service_call
async def subscribe_to_consultations(client, user_id: str, user_type: str, callback: RowCallback) -> dict:
    return await subscribe(client, 'consultations', owner_column(user_type), user_id, '*', callback)


@service_call
async def subscribe_to_notifications(client, user_id: str, callback: RowCallback) -> dict:
    return await subscribe(client, 'notifications', 'user_id', user_id, 'INSERT', callback)


@service_call
async def unsubscribe(client, channel) -> dict:
    if channel is not None:
        await client.remove_channel(channel)
    return {'success': True}
