"""
In-app notifications and push delivery.

Device tokens are collected by the mobile app (Expo) and stored in
``device_tokens``; pushes go out through the Expo push HTTP API.
Permission prompts and local scheduling stay on the device.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from asgiref.sync import sync_to_async
from django.conf import settings
from django.utils import timezone

from clinic.services.envelope import NotFound, ok, service_call

logger = logging.getLogger(__name__)

NOTIFICATIONS_TABLE = 'notifications'
DEVICE_TOKENS_TABLE = 'device_tokens'
NO_DEVICES = 'No registered devices for user'


def post_to_expo(messages: List[Dict[str, Any]]) -> List[dict]:
    headers = {'Accept': 'application/json', 'Content-Type': 'application/json'}
    if settings.EXPO_ACCESS_TOKEN:
        headers['Authorization'] = f'Bearer {settings.EXPO_ACCESS_TOKEN}'
    r = requests.post(settings.EXPO_PUSH_URL, json=messages, headers=headers, timeout=settings.PUSH_TIMEOUT)
    r.raise_for_status()
    tickets = r.json().get('data') or []
    for ticket in tickets:
        if ticket.get('status') == 'error':
            logger.warning("push rejected: %s", ticket.get('message'))
    return tickets


@service_call
async def register_device_token(client, user_id: str, token: str, platform: str = 'expo') -> dict:
    await client.table(DEVICE_TOKENS_TABLE).upsert({
        'user_id': user_id,
        'token': token,
        'platform': platform,
        'created_at': timezone.now().isoformat(),
    }).execute()
    return {'success': True}


@service_call
async def send_push_notification(client, user_id: str, title: str, body: str,
                                 data: Optional[Dict[str, Any]] = None) -> dict:
    response = await client.table(DEVICE_TOKENS_TABLE).select('token').eq('user_id', user_id).execute()
    tokens = [row['token'] for row in (response.data or []) if row.get('token')]
    if not tokens:
        raise NotFound(NO_DEVICES)
    messages = [{'to': t, 'title': title, 'body': body, 'data': data or {}, 'sound': 'default'} for t in tokens]
    tickets = await sync_to_async(post_to_expo, thread_sensitive=False)(messages)
    return ok(tickets)


@service_call
async def get_notifications(client, user_id: str, limit: int = 50) -> dict:
    response = await (
        client.table(NOTIFICATIONS_TABLE)
        .select('*')
        .eq('user_id', user_id)
        .order('created_at', desc=True)
        .limit(limit)
        .execute()
    )
    return ok(response.data)


@service_call
async def mark_notification_as_read(client, notification_id: str) -> dict:
    await (
        client.table(NOTIFICATIONS_TABLE)
        .update({'is_read': True, 'read_at': timezone.now().isoformat()})
        .eq('id', notification_id)
        .execute()
    )
    return {'success': True}


@service_call
async def mark_all_notifications_as_read(client, user_id: str) -> dict:
    await (
        client.table(NOTIFICATIONS_TABLE)
        .update({'is_read': True, 'read_at': timezone.now().isoformat()})
        .eq('user_id', user_id)
        .eq('is_read', False)
        .execute()
    )
    return {'success': True}


@service_call
async def delete_notification(client, notification_id: str) -> dict:
    await client.table(NOTIFICATIONS_TABLE).delete().eq('id', notification_id).execute()
    return {'success': True}
