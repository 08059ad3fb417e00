"""
Direct messages between a patient and a provider.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import bleach
from django.utils import timezone

from clinic.services.envelope import first_row, ok, service_call

MESSAGES_TABLE = 'messages'


@dataclass
class MessageData:
    sender_id: str
    recipient_id: str
    message_text: str
    consultation_id: Optional[str] = None


def quoted(value: str) -> str:
    """PostgREST filter literal; commas and parentheses inside quotes are not syntax."""
    escaped = str(value).replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


def conversation_filter(user_id: str, other_user_id: str) -> str:
    me, other = quoted(user_id), quoted(other_user_id)
    return (
        f'and(sender_id.eq.{me},recipient_id.eq.{other}),'
        f'and(sender_id.eq.{other},recipient_id.eq.{me})'
    )


@service_call
async def send_message(client, message: MessageData) -> dict:
    text = bleach.clean((message.message_text or '').strip(), strip=True)
    if not text:
        raise ValueError('Message cannot be empty')
    response = await client.table(MESSAGES_TABLE).insert({
        'sender_id': message.sender_id,
        'recipient_id': message.recipient_id,
        'message_text': text,
        'consultation_id': message.consultation_id,
        'is_read': False,
    }).execute()
    return ok(first_row(response))


@service_call
async def get_messages(client, user_id: str, other_user_id: str) -> dict:
    response = await (
        client.table(MESSAGES_TABLE)
        .select('*')
        .or_(conversation_filter(user_id, other_user_id))
        .order('created_at')
        .execute()
    )
    return ok(response.data)


@service_call
async def get_unread_messages(client, user_id: str) -> dict:
    response = await (
        client.table(MESSAGES_TABLE)
        .select('*')
        .eq('recipient_id', user_id)
        .eq('is_read', False)
        .order('created_at', desc=True)
        .execute()
    )
    return ok(response.data)


@service_call
async def mark_message_as_read(client, message_id: str) -> dict:
    response = await (
        client.table(MESSAGES_TABLE)
        .update({'is_read': True, 'read_at': timezone.now().isoformat()})
        .eq('id', message_id)
        .execute()
    )
    return ok(first_row(response))


@service_call
async def mark_conversation_as_read(client, user_id: str, other_user_id: str) -> dict:
    await (
        client.table(MESSAGES_TABLE)
        .update({'is_read': True, 'read_at': timezone.now().isoformat()})
        .eq('recipient_id', user_id)
        .eq('sender_id', other_user_id)
        .execute()
    )
    return {'success': True}


@service_call
async def get_conversations(client, user_id: str) -> dict:
    response = await client.rpc('get_conversations', {'user_id': user_id}).execute()
    return ok(response.data)
