"""
Patient authentication against the hosted backend.

Patients log in with their phone number: the number is resolved to the
account email first and the password check is delegated to the backend.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from django.conf import settings
from supabase import PostgrestAPIError

from clinic.services.envelope import NotFound, fail, is_no_rows, ok, service_call

logger = logging.getLogger(__name__)

USERS_TABLE = 'users'
PHONE_NOT_FOUND = 'Phone number not found'
DEFAULT_USER_TYPE = 'patient'


@dataclass
class SignUpData:
    email: str
    phone: str
    password: str
    full_name: str


@dataclass
class LoginData:
    phone: str
    password: str


def account_row(user_id: str, data: Any, user_type: str) -> dict:
    return {
        'id': user_id,
        'email': data.email,
        'phone_number': data.phone,
        'full_name': data.full_name,
        'user_type': user_type,
    }


async def lookup_email(client, phone: str, *, user_type: Optional[str] = None,
                       not_found: str = PHONE_NOT_FOUND) -> dict:
    """Fetch the account row for ``phone``; raise ``NotFound`` when there is none."""
    columns = 'email, user_type' if user_type else 'email'
    query = client.table(USERS_TABLE).select(columns).eq('phone_number', phone)
    if user_type:
        query = query.eq('user_type', user_type)
    try:
        response = await query.single().execute()
    except PostgrestAPIError as e:
        logger.info("phone lookup failed: %s", e.message)
        raise NotFound(not_found)
    row = getattr(response, 'data', None)
    if not row:
        raise NotFound(not_found)
    return row


async def password_login(client, email: str, password: str) -> dict:
    auth = await client.auth.sign_in_with_password({'email': email, 'password': password})
    return ok(user=auth.user, session=auth.session)


@service_call
async def sign_up(client, data: SignUpData) -> dict:
    auth = await client.auth.sign_up({
        'email': data.email,
        'password': data.password,
        'options': {'data': {'phone': data.phone, 'full_name': data.full_name}},
    })
    if not auth.user:
        return fail('Failed to create user')

    # identity is not rolled back when the profile row cannot be written
    try:
        await client.table(USERS_TABLE).insert(account_row(auth.user.id, data, 'patient')).execute()
    except Exception:
        logger.warning("signup left identity %s without a profile row", auth.user.id)
        raise
    return ok(user=auth.user, session=auth.session)


@service_call
async def sign_in(client, data: LoginData) -> dict:
    row = await lookup_email(client, data.phone)
    return await password_login(client, row['email'], data.password)


async def open_session(client, access_token: str, refresh_token: Optional[str] = None):
    """Give the client's auth component the caller's session.

    An unexpired access token is checked with the backend and used as is;
    an expired one is exchanged through ``refresh_token``.
    """
    return await client.auth.set_session(access_token, refresh_token or '')


@service_call
async def sign_out(client, access_token: str) -> dict:
    """Revoke the caller's refresh tokens; the access token lives until it expires."""
    await client.auth.admin.sign_out(access_token)
    return {'success': True}


@service_call
async def get_user(client, jwt: Optional[str] = None) -> dict:
    response = await client.auth.get_user(jwt)
    return ok(user=getattr(response, 'user', None))


@service_call
async def get_account_type(client, user_id: str) -> dict:
    """Role recorded on the account row; accounts without a row are patients."""
    try:
        response = await client.table(USERS_TABLE).select('user_type').eq('id', user_id).single().execute()
    except PostgrestAPIError as e:
        if not is_no_rows(e):
            raise
        logger.info("no account row for %s", user_id)
        return ok(DEFAULT_USER_TYPE)
    return ok((response.data or {}).get('user_type') or DEFAULT_USER_TYPE)


@service_call
async def get_session(client, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> dict:
    if access_token:
        await open_session(client, access_token, refresh_token)
    session = await client.auth.get_session()
    return ok(session=session)


@service_call
async def reset_password(client, email: str) -> dict:
    await client.auth.reset_password_for_email(
        email, {'redirect_to': settings.PASSWORD_RESET_REDIRECT_URL}
    )
    return {'success': True}


@service_call
async def update_password(client, access_token: str, new_password: str, refresh_token: Optional[str] = None) -> dict:
    await open_session(client, access_token, refresh_token)
    response = await client.auth.update_user({'password': new_password})
    return ok(user=response.user)
