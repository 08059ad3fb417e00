"""
Provider signup and login.

Provider signup writes three things: the backend identity, the shared
``users`` row and the ``provider_profiles`` row holding licence and
specialisation.  None of the steps is compensated when a later one fails.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from clinic.services.auth import USERS_TABLE, account_row, lookup_email, password_login
from clinic.services.envelope import fail, ok, service_call

logger = logging.getLogger(__name__)

PROVIDER_PROFILES_TABLE = 'provider_profiles'
PROVIDER_NOT_FOUND = 'Provider account not found'
NOT_A_PROVIDER = 'This account is not a provider account'


@dataclass
class ProviderSignUpData:
    email: str
    phone: str
    password: str
    full_name: str
    license_number: str
    specialization: str
    years_of_experience: int


@dataclass
class ProviderLoginData:
    phone: str
    password: str


@service_call
async def provider_sign_up(client, data: ProviderSignUpData) -> dict:
    auth = await client.auth.sign_up({
        'email': data.email,
        'password': data.password,
        'options': {'data': {'phone': data.phone, 'full_name': data.full_name, 'user_type': 'provider'}},
    })
    if not auth.user:
        return fail('Failed to create provider account')

    user_id = auth.user.id
    try:
        await client.table(USERS_TABLE).insert(account_row(user_id, data, 'provider')).execute()
        await client.table(PROVIDER_PROFILES_TABLE).insert({
            'user_id': user_id,
            'license_number': data.license_number,
            'specialization': data.specialization,
            'years_of_experience': data.years_of_experience,
            'is_verified': False,
            'is_active': True,
        }).execute()
    except Exception:
        logger.warning("provider signup left identity %s partially provisioned", user_id)
        raise
    return ok(user=auth.user, session=auth.session)


@service_call
async def provider_sign_in(client, data: ProviderLoginData) -> dict:
    row = await lookup_email(client, data.phone, user_type='provider', not_found=PROVIDER_NOT_FOUND)
    # the lookup already filters on user_type; kept for rows returned without it
    if row.get('user_type', 'provider') != 'provider':
        return fail(NOT_A_PROVIDER)
    return await password_login(client, row['email'], data.password)
