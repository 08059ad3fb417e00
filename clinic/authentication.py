"""
Bearer-token authentication against the hosted backend.

The access token issued by the backend at sign-in is sent as
``Authorization: Bearer <token>``.  It is checked by asking the backend
who it belongs to and reading the role from the account row.  The answer
is cached briefly under a digest of the token so a burst of requests
costs one lookup.  The token itself is kept on the principal and
forwarded to every service call so row-level policies see the caller.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional

from asgiref.sync import async_to_sync
from django.core.cache import cache
from rest_framework import authentication, exceptions

from clinic.backend import get_client_factory
from clinic.services import auth as auth_service
from clinic.services.cache import TTL_SHORT
from clinic.services.envelope import ok

KEYWORD = 'Bearer'


@dataclass
class BackendUser:
    """The caller as known to the backend identity service."""
    id: str
    email: Optional[str]
    user_type: str
    token: str

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> str:
        return self.id

    @property
    def is_provider(self) -> bool:
        return self.user_type == 'provider'


def token_cache_key(token: str) -> str:
    return 'auth:token:' + hashlib.sha256(token.encode()).hexdigest()


async def resolve_identity(token: str) -> dict:
    """Who ``token`` belongs to, with the role taken from the account row.

    User metadata is writable by its owner, so it is never trusted for the
    role.
    """
    client = await get_client_factory()(access_token=token)
    result = await auth_service.get_user(client, token)
    user = result.get('user') if result.get('success') else None
    if user is None:
        return result
    role = await auth_service.get_account_type(client, user.id)
    if not role['success']:
        return role
    return ok(user=user, user_type=role['data'])


def identity_from_user(user, user_type: str) -> dict:
    return {
        'id': user.id,
        'email': getattr(user, 'email', None),
        'user_type': user_type,
    }


def bearer_token(request) -> Optional[str]:
    header = authentication.get_authorization_header(request).split()
    if not header or header[0].lower() != KEYWORD.lower().encode():
        return None
    if len(header) != 2:
        raise exceptions.AuthenticationFailed('Invalid bearer header.')
    try:
        return header[1].decode()
    except UnicodeError:
        raise exceptions.AuthenticationFailed('Invalid bearer header.')


class BackendTokenAuthentication(authentication.BaseAuthentication):

    def authenticate(self, request):
        token = bearer_token(request)
        if token is None:
            return None

        key = token_cache_key(token)
        identity = cache.get(key)
        if identity is None:
            result = async_to_sync(resolve_identity)(token)
            user = result.get('user') if result.get('success') else None
            if user is None:
                raise exceptions.AuthenticationFailed(result.get('error') or 'Invalid or expired token.')
            identity = identity_from_user(user, result['user_type'])
            cache.set(key, identity, TTL_SHORT)
        return BackendUser(token=token, **identity), token

    def authenticate_header(self, request):
        return KEYWORD
