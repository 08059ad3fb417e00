"""
Result envelope shared by every backend-access service.

Each public service coroutine returns exactly one of::

    {'success': True, 'data': ...}        # or user/session/url/token fields
    {'success': False, 'error': '...'}

Backend SDK errors carry the remote message, which is passed through
verbatim.  ``NotFound`` carries a fixed message chosen by the service.
Anything else raised inside a service body is reported with its own
message.  Nothing is re-raised to the caller.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, Dict, TypeVar

from supabase import AuthError, FunctionsError, PostgrestAPIError, StorageException

logger = logging.getLogger(__name__)

Envelope = Dict[str, Any]
F = TypeVar('F', bound=Callable[..., Awaitable[Envelope]])

REMOTE_ERRORS = (AuthError, PostgrestAPIError, StorageException, FunctionsError)

# PostgREST code for "JSON object requested, multiple (or no) rows returned"
NO_ROWS_CODE = 'PGRST116'
NO_ROWS_MESSAGE = 'JSON object requested, multiple (or no) rows returned'


class NotFound(Exception):
    """A required single-row lookup returned nothing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def ok(data: Any = None, **fields: Any) -> Envelope:
    out: Envelope = {'success': True}
    if data is not None or not fields:
        out['data'] = data
    out.update(fields)
    return out


def fail(error: str) -> Envelope:
    return {'success': False, 'error': error}


def error_message(exc: BaseException) -> str:
    """Human-readable message of a remote or local exception."""
    message = getattr(exc, 'message', None)
    if not message and exc.args and isinstance(exc.args[0], dict):
        # storage errors carry the decoded JSON body as their only argument
        message = exc.args[0].get('message') or exc.args[0].get('error')
    return str(message or exc)


def is_no_rows(exc: BaseException) -> bool:
    return isinstance(exc, PostgrestAPIError) and getattr(exc, 'code', None) == NO_ROWS_CODE


def first_row(response: Any) -> Any:
    """Return the single row of a write that asked for its representation."""
    rows = getattr(response, 'data', None) or []
    if isinstance(rows, dict):
        return rows
    if not rows:
        raise NotFound(NO_ROWS_MESSAGE)
    return rows[0]


def service_call(func: F) -> F:
    """Convert everything a service coroutine raises into a failure envelope."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Envelope:
        try:
            return await func(*args, **kwargs)
        except NotFound as e:
            logger.info("%s: %s", func.__qualname__, e.message)
            return fail(e.message)
        except ValueError as e:
            logger.info("%s: rejected input: %s", func.__qualname__, e)
            return fail(str(e))
        except REMOTE_ERRORS as e:
            message = error_message(e)
            logger.warning("%s: backend error: %s", func.__qualname__, message)
            return fail(message)
        except Exception as e:
            logger.exception("%s failed", func.__qualname__)
            return fail(error_message(e))

    return wrapper  # type: ignore[return-value]

