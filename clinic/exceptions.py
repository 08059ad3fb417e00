import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def flatten_errors(data) -> str:
    """First readable message out of a DRF error payload."""
    if isinstance(data, dict):
        if 'detail' in data:
            return flatten_errors(data['detail'])
        for field, value in data.items():
            message = flatten_errors(value)
            return message if field == 'non_field_errors' else f'{field}: {message}'
        return ''
    if isinstance(data, (list, tuple)):
        return flatten_errors(data[0]) if data else ''
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("unhandled error in %s", context.get('view').__class__.__name__, exc_info=exc)
        return Response({'success': False, 'error': 'Internal server error'}, status=500)
    # normalize response to the service envelope
    body = {'success': False, 'error': flatten_errors(resp.data)}
    if isinstance(resp.data, dict) and 'detail' not in resp.data:
        body['fields'] = resp.data
    return Response(body, status=resp.status_code, headers={k: v for k, v in resp.items()})
