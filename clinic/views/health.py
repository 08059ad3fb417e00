from asgiref.sync import async_to_sync
from django.http import JsonResponse

from clinic.backend import get_client_factory
from clinic.services.envelope import error_message


async def ping_backend() -> bool:
    client = await get_client_factory()()
    response = await client.table('users').select('id', count='exact', head=True).execute()
    return response is not None


def healthz(request):
    try:
        reachable = async_to_sync(ping_backend)()
        return JsonResponse({'success': True, 'backend': reachable})
    except Exception as e:
        return JsonResponse({'success': False, 'error': error_message(e)}, status=503)
