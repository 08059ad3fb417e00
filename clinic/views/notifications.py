from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from clinic.permissions import IsProvider
from clinic.serializers.messaging import (
    DeviceTokenSerializer,
    NotificationListQuerySerializer,
    PushSerializer,
)
from clinic.services import notifications
from clinic.views.base import call_service


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_list(request):
    q = NotificationListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return call_service(request, notifications.get_notifications, request.user.id,
                        q.validated_data.get('limit', 50))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_read(request, pk: str):
    return call_service(request, notifications.mark_notification_as_read, pk)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_read_all(request):
    return call_service(request, notifications.mark_all_notifications_as_read, request.user.id)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def notification_delete(request, pk: str):
    return call_service(request, notifications.delete_notification, pk)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def device_register(request):
    s = DeviceTokenSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, notifications.register_device_token, request.user.id,
                        s.validated_data['token'], s.validated_data['platform'])


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsProvider])
def push(request):
    s = PushSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, notifications.send_push_notification, str(d['userId']), d['title'],
                        d['body'], d.get('data'))
