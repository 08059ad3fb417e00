from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from clinic.serializers.messaging import ConversationQuerySerializer, MessageSerializer
from clinic.services import messaging
from clinic.views.base import call_service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def messages(request):
    if request.method == 'GET':
        q = ConversationQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return call_service(request, messaging.get_messages, request.user.id,
                            str(q.validated_data['otherUserId']))
    s = MessageSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    message = messaging.MessageData(
        sender_id=request.user.id,
        recipient_id=str(d['recipientId']),
        message_text=d['messageText'],
        consultation_id=str(d['consultationId']) if d.get('consultationId') else None,
    )
    return call_service(request, messaging.send_message, message, success_status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def unread_messages(request):
    return call_service(request, messaging.get_unread_messages, request.user.id)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def message_read(request, pk: str):
    return call_service(request, messaging.mark_message_as_read, pk)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def conversation_read(request):
    s = ConversationQuerySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, messaging.mark_conversation_as_read, request.user.id,
                        str(s.validated_data['otherUserId']))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def conversations(request):
    return call_service(request, messaging.get_conversations, request.user.id)
