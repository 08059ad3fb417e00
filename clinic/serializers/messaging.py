from rest_framework import serializers


class MessageSerializer(serializers.Serializer):
    recipientId = serializers.UUIDField()
    messageText = serializers.CharField(max_length=5000)
    consultationId = serializers.UUIDField(required=False)


class ConversationQuerySerializer(serializers.Serializer):
    otherUserId = serializers.UUIDField()


class DeviceTokenSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=256)
    platform = serializers.ChoiceField(choices=['expo', 'ios', 'android'], default='expo')


class PushSerializer(serializers.Serializer):
    userId = serializers.UUIDField()
    title = serializers.CharField(max_length=128)
    body = serializers.CharField(max_length=1000)
    data = serializers.DictField(required=False)


class NotificationListQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=200, required=False)
