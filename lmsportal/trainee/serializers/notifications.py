"""
Serializers for the notification inbox and channel preferences.
"""
from rest_framework import serializers
from trainee.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='notification_type', read_only=True)
    readAt = serializers.DateTimeField(source='read_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Notification
        fields = ['notification_id', 'type', 'channel', 'subject', 'body', 'meta', 'status', 'readAt', 'createdAt']


class NotificationPreferencesSerializer(serializers.Serializer):
    """{channel: opt_in} map; unknown channels are rejected"""
    preferences = serializers.DictField(child=serializers.BooleanField())

    def validate_preferences(self, value):
        channels = {choice for choice, _ in Notification.CHANNEL_CHOICES}
        unknown = sorted(set(value) - channels)
        if unknown:
            raise serializers.ValidationError(f"Unknown channels: {', '.join(unknown)}")
        return value
