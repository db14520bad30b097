from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):

    class Meta:
        model = Notification
        fields = [
            'id', 'notification_type', 'title', 'message',
            'related_kind', 'related_id', 'is_read', 'created_at'
        ]
        read_only_fields = fields


class NotificationUpdateSerializer(serializers.Serializer):
    """Either ``id`` of one notification or ``mark_all: true``"""
    id = serializers.UUIDField(required=False)
    mark_all = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if not attrs.get('mark_all') and not attrs.get('id'):
            raise serializers.ValidationError('Provide a notification id or mark_all')
        return attrs
