from rest_framework import serializers

from chat.models import Message


class MessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Message
        fields = ["id", "order", "sender_role", "body", "created_at"]
        read_only_fields = ["id", "order", "sender_role", "created_at"]
