from rest_framework import serializers

from deliveries.models import Delivery
from orders.api.serializers import OrderActionSerializer


class DeliverySerializer(serializers.ModelSerializer):
    class Meta:
        model = Delivery
        fields = ["id", "order", "version_number", "file_url", "created_at"]
        read_only_fields = fields


class DeliveryCreateSerializer(OrderActionSerializer):
    file_url = serializers.CharField(max_length=500)
