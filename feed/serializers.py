from decimal import Decimal

from rest_framework import serializers

from .models import FeedRecord


class FeedRecordSerializer(serializers.ModelSerializer):
    batch_code = serializers.CharField(source='batch.batch_code', read_only=True, allow_null=True)

    class Meta:
        model = FeedRecord
        fields = [
            'id', 'batch', 'batch_code', 'feed_type', 'price', 'bags',
            'kg_per_bag', 'total_kg', 'date', 'notes', 'created_at'
        ]
        read_only_fields = fields


class FeedCreateSerializer(serializers.Serializer):
    """Feed purchase payload (total_kg is calculated, never accepted)"""
    feed_type = serializers.CharField(max_length=100)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    bags = serializers.IntegerField(min_value=1)
    kg_per_bag = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=Decimal('0.1'))
    batch = serializers.UUIDField(required=False, allow_null=True)
    date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
