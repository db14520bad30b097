"""
Serializers for batches and their event logs.

Output serializers render model instances; input serializers only validate
request payloads, the services do the writing.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import Batch, EggRecord, IncubatorRecord, MortalityRecord


# =============================================================================
# BATCH SERIALIZERS
# =============================================================================

class BatchSerializer(serializers.ModelSerializer):
    """Batch with its derived values"""
    cost_per_bird = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True, allow_null=True)
    age_in_days = serializers.SerializerMethodField()
    age_status = serializers.SerializerMethodField()
    can_lay_eggs = serializers.BooleanField(read_only=True)

    class Meta:
        model = Batch
        fields = [
            'id', 'batch_code', 'name', 'breed', 'category',
            'initial_size', 'current_size', 'male_count', 'female_count',
            'start_date', 'archived', 'total_cost', 'cost_per_bird',
            'age_in_days', 'age_status', 'can_lay_eggs',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_age_in_days(self, obj):
        return obj.age_in_days()

    def get_age_status(self, obj):
        return obj.get_age_status()


class BatchCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    breed = serializers.CharField(max_length=100)
    category = serializers.ChoiceField(choices=Batch.Category.choices, default=Batch.Category.CHICK)
    initial_size = serializers.IntegerField(min_value=1)
    start_date = serializers.DateField()
    total_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )
    batch_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    male_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    female_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    vaccine_template_ids = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )


class BatchUpdateSerializer(serializers.Serializer):
    """
    Partial batch edit. Immutable fields are passed through so the service
    can reject them by name.
    """
    name = serializers.CharField(max_length=200, required=False)
    breed = serializers.CharField(max_length=100, required=False)
    category = serializers.ChoiceField(choices=Batch.Category.choices, required=False)
    archived = serializers.BooleanField(required=False)
    male_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    female_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    IMMUTABLE_FIELDS = ('batch_code', 'start_date', 'initial_size', 'current_size')

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)
        for field in self.IMMUTABLE_FIELDS:
            if field in data:
                validated[field] = data[field]
        return validated


class TemplateSelectionSerializer(serializers.Serializer):
    template_ids = serializers.ListField(child=serializers.CharField(), allow_empty=True)


# =============================================================================
# EVENT LOG SERIALIZERS
# =============================================================================

class MortalityRecordSerializer(serializers.ModelSerializer):
    batch_code = serializers.CharField(source='batch.batch_code', read_only=True)

    class Meta:
        model = MortalityRecord
        fields = ['id', 'batch', 'batch_code', 'count', 'age_group', 'date', 'notes', 'created_at']
        read_only_fields = fields


class MortalityCreateSerializer(serializers.Serializer):
    batch = serializers.UUIDField()
    count = serializers.IntegerField(min_value=1)
    date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class IncubatorRecordSerializer(serializers.ModelSerializer):
    batch_code = serializers.CharField(source='batch.batch_code', read_only=True)
    hatch_rate = serializers.DecimalField(max_digits=5, decimal_places=2, read_only=True)

    class Meta:
        model = IncubatorRecord
        fields = [
            'id', 'batch', 'batch_code', 'inserted', 'spoiled', 'hatched',
            'not_hatched', 'hatch_rate', 'date', 'notes', 'created_at'
        ]
        read_only_fields = fields


class IncubatorCreateSerializer(serializers.Serializer):
    batch = serializers.UUIDField()
    inserted = serializers.IntegerField(min_value=0, default=0)
    spoiled = serializers.IntegerField(min_value=0, default=0)
    hatched = serializers.IntegerField(min_value=0, default=0)
    not_hatched = serializers.IntegerField(min_value=0, default=0)
    date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class EggRecordSerializer(serializers.ModelSerializer):
    batch_code = serializers.CharField(source='batch.batch_code', read_only=True)
    total_revenue = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True, allow_null=True)

    class Meta:
        model = EggRecord
        fields = [
            'id', 'batch', 'batch_code', 'date', 'collected', 'sold', 'spoiled',
            'price_per_egg', 'total_revenue', 'notes', 'created_at'
        ]
        read_only_fields = fields


class EggCreateSerializer(serializers.Serializer):
    batch = serializers.UUIDField()
    collected = serializers.IntegerField(min_value=0, default=0)
    sold = serializers.IntegerField(min_value=0, default=0)
    spoiled = serializers.IntegerField(min_value=0, default=0)
    price_per_egg = serializers.DecimalField(
        max_digits=12, decimal_places=4, min_value=Decimal('0'), required=False, allow_null=True
    )
    date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
