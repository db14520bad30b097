from decimal import Decimal

from rest_framework import serializers

from .models import Vaccination, VaccineTemplate


class VaccineTemplateSerializer(serializers.ModelSerializer):

    class Meta:
        model = VaccineTemplate
        fields = [
            'id', 'name', 'default_cost', 'age_in_days', 'description',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class VaccineTemplateUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    default_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
    age_in_days = serializers.IntegerField(min_value=0, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class VaccinationSerializer(serializers.ModelSerializer):
    """Vaccination with the status derived for today"""
    batch_name = serializers.CharField(source='batch.name', read_only=True)
    batch_code = serializers.CharField(source='batch.batch_code', read_only=True)
    status = serializers.SerializerMethodField()

    class Meta:
        model = Vaccination
        fields = [
            'id', 'batch', 'batch_name', 'batch_code', 'template',
            'vaccine_name', 'age_in_days', 'scheduled_date', 'completed_date',
            'actual_cost', 'notes', 'status', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_status(self, obj):
        return obj.get_status()


class VaccinationCreateSerializer(serializers.Serializer):
    batch = serializers.UUIDField()
    vaccine_name = serializers.CharField(max_length=200)
    age_in_days = serializers.IntegerField(min_value=0)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class VaccinationCompleteSerializer(serializers.Serializer):
    completed_date = serializers.DateField(required=False)
    actual_cost = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True)
