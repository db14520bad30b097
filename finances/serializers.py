"""
Serializers for the ledger and the analytics payload.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import Transaction, TransactionType


class TransactionSerializer(serializers.ModelSerializer):
    """Ledger entry with its originating record as a (kind, id) pair"""
    transaction_type_display = serializers.CharField(source='get_transaction_type_display', read_only=True)
    batch_name = serializers.CharField(source='batch.name', read_only=True, allow_null=True)
    source = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            'id', 'transaction_type', 'transaction_type_display', 'category',
            'amount', 'description', 'transaction_date',
            'batch', 'batch_name', 'feed_record', 'egg_record', 'vaccination',
            'source', 'auto_generated', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_source(self, obj):
        source = obj.source
        if source is None:
            return None
        return {'kind': source.kind, 'id': str(source.id)}


class TransactionCreateSerializer(serializers.Serializer):
    transaction_type = serializers.ChoiceField(choices=TransactionType.choices)
    category = serializers.CharField(max_length=100)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    description = serializers.CharField(max_length=255)
    transaction_date = serializers.DateField(required=False)
    batch = serializers.UUIDField(required=False, allow_null=True)
    feed_record = serializers.UUIDField(required=False, allow_null=True)
    egg_record = serializers.UUIDField(required=False, allow_null=True)


class TransactionUpdateSerializer(serializers.Serializer):
    transaction_type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    category = serializers.CharField(max_length=100, required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    description = serializers.CharField(max_length=255, required=False)
    transaction_date = serializers.DateField(required=False)
    batch = serializers.UUIDField(required=False, allow_null=True, source='batch_id')


class SummarySerializer(serializers.Serializer):
    total_income = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    net_profit = serializers.DecimalField(max_digits=14, decimal_places=2)
    profit_margin = serializers.DecimalField(max_digits=14, decimal_places=2)
    transaction_count = serializers.IntegerField()


class CategoryTotalSerializer(serializers.Serializer):
    type = serializers.CharField()
    category = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()


class MonthlyTrendSerializer(serializers.Serializer):
    month = serializers.CharField()
    income = serializers.DecimalField(max_digits=14, decimal_places=2)
    expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    profit = serializers.DecimalField(max_digits=14, decimal_places=2)


class FinancialAnalyticsSerializer(serializers.Serializer):
    period = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    summary = SummarySerializer()
    category_breakdown = CategoryTotalSerializer(many=True)
    monthly_trends = MonthlyTrendSerializer(many=True)
    recent_transactions = TransactionSerializer(many=True)
