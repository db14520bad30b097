import django_filters

from .models import Transaction, TransactionType


class TransactionFilter(django_filters.FilterSet):
    """Query parameters accepted by the transaction list"""
    type = django_filters.ChoiceFilter(field_name='transaction_type', choices=TransactionType.choices)
    category = django_filters.CharFilter(field_name='category')
    batch = django_filters.UUIDFilter(field_name='batch_id')
    start_date = django_filters.DateFilter(field_name='transaction_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='transaction_date', lookup_expr='lte')

    class Meta:
        model = Transaction
        fields = ['type', 'category', 'batch', 'start_date', 'end_date']
