from django.contrib import admin

from .models import Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['transaction_date', 'transaction_type', 'category', 'amount', 'description', 'batch', 'owner']
    list_filter = ['transaction_type', 'category', 'transaction_date']
    search_fields = ['description', 'category', 'owner__email', 'batch__batch_code']
    raw_id_fields = ['batch', 'feed_record', 'egg_record', 'vaccination']
    ordering = ['-transaction_date']
