from django.contrib import admin

from .models import FeedRecord


@admin.register(FeedRecord)
class FeedRecordAdmin(admin.ModelAdmin):
    list_display = ['date', 'feed_type', 'bags', 'kg_per_bag', 'total_kg', 'price', 'batch', 'owner']
    list_filter = ['feed_type', 'date']
    search_fields = ['feed_type', 'notes', 'batch__batch_code', 'owner__email']
    readonly_fields = ['total_kg', 'created_at']
    ordering = ['-date']
