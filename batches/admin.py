"""
Admin configuration for batches and their event logs.
"""

from django.contrib import admin

from .models import Batch, MortalityRecord, IncubatorRecord, EggRecord


class MortalityInline(admin.TabularInline):
    model = MortalityRecord
    extra = 0
    readonly_fields = ['date', 'count', 'age_group', 'notes']
    fields = ['date', 'count', 'age_group', 'notes']
    can_delete = False
    max_num = 10

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = [
        'batch_code', 'name', 'owner', 'breed', 'category',
        'initial_size', 'current_size', 'start_date', 'archived'
    ]
    list_filter = ['category', 'archived', 'start_date']
    search_fields = ['batch_code', 'name', 'breed', 'owner__email']
    readonly_fields = ['batch_code', 'initial_size', 'current_size', 'start_date', 'created_at', 'updated_at']
    ordering = ['-start_date']
    inlines = [MortalityInline]

    fieldsets = (
        ('Batch', {
            'fields': ('owner', 'batch_code', 'name', 'breed', 'category', 'archived')
        }),
        ('Size', {
            'fields': ('initial_size', 'current_size', 'male_count', 'female_count')
        }),
        ('Cost & Dates', {
            'fields': ('total_cost', 'start_date', 'created_at', 'updated_at')
        }),
    )


@admin.register(MortalityRecord)
class MortalityRecordAdmin(admin.ModelAdmin):
    list_display = ['batch', 'count', 'age_group', 'date', 'owner']
    list_filter = ['age_group', 'date']
    search_fields = ['batch__batch_code', 'batch__name', 'notes']
    ordering = ['-date']


@admin.register(IncubatorRecord)
class IncubatorRecordAdmin(admin.ModelAdmin):
    list_display = ['batch', 'inserted', 'hatched', 'not_hatched', 'spoiled', 'date']
    list_filter = ['date']
    search_fields = ['batch__batch_code', 'batch__name']
    ordering = ['-date']


@admin.register(EggRecord)
class EggRecordAdmin(admin.ModelAdmin):
    list_display = ['batch', 'date', 'collected', 'sold', 'spoiled', 'price_per_egg']
    list_filter = ['date']
    search_fields = ['batch__batch_code', 'batch__name']
    ordering = ['-date']
