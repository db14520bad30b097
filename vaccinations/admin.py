from django.contrib import admin

from .models import VaccineTemplate, Vaccination


@admin.register(VaccineTemplate)
class VaccineTemplateAdmin(admin.ModelAdmin):
    list_display = ['name', 'age_in_days', 'default_cost', 'is_active', 'owner']
    list_filter = ['is_active']
    search_fields = ['name', 'description', 'owner__email']
    ordering = ['owner', 'age_in_days', 'name']


@admin.register(Vaccination)
class VaccinationAdmin(admin.ModelAdmin):
    list_display = ['vaccine_name', 'batch', 'scheduled_date', 'completed_date', 'status_display', 'actual_cost']
    list_filter = ['scheduled_date', 'completed_date']
    search_fields = ['vaccine_name', 'batch__batch_code', 'batch__name']
    readonly_fields = ['scheduled_date', 'created_at', 'updated_at']
    ordering = ['-scheduled_date']

    @admin.display(description='Status')
    def status_display(self, obj):
        return obj.get_status().title()
