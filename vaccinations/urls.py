"""
URL configuration for the vaccinations app.

`urlpatterns` is mounted at /api/vaccinations/ and `template_urlpatterns`
at /api/vaccine-templates/.
"""

from django.urls import path
from .views import (
    VaccinationListCreateView,
    VaccinationDetailView,
    VaccineTemplateListCreateView,
    VaccineTemplateDetailView,
)

app_name = 'vaccinations'

urlpatterns = [
    path('', VaccinationListCreateView.as_view(), name='vaccination-list'),
    path('<uuid:vaccination_id>/', VaccinationDetailView.as_view(), name='vaccination-detail'),
]

template_urlpatterns = [
    path('', VaccineTemplateListCreateView.as_view(), name='template-list'),
    path('<uuid:template_id>/', VaccineTemplateDetailView.as_view(), name='template-detail'),
]
