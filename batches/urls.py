"""
URL configuration for the batches app.

`urlpatterns` is mounted at /api/batches/; the event log patterns are
mounted at /api/mortality/, /api/incubator/ and /api/eggs/ by core.urls.
"""

from django.urls import path
from vaccinations.views import BatchVaccinationExportView
from .views import (
    # Batches
    BatchListCreateView,
    BatchDetailView,
    FirstActiveBatchView,
    BatchVaccinesView,

    # Event logs
    MortalityListCreateView,
    MortalityDetailView,
    IncubatorListCreateView,
    IncubatorDetailView,
    EggListCreateView,
    EggDetailView,
    EggStatsView,
)

app_name = 'batches'

urlpatterns = [
    path('', BatchListCreateView.as_view(), name='batch-list'),
    path('active/first/', FirstActiveBatchView.as_view(), name='batch-first-active'),
    path('<uuid:batch_id>/', BatchDetailView.as_view(), name='batch-detail'),
    path('<uuid:batch_id>/vaccines/', BatchVaccinesView.as_view(), name='batch-vaccines'),
    path(
        '<uuid:batch_id>/vaccinations/export/',
        BatchVaccinationExportView.as_view(),
        name='batch-vaccination-export'
    ),
]

mortality_urlpatterns = [
    path('', MortalityListCreateView.as_view(), name='mortality-list'),
    path('<uuid:record_id>/', MortalityDetailView.as_view(), name='mortality-detail'),
]

incubator_urlpatterns = [
    path('', IncubatorListCreateView.as_view(), name='incubator-list'),
    path('<uuid:record_id>/', IncubatorDetailView.as_view(), name='incubator-detail'),
]

egg_urlpatterns = [
    path('', EggListCreateView.as_view(), name='egg-list'),
    path('stats/', EggStatsView.as_view(), name='egg-stats'),
    path('<uuid:record_id>/', EggDetailView.as_view(), name='egg-detail'),
]
