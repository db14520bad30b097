"""
URL configuration for the Flockbook project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

from batches.urls import (
    mortality_urlpatterns,
    incubator_urlpatterns,
    egg_urlpatterns,
)
from vaccinations.urls import template_urlpatterns
from finances.urls import analytics_urlpatterns
from notifications.urls import reminder_urlpatterns

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/batches/', include('batches.urls')),  # Batch lifecycle
    path('api/mortality/', include((mortality_urlpatterns, 'mortality'))),  # Mortality events
    path('api/incubator/', include((incubator_urlpatterns, 'incubator'))),  # Hatching logs
    path('api/eggs/', include((egg_urlpatterns, 'eggs'))),  # Egg collection logs
    path('api/feed/', include('feed.urls')),  # Feed purchases
    path('api/vaccinations/', include('vaccinations.urls')),  # Vaccination schedule
    path('api/vaccine-templates/', include((template_urlpatterns, 'vaccine_templates'))),  # Reusable templates
    path('api/transactions/', include('finances.urls')),  # Ledger
    path('api/finances/', include((analytics_urlpatterns, 'finance_analytics'))),  # Period analytics
    path('api/notifications/', include('notifications.urls')),  # In-app notifications
    path('api/reminders/', include((reminder_urlpatterns, 'reminders'))),  # On-demand reminder scan
]
