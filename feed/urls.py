"""
URL configuration for the feed app.

All endpoints are prefixed with /api/feed/
"""

from django.urls import path
from .views import FeedListCreateView, FeedDetailView, FeedStatsView

app_name = 'feed'

urlpatterns = [
    path('', FeedListCreateView.as_view(), name='feed-list'),
    path('stats/', FeedStatsView.as_view(), name='feed-stats'),
    path('<uuid:record_id>/', FeedDetailView.as_view(), name='feed-detail'),
]
