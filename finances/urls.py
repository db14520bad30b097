"""
URL configuration for the finances app.

`urlpatterns` is mounted at /api/transactions/ and `analytics_urlpatterns`
at /api/finances/.
"""

from django.urls import path
from .views import TransactionListCreateView, TransactionDetailView, FinancialAnalyticsView

app_name = 'finances'

urlpatterns = [
    path('', TransactionListCreateView.as_view(), name='transaction-list'),
    path('<uuid:transaction_id>/', TransactionDetailView.as_view(), name='transaction-detail'),
]

analytics_urlpatterns = [
    path('analytics/', FinancialAnalyticsView.as_view(), name='analytics'),
]
