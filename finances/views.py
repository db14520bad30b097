"""
Finance API Views

API Endpoints:
- /api/transactions/ - List (?type=&category=&batch=&start_date=&end_date=) / create
- /api/transactions/{id}/ - Retrieve / update / delete
- /api/finances/analytics/?period=&batch= - Period summary, breakdown and trend
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated

from core.pagination import StandardResultsSetPagination
from .filters import TransactionFilter
from .serializers import (
    TransactionSerializer,
    TransactionCreateSerializer,
    TransactionUpdateSerializer,
    FinancialAnalyticsSerializer,
)
from .services import FinancialAnalyticsService, TransactionService


class TransactionListCreateView(generics.ListAPIView):
    """
    GET /api/transactions/?type=&category=&batch=&start_date=&end_date=
    POST /api/transactions/
    """
    permission_classes = [IsAuthenticated]
    serializer_class = TransactionSerializer
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = TransactionFilter

    def get_queryset(self):
        return TransactionService(self.request.user).list_transactions()

    def post(self, request):
        serializer = TransactionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        entry = TransactionService(request.user).create_transaction(
            transaction_type=data['transaction_type'],
            category=data['category'],
            amount=data['amount'],
            description=data['description'],
            transaction_date=data.get('transaction_date'),
            batch_id=data.get('batch'),
            feed_record_id=data.get('feed_record'),
            egg_record_id=data.get('egg_record'),
        )
        return Response(TransactionSerializer(entry).data, status=status.HTTP_201_CREATED)


class TransactionDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, transaction_id):
        entry = TransactionService(request.user).get_transaction(transaction_id)
        return Response(TransactionSerializer(entry).data)

    def patch(self, request, transaction_id):
        serializer = TransactionUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        entry = TransactionService(request.user).update_transaction(transaction_id, **serializer.validated_data)
        return Response(TransactionSerializer(entry).data)

    def delete(self, request, transaction_id):
        TransactionService(request.user).delete_transaction(transaction_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class FinancialAnalyticsView(APIView):
    """
    GET /api/finances/analytics/?period=30days|1month|3months|6months|1year&batch=

    Unknown periods fall back to 6 months. ``zero_fill=false`` leaves months
    without transactions out of the trend.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        params = request.query_params
        analytics = FinancialAnalyticsService(request.user).analytics(
            period=params.get('period'),
            batch_id=params.get('batch') or None,
            zero_fill=params.get('zero_fill', 'true').lower() != 'false',
        )
        return Response(FinancialAnalyticsSerializer(analytics).data)
