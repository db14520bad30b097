"""
Feed API Views

API Endpoints:
- /api/feed/ - List (?batch=) / record a purchase
- /api/feed/{id}/ - Retrieve / delete a purchase
- /api/feed/stats/ - Bags, kilograms and money spent
"""

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated

from core.pagination import StandardResultsSetPagination, paginated_response
from .serializers import FeedRecordSerializer, FeedCreateSerializer
from .services import FeedService


class FeedListCreateView(APIView):
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination

    def get(self, request):
        records = FeedService(request.user).list_records(request.query_params.get('batch') or None)
        return paginated_response(self, request, records, FeedRecordSerializer)

    def post(self, request):
        serializer = FeedCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = FeedService(request.user).record_purchase(
            feed_type=data['feed_type'],
            price=data['price'],
            bags=data['bags'],
            kg_per_bag=data['kg_per_bag'],
            batch_id=data.get('batch'),
            log_date=data.get('date'),
            notes=data['notes'],
        )
        return Response(FeedRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class FeedDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, record_id):
        record = FeedService(request.user).get_record(record_id)
        return Response(FeedRecordSerializer(record).data)

    def delete(self, request, record_id):
        FeedService(request.user).delete_record(record_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class FeedStatsView(APIView):
    """
    GET /api/feed/stats/?batch=
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        stats = FeedService(request.user).statistics(request.query_params.get('batch') or None)
        return Response(stats)
