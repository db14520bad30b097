"""
Batch Lifecycle API Views

API Endpoints:
- /api/batches/ - List/create batches
- /api/batches/{id}/ - Retrieve/edit/delete a batch
- /api/batches/active/first/ - Oldest active batch
- /api/batches/{id}/vaccines/ - Schedule vaccine templates onto a batch
- /api/mortality/ - Mortality events
- /api/incubator/ - Hatching logs
- /api/eggs/ - Egg collection logs
- /api/eggs/stats/ - Monthly egg totals
"""

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
import logging

from core.pagination import StandardResultsSetPagination, paginated_response
from vaccinations.serializers import VaccinationSerializer
from vaccinations.services import VaccinationScheduler
from .serializers import (
    BatchSerializer,
    BatchCreateSerializer,
    BatchUpdateSerializer,
    TemplateSelectionSerializer,
    MortalityRecordSerializer,
    MortalityCreateSerializer,
    IncubatorRecordSerializer,
    IncubatorCreateSerializer,
    EggRecordSerializer,
    EggCreateSerializer,
)
from .services import BatchService, egg_statistics

logger = logging.getLogger(__name__)


def _parse_bool(value):
    if value is None or value == '':
        return None
    return str(value).lower() in ('true', '1', 'yes')


# =============================================================================
# BATCHES
# =============================================================================

class BatchListCreateView(APIView):
    """
    GET /api/batches/?archived=&category=
    POST /api/batches/
    """
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination

    def get(self, request):
        batches = BatchService(request.user).list_batches(
            archived=_parse_bool(request.query_params.get('archived')),
            category=request.query_params.get('category'),
        )
        return paginated_response(self, request, batches, BatchSerializer)

    def post(self, request):
        serializer = BatchCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        batch = BatchService(request.user).create_batch(
            name=data['name'],
            breed=data['breed'],
            category=data['category'],
            initial_size=data['initial_size'],
            start_date=data['start_date'],
            total_cost=data.get('total_cost'),
            batch_code=data.get('batch_code') or None,
            vaccine_template_ids=data.get('vaccine_template_ids'),
            male_count=data.get('male_count'),
            female_count=data.get('female_count'),
        )
        return Response(BatchSerializer(batch).data, status=status.HTTP_201_CREATED)


class BatchDetailView(APIView):
    """
    GET /api/batches/{id}/
    PATCH /api/batches/{id}/
    DELETE /api/batches/{id}/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, batch_id):
        batch = BatchService(request.user).get_batch(batch_id)
        return Response(BatchSerializer(batch).data)

    def patch(self, request, batch_id):
        serializer = BatchUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        batch = BatchService(request.user).update_batch(batch_id, **serializer.validated_data)
        return Response(BatchSerializer(batch).data)

    def delete(self, request, batch_id):
        removed = BatchService(request.user).delete_batch(batch_id)
        return Response({
            'success': True,
            'message': 'Batch deleted successfully',
            'removed': removed,
        })


class FirstActiveBatchView(APIView):
    """
    GET /api/batches/active/first/

    Oldest batch that is not archived, or null when there is none.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        batch = BatchService(request.user).first_active_batch()
        return Response({'batch': BatchSerializer(batch).data if batch else None})


class BatchVaccinesView(APIView):
    """
    POST /api/batches/{id}/vaccines/

    Body: {"template_ids": [...]}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, batch_id):
        serializer = TemplateSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        created = VaccinationScheduler(request.user).add_templates_to_batch(
            batch_id, serializer.validated_data['template_ids']
        )
        return Response({
            'created': len(created),
            'vaccinations': VaccinationSerializer(created, many=True).data,
        }, status=status.HTTP_201_CREATED)


# =============================================================================
# MORTALITY
# =============================================================================

class MortalityListCreateView(APIView):
    """
    GET /api/mortality/?batch=
    POST /api/mortality/
    """
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination

    def get(self, request):
        records = BatchService(request.user).list_mortality(request.query_params.get('batch'))
        return paginated_response(self, request, records, MortalityRecordSerializer)

    def post(self, request):
        serializer = MortalityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = BatchService(request.user).record_mortality(
            data['batch'],
            count=data['count'],
            notes=data['notes'],
            occurred_at=data.get('date'),
        )
        return Response(MortalityRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class MortalityDetailView(APIView):
    """
    GET /api/mortality/{id}/
    DELETE /api/mortality/{id}/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, record_id):
        record = BatchService(request.user).get_mortality(record_id)
        return Response(MortalityRecordSerializer(record).data)

    def delete(self, request, record_id):
        BatchService(request.user).delete_mortality(record_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# INCUBATOR
# =============================================================================

class IncubatorListCreateView(APIView):
    """
    GET /api/incubator/?batch=
    POST /api/incubator/
    """
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination

    def get(self, request):
        records = BatchService(request.user).list_hatches(request.query_params.get('batch'))
        return paginated_response(self, request, records, IncubatorRecordSerializer)

    def post(self, request):
        serializer = IncubatorCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = BatchService(request.user).record_hatch(
            data['batch'],
            inserted=data['inserted'],
            spoiled=data['spoiled'],
            hatched=data['hatched'],
            not_hatched=data['not_hatched'],
            log_date=data.get('date'),
            notes=data['notes'],
        )
        return Response(IncubatorRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class IncubatorDetailView(APIView):
    """
    GET /api/incubator/{id}/
    DELETE /api/incubator/{id}/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, record_id):
        record = BatchService(request.user).get_hatch(record_id)
        return Response(IncubatorRecordSerializer(record).data)

    def delete(self, request, record_id):
        BatchService(request.user).delete_hatch(record_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# EGGS
# =============================================================================

class EggListCreateView(APIView):
    """
    GET /api/eggs/?batch=
    POST /api/eggs/
    """
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination

    def get(self, request):
        records = BatchService(request.user).list_eggs(request.query_params.get('batch'))
        return paginated_response(self, request, records, EggRecordSerializer)

    def post(self, request):
        serializer = EggCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = BatchService(request.user).record_eggs(
            data['batch'],
            collected=data['collected'],
            sold=data['sold'],
            spoiled=data['spoiled'],
            price_per_egg=data.get('price_per_egg'),
            log_date=data.get('date'),
            notes=data['notes'],
        )
        return Response(EggRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class EggDetailView(APIView):
    """
    GET /api/eggs/{id}/
    DELETE /api/eggs/{id}/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, record_id):
        record = BatchService(request.user).get_eggs(record_id)
        return Response(EggRecordSerializer(record).data)

    def delete(self, request, record_id):
        BatchService(request.user).delete_eggs(record_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EggStatsView(APIView):
    """
    GET /api/eggs/stats/?batch=&months=6
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            months = int(request.query_params.get('months', 6))
        except ValueError:
            months = 6
        months = min(max(months, 1), 24)

        return Response(egg_statistics(
            request.user,
            batch_id=request.query_params.get('batch') or None,
            months=months,
        ))
