"""
Vaccination API Views

API Endpoints:
- /api/vaccinations/ - List (?batch=&status=) / schedule manually
- /api/vaccinations/{id}/ - Complete (PATCH) / delete
- /api/vaccine-templates/ - List (?include_inactive=true) / create templates
- /api/vaccine-templates/{id}/ - Update / delete template
- /api/batches/{id}/vaccinations/export/?format=xlsx|pdf - Download schedule
"""

from django.http import HttpResponse
from rest_framework.negotiation import BaseContentNegotiation
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
import logging

from batches.services import BatchService
from core.dates import local_today
from core.exceptions import ValidationError
from core.pagination import StandardResultsSetPagination, paginated_response
from .exports import (
    PDF_CONTENT_TYPE,
    XLSX_CONTENT_TYPE,
    vaccination_pdf_bytes,
    vaccination_workbook_bytes,
)
from .serializers import (
    VaccinationSerializer,
    VaccinationCreateSerializer,
    VaccinationCompleteSerializer,
    VaccineTemplateSerializer,
    VaccineTemplateUpdateSerializer,
)
from .services import VaccinationScheduler, VaccineTemplateService

logger = logging.getLogger(__name__)


# =============================================================================
# VACCINATIONS
# =============================================================================

class VaccinationListCreateView(APIView):
    """
    GET /api/vaccinations/?batch=&status=pending|overdue|completed
    POST /api/vaccinations/
    """
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination

    def get(self, request):
        vaccinations = VaccinationScheduler(request.user).list_vaccinations(
            batch_id=request.query_params.get('batch') or None,
            status=request.query_params.get('status') or None,
        )
        return paginated_response(self, request, vaccinations, VaccinationSerializer)

    def post(self, request):
        serializer = VaccinationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        vaccination = VaccinationScheduler(request.user).schedule_manual(
            data['batch'],
            vaccine_name=data['vaccine_name'],
            age_in_days=data['age_in_days'],
            notes=data['notes'],
        )
        return Response(VaccinationSerializer(vaccination).data, status=status.HTTP_201_CREATED)


class VaccinationDetailView(APIView):
    """
    GET /api/vaccinations/{id}/
    PATCH /api/vaccinations/{id}/ - mark completed
    DELETE /api/vaccinations/{id}/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, vaccination_id):
        vaccination = VaccinationScheduler(request.user).get_vaccination(vaccination_id)
        return Response(VaccinationSerializer(vaccination).data)

    def patch(self, request, vaccination_id):
        serializer = VaccinationCompleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        vaccination = VaccinationScheduler(request.user).complete(
            vaccination_id,
            completed_date=data.get('completed_date'),
            actual_cost=data.get('actual_cost'),
            notes=data.get('notes'),
        )
        return Response(VaccinationSerializer(vaccination).data)

    def delete(self, request, vaccination_id):
        VaccinationScheduler(request.user).delete_vaccination(vaccination_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# TEMPLATES
# =============================================================================

class VaccineTemplateListCreateView(APIView):
    """
    GET /api/vaccine-templates/
    POST /api/vaccine-templates/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        include_inactive = request.query_params.get('include_inactive', 'false').lower() == 'true'
        templates = VaccineTemplateService(request.user).list_templates(include_inactive=include_inactive)
        return Response(VaccineTemplateSerializer(templates, many=True).data)

    def post(self, request):
        serializer = VaccineTemplateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        template = VaccineTemplateService(request.user).create_template(**serializer.validated_data)
        return Response(VaccineTemplateSerializer(template).data, status=status.HTTP_201_CREATED)


class VaccineTemplateDetailView(APIView):
    """
    PATCH /api/vaccine-templates/{id}/
    DELETE /api/vaccine-templates/{id}/
    """
    permission_classes = [IsAuthenticated]

    def patch(self, request, template_id):
        serializer = VaccineTemplateUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        template = VaccineTemplateService(request.user).update_template(template_id, **serializer.validated_data)
        return Response(VaccineTemplateSerializer(template).data)

    def delete(self, request, template_id):
        VaccineTemplateService(request.user).delete_template(template_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# EXPORT
# =============================================================================

class IgnoreFormatNegotiation(BaseContentNegotiation):
    """Let ``?format=`` select the export type instead of a renderer."""

    def select_parser(self, request, parsers):
        return parsers[0]

    def select_renderer(self, request, renderers, format_suffix=None):
        return (renderers[0], renderers[0].media_type)


class BatchVaccinationExportView(APIView):
    """
    GET /api/batches/{id}/vaccinations/export/?format=xlsx|pdf

    Download a batch's vaccination schedule as a spreadsheet or PDF.
    """
    permission_classes = [IsAuthenticated]
    content_negotiation_class = IgnoreFormatNegotiation

    EXPORTERS = {
        'xlsx': (vaccination_workbook_bytes, XLSX_CONTENT_TYPE),
        'pdf': (vaccination_pdf_bytes, PDF_CONTENT_TYPE),
    }

    def get(self, request, batch_id):
        export_format = request.query_params.get('format', 'xlsx').lower()
        if export_format not in self.EXPORTERS:
            raise ValidationError({'format': ["Format must be 'xlsx' or 'pdf'"]})

        batch = BatchService(request.user).get_batch(batch_id)
        vaccinations = list(VaccinationScheduler(request.user).list_vaccinations(batch_id=batch.id))

        exporter, content_type = self.EXPORTERS[export_format]
        today = local_today()
        content = exporter(batch, vaccinations, today)

        filename = f"vaccinations_{batch.batch_code}_{today.strftime('%Y%m%d')}.{export_format}"
        response = HttpResponse(content, content_type=content_type)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        logger.info(f"Exported {len(vaccinations)} vaccinations for batch {batch.batch_code} as {export_format}")
        return response
