"""
Vaccination Services

Scheduling doses from templates or by hand, completing them, and
maintaining the owner's template library.
"""

import logging
import uuid
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Q

from core.dates import local_today
from core.exceptions import ConflictError, NotFound, ValidationError
from .models import Vaccination, VaccineTemplate

logger = logging.getLogger(__name__)


def scheduled_date_for(start_date: date, age_in_days: int) -> date:
    return start_date + timedelta(days=age_in_days)


def _valid_ids(ids: Iterable) -> List[str]:
    """Drop blank and malformed ids so lookups cannot raise on bad UUIDs."""
    valid = []
    for value in ids or []:
        try:
            valid.append(str(uuid.UUID(str(value))))
        except (TypeError, ValueError):
            logger.debug(f"Ignoring malformed template id {value!r}")
    return valid


class VaccinationScheduler:
    """
    Creates and completes vaccinations for one owner's batches.

    Scheduled dates are computed once, at creation, from the batch start
    date and the dose's age offset. They are never recomputed.
    """

    def __init__(self, owner):
        self.owner = owner

    def get_vaccination(self, vaccination_id) -> Vaccination:
        try:
            return Vaccination.objects.select_related('batch').get(id=vaccination_id, owner=self.owner)
        except (Vaccination.DoesNotExist, DjangoValidationError):
            raise NotFound('Vaccination not found')

    def _get_batch(self, batch_id):
        from batches.services import BatchService
        return BatchService(self.owner).get_batch(batch_id)

    def schedule_from_templates(self, batch, template_ids: Iterable) -> List[Vaccination]:
        """
        Bulk-create one vaccination per active template owned by the batch owner.

        Name and age offset are copied from the template, so later template
        edits do not touch existing doses. No matching templates is a no-op.
        """
        templates = VaccineTemplate.objects.filter(
            id__in=_valid_ids(template_ids),
            owner=self.owner,
            is_active=True,
        )

        vaccinations = [
            Vaccination(
                owner=self.owner,
                batch=batch,
                template=template,
                vaccine_name=template.name,
                age_in_days=template.age_in_days,
                scheduled_date=scheduled_date_for(batch.start_date, template.age_in_days),
            )
            for template in templates
        ]
        if not vaccinations:
            return []

        created = Vaccination.objects.bulk_create(vaccinations)
        logger.info(f"Scheduled {len(created)} vaccinations for batch {batch.batch_code}")
        return created

    def add_templates_to_batch(self, batch_id, template_ids: Iterable) -> List[Vaccination]:
        """Schedule templates onto an existing batch; an empty selection is rejected."""
        if not template_ids:
            raise ValidationError({'template_ids': ['Select at least one vaccine template']})

        with transaction.atomic():
            batch = self._get_batch(batch_id)
            return self.schedule_from_templates(batch, template_ids)

    def schedule_manual(self, batch_id, vaccine_name: str, age_in_days: int, notes: str = '') -> Vaccination:
        """Schedule a single dose that does not come from a template."""
        if not vaccine_name or not str(vaccine_name).strip():
            raise ValidationError({'vaccine_name': ['Vaccine name is required']})
        try:
            age_in_days = int(age_in_days)
        except (TypeError, ValueError):
            raise ValidationError({'age_in_days': ['A whole number is required']})
        if age_in_days < 0:
            raise ValidationError({'age_in_days': ['Age in days cannot be negative']})

        batch = self._get_batch(batch_id)
        vaccination = Vaccination(
            owner=self.owner,
            batch=batch,
            vaccine_name=str(vaccine_name).strip(),
            age_in_days=age_in_days,
            scheduled_date=scheduled_date_for(batch.start_date, age_in_days),
            notes=notes or '',
        )
        vaccination.full_clean()
        vaccination.save()
        logger.info(f"Scheduled {vaccination.vaccine_name} for batch {batch.batch_code} on {vaccination.scheduled_date}")
        return vaccination

    def complete(self, vaccination_id, completed_date: Optional[date] = None,
                 actual_cost: Optional[Decimal] = None, notes: Optional[str] = None) -> Vaccination:
        """
        Mark a dose as administered.

        A positive ``actual_cost`` is booked as a Vaccines expense dated at the
        completion date (see finances.signals).
        """
        with transaction.atomic():
            vaccination = self.get_vaccination(vaccination_id)
            vaccination.completed_date = completed_date or local_today()
            if actual_cost is not None:
                vaccination.actual_cost = actual_cost
            if notes is not None:
                vaccination.notes = notes
            vaccination.full_clean()
            vaccination.save()

        logger.info(f"Completed {vaccination.vaccine_name} for batch {vaccination.batch.batch_code}")
        return vaccination

    def list_vaccinations(self, batch_id=None, status: Optional[str] = None, today: Optional[date] = None):
        """
        Vaccinations newest scheduled first, optionally filtered by batch and
        derived status. Status filtering is expressed against ``today``.
        """
        queryset = Vaccination.objects.filter(owner=self.owner).select_related('batch')
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)

        today = today or local_today()
        if status == Vaccination.Status.COMPLETED:
            queryset = queryset.filter(completed_date__isnull=False)
        elif status == Vaccination.Status.OVERDUE:
            queryset = queryset.filter(completed_date__isnull=True, scheduled_date__lt=today)
        elif status == Vaccination.Status.PENDING:
            queryset = queryset.filter(Q(completed_date__isnull=True) & Q(scheduled_date__gte=today))

        return queryset.order_by('-scheduled_date')

    def delete_vaccination(self, vaccination_id) -> None:
        vaccination = self.get_vaccination(vaccination_id)
        vaccination.delete()
        logger.info(f"Deleted vaccination {vaccination_id}")


class VaccineTemplateService:
    """CRUD for one owner's vaccine templates."""

    UPDATABLE_FIELDS = ('name', 'default_cost', 'age_in_days', 'description', 'is_active')

    def __init__(self, owner):
        self.owner = owner

    def get_template(self, template_id) -> VaccineTemplate:
        try:
            return VaccineTemplate.objects.get(id=template_id, owner=self.owner)
        except (VaccineTemplate.DoesNotExist, DjangoValidationError):
            raise NotFound('Vaccine template not found')

    def list_templates(self, include_inactive: bool = False):
        queryset = VaccineTemplate.objects.filter(owner=self.owner)
        if not include_inactive:
            queryset = queryset.filter(is_active=True)
        return queryset.order_by('age_in_days', 'name')

    def create_template(self, name: str, age_in_days: int, default_cost: Decimal = Decimal('0.00'),
                        description: str = '', is_active: bool = True) -> VaccineTemplate:
        template = VaccineTemplate(
            owner=self.owner,
            name=(name or '').strip(),
            age_in_days=age_in_days,
            default_cost=default_cost,
            description=description or '',
            is_active=is_active,
        )
        template.full_clean()
        template.save()
        logger.info(f"Created vaccine template {template.name} (day {template.age_in_days})")
        return template

    def update_template(self, template_id, **changes) -> VaccineTemplate:
        unknown = sorted(set(changes) - set(self.UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError({field: ['Unknown field'] for field in unknown})

        template = self.get_template(template_id)
        for field, value in changes.items():
            setattr(template, field, value)
        template.full_clean()
        template.save()
        return template

    def delete_template(self, template_id) -> None:
        """
        Delete a template nothing refers to.

        Raises ConflictError with the number of referencing vaccinations
        otherwise; the caller should deactivate the template instead.
        """
        with transaction.atomic():
            template = self.get_template(template_id)
            references = Vaccination.objects.filter(template=template).count()
            if references:
                raise ConflictError(
                    f"Cannot delete template: {references} vaccination(s) reference this template. "
                    f"Consider deactivating instead."
                )
            template.delete()

        logger.info(f"Deleted vaccine template {template_id}")
