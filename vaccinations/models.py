"""
Vaccination Scheduling Models

Handles:
- Vaccine templates (reusable name / cost / age offset definitions)
- Vaccinations (scheduled or administered doses for one batch)
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid


def vaccination_status(scheduled_date: date, completed_date: Optional[date], today: Optional[date] = None) -> str:
    """
    Status of a dose, derived on every read.

    completed > overdue (scheduled before today) > pending.
    """
    if completed_date is not None:
        return Vaccination.Status.COMPLETED
    today = today or timezone.localdate()
    if scheduled_date < today:
        return Vaccination.Status.OVERDUE
    return Vaccination.Status.PENDING


# =============================================================================
# VACCINE TEMPLATES
# =============================================================================

class VaccineTemplate(models.Model):
    """
    A reusable vaccine definition owned by one farmer.

    Templates are only read when vaccinations are generated; a template that
    is still referenced cannot be deleted and should be deactivated instead.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='vaccine_templates'
    )

    name = models.CharField(max_length=200, help_text="Vaccine name (e.g., Newcastle, Gumboro)")
    default_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Typical cost of one administration"
    )
    age_in_days = models.PositiveIntegerField(
        help_text="Batch age in days when this vaccine is due"
    )
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, help_text="Inactive templates are not offered for scheduling")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vaccine_templates'
        ordering = ['age_in_days', 'name']
        indexes = [
            models.Index(fields=['owner', 'is_active'], name='vaccine_tpl_owner_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} (day {self.age_in_days})"


# =============================================================================
# VACCINATIONS
# =============================================================================

class Vaccination(models.Model):
    """
    A scheduled or completed dose for a batch.

    ``scheduled_date`` is batch start date + ``age_in_days``, fixed when the
    record is created. Status is never stored.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        OVERDUE = 'overdue', 'Overdue'
        COMPLETED = 'completed', 'Completed'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='vaccinations'
    )
    batch = models.ForeignKey(
        'batches.Batch',
        on_delete=models.PROTECT,
        related_name='vaccinations'
    )
    template = models.ForeignKey(
        VaccineTemplate,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='vaccinations',
        help_text="Template this dose was generated from"
    )

    vaccine_name = models.CharField(max_length=200, help_text="Copied from the template at schedule time")
    age_in_days = models.PositiveIntegerField()
    scheduled_date = models.DateField(db_index=True)
    completed_date = models.DateField(null=True, blank=True)
    actual_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vaccinations'
        ordering = ['-scheduled_date']
        indexes = [
            models.Index(fields=['owner', 'scheduled_date'], name='vaccinations_owner_sched_idx'),
            models.Index(fields=['batch', 'scheduled_date'], name='vaccinations_batch_sched_idx'),
        ]

    def __str__(self):
        return f"{self.vaccine_name} - {self.batch.batch_code} on {self.scheduled_date}"

    def get_status(self, today: Optional[date] = None) -> str:
        return vaccination_status(self.scheduled_date, self.completed_date, today)

    @property
    def is_completed(self) -> bool:
        return self.completed_date is not None
