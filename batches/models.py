"""
Batch Lifecycle Models

Handles:
- Batches (cohorts of birds managed and reported on as one unit)
- Mortality events (the only shrink path for a batch)
- Incubator logs (hatching, the only growth path for a batch)
- Egg collection logs (per batch, per day)
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid


# Age thresholds for the display badge
CHICK_MAX_AGE_DAYS = 90
LAYING_AGE_DAYS = 135


def age_status(start_date: date, archived: bool, today: Optional[date] = None) -> str:
    """
    Age-derived display status of a batch.

    Archived overrides everything; otherwise under 90 days is a chick,
    135 days and older is a layer and anything between is growing.
    """
    if archived:
        return Batch.AgeStatus.ARCHIVED
    today = today or timezone.localdate()
    age = (today - start_date).days
    if age < CHICK_MAX_AGE_DAYS:
        return Batch.AgeStatus.CHICK
    if age >= LAYING_AGE_DAYS:
        return Batch.AgeStatus.LAYER
    return Batch.AgeStatus.GROWING


# =============================================================================
# BATCH MODEL
# =============================================================================

class Batch(models.Model):
    """
    A cohort of birds under single management.

    ``batch_code``, ``start_date`` and ``initial_size`` never change after
    creation. ``current_size`` only moves through mortality and hatching.
    """

    class Category(models.TextChoices):
        CHICK = 'chick', 'Chick'
        ADULT = 'adult', 'Adult'

    class AgeStatus(models.TextChoices):
        CHICK = 'chick', 'Chick'
        GROWING = 'growing', 'Growing'
        LAYER = 'layer', 'Layer'
        ARCHIVED = 'archived', 'Archived'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='batches'
    )

    # Identification
    batch_code = models.CharField(
        max_length=20,
        unique=True,
        help_text="Upper-case batch identifier, generated when not supplied"
    )
    name = models.CharField(max_length=200)
    breed = models.CharField(
        max_length=100,
        help_text="Bird breed (e.g., Isa Brown, Kuroiler, Sasso)"
    )
    category = models.CharField(
        max_length=10,
        choices=Category.choices,
        default=Category.CHICK,
        help_text="Manually maintained category; copied onto mortality records"
    )

    # Size
    initial_size = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Number of birds at registration"
    )
    current_size = models.PositiveIntegerField(
        default=0,
        help_text="Current number of live birds"
    )
    male_count = models.PositiveIntegerField(null=True, blank=True)
    female_count = models.PositiveIntegerField(null=True, blank=True)

    start_date = models.DateField(help_text="Date the batch started on the farm")
    archived = models.BooleanField(default=False, db_index=True)

    # Financial
    total_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Total acquisition cost of the batch"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'batches'
        ordering = ['-start_date', '-created_at']
        verbose_name_plural = 'Batches'
        indexes = [
            models.Index(fields=['owner', 'archived'], name='batches_owner_archived_idx'),
            models.Index(fields=['owner', 'start_date'], name='batches_owner_start_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.batch_code})"

    def save(self, *args, **kwargs):
        self.batch_code = (self.batch_code or '').strip().upper()
        if self._state.adding:
            self.current_size = self.initial_size
        super().save(*args, **kwargs)

    def clean(self):
        errors = {}

        if not self.batch_code:
            errors['batch_code'] = 'Batch code is required'

        males = self.male_count or 0
        females = self.female_count or 0
        size = self.initial_size if self._state.adding else self.current_size
        if (self.male_count is not None or self.female_count is not None) and males + females > (size or 0):
            errors['male_count'] = (
                f"Gender counts ({males} males + {females} females = {males + females}) "
                f"cannot exceed batch size ({size})"
            )

        if errors:
            raise ValidationError(errors)

    @property
    def cost_per_bird(self) -> Optional[Decimal]:
        """Total cost spread over the initial size, None when no cost is recorded"""
        if self.total_cost is None or not self.initial_size:
            return None
        return (Decimal(self.total_cost) / self.initial_size).quantize(Decimal('0.01'))

    def age_in_days(self, today: Optional[date] = None) -> int:
        today = today or timezone.localdate()
        return (today - self.start_date).days

    def get_age_status(self, today: Optional[date] = None) -> str:
        return age_status(self.start_date, self.archived, today)

    @property
    def can_lay_eggs(self) -> bool:
        return self.age_in_days() >= LAYING_AGE_DAYS


# =============================================================================
# MORTALITY RECORDS
# =============================================================================

class MortalityRecord(models.Model):
    """
    One death event for a batch.

    ``age_group`` is a snapshot of the batch category when the record was
    made, not a live reference.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='mortality_records'
    )
    batch = models.ForeignKey(
        Batch,
        on_delete=models.PROTECT,
        related_name='mortality_records'
    )

    count = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Number of birds that died"
    )
    age_group = models.CharField(max_length=10, choices=Batch.Category.choices)
    date = models.DateTimeField(default=timezone.now, db_index=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'mortality_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['owner', 'date'], name='mortality_owner_date_idx'),
        ]

    def __str__(self):
        return f"{self.batch.batch_code} - {self.count} birds on {self.date:%Y-%m-%d}"


# =============================================================================
# INCUBATOR RECORDS
# =============================================================================

class IncubatorRecord(models.Model):
    """Eggs set in the incubator for a batch and how they turned out."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='incubator_records'
    )
    batch = models.ForeignKey(
        Batch,
        on_delete=models.PROTECT,
        related_name='incubator_records'
    )

    inserted = models.PositiveIntegerField(default=0)
    spoiled = models.PositiveIntegerField(default=0)
    hatched = models.PositiveIntegerField(default=0)
    not_hatched = models.PositiveIntegerField(default=0)
    date = models.DateField(default=timezone.localdate, db_index=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'incubator_records'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.batch.batch_code} - {self.hatched} hatched on {self.date}"

    @property
    def hatch_rate(self) -> Decimal:
        """Hatched eggs as a percentage of inserted eggs"""
        if not self.inserted:
            return Decimal('0.00')
        return (Decimal(self.hatched) / self.inserted * 100).quantize(Decimal('0.01'))


# =============================================================================
# EGG RECORDS
# =============================================================================

class EggRecord(models.Model):
    """Per-batch egg collection for a day."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='egg_records'
    )
    batch = models.ForeignKey(
        Batch,
        on_delete=models.PROTECT,
        related_name='egg_records'
    )

    date = models.DateField(default=timezone.localdate, db_index=True)
    collected = models.PositiveIntegerField(default=0)
    sold = models.PositiveIntegerField(default=0)
    spoiled = models.PositiveIntegerField(default=0)
    price_per_egg = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'egg_records'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['owner', 'date'], name='egg_records_owner_date_idx'),
            models.Index(fields=['batch', 'date'], name='egg_records_batch_date_idx'),
        ]

    def __str__(self):
        return f"{self.batch.batch_code} - {self.collected} eggs on {self.date}"

    @property
    def total_revenue(self) -> Optional[Decimal]:
        if self.price_per_egg is None:
            return None
        return (self.sold * Decimal(self.price_per_egg)).quantize(Decimal('0.01'))
