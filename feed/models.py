"""
Feed Purchase Models

Tracks feed bought for the farm. A purchase with a positive price is
mirrored into the ledger as a "Feed" expense.
"""

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone


class FeedRecord(models.Model):
    """
    Record of a feed purchase.

    ``total_kg`` is stored (it is summed in stats) and recalculated from
    bags × kg per bag on every save.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='feed_records'
    )
    batch = models.ForeignKey(
        'batches.Batch',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='feed_records',
        help_text="Batch the feed was bought for, if any"
    )

    feed_type = models.CharField(
        max_length=100,
        help_text="Feed type (e.g., Starter Mash, Grower, Layer Mash)"
    )
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Total price paid"
    )
    bags = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Number of bags purchased"
    )
    kg_per_bag = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.1'))],
        help_text="Weight per bag in kilograms"
    )
    total_kg = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Total quantity in kilograms (auto-calculated from bags × weight)"
    )
    date = models.DateField(default=timezone.localdate, db_index=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'feed_records'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['owner', 'date'], name='feed_records_owner_date_idx'),
        ]

    def __str__(self):
        return f"{self.feed_type} - {self.bags} bags on {self.date}"

    def calculate_total_kg(self) -> Decimal:
        return (Decimal(self.bags) * Decimal(self.kg_per_bag)).quantize(Decimal('0.01'))

    def clean(self):
        super().clean()
        try:
            total_kg = self.calculate_total_kg()
        except (TypeError, ValueError, ArithmeticError):
            # bags or kg_per_bag already failed field validation
            return

        field = self._meta.get_field('total_kg')
        limit = Decimal(10) ** (field.max_digits - field.decimal_places)
        if total_kg >= limit:
            raise ValidationError({
                'bags': f"Total weight of bags × kg per bag must be under {limit:,} kg"
            })

    def save(self, *args, **kwargs):
        self.total_kg = self.calculate_total_kg()
        super().save(*args, **kwargs)
