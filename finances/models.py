"""
Financial Ledger Models

A single Transaction table holds every income and expense entry, whether
typed in by the farmer or derived automatically from operational events
(batch purchase, egg sale, feed purchase, vaccination cost).
"""

from decimal import Decimal
from typing import NamedTuple, Optional

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid


class TransactionType(models.TextChoices):
    INCOME = 'income', 'Income'
    EXPENSE = 'expense', 'Expense'


class ExpenseCategory(models.TextChoices):
    """Suggested expense categories; the ledger accepts any text."""
    FEED = 'Feed', 'Feed'
    STOCK_PURCHASE = 'Stock Purchase', 'Stock Purchase'
    MEDICATION = 'Medication', 'Medication'
    VACCINES = 'Vaccines', 'Vaccines'
    UTILITIES = 'Utilities', 'Utilities'
    LABOR = 'Labor', 'Labor'
    EQUIPMENT = 'Equipment', 'Equipment'
    TRANSPORTATION = 'Transportation', 'Transportation'
    REPAIRS = 'Repairs & Maintenance', 'Repairs & Maintenance'
    OTHER = 'Other Expenses', 'Other Expenses'


class IncomeCategory(models.TextChoices):
    """Suggested income categories; the ledger accepts any text."""
    EGG_SALES = 'Egg Sales', 'Egg Sales'
    CHICKEN_SALES = 'Chicken Sales', 'Chicken Sales'
    MANURE_SALES = 'Manure Sales', 'Manure Sales'
    OTHER = 'Other Income', 'Other Income'


class SourceRef(NamedTuple):
    """The record that caused a transaction: kind is one of SOURCE_KINDS."""
    kind: str
    id: uuid.UUID


SOURCE_KINDS = ('vaccination', 'egg', 'feed', 'batch')


class Transaction(models.Model):
    """
    Income or expense ledger entry.

    The optional links point at the record that produced the entry. Entries
    created by the derivation paths are flagged ``auto_generated`` and are
    read-only afterwards; all entries can be deleted directly.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='transactions'
    )

    transaction_type = models.CharField(
        max_length=10,
        choices=TransactionType.choices,
        db_index=True
    )
    category = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Free text; see ExpenseCategory / IncomeCategory for suggested values"
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    description = models.CharField(max_length=255)
    transaction_date = models.DateField(default=timezone.localdate, db_index=True)

    # Links to the record that caused this entry
    batch = models.ForeignKey(
        'batches.Batch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    feed_record = models.ForeignKey(
        'feed.FeedRecord',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    egg_record = models.ForeignKey(
        'batches.EggRecord',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    vaccination = models.ForeignKey(
        'vaccinations.Vaccination',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    auto_generated = models.BooleanField(
        default=False,
        editable=False,
        help_text="Created from a batch, egg, feed or vaccination event"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'transactions'
        ordering = ['-transaction_date', '-created_at']
        indexes = [
            models.Index(fields=['owner', 'transaction_date'], name='transactions_owner_date_idx'),
            models.Index(fields=['owner', 'transaction_type'], name='transactions_owner_type_idx'),
            models.Index(fields=['batch', 'transaction_date'], name='transactions_batch_date_idx'),
        ]

    def __str__(self):
        return f"{self.get_transaction_type_display()} {self.category}: {self.amount} on {self.transaction_date}"

    @property
    def source(self) -> Optional[SourceRef]:
        """Most specific originating record, or None for manual entries"""
        if self.vaccination_id:
            return SourceRef('vaccination', self.vaccination_id)
        if self.egg_record_id:
            return SourceRef('egg', self.egg_record_id)
        if self.feed_record_id:
            return SourceRef('feed', self.feed_record_id)
        if self.batch_id:
            return SourceRef('batch', self.batch_id)
        return None
