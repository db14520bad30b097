"""
Feed Services

Recording feed purchases and summarising what has been bought.
"""

import logging
from decimal import Decimal
from typing import Dict

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

from core.dates import local_today
from core.exceptions import NotFound
from .models import FeedRecord

logger = logging.getLogger(__name__)


class FeedService:
    """Feed purchases for one owner."""

    def __init__(self, owner):
        self.owner = owner

    def get_record(self, record_id) -> FeedRecord:
        try:
            return FeedRecord.objects.get(id=record_id, owner=self.owner)
        except (FeedRecord.DoesNotExist, DjangoValidationError):
            raise NotFound('Feed record not found')

    def list_records(self, batch_id=None):
        queryset = FeedRecord.objects.filter(owner=self.owner).select_related('batch')
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)
        return queryset

    def record_purchase(self, feed_type: str, price: Decimal, bags: int, kg_per_bag: Decimal,
                        batch_id=None, log_date=None, notes: str = '') -> FeedRecord:
        """
        Store a feed purchase. A positive price is booked as a Feed expense
        in the same database transaction (see finances.signals).
        """
        record = FeedRecord(
            owner=self.owner,
            feed_type=(feed_type or '').strip(),
            price=price,
            bags=bags,
            kg_per_bag=kg_per_bag,
            date=log_date or local_today(),
            notes=notes or '',
        )

        with transaction.atomic():
            if batch_id:
                from batches.services import BatchService
                record.batch = BatchService(self.owner).get_batch(batch_id)
            record.full_clean(exclude=['total_kg'])
            record.save()

        logger.info(f"Feed purchase recorded: {record.bags} x {record.kg_per_bag}kg {record.feed_type} for {record.price}")
        return record

    def delete_record(self, record_id) -> None:
        record = self.get_record(record_id)
        record.delete()

    def statistics(self, batch_id=None) -> Dict[str, Decimal]:
        """Total bags, kilograms and money spent on feed"""
        totals = self.list_records(batch_id).aggregate(
            total_bags=Coalesce(Sum('bags'), 0),
            total_kg=Sum('total_kg'),
            total_spent=Sum('price'),
        )
        return {
            'total_bags': totals['total_bags'],
            'total_kg': Decimal(totals['total_kg'] or 0).quantize(Decimal('0.01')),
            'total_spent': Decimal(totals['total_spent'] or 0).quantize(Decimal('0.01')),
        }
