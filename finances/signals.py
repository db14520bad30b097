"""
Finance Signals

Ledger entries derived automatically from operational records:
1. Batch created with a total cost → Stock Purchase expense
2. EggRecord created with eggs sold at a price → Egg Sales income
3. FeedRecord created with a price → Feed expense
4. Vaccination completed with a positive actual cost → Vaccines expense (once)

The farmer records the event once; the matching transaction is created in
the same database transaction as the event, so either both are stored or
neither is. Errors propagate to the caller.
"""

import logging
from decimal import Decimal

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from .services import TransactionDerivationService

logger = logging.getLogger(__name__)


@receiver(post_save, sender='batches.Batch')
def derive_batch_purchase(sender, instance, created, raw=False, **kwargs):
    """Record the purchase expense for a newly registered batch."""
    if not created or raw:
        return
    TransactionDerivationService.record_batch_purchase(instance)


@receiver(post_save, sender='batches.EggRecord')
def derive_egg_sale(sender, instance, created, raw=False, **kwargs):
    """Record egg sale income for a new egg log."""
    if not created or raw:
        return
    TransactionDerivationService.record_egg_sale(instance)


@receiver(post_save, sender='feed.FeedRecord')
def derive_feed_purchase(sender, instance, created, raw=False, **kwargs):
    """Record the feed expense for a new feed purchase."""
    if not created or raw:
        return
    TransactionDerivationService.record_feed_purchase(instance)


def _is_billable(completed_date, actual_cost) -> bool:
    return completed_date is not None and actual_cost is not None and Decimal(actual_cost) > 0


@receiver(pre_save, sender='vaccinations.Vaccination')
def vaccination_track_billing(sender, instance, raw=False, **kwargs):
    """
    Remember whether the dose was already completed with a cost before this save.
    """
    instance._was_billable = False
    if raw or instance._state.adding:
        return

    previous = sender.objects.filter(pk=instance.pk).values('completed_date', 'actual_cost').first()
    if previous:
        instance._was_billable = _is_billable(previous['completed_date'], previous['actual_cost'])


@receiver(post_save, sender='vaccinations.Vaccination')
def derive_vaccination_cost(sender, instance, created, raw=False, **kwargs):
    """
    Record the vaccine expense when a completed dose first carries a cost.

    A dose completed without a cost and priced later is booked on the later
    save. A dose that already has its Vaccines entry is never booked again.
    """
    if raw or getattr(instance, '_was_billable', False):
        return
    if not _is_billable(instance.completed_date, instance.actual_cost):
        return
    if instance.transactions.filter(auto_generated=True).exists():
        return
    TransactionDerivationService.record_vaccination_cost(instance)
