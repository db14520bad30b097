"""
Notification Celery tasks.

Scheduled via Celery Beat (see core/celery.py).
"""
from celery import shared_task
from django.utils import timezone
from datetime import timedelta
import logging

logger = logging.getLogger(__name__)


@shared_task
def check_vaccination_reminders():
    """
    Create reminders for vaccinations due today or tomorrow.

    Runs daily. Safe to run more than once a day.
    """
    from notifications.services import ReminderService

    logger.info("Checking vaccination reminders...")
    return ReminderService().check_due()


@shared_task
def cleanup_read_notifications(days: int = 30):
    """
    Delete read notifications older than ``days``.

    Runs weekly on Sunday at 2:30 AM.
    """
    from notifications.models import Notification

    cutoff = timezone.now() - timedelta(days=days)
    deleted, _ = Notification.objects.filter(is_read=True, created_at__lt=cutoff).delete()

    logger.info(f"Deleted {deleted} read notifications older than {days} days")
    return {'deleted': deleted}
