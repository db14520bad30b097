"""
Notification Services

Daily vaccination reminders and the owner-facing notification inbox.
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from core.dates import add_days, local_midnight
from core.exceptions import NotFound
from .models import Notification

logger = logging.getLogger(__name__)

REMINDER_TITLE = 'Vaccination Reminder'


def reminder_message(vaccine_name: str, batch_name: str, is_today: bool) -> str:
    when = 'TODAY' if is_today else 'TOMORROW'
    return f'Vaccination "{vaccine_name}" for batch {batch_name} is scheduled {when}!'


def _queue_reminder_email(email: str, subject: str, message: str) -> None:
    """Hand the email to the worker; the reminder itself is already stored."""
    from core.tasks import send_email_async

    try:
        send_email_async.delay(subject, message, [email])
    except Exception as e:
        logger.error(f"Failed to queue reminder email to {email}: {e}", exc_info=True)


class ReminderService:
    """
    Creates "due today" and "due tomorrow" reminders for every owner.

    Running the check more than once on the same day is safe: a vaccination
    that already has a notification created since local midnight is skipped.
    """

    def __init__(self, emails_enabled: Optional[bool] = None):
        if emails_enabled is None:
            emails_enabled = getattr(settings, 'REMINDER_EMAILS_ENABLED', False)
        self.emails_enabled = emails_enabled

    def check_due(self, now: Optional[datetime] = None) -> Dict[str, int]:
        from vaccinations.models import Vaccination

        now = now or timezone.now()
        today = timezone.localtime(now).date()
        tomorrow = add_days(today, 1)
        since = local_midnight(today)

        due = Vaccination.objects.filter(
            completed_date__isnull=True,
            scheduled_date__gte=today,
            scheduled_date__lte=tomorrow,
        ).select_related('batch', 'owner').order_by('scheduled_date')

        checked = 0
        created = 0
        queued = 0

        for vaccination in due:
            checked += 1
            already_sent = Notification.objects.filter(
                related_id=vaccination.id,
                created_at__gte=since,
            ).exists()
            if already_sent:
                continue

            owner = vaccination.owner
            message = reminder_message(
                vaccination.vaccine_name,
                vaccination.batch.name,
                vaccination.scheduled_date == today,
            )

            with transaction.atomic():
                Notification.objects.create(
                    owner=owner,
                    notification_type=Notification.NotificationType.VACCINATION,
                    title=REMINDER_TITLE,
                    message=message,
                    related_kind=Notification.RelatedKind.VACCINATION,
                    related_id=vaccination.id,
                )
                created += 1

                if self.emails_enabled and owner.email and owner.receive_email_reminders:
                    transaction.on_commit(
                        lambda email=owner.email, text=message: _queue_reminder_email(email, REMINDER_TITLE, text)
                    )
                    queued += 1

        logger.info(f"Reminder check: {checked} due, {created} notifications created, {queued} emails queued")
        return {
            'checked': checked,
            'notifications_created': created,
            'emails_queued': queued,
        }


class NotificationService:
    """One owner's notification inbox."""

    DEFAULT_LIMIT = 50

    def __init__(self, owner):
        self.owner = owner

    def list(self, unread_only: bool = False, limit: int = DEFAULT_LIMIT):
        queryset = Notification.objects.filter(owner=self.owner)
        if unread_only:
            queryset = queryset.filter(is_read=False)
        return queryset.order_by('-created_at')[:limit]

    def unread_count(self) -> int:
        return Notification.objects.filter(owner=self.owner, is_read=False).count()

    def mark_read(self, notification_id) -> Notification:
        try:
            notification = Notification.objects.get(id=notification_id, owner=self.owner)
        except (Notification.DoesNotExist, DjangoValidationError):
            raise NotFound('Notification not found')

        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=['is_read'])
        return notification

    def mark_all_read(self) -> int:
        updated = Notification.objects.filter(owner=self.owner, is_read=False).update(is_read=True)
        logger.info(f"Marked {updated} notifications read for {self.owner}")
        return updated
