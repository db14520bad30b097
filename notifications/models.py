"""
In-app notifications.

The related record is stored as a (kind, id) pair so reminders can point
at vaccinations, batches or mortality events without a generic foreign key.
"""

from django.conf import settings
from django.db import models
import uuid


class Notification(models.Model):
    """In-app notification for a farm owner."""

    class NotificationType(models.TextChoices):
        VACCINATION = 'vaccination', 'Vaccination'
        MORTALITY = 'mortality', 'Mortality'
        GENERAL = 'general', 'General'

    class RelatedKind(models.TextChoices):
        VACCINATION = 'vaccination', 'Vaccination'
        BATCH = 'batch', 'Batch'
        MORTALITY = 'mortality', 'Mortality'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )

    notification_type = models.CharField(
        max_length=20,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL
    )
    title = models.CharField(max_length=200)
    message = models.TextField()

    related_kind = models.CharField(max_length=20, choices=RelatedKind.choices, blank=True)
    related_id = models.UUIDField(null=True, blank=True, db_index=True)

    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', 'is_read'], name='notifications_owner_read_idx'),
            models.Index(fields=['related_id', 'created_at'], name='notifications_related_idx'),
        ]

    def __str__(self):
        return f"{self.title} -> {self.owner}"

    @property
    def related(self):
        """(kind, id) of the related record, or None"""
        if not self.related_kind or self.related_id is None:
            return None
        return (self.related_kind, self.related_id)
