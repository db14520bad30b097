from django.contrib.auth.models import AbstractUser
from django.db import models
import uuid


class User(AbstractUser):
    """
    Farm owner account.

    Every farm record is owned by exactly one user; users log in with
    their email address.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    email = models.EmailField(
        unique=True,
        help_text="Login email, also used for vaccination reminder emails"
    )

    name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Display name used in reminder emails"
    )

    receive_email_reminders = models.BooleanField(
        default=True,
        help_text="Send an email when a vaccination is due today or tomorrow"
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        ordering = ['-date_joined']

    def __str__(self):
        return self.name or self.email
