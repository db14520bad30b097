"""
Background email delivery.

Reminder emails are queued here so a slow or unreachable mail server never
holds up the reminder scan that produced them.
"""
from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMessage
import logging

logger = logging.getLogger(__name__)

EMAIL_MAX_RETRIES = 3


@shared_task(bind=True, max_retries=EMAIL_MAX_RETRIES)
def send_email_async(self, subject: str, message: str, recipient_list: list):
    """
    Deliver a plain-text email.

    A refused delivery is retried after 1, 2 and then 4 minutes.

    Usage:
        send_email_async.delay('Vaccination Reminder', text, [user.email])
    """
    email = EmailMessage(
        subject=subject,
        body=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=list(recipient_list),
    )
    try:
        sent = email.send(fail_silently=False)
    except Exception as exc:
        logger.warning(
            f"Email '{subject}' to {len(recipient_list)} recipient(s) failed "
            f"on attempt {self.request.retries + 1}: {exc}"
        )
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

    logger.info(f"Email '{subject}' sent to {', '.join(recipient_list)}")
    return sent
