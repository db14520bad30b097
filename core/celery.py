"""
Celery application for the Flockbook backend.

Workers deliver reminder emails; beat runs the daily vaccination reminder
scan and a weekly purge of old read notifications. Settings prefixed with
``CELERY_`` in core.settings configure the app.
"""
import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

app = Celery('flockbook')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()


# =============================================================================
# BEAT SCHEDULE
# =============================================================================
app.conf.beat_schedule = {
    'vaccination-reminders-daily': {
        'task': 'notifications.tasks.check_vaccination_reminders',
        'schedule': crontab(hour=int(os.getenv('REMINDER_CHECK_HOUR', 7)), minute=0),
    },
    'purge-read-notifications-weekly': {
        'task': 'notifications.tasks.cleanup_read_notifications',
        'schedule': crontab(hour=2, minute=30, day_of_week='sun'),
    },
}

app.conf.update(
    # Beat fires in farm-local time so "7 AM" means 7 AM on the farm
    timezone=os.getenv('TIME_ZONE', 'Africa/Accra'),
    enable_utc=True,
    task_serializer='json',
    result_serializer='json',
    accept_content=['json'],
    result_expires=6 * 3600,
    task_acks_late=True,
    task_time_limit=120,
    worker_prefetch_multiplier=1,
)
