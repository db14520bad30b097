"""
Calendar helpers shared by scheduling, stats and analytics.

"Today" is always the local date in ``settings.TIME_ZONE``.
"""

from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta
from django.utils import timezone


def local_today() -> date:
    return timezone.localdate()


def local_midnight(day: date) -> datetime:
    """Timezone-aware start of ``day`` in the current timezone."""
    return timezone.make_aware(datetime.combine(day, time.min))


def month_start(day: date) -> date:
    return day.replace(day=1)


def iter_month_starts(start: date, end: date):
    """Yield the first day of every month from ``start`` to ``end`` inclusive."""
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        yield current
        current = current + relativedelta(months=1)


def month_key(day) -> str:
    return day.strftime('%Y-%m')


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)
