"""
URL configuration for the notifications app.

`urlpatterns` is mounted at /api/notifications/ and `reminder_urlpatterns`
at /api/reminders/.
"""

from django.urls import path
from .views import NotificationView, ReminderCheckView

app_name = 'notifications'

urlpatterns = [
    path('', NotificationView.as_view(), name='notification-list'),
]

reminder_urlpatterns = [
    path('check/', ReminderCheckView.as_view(), name='reminder-check'),
]
