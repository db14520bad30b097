"""
Notification API Views

API Endpoints:
- /api/notifications/ - GET inbox (?unread=true), PATCH to mark read
- /api/reminders/check/ - POST to run the vaccination reminder scan now
"""

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
import logging

from .serializers import NotificationSerializer, NotificationUpdateSerializer
from .services import NotificationService, ReminderService

logger = logging.getLogger(__name__)


class NotificationView(APIView):
    """
    GET /api/notifications/?unread=true
    PATCH /api/notifications/  {"id": "..."} or {"mark_all": true}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        service = NotificationService(request.user)
        unread_only = request.query_params.get('unread', 'false').lower() == 'true'

        notifications = service.list(unread_only=unread_only)
        return Response({
            'notifications': NotificationSerializer(notifications, many=True).data,
            'unread_count': service.unread_count(),
        })

    def patch(self, request):
        serializer = NotificationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        service = NotificationService(request.user)

        if data['mark_all']:
            updated = service.mark_all_read()
            return Response({'success': True, 'updated': updated})

        notification = service.mark_read(data['id'])
        return Response(NotificationSerializer(notification).data)


class ReminderCheckView(APIView):
    """
    POST /api/reminders/check/

    Runs the same scan as the daily beat task, for every owner.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        result = ReminderService().check_due()
        logger.info(f"Reminder check triggered by {request.user}: {result}")
        return Response(result)
