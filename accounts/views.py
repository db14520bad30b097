"""
Account API Views

API Endpoints:
- /api/auth/register/ - Create a farm owner account (returns JWT pair)
- /api/auth/login/ - Email + password login (JWT pair)
- /api/auth/token/refresh/ - Rotate the refresh token
- /api/auth/logout/ - Blacklist a refresh token
- /api/auth/me/ - Current owner profile and reminder preference
"""

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView
import logging

from core.exceptions import ValidationError
from .serializers import (
    EmailTokenObtainPairSerializer,
    OwnerRegistrationSerializer,
    OwnerSerializer,
    OwnerUpdateSerializer,
)

logger = logging.getLogger(__name__)


def _token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {'refresh': str(refresh), 'access': str(refresh.access_token)}


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = OwnerRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered farm owner {user.email}")

        return Response({
            'user': OwnerSerializer(user).data,
            'tokens': _token_pair(user),
        }, status=status.HTTP_201_CREATED)


class LoginView(TokenObtainPairView):
    """JWT pair plus the owner's basic details."""
    serializer_class = EmailTokenObtainPairSerializer


class LogoutView(APIView):
    """
    POST /api/auth/logout/  {"refresh": "..."}

    Access tokens stay valid until they expire; only the refresh token is
    revoked.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        token = request.data.get('refresh')
        if not token:
            raise ValidationError({'refresh': ['Refresh token is required']})

        try:
            RefreshToken(token).blacklist()
        except TokenError as e:
            raise ValidationError({'refresh': [str(e)]})

        return Response({'success': True})


class CurrentOwnerView(APIView):
    """
    GET /api/auth/me/
    PATCH /api/auth/me/  {"name": "...", "receive_email_reminders": false}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(OwnerSerializer(request.user).data)

    def patch(self, request):
        serializer = OwnerUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(OwnerSerializer(request.user).data)
