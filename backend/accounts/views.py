import logging

from django.contrib.auth import get_user_model
from rest_framework import generics, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from .permissions_api import IsAdminRole
from .principal import Principal
from .serializers import (
    RegisterSerializer,
    RegistrationRejectSerializer,
    RegistrationSerializer,
    MeSerializer,
    IdentifierTokenObtainPairSerializer,
)
from .services import notifications, registrations

log = logging.getLogger(__name__)

User = get_user_model()


class CustomTokenObtainPairView(TokenObtainPairView):
    # identifier may be email, username, student roll_number or faculty employee_code
    serializer_class = IdentifierTokenObtainPairSerializer


class RegisterView(generics.CreateAPIView):
    serializer_class = RegisterSerializer
    permission_classes = (permissions.AllowAny,)
    authentication_classes = ()

    def perform_create(self, serializer):
        user = serializer.save()
        log.info('Registered student account user=%s (pending approval)', user.pk)
        notifications.send_on_commit(notifications.REGISTRATION, {
            'recipient': user.email,
            'name': user.get_full_name() or user.username,
            'username': user.username,
        })


class RegistrationListView(APIView):
    """Self-registrations; ``?status=`` defaults to ``pending``."""
    permission_classes = (IsAdminRole,)

    def get(self, request):
        status_param = request.query_params.get('status') or User.RegistrationStatus.PENDING
        qs = registrations.self_registrations(status_param)
        return Response(RegistrationSerializer(qs, many=True).data)


class RegistrationApproveView(APIView):
    permission_classes = (IsAdminRole,)

    def post(self, request, user_id: int):
        user = registrations.approve_registration(Principal.from_request(request), user_id)
        return Response(RegistrationSerializer(user).data)


class RegistrationRejectView(APIView):
    permission_classes = (IsAdminRole,)

    def post(self, request, user_id: int):
        ser = RegistrationRejectSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = registrations.reject_registration(Principal.from_request(request), user_id, ser.validated_data['reason'])
        return Response(RegistrationSerializer(user).data)


class RegistrationStatsView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request):
        return Response(registrations.registration_stats())


class MeView(APIView):
    permission_classes = (permissions.IsAuthenticated,)

    def get(self, request):
        serializer = MeSerializer(request.user)
        return Response(serializer.data)
