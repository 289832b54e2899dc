import logging

from rest_framework import generics
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from .models import User
from .permissions import IsDeveloperRole
from .serializers import (
    CustomTokenObtainPairSerializer,
    MeProfileSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class MeProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = MeProfileSerializer(request.user)
        return Response(serializer.data, status=status.HTTP_200_OK)

    def patch(self, request):
        serializer = MeProfileSerializer(
            request.user,
            data=request.data,
            partial=True
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)


class RegisterView(generics.CreateAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegisterSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info("User %s created %s account %s", request.user.username, user.role, user.username)

        return Response(
            {"success": True, "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED
        )


class UserListView(generics.ListAPIView):
    permission_classes = [IsDeveloperRole]
    serializer_class = UserSerializer

    def get_queryset(self):
        return User.objects.all().order_by("-date_joined")

    def list(self, request, *args, **kwargs):
        users = self.get_serializer(self.get_queryset(), many=True).data
        return Response({"users": users, "total": len(users)})
