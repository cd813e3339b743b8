from rest_framework_simplejwt import views as jwt_views
from rest_framework import views as drf_views, generics, permissions, status
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.filters import SearchFilter, OrderingFilter
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from . import serializers as my_serializers
from . import services
from .models import CustomUser
from .pagination import UserListPagination
from .permissions import CanReactivate, IsPlatformAdmin
from .throttles import EmailRateThrottle


REFRESH_HEADER = openapi.Parameter(
    'X-Refresh-Token',
    openapi.IN_HEADER,
    description="Refresh token to blacklist",
    type=openapi.TYPE_STRING,
    required=False,
)


class PublicEndpointMixin:
    permission_classes = [permissions.AllowAny]
    authentication_classes = []


class MarketTokenObtainPairView(jwt_views.TokenObtainPairView):
    serializer_class = my_serializers.MarketTokenObtainPairSerializer


class RegistrationAPIView(PublicEndpointMixin, generics.CreateAPIView):
    """
    Signs up a client or contractor and signs them straight in: the response
    holds the new user plus an access/refresh token pair.
    """
    serializer_class = my_serializers.RegistrationSerializer

    @swagger_auto_schema(
        operation_summary="Register a new client or contractor",
        responses={201: my_serializers.RegistrationSerializer, 400: "Invalid input"}
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response({'user': serializer.data, **services.issue_tokens(user)}, status=status.HTTP_201_CREATED)


class UserProfileRetrieveUpdateAPIView(generics.RetrieveUpdateAPIView):
    """
    GET: The current user's own profile.
    PUT/PATCH: Edit name, company, phone, country and bio. Email, role and
    the verified badge cannot be changed here.
    """
    serializer_class = my_serializers.UserProfileSerializer

    def get_object(self):
        return self.request.user


class AvatarUploadAPIView(drf_views.APIView):
    parser_classes = [MultiPartParser, FormParser]

    @swagger_auto_schema(
        operation_summary="Upload the current user's avatar",
        request_body=my_serializers.AvatarUploadSerializer,
        responses={200: my_serializers.UserProfileSerializer, 400: "Invalid file"}
    )
    def post(self, request):
        serializer = my_serializers.AvatarUploadSerializer(request.user, data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response(my_serializers.UserProfileSerializer(user, context={'request': request}).data)


class PublicProfileAPIView(generics.RetrieveAPIView):
    serializer_class = my_serializers.PublicProfileSerializer
    queryset = CustomUser.active_objects.all()
    lookup_field = 'id'


class ChangePasswordAPIView(generics.GenericAPIView):
    serializer_class = my_serializers.ChangePasswordSerializer

    @swagger_auto_schema(operation_summary="Change the current user's password")
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response({'detail': "Password updated."})


class LogoutAPIView(drf_views.APIView):
    """
    Blacklists the refresh token given in the `refresh` body field or the
    X-Refresh-Token header.
    """
    @swagger_auto_schema(
        operation_summary="Log out by blacklisting a refresh token",
        request_body=my_serializers.LogoutSerializer,
        manual_parameters=[REFRESH_HEADER],
        responses={200: "Logged out", 400: "Missing or invalid token"}
    )
    def post(self, request):
        refresh_token = request.data.get('refresh') or request.headers.get('X-Refresh-Token')
        serializer = my_serializers.LogoutSerializer(data={'refresh': refresh_token})
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response({'detail': "Logged out."})


class PasswordResetRequestAPIView(PublicEndpointMixin, generics.GenericAPIView):
    serializer_class = my_serializers.PasswordResetRequestSerializer
    throttle_classes = [EmailRateThrottle, AnonRateThrottle]

    @swagger_auto_schema(operation_summary="Email a password reset link")
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.request_password_reset(serializer.context['user'])

        return Response({'detail': "Check your email for a password reset link."})


class PasswordResetConfirmAPIView(PublicEndpointMixin, generics.GenericAPIView):
    serializer_class = my_serializers.PasswordResetConfirmSerializer

    @swagger_auto_schema(operation_summary="Set a new password from a reset link")
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response({'detail': "Password updated. You can now sign in."})


class UserListAPIView(generics.ListAPIView):
    """
    All users, for platform admins. Paginated.

    Query parameters:
        - user_type, verified, is_active (filters)
        - search: email, first_name, last_name, company_name
        - ordering: id, first_name, last_name, user_type, created_at
    """
    serializer_class = my_serializers.UserListSerializer
    permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]
    queryset = CustomUser.objects.all()
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ['user_type', 'verified', 'is_active']
    search_fields = ['email', 'first_name', 'last_name', 'company_name']
    ordering_fields = ['id', 'first_name', 'last_name', 'user_type', 'created_at']
    ordering = ['-created_at']
    pagination_class = UserListPagination


class VerifyUserAPIView(generics.UpdateAPIView):
    serializer_class = my_serializers.VerifyUserSerializer
    permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]
    queryset = CustomUser.objects.all()
    lookup_field = 'id'
    http_method_names = ['patch']

    @swagger_auto_schema(operation_summary="Set or clear a user's verified badge (Admin only)")
    def patch(self, request, *args, **kwargs):
        return super().patch(request, *args, **kwargs)


class UserDeleteAPIView(drf_views.APIView):
    """
    Soft-deletes the current account. It can be reactivated by email
    within the reactivation window.
    """
    @swagger_auto_schema(
        operation_summary="Deactivate the current user's account",
        manual_parameters=[REFRESH_HEADER],
        responses={200: "Account deactivated"}
    )
    def patch(self, request):
        services.deactivate(request.user, request.headers.get('X-Refresh-Token'))
        return Response({'detail': "Account deactivated."})


class ReactivationRequestAPIView(PublicEndpointMixin, generics.GenericAPIView):
    serializer_class = my_serializers.ReactivationRequestSerializer
    permission_classes = [CanReactivate]
    throttle_classes = [EmailRateThrottle, AnonRateThrottle]

    @swagger_auto_schema(
        operation_summary="Email an account reactivation link",
        responses={200: "Reactivation link sent", 403: "Account active or window expired", 404: "Unknown email"}
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.request_reactivation(serializer.context['user'])

        return Response({'detail': "Check your email to reactivate your account."})


class AccountReactivationConfirmAPIView(PublicEndpointMixin, generics.GenericAPIView):
    serializer_class = my_serializers.AccountReactivationConfirmSerializer

    @swagger_auto_schema(operation_summary="Reactivate an account from the emailed link and sign in")
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response({
            'detail': "Account reactivated.",
            'user': my_serializers.UserProfileSerializer(user, context={'request': request}).data,
            **services.issue_tokens(user),
        })
