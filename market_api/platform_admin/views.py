import logging

from rest_framework import generics, views as drf_views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsPlatformAdmin
from . import serializers as my_serializers
from . import services
from .models import PlatformEarning

logger = logging.getLogger(__name__)


class FeeSettingsAPIView(generics.RetrieveUpdateAPIView):
    """
    GET: Current fee percentages, created with the defaults on first read.
    PATCH/PUT: Platform admins change either percentage.
    """
    serializer_class = my_serializers.PlatformFeeSettingsSerializer

    def get_permissions(self):
        if self.request.method in ('PUT', 'PATCH'):
            return [IsAuthenticated(), IsPlatformAdmin()]
        return [IsAuthenticated()]

    def get_object(self):
        return services.get_fee_settings()

    def perform_update(self, serializer):
        settings_row = serializer.save()
        logger.info(
            f"Fee settings changed by admin {self.request.user.id}: "
            f"client {settings_row.client_fee_percentage}%, contractor {settings_row.contractor_fee_percentage}%"
        )


class SystemStatsAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    @swagger_auto_schema(
        operation_summary="Platform-wide counts and earnings (Admin only)",
        responses={200: my_serializers.SystemStatsSerializer()}
    )
    def get(self, request):
        return Response(my_serializers.SystemStatsSerializer(services.system_stats()).data)


class MonthlyStatsAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    @swagger_auto_schema(
        operation_summary="Projects and disputes per month (Admin only)",
        manual_parameters=[
            openapi.Parameter('months_back', openapi.IN_QUERY, description="Number of months, default 6", type=openapi.TYPE_INTEGER),
        ],
        responses={200: my_serializers.MonthlyStatsSerializer(many=True)}
    )
    def get(self, request):
        months_back = request.query_params.get('months_back')
        if months_back is not None:
            try:
                months_back = int(months_back)
            except ValueError:
                raise ValidationError({'months_back': ["Must be an integer."]})
            if not 1 <= months_back <= 24:
                raise ValidationError({'months_back': ["Must be between 1 and 24."]})

        rows = services.monthly_stats(months_back)
        return Response(my_serializers.MonthlyStatsSerializer(rows, many=True).data)


class ListPlatformEarningAPIView(generics.ListAPIView):
    serializer_class = my_serializers.PlatformEarningSerializer
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    filterset_fields = ['project', 'contractor', 'client']

    def get_queryset(self):
        return PlatformEarning.objects.select_related('project').order_by('-created_at')
