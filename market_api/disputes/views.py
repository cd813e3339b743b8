import logging

from rest_framework import generics, status, filters
from rest_framework.response import Response
from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from accounts.permissions import IsPlatformAdmin
from accounts.roles import Role, resolve_role
from user_projects.models import Contract
from . import serializers as my_serializers
from .permissions import IsDisputeParticipantOrAdmin, IsDisputeOwner
from .models import Dispute

logger = logging.getLogger(__name__)


def _dispute_queryset():
    return Dispute.objects.select_related(
        'contract', 'contract__project', 'contract__project__client', 'contract__contractor', 'raised_by', 'resolved_by'
    )


class ListCreateDisputeAPIView(generics.ListCreateAPIView):
    """
    GET: List disputes.
        - Admins see all disputes.
        - Clients and contractors see only disputes on their contracts.
    POST: Raise a dispute on an ongoing contract the caller is party to.
    """
    permission_classes = [IsAuthenticated]
    filter_backends = [filters.OrderingFilter, DjangoFilterBackend]
    filterset_fields = ['status', 'contract']
    ordering_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return my_serializers.DisputeCreateSerializer
        return my_serializers.DisputeDetailSerializer

    @swagger_auto_schema(
        operation_summary="List disputes with optional filtering",
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, description="Filter disputes by status", type=openapi.TYPE_STRING),
            openapi.Parameter('ordering', openapi.IN_QUERY, description="Order results by one of: created_at, updated_at", type=openapi.TYPE_STRING),
        ],
        responses={200: my_serializers.DisputeDetailSerializer(many=True)}
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(
        operation_summary="Raise a dispute on a contract",
        request_body=my_serializers.DisputeCreateSerializer,
        responses={201: my_serializers.DisputeDetailSerializer(), 400: "Validation error"}
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)

    def get_queryset(self):
        user = self.request.user
        queryset = _dispute_queryset()
        if resolve_role(user) == Role.ADMIN:
            return queryset

        return queryset.filter(Q(contract__project__client=user) | Q(contract__contractor=user))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dispute = serializer.save()
        logger.info(f"Dispute {dispute.id} raised on contract {dispute.contract_id} by user {request.user.id}")

        return Response({
            'detail': "Dispute created successfully.",
            'dispute': my_serializers.DisputeDetailSerializer(dispute).data
        }, status=status.HTTP_201_CREATED)


class DisputableContractsAPIView(generics.ListAPIView):
    """
    Ongoing contracts of the caller, as client or contractor, that a dispute can be raised on.
    """
    serializer_class = my_serializers.DisputeContractSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        user = self.request.user
        return Contract.objects.filter(
            Q(project__client=user) | Q(contractor=user),
            status=Contract.ONGOING,
        ).select_related('project', 'project__client', 'contractor')


class RetrieveUpdateDisputeAPIView(generics.RetrieveUpdateAPIView):
    """
    GET: Retrieve a dispute. Parties and admins only.
    PATCH: The user who raised it may reword the reason while it is open.
    """
    permission_classes = [IsAuthenticated, IsDisputeParticipantOrAdmin]
    queryset = _dispute_queryset()
    lookup_field = 'id'
    http_method_names = ['get', 'patch']

    def get_serializer_class(self):
        if self.request.method == 'PATCH':
            return my_serializers.UpdateDisputeSerializer
        return my_serializers.DisputeDetailSerializer

    def get_permissions(self):
        if self.request.method == 'PATCH':
            return [IsAuthenticated(), IsDisputeOwner()]
        return super().get_permissions()

    @swagger_auto_schema(
        operation_summary="Retrieve a dispute",
        responses={200: my_serializers.DisputeDetailSerializer(), 404: "Not found"}
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(
        operation_summary="Reword an open dispute",
        request_body=my_serializers.UpdateDisputeSerializer,
        responses={200: my_serializers.DisputeDetailSerializer(), 400: "Validation error"}
    )
    def patch(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response(my_serializers.DisputeDetailSerializer(instance).data)


class ResolveDisputeAPIView(generics.UpdateAPIView):
    """
    Allows a platform admin to resolve or reject an open dispute.
    """
    serializer_class = my_serializers.ResolveDisputeSerializer
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    queryset = _dispute_queryset()
    lookup_field = 'id'
    http_method_names = ['patch']

    @swagger_auto_schema(
        operation_summary="Resolve or reject a dispute (Admin only)",
        request_body=my_serializers.ResolveDisputeSerializer,
        responses={200: my_serializers.DisputeDetailSerializer(), 400: "Validation error"}
    )
    def patch(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Dispute {instance.id} {instance.status} by admin {request.user.id}")

        return Response(my_serializers.DisputeDetailSerializer(instance).data)
