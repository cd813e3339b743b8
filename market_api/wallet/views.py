from rest_framework import generics, status, views as drf_views
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsContractor, IsPlatformAdmin
from . import serializers as my_serializers
from . import services
from .models import WalletTransaction, WithdrawalRequest


class BalanceAPIView(drf_views.APIView):
    """
    Available balance (completed credits minus completed withdrawals) and
    pending totals, recomputed from the transaction rows on every call.
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Current wallet balance",
        responses={200: my_serializers.BalanceSerializer()}
    )
    def get(self, request):
        balance = services.get_balance(request.user)
        return Response(my_serializers.BalanceSerializer(balance).data)


class ListTransactionAPIView(generics.ListAPIView):
    serializer_class = my_serializers.WalletTransactionSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['type', 'status']

    def get_queryset(self):
        return WalletTransaction.objects.filter(user=self.request.user).order_by('-created_at')


class RechargeAPIView(generics.CreateAPIView):
    """
    Records a pending deposit, optionally with a payment reference and an
    uploaded receipt.
    """
    serializer_class = my_serializers.RechargeSerializer
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @swagger_auto_schema(
        operation_summary="Request a wallet deposit",
        responses={201: my_serializers.WalletTransactionSerializer(), 400: "Validation error"}
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class ListCreateWithdrawalAPIView(generics.ListCreateAPIView):
    permission_classes = [IsAuthenticated, IsContractor]
    filterset_fields = ['status']

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return my_serializers.CreateWithdrawalSerializer
        return my_serializers.WithdrawalRequestSerializer

    def get_queryset(self):
        return WithdrawalRequest.objects.filter(contractor=self.request.user).select_related('transaction').order_by('-created_at')

    @swagger_auto_schema(
        operation_summary="Request a withdrawal (Contractor only)",
        request_body=my_serializers.CreateWithdrawalSerializer,
        responses={201: my_serializers.WithdrawalRequestSerializer(), 400: "Amount exceeds withdrawable balance"}
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class AdminListDepositAPIView(generics.ListAPIView):
    """
    Deposits awaiting review by default; pass `?status=` to see others.
    """
    serializer_class = my_serializers.AdminWalletTransactionSerializer
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    def get_queryset(self):
        wanted = self.request.query_params.get('status', WalletTransaction.PENDING)
        return (
            WalletTransaction.objects.filter(type=WalletTransaction.DEPOSIT, status=wanted)
            .select_related('user')
            .order_by('-created_at')
        )


class AdminReviewDepositAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    @swagger_auto_schema(
        operation_summary="Confirm or fail a pending deposit (Admin only)",
        request_body=my_serializers.ReviewDepositSerializer,
        responses={200: my_serializers.AdminWalletTransactionSerializer(), 400: "Deposit is not pending"}
    )
    def patch(self, request, id):
        tx = get_object_or_404(WalletTransaction, id=id, type=WalletTransaction.DEPOSIT)
        serializer = my_serializers.ReviewDepositSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        tx = services.review_deposit(tx, serializer.validated_data['status'])
        return Response(my_serializers.AdminWalletTransactionSerializer(tx, context={'request': request}).data)


class AdminListWithdrawalAPIView(generics.ListAPIView):
    serializer_class = my_serializers.WithdrawalRequestSerializer
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    filterset_fields = ['status']

    def get_queryset(self):
        return WithdrawalRequest.objects.select_related('contractor', 'transaction', 'reviewed_by').order_by('-created_at')


class AdminReviewWithdrawalAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    @swagger_auto_schema(
        operation_summary="Approve or reject a pending withdrawal (Admin only)",
        request_body=my_serializers.ReviewWithdrawalSerializer,
        responses={200: my_serializers.WithdrawalRequestSerializer(), 400: "Request is not pending"}
    )
    def patch(self, request, id):
        withdrawal = get_object_or_404(WithdrawalRequest.objects.select_related('transaction'), id=id)
        serializer = my_serializers.ReviewWithdrawalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        withdrawal = services.review_withdrawal(
            withdrawal,
            serializer.validated_data['status'],
            reviewer=request.user,
            admin_notes=serializer.validated_data.get('admin_notes', ''),
        )
        return Response(my_serializers.WithdrawalRequestSerializer(withdrawal, context={'request': request}).data, status=status.HTTP_200_OK)
