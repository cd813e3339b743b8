from rest_framework import serializers
from django.conf import settings

from accounts.serializers import UserSummarySerializer
from market_api.storage import DOCUMENT_EXTENSIONS, public_url, validate_upload
from .models import WalletTransaction, WithdrawalRequest
from . import services


def _positive_amount(value):
    if value <= 0:
        raise serializers.ValidationError("Amount must be greater than zero.")
    return value


class BalanceSerializer(serializers.Serializer):
    available_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_deposits = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_withdrawals = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_earnings = serializers.DecimalField(max_digits=14, decimal_places=2)


class WalletTransactionSerializer(serializers.ModelSerializer):
    receipt_url = serializers.SerializerMethodField()

    class Meta:
        model = WalletTransaction
        fields = ['id', 'amount', 'type', 'status', 'reference', 'receipt_url', 'milestone', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_receipt_url(self, obj):
        return public_url(obj.receipt, self.context.get('request'))


class AdminWalletTransactionSerializer(WalletTransactionSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta(WalletTransactionSerializer.Meta):
        fields = WalletTransactionSerializer.Meta.fields + ['user']
        read_only_fields = fields


class RechargeSerializer(serializers.Serializer):
    """
    Serializer for requesting a wallet deposit. The deposit stays pending
    until an admin confirms it.

    Fields:
        - amount (required, > 0)
        - reference, receipt (optional)
    """
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    reference = serializers.CharField(max_length=255, required=False, allow_blank=True)
    receipt = serializers.FileField(required=False, allow_null=True)

    def validate_amount(self, value):
        return _positive_amount(value)

    def validate_receipt(self, value):
        if value is None:
            return value
        return validate_upload(value, settings.RECEIPT_MAX_SIZE, DOCUMENT_EXTENSIONS)

    def create(self, validated_data):
        return services.recharge(self.context['request'].user, **validated_data)

    def to_representation(self, instance):
        return WalletTransactionSerializer(instance, context=self.context).data


class WithdrawalRequestSerializer(serializers.ModelSerializer):
    contractor = UserSummarySerializer(read_only=True)
    transaction = WalletTransactionSerializer(read_only=True)
    reviewed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = WithdrawalRequest
        fields = ['id', 'contractor', 'amount', 'status', 'admin_notes', 'transaction', 'reviewed_by', 'reviewed_at', 'created_at', 'updated_at']
        read_only_fields = fields


class CreateWithdrawalSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)

    def validate_amount(self, value):
        return _positive_amount(value)

    def create(self, validated_data):
        return services.request_withdrawal(self.context['request'].user, validated_data['amount'])

    def to_representation(self, instance):
        return WithdrawalRequestSerializer(instance, context=self.context).data


class ReviewDepositSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[WalletTransaction.COMPLETED, WalletTransaction.FAILED])


class ReviewWithdrawalSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[WithdrawalRequest.APPROVED, WithdrawalRequest.REJECTED])
    admin_notes = serializers.CharField(required=False, allow_blank=True)
