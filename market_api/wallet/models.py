from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
from auditlog.registry import auditlog


def receipt_upload_path(instance, filename):
    return f"receipts/{instance.user_id}/{filename}"


class WalletTransaction(models.Model):
    DEPOSIT = 'deposit'
    EARNING = 'earning'
    WITHDRAWAL = 'withdrawal'

    TYPE_CHOICES = (
        (DEPOSIT, 'Deposit'),
        (EARNING, 'Earning'),
        (WITHDRAWAL, 'Withdrawal'),
    )
    CREDIT_TYPES = (DEPOSIT, EARNING)
    DEBIT_TYPES = (WITHDRAWAL,)

    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'

    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (COMPLETED, 'Completed'),
        (FAILED, 'Failed'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='wallet_transactions')
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    reference = models.CharField(max_length=255, blank=True)
    receipt = models.FileField(upload_to=receipt_upload_path, null=True, blank=True)
    milestone = models.ForeignKey('user_projects.Milestone', on_delete=models.SET_NULL, null=True, blank=True, related_name='wallet_transactions')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.type} {self.amount} ({self.status}) for {self.user}"

    @property
    def is_credit(self):
        return self.type in self.CREDIT_TYPES


class WithdrawalRequest(models.Model):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
    )

    contractor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='withdrawal_requests')
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    admin_notes = models.TextField(blank=True)
    transaction = models.OneToOneField(WalletTransaction, on_delete=models.PROTECT, related_name='withdrawal_request')
    reviewed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    reviewed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Withdrawal {self.amount} by {self.contractor} ({self.status})"


auditlog.register(WalletTransaction)
auditlog.register(WithdrawalRequest)
