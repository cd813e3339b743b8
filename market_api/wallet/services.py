import logging
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from rest_framework import serializers

from market_api.exceptions import WorkflowError
from platform_admin.models import PlatformEarning
from platform_admin.services import get_fee_settings
from .models import WalletTransaction, WithdrawalRequest

logger = logging.getLogger(__name__)

User = get_user_model()

CENT = Decimal('0.01')


def _money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def summarize(rows):
    """
    Balance figures from (type, status, amount) rows.

    Only completed rows move the available balance: credits (deposit,
    earning) add, withdrawals subtract. Pending and failed rows never do.
    """
    available = pending_deposits = pending_withdrawals = total_earnings = Decimal('0')

    for tx_type, tx_status, amount in rows:
        amount = Decimal(amount or 0)
        if tx_status == WalletTransaction.COMPLETED:
            if tx_type in WalletTransaction.CREDIT_TYPES:
                available += amount
                if tx_type == WalletTransaction.EARNING:
                    total_earnings += amount
            elif tx_type in WalletTransaction.DEBIT_TYPES:
                available -= amount
        elif tx_status == WalletTransaction.PENDING:
            if tx_type == WalletTransaction.DEPOSIT:
                pending_deposits += amount
            elif tx_type == WalletTransaction.WITHDRAWAL:
                pending_withdrawals += amount

    return {
        'available_balance': _money(available),
        'pending_deposits': _money(pending_deposits),
        'pending_withdrawals': _money(pending_withdrawals),
        'total_earnings': _money(total_earnings),
    }


def get_balance(user):
    rows = (
        WalletTransaction.objects.filter(user=user)
        .order_by()
        .values('type', 'status')
        .annotate(total=Sum('amount'))
        .values_list('type', 'status', 'total')
    )
    return summarize(rows)


def recharge(user, amount, reference='', receipt=None):
    tx = WalletTransaction.objects.create(
        user=user,
        amount=amount,
        type=WalletTransaction.DEPOSIT,
        status=WalletTransaction.PENDING,
        reference=reference or '',
        receipt=receipt,
    )
    logger.info(f"Deposit {tx.id} of {amount} requested by user {user.id}")
    return tx


def request_withdrawal(user, amount):
    with transaction.atomic():
        # serialize concurrent withdrawals by the same user
        User.objects.select_for_update().get(pk=user.pk)

        balance = get_balance(user)
        withdrawable = balance['available_balance'] - balance['pending_withdrawals']
        if amount > withdrawable:
            raise serializers.ValidationError({'amount': [f"Amount exceeds your withdrawable balance of {withdrawable}."]})

        tx = WalletTransaction.objects.create(
            user=user,
            amount=amount,
            type=WalletTransaction.WITHDRAWAL,
            status=WalletTransaction.PENDING,
        )
        withdrawal = WithdrawalRequest.objects.create(contractor=user, amount=amount, transaction=tx)

    logger.info(f"Withdrawal request {withdrawal.id} of {amount} by contractor {user.id}")
    return withdrawal


def pay_milestone(milestone, contract):
    """
    Credit the contractor for an approved milestone and record the
    platform's cut. Must run inside the caller's transaction.
    """
    fees = get_fee_settings()
    amount = milestone.amount
    client_fee = _money(amount * fees.client_fee_percentage / 100)
    contractor_fee = _money(amount * fees.contractor_fee_percentage / 100)

    earning = WalletTransaction.objects.create(
        user=contract.contractor,
        amount=_money(amount - contractor_fee),
        type=WalletTransaction.EARNING,
        status=WalletTransaction.COMPLETED,
        reference=f"milestone:{milestone.id}",
        milestone=milestone,
    )
    PlatformEarning.objects.create(
        project=milestone.project,
        milestone=milestone,
        client=contract.project.client,
        contractor=contract.contractor,
        milestone_amount=amount,
        client_fee_amount=client_fee,
        contractor_fee_amount=contractor_fee,
        total_platform_earning=client_fee + contractor_fee,
    )
    return earning


def review_deposit(tx, status):
    if tx.type != WalletTransaction.DEPOSIT:
        raise WorkflowError("Only deposits can be reviewed here.")
    if tx.status != WalletTransaction.PENDING:
        raise WorkflowError("Only pending deposits can be reviewed.")
    if status not in (WalletTransaction.COMPLETED, WalletTransaction.FAILED):
        raise serializers.ValidationError({'status': ["Status must be completed or failed."]})

    tx.status = status
    tx.save(update_fields=['status', 'updated_at'])
    logger.info(f"Deposit {tx.id} marked {status}")
    return tx


def review_withdrawal(withdrawal, status, reviewer, admin_notes=''):
    if withdrawal.status != WithdrawalRequest.PENDING:
        raise WorkflowError("Only pending withdrawal requests can be reviewed.")

    tx_status = {
        WithdrawalRequest.APPROVED: WalletTransaction.COMPLETED,
        WithdrawalRequest.REJECTED: WalletTransaction.FAILED,
    }.get(status)
    if tx_status is None:
        raise serializers.ValidationError({'status': ["Status must be approved or rejected."]})

    with transaction.atomic():
        withdrawal.status = status
        withdrawal.admin_notes = admin_notes or ''
        withdrawal.reviewed_by = reviewer
        withdrawal.reviewed_at = timezone.now()
        withdrawal.save()

        tx = withdrawal.transaction
        tx.status = tx_status
        tx.save(update_fields=['status', 'updated_at'])

    logger.info(f"Withdrawal request {withdrawal.id} {status} by admin {reviewer.id}")
    return withdrawal
