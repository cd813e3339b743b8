import logging

from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .models import CustomUser
from .utils import (
    REACTIVATE_ACCOUNT_PATH, RESET_PASSWORD_PATH, frontend_link, send_reactivation_email, send_reset_email,
)

logger = logging.getLogger(__name__)


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    return {'refresh': str(refresh), 'access': str(refresh.access_token)}


def blacklist(refresh_token):
    """Blacklist a refresh token. Returns False if it was already unusable."""
    try:
        RefreshToken(refresh_token).blacklist()
    except TokenError:
        return False
    return True


def register(validated_data):
    with transaction.atomic():
        user = CustomUser.objects.create_user(**validated_data)

    logger.info(f"Registered {user.user_type} account {user.id}")
    return user


def deactivate(user, refresh_token=None):
    """
    Soft-delete the account. It can be reactivated by email within
    ACCOUNT_REACTIVATION_WINDOW_DAYS.
    """
    if refresh_token:
        blacklist(refresh_token)

    user.is_active = False
    user.deleted_at = timezone.now()
    user.save(update_fields=['is_active', 'deleted_at', 'updated_at'])
    logger.info(f"Account {user.id} deactivated")
    return user


def reactivate(user):
    user.is_active = True
    user.deleted_at = None
    user.save(update_fields=['is_active', 'deleted_at', 'updated_at'])
    logger.info(f"Account {user.id} reactivated")
    return user


def set_password(user, password):
    user.set_password(password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info(f"Password changed for account {user.id}")
    return user


def request_password_reset(user):
    send_reset_email(user, frontend_link(user, RESET_PASSWORD_PATH))


def request_reactivation(user):
    send_reactivation_email(user, frontend_link(user, REACTIVATE_ACCOUNT_PATH))
