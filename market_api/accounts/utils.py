from django.conf import settings
from django.contrib.auth.tokens import default_token_generator
from django.core.mail import send_mail
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode


RESET_PASSWORD_PATH = 'reset-password'
REACTIVATE_ACCOUNT_PATH = 'reactivate-account'


def frontend_link(user, path):
    """
    One-time link into the web app carrying `uid` and `token` query params.
    The token is invalidated as soon as the password or last login changes.
    """
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    token = default_token_generator.make_token(user)
    return f"{settings.FRONTEND_DOMAIN}/{path}?uid={uid}&token={token}"


def user_from_link(uid, token, queryset):
    """
    Resolve the user behind a `frontend_link`, or None if the uid is garbled,
    unknown or the token no longer matches.
    """
    try:
        user = queryset.get(pk=force_str(urlsafe_base64_decode(uid)))
    except (TypeError, ValueError, OverflowError, queryset.model.DoesNotExist):
        return None

    if not default_token_generator.check_token(user, token):
        return None
    return user


def send_account_email(user, subject, body):
    message = f"Hello {user.display_name},\n\n{body}\n\nThe {settings.SITE_NAME} Team"

    send_mail(
        subject=subject,
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
        fail_silently=False,
    )


def send_reset_email(user, link):
    send_account_email(
        user,
        "Password Reset Request",
        f"We received a request to reset the password of your {settings.SITE_NAME} account.\n"
        f"Choose a new password here:\n{link}\n\n"
        "If you did not ask for this, you can ignore this email.",
    )


def send_reactivation_email(user, link):
    send_account_email(
        user,
        "Reactivate Your Account",
        f"Follow this link to reactivate your {settings.SITE_NAME} account:\n{link}\n\n"
        f"The link only works within {settings.ACCOUNT_REACTIVATION_WINDOW_DAYS} days of deactivation.",
    )
