from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.contrib.auth.models import AbstractUser, BaseUserManager, UserManager
from country_list import countries_for_language
from auditlog.registry import auditlog
from auditlog.models import AuditlogHistoryField


class CustomUserManager(BaseUserManager):
    """
    Manager for CustomUser. Handles user and superuser creation using email as the unique identifier.
    """
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('user_type', CustomUser.ADMIN)

        return self.create_user(email, password, **extra_fields)


class ActiveUserManager(UserManager):
    """
    Manager for active users only (is_active=True, deleted_at=None).
    """
    def get_queryset(self):
        return super().get_queryset().filter(is_active=True, deleted_at__isnull=True)


def avatar_upload_path(instance, filename):
    return f"avatars/{instance.pk or 'new'}/{filename}"


class CustomUser(AbstractUser):
    """
    Account and profile of a marketplace user.
    Uses email as the unique identifier. `user_type` tags the role: factories
    posting work are clients, service providers are contractors. An empty
    `user_type` marks a profile that was never completed.
    Includes audit logging and soft deletion (deleted_at).
    """
    CLIENT = 'client'
    CONTRACTOR = 'contractor'
    ADMIN = 'admin'

    USER_TYPE_CHOICES = (
        (CLIENT, 'Client'),
        (CONTRACTOR, 'Contractor'),
        (ADMIN, 'Admin'),
    )

    user_type = models.CharField(max_length=20, choices=USER_TYPE_CHOICES, blank=True)
    company_name = models.CharField(max_length=255, blank=True)
    phone_number = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=50, choices=countries_for_language('en'), blank=True)
    bio = models.TextField(blank=True)
    avatar = models.FileField(upload_to=avatar_upload_path, null=True, blank=True)
    verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    email = models.EmailField(unique=True, blank=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    username = None

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name',]

    objects = CustomUserManager()
    active_objects = ActiveUserManager()

    history = AuditlogHistoryField()

    def __str__(self):
        return self.email

    @property
    def display_name(self):
        return self.get_full_name() or self.company_name or self.email

    def can_reactivate(self, now=None):
        if self.is_active or self.deleted_at is None:
            return False
        window = timedelta(days=settings.ACCOUNT_REACTIVATION_WINDOW_DAYS)
        return (now or timezone.now()) - self.deleted_at <= window


auditlog.register(CustomUser, exclude_fields=['password', 'last_login'])
