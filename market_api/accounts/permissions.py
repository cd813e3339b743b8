from rest_framework import permissions
from rest_framework.exceptions import PermissionDenied, NotFound
from django.contrib.auth import get_user_model

from .roles import Role, resolve_role


User = get_user_model()


class HasRole(permissions.BasePermission):
    """
    Base class for role gates. Subclasses set `role`.
    """
    role = None

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and resolve_role(request.user) == self.role)


class IsClient(HasRole):
    role = Role.CLIENT


class IsContractor(HasRole):
    role = Role.CONTRACTOR


class IsPlatformAdmin(HasRole):
    role = Role.ADMIN


class CanReactivate(permissions.BasePermission):
    """
    Lets a reactivation request through only for an account that was
    deactivated, and only within the reactivation window.
    """
    def has_permission(self, request, view):
        email = (request.data or {}).get('email')
        if not email:
            raise PermissionDenied("Email is required to request reactivation.")

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            raise NotFound("This email is not registered.")
        if user.deleted_at is None:
            raise PermissionDenied("Account is already active.")
        if not user.can_reactivate():
            raise PermissionDenied("Reactivation window has expired.")

        return True
