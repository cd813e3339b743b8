from rest_framework.permissions import BasePermission

from accounts.roles import Role, resolve_role


class IsProjectOwner(BasePermission):
    def has_object_permission(self, request, view, obj):
        return obj.client_id == request.user.id


class IsProjectOwnerOrAdmin(BasePermission):
    def has_object_permission(self, request, view, obj):
        return obj.client_id == request.user.id or resolve_role(request.user) == Role.ADMIN


class IsContractPartyOrAdmin(BasePermission):
    """
    Allows access only to the contract's client, its contractor, or a platform admin.
    """
    def has_object_permission(self, request, view, obj):
        return obj.is_party(request.user) or resolve_role(request.user) == Role.ADMIN
