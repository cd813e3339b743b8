from rest_framework.permissions import BasePermission

from accounts.roles import Role, resolve_role
from .models import Dispute


class IsDisputeParticipantOrAdmin(BasePermission):
    """
    Allows access only to the contract's client, its contractor, or a platform admin.
    This permission is checked against a single Dispute object.
    """
    def has_object_permission(self, request, view, obj: Dispute):
        if resolve_role(request.user) == Role.ADMIN:
            return True
        return obj.contract.is_party(request.user)


class IsDisputeOwner(BasePermission):
    """
    Allows access only to the user who raised the dispute.
    """
    def has_object_permission(self, request, view, obj: Dispute):
        return obj.raised_by_id == request.user.id
