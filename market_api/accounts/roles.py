from enum import Enum


class Role(Enum):
    CLIENT = 'client'
    CONTRACTOR = 'contractor'
    ADMIN = 'admin'
    INCOMPLETE = 'incomplete'


def resolve_role(user):
    """
    Map a user to exactly one Role.

    Staff accounts count as admins whatever their `user_type`; an
    unrecognised or empty `user_type` is an incomplete profile.
    """
    if user is None or not user.is_authenticated:
        return Role.INCOMPLETE
    if user.is_staff or user.user_type == Role.ADMIN.value:
        return Role.ADMIN
    if user.user_type == Role.CLIENT.value:
        return Role.CLIENT
    if user.user_type == Role.CONTRACTOR.value:
        return Role.CONTRACTOR
    return Role.INCOMPLETE
