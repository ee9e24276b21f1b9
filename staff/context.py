"""
context.py
----------
StaffContext: the per-request identity the scheduling services act for.

Views build it once from the authenticated user and pass it explicitly into
every service call; services never look at request state themselves.
"""

from dataclasses import dataclass, field

from .models import Role, StaffProfile


@dataclass(frozen=True)
class StaffContext:
    staff_user_id: int
    role: Role
    store_ids: frozenset = field(default_factory=frozenset)

    def can_access_store(self, store_id) -> bool:
        return int(store_id) in self.store_ids


def staff_context_for(user):
    """
    Build a StaffContext for an authenticated user.

    Returns:
        StaffContext, or None if the user has no active StaffProfile.
    """
    if user is None or not user.is_authenticated:
        return None

    profile = (
        StaffProfile.objects.filter(user=user, is_active=True)
        .prefetch_related("store_access")
        .first()
    )
    if profile is None:
        return None

    return StaffContext(
        staff_user_id=user.id,
        role=Role(profile.role),
        store_ids=frozenset(access.store_id for access in profile.store_access.all()),
    )
