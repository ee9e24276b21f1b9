"""
permission_gate.py
------------------
Role / ownership / store-membership policy for every mutating operation.

Rules, checked in this order:
1. STYLIST may only act on stylists linked to their own login.
   MANAGER, ADMIN and SUPER_ADMIN are not restricted by ownership.
2. The target store must be active (StoreNotActive, not PermissionDenied).
3. The store must be in the staff member's authorized stores, unless their
   role is one of the configured blanket-access roles.

The gate is stateless given its inputs. Callers resolve the owning stylist
and the store from the target aggregate first.
"""

import logging
from collections import namedtuple

from configmgr.utils import get_list_setting
from staff.models import Role

from ..exceptions import PermissionDenied, StoreNotActive

logger = logging.getLogger(__name__)

DEFAULT_BLANKET_ROLES = (Role.SUPER_ADMIN,)
DEFAULT_TEMPLATE_MANAGER_ROLES = (Role.SUPER_ADMIN, Role.ADMIN, Role.MANAGER)

# allowed: bool; reason: exception class to raise when not allowed
Decision = namedtuple("Decision", ["allowed", "reason"])

ALLOW = Decision(True, None)


class PermissionGate:
    def __init__(self, blanket_roles=DEFAULT_BLANKET_ROLES):
        self.blanket_roles = frozenset(Role(role) for role in blanket_roles)

    @classmethod
    def from_settings(cls):
        """Build a gate from SystemSetting / settings.SCHEDULING."""
        roles = get_list_setting("BLANKET_ACCESS_ROLES", DEFAULT_BLANKET_ROLES)
        return cls(blanket_roles=[role for role in roles if role in Role.values])

    def _owns(self, staff_context, owner_staff_user_id) -> bool:
        role = staff_context.role
        if role == Role.STYLIST:
            return owner_staff_user_id is not None and owner_staff_user_id == staff_context.staff_user_id
        elif role in (Role.MANAGER, Role.ADMIN, Role.SUPER_ADMIN):
            return True
        return False

    def evaluate(self, staff_context, owner_staff_user_id, store_id, store_is_active=True) -> Decision:
        """
        Decide whether staff_context may act on a stylist's data at a store.

        Args:
            staff_context: staff.context.StaffContext
            owner_staff_user_id: login id linked to the target stylist (may be None)
            store_id: target store id
            store_is_active: the store's active flag

        Returns:
            Decision(allowed, reason)
        """
        if not self._owns(staff_context, owner_staff_user_id):
            return Decision(False, PermissionDenied)
        if not store_is_active:
            return Decision(False, StoreNotActive)
        if staff_context.role in self.blanket_roles:
            return ALLOW
        if not staff_context.can_access_store(store_id):
            return Decision(False, PermissionDenied)
        return ALLOW

    def enforce(self, staff_context, owner_staff_user_id, store_id, store_is_active=True):
        """Same as evaluate(), but raises the deny reason."""
        decision = self.evaluate(staff_context, owner_staff_user_id, store_id, store_is_active)
        if not decision.allowed:
            logger.warning(
                "Denied staff_user=%s role=%s store=%s: %s",
                staff_context.staff_user_id,
                staff_context.role,
                store_id,
                decision.reason.default_code,
            )
            raise decision.reason()

    def enforce_store_access(self, staff_context, store_id):
        """Membership-only check used by staff read paths."""
        if staff_context.role in self.blanket_roles:
            return
        if not staff_context.can_access_store(store_id):
            logger.warning(
                "Denied store read staff_user=%s role=%s store=%s",
                staff_context.staff_user_id,
                staff_context.role,
                store_id,
            )
            raise PermissionDenied()


def template_manager_roles():
    roles = get_list_setting("TEMPLATE_MANAGER_ROLES", DEFAULT_TEMPLATE_MANAGER_ROLES)
    return frozenset(Role(role) for role in roles if role in Role.values)


def require_role(staff_context, roles):
    """
    Raises:
        PermissionDenied: staff_context.role is not in roles
    """
    if staff_context.role not in roles:
        logger.warning(
            "Role %s not allowed for staff_user=%s",
            staff_context.role,
            staff_context.staff_user_id,
        )
        raise PermissionDenied()
