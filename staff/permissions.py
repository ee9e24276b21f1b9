# staff/permissions.py
from rest_framework.permissions import BasePermission

from .context import staff_context_for


class IsStaffMember(BasePermission):
    """
    Allow only logins with an active StaffProfile.
    The resolved StaffContext is cached on the request as `staff_context`.
    """
    message = "Staff account required."

    def has_permission(self, request, view):
        context = staff_context_for(request.user)
        if context is None:
            return False
        request.staff_context = context
        return True
