# staff/models.py
#
# Purpose:
# - Staff role and store-membership records consumed by the scheduling engine.
# - Login itself is plain django.contrib.auth; a user is "staff" for this app
#   when they have an active StaffProfile.
#
from django.db import models
from django.contrib.auth.models import User


class Role(models.TextChoices):
    """Closed set of staff roles."""
    STYLIST = "STYLIST", "Stylist"
    MANAGER = "MANAGER", "Manager"
    ADMIN = "ADMIN", "Admin"
    SUPER_ADMIN = "SUPER_ADMIN", "Super admin"


class StaffProfile(models.Model):
    """
    Role for a staff login. Stores the staff may act on are listed in
    StaffStoreAccess.
    """
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="staff_profile",
    )
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STYLIST)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["user_id"]

    def __str__(self):
        return f"{self.user.username} ({self.role})"


class StaffStoreAccess(models.Model):
    """
    One store a staff member is authorized to act on.
    Points to scheduling.Store to keep a single Store model.
    """
    staff = models.ForeignKey(
        StaffProfile,
        on_delete=models.CASCADE,
        related_name="store_access",
    )
    store = models.ForeignKey(
        "scheduling.Store",              # ← reference scheduling app model
        on_delete=models.CASCADE,
        related_name="staff_access",
    )

    class Meta:
        ordering = ["staff_id", "store_id"]
        constraints = [
            models.UniqueConstraint(fields=["staff", "store"], name="uniq_staff_store_access"),
        ]

    def __str__(self):
        return f"{self.staff.user.username} -> {self.store.name}"
