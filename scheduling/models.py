# scheduling/models.py
#
# Purpose:
# - Domain models for the schedule and time-slot availability engine.
#
# Design highlights:
# - Store / Stylist: looked up for existence and the "active" flag only.
#   • Stylist.staff_user links the stylist to the login that owns their schedules.
# - CustomerProfile: per-customer flags read by customer-facing availability
#   queries (is_blacklisted hides all availability).
# - Schedule: one stylist's working day at one store.
#   • UniqueConstraint(store, stylist, work_date) is the authoritative guard
#     against two concurrent bulk-creates for the same day.
# - TimeSlot: bookable [start_time, end_time) inside a Schedule.
#   • is_available=False means a booking holds it; this app never flips it back.
# - TimeSlotTemplate / TimeSlotTemplateItem: reusable, date-free interval sets.
#
# Notes for developers:
# - Slot overlap is not expressible as a portable DB constraint; it is enforced
#   in services/intervals.py under a row lock on the parent Schedule.
# - Ids are BigAutoField (64-bit); the API renders them as strings.
#

from django.db import models
from django.contrib.auth.models import User


# -------------------------
# Store (salon branch)
# -------------------------
class Store(models.Model):
    """
    A salon branch. Inactive stores reject every schedule write.
    """
    name = models.CharField(max_length=200)
    address = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name


# -------------------------
# Stylist
# -------------------------
class Stylist(models.Model):
    """
    A stylist whose working days are published as Schedules.
    - 'staff_user' is the login allowed to edit this stylist's schedules when
      acting with the STYLIST role.
    """
    name = models.CharField(max_length=200)
    staff_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="stylists",
        null=True,
        blank=True,
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name


# -------------------------
# Customer
# -------------------------
class CustomerProfile(models.Model):
    """
    A customer account. Blacklisted customers see no availability anywhere
    and are never told why.
    """
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="customer_profile",
    )
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True)
    is_blacklisted = models.BooleanField(default=False)

    def __str__(self):
        return self.name


# -------------------------
# Schedule (stylist working day)
# -------------------------
class Schedule(models.Model):
    """
    One stylist's working day at one store. Owns its TimeSlots.
    Never updated in place; only its slots change.
    """
    store = models.ForeignKey(Store, on_delete=models.CASCADE, related_name="schedules")
    stylist = models.ForeignKey(Stylist, on_delete=models.CASCADE, related_name="schedules")
    work_date = models.DateField()
    note = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["work_date", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["store", "stylist", "work_date"],
                name="uniq_schedule_store_stylist_date",
            ),
        ]

    def __str__(self):
        return f"{self.stylist} @ {self.store} on {self.work_date}"


# -------------------------
# TimeSlot
# -------------------------
class TimeSlot(models.Model):
    """
    A bookable sub-interval of a Schedule. The date comes from the parent.
    """
    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="time_slots")
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_time", "id"]
        indexes = [
            models.Index(fields=["schedule", "start_time"], name="timeslot_schedule_start_idx"),
        ]

    def __str__(self):
        state = "open" if self.is_available else "booked"
        return f"{self.start_time:%H:%M}-{self.end_time:%H:%M} ({state})"


# -------------------------
# Templates
# -------------------------
class TimeSlotTemplate(models.Model):
    """
    A named, date-independent set of intervals (e.g. "Standard Tuesday").
    """
    name = models.CharField(max_length=50)
    note = models.CharField(max_length=100, blank=True, default="")
    updater = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="updated_time_slot_templates",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.name


class TimeSlotTemplateItem(models.Model):
    template = models.ForeignKey(TimeSlotTemplate, on_delete=models.CASCADE, related_name="items")
    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta:
        ordering = ["start_time", "id"]

    def __str__(self):
        return f"{self.template.name}: {self.start_time:%H:%M}-{self.end_time:%H:%M}"
