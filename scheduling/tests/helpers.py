# scheduling/tests/helpers.py
#
# Small builders shared by the scheduling tests.
#
from datetime import time

from django.contrib.auth.models import User

from scheduling.models import Schedule, TimeSlot
from staff.context import staff_context_for
from staff.models import StaffProfile, StaffStoreAccess


def make_staff(username, role, stores=()):
    """Create a login with a StaffProfile; return (user, StaffContext)."""
    user = User.objects.create_user(username=username, password="testpass123")
    profile = StaffProfile.objects.create(user=user, role=role)
    for store in stores:
        StaffStoreAccess.objects.create(staff=profile, store=store)
    return user, staff_context_for(user)


def make_schedule(store, stylist, work_date, slots=(), booked=()):
    """
    Insert a schedule directly (no service rules).
    slots: (start, end) pairs of time objects; booked: indexes marked unavailable.
    """
    schedule = Schedule.objects.create(store=store, stylist=stylist, work_date=work_date)
    for index, (start, end) in enumerate(slots):
        TimeSlot.objects.create(
            schedule=schedule,
            start_time=start,
            end_time=end,
            is_available=index not in booked,
        )
    return schedule


def t(hhmm):
    h, m = hhmm.split(":")
    return time(int(h), int(m))
