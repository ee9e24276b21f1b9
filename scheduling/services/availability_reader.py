"""
availability_reader.py
----------------------
Customer-facing, read-only availability queries.

Rules shared by every query:
- A blacklisted customer always gets an empty result, never an error. The
  check runs before any input validation or query.
- Only slots with is_available=True count as open.
- Date lists start no earlier than today (salon TIME_ZONE).

The two date-list variants keep their own range caps:
- list_schedule_dates: 31 days, returns schedule ids per date
- list_open_dates:     60 days, returns open-slot counts per date
"""

import logging

from django.db.models import Count, Q

from ..exceptions import (
    DateRangeExceeded,
    EndBeforeStart,
    StoreNotActive,
    StoreNotFound,
    StylistNotFound,
)
from ..models import Schedule, Store, Stylist, TimeSlot
from .db import wrap_database_errors
from .id_codec import parse_id
from .time_utils import days_between, minutes_between, to_date, today

logger = logging.getLogger(__name__)

SCHEDULE_DATES_MAX_DAYS = 31
OPEN_DATES_MAX_DAYS = 60


class AvailabilityReader:
    def _check_range(self, start_date, end_date, max_days):
        start_date = to_date(start_date)
        end_date = to_date(end_date)
        if end_date < start_date:
            raise EndBeforeStart()
        if days_between(start_date, end_date) > max_days:
            raise DateRangeExceeded(max_days)
        return start_date, end_date

    def _check_store_and_stylist(self, store_id, stylist_id):
        store = Store.objects.filter(pk=store_id).first()
        if store is None:
            raise StoreNotFound()
        if not store.is_active:
            raise StoreNotActive()
        if not Stylist.objects.filter(pk=stylist_id, is_active=True).exists():
            raise StylistNotFound()

    def _open_schedules(self, store_id, stylist_id, start_date, end_date):
        """
        Schedules in [max(start, today), end] with at least one open slot,
        annotated with available_slots.
        """
        start_date = max(start_date, today())
        if start_date > end_date:
            return Schedule.objects.none()

        return (
            Schedule.objects.filter(
                store_id=store_id,
                stylist_id=stylist_id,
                work_date__gte=start_date,
                work_date__lte=end_date,
            )
            .annotate(available_slots=Count("time_slots", filter=Q(time_slots__is_available=True)))
            .filter(available_slots__gt=0)
            .order_by("work_date")
        )

    @wrap_database_errors("list_schedule_dates")
    def list_schedule_dates(self, store_id, stylist_id, start_date, end_date, is_blacklisted):
        """
        Dates a stylist can be booked at a store.

        Returns:
            list of {"id": schedule id, "work_date": date}

        Raises:
            InvalidId, InvalidDateFormat, EndBeforeStart, DateRangeExceeded (31 days),
            StoreNotFound, StoreNotActive, StylistNotFound
        """
        if is_blacklisted:
            return []
        store_id, stylist_id = parse_id(store_id), parse_id(stylist_id)
        start_date, end_date = self._check_range(start_date, end_date, SCHEDULE_DATES_MAX_DAYS)
        self._check_store_and_stylist(store_id, stylist_id)

        return [
            {"id": schedule.id, "work_date": schedule.work_date}
            for schedule in self._open_schedules(store_id, stylist_id, start_date, end_date)
        ]

    @wrap_database_errors("list_open_dates")
    def list_open_dates(self, store_id, stylist_id, start_date, end_date, is_blacklisted):
        """
        Open-slot counts per date for a stylist at a store.

        Returns:
            (list of {"date": date, "available_slots": int}, total)

        Raises:
            InvalidId, InvalidDateFormat, EndBeforeStart, DateRangeExceeded (60 days),
            StoreNotFound, StoreNotActive, StylistNotFound
        """
        if is_blacklisted:
            return [], 0
        store_id, stylist_id = parse_id(store_id), parse_id(stylist_id)
        start_date, end_date = self._check_range(start_date, end_date, OPEN_DATES_MAX_DAYS)
        self._check_store_and_stylist(store_id, stylist_id)

        items = [
            {"date": schedule.work_date, "available_slots": schedule.available_slots}
            for schedule in self._open_schedules(store_id, stylist_id, start_date, end_date)
        ]
        return items, len(items)

    @wrap_database_errors("list_slots_for_schedule")
    def list_slots_for_schedule(self, schedule_id, customer_context):
        """
        Open slots of one schedule with their length in minutes.
        Unknown schedules and blacklisted customers both give [].
        """
        if customer_context.is_blacklisted:
            return []

        schedule_id = parse_id(schedule_id)
        if not Schedule.objects.filter(pk=schedule_id).exists():
            logger.debug("Slots requested for unknown schedule=%s", schedule_id)
            return []

        slots = TimeSlot.objects.filter(schedule_id=schedule_id, is_available=True).order_by("start_time")
        return [
            {
                "id": slot.id,
                "start_time": slot.start_time,
                "end_time": slot.end_time,
                "duration_minutes": minutes_between(slot.start_time, slot.end_time),
            }
            for slot in slots
        ]
