"""
schedule_store.py
-----------------
Staff-facing writes and reads over Schedule + TimeSlot.

Write flow (every method):
1. Resolve the target stylist/store (or schedule -> stylist -> store).
2. PermissionGate: ownership, store active, store membership.
3. IntervalValidator on the requested intervals.
4. Persist inside transaction.atomic(); any error rolls the block back.

Concurrency:
- Bulk create relies on the (store, stylist, work_date) unique constraint;
  the existence pre-check only gives a clearer error first.
- Single-slot writes and bulk delete lock the parent Schedule rows with
  select_for_update() before checking overlap / booked state.

Every public method runs under wrap_database_errors, so any DatabaseError
reaches the caller as PersistenceError named after the method.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Prefetch

from ..exceptions import (
    AllFieldsEmpty,
    AlreadyBookedDoNotDelete,
    AlreadyBookedDoNotUpdate,
    CannotUpdateSeparately,
    DateRangeExceeded,
    DuplicateWorkDate,
    EmptyBatch,
    EndBeforeStart,
    ScheduleAlreadyBookedDoNotDelete,
    ScheduleAlreadyExists,
    ScheduleNotBelongToStore,
    ScheduleNotBelongToStylist,
    ScheduleNotFound,
    StoreNotFound,
    StylistNotFound,
    TemplateNotFound,
    TimeSlotNotFound,
)
from ..models import Schedule, Store, Stylist, TimeSlot, TimeSlotTemplate
from .db import wrap_database_errors
from .intervals import IntervalValidator
from .permission_gate import PermissionGate
from .time_utils import days_between, to_date

logger = logging.getLogger(__name__)

STAFF_LIST_MAX_DAYS = 31


def _slot_pair(slot):
    """Accept {'start_time', 'end_time'} dicts or (start, end) pairs."""
    if isinstance(slot, dict):
        return slot.get("start_time"), slot.get("end_time")
    start, end = slot
    return start, end


class ScheduleStore:
    def __init__(self, gate=None):
        self.gate = gate or PermissionGate.from_settings()

    # -------------------------
    # Lookups
    # -------------------------
    def _get_stylist(self, stylist_id):
        stylist = Stylist.objects.filter(pk=stylist_id).first()
        if stylist is None:
            raise StylistNotFound()
        return stylist

    def _get_store(self, store_id):
        store = Store.objects.filter(pk=store_id).first()
        if store is None:
            raise StoreNotFound()
        return store

    def _authorize(self, staff_context, stylist, store):
        self.gate.enforce(
            staff_context,
            owner_staff_user_id=stylist.staff_user_id,
            store_id=store.id,
            store_is_active=store.is_active,
        )

    def _resolve_and_authorize(self, stylist_id, store_id, staff_context):
        stylist = self._get_stylist(stylist_id)
        store = self._get_store(store_id)
        self._authorize(staff_context, stylist, store)
        return stylist, store

    def _lock_schedule(self, schedule_id):
        return (
            Schedule.objects.select_for_update()
            .filter(pk=schedule_id)
            .first()
        )

    # -------------------------
    # Bulk schedules
    # -------------------------
    @wrap_database_errors("create_schedules_bulk")
    def create_schedules_bulk(self, stylist_id, store_id, schedules, staff_context):
        """
        Create many schedules (each with its time slots) all-or-nothing.

        Args:
            stylist_id, store_id: target ids
            schedules: list of {"work_date", "note"?, "time_slots": [...]} where
                each time slot is {"start_time", "end_time"} or a (start, end) pair
            staff_context: StaffContext of the caller

        Returns:
            list[Schedule] with time_slots prefetched, ordered by work_date

        Raises:
            StylistNotFound, StoreNotFound, StoreNotActive, PermissionDenied,
            EmptyBatch, DuplicateWorkDate, InvalidRange, TimeSlotConflict,
            ScheduleAlreadyExists, PersistenceError
        """
        stylist, store = self._resolve_and_authorize(stylist_id, store_id, staff_context)
        return self._create_bulk(stylist, store, schedules)

    def _create_bulk(self, stylist, store, schedules):
        if not schedules:
            raise EmptyBatch()
        work_dates = [to_date(item.get("work_date")) for item in schedules]
        seen_dates = set()
        for work_date in work_dates:
            if work_date in seen_dates:
                raise DuplicateWorkDate()
            seen_dates.add(work_date)

        prepared = []
        for work_date, item in zip(work_dates, schedules):
            intervals = IntervalValidator.validate(
                _slot_pair(slot) for slot in item.get("time_slots") or []
            )
            prepared.append((work_date, item.get("note"), intervals))

        if Schedule.objects.filter(
            store=store, stylist=stylist, work_date__in=seen_dates
        ).exists():
            raise ScheduleAlreadyExists()

        try:
            with transaction.atomic():
                created = Schedule.objects.bulk_create([
                    Schedule(store=store, stylist=stylist, work_date=work_date, note=note)
                    for work_date, note, _ in prepared
                ])
                slots = []
                for schedule, (_, _, intervals) in zip(created, prepared):
                    slots.extend(
                        TimeSlot(
                            schedule=schedule,
                            start_time=interval.start,
                            end_time=interval.end,
                            is_available=True,
                        )
                        for interval in intervals
                    )
                TimeSlot.objects.bulk_create(slots)
        except IntegrityError as exc:
            # Lost the unique-constraint race to a concurrent create.
            logger.warning(
                "Schedule insert hit unique constraint for stylist=%s store=%s",
                stylist.id, store.id,
            )
            raise ScheduleAlreadyExists() from exc

        logger.info(
            "Created %d schedules (%d slots) for stylist=%s store=%s",
            len(created), len(slots), stylist.id, store.id,
        )
        return list(
            Schedule.objects.filter(pk__in=[schedule.pk for schedule in created])
            .prefetch_related("time_slots")
            .order_by("work_date")
        )

    @wrap_database_errors("create_schedules_from_template")
    def create_schedules_from_template(self, stylist_id, store_id, template_id, work_dates,
                                       staff_context, note=None):
        """
        Stamp a template's items onto each work date.
        Same validation, errors and atomicity as create_schedules_bulk.

        Raises:
            TemplateNotFound, plus everything create_schedules_bulk raises.
        """
        stylist, store = self._resolve_and_authorize(stylist_id, store_id, staff_context)

        template = (
            TimeSlotTemplate.objects.filter(pk=template_id)
            .prefetch_related("items")
            .first()
        )
        if template is None:
            raise TemplateNotFound()

        pairs = [(item.start_time, item.end_time) for item in template.items.all()]
        schedules = [
            {"work_date": work_date, "note": note, "time_slots": pairs}
            for work_date in work_dates
        ]
        logger.info("Applying template=%s to %d dates", template.id, len(schedules))
        return self._create_bulk(stylist, store, schedules)

    @wrap_database_errors("delete_schedules_bulk")
    def delete_schedules_bulk(self, stylist_id, store_id, schedule_ids, staff_context):
        """
        Delete schedules and their slots all-or-nothing.

        Every id must exist, belong to the store and stylist, and have no booked
        slot. Repeated ids count once.

        Returns:
            list of deleted ids (the request, de-duplicated, in order)

        Raises:
            StylistNotFound, StoreNotFound, StoreNotActive, PermissionDenied,
            EmptyBatch, ScheduleNotFound, ScheduleNotBelongToStore, ScheduleNotBelongToStylist,
            ScheduleAlreadyBookedDoNotDelete, PersistenceError
        """
        stylist, store = self._resolve_and_authorize(stylist_id, store_id, staff_context)
        ids = list(dict.fromkeys(schedule_ids))
        if not ids:
            raise EmptyBatch()

        with transaction.atomic():
            targets = list(Schedule.objects.select_for_update().filter(pk__in=ids))
            if len(targets) != len(ids):
                raise ScheduleNotFound()

            for schedule in targets:
                if schedule.store_id != store.id:
                    raise ScheduleNotBelongToStore()
                if schedule.stylist_id != stylist.id:
                    raise ScheduleNotBelongToStylist()

            if TimeSlot.objects.filter(schedule_id__in=ids, is_available=False).exists():
                raise ScheduleAlreadyBookedDoNotDelete()

            TimeSlot.objects.filter(schedule_id__in=ids).delete()
            Schedule.objects.filter(pk__in=ids).delete()

        logger.info(
            "Deleted %d schedules for stylist=%s store=%s", len(ids), stylist.id, store.id
        )
        return ids

    # -------------------------
    # Single time slot
    # -------------------------
    @wrap_database_errors("create_time_slot")
    def create_time_slot(self, schedule_id, start_time, end_time, staff_context):
        """
        Add one slot to a schedule.

        Raises:
            InvalidRange, ScheduleNotFound, StoreNotActive, PermissionDenied,
            TimeSlotConflict, PersistenceError
        """
        IntervalValidator.check_range(start_time, end_time)

        with transaction.atomic():
            schedule = self._lock_schedule(schedule_id)
            if schedule is None:
                raise ScheduleNotFound()
            self._authorize(staff_context, schedule.stylist, schedule.store)

            existing = TimeSlot.objects.filter(schedule=schedule).values_list(
                "id", "start_time", "end_time"
            )
            interval = IntervalValidator.validate_against(start_time, end_time, existing)

            slot = TimeSlot.objects.create(
                schedule=schedule,
                start_time=interval.start,
                end_time=interval.end,
                is_available=True,
            )

        logger.info("Created time slot=%s on schedule=%s", slot.id, schedule.id)
        return slot

    def _locked_slot(self, schedule_id, time_slot_id):
        """Lock the parent schedule, then return (schedule, slot)."""
        schedule = self._lock_schedule(schedule_id)
        if schedule is None:
            raise TimeSlotNotFound()
        slot = (
            TimeSlot.objects.select_for_update()
            .filter(pk=time_slot_id, schedule_id=schedule.id)
            .first()
        )
        if slot is None:
            raise TimeSlotNotFound()
        return schedule, slot

    @wrap_database_errors("update_time_slot")
    def update_time_slot(self, schedule_id, time_slot_id, staff_context,
                         start_time=None, end_time=None, is_available=None):
        """
        Patch one slot. start_time and end_time travel together.

        Raises:
            AllFieldsEmpty, CannotUpdateSeparately, TimeSlotNotFound,
            AlreadyBookedDoNotUpdate, StoreNotActive, PermissionDenied,
            InvalidRange, TimeSlotConflict, PersistenceError
        """
        if start_time is None and end_time is None and is_available is None:
            raise AllFieldsEmpty()
        if (start_time is None) != (end_time is None):
            raise CannotUpdateSeparately()

        with transaction.atomic():
            schedule, slot = self._locked_slot(schedule_id, time_slot_id)
            if not slot.is_available:
                raise AlreadyBookedDoNotUpdate()
            self._authorize(staff_context, schedule.stylist, schedule.store)

            fields = ["updated_at"]
            if start_time is not None:
                siblings = TimeSlot.objects.filter(schedule=schedule).values_list(
                    "id", "start_time", "end_time"
                )
                interval = IntervalValidator.validate_against(
                    start_time, end_time, siblings, exclude_id=slot.id
                )
                slot.start_time = interval.start
                slot.end_time = interval.end
                fields += ["start_time", "end_time"]
            if is_available is not None:
                slot.is_available = is_available
                fields.append("is_available")

            slot.save(update_fields=fields)

        logger.info("Updated time slot=%s on schedule=%s", slot.id, schedule.id)
        return slot

    @wrap_database_errors("delete_time_slot")
    def delete_time_slot(self, schedule_id, time_slot_id, staff_context):
        """
        Remove one available slot.

        Raises:
            TimeSlotNotFound, AlreadyBookedDoNotDelete, StoreNotActive,
            PermissionDenied, PersistenceError
        """
        with transaction.atomic():
            schedule, slot = self._locked_slot(schedule_id, time_slot_id)
            if not slot.is_available:
                raise AlreadyBookedDoNotDelete()
            self._authorize(staff_context, schedule.stylist, schedule.store)
            slot_id = slot.id
            slot.delete()

        logger.info("Deleted time slot=%s on schedule=%s", slot_id, schedule.id)
        return slot_id

    # -------------------------
    # Staff reads
    # -------------------------
    @wrap_database_errors("get_schedule")
    def get_schedule(self, store_id, schedule_id, staff_context):
        """
        Return one schedule of a store with all its slots (booked included).

        Raises:
            PermissionDenied, ScheduleNotFound
        """
        self.gate.enforce_store_access(staff_context, store_id)
        schedule = (
            Schedule.objects.filter(pk=schedule_id, store_id=store_id)
            .select_related("stylist")
            .prefetch_related("time_slots")
            .first()
        )
        if schedule is None:
            raise ScheduleNotFound()
        return schedule

    @wrap_database_errors("list_store_schedules")
    def list_store_schedules(self, store_id, start_date, end_date, staff_context,
                             stylist_ids=None, is_available=None):
        """
        Schedules of a store in [start_date, end_date], grouped per stylist.

        Args:
            stylist_ids: optional list restricting the stylists
            is_available: optional slot filter; schedules left with no
                matching slot are omitted

        Returns:
            list of {"stylist": Stylist, "schedules": [Schedule, ...]}, each
            Schedule carrying `filtered_slots`

        Raises:
            EndBeforeStart, DateRangeExceeded, StoreNotFound, PermissionDenied
        """
        start_date = to_date(start_date)
        end_date = to_date(end_date)
        if end_date < start_date:
            raise EndBeforeStart()
        if days_between(start_date, end_date) > STAFF_LIST_MAX_DAYS:
            raise DateRangeExceeded(STAFF_LIST_MAX_DAYS)

        self._get_store(store_id)
        self.gate.enforce_store_access(staff_context, store_id)

        slots = TimeSlot.objects.order_by("start_time", "id")
        if is_available is not None:
            slots = slots.filter(is_available=is_available)

        qs = (
            Schedule.objects.filter(
                store_id=store_id, work_date__gte=start_date, work_date__lte=end_date
            )
            .select_related("stylist")
            .prefetch_related(Prefetch("time_slots", queryset=slots, to_attr="filtered_slots"))
            .order_by("stylist_id", "work_date")
        )
        if stylist_ids:
            qs = qs.filter(stylist_id__in=stylist_ids)

        groups = []
        by_stylist = {}
        for schedule in qs:
            if is_available is not None and not schedule.filtered_slots:
                continue
            group = by_stylist.get(schedule.stylist_id)
            if group is None:
                group = {"stylist": schedule.stylist, "schedules": []}
                by_stylist[schedule.stylist_id] = group
                groups.append(group)
            group["schedules"].append(schedule)
        return groups
