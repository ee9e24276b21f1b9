from datetime import timedelta
from unittest import mock

from django.db import OperationalError
from django.test import TestCase

from scheduling.context import ANONYMOUS, CustomerContext
from scheduling.exceptions import (
    DateRangeExceeded,
    EndBeforeStart,
    InvalidDateFormat,
    PersistenceError,
    StoreNotActive,
    StoreNotFound,
    StylistNotFound,
)
from scheduling.models import Schedule, Store, Stylist
from scheduling.services.availability_reader import AvailabilityReader
from scheduling.services.time_utils import today

from .helpers import make_schedule, t

BLACKLISTED = CustomerContext(customer_id=7, is_blacklisted=True)


class AvailabilityTestBase(TestCase):
    def setUp(self):
        self.store = Store.objects.create(name="Da'an Flagship")
        self.stylist = Stylist.objects.create(name="Amber")
        self.today = today()
        self.reader = AvailabilityReader()

        # yesterday: open but in the past
        make_schedule(self.store, self.stylist, self.day(-1), [(t("10:00"), t("11:00"))])
        # tomorrow: two open, one booked
        self.tomorrow = make_schedule(
            self.store, self.stylist, self.day(1),
            [(t("10:00"), t("11:00")), (t("11:00"), t("12:30")), (t("14:00"), t("15:00"))],
            booked={2},
        )
        # in three days: fully booked
        make_schedule(self.store, self.stylist, self.day(3), [(t("10:00"), t("11:00"))], booked={0})
        # in five days: one open
        self.day_five = make_schedule(self.store, self.stylist, self.day(5), [(t("16:00"), t("17:00"))])

    def day(self, offset):
        return self.today + timedelta(days=offset)


class ListScheduleDatesTests(AvailabilityTestBase):
    def test_dates_with_open_slots_from_today(self):
        dates = self.reader.list_schedule_dates(
            self.store.id, self.stylist.id, self.day(-7), self.day(10), is_blacklisted=False
        )
        self.assertEqual(
            dates,
            [
                {"id": self.tomorrow.id, "work_date": self.day(1)},
                {"id": self.day_five.id, "work_date": self.day(5)},
            ],
        )

    def test_accepts_string_dates_and_ids(self):
        dates = self.reader.list_schedule_dates(
            str(self.store.id), str(self.stylist.id),
            self.day(0).isoformat(), self.day(2).isoformat(), is_blacklisted=False,
        )
        self.assertEqual([d["work_date"] for d in dates], [self.day(1)])

    def test_blacklisted_gets_empty_list_without_validation(self):
        self.assertEqual(
            self.reader.list_schedule_dates("not-an-id", "0", "bad", "worse", is_blacklisted=True), []
        )

    def test_end_before_start(self):
        with self.assertRaises(EndBeforeStart):
            self.reader.list_schedule_dates(
                self.store.id, self.stylist.id, self.day(5), self.day(1), is_blacklisted=False
            )

    def test_range_capped_at_31_days(self):
        self.reader.list_schedule_dates(
            self.store.id, self.stylist.id, self.day(0), self.day(31), is_blacklisted=False
        )
        with self.assertRaises(DateRangeExceeded):
            self.reader.list_schedule_dates(
                self.store.id, self.stylist.id, self.day(0), self.day(32), is_blacklisted=False
            )

    def test_bad_date_format(self):
        with self.assertRaises(InvalidDateFormat):
            self.reader.list_schedule_dates(
                self.store.id, self.stylist.id, "2024/01/01", "2024-01-02", is_blacklisted=False
            )

    def test_unknown_store(self):
        with self.assertRaises(StoreNotFound):
            self.reader.list_schedule_dates(999999, self.stylist.id, self.day(0), self.day(1), False)

    def test_inactive_store(self):
        Store.objects.filter(pk=self.store.pk).update(is_active=False)
        with self.assertRaises(StoreNotActive):
            self.reader.list_schedule_dates(self.store.id, self.stylist.id, self.day(0), self.day(1), False)

    def test_unknown_or_inactive_stylist(self):
        with self.assertRaises(StylistNotFound):
            self.reader.list_schedule_dates(self.store.id, 999999, self.day(0), self.day(1), False)

        Stylist.objects.filter(pk=self.stylist.pk).update(is_active=False)
        with self.assertRaises(StylistNotFound):
            self.reader.list_schedule_dates(self.store.id, self.stylist.id, self.day(0), self.day(1), False)

    def test_range_entirely_in_the_past(self):
        dates = self.reader.list_schedule_dates(
            self.store.id, self.stylist.id, self.day(-10), self.day(-1), is_blacklisted=False
        )
        self.assertEqual(dates, [])


class ListOpenDatesTests(AvailabilityTestBase):
    def test_counts_available_slots_per_date(self):
        items, total = self.reader.list_open_dates(
            self.store.id, self.stylist.id, self.day(-3), self.day(30), is_blacklisted=False
        )
        self.assertEqual(total, 2)
        self.assertEqual(
            items,
            [
                {"date": self.day(1), "available_slots": 2},
                {"date": self.day(5), "available_slots": 1},
            ],
        )

    def test_range_capped_at_60_days(self):
        _, total = self.reader.list_open_dates(
            self.store.id, self.stylist.id, self.day(0), self.day(60), is_blacklisted=False
        )
        self.assertEqual(total, 2)
        with self.assertRaises(DateRangeExceeded):
            self.reader.list_open_dates(
                self.store.id, self.stylist.id, self.day(0), self.day(61), is_blacklisted=False
            )

    def test_blacklisted_gets_empty_result(self):
        self.assertEqual(
            self.reader.list_open_dates(999999, 999999, self.day(0), self.day(1), is_blacklisted=True),
            ([], 0),
        )

    def test_other_store_not_counted(self):
        other = Store.objects.create(name="Xinyi Studio")
        make_schedule(other, self.stylist, self.day(2), [(t("10:00"), t("11:00"))])
        items, _ = self.reader.list_open_dates(
            self.store.id, self.stylist.id, self.day(0), self.day(10), is_blacklisted=False
        )
        self.assertNotIn(self.day(2), [item["date"] for item in items])


class ListSlotsForScheduleTests(AvailabilityTestBase):
    def test_available_slots_with_duration(self):
        slots = self.reader.list_slots_for_schedule(self.tomorrow.id, ANONYMOUS)
        self.assertEqual(
            [(s["start_time"], s["end_time"], s["duration_minutes"]) for s in slots],
            [(t("10:00"), t("11:00"), 60), (t("11:00"), t("12:30"), 90)],
        )

    def test_unknown_schedule_is_empty(self):
        self.assertEqual(self.reader.list_slots_for_schedule(999999, ANONYMOUS), [])

    def test_blacklisted_is_empty(self):
        self.assertEqual(self.reader.list_slots_for_schedule(self.tomorrow.id, BLACKLISTED), [])
        self.assertEqual(self.reader.list_slots_for_schedule("garbage", BLACKLISTED), [])


class ReaderDatabaseFailureTests(AvailabilityTestBase):
    def test_store_lookup_failure_is_wrapped(self):
        with mock.patch.object(Store.objects, "filter", side_effect=OperationalError("timeout")):
            with self.assertRaises(PersistenceError) as ctx:
                self.reader.list_open_dates(self.store.id, self.stylist.id, self.day(0), self.day(7), False)
        self.assertEqual(ctx.exception.operation, "list_open_dates")

    def test_slot_query_failure_is_wrapped(self):
        with mock.patch.object(Schedule.objects, "filter", side_effect=OperationalError("timeout")):
            with self.assertRaises(PersistenceError):
                self.reader.list_slots_for_schedule(self.tomorrow.id, ANONYMOUS)
