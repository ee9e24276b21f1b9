from datetime import date, time
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from scheduling.models import Schedule, Store, Stylist, TimeSlot, TimeSlotTemplate
from staff.models import Role

from .helpers import make_staff


class SeedSalonCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command("seed_salon", stdout=out)
        self.assertIn("Created=6", out.getvalue())

        out = StringIO()
        call_command("seed_salon", stdout=out)
        self.assertIn("Created=0, Updated=0", out.getvalue())

        self.assertEqual(Store.objects.count(), 2)
        self.assertEqual(Stylist.objects.count(), 3)
        template = TimeSlotTemplate.objects.get(name="Standard Day")
        self.assertEqual(template.items.count(), 4)

    def test_seed_reactivates_store(self):
        call_command("seed_salon", stdout=StringIO())
        Store.objects.filter(name="Xinyi Studio").update(is_active=False)

        out = StringIO()
        call_command("seed_salon", stdout=out)
        self.assertIn("Updated=1", out.getvalue())
        self.assertTrue(Store.objects.get(name="Xinyi Studio").is_active)


class ApplyTemplateCommandTests(TestCase):
    def setUp(self):
        call_command("seed_salon", stdout=StringIO())
        self.store = Store.objects.get(name="Da'an Flagship")
        self.stylist = Stylist.objects.get(name="Amber")
        self.template = TimeSlotTemplate.objects.get(name="Standard Day")
        make_staff("admin", Role.ADMIN, stores=[self.store])

    def run_command(self, **overrides):
        options = {
            "staff": "admin",
            "store": self.store.id,
            "stylist": self.stylist.id,
            "template": self.template.id,
            "start": "2026-11-02",
            "end": "2026-11-04",
        }
        options.update(overrides)
        out = StringIO()
        call_command("apply_template", stdout=out, **options)
        return out.getvalue()

    def test_creates_one_schedule_per_day(self):
        output = self.run_command(note="Winter rota")

        self.assertIn("Created 3 schedule(s) with 12 time slot(s).", output)
        schedules = Schedule.objects.filter(stylist=self.stylist).order_by("work_date")
        self.assertEqual(
            [s.work_date for s in schedules],
            [date(2026, 11, 2), date(2026, 11, 3), date(2026, 11, 4)],
        )
        self.assertTrue(all(s.note == "Winter rota" for s in schedules))
        first = schedules[0].time_slots.order_by("start_time").first()
        self.assertEqual((first.start_time, first.end_time), (time(10, 0), time(12, 0)))

    def test_existing_date_aborts_everything(self):
        self.run_command(start="2026-11-03", end="2026-11-03")

        with self.assertRaises(CommandError) as ctx:
            self.run_command()
        self.assertIn("SCHEDULE_ALREADY_EXISTS", str(ctx.exception))
        self.assertEqual(Schedule.objects.count(), 1)
        self.assertEqual(TimeSlot.objects.count(), 4)

    def test_unknown_staff(self):
        with self.assertRaises(CommandError):
            self.run_command(staff="nobody")

    def test_end_before_start(self):
        with self.assertRaises(CommandError):
            self.run_command(start="2026-11-04", end="2026-11-02")

    def test_unknown_template(self):
        with self.assertRaises(CommandError) as ctx:
            self.run_command(template=999999)
        self.assertIn("TIME_SLOT_TEMPLATE_NOT_FOUND", str(ctx.exception))
