"""
apply_template.py
-----------------
Stamp a time-slot template onto every date in a range for one stylist/store.

Usage:
    python manage.py apply_template --staff alice --store 1 --stylist 2 \
        --template 3 --start 2026-11-01 --end 2026-11-07

Behavior:
- Runs ScheduleStore.create_schedules_from_template acting as --staff, so the
  usual ownership, store-access and overlap rules apply.
- All-or-nothing: one existing schedule in the range aborts the whole run.
"""

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError

from scheduling.exceptions import SchedulingError
from scheduling.services.schedule_store import ScheduleStore
from scheduling.services.time_utils import iter_dates, to_date
from staff.context import staff_context_for


class Command(BaseCommand):
    help = "Create schedules from a time-slot template for a date range."

    def add_arguments(self, parser):
        parser.add_argument("--staff", required=True, help="Username of the acting staff member.")
        parser.add_argument("--store", type=int, required=True, help="Store id.")
        parser.add_argument("--stylist", type=int, required=True, help="Stylist id.")
        parser.add_argument("--template", type=int, required=True, help="Template id.")
        parser.add_argument("--start", required=True, help="First work date (YYYY-MM-DD).")
        parser.add_argument("--end", required=True, help="Last work date (YYYY-MM-DD).")
        parser.add_argument("--note", default=None, help="Optional note for every schedule.")

    def handle(self, *args, **options):
        user = User.objects.filter(username=options["staff"]).first()
        staff_context = staff_context_for(user)
        if staff_context is None:
            raise CommandError(f"'{options['staff']}' is not an active staff member.")

        try:
            start = to_date(options["start"])
            end = to_date(options["end"])
            if end < start:
                raise CommandError("--end must not be before --start.")

            schedules = ScheduleStore().create_schedules_from_template(
                stylist_id=options["stylist"],
                store_id=options["store"],
                template_id=options["template"],
                work_dates=list(iter_dates(start, end)),
                staff_context=staff_context,
                note=options["note"],
            )
        except SchedulingError as exc:
            raise CommandError(f"{exc.code}: {exc.detail}") from exc

        slot_count = sum(len(schedule.time_slots.all()) for schedule in schedules)
        self.stdout.write(
            self.style.SUCCESS(f"Created {len(schedules)} schedule(s) with {slot_count} time slot(s).")
        )
