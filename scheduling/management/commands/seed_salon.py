"""
seed_salon.py
-------------
Seeds (creates or updates) demo stores, stylists and a standard day template.
Safe to run any time; rows are upserted by name.

Usage:
    python manage.py seed_salon
"""

from datetime import time
from django.core.management.base import BaseCommand
from django.db import transaction

from scheduling.models import Store, Stylist, TimeSlotTemplate, TimeSlotTemplateItem


STORES = [
    {"name": "Da'an Flagship",  "address": "No. 1, Sec. 4, Ren'ai Rd., Da'an Dist., Taipei"},
    {"name": "Xinyi Studio",    "address": "No. 20, Songren Rd., Xinyi Dist., Taipei"},
]

STYLISTS = ["Amber", "Bella", "Coco"]

STANDARD_DAY = {
    "name": "Standard Day",
    "note": "Four 2-hour blocks with a lunch break",
    "items": [
        (time(10, 0), time(12, 0)),
        (time(13, 0), time(15, 0)),
        (time(15, 0), time(17, 0)),
        (time(17, 0), time(19, 0)),
    ],
}


class Command(BaseCommand):
    help = "Seed or update demo stores, stylists and the 'Standard Day' template."

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        updated = 0

        for item in STORES:
            store, is_created = Store.objects.get_or_create(
                name=item["name"],
                defaults={"address": item["address"], "is_active": True},
            )
            if is_created:
                created += 1
            elif store.address != item["address"] or not store.is_active:
                store.address = item["address"]
                store.is_active = True
                store.save(update_fields=["address", "is_active"])
                updated += 1

        for name in STYLISTS:
            stylist, is_created = Stylist.objects.get_or_create(name=name, defaults={"is_active": True})
            if is_created:
                created += 1
            elif not stylist.is_active:
                stylist.is_active = True
                stylist.save(update_fields=["is_active"])
                updated += 1

        template, is_created = TimeSlotTemplate.objects.get_or_create(
            name=STANDARD_DAY["name"],
            defaults={"note": STANDARD_DAY["note"]},
        )
        if is_created:
            created += 1
            TimeSlotTemplateItem.objects.bulk_create([
                TimeSlotTemplateItem(template=template, start_time=start, end_time=end)
                for start, end in STANDARD_DAY["items"]
            ])

        self.stdout.write(self.style.SUCCESS(f"Seed complete. Created={created}, Updated={updated}"))
