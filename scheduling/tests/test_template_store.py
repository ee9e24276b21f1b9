from unittest import mock

from django.db import OperationalError
from django.test import TestCase

from configmgr.models import SystemSetting
from scheduling.exceptions import (
    AllFieldsEmpty,
    InvalidRange,
    PermissionDenied,
    PersistenceError,
    TemplateItemNotFound,
    TemplateNotFound,
    TimeSlotConflict,
)
from scheduling.models import TimeSlotTemplate, TimeSlotTemplateItem
from scheduling.services.template_store import TemplateStore
from staff.models import Role

from .helpers import make_staff, t


def items(*pairs):
    return [{"start_time": s, "end_time": e} for s, e in pairs]


class TemplateStoreTestBase(TestCase):
    def setUp(self):
        self.manager_user, self.manager_ctx = make_staff("manager", Role.MANAGER)
        _, self.stylist_ctx = make_staff("amber", Role.STYLIST)
        self.service = TemplateStore()

    def make_template(self, name="Standard Day", *pairs):
        return self.service.create_template(
            name, "", items(*(pairs or (("10:00", "12:00"), ("13:00", "15:00")))), self.manager_ctx
        )


class CreateTemplateTests(TemplateStoreTestBase):
    def test_creates_template_with_items(self):
        template = self.service.create_template(
            "Standard Tuesday", "weekday", items(("13:00", "15:00"), ("10:00", "12:00")), self.manager_ctx
        )
        self.assertEqual(template.name, "Standard Tuesday")
        self.assertEqual(template.note, "weekday")
        self.assertEqual(template.updater, self.manager_user)
        self.assertEqual(
            [(i.start_time, i.end_time) for i in template.items.all()],
            [(t("10:00"), t("12:00")), (t("13:00"), t("15:00"))],
        )

    def test_overlapping_items_create_nothing(self):
        with self.assertRaises(TimeSlotConflict):
            self.service.create_template(
                "Broken", "", items(("10:00", "12:00"), ("11:00", "13:00")), self.manager_ctx
            )
        self.assertEqual(TimeSlotTemplate.objects.count(), 0)
        self.assertEqual(TimeSlotTemplateItem.objects.count(), 0)

    def test_invalid_item_range(self):
        with self.assertRaises(InvalidRange):
            self.service.create_template("Broken", "", items(("12:00", "10:00")), self.manager_ctx)

    def test_stylist_cannot_write_templates(self):
        with self.assertRaises(PermissionDenied):
            self.service.create_template("Mine", "", items(("10:00", "12:00")), self.stylist_ctx)

    def test_manager_roles_follow_system_setting(self):
        SystemSetting.objects.create(key="TEMPLATE_MANAGER_ROLES", value="SUPER_ADMIN,ADMIN")
        with self.assertRaises(PermissionDenied):
            TemplateStore().create_template("Mine", "", items(("10:00", "12:00")), self.manager_ctx)


class TemplateReadUpdateDeleteTests(TemplateStoreTestBase):
    def setUp(self):
        super().setUp()
        self.template = self.make_template()

    def test_get_template(self):
        template = self.service.get_template(self.template.id, self.stylist_ctx)
        self.assertEqual(template.items.count(), 2)

    def test_get_unknown_template(self):
        with self.assertRaises(TemplateNotFound):
            self.service.get_template(999999, self.stylist_ctx)

    def test_list_with_filter_and_paging(self):
        self.make_template("Weekend Long")
        self.make_template("Weekend Short")

        results, total = self.service.list_templates(self.stylist_ctx, name="weekend")
        self.assertEqual(total, 2)
        self.assertEqual({r.name for r in results}, {"Weekend Long", "Weekend Short"})

        page, total = self.service.list_templates(self.stylist_ctx, limit=1, offset=1)
        self.assertEqual(total, 3)
        self.assertEqual(len(page), 1)

    def test_update_name_and_note(self):
        template = self.service.update_template(
            self.template.id, self.manager_ctx, name="Standard Weekday", note="Mon-Fri"
        )
        template.refresh_from_db()
        self.assertEqual((template.name, template.note), ("Standard Weekday", "Mon-Fri"))

    def test_update_requires_a_field(self):
        with self.assertRaises(AllFieldsEmpty):
            self.service.update_template(self.template.id, self.manager_ctx)

    def test_update_unknown(self):
        with self.assertRaises(TemplateNotFound):
            self.service.update_template(999999, self.manager_ctx, name="x")

    def test_delete_cascades_items(self):
        self.service.delete_template(self.template.id, self.manager_ctx)
        self.assertFalse(TimeSlotTemplate.objects.filter(pk=self.template.pk).exists())
        self.assertEqual(TimeSlotTemplateItem.objects.count(), 0)

    def test_stylist_cannot_delete(self):
        with self.assertRaises(PermissionDenied):
            self.service.delete_template(self.template.id, self.stylist_ctx)


class TemplateItemTests(TemplateStoreTestBase):
    def setUp(self):
        super().setUp()
        self.template = self.make_template()
        self.first, self.second = list(self.template.items.order_by("start_time"))

    def test_create_item(self):
        item = self.service.create_template_item(self.template.id, "12:00", "13:00", self.manager_ctx)
        self.assertEqual((item.start_time, item.end_time), (t("12:00"), t("13:00")))
        self.assertEqual(TimeSlotTemplateItem.objects.filter(template=self.template).count(), 3)

    def test_create_item_conflict(self):
        with self.assertRaises(TimeSlotConflict):
            self.service.create_template_item(self.template.id, "11:00", "12:30", self.manager_ctx)

    def test_create_item_unknown_template(self):
        with self.assertRaises(TemplateNotFound):
            self.service.create_template_item(999999, "16:00", "17:00", self.manager_ctx)

    def test_update_item_excludes_itself(self):
        item = self.service.update_template_item(
            self.template.id, self.first.id, "09:00", "11:00", self.manager_ctx
        )
        item.refresh_from_db()
        self.assertEqual((item.start_time, item.end_time), (t("09:00"), t("11:00")))

    def test_update_item_conflicts_with_sibling(self):
        with self.assertRaises(TimeSlotConflict):
            self.service.update_template_item(
                self.template.id, self.first.id, "11:00", "14:00", self.manager_ctx
            )

    def test_update_item_of_other_template(self):
        other = self.make_template("Other")
        with self.assertRaises(TemplateItemNotFound):
            self.service.update_template_item(other.id, self.first.id, "08:00", "09:00", self.manager_ctx)

    def test_update_item_unknown_template(self):
        with self.assertRaises(TemplateNotFound):
            self.service.update_template_item(999999, self.first.id, "08:00", "09:00", self.manager_ctx)

    def test_delete_item(self):
        self.service.delete_template_item(self.template.id, self.second.id, self.manager_ctx)
        self.assertEqual(list(self.template.items.values_list("id", flat=True)), [self.first.id])

    def test_delete_item_not_in_template(self):
        with self.assertRaises(TemplateItemNotFound):
            self.service.delete_template_item(self.template.id, 999999, self.manager_ctx)

    def test_stylist_cannot_edit_items(self):
        with self.assertRaises(PermissionDenied):
            self.service.create_template_item(self.template.id, "16:00", "17:00", self.stylist_ctx)

    def test_template_read_failure_is_wrapped(self):
        with mock.patch.object(TimeSlotTemplate.objects, "filter", side_effect=OperationalError("timeout")):
            with self.assertRaises(PersistenceError) as ctx:
                self.service.get_template(self.template.id, self.manager_ctx)
        self.assertEqual(ctx.exception.operation, "get_template")
