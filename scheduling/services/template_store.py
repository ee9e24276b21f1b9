"""
template_store.py
-----------------
CRUD over TimeSlotTemplate + TimeSlotTemplateItem.

Same interval rules as schedule slots, scoped to one template, with no date
and no booking state. Any staff role may read templates; writes are limited
to the configured TEMPLATE_MANAGER_ROLES.
"""

import logging

from django.db import transaction

from ..exceptions import AllFieldsEmpty, TemplateItemNotFound, TemplateNotFound
from ..models import TimeSlotTemplate, TimeSlotTemplateItem
from .db import wrap_database_errors
from .intervals import IntervalValidator
from .permission_gate import require_role, template_manager_roles

logger = logging.getLogger(__name__)


class TemplateStore:
    def __init__(self, manager_roles=None):
        self.manager_roles = manager_roles if manager_roles is not None else template_manager_roles()

    def _require_manager(self, staff_context):
        require_role(staff_context, self.manager_roles)

    def _lock_template(self, template_id):
        template = (
            TimeSlotTemplate.objects.select_for_update()
            .filter(pk=template_id)
            .first()
        )
        if template is None:
            raise TemplateNotFound()
        return template

    @staticmethod
    def _existing_items(template):
        return TimeSlotTemplateItem.objects.filter(template=template).values_list(
            "id", "start_time", "end_time"
        )

    # -------------------------
    # Templates
    # -------------------------
    @wrap_database_errors("create_template")
    def create_template(self, name, note, items, staff_context):
        """
        Create a template and its items atomically.

        Args:
            name: 1-50 chars
            note: optional, up to 100 chars
            items: list of {"start_time", "end_time"} dicts or (start, end) pairs

        Raises:
            PermissionDenied, InvalidRange, TimeSlotConflict, PersistenceError
        """
        self._require_manager(staff_context)
        intervals = IntervalValidator.validate(
            (item["start_time"], item["end_time"]) if isinstance(item, dict) else item
            for item in items
        )

        with transaction.atomic():
            template = TimeSlotTemplate.objects.create(
                name=name,
                note=note or "",
                updater_id=staff_context.staff_user_id,
            )
            TimeSlotTemplateItem.objects.bulk_create([
                TimeSlotTemplateItem(
                    template=template,
                    start_time=interval.start,
                    end_time=interval.end,
                )
                for interval in intervals
            ])

        logger.info("Created template=%s with %d items", template.id, len(intervals))
        return self.get_template(template.id, staff_context)

    @wrap_database_errors("update_template")
    def update_template(self, template_id, staff_context, name=None, note=None):
        """
        Update name and/or note.

        Raises:
            PermissionDenied, AllFieldsEmpty, TemplateNotFound, PersistenceError
        """
        self._require_manager(staff_context)
        if name is None and note is None:
            raise AllFieldsEmpty()

        with transaction.atomic():
            template = self._lock_template(template_id)
            fields = ["updater", "updated_at"]
            if name is not None:
                template.name = name
                fields.append("name")
            if note is not None:
                template.note = note
                fields.append("note")
            template.updater_id = staff_context.staff_user_id
            template.save(update_fields=fields)

        logger.info("Updated template=%s", template.id)
        return template

    @wrap_database_errors("delete_template")
    def delete_template(self, template_id, staff_context):
        """Delete a template; its items cascade."""
        self._require_manager(staff_context)

        with transaction.atomic():
            template = self._lock_template(template_id)
            template.delete()

        logger.info("Deleted template=%s", template_id)
        return template_id

    @wrap_database_errors("get_template")
    def get_template(self, template_id, staff_context):
        """
        Template with its items ordered by start time.

        Raises:
            TemplateNotFound
        """
        template = (
            TimeSlotTemplate.objects.filter(pk=template_id)
            .select_related("updater")
            .prefetch_related("items")
            .first()
        )
        if template is None:
            raise TemplateNotFound()
        return template

    @wrap_database_errors("list_templates")
    def list_templates(self, staff_context, name=None, limit=20, offset=0):
        """
        Newest first, optionally filtered by name (case-insensitive contains).

        Returns:
            (list[TimeSlotTemplate], total)
        """
        qs = TimeSlotTemplate.objects.select_related("updater").order_by("-created_at", "-id")
        if name:
            qs = qs.filter(name__icontains=name)
        total = qs.count()
        return list(qs[offset:offset + limit]), total

    # -------------------------
    # Items
    # -------------------------
    @wrap_database_errors("create_template_item")
    def create_template_item(self, template_id, start_time, end_time, staff_context):
        """
        Add one interval to a template.

        Raises:
            PermissionDenied, TemplateNotFound, InvalidRange, TimeSlotConflict,
            PersistenceError
        """
        self._require_manager(staff_context)

        with transaction.atomic():
            template = self._lock_template(template_id)
            interval = IntervalValidator.validate_against(
                start_time, end_time, self._existing_items(template)
            )
            item = TimeSlotTemplateItem.objects.create(
                template=template,
                start_time=interval.start,
                end_time=interval.end,
            )
            template.updater_id = staff_context.staff_user_id
            template.save(update_fields=["updater", "updated_at"])

        logger.info("Created template item=%s on template=%s", item.id, template.id)
        return item

    @wrap_database_errors("update_template_item")
    def update_template_item(self, template_id, item_id, start_time, end_time, staff_context):
        """
        Move one interval, checked against its siblings.

        Raises:
            PermissionDenied, TemplateNotFound, TemplateItemNotFound,
            InvalidRange, TimeSlotConflict, PersistenceError
        """
        self._require_manager(staff_context)

        with transaction.atomic():
            template = self._lock_template(template_id)
            item = TimeSlotTemplateItem.objects.filter(pk=item_id, template=template).first()
            if item is None:
                raise TemplateItemNotFound()

            interval = IntervalValidator.validate_against(
                start_time, end_time, self._existing_items(template), exclude_id=item.id
            )
            item.start_time = interval.start
            item.end_time = interval.end
            item.save(update_fields=["start_time", "end_time"])
            template.updater_id = staff_context.staff_user_id
            template.save(update_fields=["updater", "updated_at"])

        logger.info("Updated template item=%s on template=%s", item.id, template.id)
        return item

    @wrap_database_errors("delete_template_item")
    def delete_template_item(self, template_id, item_id, staff_context):
        """
        Raises:
            PermissionDenied, TemplateNotFound, TemplateItemNotFound, PersistenceError
        """
        self._require_manager(staff_context)

        with transaction.atomic():
            template = self._lock_template(template_id)
            deleted, _ = TimeSlotTemplateItem.objects.filter(pk=item_id, template=template).delete()
            if not deleted:
                raise TemplateItemNotFound()
            template.updater_id = staff_context.staff_user_id
            template.save(update_fields=["updater", "updated_at"])

        logger.info("Deleted template item=%s on template=%s", item_id, template_id)
        return item_id
