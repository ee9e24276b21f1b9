# scheduling/views.py
#
# Purpose:
# - Thin DRF views over the scheduling services.
# - Staff endpoints (/api/admin/...) need an active StaffProfile; the resolved
#   StaffContext is passed explicitly into every service call.
# - Customer endpoints allow anonymous browsing; the blacklist flag comes from
#   the caller's CustomerProfile when logged in.
#
# Notes for developers:
# - Services raise scheduling.exceptions errors (DRF APIExceptions); views let
#   them propagate and scheduling_exception_handler renders {"code", "detail"}.
# - Ids travel as strings and are parsed with services.id_codec.
#
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from staff.permissions import IsStaffMember

from .context import customer_context_for
from .serializers import (
    BulkCreateSchedulesSerializer,
    BulkDeleteSchedulesSerializer,
    OpenDateSerializer,
    OpenTimeSlotSerializer,
    ScheduleDateSerializer,
    ScheduleSerializer,
    SchedulesFromTemplateSerializer,
    StylistSchedulesSerializer,
    TemplateCreateSerializer,
    TemplateItemSerializer,
    TemplateSerializer,
    TemplateSummarySerializer,
    TemplateUpdateSerializer,
    TimeRangeInputSerializer,
    TimeSlotSerializer,
    TimeSlotUpdateSerializer,
)
from .services.availability_reader import AvailabilityReader
from .services.id_codec import format_id, parse_id, parse_ids
from .services.schedule_store import ScheduleStore
from .services.template_store import TemplateStore

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


def _query_bool(value):
    """'true'/'1' -> True, 'false'/'0' -> False, missing -> None."""
    if value is None or value == "":
        return None
    value = value.strip().lower()
    if value in ("true", "1"):
        return True
    if value in ("false", "0"):
        return False
    return None


def _query_int(value, default, minimum=0, maximum=None):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    number = max(number, minimum)
    if maximum is not None:
        number = min(number, maximum)
    return number


# -------------------- Staff: schedules --------------------
class StoreScheduleListView(APIView):
    """
    GET /api/admin/stores/{store_id}/schedules/?start_date=&end_date=&stylist_ids=&is_available=
    """
    permission_classes = [IsStaffMember]

    def get(self, request, store_id):
        stylist_ids = request.query_params.get("stylist_ids")
        groups = ScheduleStore().list_store_schedules(
            store_id=parse_id(store_id),
            start_date=request.query_params.get("start_date"),
            end_date=request.query_params.get("end_date"),
            staff_context=request.staff_context,
            stylist_ids=parse_ids(stylist_ids.split(",")) if stylist_ids else None,
            is_available=_query_bool(request.query_params.get("is_available")),
        )
        return Response({"stylist_list": StylistSchedulesSerializer(groups, many=True).data})


class StoreScheduleDetailView(APIView):
    """GET /api/admin/stores/{store_id}/schedules/{schedule_id}/"""
    permission_classes = [IsStaffMember]

    def get(self, request, store_id, schedule_id):
        schedule = ScheduleStore().get_schedule(
            store_id=parse_id(store_id),
            schedule_id=parse_id(schedule_id),
            staff_context=request.staff_context,
        )
        data = ScheduleSerializer(schedule).data
        data["stylist"] = {"id": format_id(schedule.stylist.id), "name": schedule.stylist.name}
        return Response(data)


class ScheduleBulkView(APIView):
    """
    POST   /api/admin/stores/{store_id}/schedules/bulk/   create many schedules
    DELETE /api/admin/stores/{store_id}/schedules/bulk/   delete many schedules
    """
    permission_classes = [IsStaffMember]

    def post(self, request, store_id):
        serializer = BulkCreateSchedulesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        schedules = ScheduleStore().create_schedules_bulk(
            stylist_id=parse_id(data["stylist_id"]),
            store_id=parse_id(store_id),
            schedules=data["schedules"],
            staff_context=request.staff_context,
        )
        return Response(
            {"schedules": ScheduleSerializer(schedules, many=True).data},
            status=status.HTTP_201_CREATED,
        )

    def delete(self, request, store_id):
        serializer = BulkDeleteSchedulesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        deleted = ScheduleStore().delete_schedules_bulk(
            stylist_id=parse_id(data["stylist_id"]),
            store_id=parse_id(store_id),
            schedule_ids=parse_ids(data["schedule_ids"]),
            staff_context=request.staff_context,
        )
        return Response({"deleted": [format_id(pk) for pk in deleted]})


class SchedulesFromTemplateView(APIView):
    """POST /api/admin/stores/{store_id}/schedules/from-template/"""
    permission_classes = [IsStaffMember]

    def post(self, request, store_id):
        serializer = SchedulesFromTemplateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        schedules = ScheduleStore().create_schedules_from_template(
            stylist_id=parse_id(data["stylist_id"]),
            store_id=parse_id(store_id),
            template_id=parse_id(data["template_id"]),
            work_dates=data["work_dates"],
            staff_context=request.staff_context,
            note=data.get("note"),
        )
        return Response(
            {"schedules": ScheduleSerializer(schedules, many=True).data},
            status=status.HTTP_201_CREATED,
        )


# -------------------- Staff: time slots --------------------
class TimeSlotCreateView(APIView):
    """POST /api/admin/schedules/{schedule_id}/time-slots/"""
    permission_classes = [IsStaffMember]

    def post(self, request, schedule_id):
        serializer = TimeRangeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        slot = ScheduleStore().create_time_slot(
            schedule_id=parse_id(schedule_id),
            start_time=data["start_time"],
            end_time=data["end_time"],
            staff_context=request.staff_context,
        )
        return Response(TimeSlotSerializer(slot).data, status=status.HTTP_201_CREATED)


class TimeSlotDetailView(APIView):
    """
    PATCH  /api/admin/schedules/{schedule_id}/time-slots/{time_slot_id}/
    DELETE /api/admin/schedules/{schedule_id}/time-slots/{time_slot_id}/
    """
    permission_classes = [IsStaffMember]

    def patch(self, request, schedule_id, time_slot_id):
        serializer = TimeSlotUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        slot = ScheduleStore().update_time_slot(
            schedule_id=parse_id(schedule_id),
            time_slot_id=parse_id(time_slot_id),
            staff_context=request.staff_context,
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            is_available=data.get("is_available"),
        )
        return Response(TimeSlotSerializer(slot).data)

    def delete(self, request, schedule_id, time_slot_id):
        deleted = ScheduleStore().delete_time_slot(
            schedule_id=parse_id(schedule_id),
            time_slot_id=parse_id(time_slot_id),
            staff_context=request.staff_context,
        )
        return Response({"deleted": [format_id(deleted)]})


# -------------------- Staff: templates --------------------
class TemplateListView(APIView):
    """
    GET  /api/admin/time-slot-templates/?name=&limit=&offset=
    POST /api/admin/time-slot-templates/
    """
    permission_classes = [IsStaffMember]

    def get(self, request):
        items, total = TemplateStore().list_templates(
            staff_context=request.staff_context,
            name=request.query_params.get("name") or None,
            limit=_query_int(request.query_params.get("limit"), DEFAULT_PAGE_LIMIT, 1, MAX_PAGE_LIMIT),
            offset=_query_int(request.query_params.get("offset"), 0),
        )
        return Response({"total": total, "items": TemplateSummarySerializer(items, many=True).data})

    def post(self, request):
        serializer = TemplateCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        template = TemplateStore().create_template(
            name=data["name"],
            note=data.get("note", ""),
            items=data["time_slots"],
            staff_context=request.staff_context,
        )
        return Response(TemplateSerializer(template).data, status=status.HTTP_201_CREATED)


class TemplateDetailView(APIView):
    """
    GET    /api/admin/time-slot-templates/{template_id}/
    PATCH  /api/admin/time-slot-templates/{template_id}/
    DELETE /api/admin/time-slot-templates/{template_id}/
    """
    permission_classes = [IsStaffMember]

    def get(self, request, template_id):
        template = TemplateStore().get_template(parse_id(template_id), request.staff_context)
        return Response(TemplateSerializer(template).data)

    def patch(self, request, template_id):
        serializer = TemplateUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        template = TemplateStore().update_template(
            template_id=parse_id(template_id),
            staff_context=request.staff_context,
            name=data.get("name"),
            note=data.get("note"),
        )
        return Response(TemplateSummarySerializer(template).data)

    def delete(self, request, template_id):
        deleted = TemplateStore().delete_template(parse_id(template_id), request.staff_context)
        return Response({"deleted": format_id(deleted)})


class TemplateItemCreateView(APIView):
    """POST /api/admin/time-slot-templates/{template_id}/items/"""
    permission_classes = [IsStaffMember]

    def post(self, request, template_id):
        serializer = TimeRangeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        item = TemplateStore().create_template_item(
            template_id=parse_id(template_id),
            start_time=data["start_time"],
            end_time=data["end_time"],
            staff_context=request.staff_context,
        )
        return Response(TemplateItemSerializer(item).data, status=status.HTTP_201_CREATED)


class TemplateItemDetailView(APIView):
    """
    PATCH  /api/admin/time-slot-templates/{template_id}/items/{item_id}/
    DELETE /api/admin/time-slot-templates/{template_id}/items/{item_id}/
    """
    permission_classes = [IsStaffMember]

    def patch(self, request, template_id, item_id):
        serializer = TimeRangeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        item = TemplateStore().update_template_item(
            template_id=parse_id(template_id),
            item_id=parse_id(item_id),
            start_time=data["start_time"],
            end_time=data["end_time"],
            staff_context=request.staff_context,
        )
        return Response(TemplateItemSerializer(item).data)

    def delete(self, request, template_id, item_id):
        deleted = TemplateStore().delete_template_item(
            template_id=parse_id(template_id),
            item_id=parse_id(item_id),
            staff_context=request.staff_context,
        )
        return Response({"deleted": format_id(deleted)})


# -------------------- Customer: availability --------------------
class StylistScheduleDatesView(APIView):
    """
    GET /api/stores/{store_id}/stylists/{stylist_id}/schedules/?start_date=&end_date=
    Up to 31 days.
    """
    permission_classes = [AllowAny]

    def get(self, request, store_id, stylist_id):
        customer = customer_context_for(request.user)
        dates = AvailabilityReader().list_schedule_dates(
            store_id=store_id,
            stylist_id=stylist_id,
            start_date=request.query_params.get("start_date"),
            end_date=request.query_params.get("end_date"),
            is_blacklisted=customer.is_blacklisted,
        )
        return Response({"schedules": ScheduleDateSerializer(dates, many=True).data})


class StylistOpenDatesView(APIView):
    """
    GET /api/stores/{store_id}/stylists/{stylist_id}/open-dates/?start_date=&end_date=
    Up to 60 days.
    """
    permission_classes = [AllowAny]

    def get(self, request, store_id, stylist_id):
        customer = customer_context_for(request.user)
        items, total = AvailabilityReader().list_open_dates(
            store_id=store_id,
            stylist_id=stylist_id,
            start_date=request.query_params.get("start_date"),
            end_date=request.query_params.get("end_date"),
            is_blacklisted=customer.is_blacklisted,
        )
        return Response({"total": total, "items": OpenDateSerializer(items, many=True).data})


class ScheduleOpenSlotsView(APIView):
    """GET /api/schedules/{schedule_id}/time-slots/"""
    permission_classes = [AllowAny]

    def get(self, request, schedule_id):
        slots = AvailabilityReader().list_slots_for_schedule(
            schedule_id=schedule_id,
            customer_context=customer_context_for(request.user),
        )
        return Response({"time_slots": OpenTimeSlotSerializer(slots, many=True).data})
