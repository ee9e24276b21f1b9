# scheduling/serializers.py
#
# Purpose:
# - Request serializers: shape and format checks only (dates 'YYYY-MM-DD',
#   times 'HH:MM', length limits). Interval, ownership and existence rules
#   live in scheduling.services.
# - Response serializers: ids rendered as strings, times as 'HH:MM'.
#
from rest_framework import serializers

from .models import Schedule, TimeSlot, TimeSlotTemplate, TimeSlotTemplateItem

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def _time_field(**kwargs):
    return serializers.TimeField(format=TIME_FORMAT, input_formats=[TIME_FORMAT], **kwargs)


def _date_field(**kwargs):
    return serializers.DateField(format=DATE_FORMAT, input_formats=[DATE_FORMAT], **kwargs)


# -------------------- Requests --------------------
class TimeRangeInputSerializer(serializers.Serializer):
    start_time = _time_field()
    end_time = _time_field()


class ScheduleInputSerializer(serializers.Serializer):
    work_date = _date_field()
    note = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    time_slots = TimeRangeInputSerializer(many=True, allow_empty=False)


class BulkCreateSchedulesSerializer(serializers.Serializer):
    stylist_id = serializers.CharField()
    schedules = ScheduleInputSerializer(many=True, allow_empty=False)


class BulkDeleteSchedulesSerializer(serializers.Serializer):
    stylist_id = serializers.CharField()
    schedule_ids = serializers.ListField(child=serializers.CharField(), allow_empty=False)


class SchedulesFromTemplateSerializer(serializers.Serializer):
    stylist_id = serializers.CharField()
    template_id = serializers.CharField()
    work_dates = serializers.ListField(child=_date_field(), allow_empty=False)
    note = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class TimeSlotUpdateSerializer(serializers.Serializer):
    start_time = _time_field(required=False)
    end_time = _time_field(required=False)
    is_available = serializers.BooleanField(required=False)


class TemplateCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=50)
    note = serializers.CharField(max_length=100, required=False, allow_blank=True)
    time_slots = TimeRangeInputSerializer(many=True, allow_empty=False)


class TemplateUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=50, required=False)
    note = serializers.CharField(max_length=100, required=False, allow_blank=True)


# -------------------- Responses --------------------
class TimeSlotSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    start_time = _time_field()
    end_time = _time_field()

    class Meta:
        model = TimeSlot
        fields = ["id", "start_time", "end_time", "is_available"]


class ScheduleSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    work_date = _date_field()
    note = serializers.CharField(allow_null=True)
    time_slots = TimeSlotSerializer(many=True, read_only=True)

    class Meta:
        model = Schedule
        fields = ["id", "work_date", "note", "time_slots"]


class FilteredScheduleSerializer(ScheduleSerializer):
    """Schedule whose slots were pre-filtered into `filtered_slots`."""
    time_slots = TimeSlotSerializer(many=True, read_only=True, source="filtered_slots")


class StylistSchedulesSerializer(serializers.Serializer):
    stylist_id = serializers.CharField(source="stylist.id")
    name = serializers.CharField(source="stylist.name")
    schedules = FilteredScheduleSerializer(many=True)


class TemplateItemSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    start_time = _time_field()
    end_time = _time_field()

    class Meta:
        model = TimeSlotTemplateItem
        fields = ["id", "start_time", "end_time"]


class TemplateSummarySerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    updater = serializers.CharField(source="updater.username", default=None)

    class Meta:
        model = TimeSlotTemplate
        fields = ["id", "name", "note", "updater", "created_at", "updated_at"]


class TemplateSerializer(TemplateSummarySerializer):
    time_slots = TemplateItemSerializer(many=True, read_only=True, source="items")

    class Meta(TemplateSummarySerializer.Meta):
        fields = TemplateSummarySerializer.Meta.fields + ["time_slots"]


class ScheduleDateSerializer(serializers.Serializer):
    id = serializers.CharField()
    work_date = _date_field()


class OpenDateSerializer(serializers.Serializer):
    date = _date_field()
    available_slots = serializers.IntegerField()


class OpenTimeSlotSerializer(serializers.Serializer):
    id = serializers.CharField()
    start_time = _time_field()
    end_time = _time_field()
    duration_minutes = serializers.IntegerField()
