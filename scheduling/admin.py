from django.contrib import admin
from .models import (
    CustomerProfile,
    Schedule,
    Store,
    Stylist,
    TimeSlot,
    TimeSlotTemplate,
    TimeSlotTemplateItem,
)

@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)
    list_editable = ("is_active",)  # allow inline toggle

@admin.register(Stylist)
class StylistAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "staff_user", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)

@admin.register(CustomerProfile)
class CustomerProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "phone", "is_blacklisted")
    list_filter = ("is_blacklisted",)
    search_fields = ("name", "phone")


class TimeSlotInline(admin.TabularInline):
    model = TimeSlot
    extra = 0

@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    # Slot edits here bypass the overlap checks in scheduling.services; prefer the API.
    list_display = ("id", "work_date", "stylist", "store")
    list_filter = ("store", "stylist")
    search_fields = ("stylist__name", "store__name")
    date_hierarchy = "work_date"
    inlines = [TimeSlotInline]


class TimeSlotTemplateItemInline(admin.TabularInline):
    model = TimeSlotTemplateItem
    extra = 0

@admin.register(TimeSlotTemplate)
class TimeSlotTemplateAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "updater", "updated_at")
    search_fields = ("name",)
    inlines = [TimeSlotTemplateItemInline]
