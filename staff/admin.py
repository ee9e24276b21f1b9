# staff/admin.py
from django.contrib import admin
from .models import StaffProfile, StaffStoreAccess


class StaffStoreAccessInline(admin.TabularInline):
    model = StaffStoreAccess
    extra = 1


@admin.register(StaffProfile)
class StaffProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "is_active")
    list_filter = ("role", "is_active")
    search_fields = ("user__username",)
    inlines = [StaffStoreAccessInline]
