# scheduling/urls.py
#
# Mounted under /api/ by the project router.
#
from django.urls import path

from . import views

urlpatterns = [
    # ==========
    # Staff APIs
    # ==========
    path("admin/stores/<str:store_id>/schedules/", views.StoreScheduleListView.as_view(), name="store-schedule-list"),
    path("admin/stores/<str:store_id>/schedules/bulk/", views.ScheduleBulkView.as_view(), name="schedule-bulk"),
    path(
        "admin/stores/<str:store_id>/schedules/from-template/",
        views.SchedulesFromTemplateView.as_view(),
        name="schedule-from-template",
    ),
    path(
        "admin/stores/<str:store_id>/schedules/<str:schedule_id>/",
        views.StoreScheduleDetailView.as_view(),
        name="store-schedule-detail",
    ),
    path("admin/schedules/<str:schedule_id>/time-slots/", views.TimeSlotCreateView.as_view(), name="time-slot-create"),
    path(
        "admin/schedules/<str:schedule_id>/time-slots/<str:time_slot_id>/",
        views.TimeSlotDetailView.as_view(),
        name="time-slot-detail",
    ),
    path("admin/time-slot-templates/", views.TemplateListView.as_view(), name="template-list"),
    path("admin/time-slot-templates/<str:template_id>/", views.TemplateDetailView.as_view(), name="template-detail"),
    path(
        "admin/time-slot-templates/<str:template_id>/items/",
        views.TemplateItemCreateView.as_view(),
        name="template-item-create",
    ),
    path(
        "admin/time-slot-templates/<str:template_id>/items/<str:item_id>/",
        views.TemplateItemDetailView.as_view(),
        name="template-item-detail",
    ),

    # =============
    # Customer APIs
    # =============
    path(
        "stores/<str:store_id>/stylists/<str:stylist_id>/schedules/",
        views.StylistScheduleDatesView.as_view(),
        name="stylist-schedule-dates",
    ),
    path(
        "stores/<str:store_id>/stylists/<str:stylist_id>/open-dates/",
        views.StylistOpenDatesView.as_view(),
        name="stylist-open-dates",
    ),
    path("schedules/<str:schedule_id>/time-slots/", views.ScheduleOpenSlotsView.as_view(), name="schedule-open-slots"),
]
