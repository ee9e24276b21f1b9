# salon_scheduler/urls.py
#
# Purpose:
# - Project URL router.
# - Staff-facing scheduling APIs live under /api/admin/, customer-facing reads
#   under /api/. Django admin stays at /admin/.
#
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # Django admin
    path("admin/", admin.site.urls),

    # =====
    # API's
    # =====
    path("api/", include("scheduling.urls")),
]
