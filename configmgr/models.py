# configmgr/models.py
from django.db import models


class SystemSetting(models.Model):
    """
    Runtime overrides for settings.SCHEDULING, editable in the admin.

    Keys read by the scheduling engine (comma-separated role lists):
      - BLANKET_ACCESS_ROLES    e.g. 'SUPER_ADMIN'
      - TEMPLATE_MANAGER_ROLES  e.g. 'SUPER_ADMIN,ADMIN,MANAGER'
    """
    key = models.CharField(max_length=100, unique=True)
    value = models.CharField(max_length=200)
    description = models.CharField(max_length=200, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}={self.value}"
