"""
utils.py
--------
Read scheduling configuration with runtime overrides.

Lookup order for a key:
1. configmgr.SystemSetting row with that key
2. settings.SCHEDULING[key]
3. the caller's default
"""

import logging

from django.conf import settings
from django.db import DatabaseError

from .models import SystemSetting

logger = logging.getLogger(__name__)


def get_setting(key: str, default=None):
    """
    Return the raw value for `key`.
    SystemSetting values are strings; settings.SCHEDULING values keep their type.
    """
    try:
        row = SystemSetting.objects.filter(key=key).first()
    except DatabaseError:
        # Settings table missing (e.g. before migrate); fall back to static config.
        logger.warning("SystemSetting lookup failed for %s; using static settings", key)
        row = None

    if row is not None:
        return row.value

    scheduling = getattr(settings, "SCHEDULING", {}) or {}
    return scheduling.get(key, default)


def get_list_setting(key: str, default=()):
    """
    Return `key` as a list of upper-cased, trimmed strings.
    Accepts either a comma-separated string or an iterable.
    """
    value = get_setting(key, None)
    if value is None:
        value = default

    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)

    return [str(item).strip().upper() for item in items if str(item).strip()]
