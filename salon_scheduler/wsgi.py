"""
WSGI config for salon_scheduler.

Exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "salon_scheduler.settings")

application = get_wsgi_application()
