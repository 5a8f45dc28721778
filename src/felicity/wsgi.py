"""WSGI config for the Felicity project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "felicity.settings")

application = get_wsgi_application()
