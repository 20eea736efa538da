# backend/wsgi.py
"""
WSGI entrypoint for the ledger backend (gunicorn backend.wsgi).

Deployments select backend.settings.prod through DJANGO_SETTINGS_MODULE;
without it the dev settings load.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
