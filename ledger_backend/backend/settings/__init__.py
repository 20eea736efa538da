# backend/settings/__init__.py
"""
Settings package. Nothing is imported here; DJANGO_SETTINGS_MODULE names a
concrete module:
- backend.settings.dev   local development and the test suite
- backend.settings.prod  deployments (fails closed on missing config)
"""
