# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS

Fail closed on anything that would let a misconfigured deployment post
vouchers:
- DEBUG forced off, SECRET_KEY and ALLOWED_HOSTS required
- Postgres only; persistent connections with health checks
- item line amounts are always re-verified against quantity * rate
- CORS/CSRF origins explicit and https only
- static files served by WhiteNoise behind a TLS-terminating proxy
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import BASE_DIR, MIDDLEWARE, env  # explicit for Ruff (F405)

DEBUG = False


def _required(value, message):
    if not value:
        raise ImproperlyConfigured(message)
    return value


def _public_https_origins(name: str) -> list[str]:
    origins = _required(env.list(name, default=[]), f"{name} must be set in production.")
    for origin in origins:
        if "localhost" in origin or "127.0.0.1" in origin:
            raise ImproperlyConfigured(f"Remove localhost from {name} in production.")
        if not origin.startswith("https://"):
            raise ImproperlyConfigured(f"{name} must be https:// in production.")
    return origins


# ----------------------------
# Secrets / hosts
# ----------------------------
SECRET_KEY = (env("SECRET_KEY", default="") or "").strip()
if SECRET_KEY in ("", "dev-insecure-change-me"):
    raise ImproperlyConfigured("SECRET_KEY must be set to a strong value in production.")

ALLOWED_HOSTS = _required(
    env.list("ALLOWED_HOSTS", default=[]), "ALLOWED_HOSTS must be set in production."
)

# ----------------------------
# Database: Postgres only
# ----------------------------
_database_url = (env("DATABASE_URL", default="") or "").strip()
_required(_database_url, "DATABASE_URL must be set in production (Postgres).")
if not _database_url.startswith(("postgres://", "postgresql://", "pgsql://", "psql://", "postgis://")):
    raise ImproperlyConfigured("Production DATABASE_URL must point at Postgres.")

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)
DATABASES["default"]["CONN_HEALTH_CHECKS"] = True

# ----------------------------
# Posting safety
# ----------------------------
if not VOUCHER_VERIFY_LINE_AMOUNTS:  # noqa: F405
    raise ImproperlyConfigured(
        "VOUCHER_VERIFY_LINE_AMOUNTS cannot be disabled in production."
    )

# ----------------------------
# Static files (WhiteNoise)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ----------------------------
# Proxy / SSL / cookies
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)

SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True
CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"

# ----------------------------
# CORS / CSRF (JWT in headers, no cookies cross-origin)
# ----------------------------
CORS_ALLOWED_ORIGINS = _public_https_origins("CORS_ALLOWED_ORIGINS")
CSRF_TRUSTED_ORIGINS = _public_https_origins("CSRF_TRUSTED_ORIGINS")
CORS_ALLOW_CREDENTIALS = False
