"""Django settings for the content access engine project.

Environment-driven configuration for Postgres, content paging limits, and
security defaults.
"""
import os
from pathlib import Path
from urllib.parse import urlparse

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def _get_env(name: str, default: str | None = None) -> str | None:
    """Read an environment variable with an optional fallback."""
    return os.environ.get(name, default)


def _parse_database_url(url: str) -> dict:
    """Parse a PostgreSQL-style DATABASE_URL into a Django DATABASES entry."""
    parsed = urlparse(url)
    return {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": parsed.path.lstrip("/"),
        "USER": parsed.username,
        "PASSWORD": parsed.password,
        "HOST": parsed.hostname,
        "PORT": parsed.port or "5432",
    }


SECRET_KEY = _get_env("SECRET_KEY", "dev-secret-key-change-me")
DEBUG = _get_env("DEBUG", "True") == "True"
if not DEBUG and SECRET_KEY in ("change-me", "dev-secret-key-change-me"):
    raise ImproperlyConfigured("SECRET_KEY must be set in production")
ALLOWED_HOSTS = [
    h.strip()
    for h in _get_env("ALLOWED_HOSTS", "localhost,127.0.0.1,0.0.0.0").split(",")
    if h.strip()
]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rest_framework",
    "core",
    "accounts",
    "access_control",
    "content",
    "articles",
    "scripts",
]

DATABASE_URL = _get_env("DATABASE_URL")
if DATABASE_URL:
    DATABASES = {"default": _parse_database_url(DATABASE_URL)}
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": _get_env("POSTGRES_DB", "content_access"),
            "USER": _get_env("POSTGRES_USER", "content_access"),
            "PASSWORD": _get_env("POSTGRES_PASSWORD", "content_access"),
            "HOST": _get_env("POSTGRES_HOST", "localhost"),
            "PORT": _get_env("POSTGRES_PORT", "5433"),
        }
    }

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_USER_MODEL = "accounts.User"

ALLOW_SUPERUSER_BYPASS = _get_env("ALLOW_SUPERUSER_BYPASS", "False") == "True"

# Paging limits applied when assembling list/count queries.
CONTENT_MAX_LIMIT = int(_get_env("CONTENT_MAX_LIMIT", "100"))
CONTENT_DEFAULT_LIMIT = int(_get_env("CONTENT_DEFAULT_LIMIT", "25"))

# Role whose permissions apply to anonymous principals.
CONTENT_ANONYMOUS_ROLE = _get_env("CONTENT_ANONYMOUS_ROLE", "Guest")

# Update failures are logged and swallowed unless this is enabled.
CONTENT_RAISE_ON_UPDATE_FAILURE = _get_env("CONTENT_RAISE_ON_UPDATE_FAILURE", "False") == "True"

CONTENT_LOG_LEVEL = _get_env("CONTENT_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "loggers": {
        "content": {
            "handlers": ["console"],
            "level": CONTENT_LOG_LEVEL,
            "propagate": True,
        },
    },
}
