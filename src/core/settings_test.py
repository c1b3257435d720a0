"""Settings used by the test suite: in-memory SQLite and fast hashing."""

from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

ALLOW_SUPERUSER_BYPASS = False
CONTENT_RAISE_ON_UPDATE_FAILURE = False
