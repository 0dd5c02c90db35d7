"""
Test settings for the Agenda project.

These settings override the base settings for test environments.
"""

from .base import *

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",
        # On disk so threaded booking tests share one database
        "TEST": {"NAME": BASE_DIR / "test_agenda.sqlite3"},
    }
}

# Local memory cache so the booking locks behave like the Redis ones
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "agenda-tests",
    }
}

# Password hashers are slow; use fast ones for tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

USE_I18N = False
TIME_ZONE = "UTC"

AGENDA = {
    **AGENDA,
    "PRE_PAYMENT_LEAD_TIME_HOURS": 48,
    "BOOKING_LOCK_EXPIRES": 5,
    "BOOKING_LOCK_TIMEOUT": 1,
    "SLOT_STEP_MINUTES": 30,
}

# Disable logging during tests to speed them up
LOGGING = {
    "version": 1,
    "disable_existing_loggers": True,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "loggers": {
        "": {
            "handlers": ["null"],
            "level": "CRITICAL",
            "propagate": False,
        },
    },
}
