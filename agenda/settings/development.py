"""
Development settings for the Agenda project.

These settings override the base settings for local development environments.
"""

import os

from .base import *

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY", "django-insecure-development-key-not-for-production")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env("DEBUG", "True") == "True"

ALLOWED_HOSTS = ["*"]

if os.environ.get("USE_SQLITE", "False").lower() != "true":
    DATABASES["default"].update(
        {
            "HOST": os.environ.get("POSTGRES_HOST", "localhost"),
            "CONN_MAX_AGE": 300,
            "OPTIONS": {
                "connect_timeout": 5,
                "sslmode": os.environ.get("POSTGRES_SSL_MODE", "disable"),
            },
        }
    )

# Browsable API is handy while developing
REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = (
    "rest_framework.renderers.JSONRenderer",
    "rest_framework.renderers.BrowsableAPIRenderer",
)

LOGGING["loggers"]["apps"]["level"] = "DEBUG"
