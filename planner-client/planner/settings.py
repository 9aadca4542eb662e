"""Django settings for the planner client.

Only the pieces the client uses are configured: the cache used for event
reads, logging, and the PLANNER app settings read through planner.conf.
"""

import os

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "planner-client-insecure-key")

DEBUG = os.environ.get("DJANGO_DEBUG", "") == "1"

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "planner",
]

USE_TZ = True

TIME_ZONE = "UTC"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "planner-events",
        "TIMEOUT": None,
    },
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "planner": {
            "handlers": ["console"],
            "level": os.environ.get("PLANNER_LOG_LEVEL", "INFO"),
        },
    },
}

PLANNER = {
    "API_URL": os.environ.get("PLANNER_API_URL", "http://localhost:3000/api"),
    "CACHE_TTL": int(os.environ.get("PLANNER_CACHE_TTL", "30")),
    "CACHE_ALIAS": "default",
    "HTTP_TIMEOUT": float(os.environ.get("PLANNER_HTTP_TIMEOUT", "10")),
    "MAX_RECURRENCES": 366,
}
