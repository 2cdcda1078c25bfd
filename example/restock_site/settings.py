"""
Demo project settings.

Configuration comes from the environment, like the original game service:

- SECRET_KEY (required): shared secret clients send as X-API-Key.
- RESTOCK_INTERVAL: seconds between restocks (default 300).
- MAX_WAITERS: long-poll capacity (default 1000, "none" for unbounded).
- MAX_WAIT_SECONDS: long-poll suspension limit (unset waits indefinitely).
- PORT: read by the ASGI server command line, not by Django.
"""

import os

from corsheaders.defaults import default_headers

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "restock-demo-not-for-production")
DEBUG = os.getenv("DEBUG", "0") == "1"
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "corsheaders",
    "restock_server",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "restock_site.urls"
ASGI_APPLICATION = "restock_site.asgi.application"

USE_TZ = True
TIME_ZONE = "UTC"


def _optional_number(name, cast):
    value = os.getenv(name)
    return cast(value) if value else None


def _waiter_limit():
    # Unset keeps the default cap; "none" asks for no cap at all.
    value = os.getenv("MAX_WAITERS")
    if value is None or value == "":
        return 1000
    if value.lower() == "none":
        return None
    return int(value)


RESTOCK_SERVER = {
    "API_KEY": os.getenv("SECRET_KEY"),
    "RESTOCK_INTERVAL": int(os.getenv("RESTOCK_INTERVAL", "300")),
    "MAX_WAITERS": _waiter_limit(),
    "MAX_WAIT_SECONDS": _optional_number("MAX_WAIT_SECONDS", float),
    "NOTIFY_ON_STOCK_EDIT": os.getenv("NOTIFY_ON_STOCK_EDIT", "1") == "1",
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "restock_server": {"handlers": ["console"], "level": os.getenv("LOG_LEVEL", "INFO")},
    },
}

# Browser game clients call from any origin, and send the key as a header.
CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOW_HEADERS = [*default_headers, "x-api-key"]
