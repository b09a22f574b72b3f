from .base import *  # noqa
from .base import BASE_DIR
from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK

# Test settings: force SQLite so the suite runs without external services
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "florastock-tests",
    }
}

# Snapshot items run inline so ORM reads stay inside the test transaction;
# pool behaviour is exercised with in-memory readers.
ANALYTICS_RUN_INLINE = True
ANALYTICS_MAX_WORKERS = 1
ANALYTICS_ITEM_TIMEOUT = 5.0
ANALYTICS_SERVICE_LEVEL = 0.95
ANALYTICS_EXPIRY_WINDOW_DAYS = 7
ANALYTICS_POLICY = {}

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

# Slightly relax throttling for tests to reduce flakiness
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    **BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {}),
    "anon": "10000/min",
    "catalog": "10000/min",
    "analytics": "10000/min",
}
