import os
from pathlib import Path

from decouple import Csv, config

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Core security
SECRET_KEY = config("SECRET_KEY", default="dev-secret-key-change-me")

# Hosts and CORS
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())
CORS_ALLOW_ALL_ORIGINS = config("CORS_ALLOW_ALL_ORIGINS", default=True, cast=bool)
CORS_ALLOWED_ORIGINS = config("CORS_ALLOWED_ORIGINS", default="", cast=Csv())
CSRF_TRUSTED_ORIGINS = config("CSRF_TRUSTED_ORIGINS", default="", cast=Csv())

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party
    "rest_framework",
    "django_filters",
    "drf_spectacular",
    "corsheaders",
    # Local
    "catalog",
    "inventory",
    "analytics",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

# Database
DB_ENGINE = config("DATABASE_ENGINE", default="sqlite")
if DB_ENGINE.lower() == "postgres":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": config("DATABASE_NAME", default="postgres"),
            "USER": config("DATABASE_USER", default="postgres"),
            "PASSWORD": config("DATABASE_PASSWORD", default=""),
            "HOST": config("DATABASE_HOST", default="localhost"),
            "PORT": config("DATABASE_PORT", default="5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

LANGUAGE_CODE = "en-us"
TIME_ZONE = config("TIME_ZONE", default="UTC")
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Django 5 storages for whitenoise
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Cache: local memory unless an environment overrides it (see dev/prod)
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "florastock",
    }
}

# Replenishment analytics
ANALYTICS_SNAPSHOT_CACHE_KEY = config("ANALYTICS_SNAPSHOT_CACHE_KEY", default="analytics:inventory-snapshot")
# Seconds; clamped to 60..300 when read
ANALYTICS_SNAPSHOT_CACHE_TTL = config("ANALYTICS_SNAPSHOT_CACHE_TTL", default=60, cast=int)
ANALYTICS_MAX_WORKERS = config("ANALYTICS_MAX_WORKERS", default=os.cpu_count() or 1, cast=int)
ANALYTICS_ITEM_TIMEOUT = config("ANALYTICS_ITEM_TIMEOUT", default=10.0, cast=float)
# Evaluate items on the calling thread instead of the pool
ANALYTICS_RUN_INLINE = config("ANALYTICS_RUN_INLINE", default=False, cast=bool)
ANALYTICS_SERVICE_LEVEL = config("ANALYTICS_SERVICE_LEVEL", default=0.95, cast=float)
ANALYTICS_EXPIRY_WINDOW_DAYS = config("ANALYTICS_EXPIRY_WINDOW_DAYS", default=7, cast=int)
# Optional overrides for analytics.policy.ReplenishmentPolicy fields
ANALYTICS_POLICY = {}

# DRF + Spectacular
REST_FRAMEWORK = {
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 20,
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.OrderingFilter",
        "rest_framework.filters.SearchFilter",
    ],
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.ScopedRateThrottle",
        "rest_framework.throttling.AnonRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {
        # Global throttles
        "anon": "120/min",
        # Scoped throttles
        "catalog": "120/min",
        # Snapshot-backed reads are cached but a cold pass touches every flower
        "analytics": "60/min",
    },
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Florastock API",
    "DESCRIPTION": "Perishable inventory and replenishment analytics API",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}
