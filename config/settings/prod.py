import sentry_sdk
from decouple import Csv, config
from sentry_sdk.integrations.django import DjangoIntegration

from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK
from .base import *  # noqa

DEBUG = False

# Require explicit secret key and hosts in production
SECRET_KEY = config("SECRET_KEY")
ALLOWED_HOSTS = config("ALLOWED_HOSTS", cast=Csv())

CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = config("CORS_ALLOWED_ORIGINS", default="", cast=Csv())
CSRF_TRUSTED_ORIGINS = config("CSRF_TRUSTED_ORIGINS", default="", cast=Csv())
CORS_ALLOW_CREDENTIALS = config("CORS_ALLOW_CREDENTIALS", default=True, cast=bool)
SESSION_COOKIE_SAMESITE = config("SESSION_COOKIE_SAMESITE", default="Lax")
CSRF_COOKIE_SAMESITE = config("CSRF_COOKIE_SAMESITE", default="Lax")

# Security hardening
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = config("SECURE_HSTS_SECONDS", default=31536000, cast=int)
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

# Cache: Redis shares the analytics snapshot across workers when REDIS_URL is provided
_REDIS_URL = config("REDIS_URL", default="")
if _REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": _REDIS_URL,
        }
    }

# Logging: JSON output with contextual extras
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "config.logging.JsonFormatter",
        },
    },
    "filters": {
        # Sample INFO analytics logs (per-item fallbacks are chatty) but never
        # drop the snapshot summary or excluded-item events.
        "analytics_info_sample": {
            "()": "config.logging.SamplingFilter",
            "rate": config("ANALYTICS_LOG_SAMPLE_RATE", default=1.0, cast=float),
            "levels": ["INFO", "WARNING"],
            "allow_events": ["analytics.snapshot_built", "analytics.item_failed"],
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
        "analytics_console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "filters": ["analytics_info_sample"],
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
    "loggers": {
        "florastock.inventory": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        # Analytics logger uses a dedicated handler with sampling
        "florastock.analytics": {
            "handlers": ["analytics_console"],
            "level": "INFO",
            "propagate": False,
        },
    },
}

# Sentry
SENTRY_DSN = config("SENTRY_DSN", default="")
if SENTRY_DSN:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=config("SENTRY_ENV", default="production"),
        integrations=[DjangoIntegration()],
        traces_sample_rate=config("SENTRY_TRACES_SAMPLE_RATE", default=0.0, cast=float),
        send_default_pii=config("SENTRY_SEND_DEFAULT_PII", default=False, cast=bool),
    )

# DRF throttling scopes in production
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
_rates = {**BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {})}
_rates.update(
    {
        "catalog": config("CATALOG_THROTTLE_RATE", default="120/min"),
        "analytics": config("ANALYTICS_THROTTLE_RATE", default="60/min"),
    }
)
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = _rates
