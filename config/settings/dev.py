from decouple import config as _config

from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK
from .base import *  # noqa

DEBUG = True

# In dev, allow the browsable API and relaxed CORS
CORS_ALLOW_ALL_ORIGINS = True

# Optional Redis cache for local parity with production snapshot caching
_REDIS_URL = _config("REDIS_URL", default="")
if _REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": _REDIS_URL,
        }
    }

# Analytics events readable on the console while developing
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "events": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "events"},
    },
    "root": {"handlers": ["console"], "level": "INFO"},
    "loggers": {
        "florastock": {"handlers": ["console"], "level": "DEBUG", "propagate": False},
    },
}

# Relaxed throttling for local development
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
_rates = {**BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {})}
_rates.update(
    {
        "catalog": "600/min",
        "analytics": "300/min",
    }
)
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = _rates
