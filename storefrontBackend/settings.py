"""
Django settings for storefrontBackend project.

Every deployment-specific value is read from the environment; the defaults
are suitable for local development only.
"""

import os
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name: str, default: bool = False) -> bool:
    return os.environ.get(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


DEBUG = env_bool("DEBUG")

SECRET_KEY = os.environ.get("SECRET_KEY")
if not SECRET_KEY:
    if not DEBUG:
        raise ImproperlyConfigured("SECRET_KEY environment variable is required")
    SECRET_KEY = "django-insecure-local-development-key"

ALLOWED_HOSTS = [host.strip() for host in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if host]

TESTING = False

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local
    "storefront",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "storefrontBackend.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "storefrontBackend.wsgi.application"
ASGI_APPLICATION = "storefrontBackend.asgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": os.environ.get("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("DB_USER", ""),
        "PASSWORD": os.environ.get("DB_PASSWORD", ""),
        "HOST": os.environ.get("DB_HOST", ""),
        "PORT": os.environ.get("DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Cache (the local order history lives here)
REDIS_URL = os.environ.get("REDIS_URL")
if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": REDIS_URL,
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "storefront",
        }
    }

STOREFRONT_STORAGE_CACHE_ALIAS = "default"

SESSION_ENGINE = "django.contrib.sessions.backends.db"

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Email
EMAIL_BACKEND = os.environ.get("EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend")
EMAIL_HOST = os.environ.get("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", "587"))
EMAIL_USE_TLS = env_bool("EMAIL_USE_TLS", True)
EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
DEFAULT_FROM_EMAIL = os.environ.get("DEFAULT_FROM_EMAIL", "orders@storefront.local")

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Storefront API",
    "DESCRIPTION": "Cart, checkout and order tracking for the marketplace storefront",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}

# Storefront business configuration
STOREFRONT = {
    "STORE_NAME": os.environ.get("STORE_NAME", "Storefront"),
    "SUPPORT_EMAIL": os.environ.get("SUPPORT_EMAIL", DEFAULT_FROM_EMAIL),
    "TAX_RATE": os.environ.get("STOREFRONT_TAX_RATE", "0.12"),
    "FREE_SHIPPING_THRESHOLD": os.environ.get("STOREFRONT_FREE_SHIPPING_THRESHOLD", "25.00"),
    "FLAT_SHIPPING_FEE": os.environ.get("STOREFRONT_FLAT_SHIPPING_FEE", "3.50"),
    "ORDER_HISTORY_CAPACITY": int(os.environ.get("STOREFRONT_ORDER_HISTORY_CAPACITY", "50")),
    "ORDER_ID_PREFIX": "AGC",
    "CHECKOUT_LOCK_TIMEOUT": int(os.environ.get("STOREFRONT_CHECKOUT_LOCK_TIMEOUT", "60")),
    "ORDERS_COLLECTION": "orders",
    "DEFAULT_PRODUCT_IMAGE": "images/products/placeholder.webp",
    "DELIVERY_ZONES": {
        "pichincha": {"min_days": 1, "max_days": 2, "fee": "0.00"},
        "guayas": {"min_days": 2, "max_days": 3, "fee": "0.00"},
        "azuay": {"min_days": 3, "max_days": 4, "fee": "2.50"},
        "default": {"min_days": 3, "max_days": 4, "fee": "5.00"},
    },
}

# Infrastructure backends (see infrastructure/container.py)
INFRASTRUCTURE = {
    "PERSISTENCE_BACKEND": os.environ.get("PERSISTENCE_BACKEND", "django"),
    "NOTIFICATION_BACKEND": os.environ.get("NOTIFICATION_BACKEND", "email"),
    "STORAGE_BACKEND": os.environ.get("STORAGE_BACKEND", "cache"),
}

# Logging
LOG_LEVEL = os.environ.get("DJANGO_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "storefront": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "infrastructure": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}
