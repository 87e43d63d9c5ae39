"""
Django settings for the Zaazu admin backend.

Secrets and store credentials come from an optional ``local_settings.py``
module on the Python path (see ``backend/example_local_settings.py``),
falling back to ``ZAAZU_*`` environment variables.

When no database credentials are found and the emulator flag is off, the
content store runs in demo mode: reads return empty collections and writes
raise ``StoreNotConfiguredError``.
"""

import os
from pathlib import Path

try:
    import local_settings
except ImportError:
    local_settings = None


BASE_DIR = Path(__file__).resolve().parent.parent


def _setting(name, default=None):
    """Read a setting from local_settings first, then from ZAAZU_<name> env."""
    if local_settings is not None and hasattr(local_settings, name):
        return getattr(local_settings, name)
    return os.environ.get(f"ZAAZU_{name}", default)


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


# ============================================================================
# Core
# ============================================================================

SECRET_KEY = _setting("DJANGO_SECRET_KEY", "django-insecure-zaazu-dev-key-change-me")
DEBUG = _flag(_setting("DJANGO_DEBUG", "false"))
ALLOWED_HOSTS = _setting("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1")
if isinstance(ALLOWED_HOSTS, str):
    ALLOWED_HOSTS = [host.strip() for host in ALLOWED_HOSTS.split(",") if host.strip()]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'import_export',
    'api.apps.ApiConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'backend.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'backend.wsgi.application'

# ============================================================================
# Content store (database)
# ============================================================================

USE_STORE_EMULATOR = _flag(_setting("USE_EMULATOR", "false"))

if local_settings is not None and hasattr(local_settings, "DATABASES"):
    DATABASES = local_settings.DATABASES
    CONTENT_STORE_CONFIGURED = True
elif os.environ.get("ZAAZU_DB_NAME"):
    DATABASES = {
        'default': {
            'ENGINE': os.environ.get("ZAAZU_DB_ENGINE", 'django.db.backends.postgresql'),
            'NAME': os.environ["ZAAZU_DB_NAME"],
            'USER': os.environ.get("ZAAZU_DB_USER", ""),
            'PASSWORD': os.environ.get("ZAAZU_DB_PASSWORD", ""),
            'HOST': os.environ.get("ZAAZU_DB_HOST", "localhost"),
            'PORT': os.environ.get("ZAAZU_DB_PORT", "5432"),
        }
    }
    CONTENT_STORE_CONFIGURED = True
elif USE_STORE_EMULATOR:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / '.emulator' / 'zaazu.sqlite3',
        }
    }
    CONTENT_STORE_CONFIGURED = True
else:
    # Demo mode: Django internals still need a database for sessions/auth.
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
    CONTENT_STORE_CONFIGURED = False

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ============================================================================
# Blob store (uploads)
# ============================================================================

MEDIA_ROOT = Path(_setting("MEDIA_ROOT", BASE_DIR / 'media'))
MEDIA_URL = _setting("MEDIA_URL", '/media/')
AVATAR_MAX_SVG_BYTES = 500 * 1024

STATIC_URL = 'static/'

# ============================================================================
# Auth
# ============================================================================

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

JWT_EXPIRATION_HOURS = int(_setting("JWT_EXPIRATION_HOURS", 8))

# ============================================================================
# Google Drive (backup target)
# ============================================================================

GOOGLE_DRIVE_CLIENT_ID = _setting("GOOGLE_DRIVE_CLIENT_ID", "")
GOOGLE_DRIVE_CLIENT_SECRET = _setting("GOOGLE_DRIVE_CLIENT_SECRET", "")
GOOGLE_DRIVE_REDIRECT_URI = _setting(
    "GOOGLE_DRIVE_REDIRECT_URI", "http://localhost:3000/api/google-drive/callback"
)
GOOGLE_DRIVE_TIMEOUT = 30

# ============================================================================
# Internationalization
# ============================================================================

LANGUAGE_CODE = 'pt-br'
TIME_ZONE = 'America/Sao_Paulo'
USE_I18N = True
USE_TZ = True

# ============================================================================
# Logging
# ============================================================================

LOG_LEVEL = str(_setting("LOG_LEVEL", "INFO")).upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'zaazu': {
            'format': '%(asctime)s %(levelname)s [%(name)s] %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'zaazu',
        },
    },
    'loggers': {
        'api': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'backend': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'django': {'handlers': ['console'], 'level': 'WARNING'},
    },
}
