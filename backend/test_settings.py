"""Settings used by the test suite: in-memory sqlite, store configured."""

import tempfile

from .settings import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}
CONTENT_STORE_CONFIGURED = True

MEDIA_ROOT = tempfile.mkdtemp(prefix="zaazu-media-")

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

LOGGING['loggers']['api']['level'] = 'WARNING'  # noqa: F405
