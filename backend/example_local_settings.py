# Copy to local_settings.py (on the Python path) and fill in.
DJANGO_SECRET_KEY = 'your-secret-key-here'
DJANGO_DEBUG = True
DJANGO_ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

# Content store credentials. Leave DATABASES out (and ZAAZU_USE_EMULATOR unset)
# to run in demo mode: reads return nothing, writes fail.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': 'zaazu',
        'USER': 'zaazu',
        'PASSWORD': '',
        'HOST': 'localhost',
        'PORT': '5432',
    }
}

# Uploaded thumbnails, avatar SVGs and achievement audio
MEDIA_ROOT = '/srv/zaazu/media'
MEDIA_URL = '/media/'

# Google Drive backup target (OAuth client)
GOOGLE_DRIVE_CLIENT_ID = ''
GOOGLE_DRIVE_CLIENT_SECRET = ''
GOOGLE_DRIVE_REDIRECT_URI = 'http://localhost:3000/api/google-drive/callback'

LOG_LEVEL = 'INFO'
