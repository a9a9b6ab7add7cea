"""Django settings for the image gateway.

The gateway keeps no state of its own: there are no models and no database.
"""

from typing import Final

from decouple import Csv

from server.settings.components import config

SECRET_KEY = config('DJANGO_SECRET_KEY', default='insecure-dev-only-key')

DEBUG = config('DJANGO_DEBUG', cast=bool, default=False)

ALLOWED_HOSTS = config('DJANGO_ALLOWED_HOSTS', cast=Csv(), default='*')

INSTALLED_APPS: tuple[str, ...] = (
    'server.apps.images',
)

MIDDLEWARE: tuple[str, ...] = (
    'django.middleware.security.SecurityMiddleware',
    # Must run before any view so denied origins never reach routing:
    'server.apps.images.middleware.OriginAllowListMiddleware',
    'django.middleware.common.CommonMiddleware',
)

ROOT_URLCONF = 'server.urls'

WSGI_APPLICATION = 'server.wsgi.application'

DATABASES: dict[str, dict[str, str]] = {}

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = False

USE_TZ = True

# API paths are matched exactly, `/upload/` is not `/upload`
APPEND_SLASH = False

# Uploads
# https://docs.djangoproject.com/en/5.1/ref/settings/#file-upload-handlers

MAX_UPLOAD_SIZE: Final = 10 * 1024 * 1024  # 10 MiB

UPLOAD_FIELD_NAME: Final = 'file'

FILE_UPLOAD_HANDLERS: tuple[str, ...] = (
    'server.apps.images.infrastructure.intake.CappedMemoryUploadHandler',
)
