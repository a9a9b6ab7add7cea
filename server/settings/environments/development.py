"""This file contains all the settings that defines the development server.

SECURITY WARNING: don't run with debug turned on in production!
"""

from server.settings.components import config

# Debug pages replace the JSON error handlers, so it is opt-in.
DEBUG = config('DJANGO_DEBUG', cast=bool, default=False)
