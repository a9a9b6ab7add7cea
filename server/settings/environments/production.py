"""This file contains all the settings used in production.

This file is required and if development.py is present these
values are overridden.
"""

from decouple import Csv

from server.settings.components import config

DEBUG = False

# Production must name its hosts explicitly
ALLOWED_HOSTS = config('DJANGO_ALLOWED_HOSTS', cast=Csv())

SECURE_CONTENT_TYPE_NOSNIFF = True
