"""
Development settings for Imposter Stats project.
"""
import os

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# CORS settings for development
CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOW_CREDENTIALS = True

# Database - SQLite for easy development, PostgreSQL for more realistic testing
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

# Uncomment to use PostgreSQL in development
# DATABASES = {
#     'default': {
#         'ENGINE': 'django.db.backends.postgresql',
#         'NAME': os.environ.get('DB_NAME', 'imposter_stats'),
#         'USER': os.environ.get('DB_USER', 'imposter'),
#         'PASSWORD': os.environ.get('DB_PASSWORD', 'devpassword'),
#         'HOST': os.environ.get('DB_HOST', 'localhost'),
#         'PORT': os.environ.get('DB_PORT', '5432'),
#     }
# }

# Channel layers - in-memory for development
CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels.layers.InMemoryChannelLayer',
    },
}

# A fixed token so the bot can be pointed at a local server
INGEST_TOKEN = os.environ.get('BOT_INGEST_TOKEN', 'dev-ingest-token')

LOGGING['loggers']['apps']['level'] = 'DEBUG'

# Disable throttling in development
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []
