"""
WSGI config for Imposter Stats project.

Serves the HTTP API only; the leaderboard websocket needs the ASGI entrypoint.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

application = get_wsgi_application()
