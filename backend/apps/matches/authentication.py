"""
Bot authentication for match ingestion.

The Discord bot presents a shared secret, either as
``Authorization: Bearer <token>`` or the legacy ``X-Bot-Token`` header.
"""
import hmac
import re

from django.conf import settings
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import BasePermission

BEARER_RE = re.compile(r'^Bearer\s+(.+)$', re.IGNORECASE)


class IngestClient:
    """Stand-in user for an authenticated bot request."""

    is_authenticated = True
    is_anonymous = False

    def __str__(self):
        return 'ingest-bot'


def read_bot_token(request) -> str:
    """Pull the token from the Authorization or X-Bot-Token header."""
    auth = request.headers.get('Authorization', '')
    match = BEARER_RE.match(auth)
    if match:
        return match.group(1).strip()
    return request.headers.get('X-Bot-Token', '').strip()


class IngestTokenAuthentication(BaseAuthentication):
    """Authenticate the bot against ``settings.INGEST_TOKEN``."""

    keyword = 'Bearer'

    def authenticate(self, request):
        token = read_bot_token(request)
        if not token:
            return None

        expected = settings.INGEST_TOKEN
        if not expected or not hmac.compare_digest(token.encode(), expected.encode()):
            raise AuthenticationFailed('unauthorized')

        return (IngestClient(), token)

    def authenticate_header(self, request):
        return self.keyword


class IsIngestClient(BasePermission):
    """Allow only requests authenticated with the ingest token."""

    def has_permission(self, request, view):
        return isinstance(request.user, IngestClient)
