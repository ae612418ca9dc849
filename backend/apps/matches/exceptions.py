"""
API error handling.

Every failure the API returns is a JSON body of the form
``{"ok": false, "error": "<code>", ...}`` so the bot can branch on the
code string.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    ParseError,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class SettlementRejected(APIException):
    """
    A match report that cannot be settled.

    Raised before anything is persisted (or inside the settlement
    transaction, which then rolls back).
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'match rejected'
    default_code = 'rejected'

    def __init__(self, code: str, **extra):
        super().__init__(detail=code, code=code)
        self.code = code
        self.extra = extra


def api_exception_handler(exc, context):
    """Reshape DRF errors into the ``ok``/``error`` envelope."""
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'API'}: {exc}",
            exc_info=exc,
        )
        return Response(
            {'ok': False, 'error': 'internal_error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, SettlementRejected):
        response.data = {'ok': False, 'error': exc.code, **exc.extra}
    elif isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        response.data = {'ok': False, 'error': 'unauthorized'}
    elif isinstance(exc, ParseError):
        response.data = {'ok': False, 'error': 'invalid json'}
    elif isinstance(exc, ValidationError):
        response.data = {'ok': False, 'error': 'invalid payload', 'details': response.data}
    else:
        detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
        response.data = {'ok': False, 'error': str(detail)}

    return response
