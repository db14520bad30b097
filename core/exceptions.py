"""
API error taxonomy and the REST framework exception handler that renders it.

Services raise these exceptions and views let them propagate. Every error
response has the shape ``{'error': <message>, 'code': <code>}``; validation
failures add ``'details'`` with the field-level messages.

    ValidationError        400  malformed or out-of-range input
    Unauthorized           401  no valid current user
    NotFound               404  entity absent or owned by someone else
    ConflictError          409  invariant violated at the boundary
    TransientStoreFailure  503  database unavailable
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import InterfaceError, OperationalError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

ValidationError = exceptions.ValidationError
NotFound = exceptions.NotFound
Unauthorized = exceptions.NotAuthenticated


class ConflictError(exceptions.APIException):
    """The operation would violate an invariant of the current state"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Request conflicts with the current state of the resource'
    default_code = 'conflict'


class TransientStoreFailure(exceptions.APIException):
    """The database could not be reached; nothing was committed"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Storage is temporarily unavailable. Please try again.'
    default_code = 'store_unavailable'


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render errors as ``{'error', 'code'}`` payloads.

    Django model validation (``full_clean``) becomes a 400 and database
    connectivity errors become a 503 instead of an unhandled 500.
    """
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
        exc = exceptions.ValidationError(detail)
    elif isinstance(exc, (OperationalError, InterfaceError)):
        view = context.get('view')
        logger.error(
            f"Database unavailable in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=True
        )
        exc = TransientStoreFailure()

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            'error': _first_message(exc.detail),
            'code': 'validation_error',
            'details': exc.detail,
        }
        return response

    message = response.data.get('detail', '') if isinstance(response.data, dict) else response.data
    code = exc.get_codes() if isinstance(exc, exceptions.APIException) else 'error'
    response.data = {'error': str(message), 'code': code}
    return response
