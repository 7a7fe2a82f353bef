"""Error taxonomy shared by every app, plus the DRF exception handler.

Services raise these directly; they are ``APIException`` subclasses so views
let them propagate and DRF renders the response. ``AccessDenied`` is rendered
exactly like ``NotFound`` so a caller cannot tell a record that belongs to
somebody else from one that does not exist.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = 'Not found.'


class NotFound(exceptions.NotFound):
    default_detail = NOT_FOUND_DETAIL


class AccessDenied(exceptions.APIException):
    """The principal's scope does not cover the requested record.

    ``reason`` is kept for server-side logs only.
    """
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = NOT_FOUND_DETAIL
    default_code = 'not_found'

    def __init__(self, reason=None):
        super().__init__(NOT_FOUND_DETAIL, self.default_code)
        self.reason = reason or ''


class ValidationError(exceptions.ValidationError):
    """Malformed or out-of-range input; ``detail`` is ``{field: [message]}``."""

    def __init__(self, field, message):
        super().__init__({field: [message]})
        self.field = field
        self.message = message


class InvalidStateTransition(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Invalid state transition.'
    default_code = 'invalid_state_transition'

    def __init__(self, from_state, to_state):
        super().__init__(f'Cannot move from {from_state} to {to_state}.')
        self.from_state = from_state
        self.to_state = to_state


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A conflicting record was written concurrently.'
    default_code = 'conflict'


def portal_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            exc = exceptions.ValidationError(exc.message_dict)
        else:
            exc = exceptions.ValidationError({'non_field_errors': exc.messages})

    if isinstance(exc, AccessDenied):
        view = context.get('view')
        logger.info('Access denied in %s: %s', type(view).__name__ if view else '?', exc.reason)

    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, (AccessDenied, exceptions.NotFound)):
            response.data = {'detail': NOT_FOUND_DETAIL}
        if isinstance(response.data, dict):
            response.data['status_code'] = response.status_code
        if isinstance(exc, InvalidStateTransition):
            response.data['from_state'] = exc.from_state
            response.data['to_state'] = exc.to_state

    return response
