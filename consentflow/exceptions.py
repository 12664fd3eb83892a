# consentflow/exceptions.py
"""
Error taxonomy shared by every app and the DRF exception handler that turns
it into HTTP responses.

Services raise these exceptions directly; views let them propagate and the
handler renders ``{"error": <message>}`` with the matching status code.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import Model
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ConsentFlowError(exceptions.APIException):
    """Base class for the application's domain errors"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error.'
    default_code = 'error'


class ValidationError(ConsentFlowError):
    """A required field is missing or malformed"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid data.'
    default_code = 'validation_error'


class AuthError(ConsentFlowError):
    """Submitted credentials do not match"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid credentials.'
    default_code = 'auth_error'


class NotFoundError(ConsentFlowError):
    """Unknown id or foreign key"""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class ConflictError(ConsentFlowError):
    """Duplicate value for a unique field"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Duplicate record.'
    default_code = 'conflict'


class PreconditionError(ConsentFlowError):
    """The record is not in a state that allows the operation"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Operation not allowed in the current state.'
    default_code = 'precondition_failed'


class UpstreamError(ConsentFlowError):
    """An external service (AI, mail) failed"""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'External service failure.'
    default_code = 'upstream_error'


class MailerUnavailable(UpstreamError):
    """Outgoing mail is not configured"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Email delivery is not configured.'
    default_code = 'mailer_unavailable'


def api_exception_handler(exc, context):
    """
    Normalize every failure into ``{"error": ...}``.

    - DRF serializer errors become 400 with the field errors under ``details``
    - database unique violations become 409
    - anything unexpected is logged and reported as a generic 500
    """
    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error: {exc}")
        exc = ConflictError()

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        view_name = view.__class__.__name__ if view else 'unknown view'
        logger.error(f"Unhandled error in {view_name}: {exc}", exc_info=exc)
        return Response(
            {'error': 'Internal server error.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = {'error': 'Invalid data.', 'details': response.data}
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'error': response.data['detail']}

    return response


def get_object_or_not_found(queryset, pk, label):
    """
    Fetch ``pk`` from a model or queryset, raising NotFoundError when the id
    is unknown or is not a well-formed UUID.
    """
    if isinstance(queryset, type) and issubclass(queryset, Model):
        queryset = queryset._default_manager.all()

    try:
        return queryset.get(pk=pk)
    except (queryset.model.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError(f"{label} {pk} does not exist.")
