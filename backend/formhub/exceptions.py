"""Error taxonomy shared by the forms and submissions apps.

Services raise these directly; `api_exception_handler` (wired through
``REST_FRAMEWORK['EXCEPTION_HANDLER']``) renders them and logs every failure
with the view that produced it.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.db.models import ProtectedError, RestrictedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ValidationError(exceptions.ValidationError):
    default_detail = 'Invalid input.'
    default_code = 'invalid'


class InvalidVersion(ValidationError):
    default_detail = 'Version does not exist for this form.'
    default_code = 'invalid_version'


class NotFound(exceptions.NotFound):
    default_code = 'not_found'


class AccessDenied(exceptions.PermissionDenied):
    default_detail = 'Access denied.'
    default_code = 'access_denied'


class AuthRequired(exceptions.NotAuthenticated):
    default_detail = 'Authentication required.'
    default_code = 'auth_required'


class Conflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The resource changed while the request was processed.'
    default_code = 'conflict'


class Internal(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal storage error.'
    default_code = 'internal'


def _operation(context) -> str:
    view = context.get('view') if context else None
    if view is None:
        return 'unknown'
    request = context.get('request')
    method = getattr(request, 'method', '') if request is not None else ''
    return f'{view.__class__.__name__}.{method.lower()}' if method else view.__class__.__name__


def _translate(exc):
    if isinstance(exc, Http404):
        return NotFound()
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'error_dict'):
            return ValidationError(exc.message_dict)
        return ValidationError(exc.messages)
    if isinstance(exc, (ProtectedError, RestrictedError)):
        return Conflict('The record is still referenced and cannot be removed.')
    if isinstance(exc, DatabaseError):
        return Internal()
    return exc


def api_exception_handler(exc, context):
    original = exc
    exc = _translate(exc)
    response = exception_handler(exc, context)
    operation = _operation(context)

    if response is None:
        logger.exception('operation=%s unhandled error: %s', operation, original)
        return None

    if response.status_code >= 500:
        logger.error('operation=%s status=%s cause=%r', operation, response.status_code, original)
    else:
        logger.warning('operation=%s status=%s cause=%s', operation, response.status_code, exc)

    data = response.data
    if isinstance(data, dict) and 'detail' in data:
        payload = dict(data)
    elif isinstance(data, list) and len(data) == 1:
        payload = {'detail': data[0]}
    else:
        payload = {'detail': 'Validation failed.', 'errors': data}
    payload['code'] = getattr(exc, 'default_code', 'error')
    payload['status_code'] = response.status_code
    response.data = payload
    return response
