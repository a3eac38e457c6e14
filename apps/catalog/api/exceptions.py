"""
Project-wide DRF exception handler.

Every error is rendered as {"status": "fail", "message": ..., "error": ...}.
Validation failures use status 422 and a flat list of {field, message}.
"""

import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

from apps.catalog.exceptions import CatalogError

logger = logging.getLogger('apps.catalog')


def flatten_errors(detail, prefix=''):
    """Flatten DRF's nested error detail into [{field, message}] with dotted paths."""
    errors = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            # ListSerializer keys its errors by int index since DRF 3.15
            key = str(key)
            field = f'{prefix}.{key}' if prefix else key
            if key == 'non_field_errors':
                field = prefix
            errors.extend(flatten_errors(value, field))
    elif isinstance(detail, list):
        if all(not isinstance(item, (dict, list)) for item in detail):
            errors.extend({'field': prefix, 'message': str(item)} for item in detail)
        else:
            for index, item in enumerate(detail):
                if item:
                    field = f'{prefix}.{index}' if prefix else str(index)
                    errors.extend(flatten_errors(item, field))
    else:
        errors.append({'field': prefix, 'message': str(detail)})
    return errors


def catalog_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None

    view = context.get('view')
    view_name = view.__class__.__name__ if view else '-'

    if isinstance(exc, exceptions.ValidationError):
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        message = 'Validation failed.'
        error = flatten_errors(exc.detail)
    elif isinstance(exc, CatalogError) and hasattr(exc, 'errors'):
        message = str(exc.detail)
        error = exc.errors
    elif isinstance(exc, Http404):
        message = 'Not found.'
        error = None
    else:
        message = str(getattr(exc, 'detail', exc))
        error = None

    if response.status_code >= 500:
        logger.error("%s failed: %s", view_name, message)
    else:
        logger.warning("%s rejected request (%s): %s", view_name, response.status_code, message)

    response.data = {
        'status': 'fail',
        'message': message,
        'error': error,
    }
    return response
