"""
Domain errors raised by the catalog services.

They derive from DRF's APIException so views can simply let them propagate;
the project exception handler renders them in the API error envelope.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class CatalogError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Catalog request failed.'
    default_code = 'catalog_error'


class CatalogValidationError(CatalogError):
    """Document shape is invalid. `errors` is a list of {field, message}."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = 'Validation failed.'
    default_code = 'invalid'

    def __init__(self, errors, detail=None):
        self.errors = list(errors)
        super().__init__(detail or self.default_detail)


class UnknownReferenceError(CatalogError):
    """Submitted option/variant ids do not belong to the product being edited."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Submitted document references unknown options or variants.'
    default_code = 'unknown_reference'

    def __init__(self, option_ids=(), variant_ids=()):
        self.option_ids = sorted(set(option_ids))
        self.variant_ids = sorted(set(variant_ids))
        super().__init__(self.default_detail)

    @property
    def errors(self):
        errors = [
            {'field': 'option_id', 'message': f'Unknown option {option_id}.'}
            for option_id in self.option_ids
        ]
        errors += [
            {'field': 'variant_id', 'message': f'Unknown variant {variant_id}.'}
            for variant_id in self.variant_ids
        ]
        return errors


class ConstraintViolationError(CatalogError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The change violates a storage constraint and was rolled back.'
    default_code = 'constraint_violation'


class TransientStorageError(CatalogError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Storage is temporarily unavailable, the change was rolled back.'
    default_code = 'storage_unavailable'
