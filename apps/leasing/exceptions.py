"""
Domain errors raised by the catalog engine.

The API layer maps each kind to an HTTP status (see api/exceptions.py).
An unavailable monthly payment is not an error and never raises.
"""


class CatalogError(Exception):
    """Base class for recoverable catalog engine errors."""
    code = 'catalog_error'

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(CatalogError):
    """An id passed to an operation does not exist."""
    code = 'not_found'


class IneligibleSelection(CatalogError):
    """A trim/color/option combination violates trim-scoped eligibility."""
    code = 'ineligible_selection'


class ReferentialIntegrityViolation(CatalogError):
    """Deletion of an item that is still referenced."""
    code = 'referential_integrity_violation'


class MergeConflict(CatalogError):
    """Merge target or a source vanished or changed shape; nothing was applied."""
    code = 'merge_conflict'


class DuplicateName(CatalogError):
    """A vehicle already has another item of that kind with the same name."""
    code = 'duplicate_name'
