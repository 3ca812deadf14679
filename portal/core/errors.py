"""
Error Taxonomy Module

Every failure the storage and API layers report is one of these exceptions.
Each carries the HTTP status the API boundary renders it with, so handlers
never need to inspect the exception type.
"""
from typing import Optional


class PortalError(Exception):
    """Base class for all named portal failures."""
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(PortalError):
    """Unknown id on read, update or delete."""
    status_code = 404
    default_message = "Not found"


class ConflictError(PortalError):
    """Duplicate id on create, or delete blocked by a live reference."""
    status_code = 409
    default_message = "Conflict"


class InvalidReferenceError(PortalError):
    """A request points at a partner that does not exist."""
    status_code = 400
    default_message = "Invalid partner ID"

    def __init__(self, message: Optional[str] = None, field: str = "partnerId"):
        super().__init__(message)
        self.field = field


class UnauthorizedError(PortalError):
    """Admin secret missing or incorrect."""
    status_code = 401
    default_message = "Unauthorized"


class BackingUnavailableError(PortalError):
    """The storage engine could not be reached or failed unexpectedly."""
    status_code = 500
    default_message = "Database not available"
