"""
Portal error taxonomy.

Service operations catch store and storage failures at their boundary and
re-raise one of these. Routers map them to a single user-facing message.
Nothing in the engine retries.
"""
from typing import Dict, Optional


class PortalError(Exception):
    """Base class for engine errors."""
    pass


class ValidationError(PortalError):
    """Missing or invalid required field. Nothing was written."""

    def __init__(self, fields: Dict[str, bool], message: Optional[str] = None):
        self.fields = fields
        invalid = [name for name, flagged in fields.items() if flagged]
        super().__init__(message or f"Invalid or missing fields: {', '.join(invalid)}")

    @property
    def invalid_fields(self):
        return [name for name, flagged in self.fields.items() if flagged]


class UploadError(PortalError):
    """Object storage write failed before any row was created."""
    pass


class PersistenceError(PortalError):
    """Database write failed. Any object uploaded earlier is left orphaned."""
    pass


class AccountOnHoldError(PortalError):
    """Activity requests are refused while the account is on hold."""
    pass


class NotFoundError(PortalError):
    pass


class PermissionDeniedError(PortalError):
    """Actor is not the owner or reviewer required for the operation."""
    pass


class ConflictError(PortalError):
    """An advisory one-per-organization check found an existing submission."""
    pass
