"""Exceptions raised by portal operations.

Every operation error carries a user-facing message (shown as a notice) and
the HTTP status the API answers with.
"""

from typing import Any, Dict, Optional


class PortalError(Exception):
    """Base class for every error an operation can surface to the user."""

    error_code = "PORTAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(PortalError):
    """Missing or invalid field, bad role value, bad reference."""

    error_code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message, {"field": field, "value": value})


class NotFoundError(PortalError):
    """Lookup miss for an id or email."""

    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message: str, collection: Optional[str] = None, key: Any = None) -> None:
        super().__init__(message, {"collection": collection, "key": key})


class InvalidCredentialsError(NotFoundError):
    """Login lookup failed; deliberately says nothing about which check failed."""

    error_code = "INVALID_CREDENTIALS"
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid email or password, or email not verified.", collection="accounts")


class ConflictError(PortalError):
    error_code = "CONFLICT"
    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message, {"field": field, "value": value})


class PersistenceError(PortalError):
    """Writing to device storage failed. In-memory state is kept as is."""

    error_code = "PERSISTENCE_ERROR"
    status_code = 507

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message, {"key": key})


class CorruptStateError(PortalError):
    """The persisted blob could not be parsed. Recovered by reseeding."""

    error_code = "CORRUPT_STATE"
    status_code = 500

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message, {"key": key})
