"""Base API errors.

Every business-rule violation is raised as an ``ApiError`` subclass
carrying a human-readable message, an HTTP status and a stable
machine code. ``ApiView`` turns them into the error envelope.
"""

from typing import Any, ClassVar


class ApiError(Exception):
    """Business error translated into an error response."""

    status_code: ClassVar[int] = 400
    code: ClassVar[str | None] = None
    default_message: ClassVar[str] = 'Bad request'

    def __init__(self, message: str | None = None) -> None:
        """Initialize ApiError.

        Args:
            message: Human-readable message, class default when omitted.
        """
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_payload(self) -> dict[str, Any]:
        """Build the error envelope body.

        Returns:
            Dictionary with ``success``, ``error`` and ``code`` keys.
        """
        payload: dict[str, Any] = {
            'success': False,
            'error': self.message,
        }
        if self.code is not None:
            payload['code'] = self.code
        return payload


class AuthenticationRequiredError(ApiError):
    """Raised when the request carries no authenticated session."""

    status_code = 401
    code = 'AUTH_001'
    default_message = 'Unauthorized access'


class ResourceNotFoundError(ApiError):
    """Raised when a resource is absent or not owned by the principal."""

    status_code = 404
    code = 'RESOURCE_001'
    default_message = 'Resource not found'


class ValidationFailedError(ApiError):
    """Raised when an inbound payload fails schema validation."""

    status_code = 400
    code = 'VALIDATION_001'
    default_message = 'Validation error'

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, list[str]] | None = None,
    ) -> None:
        """Initialize ValidationFailedError.

        Args:
            message: Human-readable message.
            details: Per-field error messages.
        """
        super().__init__(message)
        self.details = details or {}

    def as_payload(self) -> dict[str, Any]:
        """Build the error envelope with per-field details.

        Returns:
            Error envelope including ``details`` when present.
        """
        payload = super().as_payload()
        if self.details:
            payload['details'] = self.details
        return payload


class StorageError(ApiError):
    """Raised when a blob storage operation fails."""

    status_code = 500
    code = 'STORAGE_001'
    default_message = 'Storage operation failed'


class StorageUnavailableError(StorageError):
    """Raised when blob storage cannot be reached in time."""

    status_code = 503
    code = 'STORAGE_002'
    default_message = 'Storage service unavailable'


class DatabaseUnavailableError(ApiError):
    """Raised when the database cannot be reached in time."""

    status_code = 503
    code = 'DATABASE_001'
    default_message = 'Database unavailable'
