"""Domain exceptions for the Roles service.

Defines domain-level exceptions that represent business rule violations
and failed peer-service validation. Presentation layer maps them to HTTP
responses (exception handlers) or RPC error envelopes.
"""

from typing import Any


class RolesServiceException(Exception):
    """Base exception for all Roles service errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by HTTP and RPC error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(RolesServiceException):
    """Raised when input validation fails (e.g. invalid listing parameter)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or parameter that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ConflictException(RolesServiceException):
    """Raised when a write would violate a uniqueness or assignment rule."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "CONFLICT", details)


class ResourceNotFoundException(RolesServiceException):
    """Raised when a requested resource is missing or soft-deleted."""

    def __init__(
        self, resource_type: str, resource_id: str, message: str | None = None
    ) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role', 'permission').
            resource_id: The ID that was not found.
            message: Optional message (e.g. as reported by a peer service).
        """
        super().__init__(
            message or f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RemoteValidationException(RolesServiceException):
    """Raised when a peer service rejects a request or cannot be reached.

    status_code carries the peer's reported status (if any) so the
    presentation layer can forward client errors as-is.
    """

    def __init__(
        self,
        service: str,
        command: str,
        message: str,
        status_code: int | None = None,
        error_code: str = "REMOTE_VALIDATION_FAILED",
    ) -> None:
        """Initialize with the peer, the command and its failure.

        Args:
            service: Peer service name (e.g. 'permissions', 'users').
            command: RPC command that failed (e.g. 'validate_ids').
            message: Error message reported by the peer or transport.
            status_code: Optional status reported by the peer.
            error_code: REMOTE_VALIDATION_FAILED or REMOTE_CALL_FAILED.
        """
        details: dict[str, Any] = {"service": service, "command": command}
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, error_code, details)


class InternalException(RolesServiceException):
    """Raised when an expected persisted result is unexpectedly absent."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "INTERNAL_ERROR")


class StoreNotConfiguredException(RolesServiceException):
    """Raised when an operation requires Firestore but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a document store that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
