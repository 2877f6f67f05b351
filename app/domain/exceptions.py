"""Domain exceptions for the authorization layer.

Each exception carries a machine-readable error_code from a fixed taxonomy
(UNAUTHENTICATED, PERMISSION_DENIED, INVALID_ARGUMENT, ALREADY_EXISTS,
FAILED_PRECONDITION, RESOURCE_NOT_FOUND, INTERNAL). The presentation layer
maps codes to HTTP responses in exception handlers.
"""

from typing import Any


class PlatformException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description (safe to show callers).
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
        """Return the JSON error body sent to callers."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AuthenticationException(PlatformException):
    """Raised when the caller has no (valid) identity."""

    def __init__(self, message: str = "Must be authenticated.") -> None:
        super().__init__(message, "UNAUTHENTICATED")


class AuthorizationException(PlatformException):
    """Raised when the caller is authenticated but lacks the role or scope."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
        reason: str | None = None,
    ) -> None:
        """Initialize with optional resource, action, message and policy reason.

        Args:
            resource: Optional resource type (e.g. a collection name).
            action: Optional action that was attempted (e.g. 'update').
            message: Human-readable message; replaced when resource/action are given.
            reason: Optional policy denial reason.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        if reason:
            details["reason"] = reason
        super().__init__(message, "PERMISSION_DENIED", details)


class ValidationException(PlatformException):
    """Raised when an argument is missing, malformed or out of range."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "INVALID_ARGUMENT", details)


class AccountAlreadyExistsException(PlatformException):
    """Raised when the identity provider reports a duplicate account."""

    def __init__(self, message: str = "(auth/email-already-in-use)") -> None:
        super().__init__(message, "ALREADY_EXISTS")


class FailedPreconditionException(PlatformException):
    """Raised when the target account is not of the class the operation expects."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "FAILED_PRECONDITION", details)


class ResourceNotFoundException(PlatformException):
    """Raised when a requested document or principal does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'principal', 'managedResources').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InternalServiceException(PlatformException):
    """Raised for unexpected provider or store failures.

    The message is generic; the underlying error is logged and recorded on
    the trace, never returned to the caller.
    """

    def __init__(self, message: str = "Internal error.") -> None:
        super().__init__(message, "INTERNAL")
