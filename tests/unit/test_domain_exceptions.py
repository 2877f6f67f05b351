"""Tests for domain exceptions (error_code, message, details)."""

import pytest

from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AuthenticationException,
    AuthorizationException,
    FailedPreconditionException,
    InternalServiceException,
    PlatformException,
    ResourceNotFoundException,
    ValidationException,
)


def test_platform_exception_default_error_code() -> None:
    """Base PlatformException uses class name as error_code when not provided."""
    exc = PlatformException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "PlatformException"
    assert exc.details == {}


def test_platform_exception_custom_error_code_and_details() -> None:
    exc = PlatformException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_to_dict_omits_empty_details() -> None:
    assert InternalServiceException().to_dict() == {
        "error": "INTERNAL",
        "message": "Internal error.",
    }


def test_validation_exception() -> None:
    """ValidationException sets INVALID_ARGUMENT and optional field in details."""
    exc = ValidationException("Invalid format", field="email")
    assert exc.error_code == "INVALID_ARGUMENT"
    assert exc.details == {"field": "email"}
    assert ValidationException("Invalid").details == {}


def test_authentication_exception() -> None:
    exc = AuthenticationException()
    assert exc.message == "Must be authenticated."
    assert exc.error_code == "UNAUTHENTICATED"


def test_authorization_exception_default() -> None:
    exc = AuthorizationException()
    assert exc.message == "Permission denied"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {}


def test_authorization_exception_with_resource_action_and_reason() -> None:
    exc = AuthorizationException(
        resource="managedResources", action="update", reason="resource is not owned"
    )
    assert exc.message == "Permission denied: update on managedResources"
    assert exc.details == {
        "resource": "managedResources",
        "action": "update",
        "reason": "resource is not owned",
    }


def test_account_already_exists_exception() -> None:
    exc = AccountAlreadyExistsException()
    assert exc.error_code == "ALREADY_EXISTS"
    assert "already-in-use" in exc.message


def test_failed_precondition_exception() -> None:
    exc = FailedPreconditionException("The user is not a sales agent.", {"uid": "u1"})
    assert exc.error_code == "FAILED_PRECONDITION"
    assert exc.details == {"uid": "u1"}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("principal", "u-456")
    assert "principal" in exc.message and "u-456" in exc.message
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "principal", "resource_id": "u-456"}


def test_exception_is_raiseable() -> None:
    """All exceptions can be raised and caught as PlatformException."""
    with pytest.raises(PlatformException) as exc_info:
        raise ValidationException("Bad input", field="x")
    assert exc_info.value.error_code == "INVALID_ARGUMENT"
