"""Tests for domain exceptions (error_code, message, details)."""

from roles_service.domain.exceptions import (
    ConflictException,
    InternalException,
    RemoteValidationException,
    ResourceNotFoundException,
    RolesServiceException,
    StoreNotConfiguredException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base RolesServiceException uses class name as error_code when not provided."""
    exc = RolesServiceException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "RolesServiceException"
    assert exc.details == {}


def test_to_dict() -> None:
    exc = RolesServiceException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("limit must be a positive integer", field="limit")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "limit"}
    assert ValidationException("Invalid").details == {}


def test_conflict_exception() -> None:
    exc = ConflictException("Role Name already exists", role_name="Admin")
    assert exc.error_code == "CONFLICT"
    assert exc.details == {"role_name": "Admin"}


def test_resource_not_found_exception() -> None:
    """ResourceNotFoundException builds its message from type and id."""
    exc = ResourceNotFoundException("role", "r1")
    assert exc.message == "role not found: r1"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "role", "resource_id": "r1"}


def test_resource_not_found_exception_custom_message() -> None:
    exc = ResourceNotFoundException("permission", "p1", message="Permission not found")
    assert exc.message == "Permission not found"


def test_remote_validation_exception() -> None:
    """RemoteValidationException keeps peer, command and reported status."""
    exc = RemoteValidationException(
        "permissions", "validate_ids", "Invalid ids", status_code=400
    )
    assert exc.error_code == "REMOTE_VALIDATION_FAILED"
    assert exc.status_code == 400
    assert exc.details == {
        "service": "permissions",
        "command": "validate_ids",
        "status_code": 400,
    }


def test_remote_validation_exception_without_status() -> None:
    exc = RemoteValidationException(
        "users", "is_role_assigned_user", "down", error_code="REMOTE_CALL_FAILED"
    )
    assert exc.status_code is None
    assert exc.error_code == "REMOTE_CALL_FAILED"
    assert "status_code" not in exc.details


def test_internal_and_store_exceptions() -> None:
    assert InternalException("boom").error_code == "INTERNAL_ERROR"
    assert StoreNotConfiguredException().error_code == "SERVICE_UNAVAILABLE"
