"""Unit tests for error normalization."""

from __future__ import annotations

import pytest

from opsmgmt.exceptions import (
    ApiError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    ValidationError,
    error_class_for,
    normalize_error,
)


@pytest.mark.unit
class TestErrorClassFor:
    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (400, ValidationError),
            (401, AuthenticationError),
            (403, PermissionDeniedError),
            (404, NotFoundError),
            (409, ConflictError),
            (422, ValidationError),
            (500, ServerError),
            (503, ServerError),
            (418, ApiError),
        ],
    )
    def test_status_mapping(self, status: int, expected: type[ApiError]) -> None:
        assert error_class_for(status) is expected


@pytest.mark.unit
class TestNormalizeError:
    def test_uses_server_message(self) -> None:
        error = normalize_error(409, {"message": "Supplier code already exists"})
        assert isinstance(error, ConflictError)
        assert error.message == "Supplier code already exists"
        assert error.status == 409

    def test_falls_back_to_error_and_detail_keys(self) -> None:
        assert normalize_error(400, {"error": "bad input"}).message == "bad input"
        assert normalize_error(404, {"detail": "gone"}).message == "gone"

    def test_default_message_when_body_empty(self) -> None:
        error = normalize_error(404, None)
        assert error.message == "The requested resource was not found"

    def test_generic_message_for_unmapped_status(self) -> None:
        error = normalize_error(418, {})
        assert error.message == "Request failed with status 418"
        assert type(error) is ApiError

    def test_field_errors_are_kept(self) -> None:
        error = normalize_error(422, {"message": "Invalid", "errors": {"email": "required"}})
        assert error.errors == {"email": "required"}
        assert error.to_dict() == {
            "message": "Invalid",
            "status": 422,
            "errors": {"email": "required"},
        }

    def test_list_detail_becomes_errors(self) -> None:
        detail = [{"loc": ["body", "name"], "msg": "field required"}]
        error = normalize_error(422, {"detail": detail})
        assert error.errors == detail
        assert error.message == "Invalid data provided"

    def test_plain_text_body(self) -> None:
        error = normalize_error(502, "Bad Gateway\n")
        assert isinstance(error, ServerError)
        assert error.message == "Bad Gateway"

    def test_to_dict_omits_empty_errors(self) -> None:
        assert normalize_error(500, None).to_dict() == {
            "message": "Internal server error, please try again later",
            "status": 500,
        }
