"""Exception hierarchy for the operations-management client."""

from __future__ import annotations

from typing import Any

_DEFAULT_MESSAGES: dict[int, str] = {
    400: "Invalid request data",
    401: "Unauthorized: please log in again",
    403: "You do not have permission to perform this action",
    404: "The requested resource was not found",
    409: "The resource already exists",
    422: "Invalid data provided",
    500: "Internal server error, please try again later",
}


class OpsMgmtError(Exception):
    """Base exception for all client errors."""


class ConfigError(OpsMgmtError):
    """Raised when configuration is invalid."""


class StorageError(OpsMgmtError):
    """Raised when persisted client state cannot be read or written."""


class TenantError(OpsMgmtError):
    """Raised when a tenant operation fails on the client side."""


class ApiError(OpsMgmtError):
    """Normalized error for any failed API call.

    Carries the same shape for every failure: ``message``, ``status`` and,
    for validation failures, field-level ``errors``.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        errors: dict[str, Any] | list[Any] | None = None,
    ) -> None:
        self.message = message
        self.status = status
        self.errors = errors
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message, "status": self.status}
        if self.errors:
            payload["errors"] = self.errors
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status!r}, message={self.message!r})"


class AuthenticationError(ApiError):
    """HTTP 401: stored credentials are missing, invalid or expired."""


class PermissionDeniedError(ApiError):
    """HTTP 403."""


class NotFoundError(ApiError):
    """HTTP 404."""


class ConflictError(ApiError):
    """HTTP 409, e.g. a duplicate registration."""


class ValidationError(ApiError):
    """HTTP 400/422 with optional field-level errors."""


class ServerError(ApiError):
    """HTTP 5xx."""


class NetworkError(ApiError):
    """No response was received (connection failure, timeout)."""


_STATUS_CLASSES: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


def error_class_for(status: int) -> type[ApiError]:
    if status in _STATUS_CLASSES:
        return _STATUS_CLASSES[status]
    if status >= 500:
        return ServerError
    return ApiError


def normalize_error(status: int, body: Any) -> ApiError:
    """Build the normalized error for a non-2xx response body."""
    message: str | None = None
    errors: dict[str, Any] | list[Any] | None = None

    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                message = value
                break
        raw_errors = body.get("errors")
        if isinstance(raw_errors, (dict, list)) and raw_errors:
            errors = raw_errors
        elif isinstance(body.get("detail"), list):
            # FastAPI-style validation payloads put field errors under "detail"
            errors = body["detail"]
    elif isinstance(body, str) and body.strip():
        message = body.strip()

    if message is None:
        message = _DEFAULT_MESSAGES.get(status, f"Request failed with status {status}")

    return error_class_for(status)(message, status=status, errors=errors)
