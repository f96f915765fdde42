"""API error type shared by endpoints and services."""

from fastapi import HTTPException

from quickreps.core.enums import ApiErrorCode

_STATUS_BY_CODE = {
    ApiErrorCode.UNAUTHORIZED: 401,
    ApiErrorCode.FORBIDDEN: 403,
    ApiErrorCode.NOT_FOUND: 404,
    ApiErrorCode.VALIDATION_ERROR: 400,
    ApiErrorCode.CONFLICT: 409,
    ApiErrorCode.RATE_LIMITED: 429,
    ApiErrorCode.INTERNAL_ERROR: 500,
}


class ApiError(HTTPException):
    """HTTPException with a machine-readable code.

    Raised by services so that the same failure reaches an HTTP client as a
    status + {"detail", "code"} body, and an in-process caller (the quick-entry
    buffer) as an exception it can turn into a user-facing message.
    """

    def __init__(self, code: ApiErrorCode, message: str, status_code: int | None = None):
        super().__init__(status_code=status_code or _STATUS_BY_CODE[code], detail=message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"
