# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error leaves the API as a single JSON body:
#   {"error": ..., "code": ..., "details"?: ..., "debug"?: ...}
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class CellarException(Exception):
    """
    Base exception for the Cellar Enrichment API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "CELLAR_ERROR",
        status_code: int = 500,
        details: Any = None,
        debug: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.debug = debug or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.details is not None:
            result["details"] = self.details
        if self.debug:
            result["debug"] = self.debug
        return result


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationError(CellarException):
    """Raised when the bearer token is missing, malformed or expired."""

    def __init__(self, message: str = "Unauthorized", details: str | None = None):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            details=details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AdminRequiredError(CellarException):
    """Raised when a verified user is not an admin."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Admin access required",
            code="ADMIN_REQUIRED",
            status_code=403,
            details="Only admin users can run batch enrichment",
            debug={"userId": user_id, "isAdmin": False},
        )


class AdminCheckError(CellarException):
    """Raised when admin status cannot be determined (RPC failure)."""

    def __init__(self, user_id: str, error: str, error_code: str | None = None):
        super().__init__(
            message="Failed to verify admin status",
            code="ADMIN_CHECK_FAILED",
            status_code=500,
            details=error,
            debug={"userId": user_id, "errorCode": error_code},
        )


# =============================================================================
# Enrichment Exceptions
# =============================================================================

class CandidateQueryError(CellarException):
    """Raised when the candidate wines cannot be fetched."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to fetch wines",
            code="CANDIDATE_QUERY_FAILED",
            status_code=500,
            details=error,
        )


class InternalServerError(CellarException):
    """Catch-all for unexpected failures inside a handler."""

    def __init__(self, error: str):
        super().__init__(
            message="Internal server error",
            code="INTERNAL_ERROR",
            status_code=500,
            details=error,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def cellar_exception_handler(
    request: Request,
    exc: CellarException
) -> JSONResponse:
    """Convert CellarException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to the same envelope as every other error.
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation error",
            "code": "VALIDATION_ERROR",
            "details": str(exc),
        }
    )
