# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where it helps, a
# suggestion telling the caller how to fix the request.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TemplateStudioException(Exception):
    """
    Base exception for the API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "TEMPLATE_STUDIO_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


class BadRequestError(TemplateStudioException):
    """Raised when a required field is missing or empty."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(
            message=message,
            code="MISSING_REQUIRED_FIELDS",
            status_code=400,
            details={"fields": fields} if fields else None,
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationRequiredError(TemplateStudioException):
    """Raised when a request carries no usable access token."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_REQUIRED",
            status_code=401,
            suggestion="Log in via POST /api/v1/auth/login and retry",
        )


class InvalidCredentialsError(TemplateStudioException):
    """Raised when the auth provider rejects an email/password pair."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class RegistrationError(TemplateStudioException):
    """Raised when sign-up input is rejected."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="REGISTRATION_FAILED",
            status_code=400,
        )


# =============================================================================
# File Exceptions
# =============================================================================

class FileRecordNotFoundError(TemplateStudioException):
    """Raised when a file ID doesn't exist (or isn't visible to the caller)."""

    def __init__(self, file_id: str):
        super().__init__(
            message="File not found",
            code="FILE_NOT_FOUND",
            status_code=404,
            suggestion="Check that the file_id is correct",
            details={"file_id": file_id},
        )


class FileAccessDeniedError(TemplateStudioException):
    """Raised when a file exists but belongs to another user."""

    def __init__(self, file_id: str):
        super().__init__(
            message="Unauthorized access",
            code="FILE_ACCESS_DENIED",
            status_code=403,
            details={"file_id": file_id},
        )


class InvalidFileStatusError(TemplateStudioException):
    """Raised when a client reports a status it may not set."""

    def __init__(self, status: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid status: {status}",
            code="INVALID_STATUS",
            status_code=400,
            suggestion=f"Status must be one of: {', '.join(allowed)}",
            details={"status": status, "allowed": allowed},
        )


class InvalidFileTypeFilterError(TemplateStudioException):
    """Raised when a listing's type filter is not a plain file extension."""

    def __init__(self, filter_type: str):
        super().__init__(
            message=f"Invalid file type filter: {filter_type}",
            code="INVALID_FILTER",
            status_code=400,
            suggestion="Use a letters-and-digits extension such as csv or txt",
            details={"filter_type": filter_type},
        )


class InvalidUploadPrefixError(TemplateStudioException):
    """Raised when an upload key would land outside the allowed prefixes."""

    def __init__(self, prefix: str, allowed: list[str]):
        super().__init__(
            message="Invalid prefix",
            code="INVALID_PREFIX",
            status_code=400,
            suggestion=f"Prefix must be one of: {', '.join(allowed)}",
            details={"prefix": prefix, "allowed": allowed},
        )


class FileContentUnavailableError(TemplateStudioException):
    """Raised when the object behind a file record can't be read."""

    def __init__(self, file_id: str, reason: str = "File content not available"):
        super().__init__(
            message=reason,
            code="FILE_CONTENT_UNAVAILABLE",
            status_code=404,
            suggestion="The upload may not have completed; check the file status",
            details={"file_id": file_id},
        )


# =============================================================================
# Folder / Template Exceptions
# =============================================================================

class FolderNotFoundError(TemplateStudioException):
    """Raised when a folder doesn't exist or belongs to another user."""

    def __init__(self, folder_id: str, message: str = "Folder not found or access denied"):
        super().__init__(
            message=message,
            code="FOLDER_NOT_FOUND",
            status_code=404,
            suggestion="List your folders with GET /api/v1/folders",
            details={"folder_id": folder_id},
        )


class TemplateNotFoundError(TemplateStudioException):
    """Raised when a template doesn't exist or belongs to another user."""

    def __init__(self, template_id: str):
        super().__init__(
            message="Template not found",
            code="TEMPLATE_NOT_FOUND",
            status_code=404,
            details={"template_id": template_id},
        )


class TemplateValidationError(TemplateStudioException):
    """Raised when template data fails schema validation."""

    def __init__(self, errors: list[dict[str, Any]]):
        messages = ", ".join(e["message"] for e in errors)
        super().__init__(
            message=f"Template validation failed: {messages}",
            code="TEMPLATE_VALIDATION_ERROR",
            status_code=400,
            details={"errors": errors},
        )


# =============================================================================
# Backend Exceptions
# =============================================================================

class StorageError(TemplateStudioException):
    """Raised when the object store call fails."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Storage {operation} failed: {error}",
            code="STORAGE_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation},
        )


class DatabaseError(TemplateStudioException):
    """Raised when a Supabase table operation fails."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Database error: {operation}",
            code="DATABASE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation, "error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def template_studio_exception_handler(
    request: Request,
    exc: TemplateStudioException
) -> JSONResponse:
    """
    Convert TemplateStudioException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Flattens pydantic's error list to {path, message} pairs.
    """
    errors = [
        {
            "path": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )
