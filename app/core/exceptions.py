# app/core/exceptions.py
"""
Application exception hierarchy.

Every error raised on purpose by the service layer derives from
AppException, which carries the HTTP status classification and a
human-readable detail. The exception handlers in
app.core.exception_handler turn these into JSON responses.
"""

from typing import Any, Dict, Optional

from fastapi import status


class AppException(Exception):
    """Base class for all application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "APP_ERROR"
    default_detail: str = "An application error occurred."

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.detail = detail or self.default_detail
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.error_code, "message": self.detail}


# ---- 4xx ----
class BadRequestException(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"
    default_detail = "Bad request."


class ValidationError(BadRequestException):
    """Malformed or empty request data, detected before any lookup."""

    error_code = "INVALID_INPUT"
    default_detail = "Invalid input."


class ResourceNotFound(AppException):
    """A referenced review, user or comment is absent or not eligible."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_detail = "Resource not found."

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        resource_type: Optional[str] = None,
        resource_id: Any = None,
        **kwargs,
    ):
        if detail is None and resource_type:
            detail = f"{resource_type} not found"
            if resource_id is not None:
                detail = f"{resource_type} with id {resource_id} not found"
        super().__init__(detail, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ResourceAlreadyExists(AppException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_detail = "Resource already exists."

    def __init__(
        self, detail: Optional[str] = None, *, resource_type: Optional[str] = None, **kwargs
    ):
        super().__init__(detail, **kwargs)
        self.resource_type = resource_type


class InvalidToken(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "INVALID_TOKEN"
    default_detail = "Could not validate credentials."


class TokenExpired(InvalidToken):
    error_code = "TOKEN_EXPIRED"
    default_detail = "Token has expired."


class TokenTypeInvalid(InvalidToken):
    error_code = "TOKEN_TYPE_INVALID"
    default_detail = "Token type is not accepted here."


# ---- 5xx ----
class InternalServerError(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_SERVER_ERROR"
    default_detail = "An unexpected error occurred."
