# spendly/core/errors.py
"""
Application error taxonomy.

Every error that should reach the client as a structured response derives
from AppError and is rendered by the handlers registered in spendly.main
as ``{"success": false, "message": ..., "errors": [...], "code": ...}``.
"""
from typing import Any, Dict, List, Optional

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"
    code: Optional[str] = None

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        code: Optional[str] = None,
    ):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        self.errors = errors
        super().__init__(self.message)

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            content["errors"] = self.errors
        if self.code:
            content["code"] = self.code
        return content


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors=[{"field": field, "message": message}])


class DuplicateError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Resource already exists"


class InvalidCredentials(AppError):
    # Same message for unknown email and wrong password
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid email or password"


class InvalidCategory(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid category"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"
    code = "NO_TOKEN"


# Raised by the auth service; the access dependency maps them to Unauthorized.
class TokenError(Exception):
    pass


class TokenExpired(TokenError):
    pass


class TokenInvalid(TokenError):
    pass
