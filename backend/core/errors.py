"""API error taxonomy.

Services raise these; `main.py` registers a handler that renders them as
`{"code", "message", "details"}` with the matching status code.
"""
from typing import Optional

from fastapi import status


class ApiError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "UNKNOWN_ERROR"
    message: str = "An unknown error occurred."
    details: Optional[str] = "Please try again later or contact support."

    def __init__(self, details: Optional[str] = None, message: Optional[str] = None):
        if message is not None:
            self.message = message
        if details is not None:
            self.details = details
        super().__init__(self.details or self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    message = "One or more validation errors occurred."
    details = None


class InvalidQuantity(ValidationError):
    code = "INVALID_QUANTITY"
    message = "Movement quantity is invalid."
    details = "quantity must be greater than zero"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "ID_NOT_FOUND"
    message = "The provided ID does not exist."
    details = "Please verify that the ID is correct and try again."


class ItemNotFound(NotFound):
    code = "ITEM_NOT_FOUND"
    message = "The provided item ID is neither a toner nor a drum."


class NotModified(ApiError):
    status_code = status.HTTP_304_NOT_MODIFIED
    code = "NOT_MODIFIED"
    message = "No changes were applied."
    details = None


class DatabaseError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "DATABASE_ERROR"
    message = "An unexpected database error occurred."

    def __init__(self, cause: Optional[BaseException] = None, details: Optional[str] = None):
        super().__init__(details=details)
        self.cause = cause
