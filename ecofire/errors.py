"""
Application errors.

Every error is an HTTPException so FastAPI renders it directly; the handler in
main.py wraps the detail into the {"success": false, "error": ...} envelope.
"""

from typing import Any, Optional

from fastapi import HTTPException


class EcofireError(HTTPException):
    status_code = 500
    error_code = "internal_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(status_code=status_code or self.status_code, detail=message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details

    def __str__(self) -> str:
        return self.message


class ValidationError(EcofireError):
    status_code = 400
    error_code = "validation_error"


class NotFoundError(EcofireError):
    status_code = 404
    error_code = "not_found"


class ConflictError(EcofireError):
    status_code = 409
    error_code = "conflict"


class ProgressDataError(EcofireError):
    """A collection needed for progress computation could not be loaded"""

    status_code = 502
    error_code = "progress_data_unavailable"

    def __init__(self, collection: str, message: str):
        super().__init__(f"Failed to fetch {collection}: {message}")
        self.collection = collection
