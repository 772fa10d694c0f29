"""
Application error types.

All of them are HTTPExceptions so they short-circuit FastAPI dependencies
and handlers the same way, and carry a machine-readable `code` that the
app-level handler renders next to the message:

    {"error": "Post not found", "code": "NOT_FOUND"}
"""

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for errors rendered as {"error", "code"} responses."""

    code: str = "ERROR"
    default_status: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(
            status_code=status_code or self.default_status,
            detail=message,
            headers=headers,
        )
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class NotFoundError(AppError):
    code = "NOT_FOUND"
    default_status = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    code = "CONFLICT"
    default_status = status.HTTP_409_CONFLICT


class ValidationFailed(AppError):
    """Business-rule validation failure (body schema errors stay 422)."""

    code = "VALIDATION_ERROR"
    default_status = status.HTTP_400_BAD_REQUEST
