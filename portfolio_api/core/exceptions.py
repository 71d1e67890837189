"""
Custom Exception Classes for the contact API.

Every failure of the contact pipeline is one of these. They are HTTP
exceptions carrying a user-facing message; provider or internal detail
is kept on the instance for logging and never rendered.
"""
from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse


class ContactAPIError(HTTPException):
    """Base class for errors rendered as ``{"error": ..., "details"?: ...}``."""

    def __init__(
        self,
        status_code: int,
        message: str,
        details: Optional[list[dict[str, Any]]] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message = message
        self.details = details

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            content["details"] = self.details
        return content


class RateLimitExceeded(ContactAPIError):
    """Exception raised when a client exceeds the submission rate limit."""

    def __init__(
        self,
        message: str = "Too many requests. Please try again later.",
        retry_after: Optional[int] = None,
    ):
        headers = {"Retry-After": str(retry_after)} if retry_after else None
        super().__init__(status.HTTP_429_TOO_MANY_REQUESTS, message, headers=headers)
        self.retry_after = retry_after


class ContactValidationError(ContactAPIError):
    """Exception raised when the submitted form data is invalid."""

    def __init__(
        self,
        details: list[dict[str, Any]],
        message: str = "Invalid form data",
    ):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, details=details)

    @property
    def fields(self) -> list[str]:
        return [d["field"] for d in self.details or []]


class DispatchError(ContactAPIError):
    """Exception raised when the notification email could not be sent."""

    def __init__(
        self,
        reason: str,
        message: str = "Failed to send message. Please try again later.",
    ):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message)
        # Internal cause; logged only
        self.reason = reason


async def contact_api_exception_handler(request: Request, exc: ContactAPIError) -> JSONResponse:
    """Render contact pipeline errors with a consistent body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_content(),
        headers=exc.headers,
    )
