from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


# PUBLIC_INTERFACE
class ApiError(Exception):
    """
    Base class for request-level errors surfaced to API clients.

    Each subclass fixes the HTTP status code, the error kind reported in the
    `error` field and a default human-readable message. Rendered by the
    application exception handler as:

        {"error": "<kind>", "message": "<message>"}
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "ApiError"
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class UserNotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "UserNotFound"
    message = "User Not Found!"


class UsernameTaken(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "UsernameTaken"
    message = "Username already exists"


class QuotaExceeded(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "QuotaExceeded"
    message = "You have reached the free todos limit! Change to Pro Plan!"


class InvalidIdentifier(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "InvalidIdentifier"
    message = "Todo ID is incorrect."


class TodoNotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "TodoNotFound"
    message = "Todo not exist."


class AlreadyPro(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "AlreadyPro"
    message = "Pro plan is already activated."
