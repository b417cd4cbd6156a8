from __future__ import annotations


class BlogError(Exception):
    """
    Base class for errors that map onto a JSON `{"msg": ...}` response.

    Subclasses fix the HTTP status; the message is shown to the client as-is.
    """

    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BlogError):
    """A required field is missing or empty."""

    status_code = 400
    default_message = "Validation failed"


class BadRequest(BlogError):
    status_code = 400
    default_message = "Bad request"


class Unauthorized(BlogError):
    """Wrong password, or a missing/invalid/expired session token."""

    status_code = 401
    default_message = "Unauthorized"


class NotFound(BlogError):
    status_code = 404
    default_message = "Not found"


class PayloadTooLarge(BlogError):
    status_code = 413
    default_message = "File too large"
