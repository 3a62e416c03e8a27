"""
Custom exceptions for library server operations.

Every error carries the protocol step it originated from, so that
"couldn't reach server", "wrong password" and "server markup changed"
can be told apart by the caller.
"""
from enum import Enum
from typing import Optional, Union


BODY_PREVIEW_LIMIT = 500


class Step(str, Enum):
    """Protocol steps of one authenticate-then-upload cycle."""

    LOGIN_PAGE = 'login_page'
    LOGIN = 'login'
    SESSION_CHECK = 'session_check'
    UPLOAD_TOKEN = 'upload_token'
    UPLOAD = 'upload'


def truncate_body(body: Optional[str], limit: int = BODY_PREVIEW_LIMIT) -> Optional[str]:
    """Shorten a response body for diagnostics."""
    if body is None or len(body) <= limit:
        return body
    return body[:limit] + '...'


class LibraryError(Exception):
    """Base exception for all library server errors."""

    def __init__(self, message: str, step: Optional[Union[Step, str]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            step: Protocol step that failed (if known)
        """
        self.message = message
        self.step = Step(step) if step is not None else None
        super().__init__(message)

    def __str__(self) -> str:
        if self.step is None:
            return self.message
        return f"[{self.step.value}] {self.message}"


class NetworkError(LibraryError):
    """Transport failure or unexpected HTTP status."""

    def __init__(
        self,
        message: str,
        step: Optional[Union[Step, str]] = None,
        status: Optional[int] = None,
        body: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            step: Protocol step that failed
            status: HTTP status code, None for transport failures
            body: Response body, truncated for diagnostics
        """
        self.status = status
        self.body = truncate_body(body)
        super().__init__(message, step)

    def __str__(self) -> str:
        text = super().__str__()
        if self.status is not None:
            text += f" (status {self.status})"
        return text


class ProtocolError(LibraryError):
    """Expected markup or structure was not found in a server response."""
    pass


class AuthenticationError(LibraryError):
    """Credentials were rejected by the server."""
    pass


class ValidationError(LibraryError):
    """Caller supplied malformed input."""
    pass


class TransportError(Exception):
    """Raised by transports when a request could not complete."""
    pass
