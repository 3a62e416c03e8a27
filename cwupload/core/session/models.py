"""
Session data models.

Credentials are supplied once per cycle; the SessionHandle produced by
the authenticator lives only until the upload it was created for.
"""
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlparse

from .cookies import CookieJar
from ..exceptions import ValidationError


class CycleState(str, Enum):
    """States of one authenticate-then-upload cycle."""

    UNAUTHENTICATED = 'unauthenticated'
    LOGIN_TOKEN_FETCHED = 'login_token_fetched'
    LOGGED_IN = 'logged_in'
    UPLOAD_TOKEN_FETCHED = 'upload_token_fetched'
    UPLOADED = 'uploaded'
    FAILED = 'failed'


@dataclass(frozen=True)
class Credentials:
    """
    Login credentials for a library server.

    Attributes:
        username: Account name
        password: Account password (hidden from repr)
        base_url: Absolute server URL; a trailing slash is stripped
    """
    username: str
    password: str = field(repr=False)
    base_url: str

    def __post_init__(self):
        base_url = (self.base_url or '').strip().rstrip('/')
        parsed = urlparse(base_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValidationError(f"Base URL must be an absolute http(s) URL: {self.base_url!r}")
        if not self.username:
            raise ValidationError("Username is required")
        object.__setattr__(self, 'base_url', base_url)


@dataclass
class SessionHandle:
    """
    Authenticated session for exactly one upload.

    Attributes:
        base_url: Server URL the session belongs to
        cookie_jar: Session cookies
        upload_token: Anti-forgery token issued after login
    """
    base_url: str
    cookie_jar: CookieJar
    upload_token: str = field(repr=False)
