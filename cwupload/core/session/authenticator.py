"""
Form-based session authentication.

Performs the login handshake of a cookie-session web application and
returns a SessionHandle holding the session cookies and the
upload-scoped anti-forgery token.
"""
from typing import Callable, Dict, Optional
from urllib.parse import urlencode

from .cookies import CookieJar
from .models import Credentials, CycleState, SessionHandle
from .tokens import extract_token
from ..api.config import ServerProfile
from ..api.exchange import exchange
from ..api.protocols import HttpTransport
from ..exceptions import AuthenticationError, ProtocolError, Step
from ..logging import get_logger

StateCallback = Callable[[CycleState], None]

# The server answers a successful login with a redirect and may render
# a failed one with 200, so the whole range is accepted.
LOGIN_ACCEPTED_STATUSES = (200, 302)


def _cookie_headers(jar: CookieJar) -> Dict[str, str]:
    return {'Cookie': jar.header()} if jar else {}


class SessionAuthenticator:
    """
    Turns credentials into a SessionHandle.

    The handshake is strictly sequential and never retried:
    login page GET, login POST (redirect not followed), index GET.
    Success is decided by the index page body, not by status codes.

    Example:
        >>> authenticator = SessionAuthenticator(transport)
        >>> session = await authenticator.authenticate(credentials)
        >>> session.upload_token
    """

    def __init__(
        self,
        transport: HttpTransport,
        profile: Optional[ServerProfile] = None
    ):
        """
        Initialize authenticator.

        Args:
            transport: HTTP transport
            profile: Server paths and field names (Calibre-Web defaults)
        """
        self._transport = transport
        self._profile = profile or ServerProfile()
        self._logger = get_logger('cwupload.auth')

    @property
    def profile(self) -> ServerProfile:
        return self._profile

    def _check_failure_marker(self, body: str, step: Step, username: str) -> None:
        if self._profile.failure_marker and self._profile.failure_marker in body:
            self._logger.warning(f"Login rejected for user {username!r}")
            raise AuthenticationError("Invalid username or password", step=step)

    async def authenticate(
        self,
        credentials: Credentials,
        on_state: Optional[StateCallback] = None
    ) -> SessionHandle:
        """
        Log in and fetch the upload-scoped token.

        Args:
            credentials: Login credentials
            on_state: Optional callback receiving each reached CycleState

        Returns:
            SessionHandle for one upload

        Raises:
            NetworkError: If the server can't be reached or answers unexpectedly
            ProtocolError: If a page lacks the anti-forgery token
            AuthenticationError: If the server rejects the credentials
        """
        profile = self._profile
        notify = on_state or (lambda state: None)
        jar = CookieJar()
        login_url = profile.url(credentials.base_url, profile.login_path)
        index_url = profile.url(credentials.base_url, profile.index_path)

        # Step 1: Login page and login-scoped token
        self._logger.debug(f"Fetching login page {login_url}")
        page = await exchange(self._transport, Step.LOGIN_PAGE, 'GET', login_url)

        login_token = extract_token(page.text, profile.token_field)
        if not login_token:
            self._logger.error(f"No {profile.token_field} on {login_url}")
            raise ProtocolError("login token not found", step=Step.LOGIN_PAGE)

        jar.update_from_headers(page.set_cookies)
        notify(CycleState.LOGIN_TOKEN_FETCHED)

        # Step 2: Submit the login form
        body = urlencode([
            (profile.token_field, login_token),
            ('username', credentials.username),
            ('password', credentials.password),
            ('rememberme', profile.remember_me),
            ('next', profile.next_path),
        ])
        headers = {
            'Content-Type': 'application/x-www-form-urlencoded',
            **_cookie_headers(jar)
        }
        response = await exchange(
            self._transport,
            Step.LOGIN,
            'POST',
            login_url,
            headers=headers,
            data=body,
            allow_redirects=False,
            accept=LOGIN_ACCEPTED_STATUSES
        )
        self._check_failure_marker(response.text, Step.LOGIN, credentials.username)
        jar.update_from_headers(response.set_cookies)

        # Step 3: Authenticated page; a 200 here can still be the login form
        index = await exchange(
            self._transport,
            Step.SESSION_CHECK,
            'GET',
            index_url,
            headers=_cookie_headers(jar)
        )
        self._check_failure_marker(index.text, Step.SESSION_CHECK, credentials.username)
        jar.update_from_headers(index.set_cookies)
        notify(CycleState.LOGGED_IN)

        # Step 4: Upload-scoped token from the same page
        upload_token = extract_token(index.text, profile.token_field)
        if not upload_token:
            self._logger.error(f"No {profile.token_field} on {index_url} after login")
            raise ProtocolError("upload token not found", step=Step.UPLOAD_TOKEN)

        notify(CycleState.UPLOAD_TOKEN_FETCHED)
        self._logger.info(f"Logged in to {credentials.base_url} as {credentials.username!r}")

        return SessionHandle(
            base_url=credentials.base_url,
            cookie_jar=jar,
            upload_token=upload_token
        )
