"""Pytest fixtures for cwupload tests."""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pytest

from cwupload.core.api.protocols import HttpResponse, MultipartForm
from cwupload.core.session import Credentials


LOGIN_PAGE = """<!DOCTYPE html>
<html><body>
<form method="POST" action="/login">
  <input type="hidden" name="csrf_token" value="{token}">
  <input type="text" name="username">
  <input type="password" name="password">
</form>
</body></html>"""

INDEX_PAGE = """<!DOCTYPE html>
<html><body>
<a href="/logout">Logout</a>
<form id="form-upload" method="post" enctype="multipart/form-data" action="/upload">
  <input type="hidden" name="csrf_token" value="{token}">
  <input id="btn-upload" name="btn-upload" type="file" multiple>
</form>
</body></html>"""

FAILED_LOGIN_PAGE = """<!DOCTYPE html>
<html><body>
<div id="flash_danger" class="alert alert-danger">Wrong Username or Password</div>
<form method="POST" action="/login">
  <input type="hidden" name="csrf_token" value="{token}">
</form>
</body></html>"""


@dataclass
class RecordedRequest:
    """A request seen by FakeTransport."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    data: Any = None
    form: Optional[MultipartForm] = None
    allow_redirects: bool = True


class FakeTransport:
    """
    Scripted HttpTransport.

    Either replays `responses` in order or asks `handler` for each
    request. Exceptions in the script are raised instead of returned.
    """

    def __init__(
        self,
        responses: Optional[List[Any]] = None,
        handler: Optional[Callable[[RecordedRequest], Any]] = None
    ):
        self._responses = list(responses or [])
        self._handler = handler
        self.requests: List[RecordedRequest] = []
        self.closed = False

    async def request(self, method, url, *, headers=None, data=None, form=None, allow_redirects=True):
        recorded = RecordedRequest(method, url, dict(headers or {}), data, form, allow_redirects)
        self.requests.append(recorded)

        if self._handler is not None:
            outcome = self._handler(recorded)
        elif self._responses:
            outcome = self._responses.pop(0)
        else:
            raise AssertionError(f"Unexpected request: {method} {url}")

        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self):
        self.closed = True


@pytest.fixture
def credentials():
    """Returns test credentials."""
    return Credentials(username="admin", password="s=cret", base_url="https://books.example.com/")


@pytest.fixture
def make_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def login_page():
    """Renders a login page with the given token."""
    return lambda token="login-token": LOGIN_PAGE.format(token=token)


@pytest.fixture
def index_page():
    """Renders an authenticated index page with the given token."""
    return lambda token="upload-token": INDEX_PAGE.format(token=token)


@pytest.fixture
def failed_login_page():
    """Renders a login page carrying the failure marker."""
    return lambda token="login-token-2": FAILED_LOGIN_PAGE.format(token=token)


@pytest.fixture
def login_responses(login_page, index_page):
    """Three responses of a successful login handshake."""
    return [
        HttpResponse(200, login_page("login-token"), set_cookies=("session=s1; HttpOnly; Path=/",)),
        HttpResponse(302, "", set_cookies=("session=s2; HttpOnly; Path=/", "remember_token=rt; Path=/")),
        HttpResponse(200, index_page("upload-token")),
    ]
