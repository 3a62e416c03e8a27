"""
Per-cycle cookie jar.

Cookies are accumulated from Set-Cookie headers and sent back as a
single Cookie header. The jar is a plain value owned by one cycle and is
never written to disk.
"""
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..logging import get_logger

logger = get_logger('cwupload.auth')

COOKIE_ATTRIBUTES = frozenset({
    'path', 'domain', 'expires', 'max-age', 'secure', 'httponly',
    'samesite', 'priority', 'partitioned', 'comment', 'version',
})


def _parse_set_cookie(set_cookie: str) -> Tuple[List[Tuple[str, str]], Dict[str, str]]:
    """
    Split one Set-Cookie value into cookie pairs and attributes.

    Valueless flags (Secure, HttpOnly, Partitioned) land in the
    attributes with an empty value.
    """
    cookies: List[Tuple[str, str]] = []
    attributes: Dict[str, str] = {}

    for segment in set_cookie.split(';'):
        name, sep, value = segment.partition('=')
        name = name.strip()
        if not name:
            continue
        if name.lower() in COOKIE_ATTRIBUTES:
            attributes[name.lower()] = value.strip()
        elif sep:
            cookies.append((name, value.strip()))

    return cookies, attributes


def _is_expired(attributes: Mapping[str, str]) -> bool:
    """True when the server asks to drop the cookie."""
    max_age = attributes.get('max-age')
    if max_age:
        try:
            return int(max_age) <= 0
        except ValueError:
            return False

    expires = attributes.get('expires')
    if expires:
        try:
            when = parsedate_to_datetime(expires)
        except (TypeError, ValueError):
            return False
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        return when <= datetime.now(timezone.utc)

    return False


class CookieJar(Mapping[str, str]):
    """
    Ordered mapping from cookie name to value.

    Later cookies with the same name overwrite earlier ones (the name
    keeps its original position). Cookie attributes such as Path or
    Expires are only used to detect deletions.

    Example:
        >>> jar = CookieJar()
        >>> jar.update_from_headers(['a=1'])
        >>> jar.update_from_headers(['a=2; b=3'])
        >>> jar.header()
        'a=2; b=3'
    """

    def __init__(self, cookies: Optional[Mapping[str, str]] = None):
        self._cookies: Dict[str, str] = dict(cookies or {})

    def __getitem__(self, name: str) -> str:
        return self._cookies[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cookies)

    def __len__(self) -> int:
        return len(self._cookies)

    def __repr__(self) -> str:
        # values are session secrets
        return f"CookieJar({list(self._cookies)})"

    def set(self, name: str, value: str) -> None:
        self._cookies[name] = value

    def delete(self, name: str) -> None:
        self._cookies.pop(name, None)

    def update_from_header(self, set_cookie: str) -> None:
        """
        Merge one Set-Cookie header value.

        Every name=value pair that is not a cookie attribute is taken as a
        cookie, so 'a=2; b=3' sets both a and b. Max-Age and Expires of
        the header apply to every cookie in it.
        """
        cookies, attributes = _parse_set_cookie(set_cookie)
        if not cookies:
            if set_cookie.strip(' ;'):
                logger.warning("Ignoring Set-Cookie header without a name=value pair")
            return

        expired = _is_expired(attributes)
        for name, value in cookies:
            if expired:
                self.delete(name)
            else:
                self.set(name, value)

    def update_from_headers(self, set_cookies: Iterable[str]) -> None:
        """Merge Set-Cookie header values in order."""
        for value in set_cookies:
            self.update_from_header(value)

    def header(self) -> str:
        """Render the Cookie request header."""
        return '; '.join(f"{name}={value}" for name, value in self._cookies.items())

    def copy(self) -> 'CookieJar':
        return CookieJar(self._cookies)
