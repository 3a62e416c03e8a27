"""
aiohttp based HTTP transport.

Cookies are never tracked by the aiohttp session itself: every cycle
carries its own CookieJar and sends it as an explicit Cookie header.
"""
import asyncio
from typing import Dict, Optional, Tuple, Union

import aiohttp

from .config import APIConfig
from .protocols import HttpResponse, MultipartForm
from ..exceptions import TransportError
from ..logging import get_logger


class AiohttpTransport:
    """
    HttpTransport implementation on top of aiohttp.

    One ClientSession (and connection pool) is shared by all cycles run
    through this transport.

    Example:
        >>> async with AiohttpTransport(APIConfig.insecure()) as transport:
        ...     response = await transport.request('GET', 'https://books.local/login')
    """

    def __init__(self, config: Optional[APIConfig] = None):
        """
        Initialize transport.

        Args:
            config: Client configuration (uses defaults if not provided)
        """
        self._config = config or APIConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._logger = get_logger('cwupload.transport')

    @property
    def config(self) -> APIConfig:
        return self._config

    async def __aenter__(self) -> 'AiohttpTransport':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                cookie_jar=aiohttp.DummyCookieJar(),
                **self._config.get_session_kwargs()
            )
        return self._session

    async def close(self) -> None:
        """Close the underlying session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    @staticmethod
    def _build_form_data(form: MultipartForm) -> aiohttp.FormData:
        data = aiohttp.FormData()
        for name, value in form.fields:
            data.add_field(name, value)
        for part in form.files:
            data.add_field(
                part.name,
                part.content,
                filename=part.filename,
                content_type=part.content_type
            )
        return data

    @staticmethod
    def _collect_set_cookies(response: aiohttp.ClientResponse) -> Tuple[str, ...]:
        """Set-Cookie values of every redirect hop, then of the final response."""
        values = []
        for hop in (*response.history, response):
            values.extend(hop.headers.getall('Set-Cookie', ()))
        return tuple(values)

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Union[str, bytes]] = None,
        form: Optional[MultipartForm] = None,
        allow_redirects: bool = True
    ) -> HttpResponse:
        session = await self._ensure_session()
        body = self._build_form_data(form) if form is not None else data
        proxy = self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None

        self._logger.debug(f"{method} {url}")

        try:
            async with session.request(
                method,
                url,
                headers=headers,
                data=body,
                allow_redirects=allow_redirects,
                proxy=proxy
            ) as response:
                text = await response.text(errors='replace')
                self._logger.debug(f"{method} {url} -> {response.status} ({len(text)} chars)")
                return HttpResponse(
                    status=response.status,
                    text=text,
                    headers=dict(response.headers),
                    set_cookies=self._collect_set_cookies(response),
                    url=str(response.url)
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error on {method} {url}: {e!r}")
            raise TransportError(f"{method} {url} failed: {e!r}") from e
