"""
Protocol definitions for the HTTP layer.

The session and upload protocol only talk to an HttpTransport, so any
HTTP library (or a scripted fake in tests) can be plugged in.
"""
from dataclasses import dataclass, field
from typing import Protocol, Dict, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class FilePart:
    """A file field of a multipart form."""
    name: str
    filename: str
    content: bytes
    content_type: str


@dataclass
class MultipartForm:
    """
    Transport-neutral multipart/form-data body.

    Plain fields and file parts are sent in insertion order, fields first.
    """
    fields: List[Tuple[str, str]] = field(default_factory=list)
    files: List[FilePart] = field(default_factory=list)

    def add_field(self, name: str, value: str) -> 'MultipartForm':
        self.fields.append((name, value))
        return self

    def add_file(
        self,
        name: str,
        content: bytes,
        filename: str,
        content_type: str
    ) -> 'MultipartForm':
        self.files.append(FilePart(name, filename, content, content_type))
        return self

    def field_names(self) -> List[str]:
        return [name for name, _ in self.fields] + [part.name for part in self.files]

    def get(self, name: str) -> Optional[str]:
        """Returns the first plain field value with the given name."""
        for key, value in self.fields:
            if key == name:
                return value
        return None


@dataclass(frozen=True)
class HttpResponse:
    """
    Response as seen by the protocol layer.

    Attributes:
        status: HTTP status code
        headers: Response headers (last value wins for repeated names)
        set_cookies: Every Set-Cookie header value, redirect hops first
        text: Body decoded as text
        url: Final URL of the response
    """
    status: int
    text: str = ''
    headers: Mapping[str, str] = field(default_factory=dict)
    set_cookies: Tuple[str, ...] = ()
    url: str = ''


class HttpTransport(Protocol):
    """Protocol for HTTP transports."""

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
        """
        Send one request.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Extra request headers
            data: Raw request body
            form: Multipart body (the transport sets Content-Type and boundary)
            allow_redirects: Whether redirects are followed

        Returns:
            HttpResponse for any status code

        Raises:
            TransportError: If the request could not complete
        """
        ...

    async def close(self) -> None:
        """Release resources."""
        ...
