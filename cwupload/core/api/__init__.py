"""HTTP layer: configuration, transport protocol and aiohttp transport."""
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, RetryConfig, ServerProfile
from .protocols import HttpTransport, HttpResponse, MultipartForm, FilePart
from .transport import AiohttpTransport
from .exchange import exchange

__all__ = [
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'ServerProfile',

    # Transport
    'HttpTransport',
    'HttpResponse',
    'MultipartForm',
    'FilePart',
    'AiohttpTransport',
    'exchange',
]
