"""
cwupload - Async uploader for form-login library servers (Calibre-Web).

Usage:
    >>> from cwupload import LibraryClient, Credentials, BookMetadata
    >>>
    >>> credentials = Credentials("admin", "secret", "https://books.local")
    >>> async with LibraryClient(credentials) as library:
    ...     result = await library.upload_file("dune.epub", BookMetadata(title="Dune"))
    ...     print(result.location)
"""
import logging
from .client import LibraryClient, UploadCycle, UploadOutcome

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig,
    ServerProfile,
    AiohttpTransport,
)

# Protocol
from .core.session import (
    Credentials,
    CookieJar,
    CycleState,
    SessionHandle,
    SessionAuthenticator,
    StaticCredentialSource,
    EnvCredentialSource,
)
from .core.upload import UploadPayload, UploadResult, BookMetadata, UploadSubmitter

# Errors
from .core.exceptions import (
    LibraryError,
    NetworkError,
    ProtocolError,
    AuthenticationError,
    ValidationError,
    Step,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for cwupload modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'cwupload',
        'cwupload.auth',
        'cwupload.upload',
        'cwupload.transport',
        'cwupload.client',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'LibraryClient',
    'UploadCycle',
    'UploadOutcome',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'ServerProfile',
    'AiohttpTransport',
    'Credentials',
    'CookieJar',
    'CycleState',
    'SessionHandle',
    'SessionAuthenticator',
    'StaticCredentialSource',
    'EnvCredentialSource',
    'UploadPayload',
    'UploadResult',
    'BookMetadata',
    'UploadSubmitter',
    'LibraryError',
    'NetworkError',
    'ProtocolError',
    'AuthenticationError',
    'ValidationError',
    'Step',
    'setup_logging',
]
