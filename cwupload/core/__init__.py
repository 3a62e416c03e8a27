"""Core protocol: HTTP layer, session acquisition and upload submission."""
from .exceptions import (
    LibraryError,
    NetworkError,
    ProtocolError,
    AuthenticationError,
    ValidationError,
    TransportError,
    Step,
)

__all__ = [
    'LibraryError',
    'NetworkError',
    'ProtocolError',
    'AuthenticationError',
    'ValidationError',
    'TransportError',
    'Step',
]
