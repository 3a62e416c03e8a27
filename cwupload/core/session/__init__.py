"""Session acquisition: credentials, cookies, tokens and the login handshake."""
from .models import Credentials, SessionHandle, CycleState
from .cookies import CookieJar
from .tokens import extract_token
from .protocols import CredentialSource
from .credentials import StaticCredentialSource, EnvCredentialSource
from .authenticator import SessionAuthenticator

__all__ = [
    'Credentials',
    'SessionHandle',
    'CycleState',
    'CookieJar',
    'extract_token',
    'CredentialSource',
    'StaticCredentialSource',
    'EnvCredentialSource',
    'SessionAuthenticator',
]
