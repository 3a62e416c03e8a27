"""Credential source implementations."""
import os
from typing import Mapping, Optional

from .models import Credentials
from ..exceptions import ValidationError

ENV_URL = 'CWUPLOAD_URL'
ENV_USERNAME = 'CWUPLOAD_USERNAME'
ENV_PASSWORD = 'CWUPLOAD_PASSWORD'


class StaticCredentialSource:
    """
    Returns the same credentials every time.

    Example:
        >>> source = StaticCredentialSource(Credentials('admin', 'secret', 'https://books.local'))
    """

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    async def get_credentials(self) -> Credentials:
        return self._credentials


class EnvCredentialSource:
    """
    Reads credentials from environment variables on every call.

    Variables: CWUPLOAD_URL, CWUPLOAD_USERNAME, CWUPLOAD_PASSWORD.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize source.

        Args:
            environ: Mapping to read from (defaults to os.environ)
        """
        self._environ = environ

    async def get_credentials(self) -> Credentials:
        environ = os.environ if self._environ is None else self._environ
        missing = [
            name for name in (ENV_URL, ENV_USERNAME, ENV_PASSWORD)
            if not environ.get(name)
        ]
        if missing:
            raise ValidationError(f"Missing environment variables: {', '.join(missing)}")

        return Credentials(
            username=environ[ENV_USERNAME],
            password=environ[ENV_PASSWORD],
            base_url=environ[ENV_URL]
        )
