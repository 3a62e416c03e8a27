"""
Credential source protocols.

Credentials are read through a source once per cycle, so a rotated
password is picked up by the next upload without restarting anything.
"""
from typing import Protocol, runtime_checkable

from .models import Credentials


@runtime_checkable
class CredentialSource(Protocol):
    """Protocol for credential providers."""

    async def get_credentials(self) -> Credentials:
        """
        Read the current credentials.

        Returns:
            Credentials for the library server

        Raises:
            ValidationError: If the stored credentials are incomplete
        """
        ...
