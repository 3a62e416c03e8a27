"""
LibraryClient - High-level async client for uploading books.

Example:
    >>> credentials = Credentials("admin", "secret", "https://books.local")
    >>> async with LibraryClient(credentials) as library:
    ...     result = await library.upload_file("dune.epub", BookMetadata(title="Dune"))
    ...     print(result.location)
"""
import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .core.api import APIConfig, AiohttpTransport, HttpTransport
from .core.exceptions import (
    AuthenticationError,
    LibraryError,
    NetworkError,
    ProtocolError,
    Step,
    ValidationError,
)
from .core.logging import get_logger
from .core.session import (
    CredentialSource,
    Credentials,
    CycleState,
    EnvCredentialSource,
    SessionAuthenticator,
    StaticCredentialSource,
)
from .core.upload import BookMetadata, UploadPayload, UploadResult, UploadSubmitter

logger = get_logger('cwupload.client')


@dataclass
class UploadOutcome:
    """
    Outcome of one item of a batch upload.

    Attributes:
        index: Position of the payload in the input
        file_name: Name of the uploaded file
        result: UploadResult if the cycle completed
        error: Error if the cycle failed (only with continue_on_fail)
    """
    index: int
    file_name: str
    result: Optional[UploadResult] = None
    error: Optional[LibraryError] = None

    @property
    def success(self) -> bool:
        return self.error is None and self.result is not None and self.result.success


class UploadCycle:
    """
    One authenticate-then-upload cycle.

    Tracks the cycle state; on failure the state becomes FAILED and
    `failed_state` records where it happened. A cycle runs once.
    """

    def __init__(self, authenticator: SessionAuthenticator, submitter: UploadSubmitter):
        self._authenticator = authenticator
        self._submitter = submitter
        self.state = CycleState.UNAUTHENTICATED
        self.failed_state: Optional[CycleState] = None
        self.error: Optional[LibraryError] = None

    def _set_state(self, state: CycleState) -> None:
        logger.debug(f"Cycle state: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, credentials: Credentials, payload: UploadPayload) -> UploadResult:
        """
        Authenticate and upload.

        Raises:
            LibraryError: Any classified failure; the cycle is aborted
        """
        if self.state is not CycleState.UNAUTHENTICATED:
            raise RuntimeError("UploadCycle can only run once")

        try:
            if not payload.content:
                raise ValidationError("missing file", step=Step.UPLOAD)
            session = await self._authenticator.authenticate(credentials, on_state=self._set_state)
            return await self._submitter.submit(session, payload, on_state=self._set_state)
        except LibraryError as e:
            self.failed_state = self.state
            self.error = e
            self.state = CycleState.FAILED
            raise


class LibraryClient:
    """
    High-level async client for a form-login library server.

    Every upload is a fully isolated cycle: credentials are read, a new
    login is performed and the session is discarded afterwards.

    Usage:
        >>> async with LibraryClient(credentials) as library:
        ...     ok = await library.check_credentials()
        ...     outcomes = await library.upload_many(payloads, continue_on_fail=True)

    Credentials default to the CWUPLOAD_* environment variables.
    """

    def __init__(
        self,
        credentials: Optional[Union[Credentials, CredentialSource]] = None,
        *,
        config: Optional[APIConfig] = None,
        transport: Optional[HttpTransport] = None
    ):
        """
        Initialize client.

        Args:
            credentials: Credentials, a credential source, or None for environment variables
            config: Optional client configuration
            transport: Optional HTTP transport (an AiohttpTransport is created otherwise)
        """
        self._config = config or APIConfig.default()

        if credentials is None:
            self._source: CredentialSource = EnvCredentialSource()
        elif isinstance(credentials, Credentials):
            self._source = StaticCredentialSource(credentials)
        else:
            self._source = credentials

        self._owns_transport = transport is None
        self._transport: HttpTransport = transport or AiohttpTransport(self._config)
        self._authenticator = SessionAuthenticator(self._transport, self._config.server)
        self._submitter = UploadSubmitter(self._transport, self._config.server)

    @property
    def config(self) -> APIConfig:
        return self._config

    async def __aenter__(self) -> 'LibraryClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.close()

    def new_cycle(self) -> UploadCycle:
        return UploadCycle(self._authenticator, self._submitter)

    async def check_credentials(self) -> bool:
        """
        Verify that the credentials can log in.

        Returns:
            True if login succeeded, False if the server rejected the credentials

        Raises:
            NetworkError: If the server can't be reached
            ProtocolError: If the server's pages look unexpected
        """
        credentials = await self._source.get_credentials()
        try:
            await self._authenticator.authenticate(credentials)
        except AuthenticationError:
            return False
        return True

    async def upload(self, payload: UploadPayload) -> UploadResult:
        """
        Upload one payload in its own cycle.

        NetworkError and ProtocolError restart the whole cycle up to
        `config.retry.max_retries` times (no retries by default).

        Raises:
            ValidationError: If the payload has no content
            AuthenticationError: If the credentials are rejected
            NetworkError: If the server can't be reached or answers unexpectedly
            ProtocolError: If the server's markup changed
        """
        retry = self._config.retry
        attempt = 0

        while True:
            credentials = await self._source.get_credentials()
            cycle = self.new_cycle()
            try:
                return await cycle.run(credentials, payload)
            except (NetworkError, ProtocolError) as e:
                if attempt >= retry.max_retries:
                    logger.error(f"Upload of {payload.file_name} failed in state {cycle.failed_state.value}: {e}")
                    raise
                delay = retry.calculate_delay(attempt)
                logger.warning(
                    f"Retrying upload of {payload.file_name} in {delay:.1f}s "
                    f"after {e} (attempt {attempt + 1}/{retry.max_retries})"
                )
                await asyncio.sleep(delay)
                attempt += 1

    async def upload_file(
        self,
        file_path: Union[str, Path],
        metadata: Optional[Union[BookMetadata, Dict[str, Union[str, int, float]]]] = None,
        *,
        file_name: Optional[str] = None,
        mime_type: Optional[str] = None
    ) -> UploadResult:
        """
        Read a file from disk and upload it.

        Args:
            file_path: Path to the book file
            metadata: Optional metadata
            file_name: Name reported to the server (defaults to the file's name)
            mime_type: Content type (guessed from the extension if omitted)
        """
        payload = await UploadPayload.from_path(
            file_path,
            metadata=metadata,
            file_name=file_name,
            mime_type=mime_type
        )
        return await self.upload(payload)

    async def upload_many(
        self,
        payloads: Sequence[UploadPayload],
        concurrency: int = 4,
        continue_on_fail: bool = False
    ) -> List[UploadOutcome]:
        """
        Upload several payloads, each in its own isolated cycle.

        Args:
            payloads: Payloads to upload
            concurrency: Maximum number of cycles in flight
            continue_on_fail: Record failures in the outcomes instead of raising

        Returns:
            One UploadOutcome per payload, in input order

        Raises:
            LibraryError: First failure, when continue_on_fail is False
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        semaphore = asyncio.Semaphore(concurrency)

        async def run_one(index: int, payload: UploadPayload) -> UploadOutcome:
            async with semaphore:
                try:
                    result = await self.upload(payload)
                except LibraryError as e:
                    if not continue_on_fail:
                        raise
                    logger.warning(f"Upload of {payload.file_name} failed, continuing: {e}")
                    return UploadOutcome(index, payload.file_name, error=e)
                return UploadOutcome(index, payload.file_name, result=result)

        tasks = [
            asyncio.ensure_future(run_one(index, payload))
            for index, payload in enumerate(payloads)
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
