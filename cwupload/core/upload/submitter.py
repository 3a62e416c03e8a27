"""
Upload submission service.

Sends one book file plus metadata to the upload endpoint of an
authenticated session.
"""
import json
from typing import Any, Optional, Tuple

from .models import UploadPayload, UploadResult
from ..api.config import ServerProfile
from ..api.exchange import exchange
from ..api.protocols import HttpTransport, MultipartForm
from ..exceptions import Step, ValidationError
from ..session.authenticator import StateCallback
from ..session.models import CycleState, SessionHandle
from ..logging import get_logger


class UploadSubmitter:
    """
    Submits a multipart upload with an authenticated session.

    Responsibilities:
    - Validate the payload before touching the network
    - Build the multipart form (token, file, metadata)
    - Interpret the server's JSON answer
    """

    def __init__(
        self,
        transport: HttpTransport,
        profile: Optional[ServerProfile] = None
    ):
        """
        Initialize submitter.

        Args:
            transport: HTTP transport
            profile: Server paths and field names (Calibre-Web defaults)
        """
        self._transport = transport
        self._profile = profile or ServerProfile()
        self._logger = get_logger('cwupload.upload')

    def build_form(self, session: SessionHandle, payload: UploadPayload) -> MultipartForm:
        """Build the multipart body for a payload."""
        form = MultipartForm()
        form.add_field(self._profile.token_field, session.upload_token)
        for name, value in payload.form_metadata().items():
            form.add_field(name, value)
        form.add_file(
            self._profile.file_field,
            payload.content,
            filename=payload.file_name,
            content_type=payload.mime_type
        )
        return form

    @staticmethod
    def _parse_response(text: str) -> Tuple[Any, Optional[str]]:
        """
        Parse upload response.

        Returns:
            Tuple of (parsed body or raw text, location or None)
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError):
            return text, None

        location = data.get('location') if isinstance(data, dict) else None
        if not isinstance(location, str) or not location:
            location = None
        return data, location

    async def submit(
        self,
        session: SessionHandle,
        payload: UploadPayload,
        on_state: Optional[StateCallback] = None
    ) -> UploadResult:
        """
        Upload one file.

        Args:
            session: Authenticated session
            payload: File and metadata
            on_state: Optional callback receiving CycleState.UPLOADED

        Returns:
            UploadResult; success is False when no location came back

        Raises:
            ValidationError: If the payload has no content
            NetworkError: On transport failure or a non-2xx status
        """
        if not payload.content:
            raise ValidationError("missing file", step=Step.UPLOAD)

        url = self._profile.url(session.base_url, self._profile.upload_path)
        form = self.build_form(session, payload)
        headers = {'Cookie': session.cookie_jar.header()} if session.cookie_jar else {}

        self._logger.info(f"Uploading {payload.file_name} ({payload.size:,} bytes) to {url}")

        response = await exchange(
            self._transport,
            Step.UPLOAD,
            'POST',
            url,
            headers=headers,
            form=form
        )
        self._logger.debug(f"Upload response: {response.text[:1000]}")

        data, location = self._parse_response(response.text)
        if on_state is not None:
            on_state(CycleState.UPLOADED)

        if location:
            self._logger.info(f"Uploaded {payload.file_name} -> {location}")
        else:
            self._logger.warning(f"Server did not report a location for {payload.file_name}")

        return UploadResult(success=bool(location), location=location, response=data)
