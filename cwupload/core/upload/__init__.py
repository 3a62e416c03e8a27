"""
Upload module.

Builds and sends the multipart upload for an authenticated session.
"""
from .models import (
    UploadPayload,
    UploadResult,
    BookMetadata,
    DEFAULT_FILE_NAME,
    DEFAULT_MIME_TYPE,
)
from .submitter import UploadSubmitter

__all__ = [
    'UploadPayload',
    'UploadResult',
    'BookMetadata',
    'DEFAULT_FILE_NAME',
    'DEFAULT_MIME_TYPE',
    'UploadSubmitter',
]
