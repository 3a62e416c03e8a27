"""
Data models for upload module.

Uses dataclasses for the payload, its metadata and the upload result.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union
import mimetypes

import aiofiles

DEFAULT_FILE_NAME = 'unknown.epub'
DEFAULT_MIME_TYPE = 'application/epub+zip'

MetadataValue = Union[str, int, float]


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _render(value: MetadataValue) -> str:
    # 1.0 -> '1', the server parses series_index as a number anyway
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def clean_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Drop empty values and render the rest as form field strings."""
    if not metadata:
        return {}
    return {
        key: _render(value)
        for key, value in metadata.items()
        if not _is_empty(value)
    }


@dataclass
class BookMetadata:
    """
    Optional book metadata sent alongside the file.

    Attributes:
        title: Book title
        author: Author(s)
        description: Description or summary
        tags: Comma-separated tags
        series: Series name
        series_index: Position in series
        languages: Comma-separated languages
        extra: Any other form fields

    Example:
        >>> BookMetadata(title="Dune", series_index=1).to_fields()
        {'title': 'Dune', 'series_index': '1'}
    """
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    series: Optional[str] = None
    series_index: Optional[float] = None
    languages: Optional[str] = None
    extra: Dict[str, MetadataValue] = field(default_factory=dict)

    def to_fields(self) -> Dict[str, str]:
        """Convert to form fields, skipping empty values."""
        fields = {
            'title': self.title,
            'author': self.author,
            'description': self.description,
            'tags': self.tags,
            'series': self.series,
            'series_index': self.series_index,
            'languages': self.languages,
        }
        fields.update(self.extra)
        return clean_metadata(fields)


@dataclass
class UploadPayload:
    """
    One file to upload.

    Attributes:
        content: File bytes
        file_name: Name reported to the server
        mime_type: Content type of the file part
        metadata: Extra form fields; empty values are omitted on submit
    """
    content: bytes
    file_name: str = DEFAULT_FILE_NAME
    mime_type: str = DEFAULT_MIME_TYPE
    metadata: Dict[str, MetadataValue] = field(default_factory=dict)

    def __post_init__(self):
        if not self.file_name:
            self.file_name = DEFAULT_FILE_NAME
        if not self.mime_type:
            self.mime_type = DEFAULT_MIME_TYPE
        if isinstance(self.metadata, BookMetadata):
            self.metadata = self.metadata.to_fields()

    @property
    def size(self) -> int:
        return len(self.content or b'')

    def form_metadata(self) -> Dict[str, str]:
        """Non-empty metadata as form field strings."""
        return clean_metadata(self.metadata)

    @classmethod
    async def from_path(
        cls,
        file_path: Union[str, Path],
        metadata: Optional[Union[BookMetadata, Dict[str, MetadataValue]]] = None,
        file_name: Optional[str] = None,
        mime_type: Optional[str] = None
    ) -> 'UploadPayload':
        """
        Read a file into a payload.

        Args:
            file_path: Path to the book file
            metadata: Optional metadata
            file_name: Name to report (defaults to the file's name)
            mime_type: Content type (guessed from the extension if omitted)

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        path = Path(file_path)
        async with aiofiles.open(path, 'rb') as f:
            content = await f.read()

        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)

        if isinstance(metadata, BookMetadata):
            metadata = metadata.to_fields()

        return cls(
            content=content,
            file_name=file_name or path.name,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
            metadata=dict(metadata or {})
        )


@dataclass(frozen=True)
class UploadResult:
    """
    Result of an upload request.

    Attributes:
        success: True if the server reported a location
        location: Server path of the created book
        response: Parsed JSON body, or the raw text if it wasn't JSON
    """
    success: bool
    location: Optional[str] = None
    response: Any = None
