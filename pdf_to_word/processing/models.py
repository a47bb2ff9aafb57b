"""Data models for PDF to Word conversion."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class LineRole(Enum):
    """Structural role of a single line of extracted text."""
    EMPTY = "empty"
    TITLE = "title"
    HEADER = "header"
    NUMBERED_HEADER = "numbered-header"
    LIST_ITEM = "list-item"
    NOTE = "note"
    METADATA = "metadata"
    TABLE_ROW = "table-row"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class SourceDocument:
    """An uploaded file, fully buffered in memory."""
    data: bytes
    filename: str
    media_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def stem(self) -> str:
        """Filename without its extension, safe to reuse in output names."""
        stem = re.sub(r"[^\w.\-]+", "_", Path(self.filename).stem)
        stem = re.sub(r"\.{2,}", ".", stem).strip(".")
        return stem or "document"


@dataclass
class DocumentMetadata:
    """Structural metadata read from the PDF container."""
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None
    page_count: int = 0

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "author": self.author,
            "subject": self.subject,
            "creator": self.creator,
            "producer": self.producer,
            "creation_date": self.creation_date,
            "modification_date": self.modification_date,
            "page_count": self.page_count
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of a single extraction pass over a source document.

    ``text`` is the flat normalized text (single spaces, paragraph breaks
    kept) and ``layout_text`` keeps horizontal spacing so column-aligned
    lines can still be recognised by the classifier.
    """
    text: str
    page_count: int
    succeeded: bool
    layout_text: str = ""
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)

    def __post_init__(self):
        if self.page_count < 0:
            raise ValueError(f"page_count must be >= 0, got {self.page_count}")


@dataclass(frozen=True)
class ClassifiedLine:
    """A line of text tagged with its structural role."""
    content: str
    role: LineRole
    level: int = 0


@dataclass
class MarkupDocument:
    """Heading/bold-marker annotated text, one entry per output line."""
    lines: list[str] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "MarkupDocument":
        if not text:
            return cls()
        return cls(lines=text.rstrip("\n").split("\n"))

    def to_text(self) -> str:
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


@dataclass(frozen=True)
class EmissionHeader:
    """Information block both emitters place above the body."""
    title: str
    original_filename: str
    converted_at: datetime
    tool_name: str = "ToolBox PDF to Word Converter"

    @property
    def timestamp(self) -> str:
        return self.converted_at.strftime("%Y-%m-%d %H:%M:%S")


@dataclass(frozen=True)
class EmissionOutput:
    """A rendered output document."""
    data: bytes
    mime_type: str
    extension: str

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoredFile:
    """A file handed to the storage collaborator."""
    filename: str
    locator: str
    path: Path
    size_bytes: int


@dataclass
class RenderedConversion:
    """Everything a pipeline run produces before anything touches disk."""
    source: SourceDocument
    extraction: ExtractionResult
    lines: list[ClassifiedLine]
    markup: MarkupDocument
    rich_text: EmissionOutput
    structured: EmissionOutput
    extraction_method: str


@dataclass
class ConversionResponse:
    """Payload returned to the caller once both outputs are stored."""
    original_name: str
    file_id: str
    converted_url: str
    alternative_url: str
    original_size: int
    converted_size: int
    alternative_size: int
    page_count: int
    text_extracted: bool
    extraction_method: str
    success: bool = True
    original_format: str = "PDF"
    converted_format: str = "DOCX (Microsoft Word)"
    alternative_format: str = "RTF (Universal)"

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "originalName": self.original_name,
            "fileId": self.file_id,
            "convertedUrl": self.converted_url,
            "alternativeUrl": self.alternative_url,
            "originalFormat": self.original_format,
            "convertedFormat": self.converted_format,
            "alternativeFormat": self.alternative_format,
            "originalSize": self.original_size,
            "convertedSize": self.converted_size,
            "alternativeSize": self.alternative_size,
            "pageCount": self.page_count,
            "textExtracted": self.text_extracted,
            "fileSizeKB": f"{self.converted_size / 1024:.2f} KB",
            "extractionMethod": self.extraction_method
        }
