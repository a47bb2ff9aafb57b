"""Binary-to-text extraction on top of a pluggable PDF backend."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .backend_interface import PDFBackendBase
from .models import ExtractionResult
from .pymupdf_backend import PyMuPDFBackend
from .whitespace_normalizer import WhitespaceConfig, WhitespaceNormalizer


logger = logging.getLogger(__name__)


@dataclass
class ExtractorConfig:
    """Configuration for text extraction."""
    # Trimmed text must be strictly longer than this to count as a text layer
    min_text_length: int = 20
    whitespace_config: WhitespaceConfig = field(default_factory=WhitespaceConfig)


class TextExtractor:
    """Recovers a text stream and page count from PDF bytes.

    Container parsing and text recovery are separate backend calls: the page
    count comes from the document structure even when no text is found, and
    only a container that cannot be opened at all is an error.
    """

    def __init__(
        self,
        backend: Optional[PDFBackendBase] = None,
        config: Optional[ExtractorConfig] = None
    ):
        """Initialize the extractor.

        Args:
            backend: PDF backend to use (default: PyMuPDFBackend).
            config: Extraction configuration.
        """
        self.backend = backend or PyMuPDFBackend()
        self.config = config or ExtractorConfig()
        self._normalizer = WhitespaceNormalizer(self.config.whitespace_config)

    def extract(self, data: bytes) -> ExtractionResult:
        """Extract text and structure from PDF bytes.

        Args:
            data: Raw PDF bytes.

        Returns:
            ExtractionResult; ``succeeded`` is False when no usable text
            layer was found.

        Raises:
            CorruptInputError: If the container cannot be parsed.
        """
        metadata = self.backend.parse_container(data)
        logger.info(f"Parsed PDF container: {metadata.page_count} pages")

        raw_text = ""
        if self.backend.extracts_text:
            try:
                raw_text = self.backend.extract_text(data)
            except (RuntimeError, ValueError) as e:
                # Encrypted or damaged content streams; structure is still valid
                logger.warning(f"Text extraction failed, using fallback: {e}")

        text = self._normalizer.normalize(raw_text)
        layout_text = self._normalizer.normalize_layout(raw_text)
        succeeded = len(text.strip()) > self.config.min_text_length

        logger.info(
            f"Text layer {'found' if succeeded else 'not found'} "
            f"({len(text)} characters after normalization)"
        )

        return ExtractionResult(
            text=text,
            page_count=metadata.page_count,
            succeeded=succeeded,
            layout_text=layout_text if succeeded else "",
            metadata=metadata,
        )
