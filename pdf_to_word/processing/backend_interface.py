"""Abstract base class for PDF backends.

This module defines the capability interface the extractor is parameterised
over, so the pipeline can be built against a backend that recovers text or
one that only reads document structure.
"""

from abc import ABC, abstractmethod

from .models import DocumentMetadata


class PDFBackendBase(ABC):
    """Abstract base class for PDF parsing backends.

    Implement this interface to add new extraction libraries.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this backend."""
        pass

    @property
    def extracts_text(self) -> bool:
        """Whether this backend can recover a text layer at all."""
        return True

    @property
    def extraction_method(self) -> str:
        """Human readable description reported back to callers."""
        if self.extracts_text:
            return f"{self.name} (text layer + document structure)"
        return f"{self.name} (document structure only)"

    @abstractmethod
    def parse_container(self, data: bytes) -> DocumentMetadata:
        """Read page count and document metadata.

        Args:
            data: Raw PDF bytes.

        Returns:
            DocumentMetadata including the page count.

        Raises:
            CorruptInputError: If the bytes cannot be opened as a PDF.
        """
        pass

    @abstractmethod
    def extract_text(self, data: bytes) -> str:
        """Recover the raw text layer of a PDF.

        Args:
            data: Raw PDF bytes.

        Returns:
            Raw extracted text, pages separated by form feeds. Empty when
            the document has no text layer.
        """
        pass
