"""PDF backends implemented with PyMuPDF."""

import logging

import pymupdf

from ..errors import CorruptInputError
from .backend_interface import PDFBackendBase
from .models import DocumentMetadata


logger = logging.getLogger(__name__)


class PyMuPDFBackend(PDFBackendBase):
    """Reads structure and the text layer with PyMuPDF."""

    @property
    def name(self) -> str:
        return "pymupdf"

    def _open(self, data: bytes) -> pymupdf.Document:
        try:
            doc = pymupdf.open(stream=data, filetype="pdf")
        except (pymupdf.FileDataError, RuntimeError, ValueError) as e:
            raise CorruptInputError(f"Invalid or corrupted PDF file: {e}") from e

        # Most encrypted uploads only carry an owner password
        if doc.needs_pass and not doc.authenticate(""):
            logger.warning("PDF is password protected, text layer unavailable")
        return doc

    def parse_container(self, data: bytes) -> DocumentMetadata:
        """Extract document metadata from PDF bytes.

        Args:
            data: Raw PDF bytes.

        Returns:
            DocumentMetadata with available information.
        """
        doc = self._open(data)

        try:
            meta = doc.metadata or {}

            return DocumentMetadata(
                title=meta.get("title") or None,
                author=meta.get("author") or None,
                subject=meta.get("subject") or None,
                creator=meta.get("creator") or None,
                producer=meta.get("producer") or None,
                creation_date=meta.get("creationDate") or None,
                modification_date=meta.get("modDate") or None,
                page_count=max(doc.page_count, 0),
            )
        finally:
            doc.close()

    def extract_text(self, data: bytes) -> str:
        """Extract the text layer page by page.

        Args:
            data: Raw PDF bytes.

        Returns:
            Page texts joined with form feeds.
        """
        doc = self._open(data)

        try:
            pages = [page.get_text("text") for page in doc]
        finally:
            doc.close()

        logger.debug(f"Extracted {sum(len(p) for p in pages)} characters from {len(pages)} pages")
        return "\f".join(pages)


class StructureOnlyBackend(PyMuPDFBackend):
    """Reads document structure but never recovers text.

    Used when text extraction is unavailable or disabled; every document
    goes down the fallback narrative path.
    """

    @property
    def extracts_text(self) -> bool:
        return False

    def extract_text(self, data: bytes) -> str:
        return ""
