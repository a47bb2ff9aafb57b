import pytest
import pymupdf

from pdf_to_word.errors import CorruptInputError
from pdf_to_word.processing.backend_interface import PDFBackendBase
from pdf_to_word.processing.models import DocumentMetadata


LONG_PARAGRAPH = (
    "This is a long paragraph that exceeds one hundred fifty characters in total "
    "length to trigger the long-paragraph spacing rule in the structured emitter "
    "for testing purposes now."
)


def make_pdf(pages, metadata=None) -> bytes:
    """Build a PDF in memory, one list of text lines per page."""
    doc = pymupdf.open()
    for lines in pages:
        page = doc.new_page()
        y = 72
        for line in lines:
            page.insert_text((72, y), line, fontsize=11)
            y += 16
    if metadata:
        doc.set_metadata(metadata)
    data = doc.tobytes()
    doc.close()
    return data


class FakeBackend(PDFBackendBase):
    """Backend returning canned text and metadata."""

    def __init__(self, text="", page_count=1, metadata=None, corrupt=False, text_error=None):
        self.text = text
        self.metadata = metadata or DocumentMetadata(page_count=page_count)
        self.corrupt = corrupt
        self.text_error = text_error

    @property
    def name(self) -> str:
        return "fake"

    def parse_container(self, data: bytes) -> DocumentMetadata:
        if self.corrupt:
            raise CorruptInputError("Invalid or corrupted PDF file")
        return self.metadata

    def extract_text(self, data: bytes) -> str:
        if self.text_error is not None:
            raise self.text_error
        return self.text


@pytest.fixture
def text_pdf() -> bytes:
    return make_pdf([
        ["ANNUAL REPORT", "Revenue grew strongly during the fiscal year."],
        ["Costs remained stable across every region we operate in."],
    ])


@pytest.fixture
def blank_pdf() -> bytes:
    return make_pdf([[], [], []])
