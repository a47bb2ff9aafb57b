"""Structured Word (.docx) output rendered from the markup document."""

import io
import logging
import re
from dataclasses import dataclass
from typing import Optional

from docx import Document
from docx.shared import Inches, Pt, RGBColor, Twips

from ..errors import EmissionError
from ..processing.models import EmissionHeader, EmissionOutput, MarkupDocument


logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SUCCESS_COLOR = "16A34A"
FALLBACK_COLOR = "DC2626"

# Characters lxml refuses in text nodes
_XML_INVALID_RE = re.compile('[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]')


def xml_safe(text: str) -> str:
    """Drop characters that cannot appear in a Word XML part."""
    return _XML_INVALID_RE.sub('', text)


@dataclass
class StructuredConfig:
    """Configuration for DOCX output."""
    long_paragraph_length: int = 150
    margin_inches: float = 1.0
    separator_width: int = 50


class StructuredEmitter:
    """Renders a MarkupDocument as a styled Word document.

    The markup is re-parsed line by line rather than carrying role tags:

    - ``# ``, ``## ``, ``### `` become headings 1-3
    - ``**text**`` becomes a bold note paragraph
    - ``*text*`` becomes an italic metadata line
    - numbered, lettered or bulleted lines are indented list items
    - lines containing `` | `` are monospace table rows
    - anything else is a plain paragraph
    """

    _BOLD_RE = re.compile(r'^\*\*(.+)\*\*$')
    _ITALIC_RE = re.compile(r'^\*(.+)\*$')
    _LIST_RES = (
        re.compile(r'^\d+\.\s+'),
        re.compile(r'^[●○■•▪‣⁃\-\*]\s+'),
        re.compile(r'^[a-z]\)\s+'),
    )

    def __init__(self, config: Optional[StructuredConfig] = None):
        self.config = config or StructuredConfig()

    def _add_paragraph(
        self,
        document,
        text: str,
        heading_level: Optional[int] = None,
        bold: bool = False,
        italic: bool = False,
        size: Optional[float] = None,
        color: Optional[str] = None,
        font: Optional[str] = None,
        space_before: Optional[int] = None,
        space_after: Optional[int] = None,
        indent: Optional[int] = None,
    ):
        if heading_level is not None:
            paragraph = document.add_heading(level=heading_level)
        else:
            paragraph = document.add_paragraph()

        run = paragraph.add_run(xml_safe(text))
        run.bold = bold
        run.italic = italic
        if size is not None:
            run.font.size = Pt(size)
        if color is not None:
            run.font.color.rgb = RGBColor.from_string(color)
        if font is not None:
            run.font.name = font

        fmt = paragraph.paragraph_format
        if space_before is not None:
            fmt.space_before = Twips(space_before)
        if space_after is not None:
            fmt.space_after = Twips(space_after)
        if indent is not None:
            fmt.left_indent = Twips(indent)
        return paragraph

    def _add_field(self, document, label: str, value: str, color: Optional[str] = None, space_after: int = 100):
        paragraph = document.add_paragraph()
        paragraph.add_run(xml_safe(label)).bold = True
        run = paragraph.add_run(xml_safe(value))
        if color is not None:
            run.font.color.rgb = RGBColor.from_string(color)
        paragraph.paragraph_format.space_after = Twips(space_after)

    def _add_information_block(
        self,
        document,
        header: EmissionHeader,
        page_count: int,
        extraction_succeeded: bool
    ) -> None:
        self._add_paragraph(
            document, header.title, heading_level=1, bold=True,
            size=16, color="2563EB", space_after=400,
        )
        self._add_paragraph(
            document, "Document Information", heading_level=2, bold=True,
            size=12, space_before=300, space_after=200,
        )
        self._add_field(document, "Original file: ", header.original_filename)
        self._add_field(document, "Pages: ", str(page_count))
        self._add_field(document, "Converted on: ", header.timestamp)
        self._add_field(
            document,
            "Text extraction: ",
            "Successful" if extraction_succeeded else "Fallback mode",
            color=SUCCESS_COLOR if extraction_succeeded else FALLBACK_COLOR,
            space_after=400,
        )
        self._add_paragraph(
            document, "─" * self.config.separator_width, color="6B7280", space_after=300,
        )
        self._add_paragraph(
            document, "Extracted Content", heading_level=2, bold=True,
            size=12, space_after=200,
        )

    def _add_markup_line(self, document, line: str) -> None:
        """Render one markup line. Unknown syntax falls through to a paragraph."""
        if not line.strip():
            self._add_paragraph(document, "", space_after=100)
        elif line.startswith('# '):
            self._add_paragraph(
                document, line[2:], heading_level=1, bold=True,
                size=14, color="1D4ED8", space_before=400, space_after=200,
            )
        elif line.startswith('## '):
            self._add_paragraph(
                document, line[3:], heading_level=2, bold=True,
                size=12, color="2563EB", space_before=300, space_after=150,
            )
        elif line.startswith('### '):
            self._add_paragraph(
                document, line[4:], heading_level=3, bold=True,
                size=11, color="3B82F6", space_before=250, space_after=125,
            )
        elif self._BOLD_RE.match(line):
            self._add_paragraph(
                document, self._BOLD_RE.match(line).group(1), bold=True,
                color="059669", space_before=150, space_after=150,
            )
        elif self._ITALIC_RE.match(line):
            self._add_paragraph(
                document, self._ITALIC_RE.match(line).group(1), italic=True,
                color="6B7280", space_after=100,
            )
        elif any(pattern.match(line) for pattern in self._LIST_RES):
            self._add_paragraph(document, line, size=11, space_after=100, indent=360)
        elif ' | ' in line:
            self._add_paragraph(
                document, '    '.join(line.split(' | ')),
                font="Courier New", size=10, space_after=100,
            )
        else:
            is_long = len(line) > self.config.long_paragraph_length
            self._add_paragraph(document, line, size=11, space_after=200 if is_long else 150)

    def emit(
        self,
        markup: MarkupDocument,
        header: EmissionHeader,
        page_count: int,
        extraction_succeeded: bool
    ) -> EmissionOutput:
        """Render the markup document to DOCX bytes.

        Args:
            markup: Markup produced by the formatter (or the fallback narrative).
            header: Information block placed above the body.
            page_count: Page count of the source PDF.
            extraction_succeeded: Whether a real text layer was recovered.

        Returns:
            EmissionOutput holding the .docx bytes.

        Raises:
            EmissionError: If the rendered document is empty.
        """
        document = Document()

        for section in document.sections:
            margin = Inches(self.config.margin_inches)
            section.top_margin = margin
            section.right_margin = margin
            section.bottom_margin = margin
            section.left_margin = margin

        self._add_information_block(document, header, page_count, extraction_succeeded)

        for line in markup.lines:
            self._add_markup_line(document, line)

        buffer = io.BytesIO()
        document.save(buffer)
        data = buffer.getvalue()

        if not data:
            raise EmissionError("DOCX emitter produced an empty document")

        logger.debug(f"Rendered DOCX document with {len(markup.lines)} body lines ({len(data)} bytes)")
        return EmissionOutput(data=data, mime_type=DOCX_MIME_TYPE, extension=".docx")
