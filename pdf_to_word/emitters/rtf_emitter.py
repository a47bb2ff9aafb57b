"""Flat Rich Text Format output for maximum compatibility."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..errors import EmissionError
from ..processing.models import EmissionHeader, EmissionOutput


logger = logging.getLogger(__name__)

RTF_MIME_TYPE = "application/rtf"

_FONT_TABLE = r"{\fonttbl {\f0\froman Times New Roman;}{\f1\fswiss Arial;}{\f2\fmodern Courier New;}}"
_COLOR_TABLE = r"{\colortbl;\red0\green0\blue0;\red0\green0\blue255;\red255\green0\blue0;}"


@dataclass
class RichTextConfig:
    """Configuration for RTF output."""
    separator_width: int = 60


def escape_rtf(text: str) -> str:
    """Escape RTF control characters."""
    return text.replace('\\', '\\\\').replace('{', '\\{').replace('}', '\\}')


def encode_unicode(text: str) -> str:
    """Replace non-ASCII characters with ``\\uN?`` control words.

    Characters outside the BMP are written as UTF-16 surrogate pairs, and
    values above 32767 are emitted as negative numbers.
    """
    parts = []
    for char in text:
        if ord(char) < 128:
            parts.append(char)
            continue
        encoded = char.encode('utf-16-le')
        for i in range(0, len(encoded), 2):
            unit = int.from_bytes(encoded[i:i + 2], 'little')
            if unit > 32767:
                unit -= 65536
            parts.append(f"\\u{unit}?")
    return ''.join(parts)


class RichTextEmitter:
    """Renders plain text as a flat RTF document.

    The body never carries markup syntax: the only styling applied is bold
    for lines that start with an ``ALL CAPS LABEL:``.
    """

    _LABEL_RE = re.compile(r'^([A-ZÁÉÍÓÚÑÜ][A-ZÁÉÍÓÚÑÜ ]*:)', re.MULTILINE)

    def __init__(self, config: Optional[RichTextConfig] = None):
        self.config = config or RichTextConfig()

    def render_body(self, text: str) -> str:
        """Convert plain text into RTF body markup.

        Args:
            text: Plain text with ``\\n`` line breaks.

        Returns:
            RTF body fragment.
        """
        body = escape_rtf(text)
        body = self._LABEL_RE.sub(r'\\b \1\\b0 ', body)
        body = encode_unicode(body)
        body = body.replace('\n\n', '\\par\\par ')
        body = body.replace('\n', '\\line ')
        body = body.replace('\t', '\\tab ')
        return body

    def render_header(self, header: EmissionHeader) -> str:
        title = encode_unicode(escape_rtf(header.title))
        filename = encode_unicode(escape_rtf(header.original_filename))
        tool = encode_unicode(escape_rtf(header.tool_name))
        return (
            f"\\f1\\fs28\\b\\cf2 {title}\\cf1\\b0\\par\\par "
            f"\\f0\\fs20\\b File Information:\\b0\\par "
            f"Original file: {filename}\\par "
            f"Converted on: {header.timestamp}\\par "
            f"Conversion tool: {tool}\\par\\par "
            f"\\f2\\fs18 {'=' * self.config.separator_width}\\par\\par "
        )

    def emit(self, text: str, header: EmissionHeader) -> EmissionOutput:
        """Render a complete RTF document.

        Args:
            text: Plain document body.
            header: Information block placed above the body.

        Returns:
            EmissionOutput holding ASCII-only RTF bytes.

        Raises:
            EmissionError: If the rendered document is empty.
        """
        document = (
            f"{{\\rtf1\\ansi\\deff0 {_FONT_TABLE}{_COLOR_TABLE}"
            f"\\f0\\fs20 {self.render_header(header)}"
            f"\\f0\\fs18 {self.render_body(text)}\\par}}"
        )
        data = document.encode('ascii')

        if not data:
            raise EmissionError("RTF emitter produced an empty document")

        logger.debug(f"Rendered RTF document ({len(data)} bytes)")
        return EmissionOutput(data=data, mime_type=RTF_MIME_TYPE, extension=".rtf")
