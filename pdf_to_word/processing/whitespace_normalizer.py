"""Whitespace normalization for raw text pulled out of PDFs."""

import re
from dataclasses import dataclass
from typing import Optional


@dataclass
class WhitespaceConfig:
    """Configuration for whitespace normalization."""
    # Spaces substituted for a tab in layout-preserving text
    tab_width: int = 4


# C0 controls other than tab, LF and CR are not allowed in XML text
_CONTROL_CHARS_RE = re.compile(r'[\x00-\x08\x0b\x0e-\x1f]')


class WhitespaceNormalizer:
    """Normalizes line endings, tabs and blank-line runs.

    Two views of the same text are produced: a flat one where runs of
    spaces are collapsed, and a layout one where horizontal spacing is kept
    so column-aligned rows remain recognisable.
    """

    def __init__(self, config: Optional[WhitespaceConfig] = None):
        """Initialize the normalizer.

        Args:
            config: Whitespace configuration options.
        """
        self.config = config or WhitespaceConfig()

    @staticmethod
    def normalize_line_breaks(text: str) -> str:
        """Map CRLF, CR and form feed to ``\\n`` and other control characters to a space."""
        text = text.replace('\r\n', '\n').replace('\r', '\n').replace('\f', '\n')
        return _CONTROL_CHARS_RE.sub(' ', text)

    def normalize(self, text: str) -> str:
        """Produce the flat view of ``text``.

        Args:
            text: Raw extracted text.

        Returns:
            Text with single spaces, trimmed lines and at most one blank
            line between paragraphs.
        """
        if not text:
            return ""

        result = self.normalize_line_breaks(text).replace('\t', ' ')
        result = re.sub(r' {2,}', ' ', result)
        result = '\n'.join(line.strip() for line in result.split('\n'))
        result = re.sub(r'\n{3,}', '\n\n', result)

        return result.strip()

    def normalize_layout(self, text: str) -> str:
        """Produce the layout-preserving view of ``text``.

        Args:
            text: Raw extracted text.

        Returns:
            Text with tabs expanded, trailing whitespace trimmed and at most
            one blank line between paragraphs.
        """
        if not text:
            return ""

        result = self.normalize_line_breaks(text).replace('\t', ' ' * self.config.tab_width)
        result = '\n'.join(line.rstrip() for line in result.split('\n'))
        result = re.sub(r'\n{3,}', '\n\n', result)

        return result.strip('\n')
