"""Renders classified lines into a markdown-like markup document."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..processing.models import ClassifiedLine, LineRole, MarkupDocument


logger = logging.getLogger(__name__)


@dataclass
class FormatterConfig:
    """Configuration for markup rendering."""
    # Paragraphs longer than this get blank-line separation
    long_paragraph_length: int = 150
    # Separator used when joining table row fields
    table_separator: str = " | "


class MarkupFormatter:
    """Turns a classified line sequence into markup.

    Handles:
    - Heading markers for titles and headers
    - Bold notes and italic metadata
    - List and long-paragraph spacing
    - Blank-line normalization
    """

    _COLUMN_GAP_RE = re.compile(r'\s{3,}')
    _EMPHASIS_RE = re.compile(r'^(#{1,3} |\*\*.+\*\*$)')

    def __init__(self, config: Optional[FormatterConfig] = None):
        """Initialize the formatter.

        Args:
            config: Formatter configuration options.
        """
        self.config = config or FormatterConfig()

    def reformat(self, lines: list[ClassifiedLine]) -> MarkupDocument:
        """Render classified lines and normalize spacing.

        Args:
            lines: Output of the line classifier.

        Returns:
            MarkupDocument ready for the structured emitter.
        """
        rendered = self._render(lines)
        rendered = self._normalize_blank_lines(rendered)
        rendered = self._separate_emphasis(rendered)
        rendered = self._trim(rendered)

        logger.debug(f"Rendered {len(lines)} classified lines into {len(rendered)} markup lines")
        return MarkupDocument(lines=rendered)

    def _render(self, lines: list[ClassifiedLine]) -> list[str]:
        output: list[str] = []

        for i, item in enumerate(lines):
            prev_item = lines[i - 1] if i > 0 else None
            next_item = lines[i + 1] if i + 1 < len(lines) else None
            after_content = prev_item is not None and prev_item.role != LineRole.EMPTY

            if item.role == LineRole.EMPTY:
                output.append('')

            elif item.role in (LineRole.TITLE, LineRole.HEADER, LineRole.NUMBERED_HEADER):
                if after_content:
                    output.append('')
                output.append(f"{self._heading_marker(item)} {item.content}")
                output.append('')

            elif item.role == LineRole.LIST_ITEM:
                if after_content and prev_item.role != LineRole.LIST_ITEM:
                    output.append('')
                output.append(item.content)
                if next_item is not None and next_item.role not in (LineRole.LIST_ITEM, LineRole.EMPTY):
                    output.append('')

            elif item.role == LineRole.NOTE:
                if after_content:
                    output.append('')
                output.append(f"**{item.content}**")
                output.append('')

            elif item.role == LineRole.METADATA:
                output.append(f"*{item.content}*")

            elif item.role == LineRole.TABLE_ROW:
                columns = self._COLUMN_GAP_RE.split(item.content)
                output.append(self.config.table_separator.join(columns))

            else:
                if len(item.content) > self.config.long_paragraph_length:
                    if after_content and prev_item.role != LineRole.PARAGRAPH:
                        output.append('')
                    output.append(item.content)
                    if next_item is not None and next_item.role not in (LineRole.EMPTY, LineRole.PARAGRAPH):
                        output.append('')
                else:
                    output.append(item.content)

        return output

    @staticmethod
    def _heading_marker(item: ClassifiedLine) -> str:
        if item.role == LineRole.TITLE:
            return '#'
        if item.role == LineRole.NUMBERED_HEADER and item.level == 3:
            return '###'
        return '##'

    def _normalize_blank_lines(self, lines: list[str]) -> list[str]:
        """Reduce runs of blank lines to a single blank line."""
        result: list[str] = []
        for line in lines:
            if not line.strip() and result and not result[-1].strip():
                continue
            result.append('' if not line.strip() else line)
        return result

    def _separate_emphasis(self, lines: list[str]) -> list[str]:
        """Ensure headings and bold notes never directly follow content."""
        result: list[str] = []
        for line in lines:
            if self._EMPHASIS_RE.match(line) and result and result[-1].strip():
                result.append('')
            result.append(line)
        return result

    def _trim(self, lines: list[str]) -> list[str]:
        start, end = 0, len(lines)
        while start < end and not lines[start].strip():
            start += 1
        while end > start and not lines[end - 1].strip():
            end -= 1
        return lines[start:end]
