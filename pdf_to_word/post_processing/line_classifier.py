"""Structural line classifier for text recovered from PDFs."""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from ..processing.models import ClassifiedLine, LineRole


logger = logging.getLogger(__name__)

UPPER = "A-ZÁÉÍÓÚÑÜ"
LOWER = "a-záéíóúñü"

DEFAULT_FUNCTION_WORDS = (
    # Spanish
    "el", "la", "de", "del", "en", "con", "por", "para", "un", "una",
    "este", "esta", "que", "se", "ser", "debe", "puede",
    # English
    "the", "of", "and", "to", "in", "for", "with", "on", "at", "by",
    "from", "is", "are", "was", "this", "that", "should", "can", "must",
)

DEFAULT_NOTE_KEYWORDS = (
    "NOTA", "NOTE",
    "IMPORTANTE", "IMPORTANT",
    "ATENCIÓN", "ATTENTION",
    "OBSERVACIÓN", "OBSERVATION",
    "ADVERTENCIA", "WARNING",
    "TIP",
    "CONSEJO", "ADVICE",
)

DEFAULT_METADATA_LABELS = ("Fecha", "Date", "Versión", "Version")


@dataclass
class ClassifierConfig:
    """Configuration for line classification."""
    title_max_length: int = 50
    title_max_words: int = 8
    header_max_length: int = 60
    header_max_words: int = 6
    # Lines containing any of these words are prose, not headers
    function_words: tuple[str, ...] = DEFAULT_FUNCTION_WORDS
    note_keywords: tuple[str, ...] = DEFAULT_NOTE_KEYWORDS
    metadata_labels: tuple[str, ...] = DEFAULT_METADATA_LABELS
    # Re-insert whitespace lost during extraction before classifying
    repair_artifacts: bool = True


@dataclass(frozen=True)
class ClassificationRule:
    """A role together with the predicate that assigns it."""
    role: LineRole
    predicate: Callable[[str], bool]
    level: Union[int, Callable[[str], int]] = 0

    def level_for(self, line: str) -> int:
        if callable(self.level):
            return self.level(line)
        return self.level


def _word_count(line: str) -> int:
    # Runs of spaces count as extra words, so column-aligned lines
    # exhaust the budget
    return len(line.split(' '))


class LineClassifier:
    """Assigns a structural role to every line of extracted text.

    Rules are evaluated in priority order and the first match wins:

    1. Title - short all-caps line
    2. Header - short capitalised line without sentence punctuation
    3. Numbered header - ``1.``, ``1.1``, ``A.`` or ``IV.`` before a capital
    4. List item - bullet glyph, ``1. `` or ``a) ``
    5. Note - callout keyword followed by a colon
    6. Metadata - leading date or ``Date:``/``Version:`` label
    7. Table row - three or more fields separated by wide gaps

    Blank lines are Empty and anything else is a Paragraph. Classification
    never raises.
    """

    _TITLE_RE = re.compile(rf'^[{UPPER}\s\d\-]+$')
    _ABBREVIATION_RE = re.compile(r'^[A-Z]\.\s')
    _CAPITAL_RE = re.compile(rf'[{UPPER}]')
    _TERMINAL_RE = re.compile(r'[.!?]$')
    _STARTS_UPPER_RE = re.compile(rf'^[{UPPER}]')
    _NUMBERED_RE = re.compile(rf'^(\d+\.|\d+\.\d+\.?|[A-Z]\.?|\b[IVX]+\.?)\s+[{UPPER}]')
    _SUBSECTION_RE = re.compile(r'^\d+\.\d+')
    _LIST_RES = (
        re.compile(r'^[●○■•▪‣⁃\-\*]\s+'),
        re.compile(r'^\d+\.\s+'),
        re.compile(r'^[a-z]\)\s+'),
    )
    _DATE_RE = re.compile(r'^\d{1,2}/\d{1,2}/\d{4}')
    _COLUMN_GAP_RE = re.compile(r'\s{3,}')

    def __init__(self, config: Optional[ClassifierConfig] = None):
        """Initialize the classifier.

        Args:
            config: Classifier configuration.
        """
        self.config = config or ClassifierConfig()

        words = '|'.join(re.escape(w) for w in self.config.function_words)
        self._function_word_re = re.compile(rf'\b({words})\b', re.IGNORECASE)

        keywords = '|'.join(re.escape(k) for k in self.config.note_keywords)
        self._note_re = re.compile(rf'^({keywords}):', re.IGNORECASE)

        labels = '|'.join(re.escape(label) for label in self.config.metadata_labels)
        self._metadata_label_re = re.compile(rf'^({labels}):', re.IGNORECASE)

        self.rules = self._build_rules()

    def _build_rules(self) -> list[ClassificationRule]:
        """Build the ordered rule list. Order is precedence."""
        return [
            ClassificationRule(LineRole.TITLE, self._is_title, 1),
            ClassificationRule(LineRole.HEADER, self._is_header, 2),
            ClassificationRule(LineRole.NUMBERED_HEADER, self._is_numbered_header, self._numbered_level),
            ClassificationRule(LineRole.LIST_ITEM, self._is_list_item),
            ClassificationRule(LineRole.NOTE, self._is_note),
            ClassificationRule(LineRole.METADATA, self._is_metadata),
            ClassificationRule(LineRole.TABLE_ROW, self._is_table_row),
        ]

    def _is_title(self, line: str) -> bool:
        return (
            len(line) < self.config.title_max_length
            and bool(self._TITLE_RE.match(line))
            and bool(self._CAPITAL_RE.search(line))
            and not self._ABBREVIATION_RE.match(line)
            and '**' not in line
            and _word_count(line) <= self.config.title_max_words
        )

    def _is_header(self, line: str) -> bool:
        return (
            len(line) < self.config.header_max_length
            and not self._TERMINAL_RE.search(line)
            and bool(self._STARTS_UPPER_RE.match(line))
            and '**' not in line
            and not self._function_word_re.search(line)
            and _word_count(line) <= self.config.header_max_words
        )

    def _is_numbered_header(self, line: str) -> bool:
        return bool(self._NUMBERED_RE.match(line))

    def _numbered_level(self, line: str) -> int:
        return 3 if self._SUBSECTION_RE.match(line) else 2

    def _is_list_item(self, line: str) -> bool:
        return any(pattern.match(line) for pattern in self._LIST_RES)

    def _is_note(self, line: str) -> bool:
        return bool(self._note_re.match(line))

    def _is_metadata(self, line: str) -> bool:
        return bool(self._DATE_RE.match(line) or self._metadata_label_re.match(line))

    def _is_table_row(self, line: str) -> bool:
        return (
            bool(self._COLUMN_GAP_RE.search(line))
            and len(self._COLUMN_GAP_RE.split(line)) >= 3
        )

    def repair(self, text: str) -> str:
        """Re-insert whitespace lost to layout-driven extraction.

        Args:
            text: Normalized text.

        Returns:
            Text with concatenated words split and sentence ends promoted
            to paragraph breaks.
        """
        result = re.sub(rf'([{LOWER}])([{UPPER}])', r'\1 \2', text)
        result = re.sub(rf'([{LOWER}{UPPER}])(\d)', r'\1 \2', result)
        result = re.sub(rf'(\d)([{LOWER}{UPPER}])', r'\1 \2', result)
        result = re.sub(rf'([.!?])[ \t]*\n[ \t]*([{LOWER}])', r'\1\n\n\2', result)
        # Only after a word, so "1. Scope" and "A. Intro" stay intact
        result = re.sub(rf'([{LOWER}][.!?])\s+([{UPPER}])', r'\1\n\n\2', result)
        return result

    def classify_line(self, line: str) -> ClassifiedLine:
        """Classify a single line.

        Args:
            line: One line of text.

        Returns:
            ClassifiedLine with the trimmed content.
        """
        content = line.strip()
        if not content:
            return ClassifiedLine(content='', role=LineRole.EMPTY)

        for rule in self.rules:
            if rule.predicate(content):
                return ClassifiedLine(content=content, role=rule.role, level=rule.level_for(content))

        return ClassifiedLine(content=content, role=LineRole.PARAGRAPH)

    def classify(self, text: str) -> list[ClassifiedLine]:
        """Classify every line of ``text``.

        Args:
            text: Normalized text with ``\\n`` line breaks.

        Returns:
            One ClassifiedLine per line, in order.
        """
        if self.config.repair_artifacts:
            text = self.repair(text)

        lines = [self.classify_line(line) for line in text.split('\n')]

        if logger.isEnabledFor(logging.DEBUG):
            counts: dict[str, int] = {}
            for item in lines:
                counts[item.role.value] = counts.get(item.role.value, 0) + 1
            logger.debug(f"Classified {len(lines)} lines: {counts}")

        return lines
