"""Post-processing module turning extracted text into markup."""

from .fallback_narrative import build_fallback_narrative, is_word_processor_output
from .line_classifier import ClassificationRule, ClassifierConfig, LineClassifier
from .markup_formatter import FormatterConfig, MarkupFormatter

__all__ = [
    "LineClassifier",
    "ClassifierConfig",
    "ClassificationRule",
    "MarkupFormatter",
    "FormatterConfig",
    "build_fallback_narrative",
    "is_word_processor_output",
]
