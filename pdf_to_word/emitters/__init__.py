"""Output document renderers."""

from .docx_emitter import DOCX_MIME_TYPE, StructuredConfig, StructuredEmitter
from .rtf_emitter import RTF_MIME_TYPE, RichTextConfig, RichTextEmitter

__all__ = [
    "StructuredEmitter",
    "StructuredConfig",
    "RichTextEmitter",
    "RichTextConfig",
    "DOCX_MIME_TYPE",
    "RTF_MIME_TYPE",
]
