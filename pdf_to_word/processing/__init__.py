"""Processing module for PDF parsing and text extraction."""

from .backend_interface import PDFBackendBase
from .extractor import ExtractorConfig, TextExtractor
from .models import (
    ClassifiedLine,
    ConversionResponse,
    DocumentMetadata,
    EmissionHeader,
    EmissionOutput,
    ExtractionResult,
    LineRole,
    MarkupDocument,
    RenderedConversion,
    SourceDocument,
    StoredFile,
)
from .pymupdf_backend import PyMuPDFBackend, StructureOnlyBackend
from .whitespace_normalizer import WhitespaceConfig, WhitespaceNormalizer

__all__ = [
    "PDFBackendBase",
    "PyMuPDFBackend",
    "StructureOnlyBackend",
    "TextExtractor",
    "ExtractorConfig",
    "WhitespaceNormalizer",
    "WhitespaceConfig",
    "SourceDocument",
    "DocumentMetadata",
    "ExtractionResult",
    "LineRole",
    "ClassifiedLine",
    "MarkupDocument",
    "EmissionHeader",
    "EmissionOutput",
    "StoredFile",
    "RenderedConversion",
    "ConversionResponse",
]
