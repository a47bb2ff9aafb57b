"""ToolBox PDF to Word: convert PDFs into DOCX and RTF documents."""

from .errors import (
    CorruptInputError,
    EmissionError,
    ToolboxError,
    UnsupportedInputError,
)
from .pipeline import ConversionPipeline, PipelineConfig, PipelineStage, quick_convert
from .processing import (
    ClassifiedLine,
    ConversionResponse,
    DocumentMetadata,
    ExtractionResult,
    LineRole,
    MarkupDocument,
    PDFBackendBase,
    PyMuPDFBackend,
    SourceDocument,
    StructureOnlyBackend,
)
from .storage import LocalFileStorage

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "ConversionPipeline",
    "PipelineConfig",
    "PipelineStage",
    "quick_convert",
    # Models
    "SourceDocument",
    "DocumentMetadata",
    "ExtractionResult",
    "LineRole",
    "ClassifiedLine",
    "MarkupDocument",
    "ConversionResponse",
    # Backends
    "PDFBackendBase",
    "PyMuPDFBackend",
    "StructureOnlyBackend",
    # Storage
    "LocalFileStorage",
    # Errors
    "ToolboxError",
    "CorruptInputError",
    "UnsupportedInputError",
    "EmissionError",
]
