"""Main conversion pipeline orchestrating PDF to Word conversion."""

import logging
import mimetypes
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .emitters import (
    RichTextConfig,
    RichTextEmitter,
    StructuredConfig,
    StructuredEmitter,
)
from .errors import UnsupportedInputError
from .post_processing import (
    ClassifierConfig,
    FormatterConfig,
    LineClassifier,
    MarkupFormatter,
    build_fallback_narrative,
)
from .processing import (
    ConversionResponse,
    EmissionHeader,
    ExtractorConfig,
    MarkupDocument,
    PDFBackendBase,
    PyMuPDFBackend,
    RenderedConversion,
    SourceDocument,
    StructureOnlyBackend,
    TextExtractor,
)
from .storage import LocalFileStorage


logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


class PipelineStage(Enum):
    """Linear stages of a conversion run."""
    RECEIVED = "received"
    EXTRACTING = "extracting"
    EXTRACTION_SUCCEEDED = "extraction_succeeded"
    EXTRACTION_FAILED = "extraction_failed"
    CLASSIFYING = "classifying"
    REFORMATTING = "reformatting"
    EMITTING = "emitting"
    PERSISTING = "persisting"
    COMPLETED = "completed"


@dataclass
class PipelineConfig:
    """Configuration for the conversion pipeline."""
    # PDF backend: "pymupdf" or "structure-only"
    backend: str = "pymupdf"

    extractor_config: ExtractorConfig = field(default_factory=ExtractorConfig)
    classifier_config: ClassifierConfig = field(default_factory=ClassifierConfig)
    formatter_config: FormatterConfig = field(default_factory=FormatterConfig)
    rich_text_config: RichTextConfig = field(default_factory=RichTextConfig)
    structured_config: StructuredConfig = field(default_factory=StructuredConfig)

    # Input validation
    accepted_media_types: tuple[str, ...] = (PDF_MEDIA_TYPE, "application/x-pdf")

    # Output settings
    document_title: str = "PDF to Word Conversion"
    tool_name: str = "ToolBox PDF to Word Converter"


class ConversionPipeline:
    """Orchestrates the PDF to Word conversion process.

    Pipeline stages:
    1. Extraction - Recover text and page count from the PDF
    2. Classification - Tag each line with a structural role
    3. Reformatting - Render tagged lines as markup
    4. Emission - Produce the DOCX and RTF documents
    5. Persistence - Hand both documents to storage

    Stages 2 and 3 only run when a text layer was found; otherwise both
    emitters render a fallback narrative.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        backend: Optional[PDFBackendBase] = None,
        storage: Optional[LocalFileStorage] = None
    ):
        """Initialize the pipeline.

        Args:
            config: Pipeline configuration.
            backend: PDF backend; overrides ``config.backend`` when given.
            storage: Storage collaborator used by ``convert``.
        """
        self.config = config or PipelineConfig()
        self.storage = storage
        self._backend = backend
        self._extractor: Optional[TextExtractor] = None
        self.classifier = LineClassifier(self.config.classifier_config)
        self.formatter = MarkupFormatter(self.config.formatter_config)
        self.rich_text_emitter = RichTextEmitter(self.config.rich_text_config)
        self.structured_emitter = StructuredEmitter(self.config.structured_config)

    @property
    def backend(self) -> PDFBackendBase:
        """Get or create the PDF backend."""
        if self._backend is None:
            if self.config.backend == "pymupdf":
                self._backend = PyMuPDFBackend()
            elif self.config.backend == "structure-only":
                self._backend = StructureOnlyBackend()
            else:
                raise ValueError(f"Unknown backend: {self.config.backend}")
        return self._backend

    @property
    def extractor(self) -> TextExtractor:
        if self._extractor is None:
            self._extractor = TextExtractor(self.backend, self.config.extractor_config)
        return self._extractor

    def _enter(self, stage: PipelineStage, source: SourceDocument) -> None:
        logger.info(f"[{source.filename}] {stage.value}")

    def render(
        self,
        source: SourceDocument,
        converted_at: Optional[datetime] = None
    ) -> RenderedConversion:
        """Run every stage except persistence.

        Args:
            source: Uploaded document.
            converted_at: Timestamp for the output headers (default: now).

        Returns:
            RenderedConversion with both output documents in memory.

        Raises:
            UnsupportedInputError: If the media type is not a PDF.
            CorruptInputError: If the PDF container cannot be parsed.
        """
        self._enter(PipelineStage.RECEIVED, source)
        if source.media_type not in self.config.accepted_media_types:
            raise UnsupportedInputError(
                f"File must be a PDF, got media type {source.media_type!r}"
            )

        self._enter(PipelineStage.EXTRACTING, source)
        extraction = self.extractor.extract(source.data)

        if extraction.succeeded:
            self._enter(PipelineStage.EXTRACTION_SUCCEEDED, source)

            self._enter(PipelineStage.CLASSIFYING, source)
            lines = self.classifier.classify(extraction.layout_text)

            self._enter(PipelineStage.REFORMATTING, source)
            markup = self.formatter.reformat(lines)
            plain_text = extraction.text
        else:
            self._enter(PipelineStage.EXTRACTION_FAILED, source)
            lines = []
            plain_text = build_fallback_narrative(
                filename=source.filename,
                file_size=source.size,
                metadata=extraction.metadata,
                backend_name=self.backend.name,
                text_attempted=self.backend.extracts_text,
            )
            markup = MarkupDocument.from_text(plain_text)

        self._enter(PipelineStage.EMITTING, source)
        header = EmissionHeader(
            title=self.config.document_title,
            original_filename=source.filename,
            converted_at=converted_at or datetime.now(),
            tool_name=self.config.tool_name,
        )
        rich_text = self.rich_text_emitter.emit(plain_text, header)
        structured = self.structured_emitter.emit(
            markup, header, extraction.page_count, extraction.succeeded
        )

        return RenderedConversion(
            source=source,
            extraction=extraction,
            lines=lines,
            markup=markup,
            rich_text=rich_text,
            structured=structured,
            extraction_method=self.backend.extraction_method,
        )

    def convert(self, source: SourceDocument) -> ConversionResponse:
        """Run the full conversion pipeline and store both outputs.

        Args:
            source: Uploaded document.

        Returns:
            ConversionResponse describing the stored outputs.
        """
        if self.storage is None:
            raise ValueError("ConversionPipeline.convert requires a storage collaborator")

        rendered = self.render(source)

        self._enter(PipelineStage.PERSISTING, source)
        file_id = str(uuid.uuid4())
        base_name = f"{file_id}-{source.stem}"
        docx_file = self.storage.put(rendered.structured.data, base_name + rendered.structured.extension)
        rtf_file = self.storage.put(rendered.rich_text.data, base_name + rendered.rich_text.extension)

        self._enter(PipelineStage.COMPLETED, source)
        return ConversionResponse(
            original_name=source.filename,
            file_id=file_id,
            converted_url=docx_file.locator,
            alternative_url=rtf_file.locator,
            original_size=source.size,
            converted_size=docx_file.size_bytes,
            alternative_size=rtf_file.size_bytes,
            page_count=rendered.extraction.page_count,
            text_extracted=rendered.extraction.succeeded,
            extraction_method=rendered.extraction_method,
        )

    def convert_file(
        self,
        pdf_path: Union[str, Path],
        output_dir: Optional[Union[str, Path]] = None
    ) -> ConversionResponse:
        """Convert a PDF on disk and save both outputs.

        Args:
            pdf_path: Path to input PDF.
            output_dir: Directory for outputs (default: next to the input).
                Ignored when the pipeline already has a storage collaborator.

        Returns:
            ConversionResponse whose locators are filesystem paths.
        """
        path = Path(pdf_path)
        media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        source = SourceDocument(data=path.read_bytes(), filename=path.name, media_type=media_type)

        if self.storage is None:
            self.storage = LocalFileStorage(
                output_dir or path.parent, url_prefix=None, retention_seconds=None
            )
        return self.convert(source)

    def convert_directory(
        self,
        input_dir: Union[str, Path],
        output_dir: Union[str, Path],
        pattern: str = "*.pdf"
    ) -> list[ConversionResponse]:
        """Convert all PDFs in a directory.

        Args:
            input_dir: Directory containing PDFs.
            output_dir: Directory for output files.
            pattern: Glob pattern for PDF files.

        Returns:
            Responses for the files that converted successfully.
        """
        input_dir = Path(input_dir)
        if self.storage is None:
            self.storage = LocalFileStorage(output_dir, url_prefix=None, retention_seconds=None)

        responses = []
        for pdf_file in sorted(input_dir.glob(pattern)):
            try:
                responses.append(self.convert_file(pdf_file))
            except Exception as e:
                logger.error(f"Failed to convert {pdf_file}: {e}")

        return responses


def quick_convert(pdf_path: Union[str, Path]) -> str:
    """Quick conversion function for simple use cases.

    Args:
        pdf_path: Path to PDF file.

    Returns:
        The markup document (or fallback narrative) as text.
    """
    path = Path(pdf_path)
    pipeline = ConversionPipeline()
    rendered = pipeline.render(
        SourceDocument(data=path.read_bytes(), filename=path.name, media_type=PDF_MEDIA_TYPE)
    )
    return rendered.markup.to_text()
