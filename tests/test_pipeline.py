import io
from datetime import datetime

import pytest
from docx import Document
from unittest.mock import patch

from pdf_to_word.errors import CorruptInputError, EmissionError, UnsupportedInputError
from pdf_to_word.pipeline import ConversionPipeline, PipelineConfig, quick_convert
from pdf_to_word.post_processing.fallback_narrative import REMEDIATION_HEADING
from pdf_to_word.processing.models import LineRole, SourceDocument
from pdf_to_word.storage import LocalFileStorage

from conftest import LONG_PARAGRAPH, FakeBackend, make_pdf


def pdf_source(data, filename="report.pdf", media_type="application/pdf"):
    return SourceDocument(data=data, filename=filename, media_type=media_type)


def docx_texts(output):
    return [paragraph.text for paragraph in Document(io.BytesIO(output.data)).paragraphs]


def without_timestamps(texts):
    return [text for text in texts if not text.startswith("Converted on")]


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "uploads", retention_seconds=None)


def test_pipeline_initialization():
    pipe = ConversionPipeline()
    assert pipe.config.backend == "pymupdf"
    assert pipe.backend.name == "pymupdf"
    assert pipe.storage is None

    pipe = ConversionPipeline(PipelineConfig(backend="structure-only"))
    assert pipe.backend.extracts_text is False


def test_unknown_backend():
    pipe = ConversionPipeline(PipelineConfig(backend="nope"))
    with pytest.raises(ValueError):
        pipe.backend


def test_render_text_pdf(text_pdf):
    rendered = ConversionPipeline().render(pdf_source(text_pdf))

    assert rendered.extraction.succeeded is True
    assert rendered.extraction.page_count == 2
    assert rendered.lines[0].role == LineRole.TITLE
    assert rendered.markup.lines[0] == "# ANNUAL REPORT"
    assert rendered.extraction_method == "pymupdf (text layer + document structure)"

    assert b"ANNUAL REPORT" in rendered.rich_text.data
    # RTF carries the plain text, never markup syntax
    assert b"# ANNUAL" not in rendered.rich_text.data
    assert "ANNUAL REPORT" in docx_texts(rendered.structured)


def test_render_classified_text():
    backend = FakeBackend(text="CHAPTER ONE\n\n" + LONG_PARAGRAPH, page_count=1)
    rendered = ConversionPipeline(backend=backend).render(pdf_source(b"%PDF"))

    assert [line.role for line in rendered.lines] == [LineRole.TITLE, LineRole.EMPTY, LineRole.PARAGRAPH]
    assert rendered.markup.to_text() == f"# CHAPTER ONE\n\n{LONG_PARAGRAPH}\n"
    assert rendered.extraction_method == "fake (text layer + document structure)"


def test_convert_no_text_pdf(blank_pdf, storage):
    pipe = ConversionPipeline(storage=storage)
    response = pipe.convert(pdf_source(blank_pdf, filename="scan.pdf"))
    body = response.to_dict()

    assert body["success"] is True
    assert body["textExtracted"] is False
    assert body["pageCount"] == 3
    assert body["originalName"] == "scan.pdf"
    assert body["originalSize"] == len(blank_pdf)
    assert body["convertedUrl"].startswith("/uploads/")
    assert body["convertedUrl"].endswith("-scan.docx")
    assert body["alternativeUrl"].endswith("-scan.rtf")
    assert body["convertedFormat"] == "DOCX (Microsoft Word)"
    assert body["alternativeFormat"] == "RTF (Universal)"
    assert body["fileSizeKB"].endswith(" KB")

    rtf = (storage.root / body["alternativeUrl"].rsplit("/", 1)[1]).read_bytes()
    assert b"scan.pdf" in rtf
    assert b"Converted on:" in rtf
    assert REMEDIATION_HEADING.encode("ascii") in rtf

    docx = storage.root / body["convertedUrl"].rsplit("/", 1)[1]
    assert docx.stat().st_size == body["convertedSize"]


def test_fallback_narrative_in_both_outputs(blank_pdf):
    rendered = ConversionPipeline().render(pdf_source(blank_pdf, filename="scan.pdf"))

    assert rendered.lines == []
    texts = docx_texts(rendered.structured)
    assert "Text extraction: Fallback mode" in texts
    assert REMEDIATION_HEADING in texts
    assert "This suggests your PDF contains:" in texts
    assert "PROFESSIONAL TIP:" in texts
    assert b"This suggests your PDF contains:" in rendered.rich_text.data


def test_fallback_for_word_processor_output():
    data = make_pdf([[]], metadata={"creator": "Microsoft Word"})
    rendered = ConversionPipeline().render(pdf_source(data))

    text = rendered.markup.to_text()
    assert "TRY THESE SOLUTIONS:" in text
    assert "Created with: Microsoft Word" in text
    assert "This suggests your PDF contains:" not in text


def test_structure_only_backend_always_falls_back(text_pdf):
    pipe = ConversionPipeline(PipelineConfig(backend="structure-only"))
    rendered = pipe.render(pdf_source(text_pdf))

    assert rendered.extraction.succeeded is False
    assert rendered.extraction.page_count == 2
    assert rendered.extraction_method == "pymupdf (document structure only)"
    assert "text layer - Not available" in rendered.markup.to_text()


def test_conversion_is_repeatable(blank_pdf, text_pdf):
    pipe = ConversionPipeline()
    for data in (blank_pdf, text_pdf):
        first = pipe.render(pdf_source(data), converted_at=datetime(2024, 1, 1, 9, 0, 0))
        second = pipe.render(pdf_source(data), converted_at=datetime(2024, 6, 30, 18, 45, 0))

        assert first.markup == second.markup
        assert without_timestamps(docx_texts(first.structured)) == without_timestamps(docx_texts(second.structured))
        assert first.rich_text.data.replace(b"2024-01-01 09:00:00", b"") == \
            second.rich_text.data.replace(b"2024-06-30 18:45:00", b"")


def test_rejects_non_pdf_media_type():
    with pytest.raises(UnsupportedInputError):
        ConversionPipeline().render(pdf_source(b"hello", filename="notes.txt", media_type="text/plain"))


def test_rejects_corrupt_pdf():
    with pytest.raises(CorruptInputError):
        ConversionPipeline().render(pdf_source(b"this is definitely not a pdf"))


def test_convert_requires_storage(text_pdf):
    with pytest.raises(ValueError):
        ConversionPipeline().convert(pdf_source(text_pdf))


def test_both_outputs_non_empty(text_pdf, storage):
    response = ConversionPipeline(storage=storage).convert(pdf_source(text_pdf))

    assert response.text_extracted is True
    assert response.converted_size > 0
    assert response.alternative_size > 0
    assert response.file_id in response.converted_url


@patch("pdf_to_word.pipeline.StructuredEmitter.emit")
def test_emission_error_propagates(mock_emit, text_pdf):
    mock_emit.side_effect = EmissionError("DOCX emitter produced an empty document")
    with pytest.raises(EmissionError):
        ConversionPipeline().render(pdf_source(text_pdf))


def test_convert_file_writes_next_to_output_dir(tmp_path, text_pdf):
    pdf_path = tmp_path / "report.pdf"
    pdf_path.write_bytes(text_pdf)
    out_dir = tmp_path / "out"

    response = ConversionPipeline().convert_file(pdf_path, out_dir)

    assert response.converted_url.endswith("-report.docx")
    assert (out_dir / response.converted_url.rsplit("/", 1)[-1]).exists()
    assert len(list(out_dir.iterdir())) == 2


def test_convert_directory_skips_failures(tmp_path, text_pdf, blank_pdf):
    in_dir = tmp_path / "in"
    in_dir.mkdir()
    (in_dir / "a.pdf").write_bytes(text_pdf)
    (in_dir / "b.pdf").write_bytes(blank_pdf)
    (in_dir / "bad.pdf").write_bytes(b"not a pdf at all")
    out_dir = tmp_path / "out"

    responses = ConversionPipeline().convert_directory(in_dir, out_dir)

    assert [r.original_name for r in responses] == ["a.pdf", "b.pdf"]
    assert [r.text_extracted for r in responses] == [True, False]
    assert len(list(out_dir.iterdir())) == 4


def test_quick_convert(tmp_path, text_pdf):
    pdf_path = tmp_path / "report.pdf"
    pdf_path.write_bytes(text_pdf)

    markup = quick_convert(pdf_path)
    assert markup.startswith("# ANNUAL REPORT\n")

def test_each_request_gets_unique_names(text_pdf, storage):
    pipe = ConversionPipeline(storage=storage)
    first = pipe.convert(pdf_source(text_pdf))
    second = pipe.convert(pdf_source(text_pdf))

    assert first.file_id != second.file_id
    assert first.converted_url != second.converted_url
    assert len(list(storage.root.iterdir())) == 4


def test_dotted_filename_is_stored(text_pdf, storage):
    response = ConversionPipeline(storage=storage).convert(pdf_source(text_pdf, filename="Report...final.pdf"))

    assert response.original_name == "Report...final.pdf"
    assert response.converted_url.endswith("-Report.final.docx")
    assert response.alternative_url.endswith("-Report.final.rtf")
    assert (storage.root / response.converted_url.rsplit("/", 1)[1]).exists()


@pytest.mark.parametrize("filename, stem", [
    ("report.pdf", "report"),
    ("Report...final.pdf", "Report.final"),
    ("annual report 2024.pdf", "annual_report_2024"),
    ("../secret.pdf", "secret"),
    ("dir\\name.pdf", "dir_name"),
    ("...pdf", "document"),
])
def test_source_stem_is_storage_safe(filename, stem):
    source = pdf_source(b"%PDF", filename=filename)
    assert source.stem == stem
    LocalFileStorage("unused").resolve(f"id-{source.stem}.docx")


def test_control_characters_in_text_layer():
    backend = FakeBackend(text="Revenue grew\x0bstrongly during the fiscal\x00year across regions.")
    rendered = ConversionPipeline(backend=backend).render(pdf_source(b"%PDF"))

    assert rendered.extraction.succeeded is True
    assert "Revenue grew strongly during the fiscal year across regions." in docx_texts(rendered.structured)
    assert b"\x0b" not in rendered.rich_text.data
