import pytest
from pdf_to_word.post_processing.line_classifier import LineClassifier
from pdf_to_word.post_processing.markup_formatter import FormatterConfig, MarkupFormatter
from pdf_to_word.processing.models import ClassifiedLine, LineRole, MarkupDocument

from conftest import LONG_PARAGRAPH


@pytest.fixture
def formatter():
    return MarkupFormatter()


def line(content, role, level=0):
    return ClassifiedLine(content=content, role=role, level=level)


def test_title_and_long_paragraph(formatter):
    lines = LineClassifier().classify("CHAPTER ONE\n\n" + LONG_PARAGRAPH)
    markup = formatter.reformat(lines)

    assert markup.to_text() == f"# CHAPTER ONE\n\n{LONG_PARAGRAPH}\n"


def test_heading_markers(formatter):
    markup = formatter.reformat([
        line("INTRO", LineRole.TITLE, 1),
        line("Background", LineRole.HEADER, 2),
        line("1. Scope", LineRole.NUMBERED_HEADER, 2),
        line("1.1 Detail", LineRole.NUMBERED_HEADER, 3),
    ])

    assert markup.lines == [
        "# INTRO", "",
        "## Background", "",
        "## 1. Scope", "",
        "### 1.1 Detail",
    ]


def test_note_metadata_and_table(formatter):
    markup = formatter.reformat([
        line("12/05/2024", LineRole.METADATA),
        line("Producto   Precio   Stock", LineRole.TABLE_ROW),
        line("NOTA: revisar antes de firmar", LineRole.NOTE),
    ])

    assert markup.lines == [
        "*12/05/2024*",
        "Producto | Precio | Stock",
        "",
        "**NOTA: revisar antes de firmar**",
    ]


def test_list_spacing(formatter):
    markup = formatter.reformat([
        line("Intro text", LineRole.PARAGRAPH),
        line("- a", LineRole.LIST_ITEM),
        line("- b", LineRole.LIST_ITEM),
        line("After", LineRole.PARAGRAPH),
    ])

    assert markup.lines == ["Intro text", "", "- a", "- b", "", "After"]


def test_short_paragraphs_stay_tight(formatter):
    markup = formatter.reformat([
        line("First line", LineRole.PARAGRAPH),
        line("Second line", LineRole.PARAGRAPH),
    ])
    assert markup.lines == ["First line", "Second line"]


def test_long_paragraph_threshold_is_configurable():
    formatter = MarkupFormatter(FormatterConfig(long_paragraph_length=5))
    markup = formatter.reformat([
        line("- item", LineRole.LIST_ITEM),
        line("Longer than five", LineRole.PARAGRAPH),
        line("*meta*", LineRole.METADATA),
    ])
    assert markup.lines == ["- item", "", "Longer than five", "", "**meta**"]


def test_emphasis_separated_from_content(formatter):
    markup = formatter.reformat([
        line("Line one", LineRole.PARAGRAPH),
        line("**Emphasis**", LineRole.PARAGRAPH),
    ])
    assert markup.lines == ["Line one", "", "**Emphasis**"]


def test_blank_runs_collapse_and_trim(formatter):
    markup = formatter.reformat([
        line("", LineRole.EMPTY),
        line("", LineRole.EMPTY),
        line("Alpha", LineRole.PARAGRAPH),
        line("", LineRole.EMPTY),
        line("", LineRole.EMPTY),
        line("", LineRole.EMPTY),
        line("Beta", LineRole.PARAGRAPH),
        line("", LineRole.EMPTY),
    ])
    assert markup.lines == ["Alpha", "", "Beta"]


def test_reformat_round_trip_keeps_single_blank_lines(formatter):
    lines = LineClassifier().classify(
        "INFORME ANUAL\n\n\n1. Introduction\n- one\n- two\n\n\n\n"
        "NOTA: revisar antes de firmar\nResultados Finales\n" + LONG_PARAGRAPH
    )
    first = formatter.reformat(lines)

    reparsed = [
        line(text, LineRole.PARAGRAPH) if text.strip() else line("", LineRole.EMPTY)
        for text in first.lines
    ]
    second = formatter.reformat(reparsed)

    for rendered in (first, second):
        for previous, current in zip(rendered.lines, rendered.lines[1:]):
            assert previous.strip() or current.strip()
        assert "\n\n\n" not in rendered.to_text()


def test_markup_document_text_round_trip():
    assert MarkupDocument().to_text() == ""
    assert MarkupDocument.from_text("").lines == []
    doc = MarkupDocument.from_text("# A\n\nbody\n")
    assert doc.lines == ["# A", "", "body"]
    assert doc.to_text() == "# A\n\nbody\n"


def test_only_real_markers_get_separated(formatter):
    markup = formatter.reformat([
        line("Top items", LineRole.PARAGRAPH),
        line("#1 priority is shipping", LineRole.PARAGRAPH),
        line("**bold start but not a note", LineRole.PARAGRAPH),
    ])
    assert markup.lines == ["Top items", "#1 priority is shipping", "**bold start but not a note"]
