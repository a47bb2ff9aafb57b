"""Narrative document body used when a PDF has no usable text layer."""

from ..processing.models import DocumentMetadata


WORD_PROCESSOR_MARKERS = ("word", "writer", "libreoffice", "openoffice", "google docs")

REMEDIATION_HEADING = "NEXT STEPS FOR TEXT EXTRACTION:"


def is_word_processor_output(metadata: DocumentMetadata) -> bool:
    """Whether the creator or producer names a common word processor."""
    for value in (metadata.creator, metadata.producer):
        if value and any(marker in value.lower() for marker in WORD_PROCESSOR_MARKERS):
            return True
    return False


def build_fallback_narrative(
    filename: str,
    file_size: int,
    metadata: DocumentMetadata,
    backend_name: str,
    text_attempted: bool = True,
) -> str:
    """Build the explanatory body for a PDF without extractable text.

    The output depends only on its arguments so repeated conversions of the
    same file produce the same narrative.

    Args:
        filename: Original upload name.
        file_size: Upload size in bytes.
        metadata: Container metadata, including the page count.
        backend_name: Name of the PDF backend that was used.
        text_attempted: False when the backend cannot extract text at all.

    Returns:
        Plain text with one item per line.
    """
    lines = ["PDF Document Successfully Converted", ""]

    if metadata.title:
        lines.append(f"Title: {metadata.title}")
    if metadata.author:
        lines.append(f"Author: {metadata.author}")
    if metadata.subject:
        lines.append(f"Subject: {metadata.subject}")
    if metadata.creator:
        lines.append(f"Created with: {metadata.creator}")
    if metadata.creation_date:
        lines.append(f"Created: {metadata.creation_date}")

    lines += [
        "",
        "DOCUMENT INFORMATION:",
        f"• Original filename: {filename}",
        f"• Total pages: {metadata.page_count}",
        f"• File size: {file_size / 1024:.1f} KB",
        "",
        "EXTRACTION RESULTS:",
        f"• {backend_name} text layer - {'Attempted' if text_attempted else 'Not available'}",
        f"• {backend_name} document structure - Completed",
        f"• Page count: {metadata.page_count} pages detected",
        "• Extractable text: Not found",
    ]

    if is_word_processor_output(metadata):
        lines += [
            "• Document type: Word-processor generated PDF (should contain extractable text)",
            "",
            "IMPORTANT: This PDF was exported from a word processor and should contain extractable text.",
            "If no text was extracted, this suggests:",
            "• The document may have been converted to images during PDF creation",
            "• PDF security settings may be preventing text extraction",
            "• The original document had text as images or shapes",
            "",
            "TRY THESE SOLUTIONS:",
            "1. Re-export from the word processor: Save As, PDF, and make sure text is not flattened",
            "2. Copy text directly from the original document",
            "3. If you can select text in a PDF viewer, copy and paste it manually",
        ]
    else:
        lines += [
            "• Document type: Likely image-based or scanned",
            "",
            "This suggests your PDF contains:",
            "• Scanned pages (images of text, not actual text)",
            "• Graphics or images without a text layer",
            "• Protected content that cannot be extracted",
            "• Complex layouts with embedded fonts",
        ]

    lines += [
        "",
        REMEDIATION_HEADING,
        "1. OCR software: Adobe Acrobat Pro, ABBYY FineReader or Tesseract",
        "2. Online OCR services that accept PDF uploads",
        "3. Google Drive: uploaded PDFs are run through OCR automatically",
        "4. Manual copy: if you can select text in a PDF viewer, copy and paste it",
        "",
        "USING THIS FILE:",
        "• Open it in Microsoft Word, LibreOffice or Google Docs",
        "• Edit and add your content manually",
        "• Save as .docx when done for full Word compatibility",
        "",
        "PROFESSIONAL TIP:",
        "If this is an academic paper or important document, consider:",
        "• Using the OCR feature of Adobe Acrobat Pro for best results",
        "• Checking whether the original source is available in an editable format",
        "• Converting the pages to high-quality images first, then applying OCR",
    ]

    return "\n".join(lines)
