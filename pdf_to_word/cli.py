"""Command-line interface for the PDF to Word converter."""

import argparse
import logging
import sys
from pathlib import Path

from .errors import ToolboxError
from .pipeline import ConversionPipeline, PipelineConfig
from .storage import LocalFileStorage


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _build_pipeline(args: argparse.Namespace, output_dir: Path) -> ConversionPipeline:
    config = PipelineConfig(
        backend="structure-only" if args.structure_only else "pymupdf",
    )
    storage = LocalFileStorage(output_dir, url_prefix=None, retention_seconds=None)
    return ConversionPipeline(config, storage=storage)


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle the convert command."""
    pdf_path = Path(args.input)

    if not pdf_path.exists():
        logger.error(f"Error: File not found: {pdf_path}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else pdf_path.parent
    pipeline = _build_pipeline(args, output_dir)

    try:
        response = pipeline.convert_file(pdf_path)
    except ToolboxError as e:
        logger.error(f"Error: {e}")
        return 1

    logger.info(f"[OK] Converted: {pdf_path.name}")
    logger.info(f"  DOCX: {response.converted_url} ({response.converted_size} bytes)")
    logger.info(f"  RTF:  {response.alternative_url} ({response.alternative_size} bytes)")
    if not response.text_extracted:
        logger.warning("  No text layer found, outputs contain the fallback guide")
    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    """Handle the batch command for directory processing."""
    input_dir = Path(args.input_dir)
    output_dir = Path(args.output_dir) if args.output_dir else input_dir / "converted"

    if not input_dir.exists():
        logger.error(f"Error: Directory not found: {input_dir}")
        return 1

    pdf_files = sorted(input_dir.glob("*.pdf"))
    if not pdf_files:
        logger.error(f"No PDF files found in {input_dir}")
        return 0

    logger.info(f"Found {len(pdf_files)} PDF files")
    pipeline = _build_pipeline(args, output_dir)

    success_count = 0
    for pdf_file in pdf_files:
        try:
            response = pipeline.convert_file(pdf_file)
            status = "text" if response.text_extracted else "fallback"
            logger.info(f"[OK] {pdf_file.name} ({response.page_count} pages, {status})")
            success_count += 1
        except ToolboxError as e:
            logger.error(f"[FAIL] {pdf_file.name}: {e}")

    logger.info(f"\nConverted {success_count}/{len(pdf_files)} files")
    return 0 if success_count == len(pdf_files) else 1


def cmd_info(args: argparse.Namespace) -> int:
    """Handle the info command to show PDF metadata."""
    pdf_path = Path(args.input)

    if not pdf_path.exists():
        logger.error(f"Error: File not found: {pdf_path}")
        return 1

    pipeline = ConversionPipeline()
    try:
        extraction = pipeline.extractor.extract(pdf_path.read_bytes())
    except ToolboxError as e:
        logger.error(f"Error: {e}")
        return 1

    metadata = extraction.metadata
    logger.info(f"\n[FILE] {pdf_path.name}")
    logger.info("=" * 50)
    logger.info(f"Title:    {metadata.title or 'N/A'}")
    logger.info(f"Author:   {metadata.author or 'N/A'}")
    logger.info(f"Creator:  {metadata.creator or 'N/A'}")
    logger.info(f"Producer: {metadata.producer or 'N/A'}")
    logger.info(f"Pages:    {extraction.page_count}")
    logger.info(f"Created:  {metadata.creation_date or 'N/A'}")
    logger.info(f"Text:     {'found' if extraction.succeeded else 'not found'} ({len(extraction.text)} characters)")

    return 0


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog='pdf-to-word',
        description='Convert PDF documents to Word (DOCX) and RTF'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Convert command
    convert_parser = subparsers.add_parser(
        'convert',
        help='Convert a single PDF file'
    )
    convert_parser.add_argument(
        'input',
        help='Path to input PDF file'
    )
    convert_parser.add_argument(
        '-o', '--output-dir',
        help='Output directory (default: same directory as the input)'
    )
    convert_parser.add_argument(
        '--structure-only',
        action='store_true',
        help='Skip text extraction and always write the fallback guide'
    )
    convert_parser.set_defaults(func=cmd_convert)

    # Batch command
    batch_parser = subparsers.add_parser(
        'batch',
        help='Convert all PDFs in a directory'
    )
    batch_parser.add_argument(
        'input_dir',
        help='Directory containing PDF files'
    )
    batch_parser.add_argument(
        '-o', '--output-dir',
        help='Output directory (default: input_dir/converted)'
    )
    batch_parser.add_argument(
        '--structure-only',
        action='store_true',
        help='Skip text extraction and always write the fallback guide'
    )
    batch_parser.set_defaults(func=cmd_batch)

    # Info command
    info_parser = subparsers.add_parser(
        'info',
        help='Show PDF metadata and whether it has a text layer'
    )
    info_parser.add_argument(
        'input',
        help='Path to PDF file'
    )
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
