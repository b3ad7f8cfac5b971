#!/usr/bin/env python3
"""
Document Engine - command-line entry point.

Runs conversion, assembly and protection operations on local files and
prints the output contract of each operation as JSON.

Examples:
    python main.py convert report.pdf --to docx
    python main.py to-pdf slides.pptx
    python main.py merge a.pdf b.pdf --title-page --page-numbers
    python main.py split big.pdf --mode ranges --ranges 1-3,5,7-9
    python main.py protect report.pdf --password secret --no-printing
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from assembly import AssemblyService, SourceDocument
from common.exceptions import EngineError, InputError, format_error_chain
from common.logging_config import get_logger, level_for, setup_logging
from conversion import ConversionService, TargetKind
from protection import ProtectionService

# Module logger
logger = get_logger(__name__)


def read_file(path: Path) -> bytes:
    if not path.exists():
        raise InputError(f"File not found: {path}")
    return path.read_bytes()


def write_output(output_dir: Path, filename: str, data: bytes) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / filename
    target.write_bytes(data)
    logger.debug(f"Wrote {len(data)} bytes to {target}")
    return target


def print_contract(contract: dict) -> None:
    print(json.dumps(contract, indent=2, ensure_ascii=False))


# =============================================================================
# COMMANDS
# =============================================================================


def cmd_convert(args: argparse.Namespace) -> None:
    service = ConversionService()
    result = service.convert(
        read_file(args.input),
        args.input.name,
        args.to,
        filename=args.input.name,
        options={
            "page_range": args.pages or "",
            "preserve_formatting": not args.plain,
            "detect_tables": not args.no_tables,
            "one_sheet_per_page": args.sheet_per_page,
        },
    )
    write_output(args.output, result.filename, result.data)
    print_contract(result.to_contract())


def cmd_to_pdf(args: argparse.Namespace) -> None:
    result = ConversionService().to_pdf(
        read_file(args.input),
        args.input.name,
        filename=args.input.name,
        options={"preserve_formatting": not args.plain, "include_title": not args.no_title},
    )
    write_output(args.output, result.filename, result.data)
    print_contract(result.to_contract())


def cmd_merge(args: argparse.Namespace) -> None:
    sources = [SourceDocument(filename=p.name, data=read_file(p)) for p in args.inputs]
    result = AssemblyService().merge(
        sources,
        {
            "add_bookmarks": not args.no_bookmarks,
            "bookmark_style": args.bookmark_style,
            "add_page_numbers": args.page_numbers,
            "page_number_position": args.position,
            "add_title_page": args.title_page,
            "title_page_content": args.title or "",
            "output_name": args.name,
        },
    )
    write_output(args.output, result.filename, result.data)
    print_contract(result.to_contract())


def cmd_split(args: argparse.Namespace) -> None:
    result = AssemblyService().split(
        read_file(args.input),
        args.input.name,
        {
            "split_type": args.mode,
            "page_ranges": args.ranges or [],
            "pages_per_file": args.pages_per_file,
            "max_file_size": args.max_size,
            "custom_naming": not args.plain_names,
            "naming_pattern": args.pattern,
        },
    )
    for fragment in result.files:
        write_output(args.output, fragment.filename, fragment.data)
    print_contract(result.to_contract())


def cmd_compress(args: argparse.Namespace) -> None:
    result = AssemblyService().compress(
        read_file(args.input),
        {
            "compression_level": args.level,
            "remove_metadata": args.remove_metadata,
            "output_name": args.name or f"{args.input.stem}_compressed.pdf",
        },
    )
    write_output(args.output, result.filename, result.data)
    print_contract(result.to_contract())


def cmd_protect(args: argparse.Namespace) -> None:
    result = ProtectionService().protect(
        read_file(args.input),
        args.password,
        permissions={
            "printing": not args.no_printing,
            "high_res_printing": not args.low_res_printing,
            "copying": not args.no_copying,
            "modifying": not args.no_modifying,
        },
        encryption_level=args.level,
        filename=args.input.name,
    )
    write_output(args.output, result.filename, result.data)
    print_contract(result.to_contract())


def cmd_unlock(args: argparse.Namespace) -> None:
    result = ProtectionService().unlock(read_file(args.input), args.password, args.input.name)
    write_output(args.output, result.filename, result.data)
    print_contract(result.to_contract())


def cmd_analyze(args: argparse.Namespace) -> None:
    analysis = AssemblyService().analyze(read_file(args.input), args.password, args.input.name)
    print_contract(analysis.to_contract())


def cmd_images(args: argparse.Namespace) -> None:
    images = [SourceDocument(filename=p.name, data=read_file(p)) for p in args.inputs]
    result = AssemblyService().images_to_pdf(
        images,
        {
            "page_size": args.page_size,
            "orientation": args.orientation,
            "margin": args.margin,
            "add_page_numbers": args.page_numbers,
            "output_name": args.name,
        },
    )
    write_output(args.output, result.filename, result.data)
    print_contract(result.to_contract())


# =============================================================================
# ARGUMENT PARSING
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert, merge, split, compress and protect documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s convert report.pdf --to xlsx --sheet-per-page
  %(prog)s merge a.pdf b.pdf c.pdf --title-page --page-numbers --position bottom-left
  %(prog)s split book.pdf --mode pages --pages-per-file 10
  %(prog)s unlock locked.pdf --password secret
        """
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("output"),
        help="Output directory (default: output)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")

    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser("convert", help="Convert a document to another format")
    convert.add_argument("input", type=Path)
    convert.add_argument("--to", choices=[t.value for t in TargetKind], default="docx")
    convert.add_argument("--pages", help="Page selection, e.g. 1-3,5")
    convert.add_argument("--plain", action="store_true", help="Normalise paragraph formatting")
    convert.add_argument("--no-tables", action="store_true", help="Skip table detection")
    convert.add_argument("--sheet-per-page", action="store_true", help="XLSX: one sheet per page")
    convert.set_defaults(handler=cmd_convert)

    to_pdf = commands.add_parser("to-pdf", help="Lay out a DOCX, XLSX, CSV, PPTX or TXT file as PDF")
    to_pdf.add_argument("input", type=Path)
    to_pdf.add_argument("--plain", action="store_true", help="Ignore paragraph formatting")
    to_pdf.add_argument("--no-title", action="store_true", help="Do not print the document title")
    to_pdf.set_defaults(handler=cmd_to_pdf)

    merge = commands.add_parser("merge", help="Merge PDFs")
    merge.add_argument("inputs", type=Path, nargs="+")
    merge.add_argument("--name", default="merged.pdf")
    merge.add_argument("--no-bookmarks", action="store_true")
    merge.add_argument("--bookmark-style", choices=["filename", "index"], default="filename")
    merge.add_argument("--page-numbers", action="store_true")
    merge.add_argument(
        "--position",
        choices=["top-left", "top-center", "top-right", "bottom-left", "bottom-center", "bottom-right"],
        default="bottom-center",
    )
    merge.add_argument("--title-page", action="store_true")
    merge.add_argument("--title", help="Title page heading")
    merge.set_defaults(handler=cmd_merge)

    split = commands.add_parser("split", help="Split a PDF")
    split.add_argument("input", type=Path)
    split.add_argument("--mode", choices=["pages", "ranges", "bookmarks", "size"], default="pages")
    split.add_argument("--ranges", help="Ranges mode: 1-3,5,7-9")
    split.add_argument("--pages-per-file", type=int, default=1)
    split.add_argument("--max-size", type=int, help="Size mode: bytes per fragment")
    split.add_argument("--pattern", default="{filename}_part_{index}")
    split.add_argument("--plain-names", action="store_true", help="Name fragments <name>_<n>.pdf")
    split.set_defaults(handler=cmd_split)

    compress = commands.add_parser("compress", help="Compress a PDF")
    compress.add_argument("input", type=Path)
    compress.add_argument("--level", choices=["low", "medium", "high", "maximum"], default="medium")
    compress.add_argument("--remove-metadata", action="store_true")
    compress.add_argument("--name")
    compress.set_defaults(handler=cmd_compress)

    protect = commands.add_parser("protect", help="Encrypt a PDF with a password")
    protect.add_argument("input", type=Path)
    protect.add_argument("--password", required=True)
    protect.add_argument("--level", choices=["128-bit", "256-bit"], default="256-bit")
    protect.add_argument("--no-printing", action="store_true")
    protect.add_argument("--low-res-printing", action="store_true")
    protect.add_argument("--no-copying", action="store_true")
    protect.add_argument("--no-modifying", action="store_true")
    protect.set_defaults(handler=cmd_protect)

    unlock = commands.add_parser("unlock", help="Remove password protection")
    unlock.add_argument("input", type=Path)
    unlock.add_argument("--password", required=True)
    unlock.set_defaults(handler=cmd_unlock)

    analyze = commands.add_parser("analyze", help="Analyze a PDF")
    analyze.add_argument("input", type=Path)
    analyze.add_argument("--password")
    analyze.set_defaults(handler=cmd_analyze)

    images = commands.add_parser("images", help="Build a PDF from images")
    images.add_argument("inputs", type=Path, nargs="+")
    images.add_argument("--name", default="images.pdf")
    images.add_argument("--page-size", choices=["A4", "A3", "A5", "Letter", "Legal"], default="A4")
    images.add_argument("--orientation", choices=["auto", "portrait", "landscape"], default="auto")
    images.add_argument("--margin", type=float, default=20)
    images.add_argument("--page-numbers", action="store_true")
    images.set_defaults(handler=cmd_images)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Logs go to stderr; stdout carries only the JSON contract
    setup_logging(level=level_for(args.verbose, args.quiet), stream=sys.stderr)

    try:
        args.handler(args)
        return 0
    except EngineError as e:
        logger.error(f"{e.kind}: {e}")
        logger.debug(format_error_chain(e))
        print_contract(e.to_dict())
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        print_contract({"kind": "storage_error", "message": str(e)})
        return 1


if __name__ == "__main__":
    sys.exit(main())
