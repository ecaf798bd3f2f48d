"""
Command-line interface for formflow.

Usage:
    formflow render form.json --format pdf --output form.pdf
    formflow render form.json --format html --style style.json
    formflow check form.json --json
    formflow version
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .backends import BACKEND_NAMES
from .engine.layout_validator import LayoutValidator
from .exceptions import FormflowError
from .generator import generate, load_document, load_style
from .version import __version__

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="formflow",
        description="formflow - flow layout and pagination of fillable forms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  formflow render form.json --format pdf --output form.pdf
  formflow render form.json --format html
  formflow check form.json --json
  formflow version
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render a form document")
    render_parser.add_argument("input", help="Input document (JSON)")
    render_parser.add_argument(
        "-f", "--format",
        choices=list(BACKEND_NAMES),
        default="pdf",
        help="Output format (default: pdf)",
    )
    render_parser.add_argument(
        "-o", "--output",
        help="Output file path (default: input name with new extension)",
    )
    render_parser.add_argument("--style", help="Style overrides (JSON)")

    check_parser = subparsers.add_parser("check", help="Lay out a document and report geometry problems")
    check_parser.add_argument("input", help="Input document (JSON)")
    check_parser.add_argument("--style", help="Style overrides (JSON)")
    check_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("version", help="Show version information")
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s - %(levelname)s - %(message)s")


def cmd_render(args) -> int:
    """Render a document to PDF or HTML."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else input_path.with_suffix(f".{args.format}")
    result = generate(load_document(input_path), load_style(args.style), args.format)
    result.save(output_path)

    print(f"Saved: {output_path}")
    print(f"   {result.summary()}")
    return 0


def cmd_check(args) -> int:
    """Lay out a document with the HTML backend and report what the geometry checks find."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    style = load_style(args.style)
    result = generate(load_document(input_path), style, "html")
    validator = LayoutValidator(result.drawn_elements, style.page_size, style.margins)
    is_valid, errors, warnings = validator.validate()
    summary = validator.get_summary()

    if args.json:
        box = summary["bounding_box"]
        report = {
            "valid": is_valid,
            "pages": result.page_count,
            "fields": result.field_count,
            "elements": summary["elements"],
            "overlaps": summary["overlaps"],
            "boundary_violations": summary["boundary_violations"],
            "bounding_box": None if box is None else [box.x, box.y, box.width, box.height],
            "errors": errors,
            "warnings": warnings,
        }
        print(json.dumps(report, indent=2, ensure_ascii=False))
    else:
        print(f"File: {input_path}")
        print(f"   Pages: {result.page_count}")
        print(f"   Fields: {result.field_count}")
        print(f"   Elements: {summary['elements']}")
        print(f"   Overlaps: {summary['overlaps']}")
        print(f"   Boundary violations: {summary['boundary_violations']}")
        for message in errors:
            print(f"ERROR: {message}")
        for message in warnings:
            print(f"WARNING: {message}")
    return 0 if is_valid else 2


def cmd_version(args=None) -> int:
    """Show version information."""
    print(f"formflow v{__version__}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    commands = {
        "render": cmd_render,
        "check": cmd_check,
        "version": cmd_version,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    try:
        return command(args)
    except FormflowError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
