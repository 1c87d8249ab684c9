#!/usr/bin/env python3
"""
Structured PDF text extraction: CLI entry point.

Reconstructs reading order, paragraph breaks, columns, tables and
formulas from the geometry of a PDF's text and writes the structured
text (or its segments, or a reading script for speech pacing).

Usage::

    python extract_text.py input.pdf
    python extract_text.py input.pdf output.txt --pages 1-12
    python extract_text.py paper.pdf paper.json --format json
    python extract_text.py paper.pdf --format script --pages 3
    python extract_text.py paper.pdf --debug-layout debug/paper/ -v 2

Verbosity levels::

    -v 0   Quiet: warnings and errors only.
    -v 1   Normal: phase summaries and progress bars (default).
    -v 2   Debug: per-page layout decisions.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from structured_text.config import ExtractionConfig
from structured_text.pacing import preview_script
from structured_text.pipeline import DocumentExtractor, ExtractionResult, PipelineConfig

logger = logging.getLogger("structured_text")

# Mapping from --verbose integer to logging level
_VERBOSITY_MAP = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}

_FORMATS = ("text", "json", "script")


# ------------------------------------------------------------------
# Argument parsing
# ------------------------------------------------------------------


def _parse_page_range(value: str):
    """
    Parse a 1-based page range string (e.g. ``"3-10"``) into a
    0-based ``(start, end)`` tuple.

    Raises:
        argparse.ArgumentTypeError: On malformed input.
    """
    parts = value.split("-")
    try:
        start = int(parts[0])
        end = int(parts[1]) if len(parts) > 1 else start
    except (ValueError, IndexError):
        raise argparse.ArgumentTypeError(
            f"Invalid page range '{value}'. Use N or N-M (1-based)."
        )
    if start < 1 or end < start:
        raise argparse.ArgumentTypeError(
            f"Invalid page range '{value}'. Start must be >= 1 and end >= start."
        )
    return (start - 1, end - 1)


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser with all pipeline options."""
    p = argparse.ArgumentParser(
        description="Extract structured, reading-ordered text from a PDF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python extract_text.py paper.pdf paper.txt\n"
            "  python extract_text.py book.pdf --pages 1-12 --format json\n"
            "  python extract_text.py paper.pdf --debug-layout debug/ -v 2\n"
        ),
    )

    # -- Positional --------------------------------------------------------
    p.add_argument("input", help="Path to the input PDF file")
    p.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output file. Default: standard output.",
    )

    p.add_argument(
        "--pages",
        type=_parse_page_range,
        default=None,
        metavar="N-M",
        help="Page range, 1-based inclusive (e.g. 1-10). Default: all.",
    )
    p.add_argument(
        "--format",
        choices=_FORMATS,
        default="text",
        help="text: structured text, pages separated by form feeds; "
        "json: per-page segments; script: reading script preview (default: text)",
    )

    # -- Layout ------------------------------------------------------------
    layout = p.add_argument_group("layout")
    layout.add_argument(
        "--keep-margins",
        action="store_true",
        help="Keep running headers, footers and page numbers",
    )
    layout.add_argument(
        "--single-column",
        action="store_true",
        help="Disable multi-column detection",
    )
    layout.add_argument(
        "--granularity",
        choices=["word", "span"],
        default="word",
        help="Fragment granularity reported by the PDF reader (default: word)",
    )
    layout.add_argument(
        "--min-coverage",
        type=float,
        default=0.5,
        metavar="FLOAT",
        help="Warn about pages keeping less than this share of their text (default: 0.5)",
    )

    # -- Debug / output control --------------------------------------------
    debug = p.add_argument_group("debug & output")
    debug.add_argument(
        "--debug-layout",
        default=None,
        metavar="DIR",
        help="Save colour-coded layout images to DIR",
    )
    debug.add_argument(
        "-v",
        "--verbose",
        type=int,
        choices=[0, 1, 2],
        default=1,
        help="Verbosity: 0=quiet, 1=normal (default), 2=debug",
    )
    debug.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars",
    )

    return p


# ------------------------------------------------------------------
# Logging setup
# ------------------------------------------------------------------


def _configure_logging(verbosity: int) -> None:
    """
    Set up the ``structured_text`` and ``pagesource`` loggers.

    At verbosity 0 (WARNING), uses a minimal format. At 2 (DEBUG),
    includes the time and module name for traceability.
    """
    level = _VERBOSITY_MAP.get(verbosity, logging.INFO)

    if level <= logging.DEBUG:
        fmt = "%(asctime)s %(name)s %(levelname)s: %(message)s"
        datefmt = "%H:%M:%S"
    elif level <= logging.INFO:
        fmt = "%(message)s"
        datefmt = None
    else:
        fmt = "%(levelname)s: %(message)s"
        datefmt = None

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    for name in ("structured_text", "pagesource"):
        root = logging.getLogger(name)
        root.setLevel(level)
        root.handlers.clear()
        root.addHandler(handler)

    # Suppress noisy third-party loggers regardless of verbosity
    logging.getLogger("PIL").setLevel(logging.WARNING)


# ------------------------------------------------------------------
# Output
# ------------------------------------------------------------------


def render_result(result: ExtractionResult, fmt: str) -> str:
    """Serialise *result* in the requested output format."""
    if fmt == "json":
        return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    if fmt == "script":
        return preview_script(result.reading_script())
    return result.to_text()


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def main(argv=None):
    """Parse arguments, configure logging, and run the pipeline."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Logging must be configured before any logger calls
    _configure_logging(args.verbose)
    disable_tqdm = args.no_progress or args.verbose == 0

    input_path = Path(args.input)
    if not input_path.exists():
        parser.error(f"Input file not found: {input_path}")
    if input_path.suffix.lower() != ".pdf":
        parser.error(f"Input must be a PDF file: {input_path}")

    config = PipelineConfig(
        extraction=ExtractionConfig(
            filter_margins=not args.keep_margins,
            detect_columns=not args.single_column,
        ),
        granularity=args.granularity,
        page_range=args.pages,
        min_coverage=args.min_coverage,
        debug_layout_dir=args.debug_layout,
        disable_tqdm=disable_tqdm,
    )

    logger.info("Structured text extraction")
    logger.info("  Input:  %s", input_path)
    if args.output:
        logger.info("  Output: %s (%s)", args.output, args.format)
    if config.page_range:
        s, e = config.page_range
        logger.info("  Pages:  %d-%d", s + 1, e + 1)
    if args.debug_layout:
        logger.info("  Layout debug → %s", args.debug_layout)

    try:
        result = DocumentExtractor(config).extract(str(input_path))
    except RuntimeError as e:
        logger.error("%s", e)
        sys.exit(1)

    rendered = render_result(result, args.format)
    if args.output:
        Path(args.output).write_text(rendered, encoding="utf-8")
    else:
        sys.stdout.write(rendered)
        if rendered and not rendered.endswith("\n"):
            sys.stdout.write("\n")

    logger.info("\n%s", result.summary())

    if result.is_empty:
        logger.warning("No text was extracted")
        sys.exit(1)


if __name__ == "__main__":
    main()
