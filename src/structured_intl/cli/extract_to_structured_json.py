"""
Command-line interface for extracting messages into structured JSON.

This script finds the ``intl.message``/``plural``/``gender``/``select``
calls in the given Python files and writes a JSON file keyed by message id,
holding each message in ICU syntax together with its description and
argument examples.

Usage Examples:
    Extract messages from two modules:
        extract-to-structured-json app/strings.py app/errors.py

    Write to a specific file:
        extract-to-structured-json --output-dir l10n --output-file app.json app/*.py

    Fail the build on any warning:
        extract-to-structured-json --warnings-are-errors --require-descriptions app/*.py
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NamedTuple

from ..config import ExtractionConfig
from ..exceptions import StructuredIntlError
from ..extraction import MessageExtraction
from ..interchange import build_interchange, write_interchange_file
from .common import add_common_arguments, resolve_config, setup_logging


class ExtractArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    files: list[Path]
    config: ExtractionConfig
    verbose: bool


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the extraction tool.

    Options default to None so that values from a configuration file are
    only overridden by options that were actually given.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="extract-to-structured-json",
        description="Extract messages from Python source files into structured JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s app/strings.py                            # Writes ./messages.json
  %(prog)s --output-file app.json app/*.py           # Custom output file
  %(prog)s --suppress-meta-data app/*.py             # Translations only
        """,
    )

    _ = parser.add_argument("files", nargs="*", type=Path, help="Python files to scan")

    _ = parser.add_argument(
        "--suppress-warnings",
        action="store_const",
        const=True,
        default=None,
        help="Suppress printing of warnings",
    )
    _ = parser.add_argument(
        "--suppress-meta-data",
        action="store_const",
        const=True,
        default=None,
        help="Suppress writing meta information (context and notes)",
    )
    _ = parser.add_argument(
        "--warnings-are-errors",
        action="store_const",
        const=True,
        default=None,
        help="Treat all warnings as errors and exit with an error status",
    )
    _ = parser.add_argument(
        "--embedded-plurals",
        dest="allow_embedded_plurals",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "Allow plurals and genders to be embedded as part of a larger "
            "string, otherwise they must be at the top level (default: on)"
        ),
    )
    _ = parser.add_argument(
        "--transformer",
        action="store_const",
        const=True,
        default=None,
        help="Take missing message names and args from the enclosing function",
    )
    _ = parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        metavar="PATH",
        help="Output directory (default: .)",
    )
    _ = parser.add_argument(
        "--output-file",
        default=None,
        metavar="NAME",
        help="Output file name (default: messages.json)",
    )
    _ = parser.add_argument(
        "--require-descriptions",
        "--require_descriptions",
        dest="description_required",
        action="store_const",
        const=True,
        default=None,
        help="Warn about messages that don't have a description",
    )

    add_common_arguments(parser)
    return parser


def parse_arguments(
    parser: argparse.ArgumentParser, args: list[str] | None = None
) -> ExtractArgs:
    """
    Parse command-line arguments.

    Args:
        parser: Parser from ``create_argument_parser``
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments in a type-safe container

    Raises:
        ConfigurationError: If the configuration file or options are invalid
    """
    parsed = parser.parse_args(args)

    config = resolve_config(
        parsed.config,  # pyright: ignore[reportAny]
        ExtractionConfig,
        {
            "suppress_warnings": parsed.suppress_warnings,
            "suppress_meta_data": parsed.suppress_meta_data,
            "warnings_are_errors": parsed.warnings_are_errors,
            "allow_embedded_plurals": parsed.allow_embedded_plurals,
            "transformer": parsed.transformer,
            "description_required": parsed.description_required,
            "output_dir": parsed.output_dir,
            "output_file": parsed.output_file,
        },
    )

    files: list[Path] = parsed.files  # pyright: ignore[reportAny]
    return ExtractArgs(
        files=[path for path in files if path.suffix == ".py"],
        config=config,
        verbose=parsed.verbose,  # pyright: ignore[reportAny]
    )


def extract(files: list[Path], config: ExtractionConfig) -> MessageExtraction:
    """
    Extract messages from source files and write the interchange file.

    Args:
        files: Python files to scan
        config: Extraction settings

    Returns:
        The extraction, carrying any warnings that were reported

    Raises:
        IllegalInterpolationError: If a message cannot be rendered as ICU
    """
    extraction = MessageExtraction(
        suppress_warnings=config.suppress_warnings,
        allow_embedded_plurals=config.allow_embedded_plurals,
        description_required=config.description_required,
    )
    results = [extraction.parse_file(path, config.transformer) for path in files]
    interchange = build_interchange(results, config.suppress_meta_data)
    write_interchange_file(interchange, config.output_path)
    return extraction


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the extraction tool.

    Returns:
        Exit code (0 for success, 1 for error or warnings treated as errors)
    """
    parser = create_argument_parser()
    logger = logging.getLogger(__name__)

    try:
        parsed = parse_arguments(parser, args)
    except StructuredIntlError as e:
        setup_logging()
        logger.error(str(e))
        return 1

    setup_logging(parsed.verbose)

    if not parsed.files:
        print(f"Accepts Python files and produces {parsed.config.output_file}")
        parser.print_help()
        return 0

    try:
        extraction = extract(parsed.files, parsed.config)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1
    except (StructuredIntlError, OSError, ValueError) as e:
        logger.error(f"Error during message extraction: {e}")
        if parsed.verbose:
            logger.exception("Full traceback:")
        return 1

    if extraction.has_warnings:
        logger.info(f"Extraction finished with {len(extraction.warnings)} warning(s)")
        if parsed.config.warnings_are_errors:
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
