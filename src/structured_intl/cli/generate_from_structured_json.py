"""
Command-line interface for generating message lookups from translations.

This script takes the Python source files that define the messages and a
number of translated structured JSON files named
``<anything>_<localeTag>.json``, and writes one
``<prefix>messages_<localeTag>.py`` module per locale plus a
``<prefix>messages_all.py`` module whose ``initialize_messages`` function
registers a locale with the ``intl`` runtime.

Usage Examples:
    Generate lookups for French and German:
        generate-from-structured-json --output-dir app/l10n app/strings.py \\
            translations/app_fr.json translations/app_de.json

    Store translations as JSON data and load every locale eagerly:
        generate-from-structured-json --json --no-use-deferred-loading app/*.py l10n/*.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NamedTuple

from ..config import GenerationConfig
from ..exceptions import StructuredIntlError
from ..extraction import MessageExtraction
from ..generation import JsonMessageGeneration, MessageGeneration
from ..interchange import group_by_locale
from ..reconstruction import MessageIndex, reconstruct_locale
from .common import add_common_arguments, resolve_config, setup_logging


class GenerateArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    source_files: list[Path]
    json_files: list[Path]
    config: GenerationConfig
    verbose: bool


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the generation tool.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="generate-from-structured-json",
        description="Generate Python message lookups from translated structured JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s app/strings.py app_fr.json app_de.json      # Writes ./messages_*.py
  %(prog)s --generated-file-prefix app_ app/*.py *.json
  %(prog)s --codegen-mode release app/*.py *.json
        """,
    )

    _ = parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="Python source files followed by translated JSON files",
    )

    _ = parser.add_argument(
        "--json",
        dest="use_json",
        action="store_const",
        const=True,
        default=None,
        help="Generate translations as JSON data rather than as functions",
    )
    _ = parser.add_argument(
        "--suppress-warnings",
        action="store_const",
        const=True,
        default=None,
        help="Suppress printing of warnings",
    )
    _ = parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        metavar="PATH",
        help="Output directory (default: .)",
    )
    _ = parser.add_argument(
        "--generated-file-prefix",
        default=None,
        metavar="PREFIX",
        help="Prefix for the generated module names",
    )
    _ = parser.add_argument(
        "--use-deferred-loading",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "Import locale modules when initialize_messages is called; "
            "otherwise all are imported eagerly (default: on)"
        ),
    )
    _ = parser.add_argument(
        "--codegen-mode",
        "--codegen_mode",
        choices=["release", "debug"],
        default=None,
        help="What mode to run the code generator in (default: debug)",
    )
    _ = parser.add_argument(
        "--transformer",
        action="store_const",
        const=True,
        default=None,
        help="Take missing message names and args from the enclosing function",
    )

    add_common_arguments(parser)
    return parser


def parse_arguments(
    parser: argparse.ArgumentParser, args: list[str] | None = None
) -> GenerateArgs:
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
        GenerationConfig,
        {
            "use_json": parsed.use_json,
            "suppress_warnings": parsed.suppress_warnings,
            "transformer": parsed.transformer,
            "output_dir": parsed.output_dir,
            "generated_file_prefix": parsed.generated_file_prefix,
            "use_deferred_loading": parsed.use_deferred_loading,
            "codegen_mode": parsed.codegen_mode,
        },
    )

    files: list[Path] = parsed.files  # pyright: ignore[reportAny]
    return GenerateArgs(
        source_files=[path for path in files if path.suffix == ".py"],
        json_files=[path for path in files if path.suffix == ".json"],
        config=config,
        verbose=parsed.verbose,  # pyright: ignore[reportAny]
    )


def create_generation(config: GenerationConfig) -> MessageGeneration:
    """Create the code generator selected by the configuration."""
    generation_class = JsonMessageGeneration if config.use_json else MessageGeneration
    return generation_class(
        generated_file_prefix=config.generated_file_prefix,
        use_deferred_loading=config.use_deferred_loading,
        codegen_mode=config.codegen_mode,
        transformer=config.transformer,
    )


def generate(
    source_files: list[Path], json_files: list[Path], config: GenerationConfig
) -> list[Path]:
    """
    Generate the lookup modules for every locale found in the JSON files.

    All source and translation files are read before anything is written.

    Args:
        source_files: Python files defining the messages
        json_files: Translated structured JSON files
        config: Generation settings

    Returns:
        Paths of the written modules, the ``messages_all`` module last

    Raises:
        MessageGenerationError: If a translation cannot be compiled
    """
    logger = logging.getLogger(__name__)

    # Only the message definitions matter here; their problems were
    # reported at extraction time.
    extraction = MessageExtraction(suppress_warnings=True)
    index = MessageIndex.build(
        extraction.parse_file(path, config.transformer) for path in source_files
    )
    if not config.suppress_warnings and extraction.has_warnings:
        logger.info(f"Ignored {len(extraction.warnings)} malformed message definition(s)")

    documents_by_locale = group_by_locale(json_files)
    generation = create_generation(config)

    written: list[Path] = []
    for locale, documents in documents_by_locale.items():
        translations = reconstruct_locale(documents, index)
        written.append(generation.generate_locale_file(locale, translations, config.output_dir))

    config.output_dir.mkdir(parents=True, exist_ok=True)
    main_import_file = config.output_dir / generation.main_import_file_name
    _ = main_import_file.write_text(generation.generate_main_import_file(), encoding="utf-8")
    written.append(main_import_file)
    logger.info(f"Generated {main_import_file} for {len(generation.all_locales)} locale(s)")
    return written


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the generation tool.

    Returns:
        Exit code (0 for success, 1 for error)
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

    if not parsed.source_files or not parsed.json_files:
        print(
            "Usage: generate-from-structured-json [options] file1.py file2.py ... "
            "translation1_<languageTag>.json translation2.json ..."
        )
        parser.print_help()
        return 0

    try:
        _ = generate(parsed.source_files, parsed.json_files, parsed.config)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1
    except (StructuredIntlError, OSError, ValueError) as e:
        logger.error(f"Error during message generation: {e}")
        if parsed.verbose:
            logger.exception("Full traceback:")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
