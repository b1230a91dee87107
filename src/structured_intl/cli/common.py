"""
Helpers shared by the structured-intl command-line tools.

This module sets up logging and merges YAML configuration files with the
options given on the command line.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pydantic import ValidationError

from ..config import ConfigModel, load_config
from ..exceptions import ConfigurationError


def setup_logging(verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the options every tool accepts."""
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="YAML file with default option values; command-line options take precedence",
    )
    _ = parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )


def resolve_config(
    config_path: Path | None,
    model: type[ConfigModel],
    overrides: dict[str, object],
) -> ConfigModel:
    """
    Build a tool configuration from a YAML file and command-line options.

    Args:
        config_path: Optional YAML configuration file
        model: Configuration model
        overrides: Option values from the command line; None means the
            option was not given

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file or the combined values are invalid
    """
    base = load_config(config_path, model) if config_path is not None else model()
    given = {key: value for key, value in overrides.items() if value is not None}
    try:
        return model.model_validate({**base.model_dump(), **given})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid command-line options: {e}", context=e) from e
