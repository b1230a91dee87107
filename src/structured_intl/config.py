"""Configuration models for the extraction and generation tools.

Both tools accept an optional YAML file whose keys mirror the command-line
options. Values given explicitly on the command line take precedence.
"""

import logging
from pathlib import Path
from typing import ClassVar, Literal, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ExtractionConfig(BaseModel):
    """Settings for extracting messages into structured JSON."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    suppress_warnings: bool = Field(
        default=False,
        description="Suppress printing of warnings",
    )
    suppress_meta_data: bool = Field(
        default=False,
        description="Write only the translation of each message, without context or notes",
    )
    warnings_are_errors: bool = Field(
        default=False,
        description="Exit with an error status when any warning was reported",
    )
    allow_embedded_plurals: bool = Field(
        default=True,
        description="Allow plurals and genders to be embedded in a larger message",
    )
    transformer: bool = Field(
        default=False,
        description="Take missing message names and args from the enclosing function",
    )
    description_required: bool = Field(
        default=False,
        description="Warn about messages that have no description",
    )
    output_dir: Path = Field(
        default=Path("."),
        description="Directory the interchange file is written to",
    )
    output_file: str = Field(
        default="messages.json",
        description="Name of the interchange file",
        min_length=1,
    )

    @field_validator("output_file")
    @classmethod
    def validate_output_file(cls, v: str) -> str:
        """Reject output file names that contain a directory part."""
        if Path(v).name != v:
            raise ValueError("output_file must be a file name; use output_dir for the directory")
        return v

    @property
    def output_path(self) -> Path:
        """Full path of the interchange file."""
        return self.output_dir / self.output_file


class GenerationConfig(BaseModel):
    """Settings for generating message lookup modules."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    use_json: bool = Field(
        default=False,
        description="Store translations as JSON data instead of generated functions",
    )
    suppress_warnings: bool = Field(
        default=False,
        description="Suppress printing of warnings while parsing source files",
    )
    transformer: bool = Field(
        default=False,
        description="Take missing message names and args from the enclosing function",
    )
    output_dir: Path = Field(
        default=Path("."),
        description="Directory the generated modules are written to",
    )
    generated_file_prefix: str = Field(
        default="",
        description="Prefix for the generated module names",
        pattern=r"^[A-Za-z0-9_]*$",
    )
    use_deferred_loading: bool = Field(
        default=True,
        description="Import locale modules on demand instead of eagerly",
    )
    codegen_mode: Literal["release", "debug"] = Field(
        default="debug",
        description="Code generator mode",
    )


ConfigModel = TypeVar("ConfigModel", ExtractionConfig, GenerationConfig)


def load_config(config_path: Path, model: type[ConfigModel]) -> ConfigModel:
    """
    Load and validate a tool configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file
        model: Configuration model to validate against

    Returns:
        Validated configuration object

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, does
            not hold a mapping, or fails validation
    """
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if raw_config_data is None:
        config_data: dict[str, object] = {}
    elif isinstance(raw_config_data, dict):
        # YAML files use the dashed spelling of the command-line options
        config_data = {
            str(key).replace("-", "_"): value  # pyright: ignore[reportUnknownArgumentType]
            for key, value in raw_config_data.items()  # pyright: ignore[reportUnknownVariableType]
        }
    else:
        raise ConfigurationError(
            f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
        )

    try:
        config = model(**config_data)  # pyright: ignore[reportArgumentType]
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}", context=e) from e

    logger.debug(f"Loaded configuration from {config_path}")
    return config
