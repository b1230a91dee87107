"""
Tests for configuration loading and validation.

This module tests the pydantic models for both tools, loading them from
YAML files and merging command-line options over file values.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from structured_intl.cli.common import resolve_config
from structured_intl.config import ExtractionConfig, GenerationConfig, load_config
from structured_intl.exceptions import ConfigurationError, ErrorCategory


class TestExtractionConfig:
    """Test the ExtractionConfig model."""

    def test_defaults(self) -> None:
        """Test default option values."""
        config = ExtractionConfig()

        assert config.allow_embedded_plurals is True
        assert config.suppress_meta_data is False
        assert config.output_path == Path(".") / "messages.json"

    def test_output_file_must_be_a_name(self) -> None:
        """Test that output_file rejects directory parts."""
        with pytest.raises(ValidationError, match="output_dir"):
            _ = ExtractionConfig(output_file="l10n/messages.json")

    def test_unknown_option_rejected(self) -> None:
        """Test that misspelled options are not silently ignored."""
        with pytest.raises(ValidationError):
            _ = ExtractionConfig.model_validate({"suppress_warning": True})


class TestGenerationConfig:
    """Test the GenerationConfig model."""

    def test_defaults(self) -> None:
        """Test default option values."""
        config = GenerationConfig()

        assert config.use_deferred_loading is True
        assert config.codegen_mode == "debug"
        assert config.generated_file_prefix == ""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"codegen_mode": "fast"},
            {"generated_file_prefix": "my-app."},
        ],
    )
    def test_invalid_values(self, overrides: dict[str, object]) -> None:
        """Test validation of constrained options."""
        with pytest.raises(ValidationError):
            _ = GenerationConfig.model_validate(overrides)


class TestLoadConfig:
    """Test the load_config function."""

    def test_load_with_dashed_keys(self, tmp_path: Path) -> None:
        """Test that option spellings from the command line are accepted."""
        config_path = tmp_path / "intl.yaml"
        _ = config_path.write_text(
            "generated-file-prefix: shop_\nuse_json: true\ncodegen-mode: release\n",
            encoding="utf-8",
        )

        config = load_config(config_path, GenerationConfig)

        assert config.generated_file_prefix == "shop_"
        assert config.use_json is True
        assert config.codegen_mode == "release"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test that an empty file is a valid configuration."""
        config_path = tmp_path / "intl.yaml"
        _ = config_path.write_text("", encoding="utf-8")

        assert load_config(config_path, ExtractionConfig) == ExtractionConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found") as exc_info:
            _ = load_config(tmp_path / "missing.yaml", ExtractionConfig)

        assert exc_info.value.category is ErrorCategory.CONFIGURATION

    @pytest.mark.parametrize(
        ("content", "fragment"),
        [
            ("output-file: [unclosed\n", "Invalid YAML"),
            ("- a list\n", "YAML dictionary"),
            ("codegen-mode: fast\n", "Invalid configuration"),
        ],
    )
    def test_invalid_files(self, tmp_path: Path, content: str, fragment: str) -> None:
        """Test that malformed files are configuration errors."""
        config_path = tmp_path / "intl.yaml"
        _ = config_path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError, match=fragment):
            _ = load_config(config_path, GenerationConfig)


class TestResolveConfig:
    """Test merging of file values and command-line options."""

    def test_options_override_file(self, tmp_path: Path) -> None:
        """Test that given options win and missing ones keep file values."""
        config_path = tmp_path / "intl.yaml"
        _ = config_path.write_text(
            "output-file: app.json\nsuppress-meta-data: true\n", encoding="utf-8"
        )

        config = resolve_config(
            config_path,
            ExtractionConfig,
            {"output_file": "cli.json", "suppress_meta_data": None},
        )

        assert config.output_file == "cli.json"
        assert config.suppress_meta_data is True

    def test_without_file(self) -> None:
        """Test that defaults are used when no file is given."""
        config = resolve_config(None, GenerationConfig, {"use_json": True, "transformer": None})

        assert config.use_json is True
        assert config.transformer is False

    def test_invalid_option(self) -> None:
        """Test that invalid option values are configuration errors."""
        with pytest.raises(ConfigurationError, match="command-line"):
            _ = resolve_config(None, ExtractionConfig, {"output_file": "a/b.json"})
