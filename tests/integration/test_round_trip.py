"""
Integration tests for the extract, translate and generate round trip.

These tests run both command-line tools on the sample messages, translate
the extracted file the way a translator would, import the generated modules
and call the original message functions in the translated locale.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from types import ModuleType

import pytest

from structured_intl import intl
from structured_intl.cli import extract_to_structured_json, generate_from_structured_json

ImportGenerated = Callable[[Path, str], ModuleType]

TRANSLATIONS = {
    "greeting": "Bonjour {name}, tu as {count} articles",
    "items": "{count,plural, =0{Aucun article}=1{Un article}other{{count} articles}}",
    "pronoun": "{who,select, female{elle}male{lui}other{eux}}",
    "title": "Panier",
}


def translate(extracted: Path, target: Path) -> None:
    """Replace every translation, keeping the translator metadata."""
    data = json.loads(extracted.read_text(encoding="utf-8"))
    for message_id, record in data.items():
        record["translation"] = TRANSLATIONS[message_id]
    _ = target.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


@pytest.mark.parametrize("generator_options", [[], ["--json"], ["--codegen-mode", "release"]])
def test_round_trip(
    tmp_path: Path,
    sample_source_file: Path,
    import_generated: ImportGenerated,
    generator_options: list[str],
) -> None:
    """Test that translated messages are returned by the source functions."""
    l10n_dir = tmp_path / "l10n"
    generated_dir = tmp_path / "generated"

    assert extract_to_structured_json.main(
        ["--output-dir", str(l10n_dir), "--output-file", "app.json", str(sample_source_file)]
    ) == 0
    translate(l10n_dir / "app.json", l10n_dir / "app_fr.json")

    assert generate_from_structured_json.main(
        [
            *generator_options,
            "--output-dir",
            str(generated_dir),
            str(sample_source_file),
            str(l10n_dir / "app_fr.json"),
        ]
    ) == 0

    strings = import_generated(sample_source_file.parent, "strings")
    messages_all = import_generated(generated_dir, "messages_all")

    assert strings.greeting("Ada", 3) == "Hello Ada, you have 3 items"
    assert strings.items(0) == "No items"

    assert messages_all.initialize_messages("fr_FR") is True
    intl.set_locale("fr_FR")

    assert strings.greeting("Ada", 3) == "Bonjour Ada, tu as 3 articles"
    assert strings.items(0) == "Aucun article"
    assert strings.items(1) == "Un article"
    assert strings.items(12) == "12 articles"
    assert strings.pronoun("female") == "elle"
    assert strings.pronoun("nonbinary") == "eux"
    assert strings.title() == "Panier"


def test_re_extraction_is_stable(tmp_path: Path, sample_source_file: Path) -> None:
    """Test that extracting twice produces the same file."""
    first = tmp_path / "first"
    second = tmp_path / "second"

    for output_dir in (first, second):
        assert extract_to_structured_json.main(
            ["--output-dir", str(output_dir), str(sample_source_file)]
        ) == 0

    assert (first / "messages.json").read_text(encoding="utf-8") == (
        second / "messages.json"
    ).read_text(encoding="utf-8")


UNNAMED_SOURCE = '''
from structured_intl import intl


def hello():
    return intl.message("Hello")
'''

TRANSFORMER_SOURCE = '''
from structured_intl import intl


class Shop:
    def greet(self, name):
        return intl.message(f"Hi {name}")

    def cart(self, count):
        return intl.plural(count, one="One item", other=f"{count} items")
'''


def round_trip(
    tmp_path: Path,
    source: str,
    translations: dict[str, str],
    extract_options: list[str],
    generate_options: list[str],
    import_generated: ImportGenerated,
) -> ModuleType:
    """Extract, translate and generate one source module, then import it."""
    source_dir = tmp_path / "app"
    source_dir.mkdir()
    source_file = source_dir / "shop_strings.py"
    _ = source_file.write_text(source, encoding="utf-8")
    extracted = tmp_path / "messages.json"

    assert extract_to_structured_json.main(
        [*extract_options, "--output-dir", str(tmp_path), str(source_file)]
    ) == 0
    data = json.loads(extracted.read_text(encoding="utf-8"))
    assert sorted(data) == sorted(translations)
    for message_id, record in data.items():
        record["translation"] = translations[message_id]
    translated = tmp_path / "shop_fr.json"
    _ = translated.write_text(json.dumps(data), encoding="utf-8")

    generated_dir = tmp_path / "generated"
    assert generate_from_structured_json.main(
        [*generate_options, "--output-dir", str(generated_dir), str(source_file), str(translated)]
    ) == 0

    messages_all = import_generated(generated_dir, "messages_all")
    assert messages_all.initialize_messages("fr") is True
    return import_generated(source_dir, "shop_strings")


def test_unnamed_message_round_trip(tmp_path: Path, import_generated: ImportGenerated) -> None:
    """Test that a message identified by its text is translated."""
    strings = round_trip(
        tmp_path, UNNAMED_SOURCE, {"Hello": "Bonjour"}, [], [], import_generated
    )

    assert strings.hello() == "Hello"
    with intl.with_locale("fr"):
        assert strings.hello() == "Bonjour"


@pytest.mark.parametrize("generator_options", [[], ["--json"]])
def test_transformer_round_trip(
    tmp_path: Path, import_generated: ImportGenerated, generator_options: list[str]
) -> None:
    """Test that messages named after their functions are translated."""
    strings = round_trip(
        tmp_path,
        TRANSFORMER_SOURCE,
        {
            "greet": "Salut {name}",
            "cart": "{count,plural, =1{Un article}other{{count} articles}}",
        },
        ["--transformer"],
        ["--transformer", *generator_options],
        import_generated,
    )
    shop = strings.Shop()

    assert shop.greet("Ada") == "Hi Ada"
    with intl.with_locale("fr"):
        assert shop.greet("Ada") == "Salut Ada"
        assert shop.cart(1) == "Un article"
        assert shop.cart(4) == "4 articles"
