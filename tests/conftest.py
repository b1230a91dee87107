"""
Global test configuration fixtures for structured-intl tests.

This module provides sample source files and messages shared by the unit
and integration tests, resets the process-wide ``intl`` runtime state
between tests, and helps import modules produced by the code generator.
"""

from __future__ import annotations

import importlib
import sys
from collections.abc import Callable, Generator
from pathlib import Path
from types import ModuleType

import pytest

from structured_intl import intl
from structured_intl.messages import (
    Literal,
    MainMessage,
    Placeholder,
    SubMessage,
    SubMessageKind,
)


SAMPLE_SOURCE = '''
from structured_intl import intl


def greeting(name, count):
    return intl.message(
        f"Hello {name}, you have {count} items",
        name="greeting",
        args=[name, count],
        desc="Greets the user",
        examples={"name": "Ada", "count": ["1", "42"]},
    )


def items(count):
    return intl.plural(
        count,
        zero="No items",
        one="One item",
        other=f"{count} items",
        name="items",
        args=[count],
        desc="Number of items in the cart",
    )


def pronoun(who):
    return intl.gender(
        who,
        female="her",
        male="him",
        other="them",
        name="pronoun",
        args=[who],
    )


def title():
    return intl.message("Shopping cart", name="title", desc="Page title")
'''


@pytest.fixture(autouse=True)
def reset_intl_state() -> Generator[None, None, None]:
    """Start and finish every test with no locale set and no lookups."""
    intl.clear_lookups()
    intl.set_locale(None)
    yield
    intl.clear_lookups()
    intl.set_locale(None)


@pytest.fixture
def sample_source_file(tmp_path: Path) -> Path:
    """Write the sample message definitions to a temporary module."""
    source_dir = tmp_path / "src"
    source_dir.mkdir()
    path = source_dir / "strings.py"
    _ = path.write_text(SAMPLE_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def greeting_message() -> MainMessage:
    """A flat message with two arguments, a description and examples."""
    return MainMessage(
        id="greeting",
        pieces=(
            Literal("Hello "),
            Placeholder(0),
            Literal(", you have "),
            Placeholder(1),
            Literal(" items"),
        ),
        arguments=("name", "count"),
        description="Greets the user",
        examples={"name": ("Ada",), "count": ("1", "42")},
    )


@pytest.fixture
def plural_message() -> MainMessage:
    """A message consisting of a single plural construct."""
    return MainMessage(
        id="items",
        pieces=(
            SubMessage(
                SubMessageKind.PLURAL,
                "count",
                {
                    "zero": (Literal("No items"),),
                    "one": (Literal("One item"),),
                    "other": (Placeholder(0), Literal(" items")),
                },
            ),
        ),
        arguments=("count",),
    )


@pytest.fixture
def import_generated(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[Callable[[Path, str], ModuleType], None, None]:
    """
    Import a generated module from a directory.

    Modules imported this way are removed from ``sys.modules`` afterwards
    so that tests generating modules with the same names stay independent.
    """
    directories: list[Path] = []

    def _import(directory: Path, module_name: str) -> ModuleType:
        if directory not in directories:
            monkeypatch.syspath_prepend(str(directory))
            directories.append(directory)
        importlib.invalidate_caches()
        return importlib.import_module(module_name)

    yield _import

    for directory in directories:
        for path in directory.glob("*.py"):
            _ = sys.modules.pop(path.stem, None)
