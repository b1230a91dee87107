"""
Message data model shared by the extraction and generation pipelines.

A message is an ordered sequence of pieces. Each piece is one of:

* ``Literal`` - plain text
* ``Placeholder`` - a 0-based index into the owning message's arguments
* ``NamedPlaceholder`` - an argument referenced by name, as found in ICU text
* ``SubMessage`` - a plural, gender or select construct whose clauses are
  themselves piece sequences
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TypeAlias, TypedDict


class SubMessageKind(Enum):
    """Selector constructs that can nest inside a message."""

    PLURAL = "plural"
    GENDER = "gender"
    SELECT = "select"

    @property
    def icu_name(self) -> str:
        """Keyword used for this construct in ICU syntax."""
        return "plural" if self is SubMessageKind.PLURAL else "select"


# Canonical clause order for rendering and code generation
PLURAL_CLAUSES: tuple[str, ...] = ("zero", "one", "two", "few", "many", "other")
GENDER_CLAUSES: tuple[str, ...] = ("female", "male", "other")

# ICU spelling of the exact-match plural clauses
PLURAL_ICU_KEYS: dict[str, str] = {"zero": "=0", "one": "=1", "two": "=2"}


def normalize_plural_key(key: str) -> str:
    """
    Map an ICU plural selector onto its clause name.

    ``=0``/``=1``/``=2`` become ``zero``/``one``/``two``; CLDR category
    names pass through unchanged.
    """
    for clause, icu_key in PLURAL_ICU_KEYS.items():
        if key == icu_key:
            return clause
    return key


@dataclass(frozen=True)
class Literal:
    """Literal text."""

    text: str


@dataclass(frozen=True)
class Placeholder:
    """Reference to an argument by position."""

    index: int


@dataclass(frozen=True)
class NamedPlaceholder:
    """Reference to an argument by name."""

    name: str


@dataclass(frozen=True)
class SubMessage:
    """A plural/gender/select construct keyed by selector clause."""

    kind: SubMessageKind
    argument: str
    clauses: Mapping[str, tuple[Piece, ...]]

    def ordered_clauses(self) -> list[tuple[str, tuple[Piece, ...]]]:
        """Return the clauses in canonical order for the construct kind."""
        match self.kind:
            case SubMessageKind.PLURAL:
                order = PLURAL_CLAUSES
            case SubMessageKind.GENDER:
                order = GENDER_CLAUSES
            case SubMessageKind.SELECT:
                return list(self.clauses.items())
        return [(key, self.clauses[key]) for key in order if key in self.clauses]


Piece: TypeAlias = "Literal | Placeholder | NamedPlaceholder | SubMessage"


@dataclass(frozen=True)
class MainMessage:
    """A source-language message found by the extractor."""

    id: str
    pieces: tuple[Piece, ...]
    arguments: tuple[str, ...] = ()
    description: str | None = None
    examples: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    source_file: Path | None = None


@dataclass(frozen=True)
class TranslatedMessage:
    """
    A translation reconstructed from ICU text.

    ``original_messages`` holds the source-language definitions sharing the
    id; it is empty until resolved against a ``MessageIndex``.
    """

    id: str
    pieces: tuple[Piece, ...]
    original_messages: tuple[MainMessage, ...] = ()

    @property
    def arguments(self) -> tuple[str, ...]:
        """Argument names of the first original message, if any."""
        if not self.original_messages:
            return ()
        return self.original_messages[0].arguments


class _InterchangeMetadata(TypedDict, total=False):
    context: str
    notes: str


class InterchangeRecord(_InterchangeMetadata):
    """One entry of the structured JSON interchange file."""

    translation: str
