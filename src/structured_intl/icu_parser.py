"""
Parser for ICU message text.

Two entry points are provided:

* ``IcuParser.parse_full`` understands ``{name}`` placeholders, plural,
  gender and select constructs and ICU apostrophe quoting, and raises
  ``IcuSyntaxError`` on anything else.
* ``IcuParser.parse_literal`` treats the text as plain text in which only
  ``{name}`` placeholders are recognized; it never fails.
"""

from __future__ import annotations

import re

from .exceptions import IcuSyntaxError
from .messages import (
    GENDER_CLAUSES,
    PLURAL_CLAUSES,
    Literal,
    NamedPlaceholder,
    Piece,
    SubMessage,
    SubMessageKind,
    normalize_plural_key,
)

_IDENTIFIER = re.compile(r"[A-Za-z_]\w*")
_SELECTOR_KEY = re.compile(r"=\d+|[\w-]+")
_SIMPLE_PLACEHOLDER = re.compile(r"\{\s*([A-Za-z_]\w*)\s*\}")


class IcuParser:
    """Recursive-descent parser producing message pieces from ICU text."""

    def __init__(self, text: str) -> None:
        self.text: str = text
        self.pos: int = 0

    @classmethod
    def parse_full(cls, text: str) -> tuple[Piece, ...]:
        """
        Parse ICU text including plural, gender and select constructs.

        Args:
            text: ICU message text

        Returns:
            The parsed pieces; an empty text yields a single empty literal

        Raises:
            IcuSyntaxError: If the text is not valid ICU syntax
        """
        parser = cls(text)
        pieces = parser._parse_message(nested=False)
        if parser.pos != len(text):
            raise parser._error("Unexpected '}'")
        return pieces or (Literal(""),)

    @classmethod
    def parse_literal(cls, text: str) -> tuple[Piece, ...]:
        """
        Parse text as a plain message with ``{name}`` placeholders only.

        Args:
            text: Message text

        Returns:
            The parsed pieces; an empty text yields a single empty literal
        """
        pieces: list[Piece] = []
        last = 0
        for match in _SIMPLE_PLACEHOLDER.finditer(text):
            if match.start() > last:
                pieces.append(Literal(text[last : match.start()]))
            pieces.append(NamedPlaceholder(match.group(1)))
            last = match.end()
        if last < len(text):
            pieces.append(Literal(text[last:]))
        return tuple(pieces) or (Literal(""),)

    def _error(self, message: str) -> IcuSyntaxError:
        return IcuSyntaxError(message, self.text, self.pos)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_whitespace(self) -> None:
        while self._peek().isspace():
            self.pos += 1

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            raise self._error(f"Expected {char!r}")
        self.pos += 1

    def _match(self, pattern: re.Pattern[str], what: str) -> str:
        match = pattern.match(self.text, self.pos)
        if match is None:
            raise self._error(f"Expected {what}")
        self.pos = match.end()
        return match.group(0)

    def _parse_message(self, nested: bool) -> tuple[Piece, ...]:
        pieces: list[Piece] = []
        buffer: list[str] = []

        def flush() -> None:
            if buffer:
                pieces.append(Literal("".join(buffer)))
                buffer.clear()

        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "}":
                # End of a clause body, or a stray brace the caller reports
                break
            if char == "{":
                flush()
                pieces.append(self._parse_argument())
            elif char == "'":
                buffer.append(self._parse_quoted())
            else:
                buffer.append(char)
                self.pos += 1

        if nested and self.pos >= len(self.text):
            raise self._error("Unterminated clause")
        flush()
        return tuple(pieces)

    def _parse_quoted(self) -> str:
        rest = self.text[self.pos :]
        for quoted, value in (("''", "'"), ("'{'", "{"), ("'}'", "}")):
            if rest.startswith(quoted):
                self.pos += len(quoted)
                return value
        self.pos += 1
        return "'"

    def _parse_argument(self) -> Piece:
        self._expect("{")
        self._skip_whitespace()
        name = self._match(_IDENTIFIER, "an argument name")
        self._skip_whitespace()
        if self._peek() == "}":
            self.pos += 1
            return NamedPlaceholder(name)

        self._expect(",")
        self._skip_whitespace()
        keyword = self._match(_IDENTIFIER, "'plural' or 'select'")
        if keyword not in ("plural", "select"):
            raise self._error(f"Unsupported argument type {keyword!r}")
        self._skip_whitespace()
        self._expect(",")

        clauses: dict[str, tuple[Piece, ...]] = {}
        self._skip_whitespace()
        while self._peek() != "}":
            if not self._peek():
                raise self._error("Unterminated selector")
            key = self._match(_SELECTOR_KEY, "a selector key")
            if keyword == "plural":
                key = normalize_plural_key(key)
                if key not in PLURAL_CLAUSES:
                    raise self._error(f"Unsupported plural selector {key!r}")
            self._skip_whitespace()
            self._expect("{")
            clauses[key] = self._parse_message(nested=True)
            self._expect("}")
            self._skip_whitespace()
        self.pos += 1

        if not clauses:
            raise self._error(f"Empty {keyword} for argument {name!r}")
        if keyword == "plural":
            kind = SubMessageKind.PLURAL
        elif all(key in GENDER_CLAUSES for key in clauses):
            kind = SubMessageKind.GENDER
        else:
            kind = SubMessageKind.SELECT
        return SubMessage(kind, name, clauses)
