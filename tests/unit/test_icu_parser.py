"""Tests for the ICU message parser."""

from __future__ import annotations

import pytest

from structured_intl.exceptions import IcuSyntaxError
from structured_intl.icu_parser import IcuParser
from structured_intl.messages import Literal, NamedPlaceholder, SubMessage, SubMessageKind


class TestParseFull:
    """Test parsing with the full ICU grammar."""

    def test_plain_text(self) -> None:
        """Test that text without arguments is a single literal."""
        assert IcuParser.parse_full("Hello world") == (Literal("Hello world"),)

    def test_empty_text(self) -> None:
        """Test that empty text is an empty literal."""
        assert IcuParser.parse_full("") == (Literal(""),)

    def test_placeholders(self) -> None:
        """Test that placeholders split the surrounding literals."""
        assert IcuParser.parse_full("Hi {name}, {count} left") == (
            Literal("Hi "),
            NamedPlaceholder("name"),
            Literal(", "),
            NamedPlaceholder("count"),
            Literal(" left"),
        )

    def test_placeholder_with_whitespace(self) -> None:
        """Test that whitespace around an argument name is ignored."""
        assert IcuParser.parse_full("{ name }") == (NamedPlaceholder("name"),)

    def test_plural(self) -> None:
        """Test that exact plural selectors map onto clause names."""
        pieces = IcuParser.parse_full(
            "{count,plural, =0{No items}=1{One item}other{{count} items}}"
        )

        assert pieces == (
            SubMessage(
                SubMessageKind.PLURAL,
                "count",
                {
                    "zero": (Literal("No items"),),
                    "one": (Literal("One item"),),
                    "other": (NamedPlaceholder("count"), Literal(" items")),
                },
            ),
        )

    def test_plural_with_category_names(self) -> None:
        """Test that CLDR category selectors are accepted."""
        pieces = IcuParser.parse_full("{n, plural, one {# one} few {few} other {many}}")

        assert isinstance(pieces[0], SubMessage)
        assert set(pieces[0].clauses) == {"one", "few", "other"}
        assert pieces[0].clauses["one"] == (Literal("# one"),)

    def test_gender(self) -> None:
        """Test that a select over gender keys is a gender."""
        pieces = IcuParser.parse_full("{who,select, female{her}male{him}other{them}}")

        assert pieces == (
            SubMessage(
                SubMessageKind.GENDER,
                "who",
                {
                    "female": (Literal("her"),),
                    "male": (Literal("him"),),
                    "other": (Literal("them"),),
                },
            ),
        )

    def test_select(self) -> None:
        """Test that a select with other keys is a select."""
        pieces = IcuParser.parse_full("{mode,select, fast{Fast}other{Normal}}")

        assert isinstance(pieces[0], SubMessage)
        assert pieces[0].kind is SubMessageKind.SELECT
        assert list(pieces[0].clauses) == ["fast", "other"]

    def test_embedded_plural(self) -> None:
        """Test a plural embedded in surrounding text."""
        pieces = IcuParser.parse_full("You have {n,plural, =1{one message}other{{n} messages}}.")

        assert pieces[0] == Literal("You have ")
        assert isinstance(pieces[1], SubMessage)
        assert pieces[2] == Literal(".")

    def test_nested_selectors(self) -> None:
        """Test a plural nested in a gender clause."""
        pieces = IcuParser.parse_full(
            "{who,select, female{{n,plural, =1{her item}other{her items}}}other{items}}"
        )

        assert isinstance(pieces[0], SubMessage)
        inner = pieces[0].clauses["female"][0]
        assert isinstance(inner, SubMessage)
        assert inner.kind is SubMessageKind.PLURAL

    def test_quoting(self) -> None:
        """Test that ICU quoting is undone."""
        pieces = IcuParser.parse_full("{n,plural, =1{'{'one'}'}other{''many''}}")

        assert isinstance(pieces[0], SubMessage)
        assert pieces[0].clauses["one"] == (Literal("{one}"),)
        assert pieces[0].clauses["other"] == (Literal("'many'"),)

    def test_lone_apostrophe(self) -> None:
        """Test that a lone apostrophe is literal text."""
        assert IcuParser.parse_full("Don't") == (Literal("Don't"),)

    @pytest.mark.parametrize(
        "text",
        [
            "Hello {",
            "Hello }",
            "{1abc}",
            "{n, number}",
            "{n,plural, =5{five}other{x}}",
            "{n,plural, other{unterminated}",
            "{n,plural, }",
            "{n,select other{x}}",
        ],
    )
    def test_invalid_text(self, text: str) -> None:
        """Test that malformed ICU text raises IcuSyntaxError."""
        with pytest.raises(IcuSyntaxError):
            _ = IcuParser.parse_full(text)

    def test_error_position(self) -> None:
        """Test that syntax errors report where parsing stopped."""
        with pytest.raises(IcuSyntaxError) as exc_info:
            _ = IcuParser.parse_full("abc }")

        assert exc_info.value.position == 4
        assert exc_info.value.text == "abc }"


class TestParseLiteral:
    """Test parsing of plain, non-ICU text."""

    def test_placeholders_only(self) -> None:
        """Test that simple placeholders are still recognized."""
        assert IcuParser.parse_literal("Hi {name}!") == (
            Literal("Hi "),
            NamedPlaceholder("name"),
            Literal("!"),
        )

    def test_stray_braces_are_literal(self) -> None:
        """Test that unbalanced and empty braces are kept as text."""
        assert IcuParser.parse_literal("a {} b } {c") == (Literal("a {} b } {c"),)

    def test_selectors_are_literal(self) -> None:
        """Test that selector syntax is not interpreted."""
        assert IcuParser.parse_literal("{n,plural, other{x}}") == (
            Literal("{n,plural, other"),
            NamedPlaceholder("x"),
            Literal("}"),
        )

    def test_empty_text(self) -> None:
        """Test that empty text is an empty literal."""
        assert IcuParser.parse_literal("") == (Literal(""),)
