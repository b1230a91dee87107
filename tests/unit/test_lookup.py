"""Tests for the message lookups used by generated modules."""

from __future__ import annotations

import pytest

from structured_intl.exceptions import MessageLookupError
from structured_intl.lookup import JsonMessageLookup, MessageLookupByLibrary


def greeting(name: object) -> str:
    return f"Bonjour {name}"


class TestMessageLookupByLibrary:
    """Test lookups backed by generated functions."""

    def test_lookup(self) -> None:
        """Test calling a message function."""
        lookup = MessageLookupByLibrary("fr", {"greeting": greeting})

        assert "greeting" in lookup
        assert lookup.lookup("greeting", ["Ada"]) == "Bonjour Ada"
        assert lookup.lookup("missing", []) is None

    def test_wrong_arguments_lenient(self) -> None:
        """Test that a lenient lookup ignores calls with the wrong arguments."""
        lookup = MessageLookupByLibrary("fr", {"greeting": greeting})

        assert lookup.lookup("greeting", []) is None

    def test_wrong_arguments_strict(self) -> None:
        """Test that a strict lookup rejects calls with the wrong arguments."""
        lookup = MessageLookupByLibrary("fr", {"greeting": greeting}, strict=True)

        with pytest.raises(MessageLookupError) as exc_info:
            _ = lookup.lookup("greeting", ["Ada", "Grace"])

        assert exc_info.value.message_id == "greeting"


class TestJsonMessageLookup:
    """Test lookups interpreting JSON message data."""

    @pytest.fixture
    def lookup(self) -> JsonMessageLookup:
        """A French lookup with one message of each kind."""
        return JsonMessageLookup(
            "fr",
            {
                "greeting": {"args": ["name"], "pieces": ["Bonjour ", {"arg": "name"}]},
                "items": {
                    "args": ["count"],
                    "pieces": [
                        {
                            "plural": "count",
                            "clauses": {
                                "one": ["Un article"],
                                "other": [{"arg": "count"}, " articles"],
                            },
                        }
                    ],
                },
                "mode": {
                    "args": ["speed"],
                    "pieces": [
                        {"select": "speed", "clauses": {"fast": ["Rapide"], "other": ["Normal"]}}
                    ],
                },
                "broken": {"args": [], "pieces": [42]},
            },
            strict=True,
        )

    def test_flat_message(self, lookup: JsonMessageLookup) -> None:
        """Test literals and arguments."""
        assert lookup.lookup("greeting", ["Ada"]) == "Bonjour Ada"

    def test_plural_uses_locale_rules(self, lookup: JsonMessageLookup) -> None:
        """Test that French plural rules apply."""
        assert lookup.lookup("items", [0]) == "Un article"
        assert lookup.lookup("items", [3]) == "3 articles"

    def test_select(self, lookup: JsonMessageLookup) -> None:
        """Test select cases and the other fallback."""
        assert lookup.lookup("mode", ["fast"]) == "Rapide"
        assert lookup.lookup("mode", ["slow"]) == "Normal"

    def test_missing_message(self, lookup: JsonMessageLookup) -> None:
        """Test that unknown ids are not translated."""
        assert "missing" not in lookup
        assert lookup.lookup("missing", []) is None

    def test_wrong_argument_count(self, lookup: JsonMessageLookup) -> None:
        """Test that a strict lookup rejects the wrong number of arguments."""
        with pytest.raises(MessageLookupError, match="expected 1 argument"):
            _ = lookup.lookup("greeting", [])

    def test_malformed_piece(self, lookup: JsonMessageLookup) -> None:
        """Test that data the generator never writes is rejected."""
        with pytest.raises(MessageLookupError, match="Malformed"):
            _ = lookup.lookup("broken", [])
