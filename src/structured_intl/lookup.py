"""
Message lookups used by generated locale modules.

``MessageLookupByLibrary`` wraps the functions of a generated module;
``JsonMessageLookup`` interprets messages stored as JSON data. Both are
registered with ``intl.register_lookup`` by the generated ``messages_all``
module.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import cast

from . import intl
from .exceptions import MessageLookupError

logger = logging.getLogger(__name__)


class MessageLookupByLibrary:
    """
    Translations for one locale backed by generated functions.

    With ``transformer`` set, messages are keyed by the function defining
    them, and calls without a name or args are resolved through the caller.
    """

    def __init__(
        self,
        locale_name: str,
        messages: Mapping[str, Callable[..., str]],
        strict: bool = False,
        transformer: bool = False,
    ) -> None:
        self.locale_name: str = locale_name
        self.messages: Mapping[str, Callable[..., str]] = messages
        self.strict: bool = strict
        self.transformer: bool = transformer

    def __contains__(self, name: object) -> bool:
        return name in self.messages

    def lookup(self, name: str, args: Sequence[object]) -> str | None:
        """
        Evaluate the translation of a message.

        Args:
            name: Message id
            args: Message arguments in declaration order

        Returns:
            The translated text, or None if the message is not translated or
            a non-strict lookup got the wrong number of arguments

        Raises:
            MessageLookupError: If a strict lookup got the wrong number of
                arguments
        """
        function = self.messages.get(name)
        if function is None:
            return None
        try:
            _ = inspect.signature(function).bind(*args)
        except TypeError as e:
            return _argument_mismatch(self, name, str(e))
        return function(*args)


class JsonMessageLookup:
    """
    Translations for one locale stored as JSON-compatible data.

    Each message maps to ``{"args": [...], "pieces": [...]}`` where a piece
    is a string, ``{"arg": name}`` or ``{"<kind>": name, "clauses": {...}}``
    for plural, gender and select.
    """

    def __init__(
        self,
        locale_name: str,
        data: Mapping[str, Mapping[str, object]],
        strict: bool = False,
        transformer: bool = False,
    ) -> None:
        self.locale_name: str = locale_name
        self.data: Mapping[str, Mapping[str, object]] = data
        self.strict: bool = strict
        self.transformer: bool = transformer

    def __contains__(self, name: object) -> bool:
        return name in self.data

    def lookup(self, name: str, args: Sequence[object]) -> str | None:
        """Evaluate the translation of a message; see ``MessageLookupByLibrary``."""
        entry = self.data.get(name)
        if entry is None:
            return None
        arg_names = cast(list[str], entry["args"])
        if len(arg_names) != len(args):
            return _argument_mismatch(
                self, name, f"expected {len(arg_names)} argument(s), got {len(args)}"
            )
        values = dict(zip(arg_names, args))
        return self._evaluate(cast(list[object], entry["pieces"]), values)

    def _evaluate(self, pieces: list[object], values: Mapping[str, object]) -> str:
        return "".join(self._evaluate_piece(piece, values) for piece in pieces)

    def _evaluate_piece(self, piece: object, values: Mapping[str, object]) -> str:
        match piece:
            case str():
                return piece
            case {"arg": str(argument)}:
                return str(values[argument])
            case {"plural": str(argument), "clauses": dict(clauses)}:
                key = intl.plural_clause(
                    cast(int | float, values[argument]), clauses, self.locale_name
                )
            case {"gender": str(argument), "clauses": dict(clauses)}:
                key = intl.gender_clause(values[argument], clauses)
            case {"select": str(argument), "clauses": dict(clauses)}:
                key = intl.select_clause(values[argument], clauses)
            case _:
                raise MessageLookupError(f"Malformed message piece: {piece!r}")
        return self._evaluate(cast(list[object], clauses[key]), values)


def _argument_mismatch(
    lookup: MessageLookupByLibrary | JsonMessageLookup, name: str, detail: str
) -> None:
    message = f"Message {name!r} for locale {lookup.locale_name!r} called with wrong arguments: {detail}"
    if lookup.strict:
        raise MessageLookupError(message, message_id=name)
    logger.warning(message)
    return None
