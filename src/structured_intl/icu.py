"""
Conversion of extracted messages into the structured JSON interchange form.

Messages are rendered as ICU message text, with ``{argument}`` placeholders
and ``{argument,plural, ...}`` / ``{argument,select, ...}`` constructs, and
decorated with translator metadata taken from the message description and
argument examples.

Usage Examples:
    >>> from structured_intl.messages import Literal, MainMessage, Placeholder
    >>> msg = MainMessage("hi", (Literal("Hi "), Placeholder(0)), ("name",))
    >>> render(msg)
    'Hi {name}'
    >>> to_interchange_record(msg)
    {'translation': 'Hi {name}'}
"""

from __future__ import annotations

import logging

from .exceptions import IllegalInterpolationError
from .messages import (
    PLURAL_ICU_KEYS,
    InterchangeRecord,
    Literal,
    MainMessage,
    NamedPlaceholder,
    Piece,
    Placeholder,
    SubMessage,
    SubMessageKind,
)

logger = logging.getLogger(__name__)


def escape(text: str) -> str:
    """
    Escape ICU metacharacters in literal text.

    Apostrophes are doubled first, then curly braces are quoted, so
    ``escape(escape(s))`` differs from ``escape(s)`` whenever ``s`` contains
    any of them.

    Args:
        text: Literal text

    Returns:
        Text safe to embed in an ICU selector clause
    """
    return text.replace("'", "''").replace("{", "'{'").replace("}", "'}'")


def render(message: MainMessage) -> str:
    """
    Render a message as ICU message text.

    Args:
        message: Message to render

    Returns:
        The ICU form of the message

    Raises:
        IllegalInterpolationError: If a piece cannot be rendered
    """
    return render_pieces(message.pieces, message.arguments)


def render_pieces(
    pieces: tuple[Piece, ...],
    arguments: tuple[str, ...],
    should_escape: bool = False,
) -> str:
    """
    Render a piece sequence as ICU text.

    Args:
        pieces: Pieces to render
        arguments: Argument names that positional placeholders index into
        should_escape: Escape literal text, used for everything nested in a
            selector clause

    Returns:
        ICU text for the pieces

    Raises:
        IllegalInterpolationError: If a placeholder is out of range or a
            piece is of an unknown kind
    """
    return "".join(
        _render_piece(piece, arguments, should_escape) for piece in pieces
    )


def _render_piece(piece: Piece, arguments: tuple[str, ...], should_escape: bool) -> str:
    match piece:
        case Literal(text=text):
            return escape(text) if should_escape else text
        case Placeholder(index=index) if 0 <= index < len(arguments):
            return "{" + arguments[index] + "}"
        case NamedPlaceholder(name=name):
            return "{" + name + "}"
        case SubMessage():
            return _render_sub_message(piece, arguments)
        case _:
            raise IllegalInterpolationError(piece)


def _render_sub_message(sub_message: SubMessage, arguments: tuple[str, ...]) -> str:
    clauses: list[str] = []
    for key, clause in sub_message.ordered_clauses():
        if sub_message.kind is SubMessageKind.PLURAL:
            key = PLURAL_ICU_KEYS.get(key, key)
        body = render_pieces(clause, arguments, should_escape=True)
        clauses.append(f"{key}{{{body}}}")
    return (
        f"{{{sub_message.argument},{sub_message.kind.icu_name}, {''.join(clauses)}}}"
    )


def interchange_metadata(message: MainMessage) -> dict[str, str]:
    """
    Build the translator metadata for a message.

    The description becomes ``context``. For each argument with examples,
    a ``"Examples for <argument>:"`` line is followed by one line per
    example, and all lines are joined into ``notes``.

    Args:
        message: Message to describe

    Returns:
        Mapping with the ``context`` and/or ``notes`` keys that apply
    """
    metadata: dict[str, str] = {}
    if message.description:
        metadata["context"] = message.description

    notes: list[str] = []
    for argument in message.arguments:
        examples = message.examples.get(argument)
        if examples:
            notes.append(f"Examples for {argument}:")
            notes.extend(examples)

    if notes:
        metadata["notes"] = "\n".join(notes)

    return metadata


def to_interchange_record(
    message: MainMessage, suppress_meta_data: bool = False
) -> InterchangeRecord | None:
    """
    Convert a message into an interchange record.

    Args:
        message: Message to convert
        suppress_meta_data: Emit only the ``translation`` key

    Returns:
        The record, or None for a message without pieces

    Raises:
        IllegalInterpolationError: If the message cannot be rendered
    """
    if not message.pieces:
        logger.debug(f"Skipping message without pieces: {message.id}")
        return None

    record = InterchangeRecord(translation=render(message))
    if not suppress_meta_data:
        metadata = interchange_metadata(message)
        if "context" in metadata:
            record["context"] = metadata["context"]
        if "notes" in metadata:
            record["notes"] = metadata["notes"]
    return record
