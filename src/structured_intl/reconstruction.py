"""
Reconstruction of translated messages from interchange records.

Translated ICU text is parsed back into message pieces, then resolved
against an index of the source-language messages so the generator knows the
argument names each translation must be compiled with.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .exceptions import IcuSyntaxError
from .icu_parser import IcuParser
from .interchange import TranslationDocument
from .messages import Literal, MainMessage, Piece, TranslatedMessage

logger = logging.getLogger(__name__)


def parse_translation(text: str) -> tuple[Piece, ...]:
    """
    Parse translated ICU text, falling back to a plain-text parse.

    The plain parse is used when the full grammar rejects the text or
    produces nothing but an empty literal for non-empty text.

    Args:
        text: Translated ICU text

    Returns:
        Message pieces for the text
    """
    try:
        pieces = IcuParser.parse_full(text)
    except IcuSyntaxError as e:
        logger.debug(f"Treating translation as plain text: {e}")
        return IcuParser.parse_literal(text)

    if text and pieces == (Literal(""),):
        return IcuParser.parse_literal(text)
    return pieces


def reconstruct(message_id: str, message_data: object) -> TranslatedMessage | None:
    """
    Rebuild a translated message from one interchange record.

    Args:
        message_id: Id of the record
        message_data: Decoded record value

    Returns:
        The translated message, or None for metadata-only and malformed
        records
    """
    if not isinstance(message_data, Mapping):
        return None
    translation = message_data.get("translation")  # pyright: ignore[reportUnknownMemberType]
    if not isinstance(translation, str):
        return None
    return TranslatedMessage(message_id, parse_translation(translation))


class MessageIndex:
    """
    Read-only index of source messages by id.

    The same id may be defined in several source files, so each id maps to
    every definition in the order the files were parsed.
    """

    def __init__(self, messages: Mapping[str, tuple[MainMessage, ...]]) -> None:
        self._messages: Mapping[str, tuple[MainMessage, ...]] = MappingProxyType(
            dict(messages)
        )

    @classmethod
    def build(cls, messages_per_file: Iterable[Mapping[str, MainMessage]]) -> MessageIndex:
        """Index the extraction results of several source files."""
        collected: dict[str, list[MainMessage]] = {}
        for messages in messages_per_file:
            for message_id, message in messages.items():
                collected.setdefault(message_id, []).append(message)
        return cls({key: tuple(value) for key, value in collected.items()})

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def originals(self, message_id: str) -> tuple[MainMessage, ...]:
        """Return the source definitions for an id, empty when unknown."""
        return self._messages.get(message_id, ())

    def resolve(self, translated: TranslatedMessage) -> TranslatedMessage:
        """Return the translation with its original messages attached."""
        return dataclasses.replace(
            translated, original_messages=self.originals(translated.id)
        )


def reconstruct_locale(
    documents: Iterable[TranslationDocument], index: MessageIndex
) -> list[TranslatedMessage]:
    """
    Reconstruct and resolve every translation for one locale.

    Args:
        documents: Decoded translated files for the locale
        index: Index of the source messages

    Returns:
        Resolved translations in document order
    """
    translations: list[TranslatedMessage] = []
    for document in documents:
        for message_id, message_data in document.items():
            translated = reconstruct(message_id, message_data)
            if translated is None:
                logger.debug(f"Skipping non-message entry {message_id!r}")
                continue
            translations.append(index.resolve(translated))
    return translations
