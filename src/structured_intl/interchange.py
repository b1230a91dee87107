"""
Reading and writing of structured JSON interchange files.

The interchange file is a single JSON object keyed by message id whose
values carry the ICU ``translation`` and optional ``context``/``notes``
metadata. Translated files follow the naming convention
``<anything>_<localeTag>.json``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from .icu import to_interchange_record
from .messages import InterchangeRecord, MainMessage

logger = logging.getLogger(__name__)

# Decoded contents of one translated JSON file
TranslationDocument = dict[str, object]


def build_interchange(
    messages_per_file: Iterable[Mapping[str, MainMessage]],
    suppress_meta_data: bool = False,
) -> dict[str, InterchangeRecord]:
    """
    Aggregate extraction results into one interchange mapping.

    Later files win when the same id occurs more than once. Messages
    without pieces are left out.

    Args:
        messages_per_file: Extracted messages, one mapping per source file
        suppress_meta_data: Emit only the ``translation`` of each record

    Returns:
        Mapping from message id to interchange record

    Raises:
        IllegalInterpolationError: If any message cannot be rendered
    """
    interchange: dict[str, InterchangeRecord] = {}
    for messages in messages_per_file:
        for message_id, message in messages.items():
            record = to_interchange_record(message, suppress_meta_data)
            if record is None:
                continue
            if message_id in interchange:
                logger.debug(f"Message {message_id} redefined, keeping the latest")
            interchange[message_id] = record
    return interchange


def write_interchange_file(
    interchange: Mapping[str, InterchangeRecord], output_file: Path
) -> None:
    """
    Write an interchange mapping as JSON with two-space indentation.

    Args:
        interchange: Mapping from message id to record
        output_file: Destination, created or overwritten
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(interchange, indent=2, ensure_ascii=False)
    _ = output_file.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {len(interchange)} message(s) to {output_file}")


def locale_from_filename(path: Path) -> str:
    """
    Derive the locale tag from a translated file name.

    Everything after the first underscore of the file stem is the locale, so
    ``app_messages_fr.json`` yields ``messages_fr`` rather than ``fr``.

    Args:
        path: Translated JSON file

    Returns:
        The locale tag, empty when the stem has no underscore
    """
    return "_".join(path.stem.split("_")[1:])


def load_translation_file(path: Path) -> TranslationDocument:
    """
    Read one translated JSON file.

    Args:
        path: Translated JSON file

    Returns:
        The decoded top-level object

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If the top-level value is not an object
    """
    with path.open("r", encoding="utf-8") as f:
        data: object = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(
            f"Translation file must contain a JSON object, got {type(data).__name__}: {path}"
        )
    return data  # pyright: ignore[reportUnknownVariableType]


def group_by_locale(paths: Iterable[Path]) -> dict[str, list[TranslationDocument]]:
    """
    Load translated files and group their contents by locale.

    Every file is read before anything is returned. Documents for the same
    locale are appended in input order without merging, so an id present in
    two files for one locale appears twice.

    Args:
        paths: Translated JSON files

    Returns:
        Mapping from locale tag to the documents for that locale
    """
    by_locale: dict[str, list[TranslationDocument]] = {}
    for path in paths:
        locale = locale_from_filename(path)
        logger.debug(f"Loading {path} for locale {locale!r}")
        by_locale.setdefault(locale, []).append(load_translation_file(path))
    return by_locale
