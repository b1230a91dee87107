"""
Runtime API for defining and looking up localized messages.

Application code defines messages with ``message``, ``plural``, ``gender``
and ``select``. The same calls are what the extractor looks for, so their
keyword names mirror the extraction rules. When a named message has a
translation registered for the current locale, the translation is returned;
otherwise the source-language text is used. A ``message`` without a name is
looked up by its text, and a call without name and args inside a function
is looked up by that function's name and parameters in lookups generated in
transformer mode.

Usage Examples:
    >>> from structured_intl import intl
    >>> def greeting(name):
    ...     return intl.message(f"Hello {name}", name="greeting", args=[name])
    >>> intl.set_locale("en_US")
    >>> greeting("Ada")
    'Hello Ada'
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Collection, Iterator, Mapping, Sequence
from contextlib import contextmanager
from enum import Enum
from types import FrameType
from typing import Protocol

from babel import Locale, UnknownLocaleError
from babel.plural import PluralRule

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en_US"


class MessageLookup(Protocol):
    """Translations for one locale, as registered by generated modules."""

    # True when messages are keyed by the name of the function defining them
    transformer: bool

    def lookup(self, name: str, args: Sequence[object]) -> str | None: ...


_current_locale: str | None = None
_lookups: dict[str, MessageLookup] = {}


def canonicalized_locale(locale: str) -> str:
    """
    Normalize a locale tag to the ``language_REGION`` form.

    ``en-us`` becomes ``en_US``; tags that do not look like a language plus
    region are returned with dashes replaced only.
    """
    parts = locale.replace("-", "_").split("_")
    if len(parts) == 2 and len(parts[1]) == 2:
        return f"{parts[0].lower()}_{parts[1].upper()}"
    return "_".join(parts)


def short_locale(locale: str) -> str:
    """Return the language part of a locale tag."""
    return locale.replace("-", "_").split("_")[0].lower()


def verified_locale(locale: str | None, exists: Callable[[str], bool]) -> str | None:
    """
    Find the form of a locale tag that ``exists`` accepts.

    The tag is tried as given, then canonicalized, then reduced to its
    language.

    Args:
        locale: Requested locale, None for the current locale
        exists: Predicate telling whether a locale is available

    Returns:
        The first accepted form, or None when no form is available
    """
    if locale is None:
        locale = get_locale()
    for candidate in (locale, canonicalized_locale(locale), short_locale(locale)):
        if exists(candidate):
            return candidate
    return None


def get_locale() -> str:
    """Return the locale messages are currently looked up in."""
    return _current_locale or DEFAULT_LOCALE


def set_locale(locale: str | None) -> None:
    """
    Set the current locale; None restores the default.

    The tag is kept as given so that lookups registered under a tag that
    is not in ``language_REGION`` form, such as ``messages_fr``, stay
    reachable. ``verified_locale`` tries the canonical forms.
    """
    global _current_locale
    _current_locale = locale or None


@contextmanager
def with_locale(locale: str) -> Iterator[str]:
    """Temporarily switch the current locale."""
    previous = _current_locale
    set_locale(locale)
    try:
        yield get_locale()
    finally:
        set_locale(previous)


def register_lookup(locale: str, lookup: MessageLookup) -> None:
    """Make the translations for a locale available to message calls."""
    _lookups[locale] = lookup
    logger.debug(f"Registered messages for locale {locale!r}")


def clear_lookups() -> None:
    """Forget every registered translation."""
    _lookups.clear()


def registered_locales() -> list[str]:
    """Return the locales with registered translations."""
    return sorted(_lookups)


def _current_lookup(locale: str | None) -> MessageLookup | None:
    available = verified_locale(locale, _lookups.__contains__)
    return None if available is None else _lookups[available]


def lookup_message(
    name: str | None, args: Sequence[object], locale: str | None = None
) -> str | None:
    """
    Look up the translation of a named message.

    Args:
        name: Message id
        args: Message arguments, in the order of the message's ``args``
        locale: Locale to use, None for the current locale

    Returns:
        The translated text, or None when there is no translation
    """
    if name is None:
        return None
    lookup = _current_lookup(locale)
    if lookup is None:
        return None
    return lookup.lookup(name, args)


def calling_function(frame: FrameType | None) -> tuple[str, tuple[object, ...]] | None:
    """
    Return the name and parameter values of the function running in a frame.

    Parameters are listed in declaration order without ``self`` and
    ``cls``, matching how transformer-mode extraction derives message args.

    Args:
        frame: Frame of the function that called a message function

    Returns:
        Function name and parameter values, or None at module level and
        for lambdas and comprehensions
    """
    if frame is None:
        return None
    code = frame.f_code
    if code.co_name.startswith("<"):
        return None

    parameter_count = code.co_argcount + code.co_kwonlyargcount
    parameters = [
        parameter
        for parameter in code.co_varnames[:parameter_count]
        if parameter not in ("self", "cls")
    ]
    local_values = frame.f_locals
    return code.co_name, tuple(
        local_values[parameter] for parameter in parameters if parameter in local_values
    )


def _translation(
    name: str | None,
    args: Sequence[object],
    locale: str | None,
    text_key: str | None,
    frame: FrameType | None,
) -> str | None:
    """
    Find the translation for a message call.

    In lookups generated in transformer mode, a missing name or missing
    args are taken from the function the message function was called from.
    Otherwise an unnamed message is looked up by its text.

    Args:
        name: Message id given in the call
        args: Message arguments given in the call
        locale: Locale to use, None for the current locale
        text_key: Id of the message when it has no name
        frame: Frame of the message function itself

    Returns:
        The translated text, or None when there is no translation
    """
    lookup = _current_lookup(locale)
    if lookup is None:
        return None

    if lookup.transformer and (name is None or not args):
        caller = calling_function(frame.f_back if frame is not None else None)
        if caller is not None:
            caller_name, caller_args = caller
            return lookup.lookup(name or caller_name, args or caller_args)

    key = name if name is not None else text_key
    return None if key is None else lookup.lookup(key, args)


@functools.cache
def _plural_rule(locale: str) -> PluralRule | None:
    try:
        return Locale.parse(locale).plural_form
    except (UnknownLocaleError, ValueError):
        logger.debug(f"No plural rules for locale {locale!r}, using English rules")
        return None


def plural_category(how_many: int | float, locale: str | None = None) -> str:
    """
    Return the CLDR plural category of a number in a locale.

    Locales unknown to Babel use the English rules.
    """
    rule = _plural_rule(canonicalized_locale(locale or get_locale()))
    if rule is None:
        return "one" if how_many == 1 else "other"
    return rule(how_many)


def plural_clause(
    how_many: int | float, available: Collection[str], locale: str | None = None
) -> str:
    """
    Choose which plural clause applies to a number.

    Exact ``zero``/``one``/``two`` clauses win for 0, 1 and 2; otherwise the
    locale's plural category is used if that clause exists, else ``other``.

    Args:
        how_many: The number being pluralized
        available: Clause names that were provided
        locale: Locale for the plural rules, None for the current locale

    Returns:
        The clause name to use
    """
    for exact, clause in ((0, "zero"), (1, "one"), (2, "two")):
        if how_many == exact and clause in available:
            return clause
    category = plural_category(how_many, locale)
    return category if category in available else "other"


def gender_clause(target_gender: object, available: Collection[str]) -> str:
    """Choose the gender clause for a value, falling back to ``other``."""
    value = _selector_value(target_gender)
    return value if value in ("female", "male") and value in available else "other"


def select_clause(choice: object, available: Collection[str]) -> str:
    """Choose the select case for a value, falling back to ``other``."""
    value = _selector_value(choice)
    return value if value in available else "other"


def _selector_value(value: object) -> str:
    if isinstance(value, Enum):
        return value.name
    return str(value)


def message(
    message_text: str,
    *,
    name: str | None = None,
    args: Sequence[object] = (),
    desc: str | None = None,
    examples: Mapping[str, object] | None = None,
    locale: str | None = None,
    skip: bool = False,
) -> str:
    """
    Return a message in the current locale.

    ``desc`` and ``examples`` are only read by the extractor; ``skip``
    excludes the call from extraction.
    """
    translated = _translation(name, args, locale, message_text, inspect.currentframe())
    return message_text if translated is None else translated


def plural(
    how_many: int | float,
    *,
    zero: str | None = None,
    one: str | None = None,
    two: str | None = None,
    few: str | None = None,
    many: str | None = None,
    other: str,
    name: str | None = None,
    args: Sequence[object] = (),
    desc: str | None = None,
    examples: Mapping[str, object] | None = None,
    locale: str | None = None,
    skip: bool = False,
) -> str:
    """Return the plural form of a message matching ``how_many``."""
    translated = _translation(name, args, locale, None, inspect.currentframe())
    if translated is not None:
        return translated

    clauses = {
        key: value
        for key, value in (
            ("zero", zero),
            ("one", one),
            ("two", two),
            ("few", few),
            ("many", many),
            ("other", other),
        )
        if value is not None
    }
    return clauses[plural_clause(how_many, clauses, locale)]


def gender(
    target_gender: object,
    *,
    female: str | None = None,
    male: str | None = None,
    other: str,
    name: str | None = None,
    args: Sequence[object] = (),
    desc: str | None = None,
    examples: Mapping[str, object] | None = None,
    locale: str | None = None,
    skip: bool = False,
) -> str:
    """Return the gendered form of a message for ``target_gender``."""
    translated = _translation(name, args, locale, None, inspect.currentframe())
    if translated is not None:
        return translated

    clauses = {
        key: value
        for key, value in (("female", female), ("male", male), ("other", other))
        if value is not None
    }
    return clauses[gender_clause(target_gender, clauses)]


def select(
    choice: object,
    cases: Mapping[str, str],
    *,
    name: str | None = None,
    args: Sequence[object] = (),
    desc: str | None = None,
    examples: Mapping[str, object] | None = None,
    locale: str | None = None,
    skip: bool = False,
) -> str:
    """Return the case of a message matching ``choice``."""
    translated = _translation(name, args, locale, None, inspect.currentframe())
    if translated is not None:
        return translated
    return cases[select_clause(choice, cases)]
