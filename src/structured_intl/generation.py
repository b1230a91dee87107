"""
Generation of Python message lookup modules from translations.

For every locale a module named ``<prefix>messages_<locale>.py`` is written,
holding a ``messages`` lookup for that locale. A single
``<prefix>messages_all.py`` module provides ``initialize_messages`` which
registers a locale's lookup with the ``intl`` runtime.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Literal as TypingLiteral

from .icu import render_pieces
from .messages import (
    Literal,
    NamedPlaceholder,
    Piece,
    Placeholder,
    SubMessage,
    SubMessageKind,
    TranslatedMessage,
)
from .exceptions import MessageGenerationError

logger = logging.getLogger(__name__)

CodegenMode = TypingLiteral["release", "debug"]

GENERATED_HEADER = "# DO NOT EDIT. This file was generated by structured-intl."


def module_name_for_locale(locale: str, prefix: str = "") -> str:
    """Return the generated module name for a locale."""
    return f"{prefix}messages_{locale.replace('-', '_')}"


def parameter_name(index: int) -> str:
    """
    Return the parameter name used for a message argument.

    Generated functions take their arguments positionally under these names
    so that no argument can shadow ``str``, ``intl`` or ``LOCALE_NAME``.
    """
    return f"arg{index}"


class MessageGeneration:
    """
    Code generator producing one lookup module per locale.

    Attributes:
        generated_file_prefix: Prefix for generated module names
        use_deferred_loading: Import locale modules on demand from
            ``initialize_messages`` rather than when ``messages_all`` is
            imported
        codegen_mode: ``debug`` adds docstrings and strict lookups,
            ``release`` leaves both out
        transformer: Messages were extracted in transformer mode and are
            keyed by the function defining them
        all_locales: Locales generated so far, in generation order
    """

    def __init__(
        self,
        generated_file_prefix: str = "",
        use_deferred_loading: bool = True,
        codegen_mode: CodegenMode = "debug",
        transformer: bool = False,
    ) -> None:
        self.generated_file_prefix: str = generated_file_prefix
        self.use_deferred_loading: bool = use_deferred_loading
        self.codegen_mode: CodegenMode = codegen_mode
        self.transformer: bool = transformer
        self.all_locales: list[str] = []

    @property
    def release_mode(self) -> bool:
        """Whether code is generated in release mode."""
        return self.codegen_mode == "release"

    @property
    def main_import_file_name(self) -> str:
        """File name of the aggregating module."""
        return f"{self.generated_file_prefix}messages_all.py"

    def add_locale(self, locale: str) -> None:
        """Record a locale for the aggregating module."""
        if locale not in self.all_locales:
            self.all_locales.append(locale)

    def generate_locale_file(
        self, locale: str, translations: Sequence[TranslatedMessage], output_dir: Path
    ) -> Path:
        """
        Write the lookup module for one locale.

        Translations whose id matches no source message are left out.

        Args:
            locale: Locale tag
            translations: Resolved translations for the locale
            output_dir: Directory to write the module to

        Returns:
            Path of the written module

        Raises:
            MessageGenerationError: If a translation refers to an argument
                its source message does not have
        """
        usable = [each for each in translations if each.original_messages]
        for each in translations:
            if not each.original_messages:
                logger.debug(f"No source message for {each.id!r} in locale {locale!r}, skipping")

        self.add_locale(locale)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / f"{module_name_for_locale(locale, self.generated_file_prefix)}.py"
        _ = path.write_text(self.locale_module_source(locale, usable), encoding="utf-8")
        logger.info(f"Generated {len(usable)} message(s) for locale {locale!r}: {path}")
        return path

    def locale_module_source(self, locale: str, translations: Sequence[TranslatedMessage]) -> str:
        """Return the source of the lookup module for one locale."""
        functions: list[str] = []
        entries: list[str] = []
        for number, translated in enumerate(translations):
            function_name = f"_m{number}"
            functions.append(self._function_source(function_name, translated))
            entries.append(f"    {translated.id!r}: {function_name},")

        body = "".join(f"\n\n{function}\n" for function in functions)
        table = "".join(f"{entry}\n" for entry in entries)
        return f'''{GENERATED_HEADER}
"""Messages for the {locale!r} locale."""

from structured_intl import intl
from structured_intl.lookup import MessageLookupByLibrary

LOCALE_NAME = {locale!r}
{body}

messages = MessageLookupByLibrary(
    LOCALE_NAME,
    {{
{table}    }},
    strict={not self.release_mode},
    transformer={self.transformer},
)
'''

    def _function_source(self, function_name: str, translated: TranslatedMessage) -> str:
        arguments = translated.arguments
        expression = self.expression(translated.pieces, arguments, translated.id)
        parameters = [parameter_name(index) for index in range(len(arguments))]
        lines = [f"def {function_name}({', '.join(parameters)}):"]
        if not self.release_mode:
            lines.append(f"    {self._docstring(translated)}")
        lines.append(f"    return {expression}")
        return "\n".join(lines)

    def _docstring(self, translated: TranslatedMessage) -> str:
        original = translated.original_messages[0]
        arguments = translated.arguments
        text = f"{translated.id}: {render_pieces(translated.pieces, arguments)}"
        if arguments:
            text += f"\n\n    Arguments: {', '.join(arguments)}"
        if original.description:
            text += f"\n\n    {original.description}"
        if arguments or original.description:
            text += "\n    "
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"""{escaped}"""'

    def expression(
        self, pieces: Sequence[Piece], arguments: Sequence[str], message_id: str
    ) -> str:
        """
        Return a Python expression evaluating a piece sequence.

        Args:
            pieces: Translated message pieces
            arguments: Argument names of the message, passed to the
                generated function positionally
            message_id: Id of the message, for error reporting

        Returns:
            Python source for the expression

        Raises:
            MessageGenerationError: If a piece refers to an unknown argument
        """
        parts = [self._piece_expression(piece, arguments, message_id) for piece in pieces]
        parts = [part for part in parts if part != "''"]
        if not parts:
            return "''"
        return " + ".join(parts)

    def _piece_expression(
        self, piece: Piece, arguments: Sequence[str], message_id: str
    ) -> str:
        match piece:
            case Literal(text=text):
                return repr(text)
            case NamedPlaceholder(name=name):
                return f"str({_parameter(name, arguments, message_id)})"
            case Placeholder(index=index) if 0 <= index < len(arguments):
                return f"str({parameter_name(index)})"
            case SubMessage():
                return self._sub_message_expression(piece, arguments, message_id)
            case _:
                raise MessageGenerationError(
                    f"Cannot generate code for {piece!r} in message {message_id!r}",
                    message_id=message_id,
                )

    def _sub_message_expression(
        self, sub_message: SubMessage, arguments: Sequence[str], message_id: str
    ) -> str:
        argument = _parameter(sub_message.argument, arguments, message_id)
        if "other" not in sub_message.clauses:
            raise MessageGenerationError(
                f"The {sub_message.kind.value} on {sub_message.argument!r} in message {message_id!r} "
                f"has no 'other' clause",
                message_id=message_id,
            )

        clauses = [
            (key, self.expression(clause, arguments, message_id))
            for key, clause in sub_message.ordered_clauses()
        ]
        match sub_message.kind:
            case SubMessageKind.PLURAL:
                keywords = ", ".join(f"{key}={value}" for key, value in clauses)
                return f"intl.plural({argument}, {keywords}, locale=LOCALE_NAME)"
            case SubMessageKind.GENDER:
                keywords = ", ".join(f"{key}={value}" for key, value in clauses)
                return f"intl.gender({argument}, {keywords})"
            case SubMessageKind.SELECT:
                cases = ", ".join(f"{key!r}: {value}" for key, value in clauses)
                return f"intl.select({argument}, {{{cases}}})"

    def generate_main_import_file(self) -> str:
        """
        Return the source of the aggregating ``messages_all`` module.

        Returns:
            Module source registering any generated locale on request
        """
        libraries = "\n".join(
            f"    {locale!r}: {module_name_for_locale(locale, self.generated_file_prefix)!r},"
            for locale in self.all_locales
        )
        if self.use_deferred_loading:
            loading = ""
            module_lookup = "_load_library(_LIBRARIES[available])"
        else:
            loading = (
                "\n\n_LOADED: dict[str, ModuleType] = {\n"
                "    locale: _load_library(module_name) for locale, module_name in _LIBRARIES.items()\n"
                "}\n"
            )
            module_lookup = "_LOADED[available]"

        return f'''{GENERATED_HEADER}
"""Registers the generated messages for each available locale."""

import importlib
from types import ModuleType

from structured_intl import intl

_LIBRARIES: dict[str, str] = {{
{libraries}
}}


def _load_library(module_name: str) -> ModuleType:
    if __package__:
        return importlib.import_module(f".{{module_name}}", __package__)
    return importlib.import_module(module_name)
{loading}

def available_locales() -> list[str]:
    """Return the locales messages were generated for."""
    return list(_LIBRARIES)


def initialize_messages(locale_name: str) -> bool:
    """Register the messages for a locale; False if there are none."""
    available = intl.verified_locale(locale_name, _LIBRARIES.__contains__)
    if available is None:
        return False
    module = {module_lookup}
    intl.register_lookup(available, module.messages)
    return True
'''


class JsonMessageGeneration(MessageGeneration):
    """Code generator storing each locale's messages as JSON data."""

    def locale_module_source(self, locale: str, translations: Sequence[TranslatedMessage]) -> str:
        data = {
            translated.id: {
                "args": list(translated.arguments),
                "pieces": self.encode(translated.pieces, translated.arguments, translated.id),
            }
            for translated in translations
        }
        encoded = json.dumps(data, ensure_ascii=False, indent=2, sort_keys=False)
        return f'''{GENERATED_HEADER}
"""Messages for the {locale!r} locale, stored as JSON data."""

import json

from structured_intl.lookup import JsonMessageLookup

LOCALE_NAME = {locale!r}

_DATA = json.loads({encoded!r})

messages = JsonMessageLookup(
    LOCALE_NAME, _DATA, strict={not self.release_mode}, transformer={self.transformer}
)
'''

    def encode(
        self, pieces: Sequence[Piece], arguments: Sequence[str], message_id: str
    ) -> list[object]:
        """
        Encode a piece sequence as JSON-compatible data.

        Raises:
            MessageGenerationError: If a piece refers to an unknown argument
        """
        encoded: list[object] = []
        for piece in pieces:
            match piece:
                case Literal(text=text):
                    encoded.append(text)
                case NamedPlaceholder(name=name):
                    encoded.append({"arg": _checked_argument(name, arguments, message_id)})
                case Placeholder(index=index) if 0 <= index < len(arguments):
                    encoded.append({"arg": arguments[index]})
                case SubMessage(kind=kind, argument=argument):
                    encoded.append(
                        {
                            kind.value: _checked_argument(argument, arguments, message_id),
                            "clauses": {
                                key: self.encode(clause, arguments, message_id)
                                for key, clause in piece.ordered_clauses()
                            },
                        }
                    )
                case _:
                    raise MessageGenerationError(
                        f"Cannot encode {piece!r} in message {message_id!r}",
                        message_id=message_id,
                    )
        return encoded


def _checked_argument(name: str, arguments: Sequence[str], message_id: str) -> str:
    if name not in arguments:
        raise MessageGenerationError(
            f"Translation of {message_id!r} refers to {name!r}, which is not one of "
            f"its arguments ({', '.join(arguments) or 'none'})",
            message_id=message_id,
        )
    return name


def _parameter(name: str, arguments: Sequence[str], message_id: str) -> str:
    _ = _checked_argument(name, arguments, message_id)
    return parameter_name(arguments.index(name))
