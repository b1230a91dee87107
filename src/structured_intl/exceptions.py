"""
Exception classes for structured-intl.

This module contains the exception hierarchy shared by the extraction and
generation pipelines and the message lookup runtime, kept free of other
package imports so every module can use it without creating import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    INTERPOLATION = "interpolation"
    PARSING = "parsing"
    GENERATION = "generation"
    LOOKUP = "lookup"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class StructuredIntlError(Exception):
    """Base exception class for structured-intl specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        context: object | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.context: object | None = context
        self.recoverable: bool = recoverable


class IllegalInterpolationError(StructuredIntlError):
    """A message piece that cannot be rendered as ICU text."""

    def __init__(self, fragment: object, message: str | None = None) -> None:
        super().__init__(
            message or f"Illegal interpolation: {fragment!r}",
            category=ErrorCategory.INTERPOLATION,
            context=fragment,
        )
        self.fragment: object = fragment


class IcuSyntaxError(StructuredIntlError):
    """ICU message text that the full grammar cannot parse."""

    def __init__(self, message: str, text: str, position: int) -> None:
        super().__init__(
            f"{message} at position {position} in {text!r}",
            category=ErrorCategory.PARSING,
            context=text,
            recoverable=True,
        )
        self.text: str = text
        self.position: int = position


class MessageGenerationError(StructuredIntlError):
    """A translation that cannot be turned into lookup code."""

    def __init__(self, message: str, message_id: str | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.GENERATION,
            context=message_id,
        )
        self.message_id: str | None = message_id


class MessageLookupError(StructuredIntlError):
    """A strict message lookup called with the wrong arguments."""

    def __init__(self, message: str, message_id: str | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.LOOKUP,
            context=message_id,
        )
        self.message_id: str | None = message_id


class ConfigurationError(StructuredIntlError):
    """Configuration-related errors."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            context=context,
        )
