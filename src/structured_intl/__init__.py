"""
structured-intl - ICU structured JSON extraction and message lookup generation.
"""

from .exceptions import (
    IllegalInterpolationError,
    MessageGenerationError,
    StructuredIntlError,
)
from .icu import escape, render, to_interchange_record
from .reconstruction import MessageIndex, reconstruct

__version__ = "0.1.0"

__all__ = [
    "IllegalInterpolationError",
    "MessageGenerationError",
    "MessageIndex",
    "StructuredIntlError",
    "escape",
    "reconstruct",
    "render",
    "to_interchange_record",
]
