"""Formatter contract and the bundled beautifier implementation."""

from .beautify import BeautifierFormatter
from .formatter import CodeFormatter, FormatterError, format_snapshot

__all__ = ["BeautifierFormatter", "CodeFormatter", "FormatterError", "format_snapshot"]
