"""Default formatter: jsbeautifier/cssbeautifier plus BeautifulSoup."""

from __future__ import annotations

from typing import Any, Callable, Dict

import cssbeautifier
import jsbeautifier
from bs4 import BeautifulSoup
from bs4.formatter import HTMLFormatter

from .formatter import FormatterError


class BeautifierFormatter:
    """Formats with two-space indentation and no tabs.

    Markup goes through ``BeautifulSoup.prettify``, which is lenient: it
    never rejects malformed HTML (unclosed tags are closed, stray end tags
    dropped), so markup never raises ``FormatterError``. It also puts every
    tag and text node on its own line. Whitespace around inline elements
    such as ``<span>`` or ``<a>`` therefore changes, and the preview may
    render with extra gaps between them.
    """

    def __init__(self, *, tab_width: int = 2) -> None:
        self.tab_width = tab_width
        self._handlers: Dict[str, Callable[[str], str]] = {
            "html": self._format_markup,
            "css": self._format_style,
            "javascript": self._format_script,
        }

    def format(self, text: str, language: str) -> str:
        handler = self._handlers.get(language)
        if handler is None:
            raise FormatterError(f"No formatter for language '{language}'")
        if not text.strip():
            return text
        try:
            return handler(text)
        except FormatterError:
            raise
        except Exception as exc:
            raise FormatterError(f"Cannot format {language}: {exc}") from exc

    def _format_markup(self, text: str) -> str:
        soup = BeautifulSoup(text, "html.parser")
        return soup.prettify(formatter=HTMLFormatter(indent=self.tab_width))

    def _format_style(self, text: str) -> str:
        options = cssbeautifier.default_options()
        self._indent(options)
        return cssbeautifier.beautify(text, options) + "\n"

    def _format_script(self, text: str) -> str:
        options = jsbeautifier.default_options()
        self._indent(options)
        return jsbeautifier.beautify(text, options) + "\n"

    def _indent(self, options: Any) -> None:
        options.indent_size = self.tab_width
        options.indent_char = " "
        options.indent_with_tabs = False
