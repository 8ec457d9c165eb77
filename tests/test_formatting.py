from __future__ import annotations

import pytest

from codepad.buffer import BufferSnapshot, Channel
from codepad.formatting import BeautifierFormatter, FormatterError, format_snapshot


def test_script_is_reindented() -> None:
    formatter = BeautifierFormatter()

    assert formatter.format("function f(){return 1}", "javascript") == (
        "function f() {\n  return 1\n}\n"
    )


def test_style_is_reindented() -> None:
    formatter = BeautifierFormatter()

    assert formatter.format("b{color:red}", "css") == "b {\n  color: red\n}\n"


def test_markup_is_prettified_with_tab_width() -> None:
    formatter = BeautifierFormatter(tab_width=4)

    result = formatter.format("<div><p>a</p></div>", "html")

    assert result.splitlines()[:3] == ["<div>", "    <p>", "        a"]


def test_blank_text_is_left_alone() -> None:
    assert BeautifierFormatter().format("  \n", "css") == "  \n"


def test_unknown_language_raises() -> None:
    with pytest.raises(FormatterError):
        BeautifierFormatter().format("print(1)", "python")


class ScriptRejectingFormatter:
    def format(self, text: str, language: str) -> str:
        if language == "javascript":
            raise FormatterError("syntax error")
        return f"[{text}]"


def test_format_snapshot_is_all_or_nothing() -> None:
    snapshot = BufferSnapshot(markup="a", style="b", script="c")

    with pytest.raises(FormatterError) as excinfo:
        format_snapshot(ScriptRejectingFormatter(), snapshot)

    assert excinfo.value.channel is Channel.SCRIPT


def test_format_snapshot_returns_new_snapshot() -> None:
    class Bracketing:
        def format(self, text: str, language: str) -> str:
            return f"[{text}]"

    snapshot = BufferSnapshot(markup="a", style="b", script="c")

    formatted = format_snapshot(Bracketing(), snapshot)

    assert formatted == BufferSnapshot(markup="[a]", style="[b]", script="[c]")
    assert snapshot.markup == "a"


def test_malformed_markup_is_repaired_not_rejected() -> None:
    result = BeautifierFormatter().format("<div><p>open", "html")

    assert result.splitlines()[0] == "<div>"
    assert "open" in result
    assert result.count("</p>") == 1
