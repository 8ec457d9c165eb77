"""Code formatter contract and the all-or-nothing format pass."""

from __future__ import annotations

from typing import Protocol

from codepad.buffer import CHANNELS, BufferSnapshot, Channel
from codepad.runtime.telemetry import span


class FormatterError(RuntimeError):
    """Raised when a channel's source cannot be formatted."""

    def __init__(self, message: str, *, channel: Channel | None = None) -> None:
        super().__init__(message)
        self.channel = channel


class CodeFormatter(Protocol):
    def format(self, text: str, language: str) -> str:
        """Return ``text`` reformatted; raise ``FormatterError`` on bad input."""
        ...


def format_snapshot(
    formatter: CodeFormatter,
    snapshot: BufferSnapshot,
    *,
    logger_name: str | None = None,
) -> BufferSnapshot:
    """Format every channel or none.

    The first failure aborts the whole pass, so callers never apply a
    partially formatted set of buffers.
    """

    formatted = snapshot
    with span(
        "formatting::format_snapshot",
        logger_name=logger_name,
        component="formatting",
    ) as handle:
        for channel in CHANNELS:
            handle.add_metadata("channel", channel.value)
            try:
                text = formatter.format(snapshot.get(channel), channel.language)
            except FormatterError as exc:
                if exc.channel is None:
                    exc.channel = channel
                raise
            formatted = formatted.replace(channel, text)
    return formatted
