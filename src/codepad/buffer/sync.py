"""Adapter boundary types for syncing buffers with host editor widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Protocol

from .channels import CHANNELS, Channel
from .store import BufferSnapshot, BufferStore


class EditorWidget(Protocol):
    """Narrow contract every host text-editing widget must satisfy."""

    def get_value(self) -> str:
        """Return the widget's full current text."""
        ...

    def set_value(self, text: str) -> None:
        """Replace the widget's text."""
        ...

    def on_change(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` to run after every content mutation."""
        ...


@dataclass(slots=True)
class BufferBinding:
    """Keeps one widget per channel in step with a ``BufferStore``.

    Widget edits flow into the store (and from there into persistence).
    ``push`` writes store content back into the widgets, e.g. after a
    restore or a format pass, without echoing the change back.
    """

    store: BufferStore
    widgets: Mapping[Channel, EditorWidget]
    _pushing: bool = False
    _attached: Dict[Channel, bool] = field(default_factory=dict)

    def attach(self) -> None:
        for channel in CHANNELS:
            widget = self.widgets.get(channel)
            if widget is None or self._attached.get(channel):
                continue
            widget.on_change(lambda channel=channel: self.pull(channel))
            self._attached[channel] = True

    def pull(self, channel: Channel) -> None:
        if self._pushing:
            return
        text = self.widgets[channel].get_value()
        if text != self.store.get(channel):
            self.store.set(channel, text)

    def push(self, snapshot: BufferSnapshot | None = None) -> None:
        current = snapshot or self.store.snapshot()
        self._pushing = True
        try:
            for channel, widget in self.widgets.items():
                text = current.get(channel)
                if widget.get_value() != text:
                    widget.set_value(text)
        finally:
            self._pushing = False
