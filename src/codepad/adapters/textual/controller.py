"""Adapter that wires a playground session into host UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from codepad.buffer import BufferBinding, BufferSnapshot, Channel
from codepad.diff import DiffOutcome, DiffReport
from codepad.formatting import FormatterError
from codepad.persistence import ArchiveCorruptedError, StorageError, Version
from codepad.preview import DeviceWidth, PreviewDocument
from codepad.runtime.telemetry import record_event
from codepad.session import PlaygroundSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update host widgets."""

    update_status: Callable[[str], None]
    show_diff: Callable[[DiffOutcome], None] = _noop
    show_preview: Callable[[PreviewDocument], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualPlaygroundAdapter:
    """Translates button presses and widget edits into session operations.

    Errors raised by the session (formatter failures, a corrupted archive,
    an unavailable store, an unwritable preview file) are reported through
    ``update_status`` and returned as ``None``.
    """

    def __init__(
        self,
        session: PlaygroundSession,
        hooks: TextualUIHooks,
        widgets: Optional[Mapping[Channel, "TextAreaWidget"]] = None,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.widgets: Dict[Channel, TextAreaWidget] = dict(widgets or {})
        self.binding: Optional[BufferBinding] = None
        if self.widgets:
            self.binding = BufferBinding(store=session.buffers, widgets=self.widgets)
            self.binding.attach()

    def start(self) -> None:
        try:
            self.session.start()
        except (StorageError, OSError) as exc:
            self._report("start", exc)
            return
        self._push_buffers()
        if self.session.preview is not None:
            self.hooks.show_preview(self.session.preview)
        self.hooks.update_status("ready")

    def handle_edit(self, channel: Channel | str, text: str) -> None:
        try:
            self.session.edit(channel, text)
        except StorageError as exc:
            self._report("edit", exc)
            return
        self._log("edit ->", channel=Channel.parse(channel).value, length=len(text))

    def handle_widget_change(self, channel: Channel) -> None:
        widget = self.widgets.get(channel)
        if widget is None:
            return
        try:
            widget.notify_changed()
        except StorageError as exc:
            self._report("edit", exc)

    def preview(self) -> Optional[PreviewDocument]:
        try:
            document = self.session.render_preview()
        except OSError as exc:
            self._report("preview", exc)
            return None
        self.hooks.show_preview(document)
        self.hooks.update_status("preview updated")
        return document

    def format_code(self) -> Optional[BufferSnapshot]:
        try:
            formatted = self.session.format_code()
        except (FormatterError, StorageError) as exc:
            self._report("format", exc)
            return None
        except OSError as exc:
            # Buffers were formatted; only the preview write failed.
            self._push_buffers()
            self._report("format", exc)
            return None
        self._push_buffers(formatted)
        if self.session.preview is not None:
            self.hooks.show_preview(self.session.preview)
        self.hooks.update_status("formatted")
        return formatted

    def save_version(self) -> Optional[Version]:
        try:
            version = self.session.save_version()
        except (ArchiveCorruptedError, StorageError) as exc:
            self._report("save_version", exc)
            return None
        self.hooks.update_status(f"Version saved! ({version.timestamp})")
        return version

    def show_diff(self) -> Optional[DiffOutcome]:
        try:
            outcome = self.session.diff_with_latest()
        except (ArchiveCorruptedError, StorageError) as exc:
            self._report("diff", exc)
            return None
        self.hooks.show_diff(outcome)
        if isinstance(outcome, DiffReport):
            changed = ", ".join(channel.label for channel in outcome.changed_channels)
            self.hooks.update_status(
                f"diff vs {outcome.version.timestamp}: {changed or 'no changes'}"
            )
        else:
            self.hooks.update_status(outcome.message)
        return outcome

    def switch_device(self, device: str) -> None:
        try:
            width = DeviceWidth.parse(device)
        except ValueError as exc:
            self.hooks.update_status(str(exc))
            return
        try:
            self.session.resize_preview(width)
        except OSError as exc:
            self._report("switch_device", exc)
            return
        self.hooks.update_status(f"preview width {width.value}")

    def _push_buffers(self, snapshot: Optional[BufferSnapshot] = None) -> None:
        if self.binding is not None:
            self.binding.push(snapshot)

    def _report(self, action: str, exc: Exception) -> None:
        record_event(
            f"{action}.failed",
            level="error",
            data={"error": type(exc).__name__, "reason": str(exc)},
        )
        self._log("error ->", action=action, error=str(exc))
        self.hooks.update_status(f"{action} failed: {exc}")

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix]
        parts.extend(f"{key}={value!r}" for key, value in fields.items())
        self.hooks.log(" ".join(parts))


class TextAreaWidget:
    """``EditorWidget`` over a Textual ``TextArea``.

    Textual reports edits as ``TextArea.Changed`` messages, so the host app
    forwards them to ``notify_changed``.
    """

    def __init__(self, area: object) -> None:
        self.area = area
        self._callbacks: list[Callable[[], None]] = []

    def get_value(self) -> str:
        return str(getattr(self.area, "text"))

    def set_value(self, text: str) -> None:
        getattr(self.area, "load_text")(text)

    def on_change(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def notify_changed(self) -> None:
        for callback in self._callbacks:
            callback()


def widgets_by_channel(areas: Mapping[Channel, object]) -> Dict[Channel, TextAreaWidget]:
    return {channel: TextAreaWidget(area) for channel, area in areas.items()}


__all__ = [
    "TextAreaWidget",
    "TextualPlaygroundAdapter",
    "TextualUIHooks",
    "widgets_by_channel",
]
