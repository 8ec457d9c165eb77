"""Executable Textual app hosting a playground session."""

from __future__ import annotations

import argparse
import os
import webbrowser
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, Vertical
    from textual.widgets import Button, Footer, Header, Label, Select, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use codepad.adapters.textual.app"
    ) from exc

from codepad.buffer import CHANNELS, Channel
from codepad.config import PlaygroundConfig
from codepad.diff import DiffOutcome, DiffReport, Operation
from codepad.preview import DeviceWidth, PreviewDocument
from codepad.runtime import telemetry
from codepad.session import PlaygroundSession

from .controller import TextualPlaygroundAdapter, TextualUIHooks, widgets_by_channel

_INSERT_STYLE = "bold green underline"
_DELETE_STYLE = "red strike"


def diff_to_text(outcome: DiffOutcome) -> Text:
    """Render a diff outcome as styled terminal text."""

    if not isinstance(outcome, DiffReport):
        return Text(outcome.message)
    text = Text(f"Comparing with version: {outcome.version.timestamp}\n\n")
    for channel in CHANNELS:
        text.append(f"=== {channel.label} Diff ===\n", style="bold")
        for segment in outcome.script(channel):
            if segment.op is Operation.INSERT:
                text.append(segment.text, style=_INSERT_STYLE)
            elif segment.op is Operation.DELETE:
                text.append(segment.text, style=_DELETE_STYLE)
            else:
                text.append(segment.text)
        text.append("\n\n")
    return text


class PlaygroundApp(App[None]):
    """Three editors, a toolbar, and a diff pane over one session."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editors {
		height: 2fr;
	}

	.channel {
		width: 1fr;
		border: round $accent;
	}

	#toolbar {
		height: 3;
	}

	#toolbar Button {
		margin: 0 1;
	}

	#device-select {
		width: 24;
	}

	#diff-area {
		height: 1fr;
		border: round $surface-lighten-1;
		padding: 0 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+p", "preview", "Preview"),
        ("ctrl+s", "save_version", "Save version"),
        ("ctrl+d", "diff", "Diff"),
    ]

    def __init__(self, config: PlaygroundConfig, *, open_browser: bool = False) -> None:
        super().__init__()
        self.config = config
        self.open_browser = open_browser
        self.session: PlaygroundSession | None = None
        self.adapter: TextualPlaygroundAdapter | None = None
        self._areas: Dict[Channel, TextArea] = {}
        self._browser_opened = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="editors"):
            for channel in CHANNELS:
                with Vertical(classes="channel"):
                    yield Label(channel.label)
                    area = TextArea.code_editor(
                        "", language=channel.language, id=channel.value, tab_behavior="indent"
                    )
                    self._areas[channel] = area
                    yield area
        with Horizontal(id="toolbar"):
            yield Button("Preview", id="previewBtn", variant="primary")
            yield Button("Format", id="formatBtn")
            yield Button("Save version", id="saveVersionBtn")
            yield Button("Diff", id="diffBtn")
            yield Select(
                [(device.name.title(), device.name.lower()) for device in DeviceWidth],
                value=DeviceWidth.parse(self.config.device).name.lower(),
                allow_blank=False,
                id="device-select",
            )
        yield Static("", id="diff-area")
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        self.session = PlaygroundSession.from_config(self.config)
        hooks = TextualUIHooks(
            update_status=self._update_status,
            show_diff=self._show_diff,
            show_preview=self._show_preview,
            log=self._log_line,
        )
        self.adapter = TextualPlaygroundAdapter(
            self.session, hooks, widgets=widgets_by_channel(self._areas)
        )
        self.adapter.start()

    def on_unmount(self) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter and event.text_area.id:
            self.adapter.handle_widget_change(Channel.parse(event.text_area.id))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        actions = {
            "previewBtn": self.action_preview,
            "formatBtn": self.action_format,
            "saveVersionBtn": self.action_save_version,
            "diffBtn": self.action_diff,
        }
        action = actions.get(event.button.id or "")
        if action is not None:
            action()

    def on_select_changed(self, event: Select.Changed) -> None:
        if self.adapter and isinstance(event.value, str):
            self.adapter.switch_device(event.value)

    def action_preview(self) -> None:
        if self.adapter:
            self.adapter.preview()

    def action_format(self) -> None:
        if self.adapter:
            self.adapter.format_code()

    def action_save_version(self) -> None:
        if self.adapter:
            self.adapter.save_version()

    def action_diff(self) -> None:
        if self.adapter:
            self.adapter.show_diff()

    def _update_status(self, status: str) -> None:
        self.query_one("#status-line", Static).update(status)

    def _show_diff(self, outcome: DiffOutcome) -> None:
        self.query_one("#diff-area", Static).update(diff_to_text(outcome))

    def _show_preview(self, document: PreviewDocument) -> None:
        del document
        path = self.config.preview_path
        if self.open_browser and not self._browser_opened:
            webbrowser.open(path.resolve().as_uri())
            self._browser_opened = True

    def _log_line(self, line: str) -> None:
        self.log(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the codepad playground.")
    parser.add_argument(
        "--store",
        help="sqlite file for buffers and versions (':memory:' for a throwaway session)",
    )
    parser.add_argument("--archive-key", help="durable key for the version archive")
    parser.add_argument("--preview-path", help="HTML file the preview is written to")
    parser.add_argument(
        "--device",
        choices=[device.name.lower() for device in DeviceWidth],
        help="initial preview width",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        help="open the preview file in a browser once it is first written",
    )
    parser.add_argument(
        "--log-preset",
        default=os.environ.get("CODEPAD_LOG_PRESET", "quiet"),
        help="telemetry preset while the app owns the terminal (default: quiet)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PlaygroundConfig:
    config = PlaygroundConfig.from_env()
    overrides: Dict[str, object] = {}
    if args.store:
        overrides["store_path"] = Path(args.store).expanduser()
    if args.archive_key:
        overrides["archive_key"] = args.archive_key
    if args.preview_path:
        overrides["preview_path"] = Path(args.preview_path).expanduser()
    if args.device:
        overrides["device"] = args.device
    return replace(config, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    app = PlaygroundApp(build_config(args), open_browser=args.open)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
