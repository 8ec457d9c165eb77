"""Playground session: the context object every operation runs against."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from codepad.buffer import CHANNELS, BufferSnapshot, BufferStore, Channel
from codepad.config import PlaygroundConfig
from codepad.diff import DiffOutcome, compare_with_latest
from codepad.formatting import BeautifierFormatter, CodeFormatter, format_snapshot
from codepad.persistence import (
    DEFAULT_ARCHIVE_KEY,
    KeyValueStore,
    MemoryStore,
    PersistedState,
    PersistenceLayer,
    SqliteStore,
    Version,
    VersionArchive,
)
from codepad.preview import DeviceWidth, PreviewDocument, RenderSurface, compose_snapshot
from codepad.runtime.telemetry import record_event, span

Clock = Callable[[], str]


def local_timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class PlaygroundSession:
    """Owns the buffers and wires them to persistence, archive and preview.

    Every edit goes through ``edit`` (or the store directly) and is mirrored
    to the durable store before the call returns. Versions, diffs, formatting
    and previews are explicit, on-demand operations.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        archive_key: str = DEFAULT_ARCHIVE_KEY,
        formatter: Optional[CodeFormatter] = None,
        surface: Optional[RenderSurface] = None,
        clock: Clock = local_timestamp,
        logger_name: str | None = None,
    ) -> None:
        self.store = store
        self.persistence = PersistenceLayer(store, logger_name=logger_name)
        self.archive = VersionArchive(store, key=archive_key, logger_name=logger_name)
        self.buffers = BufferStore(
            listener=self.persistence.save_all, logger_name=logger_name
        )
        self.formatter: CodeFormatter = formatter or BeautifierFormatter()
        self.surface = surface
        self.clock = clock
        self.preview: Optional[PreviewDocument] = None
        self._logger_name = logger_name

    @classmethod
    def from_config(cls, config: PlaygroundConfig) -> "PlaygroundSession":
        store: KeyValueStore
        if config.in_memory:
            store = MemoryStore()
        else:
            store = SqliteStore(config.store_path)
        surface = RenderSurface(
            config.preview_path, width=DeviceWidth.parse(config.device).value
        )
        return cls(
            store,
            archive_key=config.archive_key,
            formatter=BeautifierFormatter(tab_width=config.tab_width),
            surface=surface,
        )

    def start(self) -> PersistedState:
        """Restore persisted buffers and compose the initial preview."""

        with span("session::start", logger_name=self._logger_name, component="session"):
            state = self.persistence.restore(self.buffers)
            self.render_preview()
        record_event(
            "session.started",
            data={
                "restored": ",".join(
                    channel.value for channel in CHANNELS if state.get(channel) is not None
                )
            },
            logger_name=self._logger_name,
        )
        return state

    def text(self, channel: Channel | str) -> str:
        return self.buffers.get(channel)

    def edit(self, channel: Channel | str, text: str) -> None:
        self.buffers.set(channel, text)

    def snapshot(self) -> BufferSnapshot:
        return self.buffers.snapshot()

    def save_version(self) -> Version:
        version = Version.from_snapshot(self.snapshot(), timestamp=self.clock())
        self.archive.append(version)
        record_event(
            "version.saved",
            data={"timestamp": version.timestamp},
            logger_name=self._logger_name,
        )
        return version

    def versions(self) -> tuple[Version, ...]:
        return self.archive.load_all()

    def diff_with_latest(self) -> DiffOutcome:
        return compare_with_latest(
            self.archive, self.snapshot(), logger_name=self._logger_name
        )

    def render_preview(self) -> PreviewDocument:
        self.preview = compose_snapshot(self.snapshot())
        if self.surface is not None:
            self.surface.show(self.preview)
        return self.preview

    def resize_preview(self, width: str | DeviceWidth) -> None:
        if self.surface is not None:
            self.surface.resize(width)

    def format_code(self) -> BufferSnapshot:
        """Format all channels, apply them, and refresh the preview.

        Raises ``FormatterError`` without touching any buffer when any
        channel fails. The result is persisted in a single write, so a
        ``StorageError`` also leaves every buffer as it was.
        """

        formatted = format_snapshot(
            self.formatter, self.snapshot(), logger_name=self._logger_name
        )
        self.buffers.apply(formatted)
        self.render_preview()
        return formatted

    def close(self) -> None:
        self.store.close()
