"""Durable mirror of the buffer store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from codepad.buffer import CHANNELS, BufferSnapshot, BufferStore, Channel
from codepad.runtime.telemetry import span

from .kv import KeyValueStore


@dataclass(frozen=True, slots=True)
class PersistedState:
    """Last-known content per channel; ``None`` means never written."""

    markup: Optional[str] = None
    style: Optional[str] = None
    script: Optional[str] = None

    def get(self, channel: Channel | str) -> Optional[str]:
        return getattr(self, Channel.parse(channel).value)

    @property
    def is_empty(self) -> bool:
        return all(self.get(channel) is None for channel in CHANNELS)

    def to_snapshot(self) -> BufferSnapshot:
        """Fill absent channels with empty content."""

        return BufferSnapshot(
            markup=self.markup or "",
            style=self.style or "",
            script=self.script or "",
        )


class PersistenceLayer:
    """Writes each channel under its fixed key and reads them back."""

    def __init__(self, store: KeyValueStore, *, logger_name: str | None = None) -> None:
        self.store = store
        self._logger_name = logger_name

    def save_all(self, snapshot: BufferSnapshot) -> None:
        with span(
            "persistence::save_all",
            logger_name=self._logger_name,
            component="persistence",
        ):
            self.store.set_many(
                (channel.storage_key, snapshot.get(channel)) for channel in CHANNELS
            )

    def load_all(self) -> PersistedState:
        values = {channel.value: self.store.get(channel.storage_key) for channel in CHANNELS}
        return PersistedState(**values)

    def restore(self, buffers: BufferStore) -> PersistedState:
        """Copy persisted content into ``buffers``; absent channels keep theirs."""

        state = self.load_all()
        current = buffers.snapshot()
        for channel in CHANNELS:
            saved = state.get(channel)
            if saved is not None:
                current = current.replace(channel, saved)
        buffers.load(current)
        return state
