"""Live source buffers for the three playground channels."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Mapping, Optional

from codepad.runtime.telemetry import span

from .channels import CHANNELS, Channel


@dataclass(frozen=True, slots=True)
class BufferSnapshot:
    """Frozen copy of all three channels at one instant."""

    markup: str = ""
    style: str = ""
    script: str = ""

    def get(self, channel: Channel | str) -> str:
        return getattr(self, Channel.parse(channel).value)

    def replace(self, channel: Channel | str, text: str) -> "BufferSnapshot":
        return replace(self, **{Channel.parse(channel).value: text})

    def as_dict(self) -> Dict[Channel, str]:
        return {channel: self.get(channel) for channel in CHANNELS}

    @classmethod
    def from_mapping(cls, values: Mapping[Channel, str]) -> "BufferSnapshot":
        return cls(**{channel.value: text for channel, text in values.items()})


StoreListener = Callable[[BufferSnapshot], None]


class BufferStore:
    """Holds the current text of every channel.

    ``set`` is the only mutation point. The listener (normally the
    persistence layer) is invoked synchronously with the full snapshot
    before ``set`` returns, so a durable read issued afterwards never
    observes stale content.
    """

    def __init__(
        self,
        *,
        listener: Optional[StoreListener] = None,
        logger_name: str | None = None,
    ) -> None:
        self._texts: Dict[Channel, str] = {channel: "" for channel in CHANNELS}
        self._revisions: Dict[Channel, int] = {channel: 0 for channel in CHANNELS}
        self._listener = listener
        self._logger_name = logger_name

    def get(self, channel: Channel | str) -> str:
        return self._texts[Channel.parse(channel)]

    def set(self, channel: Channel | str, text: str) -> None:
        target = Channel.parse(channel)
        with span(
            "buffer::set",
            logger_name=self._logger_name,
            component="buffer",
            metadata={"channel": target.value, "length": len(text)},
        ):
            self._texts[target] = text
            self._revisions[target] += 1
            if self._listener is not None:
                self._listener(self.snapshot())

    def apply(self, snapshot: BufferSnapshot) -> tuple[Channel, ...]:
        """Replace every channel that differs from ``snapshot`` in one step.

        The listener sees the new snapshot once, before memory changes. If
        it raises, no channel is touched. Returns the channels that changed.
        """

        changed = tuple(
            channel for channel in CHANNELS if snapshot.get(channel) != self._texts[channel]
        )
        if not changed:
            return changed
        with span(
            "buffer::apply",
            logger_name=self._logger_name,
            component="buffer",
            metadata={"channels": ",".join(channel.value for channel in changed)},
        ):
            if self._listener is not None:
                self._listener(snapshot)
            for channel in changed:
                self._texts[channel] = snapshot.get(channel)
                self._revisions[channel] += 1
        return changed

    def load(self, snapshot: BufferSnapshot) -> None:
        """Bulk-restore every channel without notifying the listener."""

        for channel in CHANNELS:
            self._texts[channel] = snapshot.get(channel)

    def snapshot(self) -> BufferSnapshot:
        return BufferSnapshot.from_mapping(self._texts)

    def revision(self, channel: Channel | str) -> int:
        return self._revisions[Channel.parse(channel)]

    def set_listener(self, listener: Optional[StoreListener]) -> None:
        self._listener = listener
