"""Append-only archive of saved versions.

The archive lives under one durable key as a JSON array of
``{"timestamp", "html", "css", "js"}`` objects in save order. Entries are
never rewritten, removed or reordered; the last element is always the most
recently saved version.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from codepad.buffer import BufferSnapshot, Channel
from codepad.runtime.telemetry import record_event, span

from .kv import KeyValueStore

DEFAULT_ARCHIVE_KEY = "miniEditorVersions"

_WIRE_FIELDS = ("timestamp", "html", "css", "js")


class ArchiveCorruptedError(RuntimeError):
    """Raised when the stored archive cannot be read as a list of versions."""

    def __init__(self, message: str, *, key: str, index: int | None = None) -> None:
        super().__init__(message)
        self.key = key
        self.index = index


@dataclass(frozen=True, slots=True)
class Version:
    timestamp: str
    markup: str
    style: str
    script: str

    @classmethod
    def from_snapshot(cls, snapshot: BufferSnapshot, *, timestamp: str) -> "Version":
        return cls(
            timestamp=timestamp,
            markup=snapshot.markup,
            style=snapshot.style,
            script=snapshot.script,
        )

    def snapshot(self) -> BufferSnapshot:
        return BufferSnapshot(markup=self.markup, style=self.style, script=self.script)

    def get(self, channel: Channel | str) -> str:
        return getattr(self, Channel.parse(channel).value)

    def to_record(self) -> dict[str, str]:
        return {
            "timestamp": self.timestamp,
            Channel.MARKUP.field: self.markup,
            Channel.STYLE.field: self.style,
            Channel.SCRIPT.field: self.script,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Version":
        """Build a version from its wire form; raises ``ValueError`` on bad shape."""

        missing = [name for name in _WIRE_FIELDS if name not in record]
        if missing:
            raise ValueError(f"missing fields {missing}")
        wrong = [name for name in _WIRE_FIELDS if not isinstance(record[name], str)]
        if wrong:
            raise ValueError(f"non-string fields {wrong}")
        return cls(
            timestamp=record["timestamp"],
            markup=record[Channel.MARKUP.field],
            style=record[Channel.STYLE.field],
            script=record[Channel.SCRIPT.field],
        )


class VersionArchive:
    """Ordered log of ``Version`` snapshots stored as one serialized blob."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = DEFAULT_ARCHIVE_KEY,
        logger_name: str | None = None,
    ) -> None:
        self.store = store
        self.key = key
        self._logger_name = logger_name

    def append(self, version: Version) -> None:
        with span(
            "archive::append",
            logger_name=self._logger_name,
            component="archive",
            metadata={"key": self.key, "timestamp": version.timestamp},
        ) as handle:
            with self.store.transaction() as store:
                records = [item.to_record() for item in self._parse(store.get(self.key))]
                records.append(version.to_record())
                store.set(self.key, json.dumps(records))
            handle.add_metadata("count", len(records))

    def load_all(self) -> tuple[Version, ...]:
        return self._parse(self.store.get(self.key))

    def latest(self) -> Optional[Version]:
        versions = self.load_all()
        return versions[-1] if versions else None

    def __len__(self) -> int:
        return len(self.load_all())

    def _parse(self, raw: Optional[str]) -> tuple[Version, ...]:
        # An empty string is what a never-written browser entry reads as.
        if raw is None or raw == "":
            return ()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            record_event(
                "archive.corrupted",
                level="error",
                data={"key": self.key, "reason": str(exc)},
                logger_name=self._logger_name,
            )
            raise ArchiveCorruptedError(
                f"Archive '{self.key}' is not valid JSON: {exc}", key=self.key
            ) from exc
        if not isinstance(payload, list):
            raise ArchiveCorruptedError(
                f"Archive '{self.key}' holds {type(payload).__name__}, expected a list",
                key=self.key,
            )
        versions = []
        for index, record in enumerate(payload):
            if not isinstance(record, dict):
                raise ArchiveCorruptedError(
                    f"Archive '{self.key}' entry {index} is not an object",
                    key=self.key,
                    index=index,
                )
            try:
                versions.append(Version.from_record(record))
            except ValueError as exc:
                raise ArchiveCorruptedError(
                    f"Archive '{self.key}' entry {index} is malformed: {exc}",
                    key=self.key,
                    index=index,
                ) from exc
        return tuple(versions)
