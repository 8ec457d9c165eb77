"""Comparison of the live buffers against the most recent saved version."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union

from codepad.buffer import CHANNELS, BufferSnapshot, Channel
from codepad.persistence import Version, VersionArchive
from codepad.runtime.telemetry import span

from .engine import DiffScript, diff, has_changes
from .render import HTML_MARKERS, DiffMarkers, render

NO_VERSION_MESSAGE = "No saved versions found."


@dataclass(frozen=True, slots=True)
class NoVersionAvailable:
    """Returned instead of a report when nothing was ever saved."""

    message: str = NO_VERSION_MESSAGE

    def render(self, markers: DiffMarkers = HTML_MARKERS) -> str:
        del markers
        return self.message


@dataclass(frozen=True, slots=True)
class DiffReport:
    version: Version
    scripts: Dict[Channel, DiffScript]

    def script(self, channel: Channel | str) -> DiffScript:
        return self.scripts[Channel.parse(channel)]

    @property
    def changed_channels(self) -> tuple[Channel, ...]:
        return tuple(channel for channel in CHANNELS if has_changes(self.scripts[channel]))

    def render(self, markers: DiffMarkers = HTML_MARKERS) -> str:
        parts = [f"Comparing with version: {self.version.timestamp}\n\n"]
        for channel in CHANNELS:
            parts.append(f"=== {channel.label} Diff ===\n")
            parts.append(render(self.scripts[channel], markers) + "\n\n")
        return "".join(parts)


DiffOutcome = Union[DiffReport, NoVersionAvailable]


def compare_snapshots(version: Version, snapshot: BufferSnapshot) -> DiffReport:
    scripts = {
        channel: diff(version.get(channel), snapshot.get(channel)) for channel in CHANNELS
    }
    return DiffReport(version=version, scripts=scripts)


def compare_with_latest(
    archive: VersionArchive,
    snapshot: BufferSnapshot,
    *,
    logger_name: str | None = None,
) -> DiffOutcome:
    with span(
        "diff::compare_with_latest",
        logger_name=logger_name,
        component="diff",
    ) as handle:
        latest = archive.latest()
        if latest is None:
            handle.add_metadata("outcome", "no_version")
            return NoVersionAvailable()
        report = compare_snapshots(latest, snapshot)
        handle.add_metadata("timestamp", latest.timestamp)
        handle.add_metadata(
            "changed", ",".join(channel.value for channel in report.changed_channels)
        )
        return report
