"""Text diffing between saved versions and live buffers."""

from .engine import (
    DiffScript,
    DiffSegment,
    DiffStats,
    Operation,
    cleanup_semantic,
    diff,
    has_changes,
    new_text,
    old_text,
    stats,
)
from .render import HTML_MARKERS, PLAIN_MARKERS, DiffMarkers, render
from .report import (
    NO_VERSION_MESSAGE,
    DiffOutcome,
    DiffReport,
    NoVersionAvailable,
    compare_snapshots,
    compare_with_latest,
)

__all__ = [
    "DiffScript",
    "DiffSegment",
    "DiffStats",
    "Operation",
    "cleanup_semantic",
    "diff",
    "has_changes",
    "new_text",
    "old_text",
    "stats",
    "HTML_MARKERS",
    "PLAIN_MARKERS",
    "DiffMarkers",
    "render",
    "NO_VERSION_MESSAGE",
    "DiffOutcome",
    "DiffReport",
    "NoVersionAvailable",
    "compare_snapshots",
    "compare_with_latest",
]
