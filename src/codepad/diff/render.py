"""Presentation of diff scripts as annotated text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .engine import DiffSegment, Operation


@dataclass(frozen=True, slots=True)
class DiffMarkers:
    """Delimiters wrapped around inserted and deleted spans."""

    insert_start: str
    insert_end: str
    delete_start: str
    delete_end: str

    def wrap(self, segment: DiffSegment) -> str:
        if segment.op is Operation.INSERT:
            return f"{self.insert_start}{segment.text}{self.insert_end}"
        if segment.op is Operation.DELETE:
            return f"{self.delete_start}{segment.text}{self.delete_end}"
        return segment.text


HTML_MARKERS = DiffMarkers("<ins>", "</ins>", "<del>", "</del>")
PLAIN_MARKERS = DiffMarkers("{+", "+}", "[-", "-]")


def render(script: Iterable[DiffSegment], markers: DiffMarkers = HTML_MARKERS) -> str:
    return "".join(markers.wrap(segment) for segment in script)
