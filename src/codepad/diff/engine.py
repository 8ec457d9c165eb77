"""Character-level text diff with semantic cleanup, backed by diff-match-patch.

``diff(old, new)`` returns an ordered script of EQUAL/INSERT/DELETE
segments. Joining the EQUAL and DELETE spans gives ``old`` back; joining
the EQUAL and INSERT spans gives ``new`` back.

The script comes from ``diff_match_patch.diff_main`` followed by
``diff_cleanupSemantic``, which folds tiny coincidental equalities into the
surrounding edits and slides edits onto word and line boundaries.
``diff_main`` gives up refining after ``timeout`` seconds and returns a
valid but coarser script, so the call stays bounded on large input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Sequence, Tuple

from diff_match_patch import diff_match_patch

DIFF_TIMEOUT = 1.0


class Operation(IntEnum):
    DELETE = diff_match_patch.DIFF_DELETE
    EQUAL = diff_match_patch.DIFF_EQUAL
    INSERT = diff_match_patch.DIFF_INSERT


@dataclass(frozen=True, slots=True)
class DiffSegment:
    op: Operation
    text: str


DiffScript = Tuple[DiffSegment, ...]


@dataclass(frozen=True, slots=True)
class DiffStats:
    inserted: int
    deleted: int
    unchanged: int

    @property
    def changed(self) -> bool:
        return bool(self.inserted or self.deleted)


def _matcher(timeout: float) -> diff_match_patch:
    dmp = diff_match_patch()
    dmp.Diff_Timeout = timeout
    return dmp


def _segments(pairs: Iterable[Tuple[int, str]]) -> List[DiffSegment]:
    return [DiffSegment(Operation(op), text) for op, text in pairs]


def diff(old: str, new: str, *, timeout: float = DIFF_TIMEOUT) -> DiffScript:
    """Return the cleaned-up edit script turning ``old`` into ``new``.

    Identical inputs, ``""`` included, yield exactly one EQUAL segment.
    """

    if old == new:
        return (DiffSegment(Operation.EQUAL, old),)
    dmp = _matcher(timeout)
    pairs = dmp.diff_main(old, new)
    dmp.diff_cleanupSemantic(pairs)
    return tuple(_segments(pairs))


def cleanup_semantic(segments: Sequence[DiffSegment]) -> List[DiffSegment]:
    """Trade tiny equalities for readable edits, then align edit boundaries."""

    pairs = [(int(seg.op), seg.text) for seg in segments]
    _matcher(DIFF_TIMEOUT).diff_cleanupSemantic(pairs)
    return _segments(pairs)


def old_text(script: Iterable[DiffSegment]) -> str:
    return "".join(seg.text for seg in script if seg.op is not Operation.INSERT)


def new_text(script: Iterable[DiffSegment]) -> str:
    return "".join(seg.text for seg in script if seg.op is not Operation.DELETE)


def has_changes(script: Iterable[DiffSegment]) -> bool:
    return any(seg.op is not Operation.EQUAL and seg.text for seg in script)


def stats(script: Iterable[DiffSegment]) -> DiffStats:
    counts = {op: 0 for op in Operation}
    for seg in script:
        counts[seg.op] += len(seg.text)
    return DiffStats(
        inserted=counts[Operation.INSERT],
        deleted=counts[Operation.DELETE],
        unchanged=counts[Operation.EQUAL],
    )
