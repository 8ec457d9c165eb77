from __future__ import annotations

import random
import time

import pytest

from codepad.diff import (
    HTML_MARKERS,
    PLAIN_MARKERS,
    DiffMarkers,
    DiffSegment,
    Operation,
    cleanup_semantic,
    diff,
    has_changes,
    new_text,
    old_text,
    render,
    stats,
)


def seg(op: Operation, text: str) -> DiffSegment:
    return DiffSegment(op, text)


@pytest.mark.parametrize(
    "text",
    ["", "x", "<p>hi</p>", "body {\n  color: red;\n}\n", "console.log('é')"],
)
def test_identical_inputs_yield_single_equal_segment(text: str) -> None:
    assert diff(text, text) == (seg(Operation.EQUAL, text),)


@pytest.mark.parametrize(
    ("old", "new"),
    [
        ("", "abc"),
        ("abc", ""),
        ("function f(){}", "function g() {\n  return 1;\n}"),
        ("a\nb\nc\nd", "a\nB\nc\nD"),
        ("naïve café", "naive cafe!"),
        ("the quick brown fox", "a quick red fox jumps"),
        ("div { margin: 0 }", "div { margin: 0; padding: 4px }"),
    ],
)
def test_script_reconstructs_both_inputs(old: str, new: str) -> None:
    script = diff(old, new)

    assert old_text(script) == old
    assert new_text(script) == new
    assert has_changes(script)


def test_insertion_inside_markup() -> None:
    script = diff("<p>hi</p>", "<p>hi there</p>")

    assert script == (
        seg(Operation.EQUAL, "<p>hi"),
        seg(Operation.INSERT, " there"),
        seg(Operation.EQUAL, "</p>"),
    )


def test_insertion_lands_on_word_boundary() -> None:
    script = diff("hello world", "hello there world")

    assert render(script, PLAIN_MARKERS) == "hello {+there +}world"


def test_replaced_word_keeps_shared_characters() -> None:
    script = diff("cat", "cart")

    assert script == (
        seg(Operation.EQUAL, "ca"),
        seg(Operation.INSERT, "r"),
        seg(Operation.EQUAL, "t"),
    )


def test_separate_edits_stay_separate() -> None:
    script = diff("a b c", "a x c")

    assert script == (
        seg(Operation.EQUAL, "a "),
        seg(Operation.DELETE, "b"),
        seg(Operation.INSERT, "x"),
        seg(Operation.EQUAL, " c"),
    )


def test_diff_is_deterministic() -> None:
    old = "let total = items.map(x => x * 2);"
    new = "const total = items.filter(Boolean).map((x) => x * 3);"

    assert diff(old, new) == diff(old, new)


def test_semantic_cleanup_absorbs_small_equality() -> None:
    segments = [
        seg(Operation.DELETE, "abc"),
        seg(Operation.EQUAL, "x"),
        seg(Operation.INSERT, "def"),
    ]

    assert cleanup_semantic(segments) == [
        seg(Operation.DELETE, "abcx"),
        seg(Operation.INSERT, "xdef"),
    ]


def test_semantic_cleanup_keeps_large_equality() -> None:
    segments = [
        seg(Operation.DELETE, "a"),
        seg(Operation.EQUAL, "shared text"),
        seg(Operation.INSERT, "b"),
    ]

    assert cleanup_semantic(segments) == segments


def test_render_wraps_edits_in_markers() -> None:
    script = (
        seg(Operation.EQUAL, "a "),
        seg(Operation.DELETE, "b"),
        seg(Operation.INSERT, "x"),
        seg(Operation.EQUAL, " c"),
    )

    assert render(script) == "a <del>b</del><ins>x</ins> c"
    assert render(script, HTML_MARKERS) == render(script)
    custom = DiffMarkers("[[", "]]", "((", "))")
    assert render(script, custom) == "a ((b))[[x]] c"


def test_stats_counts_characters() -> None:
    summary = stats(diff("hello world", "hello brave new world"))

    assert summary.inserted == len("brave new ")
    assert summary.deleted == 0
    assert summary.unchanged == len("hello world")
    assert summary.changed is True




_ALPHABET = "ab \n<>{}();"


def random_text(rng: random.Random, limit: int) -> str:
    return "".join(rng.choice(_ALPHABET) for _ in range(rng.randint(0, limit)))


def test_random_pairs_reconstruct_both_inputs() -> None:
    rng = random.Random(20240601)

    for _ in range(500):
        old = random_text(rng, 40)
        new = random_text(rng, 40)
        script = diff(old, new)

        assert old_text(script) == old
        assert new_text(script) == new
        assert has_changes(script) is (old != new)


def random_words(rng: random.Random, count: int) -> str:
    words = ["div", "span", "color", "margin", "return", "const", "let", "x", "=", ";"]
    return " ".join(rng.choice(words) for _ in range(count))


def test_large_dissimilar_inputs_finish_quickly() -> None:
    rng = random.Random(7)
    old = random_words(rng, 4000)
    new = random_words(rng, 4000)

    started = time.perf_counter()
    script = diff(old, new, timeout=0.5)
    elapsed = time.perf_counter() - started

    assert elapsed < 10.0
    assert old_text(script) == old
    assert new_text(script) == new
