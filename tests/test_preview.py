from __future__ import annotations

import html
from pathlib import Path

from codepad.buffer import BufferSnapshot
from codepad.preview import (
    SANDBOX_POLICY,
    DeviceWidth,
    RenderSurface,
    compose,
    compose_snapshot,
)


def test_compose_embeds_channels_literally() -> None:
    document = compose("<b>x</b>", "b{color:red}", "console.log(1)")
    page = document.html

    assert page.startswith("<!DOCTYPE html>")
    head, body = page.split("<body>")
    assert "<style>\nb{color:red}\n  </style>" in head
    assert "<b>x</b>" in body
    assert "<script>\nconsole.log(1)\n  </script>" in body
    assert body.index("<b>x</b>") < body.index("<script>")


def test_compose_does_not_escape_content() -> None:
    script = "if (a < b && c > d) { alert('<&>') }"

    document = compose("<div class=\"x\">&amp;</div>", "a::after{content:'{}'}", script)

    assert script in document.html
    assert "<div class=\"x\">&amp;</div>" in document.html
    assert "a::after{content:'{}'}" in document.html


def test_compose_snapshot_matches_compose() -> None:
    snapshot = BufferSnapshot(markup="<p>", style="p{}", script="f()")

    assert compose_snapshot(snapshot) == compose("<p>", "p{}", "f()")


def test_frame_is_sandboxed_without_same_origin() -> None:
    document = compose("<p>hi</p>", "", "localStorage.clear()")

    frame = document.to_frame(width="375px")

    assert frame.startswith(f'<iframe sandbox="{SANDBOX_POLICY}"')
    assert "allow-same-origin" not in frame
    assert 'style="width: 375px"' in frame
    srcdoc = frame.split('srcdoc="', 1)[1].rsplit('"></iframe>', 1)[0]
    assert html.unescape(srcdoc) == document.html


def test_surface_writes_and_resizes(tmp_path: Path) -> None:
    surface = RenderSurface(tmp_path / "out" / "preview.html")

    assert surface.resize(DeviceWidth.TABLET) is None

    path = surface.show(compose("<p>hi</p>", "", ""))
    assert 'style="width: 768px"' in path.read_text(encoding="utf-8")

    surface.resize("375px")
    assert 'style="width: 375px"' in path.read_text(encoding="utf-8")


def test_device_width_parse() -> None:
    assert DeviceWidth.parse("mobile") is DeviceWidth.MOBILE
    assert DeviceWidth.parse("100%") is DeviceWidth.DESKTOP
