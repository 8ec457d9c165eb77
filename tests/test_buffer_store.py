from __future__ import annotations

from typing import Callable, List

import pytest

from codepad.buffer import (
    CHANNELS,
    BufferBinding,
    BufferChannelError,
    BufferSnapshot,
    BufferStore,
    Channel,
)


class FakeWidget:
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.callbacks: List[Callable[[], None]] = []
        self.writes: List[str] = []

    def get_value(self) -> str:
        return self.text

    def set_value(self, text: str) -> None:
        self.text = text
        self.writes.append(text)
        for callback in self.callbacks:
            callback()

    def on_change(self, callback: Callable[[], None]) -> None:
        self.callbacks.append(callback)

    def type(self, text: str) -> None:
        self.text = text
        for callback in self.callbacks:
            callback()


def test_store_starts_empty() -> None:
    store = BufferStore()

    assert all(store.get(channel) == "" for channel in CHANNELS)
    assert store.snapshot() == BufferSnapshot()


def test_set_notifies_listener_before_returning() -> None:
    seen: List[BufferSnapshot] = []
    store = BufferStore(listener=seen.append)

    store.set(Channel.STYLE, "b{color:red}")

    assert seen == [BufferSnapshot(style="b{color:red}")]
    assert store.get("style") == "b{color:red}"
    assert store.revision(Channel.STYLE) == 1


def test_set_accepts_empty_text() -> None:
    seen: List[BufferSnapshot] = []
    store = BufferStore(listener=seen.append)
    store.set(Channel.MARKUP, "<p>x</p>")

    store.set(Channel.MARKUP, "")

    assert store.get(Channel.MARKUP) == ""
    assert len(seen) == 2


def test_load_does_not_notify_listener() -> None:
    seen: List[BufferSnapshot] = []
    store = BufferStore(listener=seen.append)

    store.load(BufferSnapshot(markup="<b>x</b>"))

    assert store.get(Channel.MARKUP) == "<b>x</b>"
    assert seen == []


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("markup", Channel.MARKUP),
        ("css", Channel.STYLE),
        ("jsCode", Channel.SCRIPT),
        ("HTML", Channel.MARKUP),
    ],
)
def test_channel_parse_accepts_aliases(name: str, expected: Channel) -> None:
    assert Channel.parse(name) is expected


def test_unknown_channel_raises() -> None:
    store = BufferStore()

    with pytest.raises(BufferChannelError) as excinfo:
        store.set("python", "print(1)")

    assert excinfo.value.channel == "python"


def test_channel_wire_names() -> None:
    assert [channel.storage_key for channel in CHANNELS] == ["htmlCode", "cssCode", "jsCode"]
    assert [channel.field for channel in CHANNELS] == ["html", "css", "js"]


def test_snapshot_replace_returns_new_snapshot() -> None:
    snapshot = BufferSnapshot(markup="a")

    updated = snapshot.replace(Channel.SCRIPT, "b()")

    assert snapshot.script == ""
    assert updated == BufferSnapshot(markup="a", script="b()")


def test_binding_pulls_widget_edits_into_store() -> None:
    store = BufferStore()
    widgets = {channel: FakeWidget() for channel in CHANNELS}
    binding = BufferBinding(store=store, widgets=widgets)
    binding.attach()

    widgets[Channel.SCRIPT].type("console.log(1)")

    assert store.get(Channel.SCRIPT) == "console.log(1)"


def test_binding_push_does_not_echo_back() -> None:
    seen: List[BufferSnapshot] = []
    store = BufferStore(listener=seen.append)
    widgets = {channel: FakeWidget() for channel in CHANNELS}
    binding = BufferBinding(store=store, widgets=widgets)
    binding.attach()

    binding.push(BufferSnapshot(markup="<p>restored</p>"))

    assert widgets[Channel.MARKUP].text == "<p>restored</p>"
    assert widgets[Channel.STYLE].writes == []
    assert seen == []


def test_apply_notifies_once_and_bumps_changed_channels() -> None:
    seen: List[BufferSnapshot] = []
    store = BufferStore(listener=seen.append)
    store.load(BufferSnapshot(markup="a", style="b"))

    changed = store.apply(BufferSnapshot(markup="A", style="b", script="C"))

    assert changed == (Channel.MARKUP, Channel.SCRIPT)
    assert seen == [BufferSnapshot(markup="A", style="b", script="C")]
    assert store.revision(Channel.MARKUP) == 1
    assert store.revision(Channel.STYLE) == 0


def test_apply_leaves_memory_untouched_when_listener_fails() -> None:
    def refuse(snapshot: BufferSnapshot) -> None:
        raise RuntimeError("disk full")

    store = BufferStore(listener=refuse)
    store.load(BufferSnapshot(markup="a"))

    with pytest.raises(RuntimeError):
        store.apply(BufferSnapshot(markup="A", script="C"))

    assert store.snapshot() == BufferSnapshot(markup="a")
    assert store.revision(Channel.MARKUP) == 0


def test_apply_without_differences_is_silent() -> None:
    seen: List[BufferSnapshot] = []
    store = BufferStore(listener=seen.append)

    assert store.apply(BufferSnapshot()) == ()
    assert seen == []
