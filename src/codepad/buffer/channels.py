"""The three source channels tracked by a playground session."""

from __future__ import annotations

from enum import Enum


class BufferChannelError(KeyError):
    """Raised when a caller names a channel that does not exist."""

    def __init__(self, message: str, *, channel: str | None = None) -> None:
        super().__init__(message)
        self.channel = channel

    def __str__(self) -> str:
        return str(self.args[0])


class Channel(str, Enum):
    """Source kinds; identity is fixed for the lifetime of a session."""

    MARKUP = "markup"
    STYLE = "style"
    SCRIPT = "script"

    @property
    def storage_key(self) -> str:
        """Durable key holding the channel's latest content."""
        return _STORAGE_KEYS[self]

    @property
    def field(self) -> str:
        """Field name used for the channel inside archived versions."""
        return _FIELDS[self]

    @property
    def label(self) -> str:
        return self.field.upper()

    @property
    def language(self) -> str:
        return _LANGUAGES[self]

    @classmethod
    def parse(cls, name: "str | Channel") -> "Channel":
        if isinstance(name, Channel):
            return name
        lowered = str(name).lower()
        for channel in cls:
            if lowered in {channel.value, channel.field, channel.storage_key.lower()}:
                return channel
        raise BufferChannelError(f"Unknown channel '{name}'", channel=str(name))


_STORAGE_KEYS = {
    Channel.MARKUP: "htmlCode",
    Channel.STYLE: "cssCode",
    Channel.SCRIPT: "jsCode",
}

_FIELDS = {
    Channel.MARKUP: "html",
    Channel.STYLE: "css",
    Channel.SCRIPT: "js",
}

_LANGUAGES = {
    Channel.MARKUP: "html",
    Channel.STYLE: "css",
    Channel.SCRIPT: "javascript",
}

CHANNELS: tuple[Channel, ...] = (Channel.MARKUP, Channel.STYLE, Channel.SCRIPT)
