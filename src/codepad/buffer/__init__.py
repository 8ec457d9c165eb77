"""Buffer store, channel identities, and widget sync types."""

from .channels import CHANNELS, BufferChannelError, Channel
from .store import BufferSnapshot, BufferStore, StoreListener
from .sync import BufferBinding, EditorWidget

__all__ = [
    "CHANNELS",
    "Channel",
    "BufferChannelError",
    "BufferSnapshot",
    "BufferStore",
    "StoreListener",
    "BufferBinding",
    "EditorWidget",
]
