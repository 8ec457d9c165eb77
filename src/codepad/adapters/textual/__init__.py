"""Textual host adapter; the runnable app lives in ``app``."""

from .controller import (
    TextAreaWidget,
    TextualPlaygroundAdapter,
    TextualUIHooks,
    widgets_by_channel,
)

__all__ = [
    "TextAreaWidget",
    "TextualPlaygroundAdapter",
    "TextualUIHooks",
    "widgets_by_channel",
]
