"""Three-buffer code playground core: buffers, versions, diffs, previews."""

__all__ = [
    "adapters",
    "buffer",
    "config",
    "diff",
    "formatting",
    "persistence",
    "preview",
    "runtime",
    "session",
]

__version__ = "0.1.0"
