"""Session configuration resolved from ``CODEPAD_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

from codepad.persistence.archive import DEFAULT_ARCHIVE_KEY

ENV_PREFIX = "CODEPAD_"
DEFAULT_HOME = Path.home() / ".codepad"


def _env_int(env: Mapping[str, str], key: str, fallback: int) -> int:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class PlaygroundConfig:
    """Where a session keeps its state and how it presents it.

    Attributes:
        store_path: sqlite file holding buffers and the version archive.
            ``":memory:"`` keeps everything in process memory.
        archive_key: durable key the version archive is stored under.
        preview_path: HTML file the render surface writes to.
        device: initial preview width preset (desktop, tablet, mobile).
        tab_width: indentation used by the bundled formatter.
    """

    store_path: Path = field(default_factory=lambda: DEFAULT_HOME / "codepad.db")
    archive_key: str = DEFAULT_ARCHIVE_KEY
    preview_path: Path = field(default_factory=lambda: DEFAULT_HOME / "preview.html")
    device: str = "desktop"
    tab_width: int = 2

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "PlaygroundConfig":
        source = os.environ if env is None else env
        config = cls()
        store = source.get(f"{ENV_PREFIX}STORE")
        preview = source.get(f"{ENV_PREFIX}PREVIEW_PATH")
        return replace(
            config,
            store_path=Path(store).expanduser() if store else config.store_path,
            archive_key=source.get(f"{ENV_PREFIX}ARCHIVE_KEY") or config.archive_key,
            preview_path=Path(preview).expanduser() if preview else config.preview_path,
            device=source.get(f"{ENV_PREFIX}DEVICE") or config.device,
            tab_width=_env_int(source, "TAB_WIDTH", config.tab_width),
        )

    @property
    def in_memory(self) -> bool:
        return str(self.store_path) == ":memory:"
