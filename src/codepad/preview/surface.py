"""File-backed render surface for composed previews."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from codepad.runtime.telemetry import span

from .composer import PreviewDocument


class DeviceWidth(str, Enum):
    DESKTOP = "100%"
    TABLET = "768px"
    MOBILE = "375px"

    @classmethod
    def parse(cls, name: str) -> "DeviceWidth":
        lowered = name.lower()
        for device in cls:
            if lowered in {device.name.lower(), device.value}:
                return device
        raise ValueError(f"Unknown device '{name}'")


class RenderSurface:
    """Writes the preview host page to ``path``.

    The surface keeps the last document so ``resize`` can re-emit it at a
    new width without recomposing.
    """

    def __init__(self, path: Path | str, *, width: str = DeviceWidth.DESKTOP.value) -> None:
        self.path = Path(path)
        self.width = width
        self._document: Optional[PreviewDocument] = None

    @property
    def document(self) -> Optional[PreviewDocument]:
        return self._document

    def show(self, document: PreviewDocument) -> Path:
        self._document = document
        return self._write()

    def resize(self, width: str | DeviceWidth) -> Optional[Path]:
        self.width = width.value if isinstance(width, DeviceWidth) else width
        if self._document is None:
            return None
        return self._write()

    def _write(self) -> Path:
        assert self._document is not None
        with span(
            "preview::write",
            component="preview",
            metadata={"path": str(self.path), "width": self.width},
        ):
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(self._document.host_page(width=self.width), encoding="utf-8")
        return self.path
