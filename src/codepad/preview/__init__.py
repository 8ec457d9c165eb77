"""Preview composition and the render surface it is shown on."""

from .composer import SANDBOX_POLICY, PreviewDocument, compose, compose_snapshot
from .surface import DeviceWidth, RenderSurface

__all__ = [
    "SANDBOX_POLICY",
    "PreviewDocument",
    "compose",
    "compose_snapshot",
    "DeviceWidth",
    "RenderSurface",
]
