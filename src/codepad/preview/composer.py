"""Composition of the three channels into one isolated preview document."""

from __future__ import annotations

import html
from dataclasses import dataclass

from codepad.buffer import BufferSnapshot
from codepad.runtime.telemetry import span

_DOCUMENT = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>
{style}
  </style>
</head>
<body>
{markup}
  <script>
{script}
  </script>
</body>
</html>
"""

_HOST_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{title}</title>
  <style>
    body {{ margin: 0; background: #f4f4f4; }}
    iframe {{ display: block; margin: 0 auto; height: 100vh; border: 0; background: #fff; }}
  </style>
</head>
<body>
{frame}
</body>
</html>
"""

# No allow-same-origin: the frame gets an opaque origin and cannot reach
# the host page's storage.
SANDBOX_POLICY = "allow-scripts allow-modals"


@dataclass(frozen=True, slots=True)
class PreviewDocument:
    markup: str
    style: str
    script: str
    html: str

    def to_frame(self, *, width: str = "100%", sandbox: str = SANDBOX_POLICY) -> str:
        """Wrap the document in a sandboxed ``iframe`` via ``srcdoc``.

        Only the attribute value is entity-encoded; the browser decodes it
        back to the literal document before rendering.
        """

        return (
            f'<iframe sandbox="{html.escape(sandbox)}" '
            f'style="width: {html.escape(width)}" '
            f'srcdoc="{html.escape(self.html, quote=True)}"></iframe>'
        )

    def host_page(self, *, width: str = "100%", title: str = "codepad preview") -> str:
        return _HOST_PAGE.format(title=html.escape(title), frame=self.to_frame(width=width))


def compose(markup: str, style: str, script: str) -> PreviewDocument:
    """Embed the channels literally: no escaping, no sanitisation."""

    with span("preview::compose", component="preview"):
        document = _DOCUMENT.format(style=style, markup=markup, script=script)
    return PreviewDocument(markup=markup, style=style, script=script, html=document)


def compose_snapshot(snapshot: BufferSnapshot) -> PreviewDocument:
    return compose(snapshot.markup, snapshot.style, snapshot.script)
