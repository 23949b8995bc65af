"""Renderer implementations for sheet music output formats."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Any, Final, cast

from scoreline.config import DEFAULT_CONFIG, RenderConfig
from scoreline.sheet_models import ScoreDocument

logger = logging.getLogger("scoreline.renderers")

#: (page background, staff card background, ink) per theme
THEME_COLOURS: Final[dict[str, tuple[str, str, str]]] = {
    "default": ("#f0f0f0", "#ffffff", "#222222"),
    "dark": ("#1e1e1e", "#2b2b2b", "#e6e6e6"),
    "forest": ("#e8f0e4", "#fbfdf9", "#1f3b1a"),
    "neutral": ("#f5f5f5", "#ffffff", "#444444"),
}


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class SheetRenderer(ABC):
    """Abstract sheet renderer."""

    def __init__(self, config: RenderConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(
        self,
        *,
        title: str,
        musicxml_bytes: bytes | None = None,
        score_document: ScoreDocument | None = None,
    ) -> str:
        """Render output into a file content string."""


class VerovioHtmlRenderer(SheetRenderer):
    """Engrave MusicXML with verovio and wrap the SVG pages in one HTML file."""

    # verovio units are tenths of a millimetre
    _PAGE_WIDTH: int = 2100
    _PAGE_HEIGHT: int = 2970
    _PAGE_MARGIN: int = 100

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(
        self,
        *,
        title: str,
        musicxml_bytes: bytes | None = None,
        score_document: ScoreDocument | None = None,
    ) -> str:
        if musicxml_bytes is None:
            raise ValueError("musicxml_bytes is required for HTML rendering.")

        svgs = self.render_svgs(musicxml_bytes)
        return self.build_html(title, svgs)

    def _scale(self) -> int:
        """verovio zoom percentage derived from the configured font size (14pt -> 40%)."""
        return max(10, round(self.config.font_size * 40 / 14))

    def render_svgs(self, musicxml_bytes: bytes) -> list[str]:
        """
        Engrave a MusicXML document into one SVG string per page.

        Raises:
            ValueError: If verovio rejects the MusicXML data.
        """
        import verovio

        tk = verovio.toolkit()
        tk.setOptions(
            {
                "pageWidth": self._PAGE_WIDTH,
                "pageHeight": self._PAGE_HEIGHT,
                "pageMarginTop": self._PAGE_MARGIN,
                "pageMarginBottom": self._PAGE_MARGIN,
                "pageMarginLeft": self._PAGE_MARGIN,
                "pageMarginRight": self._PAGE_MARGIN,
                "scale": self._scale(),
                "adjustPageHeight": True,
            }
        )

        if not tk.loadData(musicxml_bytes.decode("utf-8")):
            raise ValueError("verovio could not load the MusicXML data.")

        page_count: int = tk.getPageCount()
        logger.debug("verovio engraved %d page(s)", page_count)
        return [self._page_svg(tk, page_no) for page_no in range(1, page_count + 1)]

    def _page_svg(self, toolkit: Any, page_no: int) -> str:
        # older bindings only take positional arguments
        try:
            return cast(str, toolkit.renderToSVG(pageNo=page_no, xmlDeclaration=False))
        except TypeError:
            return cast(str, toolkit.renderToSVG(page_no))

    def build_html(self, title: str, svgs: list[str]) -> str:
        """Place each SVG page in a ``.page`` card; pages break when printed."""
        backdrop, card, ink = THEME_COLOURS[self.config.theme]
        title_safe = _escape_html(title)
        heading = f"<h1>{title_safe}</h1>\n" if title else ""
        pages = "\n".join(f'<div class="page">{svg}</div>' for svg in svgs)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8" />
<title>{title_safe}</title>
<style>
  body {{ margin: 0; padding: 1.5rem; background: {backdrop}; color: {ink};
          font-family: {self.config.font_family}; font-size: {self.config.font_size}pt; }}
  h1 {{ text-align: center; }}
  .page {{ background: {card}; max-width: {self.config.width}px; margin: 0 auto 2rem; padding: 1rem; }}
  .page svg {{ display: block; width: 100%; height: auto; }}
  @media print {{
    body {{ background: #fff; padding: 0; }}
    .page {{ max-width: 100%; margin: 0; page-break-after: always; }}
    .page:last-child {{ page-break-after: avoid; }}
  }}
</style>
</head>
<body>
{heading}{pages}
</body>
</html>"""


class VexflowMarkdownRenderer(SheetRenderer):
    """Render a score document into Markdown that draws itself with VexFlow."""

    @property
    def default_extension(self) -> str:
        return ".md"

    def render(
        self,
        *,
        title: str,
        musicxml_bytes: bytes | None = None,
        score_document: ScoreDocument | None = None,
    ) -> str:
        if score_document is None:
            raise ValueError("score_document is required for md-vexflow rendering.")

        payload = asdict(score_document)
        payload["width"] = self.config.width
        score_json = json.dumps(payload, separators=(",", ":")).replace("</", "<\\/")
        _, card, ink = THEME_COLOURS[self.config.theme]

        return f"""# {_escape_html(title)}

Rendered with VexFlow. Open this file in a Markdown viewer that runs embedded scripts.

<style>
  .scoreline-measure {{ background: {card}; color: {ink}; margin-bottom: 1rem; overflow-x: auto; }}
</style>

<div id="scoreline-score"></div>
<script id="scoreline-score-data" type="application/json">{score_json}</script>
<script type="module">
  import {{ Accidental, Formatter, Renderer, Stave, StaveNote, Voice }}
    from "https://cdn.jsdelivr.net/npm/vexflow@4.2.3/build/esm/entry/vexflow.js";

  const host = document.getElementById("scoreline-score");
  const score = JSON.parse(document.getElementById("scoreline-score-data").textContent);
  const width = score.width || 800;

  score.measures.forEach((measure) => {{
    const box = document.createElement("div");
    box.className = "scoreline-measure";
    host.appendChild(box);

    const renderer = new Renderer(box, Renderer.Backends.SVG);
    renderer.resize(width, 140);
    const context = renderer.getContext();

    const stave = new Stave(10, 20, width - 20);
    stave.addClef(score.clef);
    if (measure.number === 1) {{
      stave.addTimeSignature(score.time_signature);
    }}
    stave.setContext(context).draw();

    const notes = measure.notes.map((entry) => {{
      const note = new StaveNote({{ clef: score.clef, keys: entry.keys, duration: entry.duration }});
      entry.accidentals.forEach((symbol, index) => {{
        if (symbol) {{
          note.addModifier(new Accidental(symbol), index);
        }}
      }});
      return note;
    }});

    const voice = new Voice({{ num_beats: score.beats, beat_value: score.beat_value }});
    voice.setMode(Voice.Mode.SOFT);
    voice.addTickables(notes);
    new Formatter().joinVoices([voice]).format([voice], width - 100);
    voice.draw(context, stave);
  }});
</script>
"""
