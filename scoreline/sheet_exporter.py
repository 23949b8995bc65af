"""SheetExporter: renders notation text to HTML or Markdown sheet music."""

from __future__ import annotations

import logging
from typing import Any, Final

from scoreline.config import DEFAULT_CONFIG, RenderConfig
from scoreline.errors import NotationError
from scoreline.parser import parse_input
from scoreline.score_models import ClefType, Note, ParserOptions, Rest, Score
from scoreline.sheet_models import ScoreDocument, VexflowMeasure, VexflowNote
from scoreline.sheet_renderers import (
    SheetRenderer,
    VerovioHtmlRenderer,
    VexflowMarkdownRenderer,
)

logger = logging.getLogger("scoreline.exporter")

SUPPORTED_FORMATS: Final[set[str]] = {"html", "md-vexflow"}

_VEXFLOW_DURATIONS: Final[dict[str, str]] = {
    "w": "w",
    "h": "h",
    "q": "q",
    "e": "8",
    "s": "16",
}

#: Staff-centre key used to place rests for each clef.
_REST_KEYS: Final[dict[ClefType, str]] = {
    ClefType.TREBLE: "b/4",
    ClefType.BASS: "d/3",
    ClefType.ALTO: "c/4",
    ClefType.TENOR: "a/3",
}


def score_to_music21(score: Score) -> Any:
    """Build a single-part music21 score from a parsed Score."""
    from music21 import clef, metadata, meter, note, stream

    clef_classes = {
        ClefType.TREBLE: clef.TrebleClef,
        ClefType.BASS: clef.BassClef,
        ClefType.ALTO: clef.AltoClef,
        ClefType.TENOR: clef.TenorClef,
    }

    part = stream.Part()
    for measure in score.measures:
        m21_measure = stream.Measure(number=measure.number)
        if measure.number == 1:
            if score.clef is not None:
                m21_measure.insert(0, clef_classes[score.clef.type]())
            if score.time_signature is not None:
                m21_measure.insert(0, meter.TimeSignature(str(score.time_signature)))

        for element in measure.elements:
            quarter_length = element.duration.quarter_length
            if isinstance(element, Rest):
                m21_measure.append(note.Rest(quarterLength=quarter_length))
                continue
            # music21 spells flats with "-"
            name = str(element.pitch).replace("b", "-")
            m21_measure.append(note.Note(name, quarterLength=quarter_length))
        part.append(m21_measure)

    m21_score = stream.Score()
    m21_score.insert(0, part)
    m21_score.metadata = metadata.Metadata()
    if score.metadata.title:
        m21_score.metadata.title = score.metadata.title
    if score.metadata.composer:
        m21_score.metadata.composer = score.metadata.composer
    return m21_score


def score_to_document(score: Score, title: str = "") -> ScoreDocument:
    """Convert a parsed Score into the VexFlow payload."""
    clef_type = score.clef.type if score.clef is not None else ClefType.TREBLE
    if score.time_signature is not None:
        beats = score.time_signature.numerator
        beat_value = score.time_signature.denominator
    else:
        beats, beat_value = 4, 4

    measures = [
        VexflowMeasure(
            number=measure.number,
            notes=[_element_to_vexflow(element, clef_type) for element in measure.elements],
        )
        for measure in score.measures
    ]
    return ScoreDocument(
        title=title,
        clef=clef_type.value,
        time_signature=f"{beats}/{beat_value}",
        beats=beats,
        beat_value=beat_value,
        measures=measures,
    )


def _element_to_vexflow(element: Note | Rest, clef_type: ClefType) -> VexflowNote:
    duration = _VEXFLOW_DURATIONS[element.duration.value]
    if isinstance(element, Rest):
        return VexflowNote(keys=[_REST_KEYS[clef_type]], duration=f"{duration}r", accidentals=[None])

    pitch = element.pitch
    accidental = pitch.accidental.value if pitch.accidental else None
    key = f"{pitch.note.value.lower()}{accidental or ''}/{pitch.octave}"
    return VexflowNote(keys=[key], duration=duration, accidentals=[accidental])


class SheetExporter:
    """
    Parse notation text and write it out through a pluggable renderer.

    Supported formats:
    - ``html``: Score -> music21 -> MusicXML -> verovio -> inline SVG in one HTML file.
    - ``md-vexflow``: Markdown with an embedded VexFlow script drawing the score.
    """

    def __init__(
        self,
        title: str = "",
        output_format: str = "html",
        config: RenderConfig = DEFAULT_CONFIG,
        parser_options: ParserOptions | None = None,
    ) -> None:
        self.title = title
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.config = config
        self.parser_options = parser_options or ParserOptions()
        self.renderer = self._build_renderer(normalized)

    def _build_renderer(self, output_format: str) -> SheetRenderer:
        if output_format == "html":
            return VerovioHtmlRenderer(self.config)
        return VexflowMarkdownRenderer(self.config)

    def parse(self, text: str) -> Score:
        """
        Parse notation text, treating any diagnostic as fatal.

        Raises:
            NotationError: If the text has lexical or parse errors.
        """
        result = parse_input(text, self.parser_options)
        if not result.success or result.score is None:
            raise NotationError("Notation could not be parsed", result.errors)
        if self.title:
            result.score.metadata.title = self.title
        return result.score

    def _score_to_musicxml_bytes(self, score: Score) -> bytes:
        from music21.musicxml.m21ToXml import GeneralObjectExporter

        return GeneralObjectExporter(score_to_music21(score)).parse()

    def render_text(self, text: str) -> str:
        """Parse *text* and return the rendered file content."""
        score = self.parse(text)
        logger.debug("Rendering %d measure(s) as %s", len(score.measures), self.output_format)

        if self.output_format == "html":
            return self.renderer.render(
                title=self.title,
                musicxml_bytes=self._score_to_musicxml_bytes(score),
            )
        return self.renderer.render(
            title=self.title,
            score_document=score_to_document(score, self.title),
        )

    def export(self, notation_path: str, output_path: str) -> None:
        """
        Render a notation file into the selected sheet format and write it to disk.

        Raises:
            NotationError: If the notation has errors.
            ValueError: If rendering fails.
            OSError: If a file cannot be read or written.
        """
        with open(notation_path, encoding="utf-8") as fh:
            content = self.render_text(fh.read())

        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(content)
