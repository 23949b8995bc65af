"""Unit tests for SheetExporter and the Score converters."""

from pathlib import Path

import pytest

from scoreline.config import RenderConfig
from scoreline.errors import NotationError
from scoreline.sheet_exporter import SheetExporter, score_to_document
from scoreline.sheet_models import ScoreDocument
from scoreline.sheet_renderers import VerovioHtmlRenderer

SONG = "clef: bass\ntime: 3/4\nF#3 q r h | Bb2 w"


def _document() -> ScoreDocument:
    exporter = SheetExporter(output_format="md-vexflow")
    return score_to_document(exporter.parse(SONG), title="Song")


# ---------------------------------------------------------------------------
# HTML page assembly (no verovio needed)
# ---------------------------------------------------------------------------


def test_build_html_title_in_title_tag() -> None:
    html = VerovioHtmlRenderer().build_html("My Song", ["<svg></svg>"])
    assert "<title>My Song</title>" in html


def test_build_html_title_in_h1() -> None:
    html = VerovioHtmlRenderer().build_html("My Song", ["<svg></svg>"])
    assert "<h1>My Song</h1>" in html


def test_build_html_empty_title_no_h1() -> None:
    html = VerovioHtmlRenderer().build_html("", ["<svg></svg>"])
    assert "<h1>" not in html


def test_build_html_escapes_title() -> None:
    html = VerovioHtmlRenderer().build_html("<Fur> & Feathers", ["<svg></svg>"])
    assert "&lt;Fur&gt; &amp; Feathers" in html


def test_build_html_one_div_per_page() -> None:
    html = VerovioHtmlRenderer().build_html("T", ["<svg>p1</svg>", "<svg>p2</svg>", "<svg>p3</svg>"])
    assert html.count('<div class="page">') == 3
    assert "<svg>p2</svg>" in html


def test_build_html_print_styles() -> None:
    html = VerovioHtmlRenderer().build_html("T", ["<svg></svg>"])
    assert "@media print" in html
    assert "page-break-after: always" in html


def test_build_html_uses_config() -> None:
    config = RenderConfig(theme="dark", width=1000, font_family="Georgia, serif")
    html = VerovioHtmlRenderer(config).build_html("T", ["<svg></svg>"])
    assert "max-width: 1000px" in html
    assert "Georgia, serif" in html
    assert "#1e1e1e" in html


def test_build_html_is_valid_html_skeleton() -> None:
    html = VerovioHtmlRenderer().build_html("Skeleton", ["<svg></svg>"])
    assert html.startswith("<!DOCTYPE html>")
    assert "<body>" in html
    assert html.endswith("</html>")


# ---------------------------------------------------------------------------
# Exporter
# ---------------------------------------------------------------------------


def test_unsupported_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported output format 'pdf'"):
        SheetExporter(output_format="pdf")


def test_format_is_normalized() -> None:
    assert SheetExporter(output_format=" MD-VexFlow ").output_format == "md-vexflow"


def test_parse_sets_title_metadata() -> None:
    score = SheetExporter(title="Etude").parse("C4 q")
    assert score.metadata.title == "Etude"


def test_parse_raises_with_diagnostics() -> None:
    with pytest.raises(NotationError) as excinfo:
        SheetExporter().parse("C4 q H4 q")
    assert [d.message for d in excinfo.value.diagnostics] == ["Invalid note name: H"]


def test_document_header() -> None:
    document = _document()
    assert document.title == "Song"
    assert document.clef == "bass"
    assert (document.time_signature, document.beats, document.beat_value) == ("3/4", 3, 4)
    assert [m.number for m in document.measures] == [1, 2]


def test_document_notes_and_rests() -> None:
    first, second = _document().measures
    sharp, rest = first.notes
    assert sharp.keys == ["f#/3"]
    assert sharp.accidentals == ["#"]
    assert sharp.duration == "q"
    assert rest.keys == ["d/3"]
    assert rest.duration == "hr"
    assert second.notes[0].keys == ["bb/2"]
    assert second.notes[0].accidentals == ["b"]
    assert second.notes[0].duration == "w"


def test_document_defaults_without_declarations() -> None:
    exporter = SheetExporter()
    document = score_to_document(exporter.parse("C5 e D5 s"))
    assert document.clef == "treble"
    assert document.time_signature == "4/4"
    assert [n.duration for n in document.measures[0].notes] == ["8", "16"]


def test_export_md_vexflow(tmp_path: Path) -> None:
    source = tmp_path / "song.score"
    source.write_text(SONG, encoding="utf-8")
    out = tmp_path / "song.md"

    SheetExporter(title="Song", output_format="md-vexflow").export(str(source), str(out))

    content = out.read_text(encoding="utf-8")
    assert content.startswith("# Song")
    assert '"clef":"bass"' in content


# ---------------------------------------------------------------------------
# Integration tests, need music21 + verovio installed.
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_score_to_music21_structure() -> None:
    from scoreline.sheet_exporter import score_to_music21

    m21_score = score_to_music21(SheetExporter().parse(SONG))
    part = m21_score.parts[0]
    measures = list(part.getElementsByClass("Measure"))
    assert len(measures) == 2
    pitches = [n.nameWithOctave for n in part.flatten().notes]
    assert pitches == ["F#3", "B-2"]
    assert part.flatten().getElementsByClass("TimeSignature")[0].ratioString == "3/4"


@pytest.mark.integration
def test_export_html(tmp_path: Path) -> None:
    source = tmp_path / "song.score"
    source.write_text(SONG, encoding="utf-8")
    out = tmp_path / "song.html"

    SheetExporter(title="Integration Test").export(str(source), str(out))

    content = out.read_text(encoding="utf-8")
    assert "<!DOCTYPE html>" in content
    assert "<svg" in content
