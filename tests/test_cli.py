"""Tests for the scoreline command line."""

from pathlib import Path

from click.testing import CliRunner

from scoreline import __version__
from scoreline.cli import main


def _write(tmp_path: Path, text: str, name: str = "song.score") -> str:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_check_valid_file(tmp_path: Path) -> None:
    path = _write(tmp_path, "clef: treble\ntime: 4/4\nC4 q D4 q E4 h | F4 w")
    result = CliRunner().invoke(main, ["check", path])
    assert result.exit_code == 0
    assert "Clef     : treble" in result.output
    assert "Measures : 2  (4 notes/rests)" in result.output
    assert "OK" in result.output


def test_check_reports_errors(tmp_path: Path) -> None:
    path = _write(tmp_path, "C4 q\nH4 q")
    result = CliRunner().invoke(main, ["check", path])
    assert result.exit_code == 1
    assert "2:1: Invalid note name: H" in result.output


def test_check_max_errors(tmp_path: Path) -> None:
    path = _write(tmp_path, "H4 q X4 q Y4 q")
    result = CliRunner().invoke(main, ["check", path, "--max-errors", "1"])
    assert result.exit_code == 1
    assert "1 error(s):" in result.output


def test_check_lenient_parses_past_lexical_errors(tmp_path: Path) -> None:
    path = _write(tmp_path, "C4 q @ D4 q")
    result = CliRunner().invoke(main, ["check", path, "--lenient"])
    assert result.exit_code == 1
    assert "Measures : 1  (2 notes/rests)" in result.output
    assert "Unexpected character: '@'" in result.output


def test_tokens(tmp_path: Path) -> None:
    path = _write(tmp_path, "F#5 h")
    result = CliRunner().invoke(main, ["tokens", path])
    assert result.exit_code == 0
    assert "ACCIDENTAL" in result.output
    assert "'#'" in result.output
    assert "WHITESPACE" not in result.output


def test_tokens_lexical_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "C4 q ~")
    result = CliRunner().invoke(main, ["tokens", path])
    assert result.exit_code == 1
    assert "Unexpected character: '~'" in result.output


def test_render_md_vexflow(tmp_path: Path) -> None:
    path = _write(tmp_path, "clef: bass\nC3 h D3 h", name="my_song.score")
    result = CliRunner().invoke(main, ["render", path, "--format", "md-vexflow", "--theme", "forest"])
    assert result.exit_code == 0
    output = tmp_path / "my_song.md"
    assert output.exists()
    assert output.read_text(encoding="utf-8").startswith("# my song")


def test_render_reports_parse_errors(tmp_path: Path) -> None:
    path = _write(tmp_path, "clef: soprano")
    result = CliRunner().invoke(main, ["render", path, "--format", "md-vexflow"])
    assert result.exit_code == 1
    assert "Expected clef type after colon" in result.output
