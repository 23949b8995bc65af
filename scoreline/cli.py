"""scoreline CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from scoreline import __version__
from scoreline.errors import NotationError
from scoreline.lexer import tokenize_input
from scoreline.parser import parse_input
from scoreline.score_models import LexerOptions, ParserError, ParserOptions


def _read_notation(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _echo_diagnostics(errors: list[ParserError]) -> None:
    for error in errors:
        click.echo(f"  {error}", err=True)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="scoreline")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """scoreline: text notation parser and sheet music renderer."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── tokens subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("notation_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option("--keep-whitespace", is_flag=True, help="Also list WHITESPACE and NEWLINE tokens.")
def tokens(notation_file: str, keep_whitespace: bool) -> None:
    """
    List the tokens of NOTATION_FILE, one per line.

    \b
    Example:
      scoreline tokens song.score
    """
    result = tokenize_input(
        _read_notation(notation_file),
        LexerOptions(ignore_whitespace=not keep_whitespace),
    )
    for token in result.tokens:
        click.echo(f"{token.position}\t{token.kind.value:<10} {token.text!r}")

    if result.errors:
        click.echo(f"{len(result.errors)} lexical error(s):", err=True)
        _echo_diagnostics(result.errors)
        sys.exit(1)


# ── check subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("notation_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option("--lenient", is_flag=True, help="Parse even when the text has lexical errors.")
@click.option("--partial", is_flag=True, help="Keep parsing after a malformed element.")
@click.option(
    "--max-errors",
    type=click.IntRange(1, None),
    default=10,
    show_default=True,
    help="Stop after this many errors.",
)
def check(notation_file: str, lenient: bool, partial: bool, max_errors: int) -> None:
    """
    Parse NOTATION_FILE and report its structure or its errors.

    \b
    Examples:
      scoreline check song.score
      scoreline check song.score --partial --max-errors 50
    """
    options = ParserOptions(strict=not lenient, allow_partial_parsing=partial, max_errors=max_errors)
    result = parse_input(_read_notation(notation_file), options)

    score = result.score
    if score is not None:
        clef = score.clef.type.value if score.clef else "-"
        time_signature = str(score.time_signature) if score.time_signature else "-"
        elements = sum(len(measure.elements) for measure in score.measures)
        click.echo(f"  Clef     : {clef}")
        click.echo(f"  Time     : {time_signature}")
        click.echo(f"  Measures : {len(score.measures)}  ({elements} notes/rests)")

    if not result.success:
        click.echo(f"{len(result.errors)} error(s):", err=True)
        _echo_diagnostics(result.errors)
        sys.exit(1)

    click.echo("OK")


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("notation_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file path. Defaults to extension based on --format.",
)
@click.option(
    "--title",
    default=None,
    metavar="TEXT",
    help="Title shown in the output header. Defaults to the file name stem.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "md-vexflow"], case_sensitive=False),
    default="html",
    show_default=True,
    help="Self-contained HTML (verovio) or Markdown with a VexFlow script.",
)
@click.option(
    "--theme",
    type=click.Choice(["default", "dark", "forest", "neutral"]),
    default="default",
    show_default=True,
)
@click.option("--width", type=click.IntRange(100, None), default=800, show_default=True)
def render(
    notation_file: str,
    output: str | None,
    title: str | None,
    output_format: str,
    theme: str,
    width: int,
) -> None:
    """
    Render NOTATION_FILE as sheet music.

    \b
    Examples:
      scoreline render song.score
      scoreline render song.score --format md-vexflow -o song.md --title "My Song"
    """
    from scoreline.config import ConfigManager
    from scoreline.sheet_exporter import SheetExporter

    notation_path = Path(notation_file)
    resolved_title = title if title is not None else notation_path.stem.replace("_", " ")
    normalized_format = output_format.lower()
    default_suffix = ".html" if normalized_format == "html" else ".md"
    resolved_output = output if output is not None else str(notation_path.with_suffix(default_suffix))

    config = ConfigManager({"theme": theme, "width": width}).get_config()
    exporter = SheetExporter(title=resolved_title, output_format=normalized_format, config=config)
    try:
        exporter.export(notation_file, resolved_output)
    except NotationError as exc:
        click.echo("  ERROR: Could not parse notation:", err=True)
        _echo_diagnostics(exc.diagnostics)
        sys.exit(1)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file: {exc}", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"  ERROR: Could not render score: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Wrote '{resolved_output}'.")
