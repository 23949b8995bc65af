"""Static grammar tables: keyword sets, lexical patterns and expected-token contexts.

These tables document the notation and feed diagnostics; the parser is a
hand-written recursive-descent parser and does not consume them as input.

Notation summary::

    score           := { clef-decl | time-decl | measure-element | BAR }
    clef-decl       := "clef" ":" clef-type
    time-decl       := "time" ":" INT "/" INT
    measure-element := note | rest
    note            := NOTE-LETTER [ accidental ] INT duration
    rest            := "r" duration
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from scoreline.score_models import TokenKind

# ── Keyword tables ──────────────────────────────────────────────────────────

NOTE_NAMES: Final[frozenset[str]] = frozenset("CDEFGAB")
DURATIONS: Final[frozenset[str]] = frozenset("whqes")
CLEF_NAMES: Final[frozenset[str]] = frozenset({"treble", "bass", "alto", "tenor"})
ACCIDENTALS: Final[frozenset[str]] = frozenset("#b")
REST_WORDS: Final[frozenset[str]] = frozenset({"r"})

CLEF_KEYWORD: Final = "clef"
TIME_KEYWORD: Final = "time"

GRAMMAR_PATTERNS: Final[dict[str, re.Pattern[str]]] = {
    "note_name": re.compile(r"^[A-G]$"),
    "accidental": re.compile(r"^[#b]$"),
    "octave": re.compile(r"^[0-9]$"),
    "duration": re.compile(r"^[whqes]$"),
    "clef": re.compile(r"^(treble|bass|alto|tenor)$"),
    "bar_line": re.compile(r"^\|$"),
    "rest": re.compile(r"^r$"),
    "colon": re.compile(r"^:$"),
    "slash": re.compile(r"^/$"),
    "identifier": re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$"),
    "number": re.compile(r"^\d+$"),
}

#: Element precedence within a score: declarations come before measure content.
PRECEDENCE: Final[dict[str, int]] = {
    "clef": 1,
    "time_signature": 2,
    "note": 3,
    "rest": 3,
    "bar": 4,
}


@dataclass(frozen=True)
class GrammarRule:
    name: str
    pattern: str
    description: str
    examples: tuple[str, ...]


GRAMMAR_RULES: Final[tuple[GrammarRule, ...]] = (
    GrammarRule(
        name="note",
        pattern="<note-name>[<accidental>]<octave> <duration>",
        description="A pitched note with a duration",
        examples=("C4 q", "F#5 h", "Bb3 e"),
    ),
    GrammarRule(
        name="rest",
        pattern="r <duration>",
        description="A rest with a duration",
        examples=("r q", "r h", "r w"),
    ),
    GrammarRule(
        name="clef",
        pattern="clef: <clef-type>",
        description="Clef declaration",
        examples=("clef: treble", "clef: bass"),
    ),
    GrammarRule(
        name="time-signature",
        pattern="time: <numerator>/<denominator>",
        description="Time signature declaration",
        examples=("time: 4/4", "time: 3/4", "time: 6/8"),
    ),
    GrammarRule(
        name="measure-separator",
        pattern="|",
        description="Bar line closing the current measure",
        examples=("|",),
    ),
    GrammarRule(
        name="score-structure",
        pattern="[clef] [time] <measures>",
        description="A complete score",
        examples=("clef: treble\ntime: 4/4\nC4 q D4 q E4 h | F4 w",),
    ),
)

# ── Expected tokens per parse context ───────────────────────────────────────

_MEASURE_START: Final = frozenset({TokenKind.NOTE, TokenKind.REST, TokenKind.PIPE})

_EXPECTED_TOKENS: Final[dict[str, frozenset[TokenKind]]] = {
    "start": frozenset({TokenKind.IDENTIFIER, TokenKind.NOTE, TokenKind.REST, TokenKind.PIPE}),
    "after-clef": frozenset({TokenKind.IDENTIFIER, TokenKind.NOTE, TokenKind.REST}),
    "after-time": _MEASURE_START,
    "in-measure": _MEASURE_START,
    "after-clef-keyword": frozenset({TokenKind.COLON}),
    "after-time-keyword": frozenset({TokenKind.COLON}),
    "after-note-name": frozenset({TokenKind.ACCIDENTAL, TokenKind.NUMBER}),
    "after-accidental": frozenset({TokenKind.NUMBER}),
    "after-octave": frozenset({TokenKind.DURATION}),
    "after-rest": frozenset({TokenKind.DURATION}),
}


def expected_tokens(context: str) -> frozenset[TokenKind]:
    """Return the token kinds valid after *context*; unknown contexts yield an empty set."""
    return _EXPECTED_TOKENS.get(context, frozenset())


def describe_expected(context: str) -> str:
    """Human-readable list of the kinds valid after *context*, e.g. ``"ACCIDENTAL or NUMBER"``."""
    names = sorted(kind.value for kind in expected_tokens(context))
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + f" or {names[-1]}"


class GrammarValidator:
    """Whole-string checks for single notation fragments."""

    _NOTE = re.compile(r"^[A-G][#b]?\d+\s+[whqes]$")
    _REST = re.compile(r"^r\s+[whqes]$")
    _CLEF = re.compile(r"^clef:\s*(treble|bass|alto|tenor)$", re.IGNORECASE)
    _TIME = re.compile(r"^time:\s*\d+/\d+$", re.IGNORECASE)
    _MEASURE_ITEM = re.compile(r"[A-G][#b]?\d+\s+[whqes]|r\s+[whqes]|\|")

    @classmethod
    def validate_note(cls, text: str) -> bool:
        return cls._NOTE.match(text.strip()) is not None

    @classmethod
    def validate_rest(cls, text: str) -> bool:
        return cls._REST.match(text.strip()) is not None

    @classmethod
    def validate_clef(cls, text: str) -> bool:
        return cls._CLEF.match(text.strip()) is not None

    @classmethod
    def validate_time_signature(cls, text: str) -> bool:
        return cls._TIME.match(text.strip()) is not None

    @classmethod
    def validate_measure(cls, text: str) -> bool:
        """True when *text* is a run of notes, rests and bar lines only."""
        remainder = text.strip()
        while remainder:
            match = cls._MEASURE_ITEM.match(remainder)
            if match is None:
                return False
            remainder = remainder[match.end():].lstrip()
        return True
