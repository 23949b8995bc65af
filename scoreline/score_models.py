"""Data models for tokens, score elements and parse results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class TokenKind(str, Enum):
    """Lexical category of a token."""

    NOTE = "NOTE"
    DURATION = "DURATION"
    CLEF = "CLEF"
    ACCIDENTAL = "ACCIDENTAL"
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    REST = "REST"
    COLON = "COLON"
    PIPE = "PIPE"
    SLASH = "SLASH"
    WHITESPACE = "WHITESPACE"
    NEWLINE = "NEWLINE"
    EOF = "EOF"
    UNKNOWN = "UNKNOWN"


class NoteName(str, Enum):
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    A = "A"
    B = "B"


class Accidental(str, Enum):
    SHARP = "#"
    FLAT = "b"


class Duration(str, Enum):
    """Note/rest duration codes."""

    WHOLE = "w"
    HALF = "h"
    QUARTER = "q"
    EIGHTH = "e"
    SIXTEENTH = "s"

    @property
    def quarter_length(self) -> float:
        """Length in quarter notes (whole = 4.0)."""
        return _QUARTER_LENGTHS[self]


_QUARTER_LENGTHS: dict[Duration, float] = {
    Duration.WHOLE: 4.0,
    Duration.HALF: 2.0,
    Duration.QUARTER: 1.0,
    Duration.EIGHTH: 0.5,
    Duration.SIXTEENTH: 0.25,
}


class ClefType(str, Enum):
    TREBLE = "treble"
    BASS = "bass"
    ALTO = "alto"
    TENOR = "tenor"


@dataclass(frozen=True)
class Position:
    """
    Source location of a token or diagnostic.

    Attributes:
        line:   1-based line number.
        column: 1-based column number.
        offset: 0-based character offset into the input.
    """

    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


#: Position stamped on tokens when positions are not tracked.
NO_POSITION = Position(line=0, column=0, offset=0)


@dataclass(frozen=True)
class Token:
    """A classified, positioned lexical unit."""

    kind: TokenKind
    text: str
    position: Position


@dataclass(frozen=True)
class Pitch:
    note: NoteName
    octave: int
    accidental: Accidental | None = None

    def __str__(self) -> str:
        accidental = self.accidental.value if self.accidental else ""
        return f"{self.note.value}{accidental}{self.octave}"


@dataclass(frozen=True)
class Note:
    pitch: Pitch
    duration: Duration
    position: Position


@dataclass(frozen=True)
class Rest:
    duration: Duration
    position: Position


@dataclass(frozen=True)
class Clef:
    type: ClefType
    position: Position


@dataclass(frozen=True)
class TimeSignature:
    numerator: int
    denominator: int
    position: Position

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


MeasureElement = Union[Note, Rest]


@dataclass(frozen=True)
class Measure:
    """An ordered group of notes and rests between two bar lines."""

    elements: tuple[MeasureElement, ...]
    number: int


@dataclass
class ScoreMetadata:
    title: str | None = None
    composer: str | None = None
    key: str | None = None


@dataclass
class Score:
    """
    A parsed score.

    Only one clef and one time signature are kept; when the input declares
    several, the last one parsed wins.
    """

    measures: list[Measure] = field(default_factory=list)
    clef: Clef | None = None
    time_signature: TimeSignature | None = None
    metadata: ScoreMetadata = field(default_factory=ScoreMetadata)


@dataclass(frozen=True)
class ParserError:
    """A user-facing diagnostic produced by the lexer or the parser."""

    message: str
    position: Position
    token: Token | None = None
    expected: frozenset[TokenKind] = frozenset()

    def __str__(self) -> str:
        if not self.expected:
            return f"{self.position}: {self.message}"
        kinds = ", ".join(sorted(kind.value for kind in self.expected))
        return f"{self.position}: {self.message} (expected {kinds})"


@dataclass(frozen=True)
class LexResult:
    tokens: list[Token]
    errors: list[ParserError]


@dataclass
class ParseResult:
    """
    Outcome of a parse.

    Attributes:
        success: True iff no lexical and no parse errors were recorded.
        errors:  Diagnostics in the order they were recorded (lexical first).
        score:   The (possibly partial) score; None when parsing never ran.
    """

    success: bool
    errors: list[ParserError] = field(default_factory=list)
    score: Score | None = None


@dataclass(frozen=True)
class LexerOptions:
    """
    Attributes:
        ignore_whitespace: Drop WHITESPACE and NEWLINE tokens from the output.
        include_position:  Record source positions; when False every token
                           carries ``NO_POSITION``.
    """

    ignore_whitespace: bool = False
    include_position: bool = True


@dataclass(frozen=True)
class ParserOptions:
    """
    Attributes:
        strict:                Report lexical errors without parsing.
        allow_partial_parsing: Recover from parse errors and keep going.
        max_errors:            Stop once this many errors have been recorded.
                               Values above 1 also enable recovery.
                               Values below 1 are raised to 1.
    """

    strict: bool = True
    allow_partial_parsing: bool = False
    max_errors: int = 10

    def __post_init__(self) -> None:
        if self.max_errors < 1:
            object.__setattr__(self, "max_errors", 1)

    @property
    def can_recover(self) -> bool:
        return self.allow_partial_parsing or self.max_errors > 1
