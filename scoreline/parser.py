"""MusicParser: recursive-descent parser from significant tokens to a Score."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from scoreline.errors import ErrorHandler, ScorelineError
from scoreline.grammar import (
    CLEF_KEYWORD,
    CLEF_NAMES,
    DURATIONS,
    NOTE_NAMES,
    TIME_KEYWORD,
    expected_tokens,
)
from scoreline.lexer import tokenize_input
from scoreline.score_models import (
    Accidental,
    Clef,
    ClefType,
    Duration,
    LexerOptions,
    Measure,
    MeasureElement,
    Note,
    NoteName,
    ParseResult,
    ParserError,
    ParserOptions,
    Pitch,
    Position,
    Rest,
    Score,
    TimeSignature,
    Token,
    TokenKind,
)
from scoreline.token_stream import TokenStream

logger = logging.getLogger("scoreline.parser")

MAX_OCTAVE = 9

#: Token kinds at which parsing can safely restart after an error.
_SYNC_KINDS = (TokenKind.IDENTIFIER, TokenKind.NOTE, TokenKind.REST)


@dataclass(frozen=True)
class ParseFailure:
    """
    A malformed element.

    Attributes:
        message:  Diagnostic text.
        token:    The offending token; the token under the cursor when None.
        context:  Grammar context used to list the token kinds expected instead.
    """

    message: str
    token: Token | None = None
    context: str | None = None


@dataclass(frozen=True)
class _BarLine:
    token: Token


_Element = Union[Note, Rest, Clef, TimeSignature, _BarLine, None]


class MusicParser:
    """
    Builds a Score from a token list.

    Each ``_parse_*`` routine returns either the element it parsed or a
    ParseFailure. The main loop records failures and, when recovery is
    allowed, skips ahead to the next safe restart point; otherwise it stops.

    Usage::

        result = MusicParser(tokens, ParserOptions(allow_partial_parsing=True)).parse()
    """

    def __init__(self, tokens: list[Token], options: ParserOptions | None = None) -> None:
        self.options = options or ParserOptions()
        self._stream = TokenStream(tokens)
        self._errors: list[ParserError] = []
        self._current_measure: list[MeasureElement] = []
        self._measures: list[Measure] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self) -> ParseResult:
        self._stream.reset()
        self._errors = []
        self._current_measure = []
        self._measures = []
        score = Score()

        try:
            self._parse_score(score)
        except ScorelineError as exc:
            message = str(exc)
            if not any(message in error.message for error in self._errors):
                self._add_error(f"Parsing failed: {message}")

        score.measures = list(self._measures)
        logger.debug(
            "Parsed %d measure(s) with %d error(s)", len(score.measures), len(self._errors)
        )
        return ParseResult(success=not self._errors, errors=list(self._errors), score=score)

    # ------------------------------------------------------------------
    # Score loop
    # ------------------------------------------------------------------

    def _parse_score(self, score: Score) -> None:
        while not self._stream.is_at_end() and len(self._errors) < self.options.max_errors:
            element = self._parse_element()

            if isinstance(element, ParseFailure):
                self._record_failure(element)
                if not self.options.can_recover:
                    break
                self._synchronize()
            elif isinstance(element, Clef):
                score.clef = element
            elif isinstance(element, TimeSignature):
                score.time_signature = element
            elif isinstance(element, (Note, Rest)):
                self._current_measure.append(element)
            elif isinstance(element, _BarLine):
                self._finalize_measure()

        self._finalize_measure()

    def _parse_element(self) -> _Element | ParseFailure:
        token = self._stream.current()

        match token.kind:
            case TokenKind.IDENTIFIER:
                return self._parse_identifier()
            case TokenKind.NOTE:
                return self._parse_note()
            case TokenKind.REST:
                return self._parse_rest()
            case TokenKind.PIPE:
                return _BarLine(self._stream.advance())
            case TokenKind.EOF:
                return None
            case (
                TokenKind.DURATION
                | TokenKind.CLEF
                | TokenKind.ACCIDENTAL
                | TokenKind.NUMBER
                | TokenKind.COLON
                | TokenKind.SLASH
                | TokenKind.WHITESPACE
                | TokenKind.NEWLINE
                | TokenKind.UNKNOWN
            ):
                self._add_error(f"Unexpected token: {token.kind.value}", token)
                self._stream.advance()
                return None

    def _parse_identifier(self) -> _Element | ParseFailure:
        token = self._stream.current()
        keyword = token.text.lower()

        if keyword == CLEF_KEYWORD:
            return self._parse_clef()
        if keyword == TIME_KEYWORD:
            return self._parse_time_signature()

        self._add_error(f"Unknown identifier: {token.text}", token)
        self._stream.advance()
        return None

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def _parse_note(self) -> Note | ParseFailure:
        note_token = self._stream.advance()
        name = note_token.text.upper()
        if name not in NOTE_NAMES:
            return ParseFailure(f"Invalid note name: {name}", note_token)

        accidental: Accidental | None = None
        if self._stream.match(TokenKind.ACCIDENTAL):
            accidental = Accidental(self._stream.advance().text)

        if not self._stream.match(TokenKind.NUMBER):
            context = "after-accidental" if accidental else "after-note-name"
            return ParseFailure("Expected octave number after note", context=context)
        octave_token = self._stream.advance()
        if len(octave_token.text) > 1 or int(octave_token.text) > MAX_OCTAVE:
            return ParseFailure(f"Invalid octave: {octave_token.text}", octave_token)
        octave = int(octave_token.text)

        duration = self._parse_duration("Expected duration after note", "after-octave")
        if isinstance(duration, ParseFailure):
            return duration

        return Note(
            pitch=Pitch(note=NoteName(name), octave=octave, accidental=accidental),
            duration=duration,
            position=note_token.position,
        )

    def _parse_rest(self) -> Rest | ParseFailure:
        rest_token = self._stream.advance()

        duration = self._parse_duration("Expected duration after rest", "after-rest")
        if isinstance(duration, ParseFailure):
            return duration

        return Rest(duration=duration, position=rest_token.position)

    def _parse_duration(self, missing_message: str, context: str) -> Duration | ParseFailure:
        if not self._stream.match(TokenKind.DURATION):
            return ParseFailure(missing_message, context=context)
        token = self._stream.advance()
        if token.text not in DURATIONS:
            return ParseFailure(f"Invalid duration: {token.text}", token)
        return Duration(token.text)

    def _parse_clef(self) -> Clef | ParseFailure:
        clef_token = self._stream.advance()

        if not self._stream.match(TokenKind.COLON):
            return ParseFailure("Expected colon after clef", context="after-clef-keyword")
        self._stream.advance()

        if not self._stream.match(TokenKind.CLEF):
            return ParseFailure("Expected clef type after colon")
        type_token = self._stream.advance()
        clef_type = type_token.text.lower()
        if clef_type not in CLEF_NAMES:
            return ParseFailure(f"Invalid clef type: {clef_type}", type_token)

        return Clef(type=ClefType(clef_type), position=clef_token.position)

    def _parse_time_signature(self) -> TimeSignature | ParseFailure:
        time_token = self._stream.advance()

        if not self._stream.match(TokenKind.COLON):
            return ParseFailure("Expected colon after time", context="after-time-keyword")
        self._stream.advance()

        if not self._stream.match(TokenKind.NUMBER):
            return ParseFailure("Expected numerator after time:")
        numerator_text = self._stream.advance().text

        if not self._stream.match(TokenKind.SLASH):
            return ParseFailure("Expected slash after numerator")
        self._stream.advance()

        if not self._stream.match(TokenKind.NUMBER):
            return ParseFailure("Expected denominator after slash")
        denominator_text = self._stream.advance().text

        invalid = ParseFailure(f"Invalid time signature: {numerator_text}/{denominator_text}", time_token)
        try:
            numerator = int(numerator_text)
            denominator = int(denominator_text)
        except ValueError:
            # digit runs beyond the interpreter's int conversion limit
            return invalid
        if numerator <= 0 or denominator <= 0:
            return invalid

        return TimeSignature(
            numerator=numerator,
            denominator=denominator,
            position=time_token.position,
        )

    # ------------------------------------------------------------------
    # Measures, errors and recovery
    # ------------------------------------------------------------------

    def _finalize_measure(self) -> None:
        if not self._current_measure:
            return
        number = len(self._measures) + 1
        self._measures.append(Measure(elements=tuple(self._current_measure), number=number))
        self._current_measure = []

    def _add_error(self, message: str, token: Token | None = None, context: str | None = None) -> None:
        anchor = token or self._stream.current()
        self._errors.append(
            ParserError(
                message=message,
                position=anchor.position,
                token=anchor,
                expected=expected_tokens(context) if context else frozenset(),
            )
        )

    def _record_failure(self, failure: ParseFailure) -> None:
        self._add_error(failure.message, failure.token, failure.context)

    def _synchronize(self) -> None:
        """Skip to just after the next bar line, or to the next element start."""
        logger.debug("Recovering at %s", self._stream.current().position)
        while not self._stream.is_at_end():
            if self._stream.position > 0 and self._stream.peek(-1).kind is TokenKind.PIPE:
                return
            if self._stream.match(*_SYNC_KINDS):
                return
            self._stream.advance()


def parse_input(text: str, options: ParserOptions | None = None) -> ParseResult:
    """
    Lex and parse *text* in one call. Never raises: failures come back as data.

    Lexical errors are returned without parsing unless ``strict`` is False,
    in which case they are listed ahead of the parse errors.
    """
    options = options or ParserOptions()
    try:
        ErrorHandler.validate_input(text, "string")
        lexed = tokenize_input(text, LexerOptions(ignore_whitespace=True))

        if lexed.errors and options.strict:
            return ParseResult(success=False, errors=lexed.errors[: options.max_errors])

        result = MusicParser(lexed.tokens, options).parse()
    except ScorelineError as exc:
        logger.debug("Rejected input: %s", exc)
        return ParseResult(success=False, errors=[_input_error(f"Failed to parse input: {exc}")])

    errors = [*lexed.errors, *result.errors]
    return ParseResult(
        success=result.success and not lexed.errors,
        errors=errors[: options.max_errors],
        score=result.score,
    )


def _input_error(message: str) -> ParserError:
    return ParserError(message=message, position=Position(line=1, column=1, offset=0))
