"""MusicLexer: turns notation text into a flat list of positioned tokens."""

from __future__ import annotations

import logging
import string

from scoreline.grammar import ACCIDENTALS, CLEF_NAMES, DURATIONS, NOTE_NAMES, REST_WORDS
from scoreline.score_models import (
    NO_POSITION,
    LexerOptions,
    LexResult,
    ParserError,
    Position,
    Token,
    TokenKind,
)

logger = logging.getLogger("scoreline.lexer")

_LETTERS = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    ":": TokenKind.COLON,
    "|": TokenKind.PIPE,
    "/": TokenKind.SLASH,
}


def _is_letter(char: str) -> bool:
    return char in _LETTERS


def _is_digit(char: str) -> bool:
    return char in _DIGITS


def _is_accidental(char: str) -> bool:
    return char in ACCIDENTALS


class MusicLexer:
    """
    Single left-to-right scanner over notation text.

    Lexing is total: unrecognized characters are reported as errors and
    skipped, and the scan always reaches the end of the input.

    Letter disambiguation
    ---------------------
    A letter can start a note name, a duration code, a keyword, or (for
    ``b``) stand for the flat sign. The rules below are tried in order:

    1. A duration letter (``w h q e s``) not followed by a digit or an
       accidental is a DURATION.
    2. A letter followed by an accidental which is not itself followed by
       another letter is a NOTE plus an ACCIDENTAL.
    3. A letter followed by a digit is a NOTE; the digits become the octave.
    4. A lone note letter (nothing alphanumeric or accidental after it) is a NOTE.
    5. Otherwise the maximal run of letters is classified as a word.

    The order is load-bearing: ``e4`` is a note, ``e`` alone is a duration,
    and ``Bb3`` is B flat while ``Bbc`` is an identifier.
    """

    def __init__(self, text: str, options: LexerOptions | None = None) -> None:
        self.text = text
        self.options = options or LexerOptions()
        self._offset = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []
        self._errors: list[ParserError] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self) -> LexResult:
        """Scan the whole input. Safe to call repeatedly; each call starts over."""
        self._offset = 0
        self._line = 1
        self._column = 1
        self._tokens = []
        self._errors = []

        while self._offset < len(self.text):
            self._scan_token()

        self._add_token(TokenKind.EOF, "", self._here())
        logger.debug("Lexed %d tokens, %d errors", len(self._tokens), len(self._errors))
        return LexResult(tokens=list(self._tokens), errors=list(self._errors))

    @property
    def tokens(self) -> list[Token]:
        return list(self._tokens)

    @property
    def errors(self) -> list[ParserError]:
        return list(self._errors)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        char = self._char()
        start = self._here()

        if char in (" ", "\t"):
            self._advance()
            self._add_trivia(TokenKind.WHITESPACE, char, start)
        elif char == "\n":
            self._advance_line()
            self._add_trivia(TokenKind.NEWLINE, char, start)
        elif char == "\r":
            self._advance()
            if self._char() == "\n":
                self._advance_line()
                self._add_trivia(TokenKind.NEWLINE, "\r\n", start)
        elif char in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._add_token(_SINGLE_CHAR_TOKENS[char], char, start)
        elif _is_letter(char):
            self._scan_word()
        elif _is_digit(char):
            self._scan_number()
        elif _is_accidental(char):
            self._advance()
            self._add_token(TokenKind.ACCIDENTAL, char, start)
        else:
            self._errors.append(ParserError(f"Unexpected character: '{char}'", start))
            self._advance()

    def _scan_word(self) -> None:
        start = self._here()
        first = self._char()
        second = self._char(1)
        third = self._char(2)

        # 1. bare duration code
        if first in DURATIONS and not (_is_digit(second) or _is_accidental(second)):
            self._advance()
            self._add_token(TokenKind.DURATION, first, start)
            return

        # 2. note letter + accidental, e.g. "F#" or "Bb"
        if _is_accidental(second) and not _is_letter(third):
            self._advance()
            self._add_token(TokenKind.NOTE, first.upper(), start)
            accidental_start = self._here()
            self._advance()
            self._add_token(TokenKind.ACCIDENTAL, second, accidental_start)
            return

        # 3. note letter directly followed by its octave
        if _is_digit(second):
            self._advance()
            self._add_token(TokenKind.NOTE, first.upper(), start)
            return

        # 4. lone note letter
        if not (_is_letter(second) or _is_digit(second) or _is_accidental(second)):
            if first.upper() in NOTE_NAMES:
                self._advance()
                self._add_token(TokenKind.NOTE, first.upper(), start)
                return

        # 5. multi-letter word
        while _is_letter(self._char()):
            self._advance()
        word = self.text[start.offset:self._offset]
        self._add_token(self._classify_word(word), word, start)

    def _scan_number(self) -> None:
        start = self._here()
        while _is_digit(self._char()):
            self._advance()
        self._add_token(TokenKind.NUMBER, self.text[start.offset:self._offset], start)

    @staticmethod
    def _classify_word(word: str) -> TokenKind:
        if word.upper() in NOTE_NAMES:
            return TokenKind.NOTE
        if word in DURATIONS:
            return TokenKind.DURATION
        if word.lower() in CLEF_NAMES:
            return TokenKind.CLEF
        if word.lower() in REST_WORDS:
            return TokenKind.REST
        # "clef", "time" and anything else; the parser decides what they mean
        return TokenKind.IDENTIFIER

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _char(self, ahead: int = 0) -> str:
        index = self._offset + ahead
        if index >= len(self.text):
            return ""
        return self.text[index]

    def _here(self) -> Position:
        return Position(line=self._line, column=self._column, offset=self._offset)

    def _advance(self) -> None:
        self._offset += 1
        self._column += 1

    def _advance_line(self) -> None:
        self._offset += 1
        self._line += 1
        self._column = 1

    def _add_trivia(self, kind: TokenKind, text: str, start: Position) -> None:
        if not self.options.ignore_whitespace:
            self._add_token(kind, text, start)

    def _add_token(self, kind: TokenKind, text: str, start: Position) -> None:
        position = start if self.options.include_position else NO_POSITION
        self._tokens.append(Token(kind=kind, text=text, position=position))


def tokenize_input(text: str, options: LexerOptions | None = None) -> LexResult:
    """Lex *text* with a fresh MusicLexer."""
    return MusicLexer(text, options).tokenize()
