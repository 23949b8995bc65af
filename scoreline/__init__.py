"""scoreline: a compact text notation for musical scores."""

from scoreline.lexer import MusicLexer, tokenize_input
from scoreline.parser import MusicParser, parse_input
from scoreline.score_models import (
    LexerOptions,
    ParseResult,
    ParserError,
    ParserOptions,
    Score,
    TokenKind,
)

__version__ = "0.1.0"

__all__ = [
    "LexerOptions",
    "MusicLexer",
    "MusicParser",
    "ParseResult",
    "ParserError",
    "ParserOptions",
    "Score",
    "TokenKind",
    "parse_input",
    "tokenize_input",
]
