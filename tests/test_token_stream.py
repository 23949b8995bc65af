"""Unit tests for TokenStream."""

import pytest

from scoreline.errors import TokenStreamError
from scoreline.lexer import tokenize_input
from scoreline.score_models import TokenKind
from scoreline.token_stream import TokenStream


def _stream(text: str) -> TokenStream:
    return TokenStream(tokenize_input(text).tokens)


def test_whitespace_and_newlines_are_filtered() -> None:
    stream = _stream("C4 q\n| r h")
    kinds = []
    while not stream.is_at_end():
        kinds.append(stream.advance().kind)
    assert kinds == [
        TokenKind.NOTE,
        TokenKind.NUMBER,
        TokenKind.DURATION,
        TokenKind.PIPE,
        TokenKind.REST,
        TokenKind.DURATION,
    ]


def test_peek_does_not_move_cursor() -> None:
    stream = _stream("C4 q")
    assert stream.peek().kind is TokenKind.NUMBER
    assert stream.peek(2).kind is TokenKind.DURATION
    assert stream.current().kind is TokenKind.NOTE
    assert stream.position == 0


def test_peek_clamps_to_last_token() -> None:
    stream = _stream("C4")
    assert stream.peek(50).kind is TokenKind.EOF
    assert stream.peek(-5).kind is TokenKind.NOTE


def test_advance_saturates_at_eof() -> None:
    stream = _stream("r")
    assert stream.advance().kind is TokenKind.REST
    assert stream.advance().kind is TokenKind.EOF
    assert stream.advance().kind is TokenKind.EOF
    assert stream.is_at_end()
    assert stream.position == 1


def test_match_any_of_kinds() -> None:
    stream = _stream("r q")
    assert stream.match(TokenKind.NOTE, TokenKind.REST)
    assert not stream.match(TokenKind.NOTE)


def test_consume_returns_matching_token() -> None:
    stream = _stream("clef: bass")
    assert stream.consume(TokenKind.IDENTIFIER).text == "clef"
    assert stream.consume(TokenKind.COLON).text == ":"
    assert stream.current().kind is TokenKind.CLEF


def test_consume_mismatch_default_message() -> None:
    stream = _stream("C4")
    with pytest.raises(TokenStreamError, match="Expected token type COLON, got NOTE"):
        stream.consume(TokenKind.COLON)
    assert stream.position == 0


def test_consume_mismatch_custom_message() -> None:
    stream = _stream("C4")
    with pytest.raises(TokenStreamError, match="need a colon"):
        stream.consume(TokenKind.COLON, "need a colon")


def test_reset_rewinds() -> None:
    stream = _stream("C4 q")
    stream.advance()
    stream.advance()
    stream.reset()
    assert stream.current().text == "C"


def test_empty_token_list_behaves_as_eof() -> None:
    stream = TokenStream([])
    assert stream.is_at_end()
    assert stream.current().kind is TokenKind.EOF
    assert stream.advance().kind is TokenKind.EOF
