"""TokenStream: a read cursor over the significant tokens of a lexed input."""

from __future__ import annotations

from collections.abc import Iterable

from scoreline.errors import TokenStreamError
from scoreline.score_models import NO_POSITION, Token, TokenKind

_TRIVIA = frozenset({TokenKind.WHITESPACE, TokenKind.NEWLINE})


class TokenStream:
    """
    Cursor with lookahead over a token list, WHITESPACE and NEWLINE removed.

    The cursor saturates at the last token (normally EOF): reading past the
    end keeps returning it instead of raising.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = [token for token in tokens if token.kind not in _TRIVIA]
        if not self._tokens:
            self._tokens.append(Token(kind=TokenKind.EOF, text="", position=NO_POSITION))
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._tokens)

    def current(self) -> Token:
        return self._at(self._position)

    def peek(self, offset: int = 1) -> Token:
        """Look *offset* tokens ahead (negative looks behind) without moving."""
        return self._at(self._position + offset)

    def advance(self) -> Token:
        """Return the current token and step past it, unless it is the last one."""
        token = self.current()
        if self._position < len(self._tokens) - 1:
            self._position += 1
        return token

    def match(self, *kinds: TokenKind) -> bool:
        return self.current().kind in kinds

    def consume(self, kind: TokenKind, message: str | None = None) -> Token:
        """
        Advance past the current token if it is of *kind*.

        Raises:
            TokenStreamError: If the current token has another kind.
        """
        if self.current().kind is kind:
            return self.advance()
        actual = self.current().kind
        raise TokenStreamError(message or f"Expected token type {kind.value}, got {actual.value}")

    def is_at_end(self) -> bool:
        return self.current().kind is TokenKind.EOF

    def reset(self) -> None:
        self._position = 0

    def _at(self, index: int) -> Token:
        index = min(max(index, 0), len(self._tokens) - 1)
        return self._tokens[index]
