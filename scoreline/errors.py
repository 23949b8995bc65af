"""Exception types and the error handler shared by the plugin surfaces."""

from __future__ import annotations

import logging
from typing import Any

from scoreline.score_models import ParserError

logger = logging.getLogger("scoreline")

PLUGIN_NAME = "scoreline"


class ScorelineError(Exception):
    """Base class for every error raised by scoreline."""


class TokenStreamError(ScorelineError):
    """Raised by ``TokenStream.consume`` when the current token has the wrong kind."""


class ConfigError(ScorelineError):
    """Raised for unknown or invalid configuration values."""


class NotationError(ScorelineError):
    """
    Raised by callers that treat parse diagnostics as fatal.

    Attributes:
        diagnostics: The diagnostics returned by the parser.
    """

    def __init__(self, message: str, diagnostics: list[ParserError] | None = None) -> None:
        super().__init__(message)
        self.diagnostics: list[ParserError] = list(diagnostics or [])

    def __str__(self) -> str:
        base = super().__str__()
        if not self.diagnostics:
            return base
        details = "; ".join(str(d) for d in self.diagnostics)
        return f"{base} ({details})"


_TYPE_CHECKS: dict[str, type | tuple[type, ...]] = {
    "string": str,
    "object": dict,
}


class ErrorHandler:
    """Logs errors raised at the plugin boundary with a context tag."""

    def handle_error(self, error: BaseException, context: str | None = None) -> None:
        if context:
            message = f"[{PLUGIN_NAME} - {context}] {error}"
        else:
            message = f"[{PLUGIN_NAME}] {error}"
        logger.error(message, exc_info=error)

    @staticmethod
    def create_plugin_error(message: str, original: BaseException | None = None) -> ScorelineError:
        """Wrap *original* in a ScorelineError, keeping it as the cause."""
        error = ScorelineError(f"{PLUGIN_NAME}: {message}")
        error.__cause__ = original
        return error

    @staticmethod
    def validate_input(value: Any, expected_type: str) -> bool:
        """
        Check that *value* matches *expected_type* ("string" or "object").

        Raises:
            ScorelineError: If the value has another type.
        """
        expected = _TYPE_CHECKS.get(expected_type)
        if expected is not None and not isinstance(value, expected):
            raise ErrorHandler.create_plugin_error(
                f"Expected {expected_type} input, received {type(value).__name__}"
            )
        return True
