"""Unit tests for the error types and ErrorHandler."""

import logging

import pytest

from scoreline.errors import ErrorHandler, NotationError, ScorelineError
from scoreline.score_models import ParserError, Position


def test_handle_error_logs_with_context(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="scoreline"):
        ErrorHandler().handle_error(ValueError("boom"), "detector")
    assert "[scoreline - detector] boom" in caplog.text


def test_handle_error_without_context(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="scoreline"):
        ErrorHandler().handle_error(ValueError("boom"))
    assert "[scoreline] boom" in caplog.text


def test_create_plugin_error_keeps_cause() -> None:
    original = KeyError("missing")
    error = ErrorHandler.create_plugin_error("Failed to load", original)
    assert isinstance(error, ScorelineError)
    assert str(error) == "scoreline: Failed to load"
    assert error.__cause__ is original


def test_validate_input() -> None:
    assert ErrorHandler.validate_input("C4 q", "string")
    assert ErrorHandler.validate_input({}, "object")
    with pytest.raises(ScorelineError, match="Expected string input, received int"):
        ErrorHandler.validate_input(3, "string")
    with pytest.raises(ScorelineError, match="Expected object input, received NoneType"):
        ErrorHandler.validate_input(None, "object")


def test_notation_error_lists_diagnostics() -> None:
    diagnostic = ParserError("Invalid note name: H", Position(line=2, column=1, offset=5))
    error = NotationError("Notation could not be parsed", [diagnostic])
    assert error.diagnostics == [diagnostic]
    assert str(error) == "Notation could not be parsed (2:1: Invalid note name: H)"
