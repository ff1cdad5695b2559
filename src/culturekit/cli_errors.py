"""CLI error handling utilities.

Maps library errors to stable exit codes and prints them consistently.
"""

from __future__ import annotations

import functools
import logging
from enum import Enum
from typing import Any, Callable, TypeVar

import typer

from culturekit.config import ConfigError
from culturekit.errors import (
    ConversionError,
    FormatOptionsError,
    LocaleNotLoadedError,
    ParseError,
    UnsupportedCultureError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================


class ErrorCode(Enum):
    """Standard CLI exit codes."""

    # General errors (1-9)
    GENERAL_ERROR = 1
    USAGE_ERROR = 2

    # Culture errors (20-29)
    UNSUPPORTED_CULTURE = 20
    LOCALE_NOT_LOADED = 21

    # Input errors (30-39)
    PARSE_ERROR = 30
    CONVERSION_ERROR = 31

    # Configuration errors (40-49)
    CONFIG_INVALID = 40


class CLIError(Exception):
    """Error raised by CLI commands themselves.

    Attributes:
        message: Error message
        code: Exit code
        hint: Helpful hint for resolution
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.GENERAL_ERROR,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        return "\n".join(parts)


_ERROR_CODES: list[tuple[type[Exception], ErrorCode, str | None]] = [
    (
        UnsupportedCultureError,
        ErrorCode.UNSUPPORTED_CULTURE,
        "Add the culture to supported_cultures or CULTUREKIT_SUPPORTED_CULTURES.",
    ),
    (
        LocaleNotLoadedError,
        ErrorCode.LOCALE_NOT_LOADED,
        "Provide locale data with locale_files in the configuration.",
    ),
    (ParseError, ErrorCode.PARSE_ERROR, None),
    (ConversionError, ErrorCode.CONVERSION_ERROR, None),
    (FormatOptionsError, ErrorCode.USAGE_ERROR, None),
    (ConfigError, ErrorCode.CONFIG_INVALID, "Check the configuration file format and values."),
]


def classify_error(error: Exception) -> tuple[ErrorCode, str | None]:
    """Return the exit code and hint for an exception."""
    if isinstance(error, CLIError):
        return error.code, error.hint
    for error_type, code, hint in _ERROR_CODES:
        if isinstance(error, error_type):
            return code, hint
    return ErrorCode.GENERAL_ERROR, None


def _report(message: str, hint: str | None) -> None:
    typer.echo(typer.style(f"Error: {message}", fg="red"), err=True)
    if hint:
        typer.echo(typer.style(f"Hint: {hint}", fg="yellow"), err=True)


F = TypeVar("F", bound=Callable[..., Any])


def error_boundary(func: F) -> F:
    """Convert exceptions raised by a command into exit codes.

    Args:
        func: Function to wrap

    Returns:
        Wrapped function
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            code, hint = classify_error(e)
            if code == ErrorCode.GENERAL_ERROR:
                logger.exception("Unexpected error")
            message = e.message if isinstance(e, CLIError) else str(e)
            _report(message, hint)
            raise typer.Exit(code.value)

    return wrapper  # type: ignore
