"""Exception hierarchy for culture-aware formatting.

Every error raised by the library derives from :class:`CultureKitError` so
callers can catch the whole family at a UI boundary. Parse and conversion
failures also derive from :class:`ValueError`, which keeps them compatible
with code that already guards ``int()``/``float()`` style conversions.
"""

from __future__ import annotations

from typing import Any, Iterable


class CultureKitError(Exception):
    """Base exception for all culturekit errors."""

    pass


class UnsupportedCultureError(CultureKitError):
    """A culture outside the configured supported set was requested."""

    def __init__(self, culture: str, supported: Iterable[str] = ()) -> None:
        """Initialize unsupported culture error.

        Args:
            culture: The rejected culture identifier
            supported: The configured supported cultures
        """
        self.culture = culture
        self.supported = tuple(supported)
        message = f"Unsupported culture: {culture!r}"
        if self.supported:
            message += f" (supported: {', '.join(self.supported)})"
        super().__init__(message)


class LocaleNotLoadedError(CultureKitError):
    """A culture is configured but its locale data was never loaded."""

    def __init__(self, culture: str) -> None:
        self.culture = culture
        super().__init__(f"Locale data not loaded for culture: {culture!r}")


class ParseError(CultureKitError, ValueError):
    """Text does not match the pattern expected for a culture."""

    def __init__(
        self,
        text: str,
        culture: str,
        pattern: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize parse error.

        Args:
            text: The input that failed to parse
            culture: Culture used for parsing
            pattern: Pattern the text was matched against
            reason: Optional detail about the failure
        """
        self.text = text
        self.culture = culture
        self.pattern = pattern
        self.reason = reason
        message = f"Cannot parse {text!r} for culture {culture!r}"
        if pattern:
            message += f" using pattern {pattern!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConversionError(CultureKitError, ValueError):
    """A value cannot be coerced to the requested kind."""

    def __init__(self, value: Any, target: str, reason: str | None = None) -> None:
        self.value = value
        self.target = target
        self.reason = reason
        message = f"Cannot convert {type(value).__name__} value {value!r} to {target}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class FormatOptionsError(CultureKitError, ValueError):
    """Format options name an unknown preset or have the wrong shape."""

    pass
