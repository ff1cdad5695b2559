"""Core types and protocol definitions.

This module defines the value types shared by every layer of culturekit:

- LocaleInfo: parsed culture identifier (BCP 47 style tag)
- FormatOptions: the format family/preset record accepted by all
  formatting calls
- FormatKind / DateStyle / NumberStyle / CurrencyDisplay: option enums
- FormatterPair: the immutable (format, parse) pair cached by the engine
- LocaleDataSource / Textual: protocols at the component seams
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, Mapping, Protocol, TypeVar, runtime_checkable

from culturekit.errors import FormatOptionsError

if TYPE_CHECKING:
    from culturekit.locale_data import LocaleBundle


# ==============================================================================
# Enums and Type Definitions
# ==============================================================================

class TextDirection(str, Enum):
    """Text direction for layout."""
    LTR = "ltr"
    RTL = "rtl"


class FormatKind(str, Enum):
    """Formatter families kept apart in the formatter cache."""
    DATE = "date"
    NUMBER = "number"
    CURRENCY = "currency"


class DateStyle(str, Enum):
    """Date and time presets."""
    SHORT = "short"      # 18/02/2018
    MEDIUM = "medium"    # 18 Feb 2018
    LONG = "long"        # 18 February 2018
    FULL = "full"        # Sunday, 18 February 2018


class NumberStyle(str, Enum):
    """Number presets."""
    DECIMAL = "decimal"
    INTEGER = "integer"
    PERCENT = "percent"
    SCIENTIFIC = "scientific"


class CurrencyDisplay(str, Enum):
    """How the currency is rendered next to the amount."""
    SYMBOL = "symbol"    # £1,234.56
    CODE = "code"        # GBP 1,234.56
    NAME = "name"        # 1,234.56 British pounds


# ==============================================================================
# Data Classes
# ==============================================================================

@dataclass(frozen=True)
class LocaleInfo:
    """Parsed culture identifier.

    Attributes:
        language: ISO 639-1 language code (e.g., "en", "de")
        region: ISO 3166-1 region code (e.g., "GB", "EG")
        script: ISO 15924 script code (e.g., "Latn", "Hans")
        variant: Locale variant
    """
    language: str
    region: str | None = None
    script: str | None = None
    variant: str | None = None

    @property
    def tag(self) -> str:
        """Get BCP 47 language tag."""
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        if self.variant:
            parts.append(self.variant)
        return "-".join(parts)

    @property
    def direction(self) -> TextDirection:
        """Get default text direction for this locale."""
        rtl_languages = {"ar", "he", "fa", "ur", "yi", "ps", "sd"}
        if self.language in rtl_languages:
            return TextDirection.RTL
        return TextDirection.LTR

    @classmethod
    def parse(cls, tag: str) -> "LocaleInfo":
        """Parse a culture tag.

        Supports formats:
        - Simple: "en", "de"
        - With region: "en-GB", "ar-EG", "en_GB"
        - With script: "zh-Hans"
        - Full: "zh-Hans-CN", "sr-Latn-RS"

        Args:
            tag: Culture tag string

        Returns:
            Parsed LocaleInfo

        Raises:
            ValueError: If the tag is empty
        """
        parts = [part for part in tag.strip().replace("_", "-").split("-") if part]
        if not parts:
            raise ValueError(f"Empty culture tag: {tag!r}")

        language = parts[0].lower()
        region = None
        script = None
        variant = None

        for part in parts[1:]:
            if len(part) == 4 and part.isalpha():
                script = part.capitalize()
            elif len(part) == 2 and part.isalpha():
                region = part.upper()
            elif len(part) == 3 and part.isdigit():
                # UN M.49 region code
                region = part
            else:
                variant = part.lower()

        return cls(
            language=language,
            region=region,
            script=script,
            variant=variant,
        )


def canonical_tag(culture: str) -> str:
    """Normalize a culture identifier ("en_gb" -> "en-GB")."""
    return LocaleInfo.parse(culture).tag


@dataclass(frozen=True)
class FormatOptions:
    """Format family and preset selection.

    At most one family is meaningful per call. When several are set the
    engine applies a fixed precedence (see ``culturekit.engine``); when none
    is set the culture's default pattern is used.

    Attributes:
        date: Date preset ("short", "medium", "long", "full")
        time: Time preset ("short", "medium", "long", "full")
        datetime: Combined date and time preset
        number: Number preset ("decimal", "integer", "percent", "scientific")
        currency: ISO 4217 code, optionally followed by ":symbol", ":code"
            or ":name"
    """
    date: str | None = None
    time: str | None = None
    datetime: str | None = None
    number: str | None = None
    currency: str | None = None

    @classmethod
    def from_value(cls, value: "FormatOptions | Mapping[str, Any] | None") -> "FormatOptions":
        """Build options from None, an existing instance, or a mapping.

        Unrecognized mapping keys are ignored.
        """
        if value is None:
            return cls()
        if isinstance(value, FormatOptions):
            return value
        if isinstance(value, Mapping):
            known = {f.name for f in fields(cls)}
            kwargs = {
                key: _option_text(key, item)
                for key, item in value.items()
                if key in known and item is not None
            }
            return cls(**kwargs)
        raise FormatOptionsError(f"Unsupported format options: {value!r}")

    @property
    def is_default(self) -> bool:
        """True when no family is selected."""
        return all(getattr(self, f.name) is None for f in fields(self))

    def cache_key(self) -> str:
        """Canonical serialization used as part of the formatter cache key."""
        parts = [
            f"{f.name}={getattr(self, f.name)}"
            for f in fields(self)
            if getattr(self, f.name) is not None
        ]
        return ";".join(parts) or "default"


def _option_text(key: str, value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str):
        return value
    raise FormatOptionsError(f"Option {key!r} must be a string, got {type(value).__name__}")


T = TypeVar("T")


@dataclass(frozen=True)
class FormatterPair(Generic[T]):
    """Format and parse functions compiled from the same pattern.

    Attributes:
        format: Renders a value as culture-specific text
        parse: Reads text produced by ``format`` back into a value
        pattern: The resolved pattern both functions were built from
    """
    format: Callable[[T], str]
    parse: Callable[[str], T]
    pattern: str


# ==============================================================================
# Protocols (Interfaces)
# ==============================================================================

@runtime_checkable
class LocaleDataSource(Protocol):
    """Boundary to the store of pre-loaded locale tables."""

    def has_locale(self, identifier: str) -> bool:
        """Check whether data for a culture has been loaded."""
        ...

    def load_locale(self, identifier: str, bundle: "LocaleBundle | Mapping[str, Any]") -> None:
        """Register the tables for a culture."""
        ...

    def get_locale(self, identifier: str) -> "LocaleBundle":
        """Return the tables for a culture.

        Raises:
            LocaleNotLoadedError: If the culture was never loaded
        """
        ...


@runtime_checkable
class Textual(Protocol):
    """Objects that expose an explicit culture-independent text form."""

    def to_text(self) -> str:
        ...


def has_text_representation(value: Any) -> bool:
    """Check whether a value can be rendered as text on its own terms.

    True for ``Textual`` objects and for classes overriding ``__str__`` or
    ``__repr__``; plain ``object()`` instances have no representation of
    their own.
    """
    if isinstance(value, Textual):
        return True
    cls = type(value)
    return cls.__str__ is not object.__str__ or cls.__repr__ is not object.__repr__
