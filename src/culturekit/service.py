"""Globalization Service.

The application-facing facade: formats and parses dates and numbers in the
current culture, or in an explicitly requested one.

Every call resolves its culture and options the same way:

- ``None`` input short-circuits (``""`` for format, ``None`` for parse)
  before any culture validation happens
- an omitted or ``None`` culture means the current culture
- an explicit culture must be supported, otherwise
  :class:`UnsupportedCultureError` is raised
- a :class:`FormatOptions` or mapping passed where the culture goes is
  taken as the options, with the current culture

Example:
    globalization = GlobalizationService(cultures, engine)

    globalization.format_date(datetime(2018, 2, 18))                 # "18/02/2018"
    globalization.format_date(datetime(2018, 2, 18), "de")           # "18.2.2018"
    globalization.format_date(datetime(2018, 2, 18), {"date": "long"})
    globalization.format_number(1234567.891, "de")                   # "1.234.567,891"
    globalization.parse_number("£1,234.56", {"currency": "GBP"})     # 1234.56
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from culturekit.culture import CultureService
from culturekit.engine import FormattingEngine
from culturekit.protocols import FormatOptions

# Distinguishes an omitted argument from an explicit None
_MISSING: Any = object()

OptionsLike = FormatOptions | Mapping[str, Any] | None


class GlobalizationService:
    """Culture-aware formatting and parsing of dates and numbers."""

    def __init__(self, cultures: CultureService, engine: FormattingEngine) -> None:
        self._cultures = cultures
        self._engine = engine

    @property
    def culture_service(self) -> CultureService:
        return self._cultures

    @property
    def engine(self) -> FormattingEngine:
        return self._engine

    @property
    def current_culture(self) -> str:
        return self._cultures.current_culture

    def _resolve(self, culture: Any, options: Any) -> tuple[str, FormatOptions]:
        if isinstance(culture, (FormatOptions, Mapping)):
            if options is not _MISSING and options is not None:
                raise TypeError("Format options given both positionally and as 'options'")
            culture, options = None, culture

        if culture is _MISSING or culture is None:
            tag = self._cultures.current_culture
        else:
            tag = self._cultures.validate_culture(culture)

        if options is _MISSING:
            options = None
        return tag, FormatOptions.from_value(options)

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------

    def format_date(
        self,
        value: datetime | date | None,
        culture: str | OptionsLike = _MISSING,
        options: OptionsLike = _MISSING,
    ) -> str:
        """Format a date or datetime.

        Args:
            value: Value to format; ``None`` yields ``""``
            culture: Culture tag, or format options (current culture)
            options: Date/time family and preset

        Raises:
            UnsupportedCultureError: If an explicit culture is not supported
            LocaleNotLoadedError: If the culture's locale data is missing
            FormatOptionsError: If the options name an unknown preset
            TypeError: If the value is not a date or datetime
        """
        if value is None:
            return ""
        tag, resolved = self._resolve(culture, options)
        if not isinstance(value, date):
            raise TypeError(f"Cannot format {type(value).__name__} as a date")
        return self._engine.get_date_formatter(tag, resolved)(value)

    def parse_date(
        self,
        text: str | None,
        culture: str | OptionsLike = _MISSING,
        options: OptionsLike = _MISSING,
    ) -> datetime | None:
        """Parse culture-formatted date text into a naive local datetime.

        Raises:
            ParseError: If the text does not match the resolved pattern
            UnsupportedCultureError: If an explicit culture is not supported
            LocaleNotLoadedError: If the culture's locale data is missing
        """
        if text is None:
            return None
        tag, resolved = self._resolve(culture, options)
        if not isinstance(text, str):
            raise TypeError(f"Cannot parse {type(text).__name__} as date text")
        return self._engine.get_date_parser(tag, resolved)(text)

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def format_number(
        self,
        value: int | float | Decimal | None,
        culture: str | OptionsLike = _MISSING,
        options: OptionsLike = _MISSING,
    ) -> str:
        """Format a number (or a currency amount with ``currency`` options).

        Raises:
            UnsupportedCultureError: If an explicit culture is not supported
            LocaleNotLoadedError: If the culture's locale data is missing
            FormatOptionsError: If the options name an unknown preset
            TypeError: If the value is not a number
        """
        if value is None:
            return ""
        tag, resolved = self._resolve(culture, options)
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise TypeError(f"Cannot format {type(value).__name__} as a number")
        return self._engine.get_number_formatter(tag, resolved)(value)

    def parse_number(
        self,
        text: str | None,
        culture: str | OptionsLike = _MISSING,
        options: OptionsLike = _MISSING,
    ) -> int | float | None:
        """Parse culture-formatted number text.

        Raises:
            ParseError: If no number can be read from the text
            UnsupportedCultureError: If an explicit culture is not supported
            LocaleNotLoadedError: If the culture's locale data is missing
        """
        if text is None:
            return None
        tag, resolved = self._resolve(culture, options)
        if not isinstance(text, str):
            raise TypeError(f"Cannot parse {type(text).__name__} as number text")
        return self._engine.get_number_parser(tag, resolved)(text)

    def format_currency(
        self,
        value: int | float | Decimal | None,
        currency: str,
        culture: str | None = None,
    ) -> str:
        """Shortcut for ``format_number(value, culture, {"currency": currency})``."""
        return self.format_number(value, culture, FormatOptions(currency=currency))

    def parse_currency(self, text: str | None, currency: str, culture: str | None = None) -> int | float | None:
        return self.parse_number(text, culture, FormatOptions(currency=currency))
