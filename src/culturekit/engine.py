"""Formatting Engine.

Resolves format options to a concrete CLDR pattern for a culture, compiles
it into a formatter/parser pair, and caches the pair under
``(culture, kind, options)`` so each combination is compiled once per
process.

Pattern precedence:
- dates: ``datetime`` > ``date`` + ``time`` > ``date`` > ``time`` > default
- numbers: ``currency`` > ``number`` > default decimal

Usage:
    from culturekit.engine import FormattingEngine
    from culturekit.locale_data import LocaleDataProvider

    engine = FormattingEngine(LocaleDataProvider.with_builtin("de"))
    format_date = engine.get_date_formatter("de", {"date": "long"})
    format_date(datetime(2018, 2, 18))      # "18. Februar 2018"
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Mapping

from culturekit.errors import FormatOptionsError, LocaleNotLoadedError
from culturekit.locale_data import LocaleBundle, get_currency_info
from culturekit.numbers import NumberFormat
from culturekit.patterns import DatePattern, combine_patterns
from culturekit.protocols import (
    CurrencyDisplay,
    DateStyle,
    FormatKind,
    FormatOptions,
    FormatterPair,
    LocaleDataSource,
    NumberStyle,
    canonical_tag,
)


logger = logging.getLogger(__name__)

OptionsLike = FormatOptions | Mapping[str, Any] | None
CacheKey = tuple[str, FormatKind, str]


def _style(value: str, family: str) -> DateStyle:
    try:
        return DateStyle(value)
    except ValueError:
        choices = ", ".join(style.value for style in DateStyle)
        raise FormatOptionsError(
            f"Unknown {family} preset {value!r} (expected one of: {choices})"
        ) from None


def resolve_date_pattern(bundle: LocaleBundle, options: FormatOptions) -> str:
    """Pick the date/time pattern selected by ``options``."""
    dates = bundle.dates
    if options.datetime is not None:
        style = _style(options.datetime, "datetime")
        return combine_patterns(
            dates.datetime_glue(style), dates.date_pattern(style), dates.time_pattern(style)
        )
    if options.date is not None and options.time is not None:
        date_style = _style(options.date, "date")
        time_style = _style(options.time, "time")
        return combine_patterns(
            dates.datetime_glue(date_style),
            dates.date_pattern(date_style),
            dates.time_pattern(time_style),
        )
    if options.date is not None:
        return dates.date_pattern(_style(options.date, "date"))
    if options.time is not None:
        return dates.time_pattern(_style(options.time, "time"))
    return dates.date_default


def parse_currency_option(value: str) -> tuple[str, CurrencyDisplay]:
    """Split ``"EUR"`` / ``"eur:code"`` into an ISO code and display mode."""
    code, _, display = value.partition(":")
    code = code.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise FormatOptionsError(f"Invalid currency code: {value!r}")
    try:
        mode = CurrencyDisplay(display.strip().lower() or CurrencyDisplay.SYMBOL.value)
    except ValueError:
        raise FormatOptionsError(f"Unknown currency display in {value!r}") from None
    return code, mode


def build_number_format(bundle: LocaleBundle, options: FormatOptions) -> NumberFormat:
    """Compile the number format selected by ``options``."""
    patterns = bundle.number_patterns
    symbols = bundle.symbols

    if options.currency is not None:
        code, display = parse_currency_option(options.currency)
        info = get_currency_info(code)
        if display == CurrencyDisplay.CODE:
            text = code
        else:
            text = bundle.currency_symbol(code)
        return NumberFormat(
            patterns.currency,
            symbols,
            bundle.tag,
            currency_code=code,
            currency_text=text,
            currency_name=bundle.currency_name(code) if display == CurrencyDisplay.NAME else None,
            fraction_digits=info.decimal_digits,
        )

    style = NumberStyle.DECIMAL
    if options.number is not None:
        try:
            style = NumberStyle(options.number)
        except ValueError:
            choices = ", ".join(s.value for s in NumberStyle)
            raise FormatOptionsError(
                f"Unknown number preset {options.number!r} (expected one of: {choices})"
            ) from None

    if style == NumberStyle.PERCENT:
        return NumberFormat(patterns.percent, symbols, bundle.tag)
    if style == NumberStyle.SCIENTIFIC:
        return NumberFormat(patterns.scientific, symbols, bundle.tag)
    if style == NumberStyle.INTEGER:
        return NumberFormat(patterns.decimal, symbols, bundle.tag, fraction_digits=0)
    return NumberFormat(patterns.decimal, symbols, bundle.tag)


class FormattingEngine:
    """Builds and caches formatter/parser pairs.

    Cached pairs are immutable and safe to share across threads. The cache
    never evicts: it is bounded by the number of distinct
    (culture, options) combinations the application uses.

    Example:
        engine = FormattingEngine(provider)
        pair = engine.get_number_formatters("en-GB", {"currency": "GBP"})
        pair.format(1234.56)       # "£1,234.56"
        pair.parse("£1,234.56")    # 1234.56
    """

    def __init__(self, provider: LocaleDataSource) -> None:
        self._provider = provider
        self._cache: dict[CacheKey, FormatterPair[Any]] = {}
        self._lock = threading.Lock()

    @property
    def provider(self) -> LocaleDataSource:
        return self._provider

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.debug("Formatter cache cleared")

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------

    def get_date_formatters(self, culture: str, options: OptionsLike = None) -> FormatterPair[datetime]:
        """Get the cached date formatter/parser pair.

        Raises:
            LocaleNotLoadedError: If no data is loaded for the culture
            FormatOptionsError: If the options name an unknown preset
        """
        return self._get_pair(culture, FormatKind.DATE, options, self._build_date_pair)

    def get_date_formatter(self, culture: str, options: OptionsLike = None) -> Callable[[datetime], str]:
        return self.get_date_formatters(culture, options).format

    def get_date_parser(self, culture: str, options: OptionsLike = None) -> Callable[[str], datetime]:
        return self.get_date_formatters(culture, options).parse

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def get_number_formatters(
        self, culture: str, options: OptionsLike = None
    ) -> FormatterPair[int | float | Decimal]:
        """Get the cached number (or currency) formatter/parser pair.

        Raises:
            LocaleNotLoadedError: If no data is loaded for the culture
            FormatOptionsError: If the options name an unknown preset or an
                invalid currency
        """
        resolved = FormatOptions.from_value(options)
        kind = FormatKind.CURRENCY if resolved.currency is not None else FormatKind.NUMBER
        return self._get_pair(culture, kind, resolved, self._build_number_pair)

    def get_number_formatter(self, culture: str, options: OptionsLike = None) -> Callable[[Any], str]:
        return self.get_number_formatters(culture, options).format

    def get_number_parser(self, culture: str, options: OptionsLike = None) -> Callable[[str], int | float]:
        return self.get_number_formatters(culture, options).parse

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def _get_pair(
        self,
        culture: str,
        kind: FormatKind,
        options: OptionsLike,
        build: Callable[[LocaleBundle, FormatOptions], FormatterPair[Any]],
    ) -> FormatterPair[Any]:
        try:
            tag = canonical_tag(culture)
        except ValueError:
            raise LocaleNotLoadedError(culture) from None
        resolved = FormatOptions.from_value(options)
        key = (tag, kind, resolved.cache_key())

        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        bundle = self._provider.get_locale(tag)
        pair = build(bundle, resolved)

        with self._lock:
            # Another thread may have built the same pair meanwhile
            cached = self._cache.setdefault(key, pair)
        if cached is pair:
            logger.debug(f"Compiled {kind.value} formatter for {tag} [{key[2]}]: {pair.pattern!r}")
        return cached

    @staticmethod
    def _build_date_pair(bundle: LocaleBundle, options: FormatOptions) -> FormatterPair[datetime]:
        compiled = DatePattern(
            resolve_date_pattern(bundle, options), bundle.dates, bundle.symbols, bundle.tag
        )
        return FormatterPair(format=compiled.format, parse=compiled.parse, pattern=compiled.pattern)

    @staticmethod
    def _build_number_pair(bundle: LocaleBundle, options: FormatOptions) -> FormatterPair[Any]:
        compiled = build_number_format(bundle, options)
        return FormatterPair(format=compiled.format, parse=compiled.parse, pattern=compiled.pattern)
