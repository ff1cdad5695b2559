"""Locale data tables and the in-memory locale data provider.

Locale data is organised per culture in a :class:`LocaleBundle`:

- DateTimePatterns: CLDR date, time and date-time patterns plus the
  month, weekday, day-period and era names they reference
- NumberSymbols / NumberPatterns: decimal and grouping separators, native
  digits, NaN/infinity sentinels and the decimal/percent/currency/scientific
  patterns
- currency symbol and display-name overrides

Built-in bundles derived from CLDR are shipped for en, en-GB, de, fr and
ar-EG. Bundles are registered explicitly with :class:`LocaleDataProvider`;
nothing is loaded implicitly at formatting time.

Usage:
    from culturekit.locale_data import LocaleDataProvider

    provider = LocaleDataProvider.with_builtin("en-GB", "de")
    provider.has_locale("de")          # True
    provider.get_locale("fr")          # raises LocaleNotLoadedError

    # Load CLDR-style JSON exported by another tool
    provider.load_file("locales/nl.json")
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

from culturekit.errors import LocaleNotLoadedError
from culturekit.protocols import DateStyle, LocaleInfo, TextDirection, canonical_tag


logger = logging.getLogger(__name__)

NBSP = "\u00a0"
NNBSP = "\u202f"
RLM = "\u200f"
ALM = "\u061c"

ASCII_DIGITS = "0123456789"


# ==============================================================================
# Locale Data: Number Symbols and Patterns
# ==============================================================================

@dataclass
class NumberSymbols:
    """Locale-specific number symbols.

    Based on CLDR number symbols data.
    """
    decimal: str = "."
    group: str = ","
    minus: str = "-"
    plus: str = "+"
    percent: str = "%"
    per_mille: str = "‰"
    exponential: str = "E"
    infinity: str = "∞"
    nan: str = "NaN"
    digits: str = ASCII_DIGITS
    currency_decimal: str | None = None
    currency_group: str | None = None

    def get_currency_decimal(self) -> str:
        """Get decimal separator for currency (falls back to decimal)."""
        return self.currency_decimal or self.decimal

    def get_currency_group(self) -> str:
        """Get grouping separator for currency (falls back to group)."""
        return self.currency_group or self.group


@dataclass
class NumberPatterns:
    """CLDR number patterns for the presets a culture supports."""
    decimal: str = "#,##0.###"
    percent: str = "#,##0%"
    currency: str = "¤#,##0.00"
    scientific: str = "#E0"


# ==============================================================================
# Locale Data: Currency Information
# ==============================================================================

@dataclass
class CurrencyInfo:
    """Currency formatting information."""
    code: str
    symbol: str
    narrow_symbol: str | None = None
    name: str = ""
    decimal_digits: int = 2


_CURRENCIES: dict[str, CurrencyInfo] = {
    "USD": CurrencyInfo("USD", "$", "$", "US Dollar", 2),
    "EUR": CurrencyInfo("EUR", "€", "€", "Euro", 2),
    "GBP": CurrencyInfo("GBP", "£", "£", "British Pound", 2),
    "JPY": CurrencyInfo("JPY", "¥", "¥", "Japanese Yen", 0),
    "CNY": CurrencyInfo("CNY", "¥", "¥", "Chinese Yuan", 2),
    "CHF": CurrencyInfo("CHF", "CHF", "CHF", "Swiss Franc", 2),
    "EGP": CurrencyInfo("EGP", "EGP", "E£", "Egyptian Pound", 2),
    "SAR": CurrencyInfo("SAR", "SAR", "ر.س", "Saudi Riyal", 2),
    "AED": CurrencyInfo("AED", "AED", "د.إ", "UAE Dirham", 2),
    "INR": CurrencyInfo("INR", "₹", "₹", "Indian Rupee", 2),
    "KRW": CurrencyInfo("KRW", "₩", "₩", "Korean Won", 0),
    "SEK": CurrencyInfo("SEK", "SEK", "kr", "Swedish Krona", 2),
    "CAD": CurrencyInfo("CAD", "CA$", "$", "Canadian Dollar", 2),
    "AUD": CurrencyInfo("AUD", "A$", "$", "Australian Dollar", 2),
}


def get_currency_info(code: str) -> CurrencyInfo:
    """Get currency information.

    Args:
        code: ISO 4217 currency code

    Returns:
        CurrencyInfo for the currency (a generic entry for unknown codes)
    """
    code = code.upper()
    return _CURRENCIES.get(code, CurrencyInfo(code, code, code, code))


# ==============================================================================
# Locale Data: Date/Time Patterns
# ==============================================================================

@dataclass
class DateTimePatterns:
    """Locale-specific date/time patterns.

    ``date_default`` is the culture's rendering of the CLDR ``yMd``
    skeleton, used when no preset is requested. The ``datetime_*`` entries
    are glue patterns where ``{1}`` is the date and ``{0}`` the time.
    """
    date_default: str = "M/d/y"
    date_short: str = "M/d/yy"
    date_medium: str = "MMM d, y"
    date_long: str = "MMMM d, y"
    date_full: str = "EEEE, MMMM d, y"

    time_short: str = "h:mm a"
    time_medium: str = "h:mm:ss a"
    time_long: str = "h:mm:ss a z"
    time_full: str = "h:mm:ss a zzzz"

    datetime_short: str = "{1}, {0}"
    datetime_medium: str = "{1}, {0}"
    datetime_long: str = "{1} 'at' {0}"
    datetime_full: str = "{1} 'at' {0}"

    months_wide: list[str] = field(default_factory=lambda: [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December"
    ])
    months_abbreviated: list[str] = field(default_factory=lambda: [
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"
    ])

    # Sunday first, as in CLDR
    days_wide: list[str] = field(default_factory=lambda: [
        "Sunday", "Monday", "Tuesday", "Wednesday",
        "Thursday", "Friday", "Saturday"
    ])
    days_abbreviated: list[str] = field(default_factory=lambda: [
        "Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"
    ])

    am: str = "AM"
    pm: str = "PM"

    era_abbreviated: list[str] = field(default_factory=lambda: ["BC", "AD"])

    # Localized GMT format for the z/zzzz fields
    gmt_format: str = "GMT{0}"
    gmt_zero: str = "GMT"

    def date_pattern(self, style: DateStyle) -> str:
        return getattr(self, f"date_{style.value}")

    def time_pattern(self, style: DateStyle) -> str:
        return getattr(self, f"time_{style.value}")

    def datetime_glue(self, style: DateStyle) -> str:
        return getattr(self, f"datetime_{style.value}")


# ==============================================================================
# Locale Bundle
# ==============================================================================

@dataclass
class LocaleBundle:
    """All tables needed to format and parse values for one culture."""
    tag: str
    dates: DateTimePatterns = field(default_factory=DateTimePatterns)
    symbols: NumberSymbols = field(default_factory=NumberSymbols)
    number_patterns: NumberPatterns = field(default_factory=NumberPatterns)
    currency_symbols: dict[str, str] = field(default_factory=dict)
    currency_names: dict[str, str] = field(default_factory=dict)

    @property
    def locale(self) -> LocaleInfo:
        return LocaleInfo.parse(self.tag)

    @property
    def direction(self) -> TextDirection:
        return self.locale.direction

    def currency_symbol(self, code: str) -> str:
        code = code.upper()
        return self.currency_symbols.get(code) or get_currency_info(code).symbol

    def currency_name(self, code: str) -> str:
        code = code.upper()
        return self.currency_names.get(code) or get_currency_info(code).name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], tag: str | None = None) -> "LocaleBundle":
        """Build a bundle from its JSON form.

        Expected shape::

            {
                "tag": "nl",
                "dates": {"date_default": "d-M-y", "months_wide": [...], ...},
                "symbols": {"decimal": ",", "group": "."},
                "number_patterns": {"currency": "¤ #,##0.00"},
                "currency_symbols": {"EUR": "€"},
                "currency_names": {"EUR": "euro"}
            }

        Unknown keys are ignored; missing keys keep the CLDR root defaults.
        """
        bundle_tag = tag or data.get("tag")
        if not bundle_tag:
            raise ValueError("Locale bundle has no tag")
        return cls(
            tag=canonical_tag(bundle_tag),
            dates=_build(DateTimePatterns, data.get("dates", {})),
            symbols=_build(NumberSymbols, data.get("symbols", {})),
            number_patterns=_build(NumberPatterns, data.get("number_patterns", {})),
            currency_symbols=dict(data.get("currency_symbols", {})),
            currency_names=dict(data.get("currency_names", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _build(cls: type, data: Mapping[str, Any]) -> Any:
    known = {f.name for f in fields(cls)}
    return cls(**{key: value for key, value in data.items() if key in known})


# ==============================================================================
# Built-in Locale Data (CLDR)
# ==============================================================================

_ENGLISH_CURRENCY_NAMES = {
    "USD": "US dollars",
    "EUR": "euros",
    "GBP": "British pounds",
    "EGP": "Egyptian pounds",
    "JPY": "Japanese yen",
    "CHF": "Swiss francs",
}

_ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"


def _english() -> LocaleBundle:
    return LocaleBundle(
        tag="en",
        currency_names=dict(_ENGLISH_CURRENCY_NAMES),
    )


def _english_gb() -> LocaleBundle:
    return LocaleBundle(
        tag="en-GB",
        dates=DateTimePatterns(
            date_default="dd/MM/y",
            date_short="dd/MM/y",
            date_medium="d MMM y",
            date_long="d MMMM y",
            date_full="EEEE, d MMMM y",
            time_short="HH:mm",
            time_medium="HH:mm:ss",
            time_long="HH:mm:ss z",
            time_full="HH:mm:ss zzzz",
            months_abbreviated=["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                                "Jul", "Aug", "Sept", "Oct", "Nov", "Dec"],
            am="am",
            pm="pm",
        ),
        currency_symbols={"USD": "US$"},
        currency_names=dict(_ENGLISH_CURRENCY_NAMES),
    )


def _german() -> LocaleBundle:
    return LocaleBundle(
        tag="de",
        dates=DateTimePatterns(
            date_default="d.M.y",
            date_short="dd.MM.yy",
            date_medium="dd.MM.y",
            date_long="d. MMMM y",
            date_full="EEEE, d. MMMM y",
            time_short="HH:mm",
            time_medium="HH:mm:ss",
            time_long="HH:mm:ss z",
            time_full="HH:mm:ss zzzz",
            datetime_long="{1} 'um' {0}",
            datetime_full="{1} 'um' {0}",
            months_wide=[
                "Januar", "Februar", "März", "April", "Mai", "Juni",
                "Juli", "August", "September", "Oktober", "November", "Dezember"
            ],
            months_abbreviated=["Jan.", "Feb.", "März", "Apr.", "Mai", "Juni",
                                "Juli", "Aug.", "Sept.", "Okt.", "Nov.", "Dez."],
            days_wide=["Sonntag", "Montag", "Dienstag", "Mittwoch",
                       "Donnerstag", "Freitag", "Samstag"],
            days_abbreviated=["So.", "Mo.", "Di.", "Mi.", "Do.", "Fr.", "Sa."],
            era_abbreviated=["v. Chr.", "n. Chr."],
        ),
        symbols=NumberSymbols(decimal=",", group="."),
        number_patterns=NumberPatterns(
            percent=f"#,##0{NBSP}%",
            currency=f"#,##0.00{NBSP}¤",
        ),
        currency_names={
            "USD": "US-Dollar",
            "EUR": "Euro",
            "GBP": "Britische Pfund",
            "EGP": "Ägyptische Pfund",
            "JPY": "Japanische Yen",
            "CHF": "Schweizer Franken",
        },
    )


def _french() -> LocaleBundle:
    return LocaleBundle(
        tag="fr",
        dates=DateTimePatterns(
            date_default="dd/MM/y",
            date_short="dd/MM/y",
            date_medium="d MMM y",
            date_long="d MMMM y",
            date_full="EEEE d MMMM y",
            time_short="HH:mm",
            time_medium="HH:mm:ss",
            time_long="HH:mm:ss z",
            time_full="HH:mm:ss zzzz",
            datetime_short="{1} {0}",
            datetime_medium="{1} 'à' {0}",
            datetime_long="{1} 'à' {0}",
            datetime_full="{1} 'à' {0}",
            months_wide=[
                "janvier", "février", "mars", "avril", "mai", "juin",
                "juillet", "août", "septembre", "octobre", "novembre", "décembre"
            ],
            months_abbreviated=["janv.", "févr.", "mars", "avr.", "mai", "juin",
                                "juil.", "août", "sept.", "oct.", "nov.", "déc."],
            days_wide=["dimanche", "lundi", "mardi", "mercredi",
                       "jeudi", "vendredi", "samedi"],
            days_abbreviated=["dim.", "lun.", "mar.", "mer.", "jeu.", "ven.", "sam."],
            era_abbreviated=["av. J.-C.", "ap. J.-C."],
            gmt_format="UTC{0}",
            gmt_zero="UTC",
        ),
        symbols=NumberSymbols(decimal=",", group=NNBSP),
        number_patterns=NumberPatterns(
            percent=f"#,##0{NNBSP}%",
            currency=f"#,##0.00{NBSP}¤",
        ),
        currency_symbols={"USD": "$US", "GBP": "£GB"},
        currency_names={
            "USD": "dollars des États-Unis",
            "EUR": "euros",
            "GBP": "livres sterling",
            "CHF": "francs suisses",
        },
    )


def _arabic_egypt() -> LocaleBundle:
    return LocaleBundle(
        tag="ar-EG",
        dates=DateTimePatterns(
            date_default=f"d{RLM}/M{RLM}/y",
            date_short=f"d{RLM}/M{RLM}/y",
            date_medium=f"dd{RLM}/MM{RLM}/y",
            date_long="d MMMM y",
            date_full="EEEE، d MMMM y",
            datetime_short="{1} {0}",
            datetime_medium="{1} {0}",
            datetime_long="{1} في {0}",
            datetime_full="{1} في {0}",
            months_wide=[
                "يناير", "فبراير", "مارس", "أبريل", "مايو", "يونيو",
                "يوليو", "أغسطس", "سبتمبر", "أكتوبر", "نوفمبر", "ديسمبر"
            ],
            months_abbreviated=[
                "يناير", "فبراير", "مارس", "أبريل", "مايو", "يونيو",
                "يوليو", "أغسطس", "سبتمبر", "أكتوبر", "نوفمبر", "ديسمبر"
            ],
            days_wide=["الأحد", "الاثنين", "الثلاثاء", "الأربعاء",
                       "الخميس", "الجمعة", "السبت"],
            days_abbreviated=["الأحد", "الاثنين", "الثلاثاء", "الأربعاء",
                              "الخميس", "الجمعة", "السبت"],
            am="ص",
            pm="م",
            era_abbreviated=["ق.م", "م"],
            gmt_format="غرينتش{0}",
            gmt_zero="غرينتش",
        ),
        symbols=NumberSymbols(
            decimal="٫",
            group="٬",
            minus=f"{ALM}-",
            plus=f"{ALM}+",
            percent=f"٪{ALM}",
            per_mille="؉",
            exponential="اس",
            nan="ليس رقمًا",
            digits=_ARABIC_DIGITS,
        ),
        number_patterns=NumberPatterns(
            currency=f"{RLM}#,##0.00{NBSP}¤",
        ),
        currency_symbols={"EGP": f"ج.م.{RLM}", "USD": "US$", "GBP": "UK£"},
        currency_names={
            "EGP": "جنيه مصري",
            "USD": "دولار أمريكي",
            "EUR": "يورو",
            "GBP": "جنيه إسترليني",
        },
    )


_BUILTIN_FACTORIES = {
    "en": _english,
    "en-GB": _english_gb,
    "de": _german,
    "fr": _french,
    "ar-EG": _arabic_egypt,
}


def builtin_locales() -> list[str]:
    """List the cultures with built-in CLDR data."""
    return list(_BUILTIN_FACTORIES)


def get_builtin_bundle(identifier: str) -> LocaleBundle:
    """Create a fresh copy of a built-in bundle.

    Raises:
        KeyError: If no built-in data exists for the culture
    """
    tag = canonical_tag(identifier)
    try:
        factory = _BUILTIN_FACTORIES[tag]
    except KeyError:
        raise KeyError(f"No built-in locale data for {identifier!r}") from None
    return factory()


# ==============================================================================
# Provider
# ==============================================================================

class LocaleDataProvider:
    """In-memory store of loaded locale bundles.

    Lookups are exact after tag normalization: "en_gb" finds "en-GB", but
    "de-AT" never falls back to "de". Loading is a bootstrap concern; the
    formatting layers only read.
    """

    def __init__(self, bundles: Mapping[str, LocaleBundle | Mapping[str, Any]] | None = None) -> None:
        self._bundles: dict[str, LocaleBundle] = {}
        self._lock = threading.Lock()
        for identifier, bundle in (bundles or {}).items():
            self.load_locale(identifier, bundle)

    @classmethod
    def with_builtin(cls, *identifiers: str) -> "LocaleDataProvider":
        """Create a provider preloaded with built-in bundles.

        Args:
            *identifiers: Cultures to load (all built-in cultures if empty)
        """
        provider = cls()
        for identifier in identifiers or builtin_locales():
            provider.load_locale(identifier, get_builtin_bundle(identifier))
        return provider

    def load_locale(self, identifier: str, bundle: LocaleBundle | Mapping[str, Any]) -> None:
        """Register (or replace) the tables for a culture."""
        tag = canonical_tag(identifier)
        if not isinstance(bundle, LocaleBundle):
            bundle = LocaleBundle.from_dict(bundle, tag=tag)
        with self._lock:
            self._bundles[tag] = bundle
        logger.debug(f"Loaded locale data for {tag}")

    def load_file(self, path: str | Path, identifier: str | None = None) -> str:
        """Load a bundle from a JSON file.

        Args:
            path: Path to the JSON bundle
            identifier: Culture to register it under (defaults to the
                bundle's ``tag`` or the file stem)

        Returns:
            The culture tag the bundle was registered under
        """
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        tag = canonical_tag(identifier or data.get("tag") or path.stem)
        self.load_locale(tag, data)
        return tag

    def has_locale(self, identifier: str) -> bool:
        try:
            tag = canonical_tag(identifier)
        except ValueError:
            return False
        with self._lock:
            return tag in self._bundles

    def get_locale(self, identifier: str) -> LocaleBundle:
        try:
            tag = canonical_tag(identifier)
        except ValueError:
            raise LocaleNotLoadedError(identifier) from None
        with self._lock:
            bundle = self._bundles.get(tag)
        if bundle is None:
            raise LocaleNotLoadedError(identifier)
        return bundle

    def available_locales(self) -> list[str]:
        with self._lock:
            return sorted(self._bundles)
