"""culturekit - Culture-Aware Formatting, Parsing and Conversion of Dates and Numbers."""

from culturekit.errors import (
    ConversionError,
    CultureKitError,
    FormatOptionsError,
    LocaleNotLoadedError,
    ParseError,
    UnsupportedCultureError,
)
from culturekit.protocols import (
    CurrencyDisplay,
    DateStyle,
    FormatKind,
    FormatOptions,
    FormatterPair,
    LocaleInfo,
    NumberStyle,
    TextDirection,
)

# Locale data
from culturekit.locale_data import (
    LocaleBundle,
    LocaleDataProvider,
    builtin_locales,
    get_builtin_bundle,
)

# Services
from culturekit.culture import CultureService, CultureStream, Subscription, culture_context
from culturekit.engine import FormattingEngine
from culturekit.service import GlobalizationService
from culturekit.conversion import TypeConverterService, ValueKind

# Configuration and wiring
from culturekit.config import CultureConfig, load_config
from culturekit.factory import Services, build_services

# Version: Single source of truth from pyproject.toml
try:
    from importlib.metadata import version, PackageNotFoundError

    __version__ = version("culturekit")
except PackageNotFoundError:
    # Package not installed (development mode)
    __version__ = "0.0.0.dev"

__all__ = [
    # Errors
    "CultureKitError",
    "UnsupportedCultureError",
    "LocaleNotLoadedError",
    "ParseError",
    "ConversionError",
    "FormatOptionsError",
    # Types
    "CurrencyDisplay",
    "DateStyle",
    "FormatKind",
    "FormatOptions",
    "FormatterPair",
    "LocaleInfo",
    "NumberStyle",
    "TextDirection",
    # Locale data
    "LocaleBundle",
    "LocaleDataProvider",
    "builtin_locales",
    "get_builtin_bundle",
    # Services
    "CultureService",
    "CultureStream",
    "Subscription",
    "culture_context",
    "FormattingEngine",
    "GlobalizationService",
    "TypeConverterService",
    "ValueKind",
    # Configuration
    "CultureConfig",
    "load_config",
    "Services",
    "build_services",
]
