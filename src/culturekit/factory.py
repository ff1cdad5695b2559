"""Service wiring.

Builds the provider, culture service, engine, globalization and converter
services from a :class:`CultureConfig`.

Usage:
    from culturekit.config import load_config
    from culturekit.factory import build_services

    services = build_services(load_config())
    services.globalization.format_date(datetime.now())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from culturekit.config import CultureConfig
from culturekit.conversion import TypeConverterService
from culturekit.culture import CultureService
from culturekit.engine import FormattingEngine
from culturekit.locale_data import LocaleDataProvider, builtin_locales, get_builtin_bundle
from culturekit.service import GlobalizationService


logger = logging.getLogger(__name__)


@dataclass
class Services:
    """The wired culturekit services."""
    provider: LocaleDataProvider
    cultures: CultureService
    engine: FormattingEngine
    globalization: GlobalizationService
    converter: TypeConverterService


def build_services(
    config: CultureConfig | None = None,
    provider: LocaleDataProvider | None = None,
) -> Services:
    """Wire services for the configured cultures.

    Locale files from the configuration are loaded first; built-in data is
    loaded for every other supported culture that has it. Supported
    cultures left without data are reported and raise
    ``LocaleNotLoadedError`` when used.

    Args:
        config: Settings (defaults to ``CultureConfig()``)
        provider: Pre-populated provider to use instead of a new one
    """
    config = config or CultureConfig()
    provider = provider or LocaleDataProvider()

    for path in config.locale_files:
        tag = provider.load_file(path)
        logger.info(f"Loaded locale file {path} as {tag}")

    builtin = set(builtin_locales())
    for culture in config.supported_cultures:
        if provider.has_locale(culture):
            continue
        if culture in builtin:
            provider.load_locale(culture, get_builtin_bundle(culture))
        else:
            logger.warning(f"No locale data available for supported culture {culture}")

    cultures = CultureService(config.supported_cultures)
    engine = FormattingEngine(provider)
    globalization = GlobalizationService(cultures, engine)
    return Services(
        provider=provider,
        cultures=cultures,
        engine=engine,
        globalization=globalization,
        converter=TypeConverterService(globalization),
    )
