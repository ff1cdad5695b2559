"""Shared fixtures for culturekit tests."""

from __future__ import annotations

import os
import time
from datetime import datetime
from typing import Callable

import pytest

from culturekit.conversion import TypeConverterService
from culturekit.culture import CultureService
from culturekit.engine import FormattingEngine
from culturekit.locale_data import LocaleDataProvider
from culturekit.log import reset_logging
from culturekit.service import GlobalizationService


@pytest.fixture(autouse=True)
def reset_culturekit_logging():
    """Remove handlers installed by configure_logging."""
    yield
    reset_logging()


@pytest.fixture
def local_timezone() -> Callable[[str], None]:
    """Switch the process-local timezone for the duration of a test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    original = os.environ.get("TZ")

    def apply(tz: str) -> None:
        os.environ["TZ"] = tz
        time.tzset()

    yield apply

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()


@pytest.fixture
def provider() -> LocaleDataProvider:
    """Provider with every built-in culture loaded."""
    return LocaleDataProvider.with_builtin()


@pytest.fixture
def cultures() -> CultureService:
    """Culture service for the cultures the demo application ships."""
    return CultureService(["en-GB", "de", "ar-EG"])


@pytest.fixture
def engine(provider: LocaleDataProvider) -> FormattingEngine:
    return FormattingEngine(provider)


@pytest.fixture
def globalization(cultures: CultureService, engine: FormattingEngine) -> GlobalizationService:
    return GlobalizationService(cultures, engine)


@pytest.fixture
def converter(globalization: GlobalizationService) -> TypeConverterService:
    return TypeConverterService(globalization)


@pytest.fixture
def sample_datetime() -> datetime:
    """2018-02-18 19:45:57 local time (a Sunday)."""
    return datetime(2018, 2, 18, 19, 45, 57)
