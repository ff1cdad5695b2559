"""Tests for the CLDR date pattern compiler."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from culturekit.errors import ParseError
from culturekit.locale_data import RLM, get_builtin_bundle
from culturekit.patterns import (
    DatePattern,
    PatternToken,
    combine_patterns,
    resolve_two_digit_year,
    to_local,
    tokenize,
)

from tests.timezones import CENTRAL_EUROPE, INDIA, UTC


def compile_pattern(pattern: str, culture: str = "en-GB") -> DatePattern:
    bundle = get_builtin_bundle(culture)
    return DatePattern(pattern, bundle.dates, bundle.symbols, bundle.tag)


# =============================================================================
# Tokenizer
# =============================================================================


class TestTokenize:
    """Test CLDR pattern tokenization."""

    def test_fields_and_literals(self):
        assert tokenize("dd/MM/y") == [
            PatternToken("d", 2),
            PatternToken(None, text="/"),
            PatternToken("M", 2),
            PatternToken(None, text="/"),
            PatternToken("y", 1),
        ]

    def test_quoted_literal(self):
        tokens = tokenize("d MMMM 'at' HH")
        assert tokens[3] == PatternToken(None, text=" at ")
        assert [t.letter for t in tokens if not t.is_literal] == ["d", "M", "H"]

    def test_escaped_quote(self):
        tokens = tokenize("h 'o''clock'")
        assert tokens[-1].text == " o'clock"

    def test_unterminated_quote(self):
        with pytest.raises(ValueError, match="Unterminated"):
            tokenize("d 'at")

    def test_unsupported_field(self):
        with pytest.raises(ValueError, match="Unsupported field"):
            tokenize("ww/y")

    def test_non_ascii_letters_are_literal(self):
        tokens = tokenize("y年M月")
        assert [t.letter for t in tokens] == ["y", None, "M", None]


class TestTwoDigitYears:
    """Test two-digit year resolution."""

    def test_recent_year(self):
        assert resolve_two_digit_year(18, date(2026, 10, 19)) == 2018

    def test_window_end_stays_in_century(self):
        assert resolve_two_digit_year(46, date(2026, 10, 19)) == 2046

    def test_beyond_window_goes_back_a_century(self):
        assert resolve_two_digit_year(47, date(2026, 10, 19)) == 1947
        assert resolve_two_digit_year(99, date(2026, 10, 19)) == 1999


class TestCombinePatterns:
    """Test date-time glue."""

    def test_combine(self):
        assert combine_patterns("{1}, {0}", "dd/MM/y", "HH:mm") == "dd/MM/y, HH:mm"

    def test_combine_with_quoted_glue(self):
        assert combine_patterns("{1} 'um' {0}", "d. MMMM y", "HH:mm") == "d. MMMM y 'um' HH:mm"


# =============================================================================
# Formatting
# =============================================================================


class TestDatePatternFormat:
    """Test DatePattern.format."""

    def test_british_default(self, sample_datetime):
        assert compile_pattern("dd/MM/y").format(sample_datetime) == "18/02/2018"

    def test_british_full(self, sample_datetime):
        pattern = compile_pattern("EEEE, d MMMM y")
        assert pattern.format(sample_datetime) == "Sunday, 18 February 2018"

    def test_abbreviated_names(self):
        pattern = compile_pattern("EEE d MMM y")
        assert pattern.format(datetime(2018, 9, 3)) == "Mon 3 Sept 2018"

    def test_german_long(self, sample_datetime):
        pattern = compile_pattern("d. MMMM y", "de")
        assert pattern.format(sample_datetime) == "18. Februar 2018"

    def test_two_digit_year(self, sample_datetime):
        assert compile_pattern("dd.MM.yy", "de").format(sample_datetime) == "18.02.18"

    def test_date_input_is_midnight(self):
        pattern = compile_pattern("dd/MM/y HH:mm")
        assert pattern.format(date(2018, 2, 18)) == "18/02/2018 00:00"

    def test_twelve_hour_clock(self, sample_datetime):
        assert compile_pattern("h:mm a", "en").format(sample_datetime) == "7:45 PM"
        assert compile_pattern("h:mm a", "en").format(datetime(2018, 2, 18, 0, 5)) == "12:05 AM"
        assert compile_pattern("K:mm a", "en").format(datetime(2018, 2, 18, 12, 5)) == "0:05 PM"

    def test_hour_one_to_twenty_four(self):
        assert compile_pattern("kk:mm").format(datetime(2018, 2, 18, 0, 30)) == "24:30"

    def test_fractional_seconds(self):
        value = datetime(2018, 2, 18, 19, 45, 57, 123456)
        assert compile_pattern("HH:mm:ss.SSS").format(value) == "19:45:57.123"

    def test_era(self, sample_datetime):
        assert compile_pattern("y G").format(sample_datetime) == "2018 AD"

    def test_arabic_native_digits(self, sample_datetime):
        pattern = compile_pattern(f"d{RLM}/M{RLM}/y", "ar-EG")
        assert pattern.format(sample_datetime) == f"١٨{RLM}/٢{RLM}/٢٠١٨"

    def test_arabic_day_period(self, sample_datetime):
        assert compile_pattern("h:mm a", "ar-EG").format(sample_datetime) == "٧:٤٥ م"


class TestTimeZones:
    """Test localized GMT offsets and local time conversion."""

    def test_short_offset(self, local_timezone, sample_datetime):
        local_timezone(CENTRAL_EUROPE)
        assert compile_pattern("HH:mm:ss z").format(sample_datetime) == "19:45:57 GMT+1"

    def test_long_offset(self, local_timezone, sample_datetime):
        local_timezone(CENTRAL_EUROPE)
        assert compile_pattern("HH:mm:ss zzzz").format(sample_datetime) == "19:45:57 GMT+01:00"

    def test_daylight_saving_offset(self, local_timezone):
        local_timezone(CENTRAL_EUROPE)
        assert compile_pattern("z").format(datetime(2018, 7, 1, 12)) == "GMT+2"

    def test_half_hour_offset(self, local_timezone, sample_datetime):
        local_timezone(INDIA)
        assert compile_pattern("z").format(sample_datetime) == "GMT+5:30"
        assert compile_pattern("zzzz").format(sample_datetime) == "GMT+05:30"

    def test_zero_offset(self, local_timezone, sample_datetime):
        local_timezone(UTC)
        assert compile_pattern("z").format(sample_datetime) == "GMT"
        assert compile_pattern("z", "fr").format(sample_datetime) == "UTC"

    def test_aware_value_converted_to_local(self, local_timezone):
        local_timezone(CENTRAL_EUROPE)
        value = datetime(2018, 2, 18, 18, 45, 57, tzinfo=timezone.utc)
        assert compile_pattern("HH:mm:ss z").format(value) == "19:45:57 GMT+1"

    def test_to_local(self, local_timezone):
        local_timezone(CENTRAL_EUROPE)
        local = to_local(date(2018, 2, 18))
        assert local.utcoffset() == timedelta(hours=1)
        assert (local.hour, local.minute) == (0, 0)

    def test_parse_zero_offset(self, local_timezone):
        local_timezone(CENTRAL_EUROPE)
        pattern = compile_pattern("dd/MM/y HH:mm:ss z")
        assert pattern.parse("18/02/2018 18:45:57 GMT") == datetime(2018, 2, 18, 19, 45, 57)

    def test_parse_offset(self, local_timezone):
        local_timezone(CENTRAL_EUROPE)
        pattern = compile_pattern("dd/MM/y HH:mm:ss zzzz")
        assert pattern.parse("18/02/2018 20:45:57 GMT+02:00") == datetime(2018, 2, 18, 19, 45, 57)

    def test_format_parse_round_trip(self, local_timezone, sample_datetime):
        local_timezone(INDIA)
        pattern = compile_pattern("dd/MM/y HH:mm:ss z")
        assert pattern.parse(pattern.format(sample_datetime)) == sample_datetime


# =============================================================================
# Parsing
# =============================================================================


class TestDatePatternParse:
    """Test DatePattern.parse."""

    def test_parse_british(self):
        assert compile_pattern("dd/MM/y").parse("18/02/2018") == datetime(2018, 2, 18)

    def test_parse_accepts_single_digits(self):
        assert compile_pattern("dd/MM/y").parse("8/2/2018") == datetime(2018, 2, 8)

    def test_parse_month_names_case_insensitive(self):
        pattern = compile_pattern("d. MMMM y", "de")
        assert pattern.parse("18. februar 2018") == datetime(2018, 2, 18)

    def test_parse_abbreviated_month(self):
        assert compile_pattern("d MMM y").parse("3 Sept 2018") == datetime(2018, 9, 3)

    def test_parse_ignores_weekday(self):
        pattern = compile_pattern("EEEE, d MMMM y")
        assert pattern.parse("Monday, 18 February 2018") == datetime(2018, 2, 18)

    def test_parse_whitespace_is_flexible(self):
        pattern = compile_pattern("d MMMM y")
        assert pattern.parse("  18  February 2018 ") == datetime(2018, 2, 18)

    def test_parse_two_digit_year(self):
        assert compile_pattern("dd.MM.yy", "de").parse("18.02.18") == datetime(2018, 2, 18)

    def test_parse_twelve_hour_clock(self):
        parsed = compile_pattern("h:mm a", "en").parse("7:45 pm")
        assert (parsed.hour, parsed.minute) == (19, 45)
        assert parsed.date() == date.today()

    def test_parse_midnight_twelve(self):
        parsed = compile_pattern("h:mm a", "en").parse("12:05 AM")
        assert (parsed.hour, parsed.minute) == (0, 5)

    def test_parse_twelve_hour_out_of_range(self):
        with pytest.raises(ParseError):
            compile_pattern("h:mm a", "en").parse("13:05 PM")

    def test_parse_date_only_is_midnight(self):
        parsed = compile_pattern("d MMMM y").parse("18 February 2018")
        assert parsed.time() == datetime.min.time()

    def test_parse_without_year_uses_current_year(self):
        parsed = compile_pattern("d MMMM").parse("18 February")
        assert parsed == datetime(date.today().year, 2, 18)

    def test_parse_fractional_seconds(self):
        parsed = compile_pattern("HH:mm:ss.SSS").parse("19:45:57.5")
        assert parsed.microsecond == 500000

    def test_parse_arabic(self, sample_datetime):
        pattern = compile_pattern(f"d{RLM}/M{RLM}/y", "ar-EG")
        assert pattern.parse(f"١٨{RLM}/٢{RLM}/٢٠١٨") == datetime(2018, 2, 18)
        assert pattern.parse("18/2/2018") == datetime(2018, 2, 18)

    def test_parse_arabic_day_period(self):
        parsed = compile_pattern("h:mm a", "ar-EG").parse("٧:٤٥ م")
        assert (parsed.hour, parsed.minute) == (19, 45)

    def test_invalid_calendar_date(self):
        with pytest.raises(ParseError) as exc_info:
            compile_pattern("dd/MM/y").parse("30/02/2018")
        assert exc_info.value.culture == "en-GB"
        assert exc_info.value.pattern == "dd/MM/y"

    def test_text_not_matching(self):
        with pytest.raises(ParseError):
            compile_pattern("dd/MM/y").parse("18.02.2018")

    def test_garbage(self):
        with pytest.raises(ParseError) as exc_info:
            compile_pattern("d MMMM y").parse("not a date")
        assert exc_info.value.text == "not a date"

    def test_has_date_and_time(self):
        assert compile_pattern("dd/MM/y").has_date
        assert not compile_pattern("dd/MM/y").has_time
        assert compile_pattern("HH:mm").has_time
        assert not compile_pattern("HH:mm").has_date
