"""Tests for the CLDR number pattern compiler."""

from __future__ import annotations

import math
from decimal import Decimal

import pytest

from culturekit.errors import ParseError
from culturekit.locale_data import ALM, NBSP, NNBSP, get_builtin_bundle
from culturekit.numbers import NumberFormat, apply_grouping, parse_number_pattern


def number_format(pattern: str, culture: str = "en", **kwargs) -> NumberFormat:
    return NumberFormat(pattern, get_builtin_bundle(culture).symbols, culture, **kwargs)


DECIMAL = "#,##0.###"


class TestNumberPatternParsing:
    """Test CLDR number pattern analysis."""

    def test_decimal_pattern(self):
        compiled = parse_number_pattern(DECIMAL)
        assert compiled.prefix == ""
        assert compiled.suffix == ""
        assert compiled.min_integer == 1
        assert (compiled.min_fraction, compiled.max_fraction) == (0, 3)
        assert (compiled.primary_grouping, compiled.secondary_grouping) == (3, 3)
        assert not compiled.scientific

    def test_currency_pattern(self):
        compiled = parse_number_pattern(f"#,##0.00{NBSP}¤")
        assert compiled.suffix == f"{NBSP}¤"
        assert compiled.min_fraction == compiled.max_fraction == 2

    def test_scientific_pattern(self):
        compiled = parse_number_pattern("#E0")
        assert compiled.scientific
        assert compiled.min_exponent == 1

    def test_indian_grouping(self):
        compiled = parse_number_pattern("#,##,##0.###")
        assert (compiled.primary_grouping, compiled.secondary_grouping) == (3, 2)

    def test_negative_subpattern_ignored(self):
        assert parse_number_pattern("#,##0.00;(#,##0.00)").suffix == ""

    def test_invalid_pattern(self):
        with pytest.raises(ValueError):
            parse_number_pattern("abc")


class TestApplyGrouping:
    """Test digit grouping."""

    def test_short_numbers_untouched(self):
        assert apply_grouping("123", ",", 3, 3) == "123"

    def test_thousands(self):
        assert apply_grouping("1234567", ",", 3, 3) == "1,234,567"

    def test_secondary_grouping(self):
        assert apply_grouping("1234567", ",", 3, 2) == "12,34,567"

    def test_no_grouping(self):
        assert apply_grouping("1234567", ",", 0, 0) == "1234567"


# =============================================================================
# Formatting
# =============================================================================


class TestNumberFormat:
    """Test NumberFormat.format."""

    def test_english(self):
        assert number_format(DECIMAL).format(1234567.891) == "1,234,567.891"

    def test_german(self):
        assert number_format(DECIMAL, "de").format(1234567.891) == "1.234.567,891"

    def test_french_narrow_space_group(self):
        assert number_format(DECIMAL, "fr").format(1234567.891) == f"1{NNBSP}234{NNBSP}567,891"

    def test_trailing_zeros_trimmed(self):
        fmt = number_format(DECIMAL)
        assert fmt.format(1.5) == "1.5"
        assert fmt.format(2.0) == "2"
        assert fmt.format(0.5) == "0.5"

    def test_rounds_half_up(self):
        fmt = number_format(DECIMAL)
        assert fmt.format(1.0005) == "1.001"
        assert number_format(DECIMAL, fraction_digits=0).format(2.5) == "3"

    def test_negative(self):
        assert number_format(DECIMAL).format(-1234.5) == "-1,234.5"

    def test_decimal_and_int_inputs(self):
        fmt = number_format(DECIMAL)
        assert fmt.format(Decimal("1234.5")) == "1,234.5"
        assert fmt.format(10 ** 20) == "100,000,000,000,000,000,000"

    def test_nan(self):
        assert number_format(DECIMAL).format(math.nan) == "NaN"

    def test_infinity(self):
        fmt = number_format(DECIMAL)
        assert fmt.format(math.inf) == "∞"
        assert fmt.format(-math.inf) == "-∞"

    def test_percent(self):
        assert number_format("#,##0%").format(0.256) == "26%"
        assert number_format(f"#,##0{NBSP}%", "de").format(0.256) == f"26{NBSP}%"

    def test_per_mille(self):
        assert number_format("#,##0‰").format(0.0125) == "13‰"

    def test_scientific(self):
        fmt = number_format("#E0")
        assert fmt.format(1234567.891) == "1.234568E6"
        assert fmt.format(0.000123) == "1.23E-4"
        assert fmt.format(0) == "0E0"

    def test_arabic(self):
        fmt = number_format(DECIMAL, "ar-EG")
        assert fmt.format(1234.5) == "١٬٢٣٤٫٥"
        assert fmt.format(-1234.5) == f"{ALM}-١٬٢٣٤٫٥"
        assert fmt.format(math.nan) == "ليس رقمًا"


class TestCurrencyFormat:
    """Test currency affixes."""

    def test_symbol_prefix(self):
        fmt = number_format(
            "¤#,##0.00", "en-GB", currency_code="GBP", currency_text="£", fraction_digits=2
        )
        assert fmt.format(1234.56) == "£1,234.56"
        assert fmt.format(-5) == "-£5.00"
        assert fmt.format(math.inf) == "£∞"

    def test_symbol_suffix(self):
        fmt = number_format(
            f"#,##0.00{NBSP}¤", "de", currency_code="EUR", currency_text="€", fraction_digits=2
        )
        assert fmt.format(1234.56) == f"1.234,56{NBSP}€"

    def test_code_prefix_is_separated(self):
        fmt = number_format(
            "¤#,##0.00", "en-GB", currency_code="GBP", currency_text="GBP", fraction_digits=2
        )
        assert fmt.format(1234.56) == f"GBP{NBSP}1,234.56"

    def test_name_follows_number(self):
        fmt = number_format(
            "¤#,##0.00",
            "en-GB",
            currency_code="GBP",
            currency_text="£",
            currency_name="British pounds",
            fraction_digits=2,
        )
        assert fmt.format(1234.56) == "1,234.56 British pounds"

    def test_zero_decimal_currency(self):
        fmt = number_format(
            "¤#,##0.00", "en", currency_code="JPY", currency_text="¥", fraction_digits=0
        )
        assert fmt.format(1234.5) == "¥1,235"


# =============================================================================
# Parsing
# =============================================================================


class TestNumberParse:
    """Test NumberFormat.parse."""

    def test_parse_english(self):
        assert number_format(DECIMAL).parse("1,234,567.891") == 1234567.891

    def test_parse_german(self):
        assert number_format(DECIMAL, "de").parse("1.234.567,891") == 1234567.891

    def test_parse_french(self):
        fmt = number_format(DECIMAL, "fr")
        assert fmt.parse(fmt.format(1234567.891)) == 1234567.891

    def test_parse_integer_returns_int(self):
        result = number_format(DECIMAL).parse("1,234")
        assert result == 1234
        assert isinstance(result, int)

    def test_parse_fraction_returns_float(self):
        assert isinstance(number_format(DECIMAL).parse("12.0"), float)

    def test_parse_negative(self):
        assert number_format(DECIMAL).parse("-1,234.5") == -1234.5
        assert number_format(DECIMAL).parse("−1,234.5") == -1234.5

    def test_parse_plus(self):
        assert number_format(DECIMAL).parse("+12") == 12

    def test_parse_percent(self):
        assert number_format("#,##0%").parse("26%") == 0.26
        assert number_format(f"#,##0{NBSP}%", "de").parse(f"26{NBSP}%") == 0.26

    def test_parse_scientific(self):
        assert number_format("#E0").parse("1.234568E6") == 1234568.0

    def test_parse_nan_and_infinity(self):
        fmt = number_format(DECIMAL)
        assert math.isnan(fmt.parse("NaN"))
        assert fmt.parse("∞") == math.inf
        assert fmt.parse("-∞") == -math.inf

    def test_parse_arabic(self):
        fmt = number_format(DECIMAL, "ar-EG")
        assert fmt.parse("١٬٢٣٤٫٥") == 1234.5
        assert fmt.parse(f"{ALM}-١٬٢٣٤٫٥") == -1234.5
        assert math.isnan(fmt.parse("ليس رقمًا"))

    def test_parse_currency_is_lenient(self):
        fmt = number_format(
            "¤#,##0.00", "en-GB", currency_code="GBP", currency_text="£", fraction_digits=2
        )
        assert fmt.parse("£1,234.56") == 1234.56
        assert fmt.parse("1,234.56") == 1234.56
        assert fmt.parse("GBP 1,234.56") == 1234.56

    def test_parse_currency_suffix(self):
        fmt = number_format(
            f"#,##0.00{NBSP}¤", "de", currency_code="EUR", currency_text="€", fraction_digits=2
        )
        assert fmt.parse(f"1.234,56{NBSP}€") == 1234.56
        assert fmt.parse("-1.234,56 EUR") == -1234.56

    def test_parse_currency_name(self):
        fmt = number_format(
            "¤#,##0.00",
            "en-GB",
            currency_code="GBP",
            currency_text="£",
            currency_name="British pounds",
            fraction_digits=2,
        )
        assert fmt.parse("1,234.56 British pounds") == 1234.56

    @pytest.mark.parametrize("text", ["", "abc", "1.2.3", "12abc", "--5"])
    def test_parse_invalid(self, text):
        with pytest.raises(ParseError) as exc_info:
            number_format(DECIMAL).parse(text)
        assert exc_info.value.culture == "en"

    @pytest.mark.parametrize(
        ("culture", "text"),
        [
            ("en", "1.234,5"),
            ("en", "1,2"),
            ("en", "12,34,567"),
            ("en", ",234"),
            ("en", "1.5E1,0"),
            ("de", "1,234.5"),
            ("de", "12,3.4"),
            ("de", "1,2,3"),
            ("fr", f"1{NNBSP}2,5"),
        ],
    )
    def test_parse_rejects_misplaced_separators(self, culture, text):
        with pytest.raises(ParseError) as exc_info:
            number_format(DECIMAL, culture).parse(text)
        assert exc_info.value.culture == culture

    def test_parse_secondary_grouping(self):
        fmt = number_format("#,##,##0.###")
        assert fmt.parse("12,34,567.5") == 1234567.5
        with pytest.raises(ParseError):
            fmt.parse("1,234,567.5")

    def test_parse_ungrouped_pattern_rejects_groups(self):
        with pytest.raises(ParseError):
            number_format("#E0").parse("1,234E3")
