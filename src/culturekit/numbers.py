"""CLDR Number Pattern Compiler.

Compiles CLDR number patterns (``"#,##0.###"``, ``"¤#,##0.00"``,
``"#,##0 %"``, ``"#E0"``) into a :class:`NumberFormat` that formats with the
culture's symbols and digits and parses the same text back.

Example:
    fmt = NumberFormat("#,##0.###", bundle.symbols, "de")
    fmt.format(1234567.891)        # "1.234.567,891"
    fmt.parse("1.234.567,891")     # 1234567.891
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from functools import lru_cache

from culturekit.errors import ParseError
from culturekit.locale_data import ASCII_DIGITS, NBSP, NumberSymbols
from culturekit.patterns import BIDI_MARKS


logger = logging.getLogger(__name__)

CURRENCY_SIGN = "¤"

# Mantissa precision used when a scientific pattern declares no fraction
SCIENTIFIC_FRACTION_DIGITS = 6

_STRIP_BIDI = {ord(mark): None for mark in BIDI_MARKS}
_PATTERN_RE = re.compile(
    r"^(?P<prefix>[^#0-9,.]*)"
    r"(?P<number>[#0-9,.]+)"
    r"(?:E(?P<plus>\+)?(?P<exponent>0+))?"
    r"(?P<suffix>.*)$",
    re.DOTALL,
)
_PARSED_NUMBER_RE = re.compile(r"^(\d+(\.\d*)?|\.\d+)(E[+-]?\d+)?$")
_DIGIT_SPACE_RE = re.compile(r"(?<=\d)\s(?=\d)")
# Private-use placeholder for whitespace grouping while parsing
_GROUP_MARK = "\ue000"


@dataclass(frozen=True)
class NumberPattern:
    """The parts of a CLDR number pattern that drive formatting."""
    prefix: str
    suffix: str
    min_integer: int
    min_fraction: int
    max_fraction: int
    primary_grouping: int
    secondary_grouping: int
    min_exponent: int = 0

    @property
    def scientific(self) -> bool:
        return self.min_exponent > 0


@lru_cache(maxsize=256)
def parse_number_pattern(pattern: str) -> NumberPattern:
    """Split a CLDR number pattern into affixes and digit rules.

    Only the positive subpattern is used; negatives are rendered by
    prefixing the minus sign.

    Raises:
        ValueError: If the pattern has no digit placeholders
    """
    positive = pattern.split(";", 1)[0]
    match = _PATTERN_RE.match(positive)
    if match is None:
        raise ValueError(f"Invalid number pattern: {pattern!r}")

    number = match.group("number")
    integer, _, fraction = number.partition(".")
    integer_digits = integer.replace(",", "")

    groups = integer.split(",")
    primary = len(groups[-1]) if len(groups) > 1 else 0
    secondary = len(groups[-2]) if len(groups) > 2 else primary

    exponent = match.group("exponent") or ""
    return NumberPattern(
        prefix=match.group("prefix"),
        suffix=match.group("suffix"),
        min_integer=sum(1 for ch in integer_digits if ch != "#"),
        min_fraction=sum(1 for ch in fraction if ch != "#"),
        max_fraction=len(fraction),
        primary_grouping=primary,
        secondary_grouping=secondary,
        min_exponent=len(exponent),
    )


def apply_grouping(int_part: str, separator: str, primary: int, secondary: int) -> str:
    """Insert group separators into a string of integer digits."""
    if primary <= 0 or len(int_part) <= primary:
        return int_part
    groups = [int_part[-primary:]]
    remaining = int_part[:-primary]
    size = secondary or primary
    while remaining:
        groups.insert(0, remaining[-size:])
        remaining = remaining[:-size]
    return separator.join(groups)


class NumberFormat:
    """A compiled number pattern for one culture.

    Args:
        pattern: CLDR number pattern
        symbols: The culture's number symbols
        culture: Culture tag, reported in parse errors
        currency_code: ISO 4217 code for currency patterns
        currency_text: Replacement for the ``¤`` placeholder
        currency_name: Display name appended after the number
            (name display; the pattern's ``¤`` is dropped)
        fraction_digits: Fixed fraction digit count overriding the pattern
    """

    def __init__(
        self,
        pattern: str,
        symbols: NumberSymbols,
        culture: str,
        *,
        currency_code: str | None = None,
        currency_text: str | None = None,
        currency_name: str | None = None,
        fraction_digits: int | None = None,
    ) -> None:
        self.pattern = pattern
        self.culture = culture
        self._symbols = symbols
        self._compiled = parse_number_pattern(pattern)
        self._currency_code = currency_code
        self._currency_name = currency_name

        compiled = self._compiled
        self._min_fraction = compiled.min_fraction
        self._max_fraction = compiled.max_fraction
        if fraction_digits is not None:
            self._min_fraction = self._max_fraction = fraction_digits

        is_currency = CURRENCY_SIGN in compiled.prefix + compiled.suffix
        self._decimal = symbols.get_currency_decimal() if is_currency else symbols.decimal
        self._group = symbols.get_currency_group() if is_currency else symbols.group

        self._prefix = self._localize_affix(compiled.prefix, currency_text)
        self._suffix = self._localize_affix(compiled.suffix, currency_text)
        if currency_name is not None:
            self._prefix = self._prefix.strip()
            self._suffix = f"{self._suffix.strip()} {currency_name}"

        affixes = compiled.prefix + compiled.suffix
        if "%" in affixes:
            self._multiplier = 100
        elif "‰" in affixes:
            self._multiplier = 1000
        else:
            self._multiplier = 1

        if symbols.digits != ASCII_DIGITS:
            self._to_native = str.maketrans(ASCII_DIGITS, symbols.digits)
            self._to_ascii = str.maketrans(symbols.digits, ASCII_DIGITS)
        else:
            self._to_native = None
            self._to_ascii = None

    def __repr__(self) -> str:
        return f"NumberFormat({self.pattern!r}, culture={self.culture!r})"

    def _localize_affix(self, affix: str, currency_text: str | None) -> str:
        symbols = self._symbols
        text = affix.replace("%", symbols.percent).replace("‰", symbols.per_mille)
        if CURRENCY_SIGN in text:
            if currency_text is None or self._currency_name is not None:
                text = text.replace(CURRENCY_SIGN, "")
            elif currency_text.isalpha() and currency_text.isascii():
                # ISO codes are separated from adjacent digits
                if text.startswith(CURRENCY_SIGN):
                    text = text.replace(CURRENCY_SIGN, f"{currency_text}{NBSP}", 1)
                else:
                    text = text.replace(CURRENCY_SIGN, currency_text, 1)
            else:
                text = text.replace(CURRENCY_SIGN, currency_text, 1)
        return text

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format(self, value: float | int | Decimal) -> str:
        """Render a number using this pattern."""
        symbols = self._symbols
        number = _to_decimal(value)

        if number.is_nan():
            return symbols.nan

        negative = number < 0
        if number.is_infinite():
            body = symbols.infinity
        else:
            with localcontext() as ctx:
                ctx.prec = max(ctx.prec, len(number.as_tuple().digits) + 4)
                number = abs(number) * self._multiplier
            if self._compiled.scientific:
                body = self._format_scientific(number)
            else:
                body = self._format_fixed(number, self._min_fraction, self._max_fraction)

        text = f"{self._prefix}{body}{self._suffix}"
        if negative:
            text = f"{symbols.minus}{text}"
        return text

    def _format_fixed(self, number: Decimal, min_fraction: int, max_fraction: int) -> str:
        compiled = self._compiled
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, number.adjusted() + max_fraction + 2)
            rounded = number.quantize(Decimal(1).scaleb(-max_fraction), rounding=ROUND_HALF_UP)
            digits = f"{rounded:f}"

        int_part, _, frac_part = digits.partition(".")
        frac_part = frac_part.rstrip("0").ljust(min_fraction, "0")
        int_part = int_part.lstrip("0").rjust(compiled.min_integer, "0")
        if not int_part and not frac_part:
            int_part = "0"

        int_part = apply_grouping(
            int_part, self._group, compiled.primary_grouping, compiled.secondary_grouping
        )
        text = f"{int_part}{self._decimal}{frac_part}" if frac_part else int_part
        return self._native(text)

    def _format_scientific(self, number: Decimal) -> str:
        fraction_digits = max(self._max_fraction, SCIENTIFIC_FRACTION_DIGITS)
        exponent = 0 if number == 0 else number.adjusted()
        mantissa = number.scaleb(-exponent)

        rounded = mantissa.quantize(Decimal(1).scaleb(-fraction_digits), rounding=ROUND_HALF_UP)
        if rounded >= 10:
            rounded = rounded.scaleb(-1)
            exponent += 1

        mantissa_text = self._format_fixed(rounded, self._min_fraction, fraction_digits)
        sign = self._symbols.minus if exponent < 0 else ""
        exponent_digits = str(abs(exponent)).rjust(self._compiled.min_exponent, "0")
        return f"{mantissa_text}{self._symbols.exponential}{sign}{self._native(exponent_digits)}"

    def _native(self, text: str) -> str:
        return text.translate(self._to_native) if self._to_native else text

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self, text: str) -> int | float:
        """Parse culture-formatted text into a number.

        Parsing is lenient about affixes: currency symbols, codes and names,
        percent signs and whitespace are accepted wherever they appear.
        It is strict about the number itself: group separators may only
        appear in the integer part, in the positions this pattern's grouping
        puts them, and the decimal separator may appear at most once.
        Integral text without a decimal separator, exponent or percent
        returns an ``int``; everything else returns a ``float``.

        Raises:
            ParseError: If no number can be read from the text
        """
        symbols = self._symbols
        cleaned = text.translate(_STRIP_BIDI).strip()
        if self._to_ascii:
            cleaned = cleaned.translate(self._to_ascii)

        nan = symbols.nan.translate(_STRIP_BIDI)
        if cleaned.casefold() in {nan.casefold(), "nan"}:
            return math.nan

        for token in self._affix_tokens():
            cleaned = cleaned.replace(token, "")

        group = self._group
        if group.isspace():
            # Whitespace between digits is a group separator
            cleaned = _DIGIT_SPACE_RE.sub(_GROUP_MARK, cleaned)
            group = _GROUP_MARK
        percent = self._multiplier != 1
        cleaned = re.sub(r"\s+", "", cleaned)

        negative = False
        for sign in self._minus_signs():
            if cleaned.startswith(sign):
                negative = True
                cleaned = cleaned[len(sign):]
                break
        else:
            plus = symbols.plus.translate(_STRIP_BIDI)
            if cleaned.startswith(plus):
                cleaned = cleaned[len(plus):]

        if cleaned == symbols.infinity:
            return -math.inf if negative else math.inf

        exponential = symbols.exponential.translate(_STRIP_BIDI)
        if exponential != "E":
            cleaned = cleaned.replace(exponential, "E")
        mantissa, e, exponent = cleaned.replace("e", "E").partition("E")
        integer, point, fraction = mantissa.partition(self._decimal)

        if group and group in integer:
            if not self._grouped_correctly(integer.split(group)):
                raise ParseError(text, self.culture, self.pattern)
            integer = integer.replace(group, "")

        exponent = exponent.replace("−", "-")
        cleaned = integer + ("." if point else "") + fraction + e + exponent
        if not _PARSED_NUMBER_RE.match(cleaned):
            raise ParseError(text, self.culture, self.pattern)

        if percent:
            result: int | float = float(Decimal(cleaned) / self._multiplier)
        elif "." in cleaned or "E" in cleaned:
            result = float(cleaned)
        else:
            result = int(cleaned)
        return -result if negative else result

    def _grouped_correctly(self, groups: list[str]) -> bool:
        primary = self._compiled.primary_grouping
        if primary <= 0:
            return False
        secondary = self._compiled.secondary_grouping or primary
        head, *middle, last = groups
        return (
            0 < len(head) <= secondary
            and len(last) == primary
            and all(len(part) == secondary for part in middle)
        )

    def _affix_tokens(self) -> list[str]:
        symbols = self._symbols
        tokens = {
            symbols.percent.translate(_STRIP_BIDI),
            symbols.per_mille.translate(_STRIP_BIDI),
            "%",
        }
        if self._currency_name:
            tokens.add(self._currency_name)
        if self._currency_code:
            tokens.add(self._currency_code)
        for affix in (self._prefix, self._suffix):
            affix = affix.translate(_STRIP_BIDI).strip()
            if affix:
                tokens.add(affix)
        tokens.discard("")
        # Longest first so "US$" is removed before "$"
        return sorted(tokens, key=len, reverse=True)

    def _minus_signs(self) -> list[str]:
        minus = self._symbols.minus.translate(_STRIP_BIDI)
        return sorted({minus, "-", "−"} - {""}, key=len, reverse=True)


def _to_decimal(value: float | int | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value):
            return Decimal("NaN")
        # repr gives the shortest text that round-trips
        return Decimal(repr(value))
    return Decimal(str(value))

