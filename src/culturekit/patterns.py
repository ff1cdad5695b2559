"""CLDR Date Pattern Compiler.

Compiles a CLDR date/time pattern (``"d MMMM y"``, ``"HH:mm:ss z"``) into a
:class:`DatePattern` that both formats and parses, so text produced by
``format`` always parses back to the same value at the pattern's precision.

Supported fields:
- G: era (abbreviated)
- y: year (``yy`` is two-digit)
- M, L: month (1-2 letters numeric, 3 abbreviated, 4 wide)
- d: day of month
- E, c: weekday (formatted; accepted and ignored when parsing)
- a: day period (AM/PM)
- H, k, h, K: hour (0-23, 1-24, 1-12, 0-11)
- m, s: minute and second
- S: fractional seconds
- z: localized GMT offset (``z`` short, ``zzzz`` long)

Values are treated as local wall-clock time: aware datetimes are converted
to local time before formatting, and a parsed GMT offset converts the
result back to naive local time.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from culturekit.errors import ParseError
from culturekit.locale_data import ASCII_DIGITS, DateTimePatterns, NumberSymbols


logger = logging.getLogger(__name__)

BIDI_MARKS = "\u200e\u200f\u061c"
_STRIP_BIDI = {ord(mark): None for mark in BIDI_MARKS}

_FIELD_LETTERS = frozenset("GyMLdEcaHkhKmsSz")
_DATE_FIELDS = frozenset("yMLd")
_TIME_FIELDS = frozenset("aHkhKmsS")

# Two-digit years resolve into the century ending this many years ahead
TWO_DIGIT_YEAR_LOOKAHEAD = 20


@dataclass(frozen=True)
class PatternToken:
    """A field (``letter`` set) or a run of literal text."""
    letter: str | None
    width: int = 0
    text: str = ""

    @property
    def is_literal(self) -> bool:
        return self.letter is None


def tokenize(pattern: str) -> list[PatternToken]:
    """Split a CLDR pattern into field and literal tokens.

    Quoted text (``'at'``) is literal; ``''`` is a single quote.

    Raises:
        ValueError: On unterminated quotes or unsupported field letters
    """
    tokens: list[PatternToken] = []
    literal: list[str] = []
    in_quote = False
    i = 0
    n = len(pattern)

    def flush() -> None:
        if literal:
            tokens.append(PatternToken(None, text="".join(literal)))
            literal.clear()

    while i < n:
        ch = pattern[i]
        if ch == "'":
            if i + 1 < n and pattern[i + 1] == "'":
                literal.append("'")
                i += 2
                continue
            in_quote = not in_quote
            i += 1
            continue
        if in_quote or not (ch.isascii() and ch.isalpha()):
            literal.append(ch)
            i += 1
            continue

        j = i
        while j < n and pattern[j] == ch:
            j += 1
        if ch not in _FIELD_LETTERS:
            raise ValueError(f"Unsupported field {ch * (j - i)!r} in pattern {pattern!r}")
        flush()
        tokens.append(PatternToken(ch, j - i))
        i = j

    if in_quote:
        raise ValueError(f"Unterminated quote in pattern {pattern!r}")
    flush()
    return tokens


def to_local(value: datetime | date) -> datetime:
    """Return an aware datetime in the local zone.

    Naive datetimes are local wall time; plain dates are local midnight.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    return value.astimezone()


def resolve_two_digit_year(value: int, today: date | None = None) -> int:
    """Place a two-digit year in the century window around today."""
    today = today or date.today()
    year = (today.year // 100) * 100 + value
    if year > today.year + TWO_DIGIT_YEAR_LOOKAHEAD:
        year -= 100
    return year


def _names_regex(names: list[str]) -> str:
    unique = sorted({name.translate(_STRIP_BIDI) for name in names if name}, key=len, reverse=True)
    return "|".join(re.escape(name) for name in unique)


def _literal_regex(text: str) -> str:
    parts: list[str] = []
    for ch in text.translate(_STRIP_BIDI):
        if ch.isspace():
            if not parts or parts[-1] != r"\s*":
                parts.append(r"\s*")
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


class DatePattern:
    """A compiled date/time pattern for one culture.

    Example:
        pattern = DatePattern("d MMMM y", bundle.dates, bundle.symbols, "en-GB")
        pattern.format(datetime(2018, 2, 18, 19, 45))   # "18 February 2018"
        pattern.parse("18 February 2018")               # datetime(2018, 2, 18)
    """

    def __init__(
        self,
        pattern: str,
        dates: DateTimePatterns,
        symbols: NumberSymbols,
        culture: str,
    ) -> None:
        self.pattern = pattern
        self.culture = culture
        self._dates = dates
        self._tokens = tokenize(pattern)

        if symbols.digits != ASCII_DIGITS:
            self._to_native = str.maketrans(ASCII_DIGITS, symbols.digits)
            self._to_ascii = str.maketrans(symbols.digits, ASCII_DIGITS)
        else:
            self._to_native = None
            self._to_ascii = None

        letters = {token.letter for token in self._tokens if token.letter}
        self.has_date = bool(letters & _DATE_FIELDS)
        self.has_time = bool(letters & _TIME_FIELDS)

        self._months = {
            name.translate(_STRIP_BIDI).casefold(): index + 1
            for names in (dates.months_abbreviated, dates.months_wide)
            for index, name in enumerate(names)
        }
        self._groups: list[tuple[str, PatternToken]] = []
        self._regex = re.compile(self._build_regex(), re.IGNORECASE)

    def __repr__(self) -> str:
        return f"DatePattern({self.pattern!r}, culture={self.culture!r})"

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format(self, value: datetime | date) -> str:
        """Render a date or datetime using this pattern."""
        local = to_local(value)
        return "".join(self._format_token(token, local) for token in self._tokens)

    def _native(self, text: str) -> str:
        return text.translate(self._to_native) if self._to_native else text

    def _number(self, value: int, width: int) -> str:
        return self._native(str(value).zfill(width))

    def _format_token(self, token: PatternToken, value: datetime) -> str:
        letter, width = token.letter, token.width
        dates = self._dates

        if letter is None:
            return token.text
        if letter == "G":
            return dates.era_abbreviated[1]
        if letter == "y":
            if width == 2:
                return self._number(value.year % 100, 2)
            return self._number(value.year, width)
        if letter in "ML":
            if width >= 4:
                return dates.months_wide[value.month - 1]
            if width == 3:
                return dates.months_abbreviated[value.month - 1]
            return self._number(value.month, width)
        if letter == "d":
            return self._number(value.day, width)
        if letter in "Ec":
            # CLDR weekday tables start on Sunday
            weekday = (value.weekday() + 1) % 7
            if width >= 4:
                return dates.days_wide[weekday]
            return dates.days_abbreviated[weekday]
        if letter == "a":
            return dates.am if value.hour < 12 else dates.pm
        if letter == "H":
            return self._number(value.hour, width)
        if letter == "k":
            return self._number(value.hour or 24, width)
        if letter == "h":
            return self._number(value.hour % 12 or 12, width)
        if letter == "K":
            return self._number(value.hour % 12, width)
        if letter == "m":
            return self._number(value.minute, width)
        if letter == "s":
            return self._number(value.second, width)
        if letter == "S":
            return self._native(f"{value.microsecond:06d}"[:width].ljust(width, "0"))
        if letter == "z":
            return self._format_zone(value, long=width >= 4)
        raise ValueError(f"Unsupported field {letter!r}")

    def _format_zone(self, value: datetime, long: bool) -> str:
        offset = value.utcoffset() or timedelta(0)
        total_minutes = int(offset.total_seconds()) // 60
        if total_minutes == 0:
            return self._dates.gmt_zero
        sign = "+" if total_minutes > 0 else "-"
        hours, minutes = divmod(abs(total_minutes), 60)
        if long:
            text = f"{sign}{hours:02d}:{minutes:02d}"
        else:
            text = f"{sign}{hours}" + (f":{minutes:02d}" if minutes else "")
        return self._dates.gmt_format.replace("{0}", self._native(text))

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _build_regex(self) -> str:
        dates = self._dates
        parts = [r"^\s*"]
        for index, token in enumerate(self._tokens):
            if token.is_literal:
                parts.append(_literal_regex(token.text))
                continue

            group = f"g{index}"
            letter, width = token.letter, token.width
            if letter == "G":
                body = _names_regex(dates.era_abbreviated)
            elif letter == "y":
                body = r"\d{2}" if width == 2 else r"\d{1,4}"
            elif letter in "ML":
                if width >= 3:
                    body = _names_regex(dates.months_wide + dates.months_abbreviated)
                else:
                    body = r"\d{1,2}"
            elif letter in "Ec":
                body = _names_regex(dates.days_wide + dates.days_abbreviated)
            elif letter == "a":
                body = _names_regex([dates.am, dates.pm])
            elif letter == "S":
                body = r"\d{1,9}"
            elif letter == "z":
                prefix, _, suffix = dates.gmt_format.partition("{0}")
                parts.append(
                    f"(?:{_literal_regex(prefix)}"
                    rf"(?P<{group}>[+\-−]\d{{1,2}}(?::?\d{{2}})?)"
                    f"{_literal_regex(suffix)}|(?P<{group}z>{_literal_regex(dates.gmt_zero)}))"
                )
                self._groups.append((group, token))
                continue
            else:
                body = r"\d{1,2}"
            parts.append(f"(?P<{group}>{body})")
            self._groups.append((group, token))
        parts.append(r"\s*$")
        return "".join(parts)

    def parse(self, text: str) -> datetime:
        """Parse text produced by :meth:`format` (or typed by a user).

        Raises:
            ParseError: If the text does not match the pattern or names an
                impossible date or time
        """
        cleaned = text.translate(_STRIP_BIDI)
        if self._to_ascii:
            cleaned = cleaned.translate(self._to_ascii)
        match = self._regex.match(cleaned)
        if match is None:
            raise ParseError(text, self.culture, self.pattern)

        today = date.today()
        year = month = day = None
        hour = minute = second = microsecond = 0
        hour12: int | None = None
        is_pm = False
        offset: timedelta | None = None

        for group, token in self._groups:
            raw = match.group(group)
            letter = token.letter
            if letter == "z":
                if raw is not None:
                    offset = _parse_offset(raw)
                elif match.group(f"{group}z") is not None:
                    offset = timedelta(0)
                continue
            if raw is None or letter in "GEc":
                continue
            if letter == "y":
                year = resolve_two_digit_year(int(raw), today) if token.width == 2 else int(raw)
            elif letter in "ML":
                month = self._months[raw.casefold()] if token.width >= 3 else int(raw)
            elif letter == "d":
                day = int(raw)
            elif letter == "a":
                is_pm = raw.casefold() == self._dates.pm.translate(_STRIP_BIDI).casefold()
            elif letter == "H":
                hour = int(raw)
            elif letter == "k":
                hour = int(raw) % 24
            elif letter in "hK":
                hour12 = int(raw)
            elif letter == "m":
                minute = int(raw)
            elif letter == "s":
                second = int(raw)
            elif letter == "S":
                microsecond = int(raw[:6].ljust(6, "0"))

        if hour12 is not None:
            if hour12 > 12:
                raise ParseError(text, self.culture, self.pattern, f"hour {hour12} out of range")
            hour = hour12 % 12 + (12 if is_pm else 0)

        if self.has_date:
            year = today.year if year is None else year
            month = 1 if month is None else month
            day = 1 if day is None else day
        else:
            year, month, day = today.year, today.month, today.day

        try:
            result = datetime(year, month, day, hour, minute, second, microsecond)
        except ValueError as e:
            raise ParseError(text, self.culture, self.pattern, str(e)) from e

        if offset is not None:
            result = result.replace(tzinfo=timezone(offset)).astimezone().replace(tzinfo=None)
        return result


def _parse_offset(raw: str) -> timedelta:
    sign = -1 if raw[0] in "-−" else 1
    body = raw[1:]
    if ":" in body:
        hours_text, minutes_text = body.split(":", 1)
    elif len(body) > 2:
        hours_text, minutes_text = body[:-2], body[-2:]
    else:
        hours_text, minutes_text = body, "0"
    return sign * timedelta(hours=int(hours_text), minutes=int(minutes_text))


def combine_patterns(glue: str, date_pattern: str, time_pattern: str) -> str:
    """Join date and time patterns with a CLDR date-time glue pattern."""
    return glue.replace("{1}", date_pattern).replace("{0}", time_pattern)
