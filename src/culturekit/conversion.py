"""Type Converter Service.

Culture-aware coercion between four value kinds: string, number, boolean
and date. String/date and string/number edges go through the
:class:`GlobalizationService` in the current culture, so converted values
agree with what the UI displays.

Conversion matrix (source -> target):

=========  ======  ==============  ==============  ===========  ==============  ==========
target     None    str             number          bool         date            other
=========  ======  ==============  ==============  ===========  ==============  ==========
string     ""      identity        decimal text    true/false   locale format   own text
boolean    False   == "true"       != 0            identity     error           error
number     None    locale parse    identity        0 / 1        epoch millis    error
date       None    locale parse    error           error        identity        error
=========  ======  ==============  ==============  ===========  ==============  ==========

Boolean parsing is narrow: only the case-insensitive token
``"true"`` is true; ``"1"``, ``"yes"`` and everything else are false.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from culturekit.errors import ConversionError, ParseError
from culturekit.patterns import to_local
from culturekit.protocols import Textual, has_text_representation
from culturekit.service import GlobalizationService


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ValueKind(str, Enum):
    """The value kinds the converter understands."""
    NONE = "none"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    OTHER = "other"


def classify(value: Any) -> ValueKind:
    """Determine the kind of a value.

    ``bool`` is checked before numbers since it subclasses ``int``.
    """
    if value is None:
        return ValueKind.NONE
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, date):
        return ValueKind.DATE
    return ValueKind.OTHER


def epoch_millis(value: datetime | date) -> int:
    """Milliseconds since the Unix epoch; naive values are local time."""
    return (to_local(value) - EPOCH) // timedelta(milliseconds=1)


def number_to_text(value: int | float | Decimal) -> str:
    """Culture-independent decimal text ("123", "1.5", "NaN", "-Infinity")."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


class TypeConverterService:
    """Converts values between string, number, boolean and date.

    Always uses the current culture; there is no per-call culture override
    at this layer.

    Example:
        converter = TypeConverterService(globalization)
        converter.convert_to_boolean("True")        # True
        converter.convert_to_number("1.234,5")      # 1234.5 (culture "de")
        converter.convert_to_number(True)           # 1
    """

    def __init__(self, globalization: GlobalizationService) -> None:
        self._globalization = globalization

    @property
    def globalization(self) -> GlobalizationService:
        return self._globalization

    def convert(self, value: Any, target: ValueKind | str) -> Any:
        """Convert ``value`` to the named kind.

        Raises:
            ConversionError: If the conversion is not defined for the value
            ValueError: If ``target`` is not a convertible kind
        """
        kind = ValueKind(target)
        if kind == ValueKind.STRING:
            return self.convert_to_string(value)
        if kind == ValueKind.BOOLEAN:
            return self.convert_to_boolean(value)
        if kind == ValueKind.NUMBER:
            return self.convert_to_number(value)
        if kind == ValueKind.DATE:
            return self.convert_to_date(value)
        raise ValueError(f"Cannot convert to {kind.value!r}")

    def convert_to_string(self, value: Any) -> str:
        kind = classify(value)
        if kind == ValueKind.NONE:
            return ""
        if kind == ValueKind.STRING:
            return value
        if kind == ValueKind.BOOLEAN:
            return "true" if value else "false"
        if kind == ValueKind.NUMBER:
            return number_to_text(value)
        if kind == ValueKind.DATE:
            return self._globalization.format_date(value)
        if isinstance(value, Textual):
            return value.to_text()
        if has_text_representation(value):
            return str(value)
        raise ConversionError(value, "string", "object has no textual representation")

    def convert_to_boolean(self, value: Any) -> bool:
        kind = classify(value)
        if kind == ValueKind.NONE:
            return False
        if kind == ValueKind.BOOLEAN:
            return value
        if kind == ValueKind.STRING:
            return value.lower() == "true"
        if kind == ValueKind.NUMBER:
            return value != 0
        raise ConversionError(value, "boolean")

    def convert_to_number(self, value: Any) -> int | float | Decimal | None:
        kind = classify(value)
        if kind == ValueKind.NONE:
            return None
        if kind == ValueKind.NUMBER:
            return value
        if kind == ValueKind.BOOLEAN:
            return 1 if value else 0
        if kind == ValueKind.DATE:
            return epoch_millis(value)
        if kind == ValueKind.STRING:
            try:
                return self._globalization.parse_number(value)
            except ParseError as e:
                raise ConversionError(value, "number", str(e)) from e
        raise ConversionError(value, "number")

    def convert_to_date(self, value: Any) -> datetime | date | None:
        kind = classify(value)
        if kind == ValueKind.NONE:
            return None
        if kind == ValueKind.DATE:
            return value
        if kind == ValueKind.STRING:
            try:
                return self._globalization.parse_date(value)
            except ParseError as e:
                raise ConversionError(value, "date", str(e)) from e
        if kind == ValueKind.NUMBER:
            raise ConversionError(value, "date", "numbers are not dates")
        raise ConversionError(value, "date")
