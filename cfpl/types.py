"""Runtime value model for CFPL.

Every value produced by the interpreter is a `Value`: a small tagged
union pairing a `Kind` discriminant with the Python payload for that
kind. Kind checks throughout the interpreter compare the discriminant
directly, so an Integer and a Boolean never compare equal even though
Python treats `True == 1`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
import math
import re

from .tokens import TokenType


INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def wrap_int32(n: int) -> int:
    """Reduce `n` to a signed 32-bit integer, wrapping on overflow."""
    return (int(n) - INT_MIN) % 2 ** 32 + INT_MIN


class Kind(Enum):
    INTEGER = 'Integer'
    FLOAT = 'Float'
    CHARACTER = 'Character'
    BOOLEAN = 'Boolean'
    STRING = 'String'
    ABSENT = 'Absent'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Value:
    """A CFPL runtime value.

    `data` holds an `int` for INTEGER, a `float` for FLOAT, a one-character
    `str` for CHARACTER, a `bool` for BOOLEAN, a `str` for STRING and
    `None` for ABSENT.
    """
    kind: Kind
    data: Any = None

    def __repr__(self) -> str:
        if self.kind is Kind.ABSENT:
            return 'Absent'
        return f"{self.kind.value}({self.data!r})"

    # Convenience constructors
    @staticmethod
    def integer(n: int) -> 'Value':
        return Value(Kind.INTEGER, wrap_int32(n))

    @staticmethod
    def float_(x: float) -> 'Value':
        return Value(Kind.FLOAT, float(x))

    @staticmethod
    def character(c: str) -> 'Value':
        return Value(Kind.CHARACTER, c)

    @staticmethod
    def boolean(b: bool) -> 'Value':
        return Value(Kind.BOOLEAN, bool(b))

    @staticmethod
    def string(s: str) -> 'Value':
        return Value(Kind.STRING, s)

    @property
    def is_number(self) -> bool:
        return self.kind in (Kind.INTEGER, Kind.FLOAT)


ABSENT = Value(Kind.ABSENT)
TRUE = Value.boolean(True)
FALSE = Value.boolean(False)


# Declared type keyword -> runtime kind a declaration must produce.
DECLARED_KINDS = {
    TokenType.INT: Kind.INTEGER,
    TokenType.FLOAT: Kind.FLOAT,
    TokenType.CHAR: Kind.CHARACTER,
    TokenType.BOOL: Kind.BOOLEAN,
    TokenType.STRING: Kind.STRING,
}


def zero_value(data_type: TokenType) -> Optional[Value]:
    """Return the value an uninitialized declaration starts with.

    STRING declarations have no zero value and return None; the caller
    decides how to report that.
    """
    if data_type is TokenType.INT:
        return Value.integer(0)
    if data_type is TokenType.CHAR:
        return Value.character(' ')
    if data_type is TokenType.BOOL:
        return FALSE
    if data_type is TokenType.FLOAT:
        return Value.float_(0.0)
    return None


def is_truthy(value: Value) -> bool:
    if value.kind is Kind.ABSENT:
        return False
    if value.kind is Kind.BOOLEAN:
        return value.data
    return True


def float_text(x: float) -> str:
    """Spell a float the way Java's Double.toString does.

    Magnitudes in [1e-3, 1e7) are written positionally with at least one
    fractional digit; anything else uses `d.dddE<exp>` notation.
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'Infinity' if x > 0 else '-Infinity'
    if x == 0.0:
        return '-0.0' if math.copysign(1.0, x) < 0 else '0.0'
    sign = '-' if x < 0 else ''
    magnitude = abs(x)
    if 1e-3 <= magnitude < 1e7:
        return sign + repr(magnitude)
    mantissa, _, exponent = repr(magnitude).partition('e')
    whole, _, fraction = mantissa.partition('.')
    digits = whole + fraction
    leading = len(digits) - len(digits.lstrip('0'))
    digits = digits.strip('0')
    exp = len(whole) + int(exponent or 0) - leading - 1
    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{exp}"


def to_text(value: Value) -> str:
    """Plain text of a value, as `&` joins it."""
    if value.kind is Kind.ABSENT:
        return 'nil'
    if value.kind is Kind.BOOLEAN:
        return 'true' if value.data else 'false'
    if value.kind is Kind.FLOAT:
        return float_text(value.data)
    return str(value.data)


def to_string(value: Value) -> str:
    """Convert a CFPL value to the text OUTPUT: writes for it."""
    text = to_text(value)
    if value.kind is Kind.FLOAT and text.endswith('.0'):
        text = text[:-2]
    return text


def truncate_divide(a: int, b: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def truncate_modulo(a: int, b: int) -> int:
    """Remainder matching `truncate_divide`; takes the sign of `a`."""
    return a - b * truncate_divide(a, b)


def float_divide(a: float, b: float) -> float:
    """IEEE 754 division, giving inf or nan where Python would raise."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


INTEGER_TEXT = re.compile(r'[+-]?[0-9]+')


def parse_int32(text: str) -> int:
    """Parse integer text that must fit in a signed 32-bit int."""
    if not INTEGER_TEXT.fullmatch(text):
        raise ValueError(f"cannot parse Integer from {text!r}")
    # at most 10 significant digits before converting
    if len(text.lstrip('+-').lstrip('0')) > 10 or not INT_MIN <= int(text) <= INT_MAX:
        raise ValueError(f"{text} is out of range for Integer")
    return int(text)


def convert_input(text: str, kind: Kind) -> Value:
    """Parse one INPUT: field as a value of `kind`.

    Raises ValueError when the text does not fit the kind. STRING and
    ABSENT targets take the text as-is.
    """
    if kind is Kind.INTEGER:
        return Value.integer(parse_int32(text))
    if kind is Kind.FLOAT:
        try:
            return Value.float_(float(text))
        except ValueError:
            raise ValueError(f"cannot parse Float from {text!r}")
    if kind is Kind.CHARACTER:
        if len(text) == 1:
            return Value.character(text)
        raise ValueError(f"{text!r} is not a single character")
    if kind is Kind.BOOLEAN:
        if 'TRUE' in text:
            return TRUE
        if 'FALSE' in text:
            return FALSE
        raise ValueError(f"{text!r} is neither TRUE nor FALSE")
    return Value.string(text)


def reclassify_input(text: str) -> Value:
    """Guess a kind for an INPUT: field that failed `convert_input`."""
    if len(text) == 1:
        return Value.character(text)
    lowered = text.lower()
    if 'true' in lowered:
        return TRUE
    if 'false' in lowered:
        return FALSE
    try:
        return Value.integer(parse_int32(text))
    except ValueError:
        pass
    try:
        return Value.float_(float(text))
    except ValueError:
        return Value.string(text)
