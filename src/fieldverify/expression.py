"""Rule expression parsing.

Grammar::

    expr   := clause (',' clause)*
    clause := keyword ['=' value]

Tokens are not trimmed: ``" min=3"`` has the keyword ``" min"``.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum

KEYWORD_MIN_SIZE = "minSize"
KEYWORD_MAX_SIZE = "maxSize"
KEYWORD_MIN = "min"
KEYWORD_MAX = "max"
KEYWORD_REQUIRED = "required"

KEYWORDS = (KEYWORD_MIN_SIZE, KEYWORD_MAX_SIZE, KEYWORD_MIN, KEYWORD_MAX, KEYWORD_REQUIRED)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIAL_RE = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)
_HEX_FLOAT_RE = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+")


class LiteralKind(str, Enum):
    """How a clause value parses."""
    INTEGER = "integer"
    DECIMAL = "decimal"
    INVALID = "invalid"
    NONE = "none"


@dataclass(frozen=True)
class Clause:
    """A single ``keyword[=value]`` unit of a rule expression."""
    keyword: str
    raw_value: str | None = None

    @property
    def is_bare(self) -> bool:
        return self.raw_value is None

    @property
    def is_recognized(self) -> bool:
        return self.keyword in KEYWORDS

    @property
    def literal_kind(self) -> LiteralKind:
        if self.raw_value is None:
            return LiteralKind.NONE
        number = parse_number(self.raw_value)
        if number is None:
            return LiteralKind.INVALID
        return LiteralKind.DECIMAL if isinstance(number, float) else LiteralKind.INTEGER

    def __str__(self) -> str:
        if self.raw_value is None:
            return self.keyword
        return f"{self.keyword}={self.raw_value}"


def parse_clause(token: str) -> Clause:
    """Split one token on its first ``=``."""
    keyword, sep, raw_value = token.partition("=")
    if not sep:
        return Clause(keyword)
    return Clause(keyword, raw_value)


def parse_expression(expression: str) -> list[Clause]:
    """Split a rule expression into clauses, preserving order."""
    return [parse_clause(token) for token in expression.split(",")]


def parse_integer(text: str) -> int | None:
    """Parse a base-10 signed 64-bit integer literal."""
    if not _INTEGER_RE.fullmatch(text):
        return None
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        return None
    return value


def parse_decimal(text: str) -> float | None:
    """Parse a 64-bit floating-point literal.

    Accepts decimal and exponent forms, hex floats with a binary exponent
    (``0x1p3``) and inf/nan spellings. Literals outside the float64 range
    are rejected rather than rounded to infinity.
    """
    if _SPECIAL_RE.fullmatch(text):
        return float(text)
    if _HEX_FLOAT_RE.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            return None
    if not _DECIMAL_RE.fullmatch(text):
        return None
    value = float(text)
    if math.isinf(value):
        return None
    return value


def parse_number(text: str) -> int | float | None:
    """Parse an integer literal, falling back to a decimal literal.

    An integer too large for 64 bits comes back as a float.
    """
    value = parse_integer(text)
    if value is not None:
        return value
    return parse_decimal(text)
