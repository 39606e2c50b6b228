# Public API: the value type, its named constants and the literal parser.
from dec96.error import (
    Dec96Error,
    InvalidPrecision,
    InvalidWord,
    LiteralSyntaxError,
    TruncatedInput,
    ValueOutOfRange,
)
from dec96.literal import parse_decimal
from dec96.value import MAX, MIN, ZERO, Decimal
