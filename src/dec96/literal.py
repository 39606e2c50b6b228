from __future__ import annotations

import math
from fractions import Fraction
from functools import lru_cache
from pathlib import Path

from lark import (
    Lark,
    Token,
    Transformer,
    UnexpectedEOF,
    UnexpectedInput,
    UnexpectedToken,
    v_args,
)

from dec96.error import LiteralSyntaxError, ValueOutOfRange
from dec96.value import FRACTION_BITS, MAX_PREC, RAW_RANGE, Decimal, validate_prec

literal_grammar_str = (Path(__file__).parent / "grammar.lark").read_text()

# Half-open range of values a literal may denote, before rounding down
VALUE_RANGE = (
    Fraction(RAW_RANGE[0], 1 << FRACTION_BITS),
    Fraction(RAW_RANGE[1] + 1, 1 << FRACTION_BITS),
)


@lru_cache(maxsize=None)
def _get_parser() -> Lark:
    return Lark(
        literal_grammar_str,
        start="literal",
        parser="lalr",
        propagate_positions=True,
        maybe_placeholders=True,
    )


def handle_digits(self, tok: Token) -> str:
    return tok.value.replace("_", "")


@v_args(inline=True)
class LiteralTransformer(Transformer):
    """Turns a parsed literal into its exact Fraction value."""

    DIGITS = handle_digits
    SIGN = str

    def fraction(self, digits: str) -> Fraction:
        return Fraction(int(digits), 10 ** len(digits))

    def literal(self, sign: str | None, int_digits: str, fraction: Fraction | None) -> Fraction:
        value = Fraction(int(int_digits))
        if fraction is not None:
            value += fraction
        return -value if sign == "-" else value


def _error_position(text: str, err: UnexpectedInput) -> tuple[int, int]:
    lines = text.split("\n")
    at_end = isinstance(err, UnexpectedEOF) or (
        isinstance(err, UnexpectedToken) and err.token.type == "$END"
    )
    line = getattr(err, "line", None)
    column = getattr(err, "column", None)
    positioned = isinstance(line, int) and isinstance(column, int) and line >= 1 and column >= 1
    if positioned and not at_end:
        return line, column
    # errors at the end of input point just past the last character
    return len(lines), len(lines[-1]) + 1


def literal_to_fraction(text: str) -> Fraction:
    """Parse *text* into the exact rational value it denotes."""
    try:
        tree = _get_parser().parse(text)
    except UnexpectedInput as err:
        line, column = _error_position(text, err)
        raise LiteralSyntaxError("Invalid decimal literal", text, line, column) from err
    return LiteralTransformer().transform(tree)


def fraction_to_decimal(value: Fraction, prec: int = MAX_PREC) -> Decimal:
    """Largest representable value not above *value*, truncated to *prec*."""
    validate_prec(prec)
    raw = math.floor(value * (1 << FRACTION_BITS))
    if not (RAW_RANGE[0] <= raw <= RAW_RANGE[1]):
        lo, hi = VALUE_RANGE
        raise ValueOutOfRange(f"value {value} out of range [{lo}, {hi})")
    return Decimal.from_raw(raw, prec).truncate()


def parse_decimal(text: str, prec: int = MAX_PREC) -> Decimal:
    """Parse a decimal literal like ``-12.375`` into a Decimal.

    Digits that do not fit in 64 fraction bits round toward negative
    infinity, then bits past *prec* are cleared, so
    ``parse_decimal(d.to_string(), d.prec)`` gives back ``d.truncate()``.
    """
    validate_prec(prec)
    return fraction_to_decimal(literal_to_fraction(text), prec)
