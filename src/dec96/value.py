from __future__ import annotations

import struct
from dataclasses import dataclass
from fractions import Fraction

from dec96.error import InvalidPrecision, InvalidWord, TruncatedInput, ValueOutOfRange

WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1
TOTAL_BITS = 3 * WORD_BITS
# everything but the sign bit
MAGNITUDE_BITS = TOTAL_BITS - 1
MAGNITUDE_MASK = (1 << MAGNITUDE_BITS) - 1
SIGN_BIT = 1 << MAGNITUDE_BITS
# bits below the binary point (med and low)
FRACTION_BITS = 2 * WORD_BITS

MIN_PREC = 1
MAX_PREC = MAGNITUDE_BITS

# Inclusive range of the signed 96-bit two's-complement integer
RAW_RANGE = (-(1 << MAGNITUDE_BITS), (1 << MAGNITUDE_BITS) - 1)

# wire format: high, med, low, prec, big-endian
SERIALIZE_FORMAT = ">IIIB"
SERIALIZED_SIZE = struct.calcsize(SERIALIZE_FORMAT)


def _is_int(val) -> bool:
    return isinstance(val, int) and not isinstance(val, bool)


def validate_prec(prec) -> int:
    """Raise InvalidPrecision unless *prec* is an int in [1, 95]."""
    if not _is_int(prec) or not (MIN_PREC <= prec <= MAX_PREC):
        raise InvalidPrecision(prec)
    return prec


@dataclass(frozen=True)
class Decimal:
    """Signed fixed-point number packed into three 32-bit words.

    If the first bit of ``high`` is 0 the value is::

        high + med * 2**-32 + low * 2**-64

    and if it is 1 the value is::

        -2**32 + high + med * 2**-32 + low * 2**-64

    The 95 bits after the sign bit are the magnitude. ``prec`` says how many
    of them, counted from the top and including leading zeros, are
    significant. Fields are stored verbatim, the sign bit is never masked at
    construction.
    """

    __slots__ = ("high", "med", "low", "prec")

    high: int
    med: int
    low: int
    prec: int

    def __post_init__(self):
        # precision is checked before the words
        validate_prec(self.prec)
        for name in ("high", "med", "low"):
            word = getattr(self, name)
            if not _is_int(word) or not (0 <= word <= WORD_MASK):
                raise InvalidWord(name, word)

    # -- construction ------------------------------------------------------

    @classmethod
    def new(cls, high: int, med: int, low: int, prec: int) -> Decimal:
        return cls(high, med, low, prec)

    @classmethod
    def from_raw(cls, raw: int, prec: int = MAX_PREC) -> Decimal:
        """Build a value from its signed 96-bit two's-complement integer."""
        lo, hi = RAW_RANGE
        if not _is_int(raw) or not (lo <= raw <= hi):
            raise ValueOutOfRange(f"raw value {raw!r} out of range [{lo}, {hi}]")
        bits = raw & ((1 << TOTAL_BITS) - 1)
        return cls(
            (bits >> FRACTION_BITS) & WORD_MASK,
            (bits >> WORD_BITS) & WORD_MASK,
            bits & WORD_MASK,
            prec,
        )

    def _from_bits(self, bits: int) -> Decimal:
        return Decimal(
            (bits >> FRACTION_BITS) & WORD_MASK,
            (bits >> WORD_BITS) & WORD_MASK,
            bits & WORD_MASK,
            self.prec,
        )

    # -- bit views ---------------------------------------------------------

    @property
    def words(self) -> tuple[int, int, int]:
        return (self.high, self.med, self.low)

    @property
    def bits(self) -> int:
        """All 96 bits as an unsigned int."""
        return (self.high << FRACTION_BITS) | (self.med << WORD_BITS) | self.low

    @property
    def sign_bit(self) -> int:
        return self.high >> (WORD_BITS - 1)

    @property
    def magnitude(self) -> int:
        """The 95 non-sign bits as an unsigned int."""
        return self.bits & MAGNITUDE_MASK

    @property
    def raw(self) -> int:
        """All 96 bits read as a two's-complement integer."""
        bits = self.bits
        return bits - (1 << TOTAL_BITS) if bits & SIGN_BIT else bits

    # -- sign / magnitude helpers ------------------------------------------

    def unsign(self) -> Decimal:
        """Copy with the first bit of high cleared."""
        return Decimal(self.high & (WORD_MASK >> 1), self.med, self.low, self.prec)

    def truncate(self) -> Decimal:
        """Copy with every magnitude bit past ``prec`` cleared."""
        insignificant = MAGNITUDE_BITS - self.prec
        return self._from_bits((self.bits >> insignificant) << insignificant)

    def with_prec(self, prec: int) -> Decimal:
        return Decimal(self.high, self.med, self.low, prec)

    # -- exact predicates --------------------------------------------------

    def is_zero(self) -> bool:
        """Underlying bits are all zero. Ignores precision."""
        return self.high == 0 and self.med == 0 and self.low == 0

    def is_positive(self) -> bool:
        """Sign bit clear and not zero. Ignores precision."""
        return self.sign_bit == 0 and not self.is_zero()

    def is_negative(self) -> bool:
        """Sign bit set. Ignores precision.

        A set sign bit over an all-zero magnitude counts as negative.
        """
        return self.sign_bit == 1

    # -- precision-aware predicates ----------------------------------------

    def is_approx_zero(self) -> bool:
        """Zero within the top ``prec`` bits of the magnitude.

        With prec < 31 only bits of high are looked at, up to 63 the whole
        of high and the top of med, up to 95 high and med and the top of low.
        """
        return (self.magnitude >> (MAGNITUDE_BITS - self.prec)) == 0

    def is_approx_positive(self) -> bool:
        """Positive up to precision.

        The number might have nonzero bits and still be zero at its level of
        precision.
        """
        return self.is_positive() and not self.is_approx_zero()

    def is_approx_negative(self) -> bool:
        """Negative up to precision."""
        return self.is_negative() and not self.is_approx_zero()

    # -- conversion --------------------------------------------------------

    def to_fraction(self) -> Fraction:
        """Exact value of all 96 bits."""
        return Fraction(self.raw, 1 << FRACTION_BITS)

    def to_string(self) -> str:
        """Exact base-10 rendering of the significant bits.

        The value is truncated to ``prec`` first. A fraction of k bits has
        exactly k decimal digits, so nothing is rounded.
        """
        raw = self.truncate().raw
        negative = raw < 0
        raw = abs(raw)

        int_part = raw >> FRACTION_BITS
        frac_bits = raw & ((1 << FRACTION_BITS) - 1)
        # frac_bits / 2**64 == frac_bits * 5**64 / 10**64
        frac_digits = str(frac_bits * 5**FRACTION_BITS).rjust(FRACTION_BITS, "0").rstrip("0")

        out = str(int_part)
        if frac_digits:
            out += "." + frac_digits
        if negative:
            out = "-" + out
        return out

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return (
            f"Decimal(high=0x{self.high:08x}, med=0x{self.med:08x}, "
            f"low=0x{self.low:08x}, prec={self.prec})"
        )

    # -- serialization -----------------------------------------------------

    def serialize(self) -> bytes:
        """Serialize to 13 bytes (big-endian words, then prec)."""
        return struct.pack(SERIALIZE_FORMAT, self.high, self.med, self.low, self.prec)

    @staticmethod
    def deserialize(data: bytes, offset: int = 0) -> tuple[Decimal, int]:
        """Deserialize a value from *data* at *offset*.
        Returns ``(value, new_offset)``."""
        available = len(data) - offset
        if available < SERIALIZED_SIZE:
            raise TruncatedInput(SERIALIZED_SIZE, max(available, 0))
        high, med, low, prec = struct.unpack_from(SERIALIZE_FORMAT, data, offset)
        return Decimal(high, med, low, prec), offset + SERIALIZED_SIZE


# Largest possible value at max precision
MAX = Decimal(2_147_483_647, 4_294_967_295, 4_294_967_295, MAX_PREC)
# Lowest possible value at max precision
MIN = Decimal(4_294_967_295, 4_294_967_295, 4_294_967_295, MAX_PREC)
# Zero at max precision
ZERO = Decimal(0, 0, 0, MAX_PREC)

CONSTANTS: dict[str, Decimal] = {"MAX": MAX, "MIN": MIN, "ZERO": ZERO}
