"""Fixed-width unsigned integers: U128, U256 and U512."""

from __future__ import annotations

import math
import operator
import string
from typing import Any

from .errors import DecoderError, ErrorKind
from .reader import Rlp
from .stream import RlpStream

_DIGITS = {
    10: frozenset(string.digits),
    16: frozenset(string.hexdigits),
}


class ConversionOverflow(OverflowError):
    """Raised when a value does not fit in the target integer width."""


class UInt(int):
    """Unsigned integer limited to a fixed number of bytes.

    Subclasses set ``BYTES``; values outside ``0..2**(8*BYTES)-1`` are
    rejected on construction.
    """

    BYTES: int = 0

    def __new__(cls, value: Any = 0) -> UInt:
        if cls.BYTES <= 0:
            raise TypeError(f"{cls.__name__} has no fixed width")
        number = operator.index(value)
        if number < 0:
            raise ValueError(f"{cls.__name__} cannot hold a negative value")
        if number.bit_length() > cls.BYTES * 8:
            raise ConversionOverflow(f"value does not fit in {cls.__name__}")
        return super().__new__(cls, number)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    @classmethod
    def zero(cls) -> UInt:
        return cls(0)

    @classmethod
    def one(cls) -> UInt:
        return cls(1)

    @classmethod
    def max_value(cls) -> UInt:
        """The largest value of this width."""
        return cls((1 << (cls.BYTES * 8)) - 1)

    @classmethod
    def try_from(cls, value: Any) -> UInt:
        """Convert an integer of any width, raising ConversionOverflow if it does not fit."""
        return cls(value)

    @classmethod
    def from_str_radix(cls, text: str, radix: int) -> UInt:
        """Parse text in base 10 or 16."""
        allowed = _DIGITS.get(radix)
        if allowed is None:
            raise ValueError(f"unsupported radix {radix}")
        if not text:
            raise ValueError("empty string")
        for index, char in enumerate(text):
            if char not in allowed:
                raise ValueError(f"invalid character {char!r} at {index}")
        return cls(int(text, radix))

    @classmethod
    def _check_length(cls, data: bytes) -> bytes:
        raw = bytes(data)
        if len(raw) > cls.BYTES:
            raise ConversionOverflow(f"{len(raw)} bytes do not fit in {cls.__name__}")
        return raw

    @classmethod
    def from_big_endian(cls, data: bytes) -> UInt:
        """Build a value from at most BYTES big-endian bytes."""
        return cls(int.from_bytes(cls._check_length(data), "big"))

    @classmethod
    def from_little_endian(cls, data: bytes) -> UInt:
        """Build a value from at most BYTES little-endian bytes."""
        return cls(int.from_bytes(cls._check_length(data), "little"))

    def to_big_endian(self) -> bytes:
        """All BYTES bytes, most significant first."""
        return int(self).to_bytes(self.BYTES, "big")

    def to_little_endian(self) -> bytes:
        """All BYTES bytes, least significant first."""
        return int(self).to_bytes(self.BYTES, "little")

    def bits(self) -> int:
        """Number of bits needed to represent the value."""
        return int(self).bit_length()

    def is_zero(self) -> bool:
        return int(self) == 0

    def _checked(self, result: int) -> UInt | None:
        if result < 0 or result.bit_length() > self.BYTES * 8:
            return None
        return type(self)(result)

    def checked_add(self, other: int) -> UInt | None:
        """Sum, or None on overflow."""
        return self._checked(int(self) + operator.index(other))

    def checked_sub(self, other: int) -> UInt | None:
        """Difference, or None on underflow."""
        return self._checked(int(self) - operator.index(other))

    def checked_mul(self, other: int) -> UInt | None:
        """Product, or None on overflow."""
        return self._checked(int(self) * operator.index(other))

    def checked_div(self, other: int) -> UInt | None:
        """Floor quotient, or None when dividing by zero."""
        divisor = operator.index(other)
        if divisor == 0:
            return None
        return self._checked(int(self) // divisor)

    def integer_sqrt(self) -> UInt:
        """Largest value whose square does not exceed this one."""
        return type(self)(math.isqrt(int(self)))

    def rlp_append(self, stream: RlpStream) -> None:
        """Write the value as big-endian bytes without leading zeros."""
        number = int(self)
        stream.encode_value(number.to_bytes((number.bit_length() + 7) // 8, "big"))

    @classmethod
    def rlp_decode(cls, rlp: Rlp) -> UInt:
        """Read a canonical big-endian value of at most BYTES bytes."""

        def convert(payload: bytes) -> UInt:
            if payload and payload[0] == 0:
                raise DecoderError(ErrorKind.RLP_INVALID_INDIRECTION)
            if len(payload) > cls.BYTES:
                raise DecoderError(ErrorKind.RLP_IS_TOO_BIG)
            return cls.from_big_endian(payload)

        return rlp.decode_value(convert)

    def scale_encode(self) -> bytes:
        """SCALE encoding: BYTES little-endian bytes."""
        return self.to_little_endian()

    @classmethod
    def scale_decode(cls, data: bytes) -> UInt:
        """Read a value from the first BYTES little-endian bytes of data."""
        if len(data) < cls.BYTES:
            raise ValueError(f"{cls.__name__} needs {cls.BYTES} bytes, got {len(data)}")
        return cls.from_little_endian(bytes(data[: cls.BYTES]))

    @classmethod
    def max_encoded_len(cls) -> int:
        return cls.BYTES


class U128(UInt):
    """128-bit unsigned integer."""

    BYTES = 16

    def full_mul(self, other: int) -> U256:
        """Product as a U256; cannot overflow."""
        return U256(int(self) * int(U128(other)))


class U256(UInt):
    """256-bit unsigned integer."""

    BYTES = 32

    def full_mul(self, other: int) -> U512:
        """Product as a U512; cannot overflow."""
        return U512(int(self) * int(U256(other)))

    @classmethod
    def from_f64_lossy(cls, value: float) -> U256:
        """Saturating conversion from a float, truncating any fraction.

        NaN and values below one give zero; values beyond the maximum give
        the maximum.
        """
        if not value >= 1.0:
            return cls(0)
        if math.isinf(value):
            return cls.max_value()
        number = int(value)
        if number.bit_length() > cls.BYTES * 8:
            return cls.max_value()
        return cls(number)

    def to_f64_lossy(self) -> float:
        """Lossy conversion to a float."""
        number = int(self)
        if number >> 128 == 0:
            return float(number)
        if number >> 192 == 0:
            return float(number >> 64) * 2.0**64
        return float(number >> 128) * 2.0**128


class U512(UInt):
    """512-bit unsigned integer."""

    BYTES = 64