"""Hex-string serialization of byte strings, integers and hashes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from .hashes import FixedHash
from .uint import UInt

_HashT = TypeVar("_HashT", bound=FixedHash)
_UIntT = TypeVar("_UIntT", bound=UInt)

_WHITESPACE = frozenset(b" \r\n\t")
_EXPECTING = "a (both 0x-prefixed or not) hex string or byte array"


class FromHexError(ValueError):
    """Raised when a hex string holds a character that is not a hex digit."""

    def __init__(self, character: str, index: int) -> None:
        self.character = character
        self.index = index
        super().__init__(f"invalid hex character: {character}, at {index}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FromHexError):
            return NotImplemented
        return (self.character, self.index) == (other.character, other.index)

    def __hash__(self) -> int:
        return hash((self.character, self.index))


@dataclass(frozen=True)
class ExpectedLen:
    """Allowed byte length: exactly ``maximum``, or in ``(minimum, maximum]``."""

    minimum: int
    maximum: int
    is_exact: bool

    @classmethod
    def exact(cls, size: int) -> ExpectedLen:
        return cls(size, size, True)

    @classmethod
    def between(cls, minimum: int, maximum: int) -> ExpectedLen:
        return cls(minimum, maximum, False)

    def accepts(self, length: int) -> bool:
        """Whether a byte string of this length is allowed."""
        if self.is_exact:
            return length == self.maximum
        return self.minimum < length <= self.maximum

    def _accepts_hex(self, digits: int) -> bool:
        if self.is_exact:
            return digits == 2 * self.maximum
        return 2 * self.minimum < digits <= 2 * self.maximum

    def __str__(self) -> str:
        if self.is_exact:
            return f"{self.maximum} bytes"
        return f"between ({self.minimum}; {self.maximum}] bytes"


def to_hex(data: bytes, skip_leading_zero: bool) -> str:
    """Render bytes as a 0x-prefixed hex string.

    With skip_leading_zero, leading zeros are dropped and empty input
    gives ``0x0``; without it, empty input gives ``0x``.
    """
    raw = bytes(data)
    if skip_leading_zero:
        raw = raw.lstrip(b"\x00")
        if not raw:
            return "0x0"
    elif not raw:
        return "0x"
    digits = raw.hex()
    if skip_leading_zero and digits[0] == "0":
        digits = digits[1:]
    return "0x" + digits


def _strip_prefix(text: str) -> tuple[str, bool]:
    if text.startswith("0x"):
        return text[2:], True
    return text, False


def _nibble(byte: int) -> int | None:
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    return None


def _decode_hex_digits(digits: str, stripped: bool) -> bytes:
    """Decode prefix-free hex digits; an odd count pads the first byte."""
    raw = digits.encode("utf-8")
    modulus = len(raw) % 2
    buf = 0
    out = bytearray()
    for index, byte in enumerate(raw):
        if byte in _WHITESPACE:
            continue
        value = _nibble(byte)
        if value is None:
            raise FromHexError(chr(byte), index + (2 if stripped else 0))
        buf = ((buf << 4) & 0xFF) | value
        modulus += 1
        if modulus == 2:
            modulus = 0
            out.append(buf)
    return bytes(out)


def from_hex(text: str) -> bytes:
    """Decode a hex string, with or without the 0x prefix."""
    digits, stripped = _strip_prefix(text)
    decoded = _decode_hex_digits(digits, stripped)
    size = (len(digits.encode("utf-8")) + 1) // 2
    return decoded.ljust(size, b"\x00")


def serialize(data: bytes) -> str:
    """Serialize bytes as a 0x-prefixed hex string, keeping every digit."""
    return to_hex(data, False)


def serialize_raw(data: bytes) -> str:
    """Serialize bytes as a 0x-prefixed hex string, keeping every digit."""
    return to_hex(data, False)


def serialize_uint(data: bytes) -> str:
    """Serialize big-endian integer bytes with leading zeros trimmed."""
    return to_hex(data, True)


def _byte_sequence(value: Iterable[int]) -> bytes:
    items = list(value)
    for item in items:
        if not isinstance(item, int) or isinstance(item, bool) or not 0 <= item <= 0xFF:
            raise ValueError(f"invalid byte value {item!r}")
    return bytes(items)


def deserialize(value: Any) -> bytes:
    """Read bytes from a hex string, a byte string or a sequence of byte values."""
    if isinstance(value, str):
        return from_hex(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, Iterable):
        return _byte_sequence(value)
    raise TypeError(f"expected {_EXPECTING}, got {type(value).__name__}")


def _length_error(length: int, expected: ExpectedLen) -> ValueError:
    return ValueError(f"invalid length {length}, expected {_EXPECTING} containing {expected}")


def deserialize_check_len(value: Any, expected: ExpectedLen) -> bytes:
    """Like deserialize, but reject inputs whose length expected does not allow."""
    if isinstance(value, str):
        digits, stripped = _strip_prefix(value)
        length = len(digits.encode("utf-8"))
        if not expected._accepts_hex(length):
            raise _length_error(length, expected)
        return _decode_hex_digits(digits, stripped)
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    elif isinstance(value, Iterable):
        raw = _byte_sequence(value)
    else:
        raise TypeError(f"expected {_EXPECTING}, got {type(value).__name__}")
    if not expected.accepts(len(raw)):
        raise _length_error(len(raw), expected)
    return raw


def serialize_uint_value(value: UInt) -> str:
    """Serialize a fixed-width integer as minimal 0x-prefixed hex."""
    return serialize_uint(value.to_big_endian())


def deserialize_uint_value(cls: type[_UIntT], value: Any) -> _UIntT:
    """Read a fixed-width integer of type cls from hex or bytes."""
    data = deserialize_check_len(value, ExpectedLen.between(0, cls.BYTES))
    return cls.from_big_endian(data)


def serialize_hash(value: FixedHash) -> str:
    """Serialize a hash as full-length 0x-prefixed hex."""
    return serialize_raw(bytes(value))


def deserialize_hash(cls: type[_HashT], value: Any) -> _HashT:
    """Read a hash of type cls from hex or bytes of exactly its size."""
    data = deserialize_check_len(value, ExpectedLen.exact(cls.SIZE))
    return cls(data.ljust(cls.SIZE, b"\x00"))