"""Read-only view over RLP-encoded bytes."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from .errors import DecoderError, ErrorKind

_USIZE_BYTES = 8
_USIZE_MAX = (1 << 64) - 1
_SHORT_LIMIT = 55

T = TypeVar("T")

_Buffer = bytes | bytearray | memoryview


class PrototypeKind(Enum):
    """The broad shape of an RLP item."""

    NULL = "null"
    DATA = "data"
    LIST = "list"


@dataclass(frozen=True)
class Prototype:
    """Shape of an item: its kind and its data size or item count."""

    kind: PrototypeKind
    length: int = 0


def decode_usize(data: _Buffer) -> int:
    """Decode a big-endian length of at most eight bytes with no zero prefix."""
    if len(data) == 0:
        raise DecoderError(ErrorKind.RLP_IS_TOO_SHORT)
    if len(data) > _USIZE_BYTES:
        raise DecoderError(ErrorKind.RLP_IS_TOO_BIG)
    if data[0] == 0:
        raise DecoderError(ErrorKind.RLP_INVALID_INDIRECTION)
    return int.from_bytes(bytes(data), "big")


@dataclass(frozen=True)
class PayloadInfo:
    """Header and value lengths of the first item in a byte string."""

    header_len: int
    value_len: int

    def total(self) -> int:
        """Total size of the item in bytes."""
        return self.header_len + self.value_len

    @classmethod
    def from_bytes(cls, header: _Buffer) -> PayloadInfo:
        """Read the header of the first item in header."""
        if len(header) == 0:
            raise DecoderError(ErrorKind.RLP_IS_TOO_SHORT)
        first = header[0]
        if first <= 0x7F:
            return cls(0, 1)
        if first <= 0xB7:
            return cls(1, first - 0x80)
        if first <= 0xBF:
            return cls._long_form(header, first - 0xB7)
        if first <= 0xF7:
            return cls(1, first - 0xC0)
        return cls._long_form(header, first - 0xF7)

    @classmethod
    def _long_form(cls, header: _Buffer, len_of_len: int) -> PayloadInfo:
        header_len = 1 + len_of_len
        if len(header) < 2:
            raise DecoderError(ErrorKind.RLP_IS_TOO_SHORT)
        if header[1] == 0:
            raise DecoderError(ErrorKind.RLP_DATA_LEN_WITH_ZERO_PREFIX)
        if len(header) < header_len:
            raise DecoderError(ErrorKind.RLP_IS_TOO_SHORT)
        value_len = decode_usize(header[1:header_len])
        if value_len <= _SHORT_LIMIT:
            raise DecoderError(ErrorKind.RLP_INVALID_INDIRECTION)
        return cls(header_len, value_len)


def _checked_payload_info(data: _Buffer) -> PayloadInfo:
    info = PayloadInfo.from_bytes(data)
    if info.total() > len(data):
        raise DecoderError(ErrorKind.RLP_IS_TOO_SHORT)
    return info


def _utf8(payload: bytes) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        raise DecoderError(ErrorKind.RLP_EXPECTED_TO_BE_DATA) from None


class Rlp:
    """Data-oriented view onto an RLP-encoded byte string."""

    __slots__ = ("_data", "_offset_cache", "_count_cache")

    def __init__(self, data: _Buffer) -> None:
        self._data = bytes(data)
        self._offset_cache: tuple[int, int] | None = None
        self._count_cache: int | None = None

    def __repr__(self) -> str:
        return f"Rlp({self._data.hex()})"

    def __str__(self) -> str:
        try:
            proto = self.prototype()
        except DecoderError as err:
            return str(err)
        if proto.kind is PrototypeKind.NULL:
            return "null"
        if proto.kind is PrototypeKind.DATA:
            try:
                return f'"0x{self.data().hex()}"'
            except DecoderError as err:
                return str(err)
        return "[" + ", ".join(str(item) for item in self) + "]"

    def as_raw(self) -> bytes:
        """The raw bytes this view covers."""
        return self._data

    def prototype(self) -> Prototype:
        """The kind of this item with its size or item count."""
        if self.is_data():
            return Prototype(PrototypeKind.DATA, self.size())
        if self.is_list():
            return Prototype(PrototypeKind.LIST, self.item_count())
        return Prototype(PrototypeKind.NULL)

    def payload_info(self) -> PayloadInfo:
        return _checked_payload_info(self._data)

    def data(self) -> bytes:
        """The payload of this item, without its header."""
        info = _checked_payload_info(self._data)
        return self._data[info.header_len:info.total()]

    def item_count(self) -> int:
        """Number of items in this list."""
        if not self.is_list():
            raise DecoderError(ErrorKind.RLP_EXPECTED_TO_BE_LIST)
        if self._count_cache is None:
            self._count_cache = sum(1 for _ in self)
        return self._count_cache

    def size(self) -> int:
        """Payload length of a data item, or 0 for anything else."""
        if not self.is_data():
            return 0
        try:
            return _checked_payload_info(self._data).value_len
        except DecoderError:
            return 0

    def at(self, index: int) -> Rlp:
        """The item at index in this list."""
        item, _ = self.at_with_offset(index)
        return item

    def at_with_offset(self, index: int) -> tuple[Rlp, int]:
        """The item at index with its byte offset into the raw data."""
        if not self.is_list():
            raise DecoderError(ErrorKind.RLP_EXPECTED_TO_BE_LIST)
        view = memoryview(self._data)
        cache = self._offset_cache
        if cache is not None and cache[0] <= index:
            offset = cache[1]
            if offset > len(view):
                raise DecoderError(ErrorKind.RLP_IS_TOO_SHORT)
            rest = view[offset:]
            to_skip = index - cache[0]
        else:
            info = _checked_payload_info(view)
            offset = info.header_len
            rest = view[offset:info.total()]
            to_skip = index
        for _ in range(to_skip):
            step = _checked_payload_info(rest).total()
            rest = rest[step:]
            offset += step
        self._offset_cache = (index, offset)
        found = _checked_payload_info(rest)
        return Rlp(rest[:found.total()]), offset

    def is_null(self) -> bool:
        return not self._data

    def is_empty(self) -> bool:
        return not self.is_null() and self._data[0] in (0xC0, 0x80)

    def is_list(self) -> bool:
        return not self.is_null() and self._data[0] >= 0xC0

    def is_data(self) -> bool:
        return not self.is_null() and self._data[0] < 0xC0

    def is_int(self) -> bool:
        """True if this item is data with no leading zero byte."""
        if self.is_null():
            return False
        first = self._data[0]
        if first <= 0x80:
            return True
        if first <= 0xB7:
            return len(self._data) > 1 and self._data[1] != 0
        if first <= 0xBF:
            payload_index = 1 + first - 0xB7
            return payload_index < len(self._data) and self._data[payload_index] != 0
        return False

    def __iter__(self) -> Iterator[Rlp]:
        index = 0
        while True:
            try:
                item = self.at(index)
            except DecoderError:
                return
            yield item
            index += 1

    def decode_value(self, convert: Callable[[bytes], T]) -> T:
        """Pass the payload of a data item to convert and return its result."""
        data = self._data
        if not data:
            raise DecoderError(ErrorKind.RLP_IS_TOO_SHORT)
        first = data[0]
        if first <= 0x7F:
            return convert(data[:1])
        if first <= 0xB7:
            end = 1 + first - 0x80
            if len(data) < end:
                raise DecoderError(ErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            payload = data[1:end]
            if first == 0x81 and payload[0] < 0x80:
                raise DecoderError(ErrorKind.RLP_INVALID_INDIRECTION)
            return convert(payload)
        if first <= 0xBF:
            begin = 1 + first - 0xB7
            if len(data) < begin:
                raise DecoderError(ErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            end = begin + decode_usize(data[1:begin])
            if end > _USIZE_MAX:
                raise DecoderError(ErrorKind.RLP_INVALID_LENGTH)
            if len(data) < end:
                raise DecoderError(ErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            return convert(data[begin:end])
        raise DecoderError(ErrorKind.RLP_EXPECTED_TO_BE_DATA)

    def as_uint(self, max_bytes: int | None = None) -> int:
        """Decode a canonical unsigned integer of at most max_bytes bytes."""
        if max_bytes is not None and max_bytes < 1:
            raise ValueError("max_bytes must be at least 1")

        def convert(payload: bytes) -> int:
            if not payload:
                return 0
            if max_bytes is not None and len(payload) > max_bytes:
                raise DecoderError(ErrorKind.RLP_IS_TOO_BIG)
            if payload[0] == 0:
                raise DecoderError(ErrorKind.RLP_INVALID_INDIRECTION)
            return int.from_bytes(payload, "big")

        return self.decode_value(convert)

    def _as_bool(self) -> bool:
        value = self.as_uint(1)
        if value == 0:
            return False
        if value == 1:
            return True
        raise DecoderError.custom("invalid boolean value")

    def as_val(self, kind: Any = bytes) -> Any:
        """Decode this item as kind.

        kind is bool, int, bytes, bytearray, str, a class with an
        rlp_decode classmethod, or a callable taking an Rlp.
        """
        if kind is bool:
            return self._as_bool()
        if kind is int:
            return self.as_uint()
        if kind is bytes:
            return self.decode_value(bytes)
        if kind is bytearray:
            return self.decode_value(bytearray)
        if kind is str:
            return self.decode_value(_utf8)
        decoder = getattr(kind, "rlp_decode", None)
        if callable(decoder):
            return decoder(self)
        if not isinstance(kind, type) and callable(kind):
            return kind(self)
        raise TypeError(f"cannot RLP-decode into {kind!r}")

    def as_list(self, kind: Any = bytes) -> list[Any]:
        """Decode every item of this list as kind."""
        return [item.as_val(kind) for item in self]

    def as_optional(self, kind: Any = bytes) -> Any:
        """Decode a list of zero or one items into None or a value."""
        count = self.item_count()
        if count == 1:
            return self.val_at(0, kind)
        if count == 0:
            return None
        raise DecoderError(ErrorKind.RLP_INCORRECT_LIST_LEN)

    def val_at(self, index: int, kind: Any = bytes) -> Any:
        """Decode the item at index as kind."""
        return self.at(index).as_val(kind)

    def list_at(self, index: int, kind: Any = bytes) -> list[Any]:
        """Decode the list at index as a list of kind."""
        return self.at(index).as_list(kind)