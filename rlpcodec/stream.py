"""Appendable RLP encoder."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

_SHORT_LIMIT = 55


def _be_bytes(number: int) -> bytes:
    return number.to_bytes((number.bit_length() + 7) // 8, "big")


@dataclass
class _ListInfo:
    position: int
    max: int | None
    current: int = 0


class Encodable(ABC):
    """A value that knows how to write itself to an RlpStream."""

    @abstractmethod
    def rlp_append(self, stream: RlpStream) -> None:
        """Append this value to the stream."""

    def rlp_bytes(self) -> bytes:
        """Return the RLP encoding of this value alone."""
        stream = RlpStream()
        self.rlp_append(stream)
        return stream.out()


class RlpStream:
    """Builds RLP output item by item, tracking open lists."""

    def __init__(self, buffer: bytes | bytearray | None = None) -> None:
        self._buffer = bytearray(buffer) if buffer is not None else bytearray()
        self._start = len(self._buffer)
        self._lists: list[_ListInfo] = []
        self._finished_list = False

    @classmethod
    def new_list(cls, length: int, buffer: bytes | bytearray | None = None) -> RlpStream:
        """Create a stream that starts with a list of the given length."""
        stream = cls(buffer)
        stream.begin_list(length)
        return stream

    def _total_written(self) -> int:
        return len(self._buffer) - self._start

    def append_empty_data(self) -> RlpStream:
        """Append the empty value."""
        self._buffer.append(0x80)
        self._note_appended(1)
        return self

    def append_raw(self, data: bytes, item_count: int) -> RlpStream:
        """Append pre-encoded RLP holding item_count items."""
        self._buffer.extend(data)
        self._note_appended(item_count)
        return self

    def append(self, value: Any) -> RlpStream:
        """Append one value."""
        self._finished_list = False
        self._write_value(value)
        if not self._finished_list:
            self._note_appended(1)
        return self

    def append_optional(self, value: Any) -> RlpStream:
        """Append a value that may be None, as a list of zero or one items."""
        if value is None:
            self.begin_list(0)
        else:
            self.begin_list(1)
            self.append(value)
        return self

    def append_iter(self, values: Iterable[int]) -> RlpStream:
        """Append the bytes produced by an iterable as one value."""
        self._finished_list = False
        self.encode_value(bytes(values))
        if not self._finished_list:
            self._note_appended(1)
        return self

    def append_list(self, values: Iterable[Any]) -> RlpStream:
        """Append a list holding every given value."""
        items = list(values)
        self.begin_list(len(items))
        for item in items:
            self.append(item)
        return self

    def append_internal(self, value: Any) -> RlpStream:
        """Append a value without counting it as an item."""
        self._write_value(value)
        return self

    def begin_list(self, length: int) -> RlpStream:
        """Open a list that will hold exactly length items."""
        self._finished_list = False
        if length == 0:
            self._buffer.append(0xC0)
            self._note_appended(1)
            self._finished_list = True
        else:
            self._buffer.append(0)
            self._lists.append(_ListInfo(self._total_written(), length))
        return self

    def begin_unbounded_list(self) -> RlpStream:
        """Open a list whose length is settled by finalize_unbounded_list."""
        self._finished_list = False
        self._buffer.append(0)
        self._lists.append(_ListInfo(self._total_written(), None))
        return self

    def finalize_unbounded_list(self) -> RlpStream:
        """Close the innermost unbounded list."""
        if not self._lists:
            raise RuntimeError("no open list")
        if self._lists[-1].max is not None:
            raise RuntimeError("list type mismatch")
        info = self._lists.pop()
        self._insert_list_payload(self._total_written() - info.position, info.position)
        self._note_appended(1)
        self._finished_list = True
        return self

    def append_raw_checked(self, data: bytes, item_count: int, max_size: int) -> bool:
        """Append raw RLP only if the result stays within max_size bytes."""
        if self.estimate_size(len(data)) > max_size:
            return False
        self.append_raw(data, item_count)
        return True

    def estimate_size(self, add: int) -> int:
        """Total encoded size if add more payload bytes were written."""
        total = self._total_written() + add
        size = total
        for info in self._lists:
            length = total - info.position
            if length > _SHORT_LIMIT:
                size += (length.bit_length() + 7) // 8
        return size

    def __len__(self) -> int:
        return self.estimate_size(0)

    def is_empty(self) -> bool:
        return len(self) == 0

    def clear(self) -> None:
        """Discard everything written to this stream."""
        del self._buffer[self._start:]
        self._lists.clear()

    def is_finished(self) -> bool:
        """True when no list is waiting for more items."""
        return not self._lists

    def as_raw(self) -> bytes:
        return bytes(self._buffer)

    def out(self) -> bytes:
        """Return the encoded bytes; every list must be finished."""
        if not self.is_finished():
            raise RuntimeError("stream has unfinished lists")
        return bytes(self._buffer)

    def encode_value(self, data: bytes) -> None:
        """Write a byte string with its RLP header, without counting it."""
        length = len(data)
        if length == 0:
            self._buffer.append(0x80)
        elif length == 1 and data[0] < 0x80:
            self._buffer.append(data[0])
        elif length <= _SHORT_LIMIT:
            self._buffer.append(0x80 + length)
            self._buffer.extend(data)
        else:
            size = _be_bytes(length)
            self._buffer.append(0xB7 + len(size))
            self._buffer.extend(size)
            self._buffer.extend(data)

    def _write_value(self, value: Any) -> None:
        writer = getattr(value, "rlp_append", None)
        if callable(writer):
            writer(self)
        elif isinstance(value, bool):
            self.encode_value(b"\x01" if value else b"")
        elif isinstance(value, int):
            if value < 0:
                raise ValueError("cannot encode a negative integer")
            self.encode_value(_be_bytes(value))
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self.encode_value(bytes(value))
        elif isinstance(value, str):
            self.encode_value(value.encode("utf-8"))
        elif isinstance(value, (list, tuple)):
            self.append_list(value)
        else:
            raise TypeError(f"cannot RLP-encode {type(value).__name__}")

    def _insert_list_payload(self, length: int, position: int) -> None:
        index = self._start + position
        if length <= _SHORT_LIMIT:
            self._buffer[index - 1] = 0xC0 + length
        else:
            size = _be_bytes(length)
            self._buffer[index:index] = size
            self._buffer[index - 1] = 0xF7 + len(size)

    def _note_appended(self, inserted: int) -> None:
        if not self._lists:
            return
        top = self._lists[-1]
        top.current += inserted
        should_finish = False
        if top.max is not None:
            if top.current > top.max:
                raise ValueError("cannot append more items than the list expects")
            should_finish = top.current == top.max
        if should_finish:
            self._lists.pop()
            self._insert_list_payload(self._total_written() - top.position, top.position)
            self._note_appended(1)
        self._finished_list = should_finish