"""Shortcut functions for encoding and decoding whole values."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .reader import Rlp
from .stream import RlpStream


def decode(data: bytes | bytearray | memoryview, kind: Any = bytes) -> Any:
    """Decode RLP data as a single value of kind."""
    return Rlp(data).as_val(kind)


def decode_list(data: bytes | bytearray | memoryview, kind: Any = bytes) -> list[Any]:
    """Decode an RLP list as a list of values of kind."""
    return Rlp(data).as_list(kind)


def encode(value: Any) -> bytes:
    """Encode a single value to RLP."""
    return RlpStream().append(value).out()


def encode_list(values: Iterable[Any]) -> bytes:
    """Encode values as an RLP list."""
    return RlpStream().append_list(values).out()