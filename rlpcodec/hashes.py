"""Fixed-size uninterpreted hash types."""

from __future__ import annotations

from .errors import DecoderError, ErrorKind
from .reader import Rlp
from .stream import RlpStream


class FixedHash:
    """An immutable byte string of exactly SIZE bytes."""

    SIZE: int = 0

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        if self.SIZE <= 0:
            raise TypeError(f"{type(self).__name__} has no fixed size")
        raw = bytes(data)
        if len(raw) != self.SIZE:
            raise ValueError(f"{type(self).__name__} needs {self.SIZE} bytes, got {len(raw)}")
        self._data = raw

    @classmethod
    def zero(cls) -> FixedHash:
        return cls(bytes(cls.SIZE))

    def __bytes__(self) -> bytes:
        return self._data

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._data))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self._data.hex()})"

    def rlp_append(self, stream: RlpStream) -> None:
        stream.encode_value(self._data)

    @classmethod
    def rlp_decode(cls, rlp: Rlp) -> FixedHash:
        """Read a data item of exactly SIZE bytes."""

        def convert(payload: bytes) -> FixedHash:
            if len(payload) < cls.SIZE:
                raise DecoderError(ErrorKind.RLP_IS_TOO_SHORT)
            if len(payload) > cls.SIZE:
                raise DecoderError(ErrorKind.RLP_IS_TOO_BIG)
            return cls(payload)

        return rlp.decode_value(convert)

    def scale_encode(self) -> bytes:
        """SCALE encoding: the raw bytes."""
        return self._data

    @classmethod
    def scale_decode(cls, data: bytes) -> FixedHash:
        """Read a hash from the first SIZE bytes of data."""
        if len(data) < cls.SIZE:
            raise ValueError(f"{cls.__name__} needs {cls.SIZE} bytes, got {len(data)}")
        return cls(data[: cls.SIZE])

    @classmethod
    def max_encoded_len(cls) -> int:
        return cls.SIZE


class H128(FixedHash):
    """16-byte hash."""

    SIZE = 16
    __slots__ = ()


class H160(FixedHash):
    """20-byte hash."""

    SIZE = 20
    __slots__ = ()

    def to_h256(self) -> H256:
        """Widen to H256 by prefixing zero bytes."""
        return H256(bytes(H256.SIZE - self.SIZE) + bytes(self))


class H256(FixedHash):
    """32-byte hash."""

    SIZE = 32
    __slots__ = ()

    def to_h160(self) -> H160:
        """Narrow to H160 by keeping the last 20 bytes."""
        return H160(bytes(self)[self.SIZE - H160.SIZE:])


class H384(FixedHash):
    """48-byte hash."""

    SIZE = 48
    __slots__ = ()


class H512(FixedHash):
    """64-byte hash."""

    SIZE = 64
    __slots__ = ()


class H768(FixedHash):
    """96-byte hash."""

    SIZE = 96
    __slots__ = ()