# rlpcodec

Recursive Length Prefix (RLP) serialization, together with the fixed-width
unsigned integers (`U128`, `U256`, `U512`) and fixed-size hashes (`H128`,
`H160`, `H256`, `H384`, `H512`, `H768`) that usually travel with it.
The package has no dependencies beyond the standard library.

## Installation

```
pip install rlpcodec
```

## Encoding and decoding

```python
from rlpcodec.api import encode, encode_list, decode, decode_list

encode("cat")                  # b"\x83cat"
encode_list(["cat", "dog"])    # b"\xc8\x83cat\x83dog"
decode(b"\x83cat", str)        # "cat"
decode_list(b"\xc6\x01\x02\x03\x07\x81\xff", int)  # [1, 2, 3, 7, 255]
```

`encode` accepts `bool`, non-negative `int`, `bytes`-like values, `str`,
lists and tuples (encoded as RLP lists), and any object with an
`rlp_append(stream)` method. `decode` and `decode_list` take a `kind`:
`bool`, `int`, `bytes` (the default), `bytearray`, `str`, a class with an
`rlp_decode(rlp)` classmethod, or a callable taking an `Rlp`.

Malformed input raises `rlpcodec.errors.DecoderError`; its `kind` is a member
of `ErrorKind` such as `RLP_IS_TOO_SHORT` or `RLP_INVALID_INDIRECTION`.
`DecoderError.custom(message)` builds an error with a free-form message.

## Streaming

`RlpStream` builds an encoding piece by piece:

```python
from rlpcodec.stream import RlpStream

stream = RlpStream.new_list(2)
stream.append("cat").append("dog")
stream.out()   # b"\xc8\x83cat\x83dog"
```

Unbounded lists are opened with `begin_unbounded_list()` and closed with
`finalize_unbounded_list()`. `append_optional()` writes `None` as an empty
list and any other value as a one-item list. `append_raw_checked()` appends
pre-encoded data only while the total stays within a size limit.
`out()` raises `RuntimeError` while a list is still open. A stream may also
start after existing bytes: `RlpStream(b"junk")`.

## Reading

`Rlp` is a read-only view over encoded bytes:

```python
from rlpcodec.reader import Rlp

rlp = Rlp(b"\xc8\x83cat\x83dog")
rlp.is_list()          # True
rlp.at(1).as_val(str)  # "dog"
rlp.at_with_offset(1)  # (the "dog" item, 5)
[item.as_val(str) for item in rlp]
str(rlp)               # '["0x636174", "0x646f67"]'
```

`as_uint(max_bytes)` reads a canonical unsigned integer, `as_optional(kind)`
reads a list of zero or one items as `None` or a value, and `val_at` /
`list_at` decode the item at an index.

## Your own types

Any class can take part by providing `rlp_append` and an `rlp_decode`
classmethod (or by subclassing `rlpcodec.stream.Encodable`):

```python
from rlpcodec.api import encode, decode

class Point:
    def __init__(self, x, y):
        self.x, self.y = x, y

    def rlp_append(self, stream):
        stream.begin_list(2).append(self.x).append(self.y)

    @classmethod
    def rlp_decode(cls, rlp):
        return cls(rlp.val_at(0, int), rlp.val_at(1, int))

data = encode(Point(1, 2))     # b"\xc2\x01\x02"
point = decode(data, Point)
```

## Integers and hashes

```python
from rlpcodec.api import encode, decode
from rlpcodec.uint import U256
from rlpcodec.hashes import H160

U256.from_f64_lossy(13.37)         # U256(13)
U256.max_value().checked_add(1)    # None
U256(3).full_mul(4)                # U512(12)
encode(U256(0xFFFFFFFF))           # b"\x84\xff\xff\xff\xff"
decode(b"\x84\xff\xff\xff\xff", U256)
H160(bytes(20)).to_h256()
```

The integer types are `int` subclasses that reject values outside their
width (`ConversionOverflow`). Both integers and hashes can be written in the
SCALE fixed-width form with `scale_encode()` and read back with
`scale_decode()`.

## Hex serialization

`rlpcodec.hexser` converts bytes, integers and hashes to and from
`0x`-prefixed hex strings: `to_hex`, `from_hex`, `serialize`,
`serialize_uint`, `deserialize`, `deserialize_check_len` with an
`ExpectedLen`, `serialize_uint_value` / `deserialize_uint_value` and
`serialize_hash` / `deserialize_hash`. Bad hex digits raise `FromHexError`.

## What it does not do

There is no decorator that turns a dataclass into an RLP record; classes
write their own `rlp_append` and `rlp_decode` as shown above. The package
has no command-line tool.

## Running the tests

```
pip install rlpcodec[test]
pytest
```