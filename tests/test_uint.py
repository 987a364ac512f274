import math

import pytest

from rlpcodec.api import decode, encode
from rlpcodec.errors import DecoderError, ErrorKind
from rlpcodec.uint import U128, U256, U512, ConversionOverflow

BIG_HEX = "8090a0b0c0d0e0f00910203040506077000000000000000100000000000012f0"


def test_convert_u256_to_f64():
    assert U256(0).to_f64_lossy() == 0.0
    assert U256(42).to_f64_lossy() == 42.0
    assert U256(1_000_000_000_000_000_000).to_f64_lossy() == 1_000_000_000_000_000_000.0


def test_convert_u256_to_f64_precision_loss():
    assert U256(2**64 - 1).to_f64_lossy() == float(2**64 - 1)
    assert (
        U256.max_value().to_f64_lossy()
        == 115792089237316195423570985008687907853269984665640564039457584007913129639935.0
    )
    assert (
        U256.max_value().to_f64_lossy()
        == 115792089237316200000000000000000000000000000000000000000000000000000000000000.0
    )


def test_convert_f64_to_u256():
    assert U256.from_f64_lossy(0.0) == 0
    assert U256.from_f64_lossy(13.37) == 13
    assert U256.from_f64_lossy(42.0) == 42
    assert U256.from_f64_lossy(999.999) == 999
    assert U256.from_f64_lossy(1_000_000_000_000_000_000.0) == 1_000_000_000_000_000_000


def test_convert_f64_to_u256_overflow():
    assert (
        U256.from_f64_lossy(115792089237316200000000000000000000000000000000000000000000000000000000000000.0)
        == U256.max_value()
    )
    assert (
        U256.from_f64_lossy(999999999999999999999999999999999999999999999999999999999999999999999999999999.0)
        == U256.max_value()
    )


def test_convert_f64_to_u256_non_normal():
    assert U256.from_f64_lossy(2.220446049250313e-16) == 0
    assert U256.from_f64_lossy(0.0) == 0
    assert U256.from_f64_lossy(math.nan) == 0
    assert U256.from_f64_lossy(-math.inf) == 0
    assert U256.from_f64_lossy(math.inf) == U256.max_value()


def test_f64_to_u256_truncation():
    assert U256.from_f64_lossy(10.5) == 10


def test_from_f64_lossy_returns_u256():
    assert isinstance(U256.from_f64_lossy(3.0), U256) and U256.from_f64_lossy(3.0) == 3


def test_u256_isqrt():
    x = U256.max_value()
    assert x.integer_sqrt() == 2**128 - 1
    assert x.integer_sqrt() ** 2 <= x


def test_u256_checked_ops():
    zero, one, top = U256.zero(), U256.one(), U256.max_value()
    assert top.checked_add(one) is None
    assert zero.checked_add(one) == one
    assert zero.checked_sub(one) is None
    assert one.checked_sub(zero) == one
    assert top.checked_div(zero) is None
    assert top.checked_div(one) == top
    assert top.checked_mul(top) is None
    assert top.checked_mul(zero) == zero


def test_construction_limits():
    assert U128.max_value() == 2**128 - 1
    with pytest.raises(ConversionOverflow):
        U128(2**128)
    with pytest.raises(ValueError):
        U256(-1)


def test_try_from_narrowing_and_widening():
    assert U128.try_from(U256(5)) == U128(5)
    with pytest.raises(ConversionOverflow):
        U128.try_from(U256(2**128))
    with pytest.raises(ConversionOverflow):
        U256.try_from(U512(2**256))
    assert U512.try_from(U256.max_value()) == 2**256 - 1


def test_full_mul():
    assert U128.max_value().full_mul(U128.max_value()) == (2**128 - 1) ** 2
    assert isinstance(U256.max_value().full_mul(2), U512)
    assert U256.max_value().full_mul(U256.max_value()) == (2**256 - 1) ** 2


def test_from_str_radix():
    assert U256.from_str_radix("ff", 16) == 255
    assert U256.from_str_radix("1000", 10) == 1000
    with pytest.raises(ValueError):
        U256.from_str_radix("12", 8)
    with pytest.raises(ValueError):
        U256.from_str_radix("1g", 16)
    with pytest.raises(ConversionOverflow):
        U128.from_str_radix("1" + "0" * 32, 16)


def test_endian_round_trip():
    value = U256.from_big_endian(bytes.fromhex(BIG_HEX))
    assert value.to_big_endian().hex() == BIG_HEX
    assert U256.from_little_endian(value.to_little_endian()) == value
    assert U128(1).to_big_endian() == b"\x00" * 15 + b"\x01"
    with pytest.raises(ConversionOverflow):
        U128.from_big_endian(b"\x01" * 17)


def test_bits():
    assert U256(0).bits() == 0
    assert U256(255).bits() == 8
    assert U256(0).is_zero()


@pytest.mark.parametrize(
    "value, expected",
    [
        (U256(0), "80"),
        (U256(0x0100_0000), "8401000000"),
        (U256(0xFFFF_FFFF), "84ffffffff"),
        (U256.from_big_endian(bytes.fromhex(BIG_HEX)), "a0" + BIG_HEX),
    ],
)
def test_encode_u256(value, expected):
    assert encode(value).hex() == expected


@pytest.mark.parametrize(
    "expected, data",
    [
        (U256(0), "80"),
        (U256(0x0100_0000), "8401000000"),
        (U256(0xFFFF_FFFF), "84ffffffff"),
        (U256.from_big_endian(bytes.fromhex(BIG_HEX)), "a0" + BIG_HEX),
    ],
)
def test_decode_u256(expected, data):
    result = decode(bytes.fromhex(data), U256)
    assert result == expected
    assert isinstance(result, U256)


def test_decode_rejects_leading_zero_and_too_big():
    with pytest.raises(DecoderError) as err:
        decode(bytes.fromhex("820001"), U256)
    assert err.value.kind is ErrorKind.RLP_INVALID_INDIRECTION
    with pytest.raises(DecoderError) as err:
        decode(bytes([0x91]) + b"\x01" * 17, U128)
    assert err.value.kind is ErrorKind.RLP_IS_TOO_BIG


def test_scale_codec():
    assert U256(1).scale_encode() == b"\x01" + b"\x00" * 31
    assert U256.scale_decode(U256(123456).scale_encode()) == 123456
    assert U512.max_encoded_len() == 64
    with pytest.raises(ValueError):
        U128.scale_decode(b"\x00" * 15)