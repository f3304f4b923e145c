"""Big integer encodings: MPI, little-endian byte vectors, 256-bit words and compact form.

Values are plain Python integers; the functions here convert them to and
from the wire formats and give the truncating arithmetic and clamped
conversions the network code expects.
"""

from __future__ import annotations

import re

__all__ = [
    "BignumError",
    "mpi_encode",
    "mpi_decode",
    "to_vch",
    "from_vch",
    "to_uint256",
    "from_uint256",
    "to_compact",
    "from_compact",
    "from_hex",
    "to_int32",
    "to_ulong",
    "truncating_div",
    "truncating_mod",
]

_INT32_MAX = (1 << 31) - 1
_INT32_MIN = -(1 << 31)
_ULONG_MAX = (1 << 64) - 1
_UINT256_BYTES = 32
_C_SPACE = " \t\n\v\f\r"
_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]*")


class BignumError(ArithmeticError):
    """An operation on a big number failed."""


def mpi_encode(value: int) -> bytes:
    """Encode an integer in MPI form: 4-byte length, then signed big-endian magnitude."""
    magnitude = abs(value)
    body = magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "big")
    if body and body[0] & 0x80:
        body = b"\x00" + body
    if value < 0:
        body = bytes([body[0] | 0x80]) + body[1:]
    return len(body).to_bytes(4, "big") + body


def mpi_decode(data: bytes) -> int:
    """Decode an MPI-form integer."""
    data = bytes(data)
    if len(data) < 4:
        raise BignumError("MPI data shorter than its length header")
    length = int.from_bytes(data[:4], "big")
    body = data[4:]
    if length != len(body):
        raise BignumError(f"MPI length {length} does not match {len(body)} bytes")
    if not body:
        return 0
    magnitude = int.from_bytes(bytes([body[0] & 0x7F]) + body[1:], "big")
    return -magnitude if body[0] & 0x80 else magnitude


def to_vch(value: int) -> bytes:
    """Little-endian signed-magnitude bytes of ``value``; empty for zero."""
    return mpi_encode(value)[4:][::-1]


def from_vch(data: bytes) -> int:
    """Integer from little-endian signed-magnitude bytes."""
    data = bytes(data)
    return mpi_decode(len(data).to_bytes(4, "big") + data[::-1])


def to_uint256(value: int) -> bytes:
    """Low 256 bits of the magnitude of ``value`` as 32 little-endian bytes."""
    return (abs(value) % (1 << 256)).to_bytes(_UINT256_BYTES, "little")


def from_uint256(data: bytes) -> int:
    """Integer from a 32-byte little-endian 256-bit word."""
    data = bytes(data)
    if len(data) != _UINT256_BYTES:
        raise ValueError(f"a 256-bit word holds {_UINT256_BYTES} bytes, got {len(data)}")
    return int.from_bytes(data, "little")


def to_compact(value: int) -> int:
    """Compact 32-bit form: MPI body length in the top byte, its first three bytes below."""
    body = mpi_encode(value)[4:]
    compact = (len(body) << 24) & 0xFFFFFFFF
    return compact | int.from_bytes((body + bytes(3))[:3], "big")


def from_compact(compact: int) -> int:
    """Integer from its compact 32-bit form."""
    if not 0 <= compact <= 0xFFFFFFFF:
        raise ValueError(f"compact value out of range: {compact}")
    size = compact >> 24
    body = (compact & 0xFFFFFF).to_bytes(3, "big")[:size] + bytes(max(0, size - 3))
    return mpi_decode(size.to_bytes(4, "big") + body)


def from_hex(text: str) -> int:
    """Parse hex text with optional leading space, minus sign and ``0x``.

    Parsing stops at the first character that is not a hex digit; no
    digits at all gives zero.
    """
    rest = text.lstrip(_C_SPACE)
    negative = rest.startswith("-")
    if negative:
        rest = rest[1:]
    if rest[:1] == "0" and rest[1:2] in ("x", "X"):
        rest = rest[2:]
    rest = rest.lstrip(_C_SPACE)
    digits = _HEX_DIGITS.match(rest).group()
    value = int(digits, 16) if digits else 0
    return -value if negative else value


def to_int32(value: int) -> int:
    """``value`` clamped to the signed 32-bit range."""
    return max(_INT32_MIN, min(_INT32_MAX, value))


def to_ulong(value: int) -> int:
    """Magnitude of ``value``, saturated to the unsigned 64-bit maximum."""
    return min(abs(value), _ULONG_MAX)


def truncating_div(a: int, b: int) -> int:
    """Quotient rounded toward zero."""
    if b == 0:
        raise BignumError("division by zero")
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def truncating_mod(a: int, b: int) -> int:
    """Remainder taking the sign of the dividend."""
    return a - b * truncating_div(a, b)