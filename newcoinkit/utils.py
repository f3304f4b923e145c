"""Small helpers: network epoch time, hex text, SQL blobs, endpoints and DH parameters."""

from __future__ import annotations

import ipaddress
import os
import re
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from cryptography.hazmat.primitives.asymmetric import dh
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    ParameterFormat,
    load_der_parameters,
)

__all__ = [
    "epoch",
    "to_seconds",
    "from_seconds",
    "char_hex",
    "char_unhex",
    "str_hex",
    "str_hex_uint64",
    "str_unhex",
    "sql_escape",
    "is_zero",
    "str_join",
    "parse_ip_port",
    "dh_der_gen",
    "dh_der_load",
    "get_env",
]

_EPOCH = datetime(2000, 1, 1)
_UINT64_MASK = (1 << 64) - 1
_INT32_MAX = (1 << 31) - 1
_DH_GENERATOR = 5
_ENDPOINT = re.compile(r"\s*(\S+)(?:\s+(\d+))?\s*", re.ASCII)


def epoch() -> datetime:
    """Return the network epoch: midnight UTC, 1 January 2000 (naive datetime)."""
    return _EPOCH


def _as_naive_utc(when: datetime) -> datetime:
    if when.tzinfo is not None:
        return when.astimezone(timezone.utc).replace(tzinfo=None)
    return when


def to_seconds(when: datetime | None) -> int:
    """Seconds since the network epoch, or -1 when ``when`` is None."""
    if when is None:
        return -1
    return int((_as_naive_utc(when) - _EPOCH) / timedelta(seconds=1))


def from_seconds(seconds: int) -> datetime | None:
    """Datetime for a count of seconds since the epoch; None for negative counts."""
    if seconds < 0:
        return None
    return _EPOCH + timedelta(seconds=seconds)


def char_hex(digit: int) -> str:
    """Upper-case hex character for a value from 0 to 15."""
    if not 0 <= digit < 16:
        raise ValueError(f"hex digit out of range: {digit}")
    return chr(ord("0") + digit) if digit < 10 else chr(ord("A") - 10 + digit)


def char_unhex(char: str) -> int:
    """Value of a hex character, or -1 if it is not one."""
    if "0" <= char <= "9":
        return ord(char) - ord("0")
    if "A" <= char <= "F":
        return ord(char) - ord("A") + 10
    if "a" <= char <= "f":
        return ord(char) - ord("a") + 10
    return -1


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def str_hex(data: bytes | bytearray | memoryview | str) -> str:
    """Upper-case hex text of a byte string."""
    return _as_bytes(data).hex().upper()


def str_hex_uint64(value: int) -> str:
    """Sixteen hex digits of a 64-bit unsigned value, most significant first."""
    return str_hex((value & _UINT64_MASK).to_bytes(8, "big"))


def str_unhex(text: str) -> bytes:
    """Decode hex text into bytes; a trailing odd character is ignored."""
    out = bytearray()
    for high, low in zip(text[0::2], text[1::2]):
        high_value, low_value = char_unhex(high), char_unhex(low)
        if high_value < 0 or low_value < 0:
            raise ValueError(f"invalid hex digits: {high + low!r}")
        out.append((high_value << 4) | low_value)
    return bytes(out)


def sql_escape(data: bytes | bytearray | memoryview | str) -> str:
    """SQL blob literal of the form X'..'."""
    return f"X'{str_hex(data)}'"


def is_zero(data: Iterable[int]) -> bool:
    """True if every byte is zero."""
    return not any(data)


def str_join(items: Iterable[object], separator: str) -> str:
    """Join the string forms of ``items`` with ``separator``."""
    return separator.join(str(item) for item in items)


def parse_ip_port(source: str) -> tuple[str, int]:
    """Parse ``"<ip> [<port>]"`` into a normalised address and port.

    The port is -1 when it is absent. Raises ValueError when the text is
    not of that form or the address is not a valid IP address.
    """
    match = _ENDPOINT.fullmatch(source)
    if match is None:
        raise ValueError(f"not an endpoint: {source!r}")
    raw_ip, raw_port = match.groups()
    try:
        address = ipaddress.ip_address(raw_ip)
    except ValueError:
        raise ValueError(f"invalid IP address: {raw_ip!r}") from None
    port = -1
    if raw_port is not None:
        port = int(raw_port)
        if port > _INT32_MAX:
            raise ValueError(f"port out of range: {raw_port}")
    return str(address), port


def dh_der_gen(key_length: int) -> bytes:
    """Generate Diffie-Hellman parameters with generator 5, DER encoded."""
    parameters = dh.generate_parameters(generator=_DH_GENERATOR, key_size=key_length)
    return parameters.parameter_bytes(Encoding.DER, ParameterFormat.PKCS3)


def dh_der_load(der: bytes) -> dh.DHParameters:
    """Load DER-encoded Diffie-Hellman parameters."""
    try:
        parameters = load_der_parameters(bytes(der))
    except (ValueError, TypeError) as error:
        raise ValueError(f"invalid DH parameters: {error}") from None
    if not isinstance(parameters, dh.DHParameters):
        raise ValueError("DER data does not hold DH parameters")
    return parameters


def get_env(key: str) -> str:
    """Value of an environment variable, or an empty string."""
    return os.environ.get(key, "")