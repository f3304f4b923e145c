"""Binary assembly and disassembly of network objects.

A :class:`Serializer` is a growable byte buffer with big-endian integer
fields, fixed-width hash fields, variable-length (VL) blobs and tagged
lists. A :class:`SerializerIterator` walks one from the front.

VL blobs carry a 1 to 3 byte length prefix:

* lengths 0 to 192 take one byte holding the length;
* lengths 193 to 12480 take two bytes, the first from 193 to 240;
* lengths 12481 to 918744 take three bytes, the first from 241 to 254.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Iterator

from Crypto.Hash import RIPEMD160

__all__ = [
    "SerializerError",
    "Serializer",
    "SerializerIterator",
    "TaggedListItem",
    "encode_vl",
    "encode_length_length",
    "decode_length_length",
    "decode_vl_length",
    "length_vl",
    "tagged_list_length",
    "sha512_half",
]

TaggedListItem = tuple[int, bytes]

_ONE_BYTE_MAX = 192
_TWO_BYTE_MAX = 12480
_THREE_BYTE_MAX = 918744
_TWO_BYTE_FIRST = 193
_TWO_BYTE_LAST = 240
_THREE_BYTE_FIRST = 241
_THREE_BYTE_LAST = 254
_MAX_TAGGED_ITEMS = 255

BytesLike = bytes | bytearray | memoryview


class SerializerError(ValueError):
    """Data could not be encoded, or read back from a buffer."""


def encode_vl(length: int) -> bytes:
    """Length prefix for a VL blob of ``length`` bytes."""
    if length < 0:
        raise SerializerError("len<0")
    if length <= _ONE_BYTE_MAX:
        return bytes([length])
    if length <= _TWO_BYTE_MAX:
        rest = length - _TWO_BYTE_FIRST
        return bytes([_TWO_BYTE_FIRST + (rest >> 8), rest & 0xFF])
    if length <= _THREE_BYTE_MAX:
        rest = length - (_TWO_BYTE_MAX + 1)
        return bytes(
            [_THREE_BYTE_FIRST + (rest >> 16), (rest >> 8) & 0xFF, rest & 0xFF]
        )
    raise SerializerError("lenlen")


def encode_length_length(length: int) -> int:
    """Number of prefix bytes needed for a VL blob of ``length`` bytes."""
    if length < 0:
        raise SerializerError("len<0")
    if length <= _ONE_BYTE_MAX:
        return 1
    if length <= _TWO_BYTE_MAX:
        return 2
    if length <= _THREE_BYTE_MAX:
        return 3
    raise SerializerError(f"len>{_THREE_BYTE_MAX}")


def decode_length_length(b1: int) -> int:
    """Number of prefix bytes announced by the first prefix byte ``b1``."""
    if b1 < 0:
        raise SerializerError("b1<0")
    if b1 <= _ONE_BYTE_MAX:
        return 1
    if b1 <= _TWO_BYTE_LAST:
        return 2
    if b1 <= _THREE_BYTE_LAST:
        return 3
    raise SerializerError(f"b1>{_THREE_BYTE_LAST}")


def decode_vl_length(b1: int, *args: int) -> int:
    """Blob length from its one, two or three prefix bytes."""
    if not args:
        if b1 < 0:
            raise SerializerError("b1<0")
        if b1 > _THREE_BYTE_LAST:
            raise SerializerError(f"b1>{_THREE_BYTE_LAST}")
        return b1
    if len(args) == 1:
        (b2,) = args
        if b1 < _TWO_BYTE_FIRST:
            raise SerializerError(f"b1<{_TWO_BYTE_FIRST}")
        if b1 > _TWO_BYTE_LAST:
            raise SerializerError(f"b1>{_TWO_BYTE_LAST}")
        return _TWO_BYTE_FIRST + (b1 - _TWO_BYTE_FIRST) * 256 + b2
    if len(args) == 2:
        b2, b3 = args
        if b1 < _THREE_BYTE_FIRST:
            raise SerializerError(f"b1<{_THREE_BYTE_FIRST}")
        if b1 > _THREE_BYTE_LAST:
            raise SerializerError(f"b1>{_THREE_BYTE_LAST}")
        return (
            _TWO_BYTE_MAX + 1 + (b1 - _THREE_BYTE_FIRST) * 65536 + b2 * 256 + b3
        )
    raise TypeError("decode_vl_length takes one to three prefix bytes")


def length_vl(length: int) -> int:
    """Total encoded size of a VL blob of ``length`` bytes, prefix included."""
    return length + encode_length_length(length)


def tagged_list_length(items: Iterable[TaggedListItem]) -> int:
    """Encoded size of a tagged list."""
    items = list(items)
    if len(items) > _MAX_TAGGED_ITEMS:
        raise SerializerError(f"tagged list holds more than {_MAX_TAGGED_ITEMS} items")
    return 1 + sum(1 + length_vl(len(data)) for _, data in items)


def _prefix(data: bytes, size: int) -> bytes:
    if size < 0 or size > len(data):
        return data
    return data[:size]


def sha512_half(data: BytesLike | str, size: int = -1) -> bytes:
    """First 32 bytes of the SHA-512 digest of the first ``size`` bytes.

    A negative or oversized ``size`` hashes all of ``data``. Text is
    hashed as UTF-8.
    """
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    return hashlib.sha512(_prefix(raw, size)).digest()[:32]


class Serializer:
    """A byte buffer for building and reading network objects.

    ``add*`` methods append and return the offset at which they wrote.
    ``get*`` methods read at an offset and raise :class:`SerializerError`
    when the buffer is too short.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, data: BytesLike | str | Iterable[int] = b"") -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytearray(data)

    # -- container behaviour -------------------------------------------

    @property
    def data(self) -> bytes:
        """A copy of the buffer contents."""
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __iter__(self) -> Iterator[int]:
        return iter(bytes(self._data))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Serializer):
            return self._data == other._data
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self._data == bytes(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Serializer({bytes(self._data).hex()!r})"

    # -- assembly ------------------------------------------------------

    def _append(self, chunk: bytes) -> int:
        offset = len(self._data)
        self._data += chunk
        return offset

    def _add_uint(self, value: int, width: int) -> int:
        try:
            chunk = value.to_bytes(width, "big")
        except OverflowError:
            raise SerializerError(
                f"value {value} does not fit in {width * 8} unsigned bits"
            ) from None
        return self._append(chunk)

    def _add_fixed(self, value: BytesLike, width: int) -> int:
        chunk = bytes(value)
        if len(chunk) != width:
            raise SerializerError(
                f"a {width * 8}-bit field takes {width} bytes, got {len(chunk)}"
            )
        return self._append(chunk)

    def add8(self, value: int) -> int:
        return self._add_uint(value, 1)

    def add16(self, value: int) -> int:
        return self._add_uint(value, 2)

    def add32(self, value: int) -> int:
        return self._add_uint(value, 4)

    def add64(self, value: int) -> int:
        return self._add_uint(value, 8)

    def add128(self, value: BytesLike) -> int:
        return self._add_fixed(value, 16)

    def add160(self, value: BytesLike) -> int:
        return self._add_fixed(value, 20)

    def add256(self, value: BytesLike) -> int:
        return self._add_fixed(value, 32)

    def add_raw(self, data: BytesLike | Serializer) -> int:
        """Append bytes, or the contents of another serializer, unchanged."""
        return self._append(bytes(data))

    def add_zeros(self, count: int) -> int:
        if count < 0:
            raise SerializerError("cannot add a negative number of zeros")
        return self._append(bytes(count))

    def add_vl(self, data: BytesLike) -> int:
        """Append a length-prefixed blob."""
        chunk = bytes(data)
        return self._append(encode_vl(len(chunk)) + chunk)

    def add_tagged_list(self, items: Iterable[TaggedListItem]) -> int:
        """Append an item count, then each item as a tag byte and a VL blob."""
        items = list(items)
        if len(items) > _MAX_TAGGED_ITEMS:
            raise SerializerError(
                f"tagged list holds more than {_MAX_TAGGED_ITEMS} items"
            )
        offset = self.add8(len(items))
        for tag, data in items:
            self.add8(tag)
            self.add_vl(data)
        return offset

    # -- disassembly ---------------------------------------------------

    def _slice(self, offset: int, length: int) -> bytes:
        if offset < 0 or length < 0 or offset + length > len(self._data):
            raise SerializerError(
                f"cannot read {length} bytes at offset {offset} "
                f"from {len(self._data)} bytes"
            )
        return bytes(self._data[offset : offset + length])

    def get8(self, offset: int) -> int:
        return self._slice(offset, 1)[0]

    def get16(self, offset: int) -> int:
        return int.from_bytes(self._slice(offset, 2), "big")

    def get32(self, offset: int) -> int:
        return int.from_bytes(self._slice(offset, 4), "big")

    def get64(self, offset: int) -> int:
        return int.from_bytes(self._slice(offset, 8), "big")

    def get128(self, offset: int) -> bytes:
        return self._slice(offset, 16)

    def get160(self, offset: int) -> bytes:
        return self._slice(offset, 20)

    def get256(self, offset: int) -> bytes:
        return self._slice(offset, 32)

    def get_raw(self, offset: int, length: int) -> bytes:
        return self._slice(offset, length)

    def _read_prefix(self, offset: int) -> tuple[int, int]:
        """Return (prefix size, blob length) of the VL blob at ``offset``."""
        b1 = self.get8(offset)
        prefix = decode_length_length(b1)
        rest = [self.get8(offset + index) for index in range(1, prefix)]
        return prefix, decode_vl_length(b1, *rest)

    def get_vl(self, offset: int) -> tuple[bytes, int]:
        """Read a VL blob; return it and the number of bytes it took."""
        prefix, length = self._read_prefix(offset)
        return self._slice(offset + prefix, length), prefix + length

    def get_vl_length(self, offset: int) -> int:
        """Length of the blob of the VL field at ``offset``, prefix excluded."""
        return self._read_prefix(offset)[1]

    def get_tagged_list(self, offset: int) -> tuple[list[TaggedListItem], int]:
        """Read a tagged list; return its items and the number of bytes it took."""
        start = offset
        count = self.get8(offset)
        offset += 1
        items: list[TaggedListItem] = []
        for _ in range(count):
            tag = self.get8(offset)
            data, used = self.get_vl(offset + 1)
            offset += 1 + used
            items.append((tag, data))
        return items, offset - start

    # -- hashing -------------------------------------------------------

    def ripemd160(self, size: int = -1) -> bytes:
        """RIPEMD-160 of the first ``size`` bytes (all when out of range)."""
        return RIPEMD160.new(_prefix(bytes(self._data), size)).digest()

    def sha256(self, size: int = -1) -> bytes:
        """SHA-256 of the first ``size`` bytes (all when out of range)."""
        return hashlib.sha256(_prefix(bytes(self._data), size)).digest()

    def sha512_half(self, size: int = -1) -> bytes:
        """First half of the SHA-512 of the first ``size`` bytes."""
        return sha512_half(bytes(self._data), size)

    # -- trimming ------------------------------------------------------

    def remove_last_byte(self) -> int:
        """Remove the last byte and return it."""
        if not self._data:
            raise SerializerError("cannot remove a byte from an empty buffer")
        return self._data.pop()

    def chop(self, count: int) -> None:
        """Remove ``count`` bytes from the end."""
        if count < 0 or count > len(self._data):
            raise SerializerError(
                f"cannot chop {count} bytes from {len(self._data)} bytes"
            )
        del self._data[len(self._data) - count :]

    def erase(self) -> None:
        self._data.clear()

    def secure_erase(self) -> None:
        """Overwrite the buffer with zeros, then empty it."""
        self._data[:] = bytes(len(self._data))
        self._data.clear()


class SerializerIterator:
    """Reads fields from a :class:`Serializer` in order, raising on short data."""

    def __init__(self, serializer: Serializer) -> None:
        self.serializer = serializer
        self.pos = 0

    def reset(self) -> None:
        self.pos = 0

    def bytes_left(self) -> int:
        return len(self.serializer) - self.pos

    def _take(self, reader, width: int):
        value = reader(self.pos)
        self.pos += width
        return value

    def get8(self) -> int:
        return self._take(self.serializer.get8, 1)

    def get16(self) -> int:
        return self._take(self.serializer.get16, 2)

    def get32(self) -> int:
        return self._take(self.serializer.get32, 4)

    def get64(self) -> int:
        return self._take(self.serializer.get64, 8)

    def get128(self) -> bytes:
        return self._take(self.serializer.get128, 16)

    def get160(self) -> bytes:
        return self._take(self.serializer.get160, 20)

    def get256(self) -> bytes:
        return self._take(self.serializer.get256, 32)

    def get_raw(self, length: int) -> bytes:
        data = self.serializer.get_raw(self.pos, length)
        self.pos += length
        return data

    def get_vl(self) -> bytes:
        data, used = self.serializer.get_vl(self.pos)
        self.pos += used
        return data

    def get_tagged_list(self) -> list[TaggedListItem]:
        items, used = self.serializer.get_tagged_list(self.pos)
        self.pos += used
        return items