# newcoinkit

Building blocks for a ledger network node:

- `newcoinkit.serializer` provides `Serializer`, a byte buffer with
  big-endian integer fields (8 to 64 bits), fixed-width 128/160/256-bit
  fields, variable-length (VL) blobs and tagged lists, plus
  `SerializerIterator` to read one from the front. A buffer can hash its
  contents with RIPEMD-160, SHA-256 and "SHA-512 half" (the first 32 bytes
  of SHA-512). The module also exposes the VL prefix helpers
  (`encode_vl`, `encode_length_length`, `decode_length_length`,
  `decode_vl_length`, `length_vl`, `tagged_list_length`) and a standalone
  `sha512_half`.
- `newcoinkit.rfc1751` converts a 128-bit key to twelve English words and
  back, as described in RFC 1751.
- `newcoinkit.bignum` converts plain Python integers to and from MPI form,
  little-endian signed-magnitude bytes, 32-byte little-endian 256-bit words
  and the compact 32-bit form; it also parses hex text and offers truncating
  division and remainder and clamped conversions.
- `newcoinkit.utils` holds hex helpers, SQL blob literals, the network's own
  epoch (2000-01-01 UTC), parsing of `"ip [port]"` strings and
  Diffie-Hellman parameter generation and loading.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

### Serializer

```python
from newcoinkit.serializer import Serializer, SerializerIterator

s = Serializer()
s.add32(7)
s.add_vl(b"hello")
s.add_tagged_list([(1, b"a"), (2, b"bc")])

it = SerializerIterator(s)
assert it.get32() == 7
assert it.get_vl() == b"hello"
assert it.get_tagged_list() == [(1, b"a"), (2, b"bc")]
assert it.bytes_left() == 0
```

Every `add*` method returns the offset it wrote at. Reading past the end of
the buffer, or adding a value that does not fit its field, raises
`SerializerError` (a `ValueError`). `Serializer.get_vl` and
`Serializer.get_tagged_list` return the value together with the number of
bytes it took.

VL length prefixes take one byte for lengths up to 192, two bytes up to
12480 and three bytes up to 918744; longer blobs cannot be encoded.

### RFC 1751 words

```python
from newcoinkit.rfc1751 import key_to_english, english_to_key

key = bytes(range(16))
words = key_to_english(key)
assert english_to_key(words) == key
```

`english_to_key` raises `MalformedInputError`, `UnknownWordError` or
`ParityError`, all of them subclasses of `Rfc1751Error`. Words must match the
dictionary exactly (upper case).

### Big numbers

```python
from newcoinkit.bignum import to_compact, from_compact, from_hex, mpi_encode, mpi_decode

assert from_hex("0x1f") == 31
assert from_compact(to_compact(0x1234)) == 0x1234
assert mpi_decode(mpi_encode(-5)) == -5
```

Malformed MPI data and division by zero raise `BignumError`.

### Utilities

```python
from newcoinkit.utils import str_hex, str_unhex, parse_ip_port, sql_escape, to_seconds, epoch

assert str_hex(b"\x01\xab") == "01AB"
assert str_unhex("01ab") == b"\x01\xab"
assert sql_escape(b"\x01") == "X'01'"
assert parse_ip_port(" 127.0.0.1 51235 ") == ("127.0.0.1", 51235)
assert parse_ip_port("::1") == ("::1", -1)
assert to_seconds(epoch()) == 0
```

`parse_ip_port` raises `ValueError` for text that is not an endpoint.
`dh_der_gen(key_length)` returns DER-encoded Diffie-Hellman parameters with
generator 5, and `dh_der_load(der)` loads them back.

## What this package does not do

It is a library of encoding and helper functions only. It does not run a
network node, connect to peers, keep a peer database, or create, sign or
verify with account and node keys; `Serializer` has no signing methods.