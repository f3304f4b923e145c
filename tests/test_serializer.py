import pytest

from newcoinkit.serializer import (
    Serializer,
    SerializerError,
    SerializerIterator,
    decode_length_length,
    decode_vl_length,
    encode_length_length,
    encode_vl,
    length_vl,
    sha512_half,
    tagged_list_length,
)


def test_add_integers_are_big_endian():
    s = Serializer()
    assert s.add16(0x1234) == 0
    assert s.add32(0x01020304) == 2
    assert s.data == b"\x12\x34\x01\x02\x03\x04"


def test_add_returns_offsets_and_get_round_trip():
    s = Serializer()
    assert s.add8(0xAB) == 0
    assert s.add16(0xBEEF) == 1
    assert s.add32(0xDEADBEEF) == 3
    assert s.add64(0x0123456789ABCDEF) == 7
    assert len(s) == 15
    assert s.get8(0) == 0xAB
    assert s.get16(1) == 0xBEEF
    assert s.get32(3) == 0xDEADBEEF
    assert s.get64(7) == 0x0123456789ABCDEF


def test_fixed_width_fields_round_trip():
    s = Serializer()
    v128, v160, v256 = bytes(range(16)), bytes(range(20)), bytes(range(32))
    s.add128(v128)
    s.add160(v160)
    s.add256(v256)
    assert s.get128(0) == v128
    assert s.get160(16) == v160
    assert s.get256(36) == v256


def test_fixed_width_wrong_size_rejected():
    with pytest.raises(SerializerError):
        Serializer().add256(b"\x00" * 31)


def test_integer_out_of_range_rejected():
    with pytest.raises(SerializerError):
        Serializer().add16(0x10000)
    with pytest.raises(SerializerError):
        Serializer().add8(-1)


def test_reads_past_end_raise():
    s = Serializer(b"\x01\x02\x03")
    with pytest.raises(SerializerError):
        s.get32(0)
    with pytest.raises(SerializerError):
        s.get8(3)
    with pytest.raises(SerializerError):
        s.get8(-1)
    with pytest.raises(SerializerError):
        s.get_raw(2, 2)
    assert s.get_raw(1, 2) == b"\x02\x03"


def test_add_zeros_and_raw():
    s = Serializer(b"x")
    assert s.add_zeros(3) == 1
    assert s.add_raw(Serializer(b"yz")) == 4
    assert s.add_raw(b"!") == 6
    assert s.data == b"x\x00\x00\x00yz!"


@pytest.mark.parametrize(
    "length,prefix",
    [(0, b"\x00"), (192, b"\xc0"), (193, b"\xc1\x00"), (12481, b"\xf1\x00\x00")],
)
def test_encode_vl_boundaries(length, prefix):
    assert encode_vl(length) == prefix


@pytest.mark.parametrize("length", [0, 1, 192, 193, 500, 12480, 12481, 70000, 918744])
def test_encode_vl_decodes_back(length):
    prefix = encode_vl(length)
    assert len(prefix) == encode_length_length(length)
    assert decode_length_length(prefix[0]) == len(prefix)
    assert decode_vl_length(*prefix) == length
    assert length_vl(length) == length + len(prefix)


def test_encode_vl_limits():
    with pytest.raises(SerializerError):
        encode_vl(918745)
    with pytest.raises(SerializerError):
        encode_vl(-1)
    with pytest.raises(SerializerError):
        encode_length_length(-5)


def test_decode_length_length_ranges():
    assert decode_length_length(192) == 1
    assert decode_length_length(240) == 2
    assert decode_length_length(254) == 3
    with pytest.raises(SerializerError):
        decode_length_length(255)
    with pytest.raises(SerializerError):
        decode_length_length(-1)


def test_decode_vl_length_checks_first_byte():
    with pytest.raises(SerializerError):
        decode_vl_length(192, 0)
    with pytest.raises(SerializerError):
        decode_vl_length(241, 0)
    with pytest.raises(SerializerError):
        decode_vl_length(240, 0, 0)
    with pytest.raises(SerializerError):
        decode_vl_length(255)
    with pytest.raises(TypeError):
        decode_vl_length(241, 0, 0, 0)


@pytest.mark.parametrize("size", [0, 5, 192, 193, 3000, 12481])
def test_vl_round_trip(size):
    blob = bytes(i % 251 for i in range(size))
    s = Serializer()
    s.add8(7)
    assert s.add_vl(blob) == 1
    data, used = s.get_vl(1)
    assert data == blob
    assert used == length_vl(size)
    assert s.get_vl_length(1) == size
    assert len(s) == 1 + used


def test_vl_truncated_raises():
    s = Serializer()
    s.add_vl(b"hello")
    s.chop(1)
    with pytest.raises(SerializerError):
        s.get_vl(0)


def test_tagged_list_round_trip():
    items = [(1, b"abc"), (2, b""), (255, bytes(300))]
    s = Serializer()
    s.add8(0)
    assert s.add_tagged_list(items) == 1
    read, used = s.get_tagged_list(1)
    assert read == items
    assert used == tagged_list_length(items)
    assert len(s) == 1 + used


def test_empty_tagged_list():
    s = Serializer()
    s.add_tagged_list([])
    assert s.data == b"\x00"
    assert s.get_tagged_list(0) == ([], 1)
    assert tagged_list_length([]) == 1


def test_tagged_list_too_long():
    items = [(0, b"")] * 256
    with pytest.raises(SerializerError):
        Serializer().add_tagged_list(items)
    with pytest.raises(SerializerError):
        tagged_list_length(items)


def test_sha512_half_known_vector():
    assert sha512_half(b"").hex() == (
        "cf83e1357eefb8bdf1542850d66d8007d620e4050b5715dc83f4a921d36ce9ce"
    )


def test_hash_sizes_select_prefix():
    s = Serializer(b"hello world")
    assert s.sha512_half(5) == sha512_half(b"hello")
    assert s.sha512_half() == sha512_half(b"hello world")
    assert s.sha512_half(100) == s.sha512_half(-1)
    assert sha512_half("hello") == sha512_half(b"hello")
    assert len(s.sha512_half()) == 32
    assert s.sha256(5) == Serializer(b"hello").sha256()
    assert len(s.sha256()) == 32
    assert s.ripemd160(5) == Serializer(b"hello").ripemd160()
    assert len(s.ripemd160()) == 20


def test_ripemd160_and_sha256_known_vectors():
    empty = Serializer()
    assert empty.ripemd160().hex() == "9c1185a5c5e9fc54612808977ee8f548b2258d31"
    assert empty.sha256().hex() == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_remove_last_byte_and_chop():
    s = Serializer(b"\x01\x02\x03\x04")
    assert s.remove_last_byte() == 4
    assert s.data == b"\x01\x02\x03"
    s.chop(2)
    assert s.data == b"\x01"
    with pytest.raises(SerializerError):
        s.chop(2)
    s.chop(1)
    with pytest.raises(SerializerError):
        s.remove_last_byte()


def test_erase_and_secure_erase():
    s = Serializer(b"abc")
    s.erase()
    assert len(s) == 0
    s.add_raw(b"secret")
    s.secure_erase()
    assert s.data == b""


def test_equality():
    assert Serializer(b"ab") == Serializer(b"ab")
    assert Serializer(b"ab") == b"ab"
    assert not (Serializer(b"ab") == Serializer(b"abc"))
    assert Serializer("ab") == b"ab"


def test_iterator_reads_in_order():
    s = Serializer()
    s.add8(9)
    s.add16(0x1234)
    s.add32(77)
    s.add64(1 << 40)
    s.add128(b"\x11" * 16)
    s.add160(b"\x22" * 20)
    s.add256(b"\x33" * 32)
    s.add_vl(b"payload")
    s.add_tagged_list([(3, b"x")])
    s.add_raw(b"end")
    it = SerializerIterator(s)
    assert it.get8() == 9
    assert it.get16() == 0x1234
    assert it.get32() == 77
    assert it.get64() == 1 << 40
    assert it.get128() == b"\x11" * 16
    assert it.get160() == b"\x22" * 20
    assert it.get256() == b"\x33" * 32
    assert it.get_vl() == b"payload"
    assert it.get_tagged_list() == [(3, b"x")]
    assert it.bytes_left() == 3
    assert it.get_raw(3) == b"end"
    assert it.bytes_left() == 0
    with pytest.raises(SerializerError):
        it.get8()
    it.reset()
    assert it.pos == 0
    assert it.get8() == 9


def test_iterator_failed_read_keeps_position():
    it = SerializerIterator(Serializer(b"\x01\x02"))
    it.get8()
    with pytest.raises(SerializerError):
        it.get32()
    assert it.pos == 1
    assert it.bytes_left() == 1