import pytest

from newcoinkit.rfc1751 import (
    MalformedInputError,
    ParityError,
    Rfc1751Error,
    UnknownWordError,
    english_to_key,
    key_to_english,
)

RFC_KEY = bytes.fromhex("CCAC2AED591056BE4F90FD441C534766")
RFC_PHRASE = "RASH BUSH MILK LOOK BAD BRIM AVID GAFF BAIT ROT POD LOVE"

RFC_KEY_2 = bytes.fromhex("EFF81F9BFBC65350920CDD7416DE8009")
RFC_PHRASE_2 = "TROD MUTE TAIL WARM CHAR KONG HAAG CITY BORE O TEAL AWL"

ZERO_PHRASE = " ".join(["A"] * 12)


def _replace_word(index, word):
    words = ZERO_PHRASE.split()
    words[index] = word
    return " ".join(words)


def test_key_to_english_worked_example():
    assert key_to_english(RFC_KEY) == RFC_PHRASE


def test_english_to_key_worked_example():
    assert english_to_key(RFC_PHRASE) == RFC_KEY


def test_second_worked_example_both_ways():
    assert key_to_english(RFC_KEY_2) == RFC_PHRASE_2
    assert english_to_key(RFC_PHRASE_2) == RFC_KEY_2


def test_zero_key_is_first_dictionary_word():
    assert key_to_english(bytes(16)) == ZERO_PHRASE
    assert english_to_key(ZERO_PHRASE) == bytes(16)


@pytest.mark.parametrize(
    "key",
    [
        bytes(range(16)),
        bytes(range(100, 116)),
        b"\xff" * 16,
        bytes.fromhex("0123456789abcdeffedcba9876543210"),
    ],
)
def test_round_trip(key):
    phrase = key_to_english(key)
    assert len(phrase.split()) == 12
    assert english_to_key(phrase) == key


def test_extra_key_bytes_are_ignored():
    assert key_to_english(RFC_KEY + b"\x01\x02") == key_to_english(RFC_KEY)


def test_short_key_rejected():
    with pytest.raises(MalformedInputError):
        key_to_english(bytes(15))


def test_whitespace_is_compressed_and_trimmed():
    spaced = "  " + RFC_PHRASE.replace(" ", " \t ") + "\n"
    assert english_to_key(spaced) == RFC_KEY


@pytest.mark.parametrize("count", [0, 11, 13])
def test_wrong_word_count(count):
    with pytest.raises(MalformedInputError):
        english_to_key(" ".join(["A"] * count))


def test_word_too_long():
    with pytest.raises(MalformedInputError):
        english_to_key(_replace_word(3, "ABCDE"))


def test_unknown_word():
    with pytest.raises(UnknownWordError):
        english_to_key(_replace_word(7, "QQQ"))


def test_lowercase_words_are_not_recognised():
    with pytest.raises(UnknownWordError):
        english_to_key(RFC_PHRASE.lower())


def test_parity_error():
    with pytest.raises(ParityError):
        english_to_key(_replace_word(5, "ABE"))


def test_first_half_error_reported_before_second():
    words = ZERO_PHRASE.split()
    words[0] = "QQQ"
    words[8] = "TOOLONG"
    with pytest.raises(UnknownWordError):
        english_to_key(" ".join(words))


def test_word_at_gap_between_ranges_is_not_decodable():
    key = bytes([0x47, 0x40]) + bytes(14)
    phrase = key_to_english(key)
    assert phrase.split()[0] == "YOU"
    with pytest.raises(UnknownWordError):
        english_to_key(phrase)


def test_short_word_not_found_in_long_range():
    with pytest.raises(UnknownWordError):
        english_to_key(_replace_word(2, "ABED"[:3] + "X"))


@pytest.mark.parametrize(
    "phrase, expected",
    [
        (" ".join(["A"] * 11), MalformedInputError),
        (_replace_word(7, "QQQ"), UnknownWordError),
        (_replace_word(5, "ABE"), ParityError),
    ],
)
def test_errors_share_base_class(phrase, expected):
    with pytest.raises(Rfc1751Error) as excinfo:
        english_to_key(phrase)
    assert isinstance(excinfo.value, expected)
    assert isinstance(excinfo.value, ValueError)