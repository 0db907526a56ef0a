import pytest

from errors import InvalidEncoding, InvalidParameters, LoaderKitError, UnsupportedAlgorithm
from utils.hash_utils import (
    BASE_ENCODE_TABLES,
    digest_bytes,
    encode_buffer_to_base,
    get_hash_digest,
    resolve_alphabet,
)


@pytest.mark.parametrize(
    "buffer, algorithm, encoding, length, expected",
    [
        ("test string", "md5", "hex", None, "6f8db599de986fab7a21625b7916589c"),
        ("test string", "md5", "hex", 4, "6f8d"),
        ("test string", "md5", "base64", None, "b421md6Yb6t6IWJbeRZYnA"),
        ("test string", "md5", "base26", None, "ycgokqtrogqgtzjlxiuhzmnbuau"),
        ("test string", "md5", "base26", 6, "ycgokq"),
        ("test string", "md5", "base32", None, "4gjqutmrnseyprn9c3cewjdq5w"),
        ("test string", "md5", "base36", None, "6lr3fn14kh2z8s1crkmgkbfrw"),
        ("test string", "md5", "base49", None, "jKpCwAXpnKoCEveajQXkxph"),
        ("test string", "md5", "base52", None, "cGyccmfrDAfovEgOJMEdyAu"),
        ("test string", "md5", "base58", None, "eLXsUYDK3xYCN99bhUbmkN"),
        ("test string", "md5", "base62", None, "3ouUoK6RTk8xMwwLPjVExS"),
        ("test string", "md5", "base64safe", None, "1LzrmpTFxLGTExoBJV5Bys"),
        (
            "test string",
            "sha512",
            "base64",
            None,
            "EObWR69EYkRC84jCwUp4f_ixfmFluD12fsBHdo2MvLcaGjIm58x4Frx5wEJ9lKnaaIxBo5kse_Xk18w-C-XbrA",
        ),
        ("test string", "sha1", "hex", None, "661295c9cbf9d6b2f6428414504a8deed3020641"),
        ("test_string", "md5", "hex", None, "3474851a3410906697ec77337df7aae4"),
        (b"test content", "sha256", "base64", 10, "auinVVUgn9"),
    ],
)
def test_get_hash_digest_vectors(buffer, algorithm, encoding, length, expected):
    """Known digests for every named encoding."""
    assert get_hash_digest(buffer, algorithm, encoding, length) == expected


def test_default_arguments_are_md5_hex():
    """No algorithm or encoding means md5 rendered as hex."""
    assert get_hash_digest(b"") == "d41d8cd98f00b204e9800998ecf8427e"


def test_custom_alphabet():
    """Any string of distinct characters works as an alphabet."""
    digest = get_hash_digest("test string", "md5", "xyz")
    assert digest == "yxxxxxzxzzzxzyyxxyzzxyxxzyzxzzyxzzzyxzzxzxxxxxyzxxyzyxyxyzxyxxyyzyzzyyzzzyxxxyxyz"
    assert set(digest) <= set("xyz")


def test_algorithm_name_is_case_insensitive():
    """SHA1 and sha1 hash the same way."""
    assert get_hash_digest("test content", "SHA1") == "1eebdf4fdc9fc7bf283031b93f9aef3338de9052"


def test_truncation_is_prefix_and_never_padded():
    """Truncated output is a prefix; lengths beyond the digest return it whole."""
    full = get_hash_digest("test content", "md5", "base62")
    assert get_hash_digest("test content", "md5", "base62", 5) == full[:5]
    assert get_hash_digest("test content", "md5", "hex", 1000) == "9473fdd0d880a43c21b7778d34872157"


def test_str_and_bytes_hash_the_same():
    """Strings are hashed as their UTF-8 bytes."""
    assert get_hash_digest("ünïcode") == get_hash_digest("ünïcode".encode("utf-8"))


@pytest.mark.parametrize("algorithm", ["nope", "shake_128", "shake_256"])
def test_unsupported_algorithm(algorithm):
    """Unknown and variable-length algorithms are rejected."""
    with pytest.raises(UnsupportedAlgorithm):
        get_hash_digest("x", algorithm)


@pytest.mark.parametrize("encoding", ["base10", "base99", "a", "aba"])
def test_invalid_encoding(encoding):
    """Unknown base names and unusable alphabets are rejected."""
    with pytest.raises(InvalidEncoding):
        get_hash_digest("x", "md5", encoding)


@pytest.mark.parametrize("length", [0, -3, 2.5, True, "8"])
def test_invalid_length(length):
    """Length has to be a positive integer."""
    with pytest.raises(InvalidParameters):
        get_hash_digest("x", "md5", "hex", length)


def test_errors_are_value_errors():
    """Callers can catch the whole taxonomy as ValueError."""
    with pytest.raises(ValueError):
        get_hash_digest("x", "nope")
    assert issubclass(UnsupportedAlgorithm, LoaderKitError)


def test_encode_buffer_to_base_is_big_endian():
    """The first byte is the most significant one."""
    assert encode_buffer_to_base(b"\x01\x00", "0123456789") == "256"
    assert encode_buffer_to_base(b"\x00\x01", "0123456789") == "1"
    assert encode_buffer_to_base(b"\xff", "01") == "11111111"


def test_encode_zero_is_first_character():
    """An all-zero buffer encodes as the alphabet's zero digit."""
    assert encode_buffer_to_base(b"\x00\x00\x00", "abc") == "a"
    assert encode_buffer_to_base(b"", "abc") == "a"


def test_resolve_alphabet_tables():
    """Named encodings map to the built-in tables."""
    assert resolve_alphabet("base62") == BASE_ENCODE_TABLES[62]
    assert resolve_alphabet("base64safe") == BASE_ENCODE_TABLES[64]
    assert resolve_alphabet("01") == "01"
    for base, table in BASE_ENCODE_TABLES.items():
        assert len(table) == base
        assert len(set(table)) == base


def test_digest_bytes_length():
    """Raw digests have the algorithm's size."""
    assert len(digest_bytes(b"abc", "md5")) == 16
    assert len(digest_bytes(b"abc", "sha512")) == 64
