from __future__ import annotations

import base64
import hashlib
import re

from errors import InvalidEncoding, InvalidParameters, UnsupportedAlgorithm

# Lookalike characters are dropped from base32 (0, l, i, o), base49 (l, I, O) and base58 (0, l, I, O).
BASE_ENCODE_TABLES: dict[int, str] = {
    26: "abcdefghijklmnopqrstuvwxyz",
    32: "123456789abcdefghjkmnpqrstuvwxyz",
    36: "0123456789abcdefghijklmnopqrstuvwxyz",
    49: "abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ",
    52: "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ",
    58: "123456789abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ",
    62: "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ",
    64: "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ-_",
}

# "base64" itself is RFC 4648 base64 made filename-safe, see get_hash_digest.
NAMED_ALPHABETS: dict[str, str] = {f"base{base}": table for base, table in BASE_ENCODE_TABLES.items() if base != 64}
NAMED_ALPHABETS["base64safe"] = BASE_ENCODE_TABLES[64]

_BASE_NAME = re.compile(r"base\d+")


def _as_bytes(buffer: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(buffer, str):
        return buffer.encode("utf-8")
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        return bytes(buffer)
    raise InvalidParameters(f"Cannot hash value of type {type(buffer).__name__}")


def digest_bytes(buffer: bytes | str, algorithm: str = "md5") -> bytes:
    """Hash ``buffer`` with the named ``hashlib`` algorithm and return the raw digest.

    Args:
        buffer: Content to hash; strings are UTF-8 encoded
        algorithm: Any fixed-length algorithm name accepted by ``hashlib.new``

    Returns:
        Raw digest bytes

    Raises:
        UnsupportedAlgorithm: If hashlib does not know the algorithm, or it is
            a variable-length XOF (shake_128/shake_256)
    """
    name = (algorithm or "md5").strip().lower()
    if name.startswith("shake_"):
        raise UnsupportedAlgorithm(f"Digest algorithm '{algorithm}' has no fixed length")
    try:
        # Digests name files; they are not used for security decisions
        h = hashlib.new(name, usedforsecurity=False)
    except ValueError as exc:
        raise UnsupportedAlgorithm(f"Unsupported digest algorithm '{algorithm}'") from exc
    h.update(_as_bytes(buffer))
    return h.digest()


def resolve_alphabet(encoding: str) -> str:
    """Return the alphabet for an arbitrary-base encoding name or literal alphabet.

    Raises:
        InvalidEncoding: For ``base<N>`` names without a table and for literal
            alphabets that are too short or repeat a character
    """
    if encoding in NAMED_ALPHABETS:
        return NAMED_ALPHABETS[encoding]
    if _BASE_NAME.fullmatch(encoding):
        raise InvalidEncoding(f"Unknown encoding base '{encoding}'")
    if len(encoding) < 2:
        raise InvalidEncoding(f"Alphabet '{encoding}' needs at least 2 characters")
    if len(set(encoding)) != len(encoding):
        raise InvalidEncoding(f"Alphabet '{encoding}' repeats characters")
    return encoding


def encode_buffer_to_base(data: bytes, alphabet: str) -> str:
    """Encode ``data`` as one big-endian unsigned integer written in ``alphabet``.

    Digits are produced least-significant first by repeated division and then
    reversed, so leading zero bytes do not produce leading zero digits.

    Example:
        >>> encode_buffer_to_base(b"\\x01\\x00", "0123456789")
        '256'
    """
    base = len(alphabet)
    number = int.from_bytes(data, "big")
    if number == 0:
        return alphabet[0]
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, base)
        digits.append(alphabet[remainder])
    digits.reverse()
    return "".join(digits)


def get_hash_digest(
    buffer: bytes | str,
    algorithm: str = "md5",
    encoding: str = "hex",
    length: int | None = None,
) -> str:
    """Hash ``buffer`` and render the digest as a short ASCII string.

    Args:
        buffer: Content to hash; strings are UTF-8 encoded
        algorithm: hashlib algorithm name (default md5)
        encoding: ``hex``, ``base64`` (URL/filename-safe, unpadded), one of
            ``base26``/``base32``/``base36``/``base49``/``base52``/``base58``/
            ``base62``/``base64safe``, or a literal alphabet of distinct characters
        length: Optional number of leading characters to keep

    Returns:
        Encoded digest, truncated to ``length`` characters when given

    Raises:
        UnsupportedAlgorithm: Unknown or variable-length algorithm
        InvalidEncoding: Unknown ``base<N>`` name or unusable alphabet
        InvalidParameters: ``length`` is not a positive integer

    Examples:
        >>> get_hash_digest("test string")
        '6f8db599de986fab7a21625b7916589c'
        >>> get_hash_digest("test string", "md5", "hex", 4)
        '6f8d'
    """
    if length is not None and (isinstance(length, bool) or not isinstance(length, int) or length < 1):
        raise InvalidParameters(f"Digest length must be a positive integer, got {length!r}")

    digest = digest_bytes(buffer, algorithm)
    encoding = encoding or "hex"
    if encoding == "hex":
        encoded = digest.hex()
    elif encoding == "base64":
        encoded = base64.b64encode(digest).decode("ascii")
        encoded = encoded.replace("+", "-").replace("/", "_").rstrip("=")
    else:
        encoded = encode_buffer_to_base(digest, resolve_alphabet(encoding))

    return encoded if length is None else encoded[:length]


__all__ = [
    "BASE_ENCODE_TABLES",
    "NAMED_ALPHABETS",
    "digest_bytes",
    "encode_buffer_to_base",
    "get_hash_digest",
    "resolve_alphabet",
]
