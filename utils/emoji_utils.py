"""Deterministic emoji names for content.

Every symbol in the table is a multi-codepoint sequence (regional-indicator
flags, keycaps, and zero-width-joiner sequences). Symbols are picked from the
table by reading 16-bit groups out of a SHA-256 digest of the content, so the
same content always produces the same symbols on every platform and run.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator

from errors import InvalidParameters

_REGIONAL_INDICATOR_A = 0x1F1E6
_KEYCAP = "\uFE0F\u20E3"
_ZWJ = "\u200D"

_FLAG_CODES = (
    "AR", "AT", "AU", "BE", "BR", "CA", "CH", "CL", "CN", "CO", "CZ", "DE",
    "DK", "EE", "EG", "ES", "FI", "FR", "GB", "GH", "GR", "HR", "HU", "ID",
    "IE", "IL", "IN", "IS", "IT", "JM", "JP", "KE", "KR", "LT", "LU", "LV",
    "MA", "MX", "MY", "NG", "NL", "NO", "NZ", "PE", "PH", "PK", "PL", "PT",
    "RO", "RS", "SE", "SG", "SI", "SK", "TH", "TR", "TW", "UA", "US", "UY",
    "VN", "ZA",
)

_KEYCAP_BASES = "0123456789#*"

_ZWJ_SEQUENCES = (
    "\U0001F3F3\uFE0F" + _ZWJ + "\U0001F308",  # rainbow flag
    "\U0001F3F4" + _ZWJ + "\u2620\uFE0F",  # pirate flag
    "\U0001F469" + _ZWJ + "\U0001F4BB",  # woman technologist
    "\U0001F468" + _ZWJ + "\U0001F373",  # man cook
    "\U0001F469" + _ZWJ + "\U0001F680",  # woman astronaut
    "\U0001F468" + _ZWJ + "\U0001F3A8",  # man artist
    "\U0001F9D1" + _ZWJ + "\U0001F52C",  # scientist
    "\U0001F9D1" + _ZWJ + "\U0001F33E",  # farmer
    "\U0001F43B" + _ZWJ + "\u2744\uFE0F",  # polar bear
    "\U0001F415" + _ZWJ + "\U0001F9BA",  # service dog
    "\U0001F408" + _ZWJ + "\u2B1B",  # black cat
    "\u2764\uFE0F" + _ZWJ + "\U0001F525",  # heart on fire
)


def _flag(code: str) -> str:
    return "".join(chr(_REGIONAL_INDICATOR_A + ord(letter) - ord("A")) for letter in code)


EMOJI_TABLE: tuple[str, ...] = (
    tuple(_flag(code) for code in _FLAG_CODES)
    + tuple(base + _KEYCAP for base in _KEYCAP_BASES)
    + _ZWJ_SEQUENCES
)


def _bit_groups(data: bytes) -> Iterator[int]:
    """Yield 16-bit big-endian groups from SHA-256(data), re-hashing the digest when exhausted."""
    digest = hashlib.sha256(data).digest()
    while True:
        for offset in range(0, len(digest), 2):
            yield int.from_bytes(digest[offset : offset + 2], "big")
        digest = hashlib.sha256(digest).digest()


def emoji_symbols(content: bytes | str, count: int = 1) -> list[str]:
    """Pick ``count`` distinct symbols from EMOJI_TABLE for ``content``.

    Args:
        content: Content to derive symbols from; strings are UTF-8 encoded
        count: Number of symbols, between 1 and len(EMOJI_TABLE)

    Returns:
        List of symbols in selection order

    Raises:
        InvalidParameters: If count is out of range
    """
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= len(EMOJI_TABLE):
        raise InvalidParameters(f"Emoji count must be between 1 and {len(EMOJI_TABLE)}, got {count!r}")

    data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    pool = list(EMOJI_TABLE)
    picked: list[str] = []
    for group in _bit_groups(data):
        # Without replacement so one name never repeats a symbol
        picked.append(pool.pop(group % len(pool)))
        if len(picked) == count:
            break
    return picked


def encode_emoji(content: bytes | str, count: int = 1) -> str:
    """Return ``count`` symbols for ``content`` concatenated into one string."""
    return "".join(emoji_symbols(content, count))


__all__ = ["EMOJI_TABLE", "emoji_symbols", "encode_emoji"]
