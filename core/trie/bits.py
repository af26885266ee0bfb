"""
Bit-path utilities.

Trie keys are addressed bit by bit, most-significant bit first: bit 0 of
byte 0 is the branch taken at depth 0.
"""
from __future__ import annotations

from typing import Sequence


def to_bits(key: bytes) -> list[bool]:
    """
    Expand bytes into MSB-first bits.

    Example:
        >>> to_bits(b"\\xa0")
        [True, False, True, False, False, False, False, False]
    """
    return [bool(byte & (0x80 >> i)) for byte in key for i in range(8)]


def from_bits(bits: Sequence[bool]) -> bytes:
    """
    Pack MSB-first bits into bytes; a trailing partial byte is zero-padded.

    Inverse of to_bits: ``from_bits(to_bits(k)) == k``.
    """
    buf = bytearray((len(bits) + 7) // 8)
    for i, bit in enumerate(bits):
        if bit:
            buf[i // 8] |= 0x80 >> (i % 8)
    return bytes(buf)


def format_bits(bits: Sequence[bool]) -> str:
    return "".join("1" if b else "0" for b in bits)
