"""
Schemas & Canonicalization
File: encoding.py

Purpose: Field types shared by the proof schemas.

HexBytes is plain ``bytes`` in Python and a 0x-prefixed hex string in
JSON, in both directions (request bodies, files, canonical dumps).
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer


def _coerce_hex(value: Any) -> Any:
    """Accept bytes as-is and decode hex strings (0x prefix optional)."""
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise ValueError(f"invalid hex string: {value[:18]!r}") from e
    if isinstance(value, bytearray):
        return bytes(value)
    return value


def _format_hex(value: bytes) -> str:
    return "0x" + value.hex()


HexBytes = Annotated[
    bytes,
    BeforeValidator(_coerce_hex),
    PlainSerializer(_format_hex, return_type=str, when_used="json"),
]


def short_hex(value: bytes | None, length: int = 8) -> str:
    """Abbreviated hex for log lines and human output."""
    if not value:
        return "0x"
    text = value.hex()
    if len(text) <= length * 2:
        return "0x" + text
    return "0x" + text[: length * 2] + "…"
