"""
Hashing Utilities
Basic hashing primitives shared by the trie and skipchain verifiers.

This module provides:
- An injectable hash constructor (HashFactory) instead of a global provider
- digest_parts: one streaming context, update per field, a single digest
- Canonical hashing for schema objects (via dumps_canonical)
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Fields are fed to ONE hash context and finalized once. Finalizing per
  field would drop every field but the last.
- All operations are deterministic for a given hash factory
"""
from __future__ import annotations

import hashlib
from typing import Any, Callable, Protocol

from core.schemas.canonical import dumps_canonical_bytes
from core.schemas.errors import ConfigurationException


class HashContext(Protocol):
    """The subset of hashlib's hash object API the verifiers rely on."""

    def update(self, data: bytes, /) -> None: ...

    def digest(self) -> bytes: ...


HashFactory = Callable[[], HashContext]

DEFAULT_HASH_ALGORITHM = "sha256"


def _normalize_algorithm(name: str) -> str:
    # "SHA-256" -> "sha256", "sha3-256" -> "sha3_256"; anything else goes to hashlib as is
    lowered = name.lower()
    for candidate in (lowered.replace("-", ""), lowered.replace("-", "_")):
        if candidate in hashlib.algorithms_guaranteed:
            return candidate
    return lowered


def get_hash_factory(name: str = DEFAULT_HASH_ALGORITHM) -> HashFactory:
    """
    Resolve a hashlib algorithm name to a zero-argument constructor.

    Args:
        name: Any name accepted by hashlib.new (e.g. "sha256", "blake2b")

    Returns:
        Callable returning a fresh hash context

    Raises:
        ConfigurationException: If the algorithm is unknown or has a
            variable-length digest (shake_*)
    """
    normalized = _normalize_algorithm(name)
    try:
        sample = hashlib.new(normalized)
    except ValueError as e:
        raise ConfigurationException(
            f"Unknown hash algorithm: {name}",
            details={"algorithm": name},
        ) from e
    if sample.digest_size == 0 or normalized.startswith("shake"):
        raise ConfigurationException(
            f"Hash algorithm must have a fixed digest size: {name}",
            details={"algorithm": name},
        )
    if normalized == DEFAULT_HASH_ALGORITHM:
        return hashlib.sha256
    return lambda: hashlib.new(normalized)


def digest_parts(*parts: bytes, hash_factory: HashFactory = hashlib.sha256) -> bytes:
    """
    Hash the concatenation of several byte strings.

    Each part is fed with update() to a single context, then the context is
    finalized once.

    Example:
        >>> digest_parts(b"a", b"b") == sha256(b"ab")
        True
    """
    ctx = hash_factory()
    for part in parts:
        ctx.update(part)
    return ctx.digest()


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_canonical(obj: Any, hash_factory: HashFactory = hashlib.sha256) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: digest = H(dumps_canonical(obj).encode("utf-8"))

    Raises:
        CanonicalizationException: If object cannot be canonically serialized
    """
    return digest_parts(dumps_canonical_bytes(obj), hash_factory=hash_factory)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DEFAULT_HASH_ALGORITHM",
    "HashContext",
    "HashFactory",
    "get_hash_factory",
    "digest_parts",
    "sha256",
    "hash_canonical",
    "to_hex",
    "from_hex",
]
