"""
Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- digest_parts streams every part into one context
- hash factory resolution by name
- hash_canonical stability for dict key ordering differences
- to_hex/from_hex round trip
"""
import hashlib

import pytest

from core.crypto.hashing import (
    digest_parts,
    from_hex,
    get_hash_factory,
    hash_canonical,
    sha256,
    to_hex,
)
from core.schemas.errors import ConfigurationException


class TestSha256:
    """Tests for sha256() function."""

    def test_sha256_known_value(self):
        """Test sha256 produces correct hash for known input."""
        assert sha256(b"hello").hex() == (
            "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        )

    def test_sha256_different_inputs_different_outputs(self):
        """Test different inputs produce different hashes."""
        assert sha256(b"input1") != sha256(b"input2")


class TestDigestParts:
    """Tests for digest_parts()."""

    def test_equals_hash_of_concatenation(self):
        """Every part contributes, in order, to a single digest."""
        assert digest_parts(b"a", b"b", b"c") == sha256(b"abc")

    def test_first_part_is_not_dropped(self):
        """Changing an early part changes the digest."""
        assert digest_parts(b"x", b"same") != digest_parts(b"y", b"same")

    def test_no_parts(self):
        assert digest_parts() == sha256(b"")

    def test_uses_injected_factory(self):
        """The hash constructor is a parameter, not a global lookup."""
        result = digest_parts(b"a", b"b", hash_factory=hashlib.blake2b)
        assert result == hashlib.blake2b(b"ab").digest()
        assert len(result) == 64


class TestGetHashFactory:
    """Tests for get_hash_factory()."""

    def test_default_is_sha256(self):
        factory = get_hash_factory()
        assert factory().digest() == hashlib.sha256().digest()

    @pytest.mark.parametrize("name", ["sha512", "SHA-512", "sha-384", "blake2b", "sha3_256", "SHA3-256"])
    def test_named_algorithms(self, name):
        factory = get_hash_factory(name)
        ctx = factory()
        ctx.update(b"data")
        assert len(ctx.digest()) > 0

    def test_hyphenated_names_match_hashlib(self):
        assert get_hash_factory("SHA-256") is hashlib.sha256
        assert get_hash_factory("sha-512")().digest() == hashlib.sha512().digest()
        assert get_hash_factory("sha3-256")().digest() == hashlib.sha3_256().digest()

    def test_factory_returns_fresh_contexts(self):
        factory = get_hash_factory("sha512")
        first = factory()
        first.update(b"one")
        second = factory()
        assert second.digest() == hashlib.sha512().digest()

    def test_unknown_algorithm_raises(self):
        with pytest.raises(ConfigurationException) as exc_info:
            get_hash_factory("not-a-hash")
        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_variable_length_algorithm_rejected(self):
        with pytest.raises(ConfigurationException):
            get_hash_factory("shake_256")


class TestHashCanonical:
    """Tests for hash_canonical() function."""

    def test_hash_canonical_stable_for_key_order(self):
        """Test that dict key order doesn't affect hash."""
        assert hash_canonical({"a": 1, "b": 2}) == hash_canonical({"b": 2, "a": 1})

    def test_hash_canonical_bytes_as_hex(self):
        """Bytes hash the same as their 0x-hex string."""
        assert hash_canonical({"id": b"\x01\x02"}) == hash_canonical({"id": "0x0102"})

    def test_hash_canonical_matches_digest_of_json(self):
        expected = sha256(b'{"a":1,"b":[1,2]}')
        assert hash_canonical({"b": [1, 2], "a": 1}) == expected


class TestHexConversion:
    """Tests for to_hex() and from_hex()."""

    def test_round_trip(self):
        data = bytes(range(32))
        assert from_hex(to_hex(data)) == data

    def test_to_hex_prefix(self):
        assert to_hex(b"\xde\xad") == "0xdead"
        assert to_hex(b"") == "0x"

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("dead")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_characters(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")
