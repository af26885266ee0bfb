"""
Trie Proof Verifier
Inclusion / absence verification for a key against a trie root.

Algorithm:
1. bits = to_bits(key)
2. expected = hash_interior(interiors[0]) (checked against root_hash if given)
3. For each depth i: hash_interior(interiors[i]) must equal expected;
   then expected = left if bits[i] else right
4. expected must equal the terminal's hash:
   - leaf:  prefix must be bits[:depth]; PRESENT iff leaf.key == key
   - empty: prefix must be bits[:depth]; ABSENT
   - anything else proves nothing and is reported ABSENT

A leaf holding a different key at the end of our path proves absence:
paths in the trie are unique, so our key cannot be stored anywhere else.

The leaf hash runs key and value together, so a leaf (K, V) hashes the same
as (K || V[:j], V[j:]). Ledgers with fixed-size keys pass ``key_length`` to
rule out such a split; without it a key is only trusted as far as its
producer is.
"""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum

from core.crypto.hashing import HashFactory, to_hex
from core.schemas.errors import (
    InvalidInputException,
    MalformedProofException,
    RootMismatchException,
)
from core.trie.bits import to_bits
from core.trie.hashing import hash_empty, hash_interior, hash_leaf
from core.trie.nodes import LeafNode, TrieInclusionProof


logger = logging.getLogger(__name__)


class Existence(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class TriePathResult:
    """
    Outcome of walking a proof for one key.

    ``authenticated`` is False when the path or terminal hash did not
    match; the ABSENT answer then means "nothing proven", not a verified
    absence.
    """
    existence: Existence
    authenticated: bool
    depth: int
    reason: str

    @property
    def present(self) -> bool:
        return self.existence is Existence.PRESENT


def proof_root(proof: TrieInclusionProof, hash_factory: HashFactory = hashlib.sha256) -> bytes:
    """
    Root hash the proof commits to.

    Raises:
        MalformedProofException: If the proof has no interior nodes
    """
    if not proof.interiors:
        raise MalformedProofException("no interior nodes")
    return hash_interior(proof.interiors[0], hash_factory)


def inspect_path(
    proof: TrieInclusionProof,
    key: bytes | None,
    root_hash: bytes | None = None,
    *,
    hash_factory: HashFactory = hashlib.sha256,
    key_length: int | None = None,
) -> TriePathResult:
    """
    Walk the proof for ``key`` and explain the result.

    Raises:
        InvalidInputException: If key is None or empty, or not key_length bytes long
        MalformedProofException: On an empty interior list, a proof deeper
            than the key, a terminal prefix that disagrees with the key,
            or a leaf key that is not key_length bytes long
        RootMismatchException: If root_hash is given and differs
    """
    if not key:
        raise InvalidInputException("key is nil")
    if key_length is not None and len(key) != key_length:
        raise InvalidInputException(
            f"key has {len(key)} bytes, expected {key_length}",
            details={"key_length": len(key), "expected": key_length},
        )

    expected = proof_root(proof, hash_factory)
    if root_hash is not None and expected != root_hash:
        raise RootMismatchException(
            "proof root does not match the expected root",
            expected=to_hex(root_hash),
            actual=to_hex(expected),
        )

    bits = to_bits(key)
    depth = proof.depth
    if depth > len(bits):
        raise MalformedProofException(
            f"proof is {depth} levels deep but the key only has {len(bits)} bits",
            depth=depth,
        )

    for i, interior in enumerate(proof.interiors):
        if hash_interior(interior, hash_factory) != expected:
            logger.debug(f"Interior hash mismatch at depth {i}")
            return TriePathResult(
                Existence.ABSENT, False, i, f"interior node at depth {i} is not linked to its parent"
            )
        expected = interior.left if bits[i] else interior.right

    path = bits[:depth]
    terminal = proof.terminal

    if isinstance(terminal, LeafNode):
        if expected != hash_leaf(terminal, proof.nonce, hash_factory):
            return TriePathResult(Existence.ABSENT, False, depth, "leaf node hash does not match its parent")
        if terminal.prefix != path:
            raise MalformedProofException("invalid prefix in leaf node", depth=depth)
        if key_length is not None and len(terminal.key) != key_length:
            raise MalformedProofException(
                f"leaf key has {len(terminal.key)} bytes, expected {key_length}",
                depth=depth,
            )
        if terminal.key != key:
            return TriePathResult(Existence.ABSENT, True, depth, "path ends at a leaf holding another key")
        return TriePathResult(Existence.PRESENT, True, depth, "key is stored in the leaf")

    if expected != hash_empty(terminal, proof.nonce, hash_factory):
        return TriePathResult(Existence.ABSENT, False, depth, "empty node hash does not match its parent")
    if terminal.prefix != path:
        raise MalformedProofException("invalid prefix in empty node", depth=depth)
    return TriePathResult(Existence.ABSENT, True, depth, "path ends at an empty node")


def exists(
    proof: TrieInclusionProof,
    key: bytes | None,
    root_hash: bytes | None = None,
    *,
    hash_factory: HashFactory = hashlib.sha256,
    key_length: int | None = None,
) -> Existence:
    """
    Decide whether ``key`` is included in the trie the proof commits to.

    Args:
        proof: The inclusion proof
        key: Key to look up (must be non-empty)
        root_hash: Trusted root; when omitted, the caller is responsible
            for comparing proof_root(proof) against an authenticated root
        key_length: Fixed key size of the ledger, if it has one

    Returns:
        Existence.PRESENT or Existence.ABSENT
    """
    return inspect_path(
        proof, key, root_hash, hash_factory=hash_factory, key_length=key_length
    ).existence


class TrieVerifier:
    """
    Trie verification bound to one hash factory.

    Example:
        >>> verifier = TrieVerifier()
        >>> verifier.exists(proof, b"key", root)
        <Existence.PRESENT: 'present'>
    """

    def __init__(
        self,
        hash_factory: HashFactory = hashlib.sha256,
        key_length: int | None = None,
    ) -> None:
        self.hash_factory = hash_factory
        self.key_length = key_length

    def root(self, proof: TrieInclusionProof) -> bytes:
        return proof_root(proof, self.hash_factory)

    def exists(
        self,
        proof: TrieInclusionProof,
        key: bytes | None,
        root_hash: bytes | None = None,
    ) -> Existence:
        return exists(
            proof, key, root_hash, hash_factory=self.hash_factory, key_length=self.key_length
        )

    def inspect(
        self,
        proof: TrieInclusionProof,
        key: bytes | None,
        root_hash: bytes | None = None,
    ) -> TriePathResult:
        return inspect_path(
            proof, key, root_hash, hash_factory=self.hash_factory, key_length=self.key_length
        )


__all__ = [
    "Existence",
    "TriePathResult",
    "TrieVerifier",
    "exists",
    "inspect_path",
    "proof_root",
]
