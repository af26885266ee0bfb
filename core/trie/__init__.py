"""
Authenticated trie proofs.

Binary trie keyed by the MSB-first bits of the key. Every interior node
stores the hashes of its two children, so one root hash authenticates the
whole key/value set.

Usage:
    from core.trie import TrieInclusionProof, exists, Existence

    if exists(proof, key, root_hash) is Existence.PRESENT:
        ...
"""
from .bits import from_bits, to_bits
from .hashing import TAG_EMPTY, TAG_INTERIOR, TAG_LEAF, hash_empty, hash_interior, hash_leaf
from .nodes import EmptyNode, InteriorNode, LeafNode, TerminalNode, TrieInclusionProof
from .verifier import Existence, TriePathResult, TrieVerifier, exists, inspect_path, proof_root

__all__ = [
    # Bits
    "to_bits",
    "from_bits",
    # Hashing
    "TAG_INTERIOR",
    "TAG_EMPTY",
    "TAG_LEAF",
    "hash_interior",
    "hash_leaf",
    "hash_empty",
    # Nodes
    "InteriorNode",
    "LeafNode",
    "EmptyNode",
    "TerminalNode",
    "TrieInclusionProof",
    # Verification
    "Existence",
    "TriePathResult",
    "TrieVerifier",
    "exists",
    "inspect_path",
    "proof_root",
]
