"""
Domain-separated trie node hashes.

Each node type gets its own leading tag byte so an interior, a leaf and
an empty node can never share a digest:

    interior = H(0x01 || left || right)
    empty    = H(0x02 || nonce || from_bits(prefix) || LE32(len(prefix)))
    leaf     = H(0x03 || nonce || from_bits(prefix) || key || value)

All fields go through a single streaming context (digest_parts).
"""
from __future__ import annotations

import hashlib
import struct

from core.crypto.hashing import HashFactory, digest_parts
from core.trie.bits import from_bits
from core.trie.nodes import EmptyNode, InteriorNode, LeafNode

TAG_INTERIOR = b"\x01"
TAG_EMPTY = b"\x02"
TAG_LEAF = b"\x03"


def hash_interior(node: InteriorNode, hash_factory: HashFactory = hashlib.sha256) -> bytes:
    return digest_parts(TAG_INTERIOR, node.left, node.right, hash_factory=hash_factory)


def hash_leaf(
    node: LeafNode,
    nonce: bytes,
    hash_factory: HashFactory = hashlib.sha256,
) -> bytes:
    return digest_parts(
        TAG_LEAF,
        nonce,
        from_bits(node.prefix),
        node.key,
        node.value,
        hash_factory=hash_factory,
    )


def hash_empty(
    node: EmptyNode,
    nonce: bytes,
    hash_factory: HashFactory = hashlib.sha256,
) -> bytes:
    return digest_parts(
        TAG_EMPTY,
        nonce,
        from_bits(node.prefix),
        struct.pack("<I", node.prefix_length),
        hash_factory=hash_factory,
    )
