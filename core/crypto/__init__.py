"""
Core cryptographic utilities.

hashing provides the injectable hash factory and streaming digests;
signatures provides Ed25519 collective signatures over rosters.
"""
from .hashing import (
    DEFAULT_HASH_ALGORITHM,
    HashFactory,
    digest_parts,
    from_hex,
    get_hash_factory,
    hash_canonical,
    sha256,
    to_hex,
)
from .signatures import (
    CollectiveSignature,
    SignatureVerifier,
    make_signature_verifier,
    sign_collective,
    verify_collective,
)

__all__ = [
    "DEFAULT_HASH_ALGORITHM",
    "HashFactory",
    "digest_parts",
    "from_hex",
    "get_hash_factory",
    "hash_canonical",
    "sha256",
    "to_hex",
    "CollectiveSignature",
    "SignatureVerifier",
    "make_signature_verifier",
    "sign_collective",
    "verify_collective",
]
