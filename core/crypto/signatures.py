"""
Collective Signatures

A collective signature is a participation bitmask over a roster plus one
Ed25519 signature per participant, in roster order. It is valid when every
participant's signature verifies and enough of the roster took part.

Mask layout: roster member i is bit ``1 << (i % 8)`` of byte ``i // 8``.

Thresholds:
- bft:      n - (n - 1) // 3   (tolerates f faulty out of 3f + 1)
- majority: n // 2 + 1
- all:      n
"""
from __future__ import annotations

import logging
from typing import Callable, Sequence

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519
from pydantic import BaseModel, ConfigDict, Field

from core.schemas.encoding import HexBytes
from core.schemas.errors import ConfigurationException


logger = logging.getLogger(__name__)

PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64


def bft_threshold(n: int) -> int:
    return n - (n - 1) // 3 if n > 0 else 0


def majority_threshold(n: int) -> int:
    return n // 2 + 1 if n > 0 else 0


def all_threshold(n: int) -> int:
    return n


ThresholdPolicy = Callable[[int], int]

THRESHOLD_POLICIES: dict[str, ThresholdPolicy] = {
    "bft": bft_threshold,
    "majority": majority_threshold,
    "all": all_threshold,
}


def get_threshold_policy(name: str) -> ThresholdPolicy:
    """Look up a threshold policy by name."""
    try:
        return THRESHOLD_POLICIES[name.lower()]
    except KeyError as e:
        raise ConfigurationException(
            f"Unknown threshold policy: {name}",
            details={"policy": name, "known": sorted(THRESHOLD_POLICIES)},
        ) from e


# =============================================================================
# Masks
# =============================================================================

def mask_indices(mask: bytes) -> list[int]:
    """Return the roster indices whose bit is set, ascending."""
    return [
        byte_index * 8 + bit
        for byte_index, byte in enumerate(mask)
        for bit in range(8)
        if byte & (1 << bit)
    ]


def build_mask(indices: Sequence[int], roster_size: int) -> bytes:
    """Build a participation mask for the given roster indices."""
    mask = bytearray((roster_size + 7) // 8)
    for i in indices:
        if not 0 <= i < roster_size:
            raise ValueError(f"Index {i} out of range for roster of {roster_size}")
        mask[i // 8] |= 1 << (i % 8)
    return bytes(mask)


class CollectiveSignature(BaseModel):
    """Participation mask and per-participant Ed25519 signatures."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mask: HexBytes = Field(..., description="Bitmask of participating roster members")
    signatures: list[HexBytes] = Field(
        default_factory=list,
        description="One signature per participant, in roster order",
    )

    @property
    def participants(self) -> list[int]:
        return mask_indices(self.mask)


# =============================================================================
# Ed25519
# =============================================================================

def sign(message: bytes, private_key: ed25519.Ed25519PrivateKey) -> bytes:
    """Sign a message with a single Ed25519 key."""
    return private_key.sign(message)


def verify(message: bytes, signature: bytes, public_key: bytes) -> bool:
    """
    Verify a single Ed25519 signature.

    Returns False (never raises) for malformed keys or signatures.
    """
    if len(public_key) != PUBLIC_KEY_SIZE or len(signature) != SIGNATURE_SIZE:
        return False
    try:
        key = ed25519.Ed25519PublicKey.from_public_bytes(public_key)
        key.verify(signature, message)
    except (InvalidSignature, ValueError):
        return False
    return True


def sign_collective(
    message: bytes,
    private_keys: Sequence[ed25519.Ed25519PrivateKey | None],
) -> CollectiveSignature:
    """
    Produce a collective signature.

    ``private_keys`` is aligned with the roster; ``None`` marks a member
    that does not take part.
    """
    indices = [i for i, key in enumerate(private_keys) if key is not None]
    return CollectiveSignature(
        mask=build_mask(indices, len(private_keys)),
        signatures=[sign(message, private_keys[i]) for i in indices],
    )


def verify_collective(
    message: bytes,
    signature: CollectiveSignature,
    public_keys: Sequence[bytes],
    threshold: ThresholdPolicy = bft_threshold,
) -> bool:
    """
    Verify a collective signature against a roster's public keys.

    Args:
        message: The signed message
        signature: Mask plus per-participant signatures
        public_keys: Roster public keys, in roster order
        threshold: Minimum participants required for a roster of size n

    Returns:
        True if the signature is valid, False otherwise
    """
    n = len(public_keys)
    if n == 0:
        logger.debug("Refusing collective signature over an empty roster")
        return False

    participants = signature.participants
    if participants and participants[-1] >= n:
        logger.debug(f"Mask references member {participants[-1]} of a roster of {n}")
        return False
    if len(participants) != len(signature.signatures):
        logger.debug(
            f"Mask has {len(participants)} participants "
            f"but {len(signature.signatures)} signatures"
        )
        return False

    required = threshold(n)
    if len(participants) < required:
        logger.debug(f"Only {len(participants)} of {n} signed, {required} required")
        return False

    for index, sig in zip(participants, signature.signatures):
        if not verify(message, sig, public_keys[index]):
            logger.debug(f"Invalid signature from roster member {index}")
            return False
    return True


# Signature primitive used by the chain verifier:
#   verify_signature(message, signature, public_keys) -> bool
SignatureVerifier = Callable[[bytes, CollectiveSignature, Sequence[bytes]], bool]


def make_signature_verifier(policy: str = "bft") -> SignatureVerifier:
    """Bind a named threshold policy into a SignatureVerifier."""
    threshold = get_threshold_policy(policy)

    def _verify(message: bytes, signature: CollectiveSignature, public_keys: Sequence[bytes]) -> bool:
        return verify_collective(message, signature, public_keys, threshold=threshold)

    return _verify


__all__ = [
    "PUBLIC_KEY_SIZE",
    "SIGNATURE_SIZE",
    "THRESHOLD_POLICIES",
    "ThresholdPolicy",
    "bft_threshold",
    "majority_threshold",
    "all_threshold",
    "get_threshold_policy",
    "mask_indices",
    "build_mask",
    "CollectiveSignature",
    "sign",
    "verify",
    "sign_collective",
    "verify_collective",
    "SignatureVerifier",
    "make_signature_verifier",
]
