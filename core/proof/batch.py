"""
Batch verification of independent proofs.

Each item only reads its own proof, anchor and key, so items can be
checked on a thread pool without locking. Results are returned in input
order.
"""
from __future__ import annotations

import concurrent.futures
import hashlib
import logging
from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import HashFactory
from core.crypto.signatures import SignatureVerifier, verify_collective
from core.proof.checks import run_proof_checks
from core.proof.proof import Proof
from core.schemas.verification import VerificationResult
from core.skipchain.models import TrustAnchor


logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class BatchItem:
    proof: Proof
    anchor: TrustAnchor
    key: bytes | None = None


def verify_batch(
    items: Sequence[BatchItem],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    hash_factory: HashFactory = hashlib.sha256,
    verify_signature: SignatureVerifier = verify_collective,
    key_length: int | None = None,
) -> list[VerificationResult]:
    """
    Run run_proof_checks for every item.

    Args:
        items: Independent (proof, anchor, key) triples
        max_workers: Thread pool size; 1 runs sequentially in the caller

    Returns:
        One VerificationResult per item, same order as ``items``
    """
    if not items:
        return []

    def _check(item: BatchItem) -> VerificationResult:
        return run_proof_checks(
            item.proof,
            item.anchor,
            item.key,
            hash_factory=hash_factory,
            verify_signature=verify_signature,
            key_length=key_length,
        )

    if max_workers <= 1 or len(items) == 1:
        results = [_check(item) for item in items]
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(_check, items))

    failed = sum(1 for r in results if not r.ok)
    logger.info(f"Batch verified {len(results)} proofs, {failed} failed")
    return results
