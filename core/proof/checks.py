"""
Proof Check Report

Runs the full verification of one proof as a sequence of named checks and
returns a VerificationResult instead of raising. Used by the CLI, the HTTP
API and batch verification.

Checks, in order (the report stops at the first failure):
- chain_links:  forward links lead from the trusted genesis to latest
- trie_root:    latest's header commits to the inclusion proof's root
- trie_path:    the path for ``key`` is authenticated down to its terminal
- key_present:  the key is included (absence is reported as a warning)
"""
from __future__ import annotations

import hashlib
import logging

from core.crypto.hashing import HashFactory, to_hex
from core.crypto.signatures import SignatureVerifier, verify_collective
from core.proof.proof import Proof
from core.schemas.errors import (
    ErrorCodes,
    LedgerProofError,
    LedgerProofException,
    MalformedProofException,
    RootMismatchException,
)
from core.schemas.verification import CheckResult, VerificationResult
from core.skipchain.models import TrustAnchor
from core.trie.verifier import inspect_path


logger = logging.getLogger(__name__)


def _fail(checks: list[CheckResult], check_id: str, exc: LedgerProofException) -> VerificationResult:
    checks.append(CheckResult.failed(check_id, exc.message, details=dict(exc.details)))
    logger.warning(f"Check {check_id} failed: {exc.message}")
    return VerificationResult.failure(checks, error=exc.to_error_model())


def run_proof_checks(
    proof: Proof,
    anchor: TrustAnchor,
    key: bytes | None = None,
    *,
    hash_factory: HashFactory = hashlib.sha256,
    verify_signature: SignatureVerifier = verify_collective,
    key_length: int | None = None,
) -> VerificationResult:
    """
    Verify ``proof`` against ``anchor`` and, optionally, look up ``key``.

    ``key_length`` is the ledger's fixed key size; leaves and keys of any other
    size fail the trie_path check.

    Only ledgerproof exceptions are turned into failed checks; anything
    else is a bug and propagates.
    """
    checks: list[CheckResult] = []

    try:
        verified = proof.verify_anchor(
            anchor,
            hash_factory=hash_factory,
            verify_signature=verify_signature,
        )
    except (RootMismatchException, MalformedProofException) as e:
        # verify() only reaches the root binding once the chain is good
        checks.append(CheckResult.passed("chain_links", "Forward links verified"))
        return _fail(checks, "trie_root", e)
    except LedgerProofException as e:
        return _fail(checks, "chain_links", e)

    checks.append(
        CheckResult.passed(
            "chain_links",
            "Forward links verified",
            details={"links": len(proof.links), "latest_index": proof.latest.index},
        )
    )
    checks.append(
        CheckResult.passed(
            "trie_root",
            "Trie root is stored in the latest block",
            details={"trie_root": to_hex(verified.trie_root)},
        )
    )

    if key is None:
        return VerificationResult.success(checks)

    try:
        path = inspect_path(
            proof.inclusion_proof,
            key,
            verified.trie_root,
            hash_factory=hash_factory,
            key_length=key_length,
        )
    except LedgerProofException as e:
        return _fail(checks, "trie_path", e)

    if not path.authenticated:
        checks.append(CheckResult.failed("trie_path", path.reason, details={"depth": path.depth}))
        logger.warning(f"Trie path for {to_hex(key)} not authenticated: {path.reason}")
        return VerificationResult.failure(
            checks,
            error=LedgerProofError(
                code=ErrorCodes.MALFORMED_PROOF,
                message=path.reason,
                details={"depth": path.depth},
            ),
        )

    checks.append(CheckResult.passed("trie_path", path.reason, details={"depth": path.depth}))
    if path.present:
        checks.append(CheckResult.passed("key_present", "Key is included in the trie"))
    else:
        checks.append(CheckResult.warning("key_present", "Key is absent from the trie"))
    return VerificationResult.success(checks, present=path.present)
