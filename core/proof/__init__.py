"""
Ledger proofs: trie inclusion proof + latest block + forward links.

Usage:
    from core.proof import Proof

    proof = Proof.model_validate_json(raw)
    verified = proof.verify(genesis_id, genesis_roster)
    value = verified.value(key)
"""
from .batch import BatchItem, verify_batch
from .checks import run_proof_checks
from .proof import Proof, VerifiedProof
from .state import Instance, StateAction, StateChangeBody

__all__ = [
    "BatchItem",
    "verify_batch",
    "run_proof_checks",
    "Proof",
    "VerifiedProof",
    "Instance",
    "StateAction",
    "StateChangeBody",
]
