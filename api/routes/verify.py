"""
Verify Route

Verify a proof document against a trusted genesis block.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_runtime_config
from api.errors import UnknownGenesisError
from api.models.requests import VerifyRequest
from api.models.responses import InstanceInfo, VerifyResponse
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import to_hex
from core.proof import run_proof_checks
from core.schemas.errors import LedgerProofException
from core.skipchain.models import TrustAnchor


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


def resolve_anchor(request: VerifyRequest, config: RuntimeConfig) -> TrustAnchor:
    """Use the request's roster, else the configured anchor for the genesis id."""
    if request.roster is not None:
        return TrustAnchor(genesis_id=request.genesis_id, roster=request.roster)

    anchor = config.find_anchor(request.genesis_id)
    if anchor is None:
        raise UnknownGenesisError(to_hex(request.genesis_id))
    return anchor


@router.post("/verify", response_model=VerifyResponse)
def verify_proof(
    request: VerifyRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> VerifyResponse:
    """
    Verify a proof.

    Performs:
    1. Forward link verification from the genesis block to the latest block
    2. Trie root binding between the latest block and the inclusion proof
    3. Inclusion or absence of ``key`` (optional)

    Verification failures are reported with ``ok=false`` and HTTP 200;
    malformed requests get 400/422.
    """
    anchor = resolve_anchor(request, config)
    proof = request.proof

    logger.info(f"Verifying proof for genesis {to_hex(anchor.genesis_id)} (latest #{proof.latest.index})")
    result = run_proof_checks(
        proof,
        anchor,
        request.key,
        hash_factory=config.hash_factory(),
        verify_signature=config.signature_verifier(),
        key_length=config.verification.key_length,
    )

    response = VerifyResponse(
        ok=result.ok,
        present=result.present,
        latest_index=proof.latest.index,
        trie_root=to_hex(proof.latest.header.trie_root) if result.ok else None,
        error=result.error.model_dump(mode="json") if result.error is not None else None,
        errors=result.get_error_messages(),
    )

    if result.ok and result.present:
        try:
            instance = proof.get_instance()
        except LedgerProofException as e:
            response.ok = False
            response.error = e.to_error_model().model_dump(mode="json")
            response.errors.append(e.message)
        else:
            response.instance = InstanceInfo(
                instance_id=to_hex(instance.instance_id),
                contract_id=instance.contract_id,
                value=to_hex(instance.value),
                darc_id=to_hex(instance.darc_id),
                version=instance.version,
            )

    if request.include_checks:
        response.checks = [
            {"check_id": c.check_id, "ok": c.ok, "severity": c.severity, "message": c.message}
            for c in result.checks
        ]

    if not response.ok:
        logger.warning(f"Proof verification failed: {response.errors}")
    return response
