"""
CLI Verify Command

Verify a proof file offline:
- Forward links from the trusted genesis to the latest block
- Trie root binding between the block header and the inclusion proof
- Optionally, inclusion or absence of a key

Usage:
    ledgerproof verify proof.json --genesis 0x... [--roster roster.json]
                      [--key 0x... | --key-text TEXT] [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import from_hex, to_hex
from core.proof import Proof, run_proof_checks
from core.schemas.errors import InvalidInputException, LedgerProofException
from core.schemas.verification import VerificationResult
from core.skipchain.models import Roster, TrustAnchor


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    genesis_id: str = ""
    latest_index: int = 0
    latest_block: str = ""
    links: int = 0
    key: str | None = None
    present: bool | None = None
    contract_id: str | None = None
    value: str | None = None
    ok: bool = False
    error_code: str | None = None
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        for optional in ("key", "present", "contract_id", "value", "error_code"):
            if d[optional] is None:
                del d[optional]
        if not d["checks"]:
            del d["checks"]
        if not d["errors"]:
            del d["errors"]
        return d


def load_proof(path: Path) -> Proof:
    """
    Load a proof JSON document.

    Raises:
        InvalidInputException: If the file is not a valid proof document
    """
    try:
        return Proof.model_validate_json(path.read_bytes())
    except PydanticValidationError as e:
        raise InvalidInputException(
            f"Invalid proof document {path}: {e.error_count()} validation errors",
            details={"errors": [err["msg"] for err in e.errors()[:5]]},
        ) from e


def load_roster(path: Path) -> Roster:
    """Load a roster: either a JSON list of hex public keys or a Roster document."""
    data = json.loads(path.read_text())
    try:
        if isinstance(data, list):
            return Roster.from_public_keys(data)
        return Roster.model_validate(data)
    except PydanticValidationError as e:
        raise InvalidInputException(f"Invalid roster document {path}: {e}") from e


def resolve_anchor(genesis: str, roster_path: str | None, config: RuntimeConfig) -> TrustAnchor:
    """
    Build the trust anchor from --roster, or from the configured anchors.

    Raises:
        InvalidInputException: If no roster is known for the genesis id
    """
    try:
        genesis_id = from_hex(genesis)
    except ValueError as e:
        raise InvalidInputException(f"Invalid genesis id: {e}") from e

    if roster_path:
        return TrustAnchor(genesis_id=genesis_id, roster=load_roster(Path(roster_path)))

    anchor = config.find_anchor(genesis_id)
    if anchor is None:
        raise InvalidInputException(
            f"No trusted roster for genesis {genesis}; pass --roster or add it to trust.anchors"
        )
    return anchor


def resolve_key(args: Namespace) -> bytes | None:
    if getattr(args, "key_text", None):
        return args.key_text.encode("utf-8")
    if getattr(args, "key", None):
        try:
            return from_hex(args.key)
        except ValueError as e:
            raise InvalidInputException(f"Invalid key: {e}") from e
    return None


def build_summary(
    proof_path: str,
    proof: Proof,
    anchor: TrustAnchor,
    key: bytes | None,
    result: VerificationResult,
    debug: bool = False,
) -> VerifySummary:
    """Build a VerifySummary from a verification result."""
    summary = VerifySummary(
        proof_path=proof_path,
        genesis_id=to_hex(anchor.genesis_id),
        latest_index=proof.latest.index,
        latest_block=to_hex(proof.latest.hash),
        links=len(proof.links),
        key=to_hex(key) if key is not None else None,
        present=result.present,
        ok=result.ok,
    )

    if result.error is not None:
        summary.error_code = result.error.code
    summary.errors = result.get_error_messages()

    # Only decode the value once inclusion of this exact key is verified
    if result.ok and result.present:
        try:
            instance = proof.get_instance()
        except LedgerProofException as e:
            summary.ok = False
            summary.error_code = e.code
            summary.errors.append(e.message)
        else:
            summary.contract_id = instance.contract_id
            summary.value = to_hex(instance.value)

    if debug:
        summary.checks = [
            {"check_id": c.check_id, "ok": c.ok, "severity": c.severity, "message": c.message}
            for c in result.checks
        ]

    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"genesis: {summary.genesis_id}")
    print(f"latest: #{summary.latest_index} {summary.latest_block}")
    print(f"links: {summary.links}")
    print(f"verified: {str(summary.ok).lower()}")
    if summary.key is not None:
        print(f"key: {summary.key}")
        if summary.present is not None:
            print(f"present: {str(summary.present).lower()}")
    if summary.contract_id is not None:
        print(f"contract_id: {summary.contract_id}")
        print(f"value: {summary.value}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")

    if summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        failed = len(summary.checks) - passed
        print(f"\nchecks: {passed} passed, {failed} failed")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}: {check['message']}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code
    """
    proof_path = Path(args.proof_path)
    config: RuntimeConfig = args.runtime_config

    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        proof = load_proof(proof_path)
        anchor = resolve_anchor(args.genesis, args.roster, config)
        key = resolve_key(args)
    except (LedgerProofException, OSError, ValueError) as e:
        if args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(f"Verifying {proof_path} against genesis {to_hex(anchor.genesis_id)}")
    result = run_proof_checks(
        proof,
        anchor,
        key,
        hash_factory=config.hash_factory(),
        verify_signature=config.signature_verifier(),
        key_length=config.verification.key_length,
    )

    summary = build_summary(str(proof_path), proof, anchor, key, result, debug=args.debug)
    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
