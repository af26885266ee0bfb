"""
CLI Inspect Command

Print the structure of a proof without verifying anything: trie depth,
terminal node, block and link summary. Nothing printed here is trusted.

Usage:
    ledgerproof inspect proof.json [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.crypto.hashing import to_hex
from core.proof import Proof
from core.schemas.errors import LedgerProofException
from core.trie.bits import format_bits
from ledgerproof_cli.commands.verify import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, load_proof


def describe_proof(proof: Proof) -> dict[str, Any]:
    """Structural description of a proof."""
    inclusion = proof.inclusion_proof
    terminal = inclusion.terminal
    root = proof.get_root()

    info: dict[str, Any] = {
        "trie": {
            "depth": inclusion.depth,
            "root": to_hex(root) if root is not None else None,
            "terminal": terminal.kind,
            "prefix": format_bits(terminal.prefix),
            "nonce": to_hex(inclusion.nonce),
        },
        "latest": {
            "index": proof.latest.index,
            "hash": to_hex(proof.latest.hash),
            "trie_root": to_hex(proof.latest.header.trie_root),
            "roster_size": proof.latest.roster.size,
        },
        "links": [
            {
                "from": to_hex(link.from_id),
                "to": to_hex(link.to_id),
                "signers": len(link.signature.participants),
                "new_roster": link.new_roster.size if link.new_roster is not None else None,
            }
            for link in proof.links
        ],
        "matches": proof.matches(),
    }

    if proof.matches():
        info["key"] = to_hex(proof.get_key())
        try:
            body = proof.get_values()
        except LedgerProofException as e:
            info["value_error"] = e.message
        else:
            info["contract_id"] = body.contract_id
            info["version"] = body.version
    return info


def inspect_cmd(args: Namespace) -> int:
    """Execute the inspect command."""
    proof_path = Path(args.proof_path)
    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        proof = load_proof(proof_path)
    except LedgerProofException as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    info = describe_proof(proof)
    if args.json:
        print(json.dumps(info, indent=2))
        return EXIT_SUCCESS

    trie = info["trie"]
    print(f"proof: {proof_path} (unverified)")
    print(f"trie depth: {trie['depth']}, terminal: {trie['terminal']}, prefix: {trie['prefix'] or '-'}")
    print(f"trie root: {trie['root']}")
    print(f"latest: #{info['latest']['index']} {info['latest']['hash']}")
    print(f"links: {len(info['links'])}")
    for i, link in enumerate(info["links"]):
        roster = f", new roster of {link['new_roster']}" if link["new_roster"] is not None else ""
        print(f"  [{i}] {link['from'][:18]} -> {link['to'][:18]} ({link['signers']} signers{roster})")
    if "key" in info:
        print(f"key: {info['key']}")
        if "contract_id" in info:
            print(f"contract_id: {info['contract_id']} (version {info['version']})")
        else:
            print(f"value: {info['value_error']}")
    return EXIT_SUCCESS
