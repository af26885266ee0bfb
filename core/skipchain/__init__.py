"""
Skipchain blocks and forward-link verification.

Usage:
    from core.skipchain import verify_chain

    header = verify_chain(genesis_id, genesis_roster, proof.links, proof.latest)
    trusted_root = header.trie_root
"""
from .chain import ChainVerifier, verify_chain
from .models import (
    DataHeader,
    ForwardLink,
    Roster,
    ServerIdentity,
    SkipBlock,
    TrustAnchor,
    link_message,
)

__all__ = [
    "ChainVerifier",
    "verify_chain",
    "DataHeader",
    "ForwardLink",
    "Roster",
    "ServerIdentity",
    "SkipBlock",
    "TrustAnchor",
    "link_message",
]
