"""
Test fixtures package for ledgerproof tests.

This package provides factory functions for creating test objects.
Organized into layers:
- trie_fixtures.py: a producer-side trie that hands out inclusion proofs
- chain_fixtures.py: Ed25519 rosters, blocks, signed links and the
  genesis -> B1 -> B2 proof scenario

Usage:
    from fixtures import make_trie, make_scenario

    def test_something():
        scenario = make_scenario()
        verified = scenario.proof().verify_anchor(scenario.anchor)
"""

from .trie_fixtures import (
    DEFAULT_NONCE,
    SimpleTrie,
    make_trie,
)

from .chain_fixtures import (
    SCENARIO_CONTRACT,
    SCENARIO_KEY,
    SCENARIO_VALUE,
    ChainScenario,
    make_block,
    make_keys,
    make_link,
    make_roster,
    make_scenario,
    make_state_value,
    public_bytes,
)

__all__ = [
    # Trie
    "DEFAULT_NONCE",
    "SimpleTrie",
    "make_trie",
    # Chain
    "SCENARIO_CONTRACT",
    "SCENARIO_KEY",
    "SCENARIO_VALUE",
    "ChainScenario",
    "make_block",
    "make_keys",
    "make_link",
    "make_roster",
    "make_scenario",
    "make_state_value",
    "public_bytes",
]
