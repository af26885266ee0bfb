"""
ledgerproof CLI

Command-line interface for verifying ledger proofs offline.

Usage:
    python -m ledgerproof_cli verify proof.json --genesis 0x... --key-text mykey
    python -m ledgerproof_cli inspect proof.json
    python -m ledgerproof_cli config --show
"""

__version__ = "0.1.0"
