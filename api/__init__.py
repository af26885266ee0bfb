"""
Ledger Proof Verification API (FastAPI)

HTTP API for verifying ledger proofs:
- POST /verify - Verify a proof against a trusted genesis block
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
