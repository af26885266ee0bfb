"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import shared
field types, canonical serialization, errors and result models.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    dumps_canonical_bytes,
    loads_canonical,
)

# Field types
from .encoding import HexBytes, short_hex

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ChainBrokenException,
    ConfigurationException,
    ErrorCodes,
    InvalidInputException,
    LedgerProofError,
    LedgerProofException,
    MalformedProofException,
    NotFoundException,
    RootMismatchException,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "dumps_canonical_bytes",
    "loads_canonical",
    # Field types
    "HexBytes",
    "short_hex",
    # Errors
    "CanonicalizationException",
    "ChainBrokenException",
    "ConfigurationException",
    "ErrorCodes",
    "InvalidInputException",
    "LedgerProofError",
    "LedgerProofException",
    "MalformedProofException",
    "NotFoundException",
    "RootMismatchException",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
