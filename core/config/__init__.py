"""
Runtime Configuration Module

Provides configuration loading and management for ledgerproof.
"""

from .runtime import (
    AnchorConfig,
    RuntimeConfig,
    TrustConfig,
    VerificationConfig,
    get_default_config,
    load_config,
    set_default_config,
)

__all__ = [
    "AnchorConfig",
    "RuntimeConfig",
    "TrustConfig",
    "VerificationConfig",
    "get_default_config",
    "load_config",
    "set_default_config",
]
