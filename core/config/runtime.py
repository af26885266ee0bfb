"""
Runtime Configuration

Central configuration for proof verification: hash algorithm, signature
threshold policy, batch workers, pinned trust anchors and logging.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashFactory, get_hash_factory
from core.crypto.signatures import SignatureVerifier, get_threshold_policy, make_signature_verifier
from core.schemas.errors import ConfigurationException
from core.skipchain.models import Roster, TrustAnchor

load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = "LEDGERPROOF_"


@dataclass
class VerificationConfig:
    """Cryptographic parameters shared by every verification."""
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    threshold_policy: str = "bft"
    max_workers: int = 4
    # Fixed key size of the ledger; None accepts keys of any length
    key_length: Optional[int] = None


@dataclass
class AnchorConfig:
    """A pinned genesis block and the roster trusted to sign its first link."""
    genesis_id: str
    roster: list[str] = field(default_factory=list)
    name: str = ""

    def to_anchor(self) -> TrustAnchor:
        try:
            return TrustAnchor(
                name=self.name,
                genesis_id=self.genesis_id,
                roster=Roster.from_public_keys(self.roster),
            )
        except ValueError as e:
            raise ConfigurationException(
                f"Invalid trust anchor {self.name or self.genesis_id}: {e}",
            ) from e


@dataclass
class TrustConfig:
    anchors: list[AnchorConfig] = field(default_factory=list)


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - JSON or YAML file
    - Programmatic construction
    """
    verification: VerificationConfig = field(default_factory=VerificationConfig)
    trust: TrustConfig = field(default_factory=TrustConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - LEDGERPROOF_HASH_ALGORITHM: hashlib algorithm name
        - LEDGERPROOF_THRESHOLD_POLICY: bft, majority or all
        - LEDGERPROOF_MAX_WORKERS: batch verification threads
        - LEDGERPROOF_KEY_LENGTH: fixed key size in bytes
        - LEDGERPROOF_LOG_LEVEL: log level
        - LEDGERPROOF_LOG_FILE: optional log file
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("verification", {})["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}THRESHOLD_POLICY"):
            overrides.setdefault("verification", {})["threshold_policy"] = os.getenv(f"{ENV_PREFIX}THRESHOLD_POLICY")
        if os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
            raw = os.getenv(f"{ENV_PREFIX}MAX_WORKERS", "")
            try:
                overrides.setdefault("verification", {})["max_workers"] = int(raw)
            except ValueError as e:
                raise ConfigurationException(f"{ENV_PREFIX}MAX_WORKERS must be an integer, got {raw!r}") from e
        if os.getenv(f"{ENV_PREFIX}KEY_LENGTH"):
            raw = os.getenv(f"{ENV_PREFIX}KEY_LENGTH", "")
            try:
                overrides.setdefault("verification", {})["key_length"] = int(raw)
            except ValueError as e:
                raise ConfigurationException(f"{ENV_PREFIX}KEY_LENGTH must be an integer, got {raw!r}") from e

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON or YAML file (by extension)."""
        path = Path(path)
        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        verification_data = data.get("verification", {})
        trust_data = data.get("trust", {})

        try:
            verification = VerificationConfig(**verification_data) if verification_data else VerificationConfig()
            anchors = [AnchorConfig(**a) for a in trust_data.get("anchors", [])]
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

        config = cls(
            verification=verification,
            trust=TrustConfig(anchors=anchors),
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Resolve every named setting once so bad config fails at load time.

        Raises:
            ConfigurationException: On unknown algorithms/policies or bad anchors
        """
        get_hash_factory(self.verification.hash_algorithm)
        get_threshold_policy(self.verification.threshold_policy)
        if self.verification.max_workers < 1:
            raise ConfigurationException("max_workers must be at least 1")
        if self.verification.key_length is not None and self.verification.key_length < 1:
            raise ConfigurationException("key_length must be at least 1")
        for anchor in self.trust.anchors:
            anchor.to_anchor()

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "verification" in overrides:
            for key, value in overrides["verification"].items():
                setattr(new_config.verification, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        new_config.validate()
        return new_config

    # ------------------------------------------------------------------
    # Resolved helpers
    # ------------------------------------------------------------------

    def hash_factory(self) -> HashFactory:
        return get_hash_factory(self.verification.hash_algorithm)

    def signature_verifier(self) -> SignatureVerifier:
        return make_signature_verifier(self.verification.threshold_policy)

    def anchors(self) -> list[TrustAnchor]:
        return [a.to_anchor() for a in self.trust.anchors]

    def find_anchor(self, genesis_id: bytes) -> TrustAnchor | None:
        """Return the pinned anchor for ``genesis_id``, if any."""
        for anchor in self.anchors():
            if anchor.genesis_id == genesis_id:
                return anchor
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "verification": {
                "hash_algorithm": self.verification.hash_algorithm,
                "threshold_policy": self.verification.threshold_policy,
                "max_workers": self.verification.max_workers,
                "key_length": self.verification.key_length,
            },
            "trust": {
                "anchors": [
                    {"name": a.name, "genesis_id": a.genesis_id, "roster": list(a.roster)}
                    for a in self.trust.anchors
                ],
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


CONFIG_SEARCH_PATHS = (
    Path("ledgerproof.json"),
    Path("ledgerproof.yaml"),
    Path.home() / ".config" / "ledgerproof" / "config.json",
)


def load_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load config from ``path`` or the first existing search path, then
    overlay environment variables. Defaults are used if no file exists.

    Search order:
      1. ./ledgerproof.json
      2. ./ledgerproof.yaml
      3. ~/.config/ledgerproof/config.json
    """
    if path is not None:
        return RuntimeConfig.from_file(path).with_env_overrides()

    for candidate in CONFIG_SEARCH_PATHS:
        if candidate.exists():
            logger.info(f"Loaded config from {candidate}")
            return RuntimeConfig.from_file(candidate).with_env_overrides()

    return RuntimeConfig().with_env_overrides()


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = load_config()
    return _default_config


def set_default_config(config: RuntimeConfig | None) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
