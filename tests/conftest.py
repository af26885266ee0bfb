"""
Pytest configuration and shared fixtures for ledgerproof tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_trie = importlib.import_module("fixtures.trie_fixtures")
_chain = importlib.import_module("fixtures.chain_fixtures")

make_trie = _trie.make_trie
make_scenario = _chain.make_scenario


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def trie():
    """Provide the default three-key trie."""
    return make_trie()


@pytest.fixture
def scenario():
    """Provide the genesis -> B1 -> B2 scenario with a trie holding "k"."""
    return make_scenario()


@pytest.fixture
def proof(scenario):
    """Provide the scenario's proof for key "k"."""
    return scenario.proof()


@pytest.fixture(autouse=True)
def _reset_default_config(monkeypatch):
    """Keep LEDGERPROOF_* variables and cached config from leaking between tests."""
    from core.config.runtime import set_default_config

    for name in (
        "LEDGERPROOF_HASH_ALGORITHM",
        "LEDGERPROOF_THRESHOLD_POLICY",
        "LEDGERPROOF_MAX_WORKERS",
        "LEDGERPROOF_KEY_LENGTH",
        "LEDGERPROOF_LOG_LEVEL",
        "LEDGERPROOF_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
