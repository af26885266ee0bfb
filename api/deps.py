"""
API Dependencies

Dependency injection for the API.
"""

from __future__ import annotations

import logging

from core.config.runtime import RuntimeConfig, get_default_config

logger = logging.getLogger(__name__)


def get_runtime_config() -> RuntimeConfig:
    """
    Runtime configuration for request handlers.

    Loaded once per process (config file, then environment overrides);
    tests replace it through ``app.dependency_overrides``.
    """
    return get_default_config()
