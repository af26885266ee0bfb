"""
CLI Configuration helpers.

The CLI reads the same RuntimeConfig as the library; this module only
adds the template written by ``ledgerproof config --init``.
"""

from __future__ import annotations

import json


def get_default_config_template() -> str:
    """Return a commented-by-example JSON configuration template."""
    template = {
        "verification": {
            "hash_algorithm": "sha256",
            "threshold_policy": "bft",
            "max_workers": 4,
            "key_length": None,
        },
        "trust": {
            "anchors": [
                {
                    "name": "example-ledger",
                    "genesis_id": "0x" + "00" * 32,
                    "roster": [
                        "0x" + "00" * 32,
                    ],
                },
            ],
        },
        "log_level": "INFO",
        "log_file": None,
    }
    return json.dumps(template, indent=2) + "\n"
