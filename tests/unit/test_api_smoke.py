"""
API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. POST /verify with a valid proof returns ok and the decoded instance
3. Absence proofs return ok with present=false
4. Tampered or wrongly anchored proofs return ok=false with checks
5. Unknown genesis without roster returns 400 UNKNOWN_GENESIS
"""

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.deps import get_runtime_config
from core.config.runtime import AnchorConfig, RuntimeConfig
from fixtures.chain_fixtures import make_scenario


# Create test client
client = TestClient(app)


@pytest.fixture
def runtime_config():
    config = RuntimeConfig()
    app.dependency_overrides[get_runtime_config] = lambda: config
    yield config
    app.dependency_overrides.clear()


def make_body(scenario, key: bytes | None = b"k", with_roster: bool = True) -> dict:
    proof = scenario.proof(key or b"k")
    body = {
        "proof": proof.model_dump(mode="json", by_alias=True),
        "genesis_id": "0x" + scenario.genesis_id.hex(),
    }
    if with_roster:
        body["roster"] = scenario.roster0.model_dump(mode="json")
    if key is not None:
        body["key"] = "0x" + key.hex()
    return body


class TestHealth:

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "service": "ledgerproof-api", "version": "v1"}

    def test_root(self):
        assert client.get("/").json()["ok"] is True


class TestVerifyEndpoint:

    def test_inclusion(self, scenario, runtime_config):
        response = client.post("/verify", json=make_body(scenario))
        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["present"] is True
        assert data["latest_index"] == 2
        assert data["trie_root"] == "0x" + scenario.trie.root.hex()
        assert data["instance"]["instance_id"] == "0x6b"
        assert data["instance"]["contract_id"] == "value"
        assert data["instance"]["value"] == "0x76"
        assert [c["check_id"] for c in data["checks"]] == [
            "chain_links", "trie_root", "trie_path", "key_present",
        ]

    def test_absence(self, scenario, runtime_config):
        response = client.post("/verify", json=make_body(scenario, key=b"\x80"))
        data = response.json()
        assert data["ok"] is True
        assert data["present"] is False
        assert data["instance"] is None

    def test_without_key(self, scenario, runtime_config):
        data = client.post("/verify", json=make_body(scenario, key=None)).json()
        assert data["ok"] is True
        assert data["present"] is None

    def test_wrong_genesis_roster(self, scenario, runtime_config):
        body = make_body(scenario)
        body["roster"] = scenario.roster1.model_dump(mode="json")
        response = client.post("/verify", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is False
        assert data["error"]["code"] == "CHAIN_BROKEN"
        assert data["checks"][0] == {
            "check_id": "chain_links",
            "ok": False,
            "severity": "error",
            "message": "signature verification failed",
        }

    def test_tampered_value(self, scenario, runtime_config):
        body = make_body(scenario)
        body["proof"]["inclusion_proof"]["terminal"]["value"] = "0x00"
        data = client.post("/verify", json=body).json()
        assert data["ok"] is False
        assert data["error"]["code"] == "MALFORMED_PROOF"
        assert data["instance"] is None

    def test_configured_anchor(self, scenario, runtime_config):
        runtime_config.trust.anchors.append(
            AnchorConfig(
                genesis_id="0x" + scenario.genesis_id.hex(),
                roster=["0x" + pk.hex() for pk in scenario.roster0.public_keys],
            )
        )
        data = client.post("/verify", json=make_body(scenario, with_roster=False)).json()
        assert data["ok"] is True

    def test_unknown_genesis(self, scenario, runtime_config):
        response = client.post("/verify", json=make_body(scenario, with_roster=False))
        assert response.status_code == 400
        data = response.json()
        assert data["ok"] is False
        assert data["error"]["code"] == "UNKNOWN_GENESIS"

    def test_malformed_body(self, runtime_config):
        response = client.post("/verify", json={"proof": {}, "genesis_id": "0x01"})
        assert response.status_code == 422

    def test_checks_can_be_omitted(self, scenario, runtime_config):
        body = make_body(scenario)
        body["include_checks"] = False
        assert client.post("/verify", json=body).json()["checks"] == []


class TestIndependentScenarios:

    def test_other_chain_rejected(self, runtime_config):
        """A proof from one chain does not verify against another chain's genesis."""
        first = make_scenario()
        second = make_scenario()
        body = make_body(first)
        body["genesis_id"] = "0x" + second.genesis_id.hex()
        body["roster"] = second.roster0.model_dump(mode="json")
        data = client.post("/verify", json=body).json()
        assert data["ok"] is False
