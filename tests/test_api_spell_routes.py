from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from charms.api import metrics as api_metrics
from charms.api.app import create_app
from charms.runtime.engine_config import DEFAULT_SPELL_CHECKER_VK, default_engine_config

VK = "11" * 32


def _client(**overrides) -> TestClient:
    cfg = replace(default_engine_config(), mode="dev", **overrides)
    return TestClient(create_app(config=cfg))


def _u64(n: int) -> dict:
    return {"type": "u64", "value": n}


def _token_body(a_in: int, a_out: int, **extra) -> dict:
    tag = "token:API"
    body = {
        "app": {"tag": tag, "vk_hash": VK},
        "tx": {
            "txid": "22" * 32,
            "inputs": [{"utxo_ref": {"txid": "33" * 32, "vout": 0}, "charm_state": {"apps": {tag: _u64(a_in)}}}],
            "outputs": [{"index": 0, "value": 546, "script_pubkey": "0014", "charm_state": {"apps": {tag: _u64(a_out)}}}],
        },
    }
    body.update(extra)
    return body


@pytest.fixture(autouse=True)
def _reset_metrics():
    api_metrics.reset()
    yield
    api_metrics.reset()


def test_health_aliases() -> None:
    c = _client()
    for path in ("/v1/health", "/health", "/healthz"):
        r = c.get(path)
        assert r.status_code == 200
        j = r.json()
        assert j["ok"] is True
        assert "token" in j["supported_types"]


def test_check_conservation_failure() -> None:
    c = _client()
    r = c.post("/v1/spell/check", json=_token_body(500, 400, w={"type": "string", "value": "transfer"}))
    assert r.status_code == 200
    j = r.json()
    assert j["valid"] is False
    assert j["applicationType"] == "token"
    assert j["errors"] == ["Token conservation failed: input=500 != output=400"]
    assert j["details"]["inputSum"] == 500


def test_check_large_amount_is_exact() -> None:
    big = (1 << 64) - 1
    c = _client()
    r = c.post("/v1/spell/check", json=_token_body(big, big))
    assert r.status_code == 200
    assert r.json()["details"]["outputSum"] == big


def test_malformed_body_returns_400() -> None:
    c = _client()
    body = _token_body(1, 1)
    body["app"]["vk_hash"] = "abc"
    r = c.post("/v1/spell/check", json=body)
    assert r.status_code == 400
    j = r.json()
    assert j["ok"] is False
    assert j["error"]["code"] == "invalid_payload"


def test_build_token_is_checked_with_authorization() -> None:
    c = _client()
    r = c.post("/v1/spell/build/token", json={"appTag": "NEW", "vkHash": "abcd", "inputAmounts": [], "outputAmounts": [1000]})
    assert r.status_code == 200
    j = r.json()
    assert j["app"]["tag"] == "token:NEW"
    assert j["checkResult"]["valid"] is True
    assert j["checkResult"]["details"]["isMint"] is True
    assert len(j["tx"]["outputs"]) == 1


def test_build_escrow_and_bounty() -> None:
    c = _client()
    r = c.post("/v1/spell/build/escrow", json={"appTag": "D", "currentState": 0, "nextState": 4, "amount": 1000})
    assert r.status_code == 200
    assert r.json()["checkResult"]["errors"] == ["Invalid escrow transition: Created -> Refunded"]

    r = c.post("/v1/spell/build/bounty", json={"appTag": "B", "currentState": 4, "nextState": 2, "amount": 1000})
    assert r.json()["checkResult"]["valid"] is True


def test_build_nft_and_stablecoin() -> None:
    c = _client()
    r = c.post("/v1/spell/build/nft", json={"appTag": "ART", "inputIds": [], "outputIds": ["ab12", "ab12"]})
    assert r.status_code == 200
    assert r.json()["checkResult"]["details"]["duplicateNfts"] == ["ab12"]

    r = c.post("/v1/spell/build/stablecoin", json={"appTag": "USD", "inputAmounts": [10], "outputAmounts": [10]})
    assert r.json()["checkResult"]["applicationType"] == "stablecoin"

    r = c.post("/v1/spell/build/nft", json={"appTag": "ART", "outputIds": ["zz"]})
    assert r.status_code == 400


def test_verify_spell_route() -> None:
    c = _client()
    spell = {"version": 1, "ins": [], "outs": [{"index": 0, "charms": None}]}
    r = c.post("/v1/spell/verify", json={"spell": spell})
    assert r.status_code == 200
    assert r.json() == {"valid": False, "version": 1, "inputCount": 0, "outputCount": 1, "errors": ["Invalid spell structure"]}


def test_proof_wrap_is_deterministic_and_vk_is_injected() -> None:
    c = _client()
    a = c.post("/v1/proof/wrap", json=_token_body(5, 5)).json()
    b = c.post("/v1/proof/wrap", json=_token_body(5, 5)).json()
    assert a == b
    assert a["checkResult"]["valid"] is True
    assert a["proof"]["proofSeal"].startswith("risc0_seal_v1_")

    vk = c.get("/v1/proof/vk").json()
    assert vk["vk"] == list(DEFAULT_SPELL_CHECKER_VK)
    assert a["proof"]["vkHash"] == vk["vkHex"]

    custom = _client(spell_checker_vk=(1, 2, 3, 4, 5, 6, 7, 8))
    assert custom.get("/v1/proof/vk").json()["vk"] == [1, 2, 3, 4, 5, 6, 7, 8]


def test_proof_verify() -> None:
    c = _client()
    r = c.post("/v1/proof/verify", json={"data": "68656c6c6f"})
    assert r.status_code == 200
    assert r.json()["valid"] is True

    r = c.post("/v1/proof/verify", json={"data": "68656c6c6f", "vk": [0, 0, 0, 0, 0, 0, 0, 0]})
    assert r.json()["errors"] == ["Verification key does not match spell checker VK"]

    assert c.post("/v1/proof/verify", json={"data": "xyz"}).status_code == 400
    assert c.post("/v1/proof/verify", json={"data": "00", "vk": [1]}).status_code == 400


def test_metrics_disabled_by_default() -> None:
    assert _client().get("/v1/metrics").status_code == 404


def test_metrics_count_checks() -> None:
    c = _client(metrics_enabled=True)
    c.post("/v1/spell/check", json=_token_body(5, 5))
    c.post("/v1/spell/check", json=_token_body(100, 150))
    r = c.get("/v1/metrics")
    assert r.status_code == 200
    text = r.text
    assert "charms_spell_checks_total 2" in text
    assert "charms_spell_checks_valid_total 1" in text
    assert "charms_spell_checks_invalid_total 1" in text
    assert "charms_spell_checks_token_total 2" in text


def test_prod_mode_hides_docs() -> None:
    c = TestClient(create_app(config=default_engine_config()))
    assert c.get("/openapi.json").status_code == 404
    assert c.get("/health").status_code == 200


def test_check_rejects_malformed_embedded_spell() -> None:
    c = _client()
    body = _token_body(10, 10)
    body["tx"]["spell"] = {"version": 0, "ins": [], "outs": []}
    r = c.post("/v1/spell/check", json=body)
    assert r.status_code == 200
    j = r.json()
    assert j["valid"] is False
    assert j["errors"] == ["Invalid spell structure"]
