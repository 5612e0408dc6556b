from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient

from charms.api.app import create_app
from charms.runtime.engine_config import default_engine_config


def test_request_size_limit_returns_413(monkeypatch):
    monkeypatch.delenv("CHARMS_SIZE_LIMIT_DISABLE", raising=False)

    # Make limit very small for test determinism.
    cfg = replace(default_engine_config(), max_request_bytes=128)
    c = TestClient(create_app(config=cfg))

    payload = {"app": {"tag": "token:A", "vk_hash": "11" * 32}, "tx": {}, "pad": "x" * 500}

    r = c.post("/v1/spell/check", json=payload)
    assert r.status_code == 413

    j = r.json()
    assert j.get("ok") is False
    assert isinstance(j.get("error"), dict)
    assert j["error"].get("code") == "request_too_large"


def test_size_limit_can_be_disabled(monkeypatch):
    monkeypatch.setenv("CHARMS_SIZE_LIMIT_DISABLE", "1")

    cfg = replace(default_engine_config(), max_request_bytes=128)
    c = TestClient(create_app(config=cfg))

    spell = {"version": 1, "ins": [], "outs": [], "pad": "x" * 500}
    r = c.post("/v1/spell/verify", json={"spell": spell})
    assert r.status_code == 200
    assert r.json()["valid"] is False
