from __future__ import annotations

import time

from fastapi import APIRouter, Request

from charms.runtime.spell_dispatch import supported_types
from charms.runtime.spell_verify import CURRENT_SPELL_VERSION

from charms.api.routes_public_parts.common import _cfg

router = APIRouter()


def _now_ms() -> int:
    return int(time.time() * 1000)


def _health_payload(request: Request) -> dict[str, object]:
    cfg = _cfg(request)
    return {
        "ok": True,
        "service": "charms-engine",
        "version": "v1",
        "ts_ms": _now_ms(),
        "mode": cfg.mode,
        "spell_version": CURRENT_SPELL_VERSION,
        "supported_types": supported_types(),
    }


@router.get("/v1/health")
def v1_health(request: Request) -> dict[str, object]:
    return _health_payload(request)


@router.get("/health")
def health(request: Request) -> dict[str, object]:
    # unversioned alias for ops tooling
    return _health_payload(request)


@router.get("/healthz")
def healthz(request: Request) -> dict[str, object]:
    # Kubernetes-style alias
    return _health_payload(request)
