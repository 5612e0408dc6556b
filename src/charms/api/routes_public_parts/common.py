from __future__ import annotations

from typing import Any, Callable, Dict, TypeVar

from fastapi import Request

from charms.api.errors import ApiError
from charms.runtime.commitment import ProofConfig
from charms.runtime.engine_config import EngineConfig, default_engine_config
from charms.runtime.errors import CodecError

Json = Dict[str, Any]

T = TypeVar("T")


def _cfg(request: Request) -> EngineConfig:
    cfg = getattr(request.app.state, "cfg", None)
    return cfg if isinstance(cfg, EngineConfig) else default_engine_config()


def _proof_config(request: Request) -> ProofConfig:
    pc = getattr(request.app.state, "proof_config", None)
    if isinstance(pc, ProofConfig):
        return pc
    return ProofConfig.from_engine_config(_cfg(request))


def _decode(fn: Callable[[Any], T], payload: Any, *, what: str) -> T:
    """Run a codec decoder, mapping structural failures to HTTP 400."""
    try:
        return fn(payload)
    except CodecError as e:
        raise ApiError.bad_request(e.code, f"invalid {what}: {e.reason}", dict(e.details or {}))
    except ValueError as e:
        raise ApiError.bad_request("invalid_payload", f"invalid {what}: {e}", {})
