# src/charms/runtime/engine_config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

Json = Dict[str, Any]

# Verification key of the spell checker program (8 x u32), used by the
# commitment layer. Override with CHARMS_SPELL_CHECKER_VK.
DEFAULT_SPELL_CHECKER_VK: Tuple[int, ...] = (
    1137430973,
    2011028408,
    625211435,
    1988224886,
    433288175,
    1277294349,
    746782103,
    737580122,
)


def _as_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except Exception:
        return int(default)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


def _as_bool(v: Any, default: bool) -> bool:
    if v is None:
        return bool(default)
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return bool(default)


def parse_vk(v: Any, default: Tuple[int, ...]) -> Tuple[int, ...]:
    """Accept a list of ints or a comma-separated string of 8 u32 words."""
    if v is None:
        return tuple(default)
    if isinstance(v, str):
        if not v.strip():
            return tuple(default)
        parts = [p.strip() for p in v.split(",") if p.strip()]
    elif isinstance(v, (list, tuple)):
        parts = list(v)
    else:
        raise ValueError(f"spell_checker_vk must be a list or comma-separated string; got {type(v).__name__}")
    try:
        return tuple(int(p) for p in parts)
    except (TypeError, ValueError) as e:
        raise ValueError(f"spell_checker_vk must contain integers: {v!r}") from e


@dataclass(frozen=True)
class EngineConfig:
    mode: str  # "dev" | "testnet" | "prod"

    api_host: str
    api_port: int

    log_level: str

    spell_checker_vk: Tuple[int, ...]

    max_request_bytes: int
    metrics_enabled: bool


_ALLOWED_MODES = {"dev", "testnet", "prod"}


def validate_engine_config(cfg: EngineConfig) -> None:
    """Fail-fast validation for operator config."""

    mode = str(cfg.mode or "").strip().lower()
    if mode not in _ALLOWED_MODES:
        raise ValueError(f"mode must be one of {_ALLOWED_MODES}; got: {cfg.mode!r}")

    if int(cfg.api_port) <= 0 or int(cfg.api_port) > 65535:
        raise ValueError(f"api_port must be 1..65535; got: {cfg.api_port}")

    if len(cfg.spell_checker_vk) != 8:
        raise ValueError(f"spell_checker_vk must have 8 words; got: {len(cfg.spell_checker_vk)}")
    for w in cfg.spell_checker_vk:
        if int(w) < 0 or int(w) > 0xFFFFFFFF:
            raise ValueError(f"spell_checker_vk words must be u32; got: {w}")

    if int(cfg.max_request_bytes) <= 0:
        raise ValueError(f"max_request_bytes must be > 0; got: {cfg.max_request_bytes}")


def default_engine_config() -> EngineConfig:
    return EngineConfig(
        # Production-safe default; dev conveniences must be opted into.
        mode="prod",
        api_host="127.0.0.1",
        api_port=8080,
        log_level="INFO",
        spell_checker_vk=DEFAULT_SPELL_CHECKER_VK,
        max_request_bytes=1_000_000,
        metrics_enabled=False,
    )


def _from_mapping(raw: Json, d: EngineConfig) -> EngineConfig:
    return EngineConfig(
        mode=_as_str(raw.get("mode"), d.mode).strip().lower(),
        api_host=_as_str(raw.get("api_host"), d.api_host),
        api_port=_as_int(raw.get("api_port"), d.api_port),
        log_level=_as_str(raw.get("log_level"), d.log_level).strip().upper(),
        spell_checker_vk=parse_vk(raw.get("spell_checker_vk"), d.spell_checker_vk),
        max_request_bytes=_as_int(raw.get("max_request_bytes"), d.max_request_bytes),
        metrics_enabled=_as_bool(raw.get("metrics_enabled"), d.metrics_enabled),
    )


def read_engine_config_file(path: str) -> EngineConfig:
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("engine config must be a JSON object")

    cfg = _from_mapping(raw, default_engine_config())
    validate_engine_config(cfg)
    return cfg


def engine_config_from_env(base: Optional[EngineConfig] = None) -> EngineConfig:
    d = base or default_engine_config()
    raw: Json = {
        "mode": os.environ.get("CHARMS_MODE"),
        "api_host": os.environ.get("CHARMS_API_HOST"),
        "api_port": os.environ.get("CHARMS_API_PORT"),
        "log_level": os.environ.get("CHARMS_LOG_LEVEL"),
        "spell_checker_vk": os.environ.get("CHARMS_SPELL_CHECKER_VK"),
        "max_request_bytes": os.environ.get("CHARMS_MAX_REQUEST_BYTES"),
        "metrics_enabled": os.environ.get("CHARMS_METRICS_ENABLED"),
    }
    return _from_mapping(raw, d)


def load_engine_config(*, config_path: Optional[str] = None) -> EngineConfig:
    """File config (CHARMS_CONFIG_PATH) if given, else defaults with env overrides."""
    p = config_path or os.environ.get("CHARMS_CONFIG_PATH")
    if p:
        return read_engine_config_file(p)

    cfg = engine_config_from_env()
    validate_engine_config(cfg)
    return cfg
