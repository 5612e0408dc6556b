# src/charms/api/structured_logging.py
from __future__ import annotations

import json
import logging
import os
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

Json = Dict[str, Any]


def _now_ms() -> int:
    return int(time.time() * 1000)


def configure_structured_logging(level_name: Optional[str] = None) -> None:
    """Configure stdlib logging for JSONL output (stdout).

    - Level from the argument, else CHARMS_LOG_LEVEL (default INFO).
    - Safe to call multiple times.
    """
    name = (level_name or os.environ.get("CHARMS_LOG_LEVEL") or "INFO").strip().upper()
    level = getattr(logging, name, logging.INFO)

    root = logging.getLogger()
    if getattr(root, "_charms_configured", False):  # type: ignore[attr-defined]
        root.setLevel(level)
        handler = getattr(root, "_charms_handler", None)
        if isinstance(handler, logging.Handler):
            handler.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root.handlers = [handler]
    root.setLevel(level)
    setattr(root, "_charms_handler", handler)
    setattr(root, "_charms_configured", True)  # type: ignore[attr-defined]


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    payload: Json = {"ts_ms": _now_ms(), "event": event}
    payload.update(fields)
    try:
        logger.info(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    except (TypeError, ValueError):
        parts = [f"event={event}"] + [f"{k}={fields.get(k)!r}" for k in sorted(fields.keys())]
        logger.info(" ".join(parts))


def annotate_request(request: Request, **fields: Any) -> None:
    """Attach engine context (app tag, kind, verdict) to this request's log line."""
    ctx = getattr(request.state, "log_fields", None)
    if not isinstance(ctx, dict):
        ctx = {}
        request.state.log_fields = ctx
    ctx.update({k: v for k, v in fields.items() if v is not None})


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One `http_request` JSON line per request.

    Routes add spell context through annotate_request(); it is merged into
    the line under the same keys (app_tag, app_type, valid, ...).

    CHARMS_LOG_REQUESTS=0 disables it (default on).
    """

    def __init__(self, app) -> None:
        super().__init__(app)
        raw = (os.environ.get("CHARMS_LOG_REQUESTS") or "1").strip().lower()
        self._enabled = raw not in {"0", "false", "no", "n", "off"}
        self._logger = logging.getLogger("charms.http")

    async def dispatch(self, request: Request, call_next):
        if not self._enabled:
            return await call_next(request)

        started = time.monotonic()
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        request.state.log_fields = {}

        fields: Json = {"request_id": request_id, "method": request.method, "path": str(request.url.path or "")}
        try:
            response = await call_next(request)
        except Exception as e:
            fields.update(status=500, error=str(e))
            self._emit(request, fields, started)
            raise

        fields["status"] = int(getattr(response, "status_code", 200) or 200)
        self._emit(request, fields, started)
        response.headers.setdefault("x-request-id", request_id)
        return response

    def _emit(self, request: Request, fields: Json, started: float) -> None:
        ctx = getattr(request.state, "log_fields", None)
        if isinstance(ctx, dict):
            for k, v in ctx.items():
                fields.setdefault(k, v)
        fields["duration_ms"] = int((time.monotonic() - started) * 1000)
        log_event(self._logger, "http_request", **fields)
