from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from charms.api.errors import ApiError, api_error_handler
from charms.api.routes_public import public_router
from charms.api.security import RequestSizeLimitMiddleware
from charms.api.structured_logging import RequestLogMiddleware, configure_structured_logging, log_event
from charms.runtime.commitment import ProofConfig
from charms.runtime.engine_config import EngineConfig, load_engine_config, validate_engine_config

log = logging.getLogger("charms.api")


def create_app(*, config: Optional[EngineConfig] = None) -> FastAPI:
    """Create the FastAPI application.

    config:
      - None (default): load from CHARMS_CONFIG_PATH / CHARMS_* env
      - EngineConfig: use as-is (tests pass one explicitly)

    The verification engine holds no state; app.state only carries the
    operator config and the proof config derived from it.
    """
    cfg = config if config is not None else load_engine_config()
    validate_engine_config(cfg)

    configure_structured_logging(cfg.log_level)

    # Disable docs in production.
    if cfg.mode == "prod":
        app = FastAPI(
            title="Charms Spell Engine API",
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )
    else:
        app = FastAPI(title="Charms Spell Engine API")

    app.state.cfg = cfg
    app.state.proof_config = ProofConfig.from_engine_config(cfg)

    app.add_exception_handler(ApiError, api_error_handler)

    # --- Middleware ---
    # Starlette runs the last-added middleware first: request logging wraps
    # the size limiter so rejected requests are still logged.
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=cfg.max_request_bytes)
    app.add_middleware(RequestLogMiddleware)

    # --- Routers ---
    app.include_router(public_router)

    log_event(log, "app_created", mode=cfg.mode, metrics_enabled=cfg.metrics_enabled)
    return app
