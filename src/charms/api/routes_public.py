# src/charms/api/routes_public.py
from __future__ import annotations

from fastapi import APIRouter

from charms.api.routes_public_parts.health import router as health_router
from charms.api.routes_public_parts.metrics import router as metrics_router
from charms.api.routes_public_parts.proof import router as proof_router
from charms.api.routes_public_parts.spell import router as spell_router

public_router = APIRouter()

# Health routes carry their own paths (versioned + unversioned aliases)
public_router.include_router(health_router, prefix="", tags=["health"])

# Versioned API surface
public_router.include_router(spell_router, prefix="/v1", tags=["spell"])
public_router.include_router(proof_router, prefix="/v1", tags=["proof"])

# Ops
public_router.include_router(metrics_router, prefix="/v1", tags=["metrics"])
