from __future__ import annotations

from fastapi import APIRouter, Request, Response

from charms.api.metrics import format_prometheus

from charms.api.routes_public_parts.common import _cfg

router = APIRouter()


@router.get("/metrics")
def metrics(request: Request) -> Response:
    """Prometheus-style metrics.

    Disabled by default. Enable with:
      CHARMS_METRICS_ENABLED=1
    """
    if not _cfg(request).metrics_enabled:
        return Response(status_code=404, content="not_found\n", media_type="text/plain")
    return Response(content=format_prometheus(), media_type="text/plain")
