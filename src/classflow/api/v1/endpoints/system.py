"""Health and metrics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response
from sqlalchemy import text

from classflow.api.v1.dependencies import MetricsDep, SessionDep
from classflow.core.settings import settings

router = APIRouter(tags=["system"])


@router.get("/health")
def health_check(db: SessionDep) -> dict[str, str]:
    """Health check endpoint to verify the service and its database are up."""
    db.execute(text("SELECT 1"))
    return {"status": "ok", "version": settings.app_version}


@router.get("/metrics")
def get_metrics(metrics: MetricsDep) -> Response:
    """Expose this application's counters in Prometheus text format."""
    return Response(content=metrics.render(), media_type=metrics.content_type)
