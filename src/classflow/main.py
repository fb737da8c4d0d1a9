# src/classflow/main.py
"""Main entry point for the Classflow application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session, sessionmaker

from classflow.api.errors import register_exception_handlers
from classflow.api.v1 import (
    auth_router,
    catalog_router,
    groups_router,
    system_router,
    users_router,
)
from classflow.core.logging import configure_logging
from classflow.core.metrics import MetricsCollector
from classflow.core.settings import settings
from classflow.db.session import SessionLocal
from classflow.services import auth_service
from classflow.services.group_engine import GroupEngine

logger = logging.getLogger(__name__)


def create_app(
    session_factory: sessionmaker[Session] | None = None,
    metrics: MetricsCollector | None = None,
) -> FastAPI:
    """Build the FastAPI application around one session factory and collector."""
    configure_logging(settings.log_level)

    session_factory = session_factory or SessionLocal
    metrics = metrics or MetricsCollector()

    app = FastAPI(
        title="Classflow API",
        description="Student groups and class timetables",
        version=settings.app_version,
    )
    app.state.session_factory = session_factory
    app.state.metrics = metrics
    app.state.group_engine = GroupEngine(session_factory, metrics=metrics)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    if settings.metrics_enabled:

        @app.middleware("http")
        async def count_requests(request: Request, call_next) -> Response:  # type: ignore[no-untyped-def]
            response = await call_next(request)
            route = request.scope.get("route")
            endpoint = getattr(route, "path", "unmatched")
            metrics.record_http_request(request.method, endpoint)
            return response

    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(catalog_router, prefix="/api/v1")
    app.include_router(groups_router, prefix="/api/v1")
    app.include_router(system_router)

    @app.on_event("startup")
    def bootstrap_admin() -> None:
        with session_factory() as db:
            auth_service.ensure_admin(db, settings.admin_email, settings.admin_password)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    logger.debug("Application created (metrics=%s)", settings.metrics_enabled)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("classflow.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
