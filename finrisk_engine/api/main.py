"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finrisk_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finrisk_engine.api.v1 import aging, cashgap, dashboard, dscr, risk, simulation
from finrisk_engine.infrastructure.observability.logging import setup_logging
from finrisk_engine.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="FinRisk Engine",
        description="Risk scoring, cash-gap, aging and forward simulation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(dscr.router, prefix="/api", tags=["ratios"])
    app.include_router(risk.router, prefix="/api", tags=["risk"])
    app.include_router(cashgap.router, prefix="/api", tags=["cash-gap"])
    app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
    app.include_router(aging.router, prefix="/api", tags=["aging"])
    app.include_router(simulation.router, prefix="/api", tags=["simulation"])

    return app


app = create_app()
