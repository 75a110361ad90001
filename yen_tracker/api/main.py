"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from yen_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from yen_tracker.api.v1 import alerts, conversions, export, projections, rates, thermostat
from yen_tracker.api.v1 import settings as settings_routes
from yen_tracker.infrastructure.database.models import Base
from yen_tracker.infrastructure.database.session import engine
from yen_tracker.infrastructure.observability.logging import setup_logging
from yen_tracker.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Yen Tracker",
        description="GBP to JPY conversion thermostat, P&L and projections",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(rates.router, prefix="/v1", tags=["rates"])
    app.include_router(thermostat.router, prefix="/v1", tags=["thermostat"])
    app.include_router(projections.router, prefix="/v1", tags=["projections"])
    app.include_router(conversions.router, prefix="/v1", tags=["conversions"])
    app.include_router(settings_routes.router, prefix="/v1", tags=["settings"])
    app.include_router(alerts.router, prefix="/v1", tags=["alerts"])
    app.include_router(export.router, prefix="/v1", tags=["export"])

    return app


app = create_app()
