"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from household_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from household_ledger.api.v1 import entries, purchases, session, summary
from household_ledger.infrastructure.database.models import Base
from household_ledger.infrastructure.database.session import engine
from household_ledger.infrastructure.observability.logging import setup_logging
from household_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Household Ledger",
        description="Income, fixed expenses and credit-card installments per month",
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
    app.include_router(session.router, prefix="/v1", tags=["session"])
    app.include_router(purchases.router, prefix="/v1", tags=["credit-purchases"])
    app.include_router(entries.router, prefix="/v1", tags=["entries"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])

    return app


app = create_app()
