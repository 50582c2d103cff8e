"""Sync agent entry point (uvicorn whiteboard.main:app).

create_app() only wires logging, the lifespan, exception handlers, CORS
and the /api/v1 routers; the services themselves are built in
whiteboard.core.lifespan. Settings are read inside create_app() so tests
can change the environment and clear get_settings first.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from whiteboard.api.v1 import api_router
from whiteboard.core.config import get_settings
from whiteboard.core.exception_handlers import register_exception_handlers
from whiteboard.core.lifespan import create_lifespan
from whiteboard.shared.telemetry.logging import setup_logging

# The proxy forwards every method the gateway can issue.
_CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Offline-aware sync agent for the Whiteboard backend API.",
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    register_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=_CORS_METHODS,
        allow_headers=["Authorization", "Content-Type"],
    )
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
