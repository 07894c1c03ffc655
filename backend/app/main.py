"""Million List API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ListStateError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Each app instance owns exactly one CollectionStore (app.state), built
      in create_app() so test clients without lifespan still have one
    - Every request is logged once with method, path, status and duration

Design Decisions:
    - Application factory: tests build isolated apps with small collections;
      `app` at module level serves `uvicorn app.main:app`
    - Lifespan only configures logging; the store needs no async setup
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import health, items
from app.config import Settings, get_settings
from app.core.collection_store import CollectionStore
from app.infrastructure.observability import setup_logging
from app.services.state_service import StateService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build a FastAPI app with its own collection store."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info(
            "Million List API started",
            extra={"item_count": len(app.state.store.base_sequence)},
        )
        yield
        logger.info("Million List API shutting down")

    app = FastAPI(
        title="Million List API", version="1.0.0", lifespan=lifespan,
    )

    store = CollectionStore.initialize(settings.items_count)
    app.state.settings = settings
    app.state.store = store
    app.state.state_service = StateService(store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            f"{request.method} {request.url.path}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response

    # Routes: explicit registration
    app.include_router(items.router, prefix=settings.api_prefix)
    app.include_router(health.router, prefix=settings.api_prefix)

    register_error_handlers(app)
    return app


app = create_app()
