"""FastAPI application entry point."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import DATA_DIR, LOG_LEVEL
from api.routers import analytics, bulk_search, export, health, search
from contribution_search.exceptions import InternalError, NotFoundError, ValidationError
from contribution_search.loader import ContributionStore, load_store

logger = logging.getLogger(__name__)


def create_app(store: ContributionStore | None = None) -> FastAPI:
    """
    Build the application.

    With no ``store`` the data directory is loaded during startup, before any
    request is served.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if store is None:
            logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")
            app.state.store = await asyncio.to_thread(load_store, DATA_DIR, show_progress=False)
            logger.info("Data loaded and search index created")
        yield

    app = FastAPI(
        title="Contribution Search API",
        description="Search, bulk lookup and export of FEC individual contributions",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400, content={"error": exc.message, "field": exc.field_name}
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Export data not found or expired."})

    @app.exception_handler(InternalError)
    async def internal_error_handler(request: Request, exc: InternalError) -> JSONResponse:
        logger.error("Internal error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(health.router)
    app.include_router(search.router, prefix="/api")
    app.include_router(bulk_search.router, prefix="/api")
    app.include_router(export.router, prefix="/api")
    app.include_router(analytics.router, prefix="/api")
    return app


app = create_app()
