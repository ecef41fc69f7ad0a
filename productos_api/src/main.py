"""
Productos FastAPI Application

Serves a product collection persisted as a single JSON array on disk, plus a
few static text pages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.pages import router as pages_router
from api.productos import router as productos_router
from config import Settings
from errors import StoreError
from store import ProductStore

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    service: str


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store.ensure_file()
    logger.info("Serving productos from %s", app.state.store.path)
    yield


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


async def body_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected body for %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": "Request body must be a JSON object"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around a store configured from ``settings``."""

    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Productos API",
        description="Product collection stored in a JSON file",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = ProductStore(
        settings.data_path,
        lock_timeout=settings.lock_timeout,
        strict_ids=settings.strict_ids,
        id_field=settings.id_field,
    )

    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, body_error_handler)

    app.include_router(pages_router)
    app.include_router(productos_router)

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", service="productos-api")

    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
