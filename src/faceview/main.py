"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from faceview.api.routes import router
from faceview.config import get_settings
from faceview.rendering import RenderPool

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: initialize on startup, clean up on shutdown."""
    settings = get_settings()
    app.state.settings = settings

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    logger.info(
        "Starting FaceView (max_concurrent=%s, eye_open_threshold=%s, auth=%s)",
        settings.max_concurrent,
        settings.eye_open_threshold,
        "on" if settings.api_key else "off",
    )

    render_pool = RenderPool(settings)
    app.state.render_pool = render_pool

    logger.info("FaceView ready")
    yield

    logger.info("Shutting down FaceView")
    render_pool.shutdown()
    logger.info("FaceView shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="FaceView",
        description="Draws facial landmark annotations over photos",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run("faceview.main:app", host=settings.host, port=settings.port)
