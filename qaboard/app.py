"""
FastAPI application entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from qaboard.config import get_settings
from qaboard.dependencies import init_clients
from qaboard.pages import router as pages_router
from qaboard.routes import router

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_clients()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="qaboard", version="0.1.0", lifespan=lifespan)
    app.include_router(router)
    app.include_router(pages_router)

    # A mount at "/" answers every path, so it has to come after the routes.
    # Named pages therefore win over public files of the same name.
    public_dir = Path(settings.public_dir)
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir), name="public")
    else:
        logger.info("No public assets directory at %s", public_dir)
    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    logger.info("Server listening on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
