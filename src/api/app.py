"""
FastAPI application factory.

Run with `python -m src.api.app` (or `uvicorn src.api.app:app`). Reads its configuration from the environment,
see src/core/config.py.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.api.models import Envelope
from src.api.router import router
from src.core.config import Settings
from src.core.exceptions import (
    GameError,
    GameNotFoundError,
    InvalidRequestError,
    StorageNotConfiguredError,
)
from src.db.database import Database
from src.services.board_service import BoardService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database = Database(settings.database_url, echo=settings.database_echo)
        database.init()
        app.state.database = database
        app.state.board_service = BoardService(max_sessions=settings.max_board_sessions)
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(title="Chess Board & Annotations", version="1.0.0", lifespan=lifespan)
    app.include_router(router)
    _register_exception_handlers(app)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GameNotFoundError)
    async def game_not_found(request: Request, exc: GameNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(StorageNotConfiguredError)
    async def storage_not_configured(
        request: Request, exc: StorageNotConfiguredError
    ) -> JSONResponse:
        logger.error("Storage request on %s without a database: %s", request.url.path, exc)
        envelope = Envelope(success=False, error="Comment storage is not configured")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=envelope.model_dump(),
        )

    @app.exception_handler(InvalidRequestError)
    async def invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(GameError)
    async def game_error(request: Request, exc: GameError) -> JSONResponse:
        logger.warning("Unhandled game error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
