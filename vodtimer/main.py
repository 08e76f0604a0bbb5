from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from vodtimer import __version__
from vodtimer.api.routes import router
from vodtimer.config import settings_from_env
from vodtimer.startup import init_schedule_for_app, shutdown_schedule_for_app

# Configure logging
logging.basicConfig(level=settings_from_env().log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    facade = init_schedule_for_app()
    try:
        yield
    finally:
        shutdown_schedule_for_app(facade)


app = FastAPI(title="vodtimer", version=__version__, lifespan=_lifespan)
app.include_router(router)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "vodtimer", "version": __version__}
