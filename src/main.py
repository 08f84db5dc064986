"""FastAPI application entry point.

Run with: uvicorn src.main:app --port 8080
      or: python -m src.main
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from config.settings import settings
from src.pari_gateway.api.router import router as exchange_router
from src.pari_gateway.middleware.request_log import RequestLogMiddleware
from src.pari_gateway.runtime import build_runtime

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build a fresh in-memory exchange. Shutdown: drop all connections."""
    # Startup
    app.state.exchange = build_runtime(settings)
    logger.info("Available invite codes: %s", ", ".join(sorted(settings.invite_codes)))
    yield
    # Shutdown
    app.state.exchange.hub.close_all()


configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)

app.include_router(exchange_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": VERSION}


# Mounted last so /ws and /health take precedence over the catch-all.
if Path(settings.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="client")


if __name__ == "__main__":
    uvicorn.run("src.main:app", host=settings.HOST, port=settings.PORT)
