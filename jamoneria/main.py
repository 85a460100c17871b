"""
FastAPI application entry point.
Configures routes, middleware, and lifecycle events.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from jamoneria import __version__
from jamoneria.config import settings
from jamoneria.database import init_db, close_db
from jamoneria.logging_config import configure_logging
from jamoneria.services.notifications import format_startup_message
from jamoneria.services.telegram_service import TelegramService

from jamoneria.api.storefront import router as storefront_router
from jamoneria.api.webhooks.dodo import router as dodo_router

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifecycle manager."""
    # Startup
    configure_logging()
    logging.info("Starting up Jamonería...")

    await init_db()

    telegram = TelegramService()
    if settings.notify_on_startup and telegram.is_configured:
        await telegram.notify(format_startup_message())
    elif not telegram.is_configured:
        logging.warning("Telegram not configured: operator notifications are disabled")

    yield

    # Shutdown
    await close_db()
    logging.info("Shutting down...")


app = FastAPI(
    title="Jamonería",
    description="Order intake and operator notifications for the Jamonería storefront",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logging.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "Internal Server Error"},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "env": settings.app_env,
    }


app.include_router(storefront_router, tags=["storefront"])
app.include_router(dodo_router, tags=["webhooks"])

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
