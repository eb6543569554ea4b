"""
Startup and shutdown for the storefront app
"""

from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager

from .database import init_db, close_db
from .logging import setup_logging
from .config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, create tables and dispose the engine on exit"""
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION} ({settings.ENVIRONMENT})")

    try:
        # Tests create their own schema per database file
        if settings.ENVIRONMENT != "test":
            await init_db()
        yield
    finally:
        await close_db()
        logger.info(f"{settings.APP_NAME} stopped")
