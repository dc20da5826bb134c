import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.exception_handler import register_exception_handlers
from app.core.logging_config import configure_logging
from app.core.middleware import register_middlewares
from app.db.session import db
from app.api.v1.endpoints import interaction

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.connect()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    try:
        yield
    finally:
        await db.disconnect()


def create_application() -> FastAPI:
    """Build the review-interactions app: middleware, error handlers, routes."""
    configure_logging()

    application = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        lifespan=lifespan,
    )
    register_middlewares(application)
    register_exception_handlers(application)
    application.include_router(interaction.router)

    @application.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy", "version": settings.VERSION}

    return application


app = create_application()
