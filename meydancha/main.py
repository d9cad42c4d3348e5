"""Entry point for the Meydancha reservation FastAPI application."""

from fastapi import FastAPI

from meydancha.api.v1 import router as v1_router
from meydancha.core.config import settings
from meydancha.core.database import Base, engine
from meydancha.core.error_handlers import register_exception_handlers

# Ensure database tables exist when the application starts (for development purposes).
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.PROJECT_NAME)

register_exception_handlers(app)

app.include_router(
    v1_router,
    prefix="/api/meydancha/v1",
)

__all__ = ["app"]
