# moodtrack backend api
# fastapi app with pluggable storage (memory or mongodb) and jwt auth

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.dependencies import BearerIdentityProvider, build_identity_provider
from app.errors import register_exception_handlers
from app.services.storage import Storage, build_storage
from app.routers import auth, mood_entries, trigger_events, thoughts, medications

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: connect storage. shutdown: close it."""
    logger.info("Starting MoodTrack backend...")
    await app.state.storage.connect()
    logger.info("MoodTrack backend ready")
    yield
    logger.info("Shutting down MoodTrack backend...")
    await app.state.storage.close()


def create_app(
    storage: Optional[Storage] = None,
    identity_provider: Optional[BearerIdentityProvider] = None,
) -> FastAPI:
    """build the api. storage and identity strategy default to what settings select."""
    app = FastAPI(
        title="MoodTrack API",
        description="Backend API for mood check-ins, trigger events, thoughts and medications",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.storage = storage if storage is not None else build_storage(settings)
    app.state.identity_provider = (
        identity_provider if identity_provider is not None else build_identity_provider(settings)
    )

    # cors — allow frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL, "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, include_detail=not settings.is_production)

    # register routers
    app.include_router(auth.router)
    app.include_router(mood_entries.router)
    app.include_router(trigger_events.router)
    app.include_router(thoughts.router)
    app.include_router(medications.router)

    @app.get("/health")
    async def health_check():
        """basic health check endpoint"""
        return {"status": "ok", "service": "moodtrack-api"}

    return app


app = create_app()
