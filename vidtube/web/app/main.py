# vidtube/web/app/main.py
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vidtube.web.app.config import Settings, get_settings
from vidtube.web.app.db import create_all, create_engine, create_session_factory
from vidtube.web.app.errors import register_exception_handlers
from vidtube.web.app.responses import ok
from vidtube.web.app.services.logging_service import LoggingMiddleware, logging_service
from vidtube.web.app.services.media_host import MediaHostClient

# Import API routes
from vidtube.web.app.api import (
    users, videos, comments, tweets, playlists, likes, subscriptions, dashboard
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging_service.configure(settings)

        engine = create_engine(settings)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        app.state.media_host = MediaHostClient.from_settings(settings)

        if settings.DB_CREATE_ALL:
            await create_all(engine)

        logger.info("%s %s started", settings.APP_NAME, settings.VERSION)
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("%s stopped", settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Video sharing platform backend: videos, comments, likes, subscriptions, playlists and tweets.",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    # API routes
    app.include_router(users.router, prefix=settings.API_PREFIX)
    app.include_router(videos.router, prefix=settings.API_PREFIX)
    app.include_router(comments.router, prefix=settings.API_PREFIX)
    app.include_router(tweets.router, prefix=settings.API_PREFIX)
    app.include_router(playlists.router, prefix=settings.API_PREFIX)
    app.include_router(likes.router, prefix=settings.API_PREFIX)
    app.include_router(subscriptions.router, prefix=settings.API_PREFIX)
    app.include_router(dashboard.router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return ok({"status": "healthy", "service": "web", "version": settings.VERSION}, "OK")

    return app


app = create_app()
