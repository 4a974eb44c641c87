import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from shortener_app.api.error_handlers import register_error_handlers
from shortener_app.api.middleware import LoggingMiddleware
from shortener_app.api.v1 import admin, auth, links, redirect
from shortener_app.cache.factory import CacheBackend, CacheFactory
from shortener_app.config import Settings
from shortener_app.observability import setup_logging
from shortener_app.services.repository import LinkRepository
from shortener_app.services.short_code_factory import ShortCodeFactory
from shortener_app.services.token_service import TokenService
from shortener_app.storage.factory import StoreBackend, StoreFactory

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The store, cache and services are created when the app starts (lifespan)
    and the store is closed exactly once when it stops.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)

        store = StoreFactory.create(StoreBackend(settings.store_backend), settings)
        cache = CacheFactory.create(CacheBackend(settings.cache_backend), settings)

        app.state.store = store
        app.state.cache = cache
        app.state.repository = LinkRepository(store)
        app.state.token_service = TokenService(
            settings.jwt_secret.encode("utf-8"),
            ttl=timedelta(hours=settings.token_ttl_hours),
        )
        app.state.short_code_strategy = ShortCodeFactory.create_strategy(settings)

        if not settings.jwt_secret:
            logger.warning("JWT_SECRET is not set: registration and authenticated requests will fail")
        if not settings.admin_token:
            logger.warning("Admin token is not configured: admin endpoints will reject every request")

        logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)
        try:
            yield
        finally:
            cache.close()
            store.close()
            logger.info("%s stopped", settings.app_name)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A URL shortener service built with FastAPI",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(LoggingMiddleware)
    register_error_handlers(app)

    @app.api_route("/", methods=["GET", "POST"], response_class=PlainTextResponse)
    def read_root():
        """Greeting"""
        return "Url shortener is ready to short your links! ;)"

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "environment": settings.environment}

    ######## Include routers
    app.include_router(auth.router)
    app.include_router(links.router)
    app.include_router(admin.router)
    # Catch-all /{short_name}, must come last
    app.include_router(redirect.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.http_port)
