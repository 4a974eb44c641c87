"""
FastAPI dependencies for dependency injection.

The application lifespan (main.create_app) builds one store, repository,
token service, cache and short name strategy and puts them on app.state.
The providers below hand those shared instances to routes.

Pattern: Dependency Injection
- No module-level singletons: every app instance carries its own config
- Easy to test (build an app with test settings)
"""

import hmac
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shortener_app.cache.strategies import CacheStrategy
from shortener_app.config import Settings
from shortener_app.exceptions import ForbiddenError, UnauthorizedError
from shortener_app.services.link_service import LinkService
from shortener_app.services.repository import LinkRepository
from shortener_app.services.short_code_strategies import ShortCodeStrategy
from shortener_app.services.token_service import TokenService

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> LinkRepository:
    return request.app.state.repository


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_cache(request: Request) -> CacheStrategy:
    return request.app.state.cache


def get_short_code_strategy(request: Request) -> ShortCodeStrategy:
    return request.app.state.short_code_strategy


def get_link_service(
    settings: Settings = Depends(get_settings),
    repository: LinkRepository = Depends(get_repository),
    token_service: TokenService = Depends(get_token_service),
    cache: CacheStrategy = Depends(get_cache),
    short_code_strategy: ShortCodeStrategy = Depends(get_short_code_strategy),
) -> LinkService:
    """
    Get LinkService with all dependencies injected.

    Controllers depend on the service; the service depends on
    infrastructure (store-backed repository, token service, cache).
    """
    return LinkService(
        repository=repository,
        token_service=token_service,
        short_code_strategy=short_code_strategy,
        cache=cache,
        cache_ttl=settings.cache_ttl,
    )


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    token_service: TokenService = Depends(get_token_service),
) -> str:
    """
    Email of the caller, taken from the bearer token.

    Without an Authorization header the caller is anonymous (empty
    identity) when anonymous links are enabled, and rejected otherwise.
    A token that is present but invalid is always rejected.
    """
    if credentials is None:
        if settings.allow_anonymous_links:
            return ""
        raise UnauthorizedError("Unauthorized")
    return token_service.verify(credentials.credentials)


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Allow the request only when the bearer token equals the admin token.

    The header must use the Bearer scheme; a bare admin token is rejected.
    """
    presented = credentials.credentials if credentials else ""
    if not settings.admin_token or not hmac.compare_digest(
        presented.encode("utf-8"), settings.admin_token.encode("utf-8")
    ):
        raise ForbiddenError("Forbidden")
