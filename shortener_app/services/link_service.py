import logging
from typing import Dict, List, Optional

from shortener_app.cache.strategies import CacheStrategy
from shortener_app.exceptions import AlreadyExistsError, NotFoundError, UserNotRegisteredError
from shortener_app.services.repository import LinkRepository
from shortener_app.services.short_code_strategies import ShortCodeStrategy
from shortener_app.services.token_service import TokenService

logger = logging.getLogger(__name__)


def cache_key(short_name: str) -> str:
    return f"url:{short_name}"


class LinkService:
    """
    Use cases behind the HTTP API.

    Dependencies are injected (see shortener_app.dependencies):
    - repository: link/user records in the key-value store
    - token_service: issues and verifies bearer tokens
    - short_code_strategy: generates names when the client gives none
    - cache: optional cache-aside layer for redirects
    """

    def __init__(
        self,
        repository: LinkRepository,
        token_service: TokenService,
        short_code_strategy: ShortCodeStrategy,
        cache: Optional[CacheStrategy] = None,
        cache_ttl: int = 3600,
    ):
        self.repository = repository
        self.token_service = token_service
        self.short_code_strategy = short_code_strategy
        self.cache = cache
        self.cache_ttl = cache_ttl

    def create_short_link(self, url: str, owner: str, name: Optional[str] = None) -> str:
        """
        Create a short link owned by owner.

        Process:
        1. Generate a free name if none was requested
        2. Reject a requested name that is already taken (fast path)
        3. Save atomically; a concurrent creator of the same name still
           gets AlreadyExistsError here

        Returns:
            The short name
        """
        if not name:
            name = self.short_code_strategy.generate(self.repository.name_exists)
        elif self.repository.name_exists(name):
            raise AlreadyExistsError("Link name already exists")

        self.repository.save_link(name, url, owner)
        logger.info("Created short link %s", name)

        self._cache_url(name, url)
        return name

    def get_long_url_for_redirect(self, short_name: str) -> str:
        """
        Get the target URL using the Cache-Aside pattern.

        Raises:
            NotFoundError: If the short name is unknown
        """
        if self.cache:
            cached_url = self.cache.get(cache_key(short_name))
            if cached_url:
                return cached_url

        url = self.repository.get_link(short_name)

        if not self._cache_url(short_name, url):
            raise NotFoundError(f"Link {short_name} not found")
        return url

    def _cache_url(self, short_name: str, url: str) -> bool:
        """
        Write a resolved link to the cache, unless it was deleted meanwhile.

        A user deletion can commit and evict between the store read and the
        cache write. The store is checked again after the write, so either
        this check sees the deletion or the deletion's eviction runs after
        the write.

        Returns:
            False if the link no longer exists
        """
        if not self.cache:
            return True

        self.cache.set(cache_key(short_name), url, ttl=self.cache_ttl)
        if self.repository.name_exists(short_name):
            return True

        self.cache.delete(cache_key(short_name))
        return False

    def register_user(self, email: str) -> str:
        """
        Register email and return its bearer token.

        The existence check and the token write are separate transactions;
        two simultaneous registrations of one email both succeed and the
        later token wins.
        """
        if self.repository.email_exists(email):
            raise AlreadyExistsError("Email already in use")

        token = self.token_service.issue(email)
        self.repository.save_token(email, token)
        logger.info("Registered new user")
        return token

    def delete_user(self, email: str) -> List[str]:
        """
        Delete a user and all their links, then drop those links from cache.

        Raises:
            UserNotRegisteredError: If the email is not registered
        """
        if not self.repository.email_exists(email):
            raise UserNotRegisteredError("Email not exists")

        deleted = self.repository.delete_user(email)

        if self.cache:
            for short_name in deleted:
                self.cache.delete(cache_key(short_name))
        return deleted

    def list_users(self) -> Dict[str, int]:
        return self.repository.get_all_users()
