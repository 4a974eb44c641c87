"""
Domain exceptions for the URL shortener.

Every error the core can raise derives from ShortenerError and carries the
HTTP status the API layer answers with. The core never translates errors
itself; the handlers in shortener_app.api.error_handlers do.
"""

from fastapi import status


class ShortenerError(Exception):
    """Base class for all URL shortener errors"""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ShortenerError):
    """A short name, user or key does not exist"""

    http_status = status.HTTP_404_NOT_FOUND


class KeyNotFoundError(NotFoundError):
    """Raised by the key-value store when a key is absent"""

    def __init__(self, key: bytes):
        super().__init__(f"Key not found: {key!r}")
        self.key = key


class AlreadyExistsError(ShortenerError):
    http_status = status.HTTP_409_CONFLICT


class UserNotRegisteredError(ShortenerError):
    """Admin deletion of an email that was never registered"""

    http_status = status.HTTP_409_CONFLICT


class InvalidCredentialError(ShortenerError):
    """Token is malformed, expired, or its signature does not validate"""

    http_status = status.HTTP_401_UNAUTHORIZED


class UnauthorizedError(ShortenerError):
    http_status = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ShortenerError):
    http_status = status.HTTP_403_FORBIDDEN


class InternalError(ShortenerError):
    """Store, serialization or signing failure"""

    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class StoreError(InternalError):
    pass


class StoreClosedError(StoreError):
    def __init__(self):
        super().__init__("Key-value store is closed")


class RecordDecodeError(InternalError):
    pass


class SigningError(InternalError):
    pass
