"""
Short name generation strategies for URL shortener.
Uses Strategy Pattern to allow different generation algorithms.
"""

import secrets
import string
from abc import ABC, abstractmethod
from typing import Callable

from shortener_app.exceptions import InternalError


class ShortCodeStrategy(ABC):
    """
    Abstract base class for short name generation strategies.

    Candidates are random; generate() retries while the candidate is taken.
    The check is only a pre-check: the final save is still atomic.
    """

    def __init__(self, max_retries: int = 5):
        self.max_retries = max_retries

    @abstractmethod
    def candidate(self) -> str:
        """Produce one random alphanumeric candidate"""
        pass

    def generate(self, name_exists: Callable[[str], bool]) -> str:
        """
        Generate a short name not currently in use.

        Args:
            name_exists: Predicate telling whether a name is taken

        Returns:
            A free short name

        Raises:
            InternalError: If every attempt collided
        """
        for _ in range(self.max_retries):
            short_name = self.candidate()
            if not name_exists(short_name):
                return short_name

        raise InternalError(
            f"Could not generate unique short name after {self.max_retries} attempts"
        )


class HexShortCodeStrategy(ShortCodeStrategy):
    """
    Random bytes rendered as lowercase hex.

    4 bytes give 8-character names and ~4.3 billion possibilities.
    """

    def __init__(self, num_bytes: int = 4, max_retries: int = 5):
        super().__init__(max_retries)
        self.num_bytes = num_bytes

    def candidate(self) -> str:
        return secrets.token_hex(self.num_bytes)


class AlphanumericShortCodeStrategy(ShortCodeStrategy):
    """
    Random [A-Za-z0-9] string of fixed length.

    Pros: shorter names than hex for the same collision odds
    Cons: mixed case is easy to mistype
    """

    CHARACTERS = string.ascii_letters + string.digits

    def __init__(self, length: int = 6, max_retries: int = 5):
        super().__init__(max_retries)
        self.length = length

    def candidate(self) -> str:
        return "".join(secrets.choice(self.CHARACTERS) for _ in range(self.length))
