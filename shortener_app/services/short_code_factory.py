"""
Factory for creating short name generation strategies.
"""

from enum import Enum
from typing import Optional

from shortener_app.config import Settings
from shortener_app.services.short_code_strategies import (
    ShortCodeStrategy,
    HexShortCodeStrategy,
    AlphanumericShortCodeStrategy,
)


class ShortCodeStrategyType(Enum):
    """Available short name generation strategies"""
    HEX = "hex"
    ALPHANUMERIC = "alphanumeric"


class ShortCodeFactory:
    """Factory for creating short name generation strategies"""

    @staticmethod
    def create_strategy(
        settings: Settings,
        strategy_type: Optional[ShortCodeStrategyType] = None,
    ) -> ShortCodeStrategy:
        """
        Create a short name generation strategy.

        Args:
            settings: Application settings (length, retries, default strategy)
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.

        Returns:
            A ShortCodeStrategy instance

        Raises:
            ValueError: If strategy_type is unknown
        """
        if strategy_type is None:
            strategy_type = ShortCodeStrategyType(settings.short_code_strategy)

        if strategy_type == ShortCodeStrategyType.HEX:
            # Two hex characters per byte
            return HexShortCodeStrategy(
                num_bytes=max(1, settings.short_url_length // 2),
                max_retries=settings.max_retries,
            )
        if strategy_type == ShortCodeStrategyType.ALPHANUMERIC:
            return AlphanumericShortCodeStrategy(
                length=settings.short_url_length,
                max_retries=settings.max_retries,
            )
        raise ValueError(f"Unknown strategy type: {strategy_type}")
