"""Application layer - job configuration and packing orchestration."""

from .service import (
    DEFAULT_STRATEGY,
    STRATEGIES,
    PackingService,
    available_strategies,
    get_strategy_class,
)

__all__ = [
    "DEFAULT_STRATEGY",
    "STRATEGIES",
    "PackingService",
    "available_strategies",
    "get_strategy_class",
]
