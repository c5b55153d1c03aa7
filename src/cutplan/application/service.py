"""Packing service coordinating strategy selection and comparison."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from cutplan.domain.value_objects import PanelSpec
from cutplan.infrastructure.bin_packing import PackingConfig, PackingStrategy, PackResult
from cutplan.infrastructure.packers import (
    BestFitShelfPacker,
    GuillotinePacker,
    NaivePacker,
    ShelfPacker,
    SkylinePacker,
)
from cutplan.infrastructure.waste import total_waste_percent

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = GuillotinePacker.name

STRATEGIES: dict[str, type[PackingStrategy]] = {
    cls.name: cls
    for cls in (
        NaivePacker,
        ShelfPacker,
        BestFitShelfPacker,
        SkylinePacker,
        GuillotinePacker,
    )
}


def available_strategies() -> list[str]:
    """Names of all registered strategies, in registration order."""
    return list(STRATEGIES)


def get_strategy_class(name: str) -> type[PackingStrategy]:
    """Look up a strategy class by name.

    Raises:
        KeyError: If no strategy is registered under ``name``.
    """
    if name not in STRATEGIES:
        available = ", ".join(STRATEGIES)
        raise KeyError(
            f"No packing strategy named '{name}'. Available strategies: {available}"
        )
    return STRATEGIES[name]


class PackingService:
    """Runs placement strategies over a panel list.

    Each call builds a fresh strategy instance, so runs never share state
    and can be executed side by side.

    Attributes:
        config: Packing configuration used for every run.
    """

    def __init__(self, config: PackingConfig | None = None) -> None:
        self.config = config or PackingConfig()

    def create_strategy(self, name: str = DEFAULT_STRATEGY) -> PackingStrategy:
        return get_strategy_class(name)(self.config)

    def pack(
        self, panels: Sequence[PanelSpec], strategy: str = DEFAULT_STRATEGY
    ) -> PackResult:
        """Pack panels with the named strategy."""
        return self.create_strategy(strategy).pack(panels)

    def compare(
        self,
        panels: Sequence[PanelSpec],
        strategies: Iterable[str] | None = None,
    ) -> dict[str, PackResult]:
        """Pack the same panels with several strategies.

        Args:
            panels: Panel specs to pack.
            strategies: Strategy names; all registered strategies when None.

        Returns:
            Results keyed by strategy name, in the requested order.
        """
        names = list(strategies) if strategies is not None else available_strategies()
        results: dict[str, PackResult] = {}
        for name in names:
            results[name] = self.pack(panels, name)
            logger.debug(
                "%s: %d sheets, %.1f%% waste",
                name,
                results[name].total_sheets,
                total_waste_percent(results[name]),
            )
        return results

    @staticmethod
    def best_of(results: dict[str, PackResult]) -> str | None:
        """Name of the best result.

        Fewer unplaced copies wins, then fewer sheets, then lower waste;
        remaining ties keep the comparison order.
        """
        if not results:
            return None
        order = list(results)
        return min(
            order,
            key=lambda name: (
                len(results[name].unplaced),
                results[name].total_sheets,
                round(total_waste_percent(results[name]), 6),
                order.index(name),
            ),
        )
