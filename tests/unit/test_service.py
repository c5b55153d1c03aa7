"""Unit tests for the packing service and strategy registry."""

from __future__ import annotations

import pytest

from cutplan.application import (
    DEFAULT_STRATEGY,
    STRATEGIES,
    PackingService,
    available_strategies,
    get_strategy_class,
)
from cutplan.contracts import PackingStrategyProtocol
from cutplan.domain.value_objects import PanelSpec
from cutplan.infrastructure.bin_packing import PackingConfig, PackResult, SheetConfig
from cutplan.infrastructure.packers import GuillotinePacker, NaivePacker


class TestRegistry:
    """Tests for strategy lookup."""

    def test_available_strategies(self) -> None:
        assert available_strategies() == [
            "naive",
            "shelf",
            "shelf-best-fit",
            "skyline",
            "guillotine",
        ]

    def test_default_is_guillotine(self) -> None:
        assert DEFAULT_STRATEGY == "guillotine"
        assert get_strategy_class(DEFAULT_STRATEGY) is GuillotinePacker

    def test_unknown_strategy(self) -> None:
        with pytest.raises(KeyError, match="No packing strategy named 'maxrects'"):
            get_strategy_class("maxrects")

    @pytest.mark.parametrize("name", list(STRATEGIES))
    def test_strategies_satisfy_protocol(self, name: str) -> None:
        strategy = STRATEGIES[name](PackingConfig())

        assert isinstance(strategy, PackingStrategyProtocol)
        assert strategy.name == name


class TestPackingService:
    """Tests for PackingService."""

    @pytest.fixture
    def service(self) -> PackingService:
        return PackingService(
            PackingConfig(sheet=SheetConfig(width=1000, height=500), kerf=0)
        )

    def test_create_strategy_uses_config(self, service: PackingService) -> None:
        strategy = service.create_strategy("naive")

        assert isinstance(strategy, NaivePacker)
        assert strategy.config is service.config

    def test_fresh_strategy_per_call(self, service: PackingService) -> None:
        assert service.create_strategy() is not service.create_strategy()

    def test_pack_names_result(self, service: PackingService) -> None:
        result = service.pack([PanelSpec(width=100, height=100)], "skyline")

        assert result.strategy == "skyline"

    def test_compare_all(self, service: PackingService) -> None:
        results = service.compare([PanelSpec(width=300, height=200, quantity=4)])

        assert list(results) == available_strategies()
        assert all(r.is_complete for r in results.values())

    def test_compare_subset(self, service: PackingService) -> None:
        results = service.compare([PanelSpec(width=300, height=200)], ["shelf", "naive"])

        assert list(results) == ["shelf", "naive"]

    def test_compare_unknown_strategy(self, service: PackingService) -> None:
        with pytest.raises(KeyError):
            service.compare([PanelSpec(width=300, height=200)], ["nope"])


class TestBestOf:
    """Tests for ranking compared results."""

    @staticmethod
    def _result(sheets: int, unplaced: int = 0) -> PackResult:
        config = PackingConfig(sheet=SheetConfig(width=100, height=100), kerf=0)
        panels = [PanelSpec(width=100, height=100, quantity=sheets)]
        if unplaced:
            panels.append(PanelSpec(width=500, height=500, quantity=unplaced))
        return GuillotinePacker(config).pack(panels)

    def test_empty(self) -> None:
        assert PackingService.best_of({}) is None

    def test_fewer_unplaced_wins(self) -> None:
        results = {"a": self._result(1, unplaced=1), "b": self._result(3)}

        assert PackingService.best_of(results) == "b"

    def test_fewer_sheets_wins(self) -> None:
        results = {"a": self._result(3), "b": self._result(2)}

        assert PackingService.best_of(results) == "b"

    def test_ties_keep_order(self) -> None:
        results = {"first": self._result(2), "second": self._result(2)}

        assert PackingService.best_of(results) == "first"
