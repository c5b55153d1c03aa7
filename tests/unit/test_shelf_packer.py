"""Unit tests for the first-fit and best-fit shelf packers."""

from __future__ import annotations

import pytest

from cutplan.domain.value_objects import PanelSpec, SortKey
from cutplan.infrastructure.bin_packing import PackingConfig, SheetConfig
from cutplan.infrastructure.packers import BestFitShelfPacker, ShelfPacker


def _config(width: float = 1000, height: float = 1000, **kwargs) -> PackingConfig:
    kwargs.setdefault("kerf", 0)
    kwargs.setdefault("allow_rotate", False)
    return PackingConfig(sheet=SheetConfig(width=width, height=height), **kwargs)


def _positions(result):
    return [(r.x, r.y) for sheet in result.sheets for r in sheet.rects]


@pytest.fixture
def stepped_panels() -> list[PanelSpec]:
    """Panels where a lower row leaves room on the row above."""
    return [
        PanelSpec(width=600, height=400, panel_id="a"),
        PanelSpec(width=600, height=300, panel_id="b"),
        PanelSpec(width=400, height=300, panel_id="c"),
    ]


class TestShelfPacker:
    """Tests for the first-fit shelf packer."""

    def test_sorted_rows(self) -> None:
        packer = ShelfPacker(_config(height=500))

        result = packer.pack(
            [
                PanelSpec(width=300, height=200, quantity=2),
                PanelSpec(width=400, height=300, quantity=2),
            ]
        )

        assert _positions(result) == [(0, 0), (400, 0), (0, 300), (300, 300)]
        assert result.total_sheets == 1

    def test_new_sheet_when_height_exhausted(self) -> None:
        packer = ShelfPacker(_config(height=500))

        result = packer.pack([PanelSpec(width=1000, height=300, quantity=2)])

        assert result.total_sheets == 2

    def test_only_current_row_is_used(self, stepped_panels: list[PanelSpec]) -> None:
        result = ShelfPacker(_config()).pack(stepped_panels)

        by_id = {r.copy.base_id: (r.x, r.y) for r in result.sheets[0].rects}
        assert by_id == {"a": (0, 0), "b": (0, 400), "c": (600, 400)}

    def test_rotates_when_only_rotation_fits(self) -> None:
        packer = ShelfPacker(_config(width=500, allow_rotate=True))

        result = packer.pack([PanelSpec(width=600, height=200)])

        rect = result.sheets[0].rects[0]
        assert rect.rotated is True
        assert (rect.width, rect.height) == (200, 600)

    def test_tall_copy_escapes_cramped_row(self) -> None:
        """A tall copy skips a nearly full row instead of raising it."""
        packer = ShelfPacker(_config(sort=SortKey.WIDTH))

        result = packer.pack(
            [
                PanelSpec(width=700, height=100, panel_id="wide"),
                PanelSpec(width=200, height=400, panel_id="tall"),
            ]
        )

        by_id = {r.copy.base_id: (r.x, r.y) for r in result.sheets[0].rects}
        assert by_id == {"wide": (0, 0), "tall": (0, 100)}

    def test_strategy_name(self) -> None:
        assert ShelfPacker.name == "shelf"


class TestBestFitShelfPacker:
    """Tests for the best-fit shelf packer."""

    def test_returns_to_earlier_row(self, stepped_panels: list[PanelSpec]) -> None:
        result = BestFitShelfPacker(_config()).pack(stepped_panels)

        by_id = {r.copy.base_id: (r.x, r.y) for r in result.sheets[0].rects}
        assert by_id == {"a": (0, 0), "b": (0, 400), "c": (600, 0)}

    def test_earlier_row_does_not_grow(self) -> None:
        """A copy taller than a closed row goes to the last row instead."""
        result = BestFitShelfPacker(_config(sort=SortKey.WIDTH)).pack(
            [
                PanelSpec(width=700, height=100, panel_id="a"),
                PanelSpec(width=600, height=300, panel_id="b"),
                PanelSpec(width=250, height=250, panel_id="c"),
            ]
        )

        by_id = {r.copy.base_id: (r.x, r.y) for r in result.sheets[0].rects}
        # Row 0 is only 100 high, so c lands beside b on row 1.
        assert by_id == {"a": (0, 0), "b": (0, 100), "c": (600, 100)}

    def test_opens_sheet_when_full(self) -> None:
        result = BestFitShelfPacker(_config(height=500)).pack(
            [PanelSpec(width=1000, height=300, quantity=2)]
        )

        assert result.total_sheets == 2

    def test_vertical_grain_needs_long_side_for_new_row(self) -> None:
        # The wide copy must stand on end, so a new row needs 800 and only 50
        # is left under row 0.
        result = BestFitShelfPacker(_config()).pack(
            [
                PanelSpec(width=900, height=950, material="wood-v", panel_id="tall"),
                PanelSpec(width=800, height=150, material="wood-v", panel_id="wide"),
            ]
        )

        assert result.total_sheets == 2
        rect = result.sheets[1].rects[0]
        assert rect.copy.base_id == "wide"
        assert (rect.x, rect.y) == (0, 0)
        assert (rect.width, rect.height) == (150, 800)
        assert rect.rotated

    def test_horizontal_grain_uses_short_side_for_new_row(self) -> None:
        result = BestFitShelfPacker(_config()).pack(
            [
                PanelSpec(width=950, height=900, material="wood-h", panel_id="wide"),
                PanelSpec(width=800, height=40, material="wood-h", panel_id="strip"),
            ]
        )

        assert result.total_sheets == 1
        by_id = {r.copy.base_id: (r.x, r.y) for r in result.sheets[0].rects}
        assert by_id == {"wide": (0, 0), "strip": (0, 900)}

    def test_strategy_name(self) -> None:
        assert BestFitShelfPacker.name == "shelf-best-fit"
