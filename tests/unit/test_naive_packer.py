"""Unit tests for NaivePacker."""

from __future__ import annotations

import pytest

from cutplan.domain.value_objects import PanelSpec
from cutplan.infrastructure.bin_packing import PackingConfig, SheetConfig
from cutplan.infrastructure.packers import NaivePacker


@pytest.fixture
def packer() -> NaivePacker:
    return NaivePacker(PackingConfig(sheet=SheetConfig(width=1000, height=500), kerf=10))


def _positions(result):
    return [(r.x, r.y) for sheet in result.sheets for r in sheet.rects]


class TestNaivePacker:
    """Tests for the row-filling baseline."""

    def test_fills_row_then_wraps(self, packer: NaivePacker) -> None:
        result = packer.pack([PanelSpec(width=400, height=200, quantity=3)])

        assert _positions(result) == [(0, 0), (410, 0), (0, 210)]
        assert result.total_sheets == 1

    def test_keeps_input_order(self, packer: NaivePacker) -> None:
        result = packer.pack(
            [
                PanelSpec(width=100, height=100, panel_id="small"),
                PanelSpec(width=300, height=300, panel_id="large"),
            ]
        )

        rects = result.sheets[0].rects
        assert [r.copy.base_id for r in rects] == ["small", "large"]
        assert rects[1].x == 110

    def test_opens_new_sheet_when_rows_run_out(self, packer: NaivePacker) -> None:
        result = packer.pack([PanelSpec(width=1000, height=300, quantity=2)])

        assert result.total_sheets == 2
        assert _positions(result) == [(0, 0), (0, 0)]

    def test_never_rotates(self) -> None:
        packer = NaivePacker(
            PackingConfig(sheet=SheetConfig(width=500, height=1000), allow_rotate=True)
        )

        result = packer.pack([PanelSpec(width=600, height=300)])

        assert result.total_sheets == 0
        assert result.unplaced_ids == ("1-1",)

    def test_strategy_name(self, packer: NaivePacker) -> None:
        assert packer.pack([PanelSpec(width=10, height=10)]).strategy == "naive"
