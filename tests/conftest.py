"""Pytest configuration and shared fixtures for cutplan tests."""

from __future__ import annotations

import pytest

from cutplan.domain.value_objects import PanelSpec
from cutplan.infrastructure.bin_packing import (
    PackingConfig,
    PackResult,
    PlacedRect,
    SheetConfig,
)

# Geometry checks allow for float noise from kerf arithmetic.
TOLERANCE = 1e-6


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Geometry helpers
# =============================================================================


def within_bounds(result: PackResult) -> bool:
    """Every placed rect lies inside its sheet."""
    return all(
        rect.x >= -TOLERANCE
        and rect.y >= -TOLERANCE
        and rect.right <= result.sheet_width + TOLERANCE
        and rect.bottom <= result.sheet_height + TOLERANCE
        for sheet in result.sheets
        for rect in sheet.rects
    )


def kerf_separated(a: PlacedRect, b: PlacedRect, kerf: float) -> bool:
    """True if the rects are at least ``kerf`` apart along some axis."""
    return (
        a.right + kerf <= b.x + TOLERANCE
        or b.right + kerf <= a.x + TOLERANCE
        or a.bottom + kerf <= b.y + TOLERANCE
        or b.bottom + kerf <= a.y + TOLERANCE
    )


def no_overlap(result: PackResult, kerf: float) -> bool:
    """No two rects on the same sheet come closer than ``kerf``."""
    for sheet in result.sheets:
        rects = sheet.rects
        for i in range(len(rects)):
            for j in range(i + 1, len(rects)):
                if not kerf_separated(rects[i], rects[j], kerf):
                    return False
    return True


def area_preserved(result: PackResult, panels: list[PanelSpec]) -> bool:
    """Placed plus unplaced area equals the requested area."""
    expected = sum(p.area for p in panels)
    return abs(result.placed_area + result.unplaced_area - expected) <= TOLERANCE


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def standard_sheet() -> SheetConfig:
    """Standard 2440x1220 board."""
    return SheetConfig(width=2440, height=1220)


@pytest.fixture
def packing_config(standard_sheet: SheetConfig) -> PackingConfig:
    """Default packing configuration with a 3.2 kerf."""
    return PackingConfig(sheet=standard_sheet, kerf=3.2, allow_rotate=True)


@pytest.fixture
def mixed_panels() -> list[PanelSpec]:
    """A small cabinet job spanning several materials."""
    return [
        PanelSpec(width=600, height=1200, quantity=2, material="plywood", panel_id="side"),
        PanelSpec(width=1100, height=600, quantity=2, material="plywood", panel_id="top"),
        PanelSpec(width=400, height=500, quantity=3, material="mdf", panel_id="drawer"),
        PanelSpec(width=800, height=300, quantity=2, material="wood-h", panel_id="shelf"),
        PanelSpec(width=300, height=900, quantity=2, material="wood-v", panel_id="door"),
        PanelSpec(width=500, height=500, quantity=1, material="acrylic", panel_id="window"),
    ]
