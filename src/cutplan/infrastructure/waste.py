"""Waste and utilization metrics for packing results."""

from __future__ import annotations

from dataclasses import dataclass

from cutplan.infrastructure.bin_packing import PackResult, SheetLayout


@dataclass(frozen=True)
class WasteSummary:
    """Utilization figures for a packing result.

    Attributes:
        total_sheets: Number of sheets used.
        total_waste_percentage: Waste across all sheets (0-100), from the
            placed area.
        requested_waste_percentage: Waste across all sheets (0-100), from
            the area of every requested copy.
        sheet_waste_percentages: Waste per sheet, in sheet order.
        sheets_by_material: Sheet count per material.
        unplaced_count: Copies that could not be placed.
    """

    total_sheets: int
    total_waste_percentage: float
    sheet_waste_percentages: tuple[float, ...]
    sheets_by_material: dict[str, int]
    unplaced_count: int = 0
    requested_waste_percentage: float = 0.0


def sheet_waste_percent(layout: SheetLayout, sheet_area: float) -> float:
    """Percentage of one sheet not covered by placed copies."""
    if sheet_area <= 0:
        return 0.0
    return max(0.0, (sheet_area - layout.used_area) / sheet_area * 100)


def total_waste_percent(result: PackResult) -> float:
    """Percentage of all used sheet area not covered by placed copies.

    Computed from ``result.placed_area``, so it never goes negative and
    reflects the sheets as cut. It matches ``requested_waste_percent`` for
    a complete result and is higher than it otherwise.
    """
    total = result.total_sheets * result.sheet_area
    if total == 0:
        return 0.0
    return (total - result.placed_area) / total * 100


def requested_waste_percent(result: PackResult) -> float:
    """Percentage of used sheet area left over by the requested panels.

    Computed from ``result.total_panel_area``, counting unplaced copies as if
    they had been cut. Clamped at zero when the unplaced area exceeds the
    free area.
    """
    total = result.total_sheets * result.sheet_area
    if total == 0:
        return 0.0
    return max(0.0, (total - result.total_panel_area) / total * 100)


def summarize_waste(result: PackResult) -> WasteSummary:
    """Collect per-sheet and aggregate waste for a result."""
    return WasteSummary(
        total_sheets=result.total_sheets,
        total_waste_percentage=total_waste_percent(result),
        sheet_waste_percentages=tuple(
            sheet_waste_percent(sheet, result.sheet_area) for sheet in result.sheets
        ),
        sheets_by_material=result.sheets_by_material,
        unplaced_count=len(result.unplaced),
        requested_waste_percentage=requested_waste_percent(result),
    )
