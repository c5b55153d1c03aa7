"""Tabular and structured export of packing results.

Output formats: csv (one row per placed panel), json (full result including
unplaced panels and waste figures).
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from cutplan.infrastructure.bin_packing import PackResult, PlacedRect
from cutplan.infrastructure.waste import summarize_waste

CSV_HEADER: tuple[str, ...] = (
    "sheet_index",
    "material",
    "base_id",
    "base_number",
    "copy_number",
    "label",
    "x",
    "y",
    "w",
    "h",
    "rotated",
)


class CsvFormatter:
    """Formats a packing result as CSV, one row per placed panel."""

    def format(self, result: PackResult) -> str:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for sheet in result.sheets:
            for rect in sheet.rects:
                copy = rect.copy
                writer.writerow(
                    [
                        sheet.index,
                        sheet.material,
                        copy.base_id,
                        copy.base_index + 1,
                        copy.copy_index + 1,
                        # Leading quote stops spreadsheets reading "1-2" as a date
                        f"'{rect.label}",
                        f"{rect.x:g}",
                        f"{rect.y:g}",
                        f"{rect.width:g}",
                        f"{rect.height:g}",
                        "true" if rect.rotated else "false",
                    ]
                )
        return output.getvalue()


class JsonFormatter:
    """Formats a packing result as JSON."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def format(self, result: PackResult) -> str:
        return json.dumps(self.to_dict(result), indent=self.indent)

    def to_dict(self, result: PackResult) -> dict[str, Any]:
        summary = summarize_waste(result)
        return {
            "strategy": result.strategy,
            "sheet": {"width": result.sheet_width, "height": result.sheet_height},
            "total_sheets": result.total_sheets,
            "total_panel_area": result.total_panel_area,
            "placed_area": result.placed_area,
            "waste_percentage": round(summary.total_waste_percentage, 4),
            "sheets": [
                {
                    "index": sheet.index,
                    "material": sheet.material,
                    "waste_percentage": round(waste, 4),
                    "rects": [self._format_rect(rect) for rect in sheet.rects],
                }
                for sheet, waste in zip(result.sheets, summary.sheet_waste_percentages)
            ],
            "unplaced": [
                {
                    "base_id": u.copy.base_id,
                    "label": u.copy.label,
                    "width": u.copy.width,
                    "height": u.copy.height,
                    "material": u.copy.material,
                    "reason": u.reason,
                }
                for u in result.unplaced
            ],
        }

    def _format_rect(self, rect: PlacedRect) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": rect.rect_id,
            "base_id": rect.copy.base_id,
            "label": rect.label,
            "x": rect.x,
            "y": rect.y,
            "w": rect.width,
            "h": rect.height,
            "rotated": rect.rotated,
        }
        if rect.copy.display_label:
            data["name"] = rect.copy.display_label
        return data
