"""Cut diagram rendering for packing results.

This module provides SVG and ASCII rendering of sheet layouts showing copy
placements, labels, rotation indicators and waste figures.
"""

from __future__ import annotations

from cutplan.infrastructure.bin_packing import PackResult, PlacedRect, SheetLayout
from cutplan.infrastructure.waste import sheet_waste_percent, total_waste_percent

# Fill colors by panel spec position; later specs use golden-angle hues.
PALETTE: tuple[str, ...] = (
    "#60a5fa",
    "#f472b6",
    "#34d399",
    "#f59e0b",
    "#a78bfa",
    "#fb7185",
    "#22d3ee",
    "#fbbf24",
    "#4ade80",
    "#c084fc",
)


def color_for_index(index: int) -> str:
    """Fill color for the panel spec at ``index``."""
    if index < len(PALETTE):
        return PALETTE[index]
    hue = (index * 137.508) % 360
    return f"hsl({hue:.1f}, 70%, 60%)"


def escape_xml(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


class CutDiagramRenderer:
    """Renders cut diagrams in SVG and ASCII formats.

    SVG coordinates are in sheet units with a ``mm`` document size, so a
    diagram prints at true scale.

    Attributes:
        show_labels: Whether to print copy labels inside each rect.
        show_dimensions: Whether to print copy dimensions below the label.
    """

    def __init__(self, show_labels: bool = True, show_dimensions: bool = False) -> None:
        self.show_labels = show_labels
        self.show_dimensions = show_dimensions

    def render_svg(self, layout: SheetLayout, result: PackResult) -> str:
        """Generate an SVG cut diagram for a single sheet.

        Args:
            layout: Sheet layout with placed copies.
            result: The result the layout belongs to (sheet size and count).

        Returns:
            SVG document as a string.
        """
        width = result.sheet_width
        height = result.sheet_height
        waste = sheet_waste_percent(layout, result.sheet_area)
        title = (
            f"Sheet {layout.index + 1} of {result.total_sheets} - "
            f"{layout.material} - {waste:.1f}% waste"
        )

        parts: list[str] = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}mm" '
            f'height="{height}mm" viewBox="0 0 {width} {height}">',
            f"  <title>{escape_xml(title)}</title>",
            "  <defs>",
            "    <style>",
            "      .label { font: 12px Arial, sans-serif; fill: #111827; }",
            "      .outline { fill: none; stroke: #3f3f46; stroke-width: 0.6; }",
            "      .rect-stroke { fill: none; stroke: #0f172a; stroke-width: 0.4; }",
            "    </style>",
            "  </defs>",
            "",
            "  <!-- Sheet -->",
            f'  <rect x="0" y="0" width="{width}" height="{height}" fill="#f5deb3"/>',
            f'  <rect x="0.3" y="0.3" width="{width - 0.6}" height="{height - 0.6}" '
            f'class="outline"/>',
            "",
            "  <!-- Placed panels -->",
        ]
        for rect in layout.rects:
            parts.append(self._render_rect(rect))
        parts.append("</svg>")
        return "\n".join(parts)

    def render_all_svg(self, result: PackResult) -> list[str]:
        """Generate one SVG document per sheet."""
        return [self.render_svg(layout, result) for layout in result.sheets]

    def _render_rect(self, rect: PlacedRect) -> str:
        fill = color_for_index(rect.copy.base_index)
        svg_parts = [
            "  <g>",
            f'    <rect x="{rect.x}" y="{rect.y}" width="{rect.width}" '
            f'height="{rect.height}" fill="{fill}"/>',
            f'    <rect x="{rect.x + 0.2}" y="{rect.y + 0.2}" '
            f'width="{max(0.0, rect.width - 0.4)}" '
            f'height="{max(0.0, rect.height - 0.4)}" class="rect-stroke"/>',
        ]
        if self.show_labels:
            label = rect.label + (" (R)" if rect.rotated else "")
            svg_parts.append(
                f'    <text class="label" x="{rect.x + 6}" y="{rect.y + 14}">'
                f"{escape_xml(label)}</text>"
            )
        if self.show_dimensions:
            dims = f"{rect.copy.width:g} x {rect.copy.height:g}"
            svg_parts.append(
                f'    <text class="label" x="{rect.x + 6}" y="{rect.y + 28}">{dims}</text>'
            )
        svg_parts.append("  </g>")
        return "\n".join(svg_parts)

    def render_ascii(self, layout: SheetLayout, result: PackResult, width: int = 80) -> str:
        """Generate an ASCII cut diagram for a single sheet.

        Args:
            layout: Sheet layout with placed copies.
            result: The result the layout belongs to.
            width: Terminal width in characters (default 80).

        Returns:
            ASCII string representation of the layout.
        """
        # Reserve 2 chars for borders
        usable_width = width - 2
        scale_x = usable_width / result.sheet_width

        # 0.5 compensates for the character aspect ratio
        aspect_ratio = result.sheet_height / result.sheet_width
        grid_height = max(int(usable_width * aspect_ratio * 0.5), 10)
        scale_y = grid_height / result.sheet_height

        grid = [[" " for _ in range(usable_width)] for _ in range(grid_height)]
        for rect in layout.rects:
            self._draw_rect_ascii(grid, rect, scale_x, scale_y)

        waste = sheet_waste_percent(layout, result.sheet_area)
        lines = [
            f"Sheet {layout.index + 1} of {result.total_sheets} - "
            f"{layout.material} - {waste:.1f}% waste",
            "+" + "-" * usable_width + "+",
        ]
        lines.extend("|" + "".join(row) + "|" for row in grid)
        lines.append("+" + "-" * usable_width + "+")
        return "\n".join(lines)

    def _draw_rect_ascii(
        self,
        grid: list[list[str]],
        rect: PlacedRect,
        scale_x: float,
        scale_y: float,
    ) -> None:
        grid_height = len(grid)
        grid_width = len(grid[0]) if grid else 0
        x1 = max(0, min(int(rect.x * scale_x), grid_width - 1))
        x2 = max(0, min(int(rect.right * scale_x), grid_width - 1))
        y1 = max(0, min(int(rect.y * scale_y), grid_height - 1))
        y2 = max(0, min(int(rect.bottom * scale_y), grid_height - 1))

        for x in range(x1, x2 + 1):
            grid[y1][x] = "-"
            grid[y2][x] = "-"
        for y in range(y1, y2 + 1):
            grid[y][x1] = "|"
            grid[y][x2] = "|"
        for y, x in ((y1, x1), (y1, x2), (y2, x1), (y2, x2)):
            grid[y][x] = "+"

        label_row = y1 + 1
        if label_row < y2:
            label = rect.label + ("R" if rect.rotated else "")
            label = label[: max(0, x2 - x1 - 1)]
            for i, char in enumerate(label):
                grid[label_row][x1 + 1 + i] = char

    def render_all_ascii(self, result: PackResult, width: int = 80) -> str:
        """Generate ASCII diagrams for all sheets followed by a summary."""
        if not result.sheets:
            return "No sheets to display."

        parts: list[str] = []
        for layout in result.sheets:
            parts.append(self.render_ascii(layout, result, width))
            parts.append("")

        parts.append("=" * width)
        parts.append(
            f"SUMMARY: {_plural(result.total_sheets, 'sheet')}, "
            f"{total_waste_percent(result):.1f}% total waste"
        )
        for material, count in result.sheets_by_material.items():
            parts.append(f"  {material}: {_plural(count, 'sheet')}")
        return "\n".join(parts)

    def render_waste_summary(self, result: PackResult) -> str:
        """Generate a text summary of waste and sheet usage."""
        lines: list[str] = [
            "CUT OPTIMIZATION SUMMARY",
            "=" * 40,
            f"Strategy: {result.strategy or 'unknown'}",
            f"Total Sheets: {result.total_sheets}",
            f"Total Waste: {total_waste_percent(result):.1f}%",
            "",
            "Sheets by Material:",
        ]
        for material, count in result.sheets_by_material.items():
            lines.append(f"  {material}: {_plural(count, 'sheet')}")

        lines.append("")
        lines.append("Per-Sheet Details:")
        for layout in result.sheets:
            waste = sheet_waste_percent(layout, result.sheet_area)
            lines.append(
                f"  Sheet {layout.index + 1}: "
                f"{_plural(layout.piece_count, 'piece')}, "
                f"{waste:.1f}% waste ({layout.material})"
            )

        if result.unplaced:
            lines.append("")
            lines.append(f"Unplaced Panels: {len(result.unplaced)}")
            for unplaced in result.unplaced:
                copy = unplaced.copy
                lines.append(
                    f"  {copy.label} ({copy.width:g} x {copy.height:g} "
                    f"{copy.material}): {unplaced.reason}"
                )

        return "\n".join(lines)
