"""Naive row packer used as a waste baseline."""

from __future__ import annotations

from dataclasses import dataclass

from cutplan.domain.value_objects import PanelCopy
from cutplan.infrastructure.bin_packing import (
    EPSILON,
    PackingRun,
    PackingStrategy,
    SheetDraft,
    fits,
)


@dataclass
class _RowCursor:
    """Position of the next copy on the current sheet."""

    sheet: SheetDraft | None = None
    x: float = 0.0
    y: float = 0.0
    row_height: float = 0.0
    row_empty: bool = True


class NaivePacker(PackingStrategy):
    """Left-to-right row filling in input order.

    No sorting and no rotation: copies are laid out exactly as specified,
    wrapping to a new row when the current one is too narrow and to a new
    sheet when the next row would run off the bottom.
    """

    name = "naive"
    sorts_copies = False

    def _orientations(self, copy: PanelCopy) -> list[tuple[float, float, bool]]:
        return [(copy.width, copy.height, False)]

    def _pack_group(
        self, run: PackingRun, material: str, copies: list[PanelCopy]
    ) -> None:
        sheet_w = self.config.sheet.width
        sheet_h = self.config.sheet.height
        kerf = self.config.kerf
        cursor = _RowCursor()

        for copy in copies:
            w, h = copy.width, copy.height

            if cursor.sheet is None:
                cursor.sheet = run.open_sheet(material)

            if not cursor.row_empty and cursor.x + kerf + w > sheet_w + EPSILON:
                cursor.y += cursor.row_height + kerf
                cursor.x = 0.0
                cursor.row_height = 0.0
                cursor.row_empty = True

            if not fits(w, h, sheet_w, sheet_h - cursor.y):
                cursor = _RowCursor(sheet=run.open_sheet(material))

            x = 0.0 if cursor.row_empty else cursor.x + kerf
            run.place(cursor.sheet, copy, x, cursor.y)

            cursor.x = x + w
            cursor.row_height = max(cursor.row_height, h)
            cursor.row_empty = False
