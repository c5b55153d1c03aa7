"""Shelf packers: first-fit and best-fit row filling.

A shelf (row) is a horizontal band filled left to right. Its height is the
tallest copy placed on it; the next row starts one kerf below. Copies are
sorted by the configured key before placement and may be rotated where the
grain policy allows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cutplan.domain.services import min_height_allowed
from cutplan.domain.value_objects import PanelCopy
from cutplan.infrastructure.bin_packing import (
    EPSILON,
    PackingRun,
    PackingStrategy,
    SheetDraft,
    fits,
)

logger = logging.getLogger(__name__)

# Escape valve: a row with less than this share of the sheet width left is
# considered cramped.
CRAMPED_ROW_FRACTION = 0.4
# An orientation is "notably tall" when its height exceeds width by this factor.
TALL_ASPECT_RATIO = 1.5

Orientation = tuple[float, float, bool]


@dataclass
class _Row:
    """Internal shelf representation.

    Attributes:
        y: Top edge of the row.
        height: Height of the tallest copy on the row.
        cursor: Right edge of the last copy placed on the row.
        empty: True until the first copy is placed.
    """

    y: float
    height: float = 0.0
    cursor: float = 0.0
    empty: bool = True

    def space(self, sheet_width: float, kerf: float) -> float:
        """Width still available for another copy."""
        if self.empty:
            return sheet_width
        return sheet_width - (self.cursor + kerf)

    def next_x(self, kerf: float) -> float:
        return 0.0 if self.empty else self.cursor + kerf


class _ShelfPackerBase(PackingStrategy):
    """Placement helpers shared by the shelf variants."""

    def _place_on_row(
        self,
        run: PackingRun,
        sheet: SheetDraft,
        row: _Row,
        copy: PanelCopy,
        orientation: Orientation,
    ) -> None:
        w, h, rotated = orientation
        x = row.next_x(self.config.kerf)
        run.place(sheet, copy, x, row.y, rotated)
        row.cursor = x + w
        row.height = max(row.height, h)
        row.empty = False

    def _best_on_fresh_row(
        self, options: list[Orientation], row_y: float
    ) -> Orientation | None:
        """Pick the orientation for the first copy of a row starting at ``row_y``."""
        sheet = self.config.sheet
        feasible = [o for o in options if fits(o[0], o[1], sheet.width, sheet.height - row_y)]
        if not feasible:
            return None
        return min(feasible, key=lambda o: (o[1], sheet.width - o[0], o[2]))


@dataclass
class _FirstFitState:
    """Mutable state of a first-fit run for one material group."""

    sheet: SheetDraft | None = None
    row: _Row = field(default_factory=lambda: _Row(y=0.0))


class ShelfPacker(_ShelfPackerBase):
    """First-fit shelf packer.

    Keeps a single active row per sheet. When a copy does not fit the row it
    wraps to a new row, or to a new sheet once vertical space runs out.
    """

    name = "shelf"

    def _pack_group(
        self, run: PackingRun, material: str, copies: list[PanelCopy]
    ) -> None:
        state = _FirstFitState()
        for copy in copies:
            if state.sheet is None:
                self._new_sheet(run, material, state)
            self._place_copy(run, material, state, copy)

    def _new_sheet(self, run: PackingRun, material: str, state: _FirstFitState) -> None:
        state.sheet = run.open_sheet(material)
        state.row = _Row(y=0.0)

    def _wrap_row(self, state: _FirstFitState) -> None:
        row = state.row
        state.row = _Row(y=row.y + row.height + self.config.kerf)

    def _row_options(self, state: _FirstFitState, options: list[Orientation]) -> list[Orientation]:
        space = state.row.space(self.config.sheet.width, self.config.kerf)
        available_height = self.config.sheet.height - state.row.y
        return [o for o in options if fits(o[0], o[1], space, available_height)]

    def _choose(self, state: _FirstFitState, feasible: list[Orientation]) -> Orientation | None:
        """Prefer the smaller resulting row height, then the smaller leftover width."""
        if not feasible:
            return None
        space = state.row.space(self.config.sheet.width, self.config.kerf)
        return min(
            feasible,
            key=lambda o: (max(state.row.height, o[1]), space - o[0], o[2]),
        )

    def _escape_orientation(
        self,
        state: _FirstFitState,
        options: list[Orientation],
        choice: Orientation | None,
    ) -> Orientation | None:
        """Orientation for a fresh row when ``choice`` would lock a tall copy
        into a cramped row, otherwise None.

        Applies when the current row has less than ``CRAMPED_ROW_FRACTION`` of
        the sheet width left and the chosen orientation is notably taller than
        wide and taller than the row.
        """
        row = state.row
        sheet = self.config.sheet
        if row.empty or choice is None:
            return None
        if row.space(sheet.width, self.config.kerf) >= CRAMPED_ROW_FRACTION * sheet.width:
            return None
        w, h, _ = choice
        # Judged on the orientation picked for this row, not on the copy as specified.
        if h <= TALL_ASPECT_RATIO * w or h <= row.height + EPSILON:
            return None
        return self._best_on_fresh_row(options, row.y + row.height + self.config.kerf)

    def _place_copy(
        self,
        run: PackingRun,
        material: str,
        state: _FirstFitState,
        copy: PanelCopy,
    ) -> None:
        options = self._orientations(copy)
        choice = self._choose(state, self._row_options(state, options))

        escape = self._escape_orientation(state, options, choice)
        if escape is not None:
            logger.debug("Row cramped, moving tall copy %s to a new row", copy.label)
            self._wrap_row(state)
            self._place_on_row(run, state.sheet, state.row, copy, escape)
            return

        if choice is None:
            self._wrap_row(state)
            choice = self._best_on_fresh_row(options, state.row.y)
        if choice is None:
            self._new_sheet(run, material, state)
            choice = self._best_on_fresh_row(options, state.row.y)
        if choice is None:
            run.reject(copy, "no row on an empty sheet can hold it")
            return

        self._place_on_row(run, state.sheet, state.row, copy, choice)


@dataclass
class _RowSheet:
    """A sheet and its independent rows."""

    draft: SheetDraft
    rows: list[_Row] = field(default_factory=list)

    def next_row_y(self, kerf: float) -> float:
        if not self.rows:
            return 0.0
        last = self.rows[-1]
        return last.y + last.height + kerf


@dataclass
class _BestFitState:
    """Mutable state of a best-fit run for one material group."""

    sheets: list[_RowSheet] = field(default_factory=list)


class BestFitShelfPacker(_ShelfPackerBase):
    """Best-fit shelf packer.

    Every row of every open sheet in the material group stays available.
    Each copy goes to the row and orientation that leaves the least width
    unused; a new row or sheet is opened only when no row admits it.
    """

    name = "shelf-best-fit"

    def _pack_group(
        self, run: PackingRun, material: str, copies: list[PanelCopy]
    ) -> None:
        state = _BestFitState()
        for copy in copies:
            self._place_copy(run, material, state, copy)

    def _row_admits(self, sheet: _RowSheet, row: _Row, w: float, h: float) -> bool:
        space = row.space(self.config.sheet.width, self.config.kerf)
        if w > space + EPSILON:
            return False
        if row is sheet.rows[-1]:
            # Only the last row on a sheet may grow taller.
            return row.y + h <= self.config.sheet.height + EPSILON
        return h <= row.height + EPSILON

    def _best_row(
        self, state: _BestFitState, options: list[Orientation]
    ) -> tuple[_RowSheet, _Row, Orientation] | None:
        best = None
        best_key = None
        for sheet_pos, sheet in enumerate(state.sheets):
            for row_pos, row in enumerate(sheet.rows):
                space = row.space(self.config.sheet.width, self.config.kerf)
                for option in options:
                    w, h, rotated = option
                    if not self._row_admits(sheet, row, w, h):
                        continue
                    key = (space - w, sheet_pos, row_pos, rotated)
                    if best_key is None or key < best_key:
                        best_key = key
                        best = (sheet, row, option)
        return best

    def _open_row(
        self,
        run: PackingRun,
        material: str,
        state: _BestFitState,
        copy: PanelCopy,
        options: list[Orientation],
    ) -> tuple[_RowSheet, _Row, Orientation] | None:
        kerf = self.config.kerf
        sheet_height = self.config.sheet.height

        if state.sheets:
            sheet = state.sheets[-1]
            row_y = sheet.next_row_y(kerf)
            if min_height_allowed(copy) <= sheet_height - row_y + EPSILON:
                choice = self._best_on_fresh_row(options, row_y)
                if choice is not None:
                    row = _Row(y=row_y)
                    sheet.rows.append(row)
                    return sheet, row, choice

        choice = self._best_on_fresh_row(options, 0.0)
        if choice is None:
            return None
        sheet = _RowSheet(draft=run.open_sheet(material))
        state.sheets.append(sheet)
        row = _Row(y=0.0)
        sheet.rows.append(row)
        return sheet, row, choice

    def _place_copy(
        self,
        run: PackingRun,
        material: str,
        state: _BestFitState,
        copy: PanelCopy,
    ) -> None:
        options = self._orientations(copy)
        target = self._best_row(state, options)
        if target is None:
            target = self._open_row(run, material, state, copy, options)
        if target is None:
            run.reject(copy, "no row on an empty sheet can hold it")
            return
        sheet, row, orientation = target
        self._place_on_row(run, sheet.draft, row, copy, orientation)
