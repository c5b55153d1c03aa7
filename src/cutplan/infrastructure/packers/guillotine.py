"""Guillotine packer over a list of free rectangles.

Each sheet starts as one free rectangle. A copy is placed in the top-left
corner of the free rectangle it fits best (best-area-fit), and that
rectangle is split by two straight cuts into at most two new free
rectangles. Every cut removes one kerf of material, so the remnants never
touch the placed copy.

Pruning and merging compare every pair of free rectangles. That is fine for
the tens to low hundreds of panels a sheet holds; a spatial index would be
the next step for thousands.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cutplan.domain.services import allowed_orientation
from cutplan.domain.value_objects import PanelCopy
from cutplan.infrastructure.bin_packing import (
    EPSILON,
    PackingRun,
    PackingStrategy,
    SheetDraft,
    fits,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FreeRect:
    """An empty axis-aligned region of a sheet."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_degenerate(self) -> bool:
        return self.width <= EPSILON or self.height <= EPSILON

    def contains(self, other: FreeRect) -> bool:
        return (
            other.x >= self.x - EPSILON
            and other.y >= self.y - EPSILON
            and other.right <= self.right + EPSILON
            and other.bottom <= self.bottom + EPSILON
        )


@dataclass
class _GuillotineState:
    """Mutable state of a guillotine run for one material group."""

    sheet: SheetDraft | None = None
    free: list[FreeRect] = field(default_factory=list)


@dataclass(frozen=True)
class _Fit:
    free_index: int
    width: float
    height: float
    rotated: bool
    x: float
    y: float
    score: tuple[float, float, float, float]


def split_free_rect(
    free: FreeRect, width: float, height: float, kerf: float
) -> list[FreeRect]:
    """Split ``free`` around a ``width`` x ``height`` copy in its top-left corner.

    Both cut orders are evaluated:

    - right-then-bottom: a full-height strip to the right, then the area
      below the copy
    - bottom-then-right: a full-width strip below, then the area to the
      right of the copy

    The split keeping more free area wins (with kerf the two differ); ties
    go to the split with the larger single remnant. Degenerate remnants are
    dropped.
    """
    leftover_w = free.width - width - kerf
    leftover_h = free.height - height - kerf

    right_then_bottom = [
        FreeRect(free.x + width + kerf, free.y, leftover_w, free.height),
        FreeRect(free.x, free.y + height + kerf, width, leftover_h),
    ]
    bottom_then_right = [
        FreeRect(free.x, free.y + height + kerf, free.width, leftover_h),
        FreeRect(free.x + width + kerf, free.y, leftover_w, height),
    ]

    def score(rects: list[FreeRect]) -> tuple[float, float]:
        kept = [r for r in rects if not r.is_degenerate]
        return (
            sum(r.area for r in kept),
            max((r.area for r in kept), default=0.0),
        )

    rtb_score = score(right_then_bottom)
    btr_score = score(bottom_then_right)
    chosen = right_then_bottom
    if btr_score[0] > rtb_score[0] + EPSILON or (
        abs(btr_score[0] - rtb_score[0]) <= EPSILON and btr_score[1] > rtb_score[1] + EPSILON
    ):
        chosen = bottom_then_right
    return [r for r in chosen if not r.is_degenerate]


def prune_contained(free: list[FreeRect]) -> list[FreeRect]:
    """Drop free rectangles wholly contained in another one."""
    kept: list[FreeRect] = []
    for i, rect in enumerate(free):
        contained = any(
            other.contains(rect) and (not rect.contains(other) or j < i)
            for j, other in enumerate(free)
            if j != i
        )
        if not contained:
            kept.append(rect)
    return kept


def _merge_pair(a: FreeRect, b: FreeRect) -> FreeRect | None:
    """Merge two free rectangles sharing a full edge, or return None."""
    same_rows = abs(a.y - b.y) <= EPSILON and abs(a.height - b.height) <= EPSILON
    if same_rows:
        if abs(a.right - b.x) <= EPSILON:
            return FreeRect(a.x, a.y, b.right - a.x, a.height)
        if abs(b.right - a.x) <= EPSILON:
            return FreeRect(b.x, b.y, a.right - b.x, a.height)
    same_columns = abs(a.x - b.x) <= EPSILON and abs(a.width - b.width) <= EPSILON
    if same_columns:
        if abs(a.bottom - b.y) <= EPSILON:
            return FreeRect(a.x, a.y, a.width, b.bottom - a.y)
        if abs(b.bottom - a.y) <= EPSILON:
            return FreeRect(a.x, b.y, a.width, a.bottom - b.y)
    return None


def merge_free_rects(free: list[FreeRect]) -> list[FreeRect]:
    """Repeatedly merge edge-sharing free rectangles until none remain."""
    rects = list(free)
    merged = True
    while merged:
        merged = False
        for i in range(len(rects)):
            for j in range(i + 1, len(rects)):
                combined = _merge_pair(rects[i], rects[j])
                if combined is not None:
                    rects[i] = combined
                    del rects[j]
                    merged = True
                    break
            if merged:
                break
    return rects


class GuillotinePacker(PackingStrategy):
    """Best-area-fit guillotine packer.

    Produces layouts where every copy can be freed by edge-to-edge cuts,
    suitable for panel saws and table saws.
    """

    name = "guillotine"

    def _pack_group(
        self, run: PackingRun, material: str, copies: list[PanelCopy]
    ) -> None:
        state = _GuillotineState()
        for copy in copies:
            fit = self._find_fit(state, copy) if state.sheet is not None else None
            if fit is None:
                self._new_sheet(run, material, state)
                fit = self._find_fit(state, copy)
            if fit is None:
                run.reject(copy, "no free rectangle on an empty sheet can hold it")
                continue
            run.place(state.sheet, copy, fit.x, fit.y, fit.rotated)
            self._update_free(state, fit)

    def _new_sheet(self, run: PackingRun, material: str, state: _GuillotineState) -> None:
        sheet = self.config.sheet
        state.sheet = run.open_sheet(material)
        state.free = [FreeRect(0.0, 0.0, sheet.width, sheet.height)]

    def _best_for(
        self, free: list[FreeRect], width: float, height: float, rotated: bool
    ) -> _Fit | None:
        best: _Fit | None = None
        for index, rect in enumerate(free):
            if not fits(width, height, rect.width, rect.height):
                continue
            leftover_area = rect.area - width * height
            short_side = min(rect.width - width, rect.height - height)
            fit = _Fit(
                free_index=index,
                width=width,
                height=height,
                rotated=rotated,
                x=rect.x,
                y=rect.y,
                score=(leftover_area, short_side, rect.y, rect.x),
            )
            if best is None or fit.score < best.score:
                best = fit
        return best

    def _find_fit(self, state: _GuillotineState, copy: PanelCopy) -> _Fit | None:
        """Choose a free rectangle and orientation for ``copy``.

        The rotated candidate wins when the grain mandates it or when it
        sits strictly higher (then further left) than the normal one.
        """
        allowance = allowed_orientation(copy, self.config.allow_rotate)
        normal = rotated = None
        for w, h, is_rotated in self._orientations(copy):
            fit = self._best_for(state.free, w, h, is_rotated)
            if is_rotated:
                rotated = fit
            else:
                normal = fit

        if rotated is None:
            return normal
        if normal is None or allowance.must_rotate:
            return rotated
        if (rotated.y, rotated.x) < (normal.y, normal.x):
            return rotated
        return normal

    def _update_free(self, state: _GuillotineState, fit: _Fit) -> None:
        chosen = state.free[fit.free_index]
        remnants = split_free_rect(chosen, fit.width, fit.height, self.config.kerf)
        free = state.free[: fit.free_index] + state.free[fit.free_index + 1 :] + remnants
        state.free = merge_free_rects(prune_contained(free))
        logger.debug("Sheet %d now has %d free rectangles", state.sheet.index, len(state.free))
