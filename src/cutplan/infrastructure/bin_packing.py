"""Bin packing data models and the shared packing strategy base.

This module provides the configuration, result types and per-run state used
by every placement strategy. Strategies live in ``cutplan.infrastructure.packers``
and differ only in how they place one material group's copies onto sheets.

Result dataclasses are frozen (immutable); the mutable bookkeeping of a run
is kept in ``PackingRun``, which is created per ``pack()`` call and never
shared between calls.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import ClassVar, Sequence

from cutplan.domain.services import (
    candidate_orientations,
    expand_copies,
    group_by_material,
    sort_copies,
)
from cutplan.domain.value_objects import PanelCopy, PanelSpec, SortKey

logger = logging.getLogger(__name__)

# Tolerance for floating point comparisons of lengths (kerf is often 3.2).
EPSILON = 1e-9


@dataclass(frozen=True)
class SheetConfig:
    """Configuration for sheet material dimensions.

    Standard sheet sizes:
    - 2440x1220 mm - most common plywood/MDF board
    - 1525x1525 mm - Baltic birch

    Attributes:
        width: Sheet width (default 2440.0).
        height: Sheet height (default 1220.0).
    """

    width: float = 2440.0
    height: float = 1220.0

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("Sheet width must be positive")
        if self.height <= 0:
            raise ValueError("Sheet height must be positive")

    @property
    def area(self) -> float:
        """Total sheet area."""
        return self.width * self.height


@dataclass(frozen=True)
class PackingConfig:
    """Configuration for a packing run.

    Attributes:
        sheet: Sheet dimensions.
        kerf: Saw blade kerf; placed panels are kept at least this far apart.
        allow_rotate: Global rotation toggle. Grain rules may still force a
            rotation.
        sort: Primary ordering applied by the sorting strategies.
    """

    sheet: SheetConfig = field(default_factory=SheetConfig)
    kerf: float = 3.2
    allow_rotate: bool = True
    sort: SortKey = SortKey.HEIGHT

    def __post_init__(self) -> None:
        if self.kerf < 0:
            raise ValueError("Kerf must be non-negative")
        object.__setattr__(self, "sort", SortKey(self.sort))


@dataclass(frozen=True)
class PlacedRect:
    """A panel copy placed at a specific position on a sheet.

    Coordinates are sheet-local with the origin at the top-left corner.

    Attributes:
        rect_id: Identity of the placement (``s<sheet>-i<copy index>``).
        copy: The panel copy being placed.
        x: Left edge.
        y: Top edge.
        width: Placed width (after rotation).
        height: Placed height (after rotation).
        rotated: True if the copy is turned 90 degrees from its spec.
    """

    rect_id: str
    copy: PanelCopy
    x: float
    y: float
    width: float
    height: float
    rotated: bool = False

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def right(self) -> float:
        """X coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Y coordinate of the bottom edge."""
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def label(self) -> str:
        return self.copy.label

    @property
    def material(self) -> str:
        return self.copy.material


@dataclass(frozen=True)
class SheetLayout:
    """Layout of copies on a single sheet.

    Attributes:
        index: Zero-based index of this sheet in the packing result.
        material: Material of every copy on the sheet.
        rects: Placed copies.
    """

    index: int
    material: str
    rects: tuple[PlacedRect, ...]

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def used_area(self) -> float:
        """Total area covered by placed copies."""
        return sum(r.area for r in self.rects)

    @property
    def piece_count(self) -> int:
        return len(self.rects)


@dataclass(frozen=True)
class UnplacedCopy:
    """A copy that could not be placed on any sheet.

    Attributes:
        copy: The copy that was skipped.
        reason: Human readable explanation.
    """

    copy: PanelCopy
    reason: str


@dataclass(frozen=True)
class PackResult:
    """Complete result of one packing run.

    Attributes:
        sheets: Sheet layouts in allocation order.
        sheet_width: Width of every sheet.
        sheet_height: Height of every sheet.
        total_panel_area: Area of every input copy, placed or not.
        unplaced: Copies that fit on no sheet.
        strategy: Name of the strategy that produced the result.
    """

    sheets: tuple[SheetLayout, ...]
    sheet_width: float
    sheet_height: float
    total_panel_area: float
    unplaced: tuple[UnplacedCopy, ...] = ()
    strategy: str = ""

    @property
    def total_sheets(self) -> int:
        return len(self.sheets)

    @property
    def sheet_area(self) -> float:
        """Area of a single sheet."""
        return self.sheet_width * self.sheet_height

    @property
    def placed_area(self) -> float:
        return sum(sheet.used_area for sheet in self.sheets)

    @property
    def unplaced_area(self) -> float:
        return sum(u.copy.area for u in self.unplaced)

    @property
    def placed_count(self) -> int:
        return sum(sheet.piece_count for sheet in self.sheets)

    @property
    def unplaced_ids(self) -> tuple[str, ...]:
        """Labels of the copies that could not be placed."""
        return tuple(u.copy.label for u in self.unplaced)

    @property
    def is_complete(self) -> bool:
        """True when every copy was placed."""
        return not self.unplaced

    def sheets_for(self, material: str) -> tuple[SheetLayout, ...]:
        """Sheets holding the given material."""
        return tuple(sheet for sheet in self.sheets if sheet.material == material)

    @property
    def sheets_by_material(self) -> dict[str, int]:
        """Sheet count per material, in first-seen order."""
        counts: dict[str, int] = {}
        for sheet in self.sheets:
            counts[sheet.material] = counts.get(sheet.material, 0) + 1
        return counts


@dataclass
class SheetDraft:
    """A sheet being filled during a run."""

    index: int
    material: str
    rects: list[PlacedRect] = field(default_factory=list)


@dataclass
class PackingRun:
    """Mutable state owned by a single ``pack()`` call.

    Strategies open sheets and record placements through the run so that
    sheet numbering stays sequential across material groups.

    Attributes:
        config: The packing configuration for this run.
        sheets: Sheets opened so far, in allocation order.
        unplaced: Copies rejected so far.
    """

    config: PackingConfig
    sheets: list[SheetDraft] = field(default_factory=list)
    unplaced: list[UnplacedCopy] = field(default_factory=list)

    def open_sheet(self, material: str) -> SheetDraft:
        sheet = SheetDraft(index=len(self.sheets), material=material)
        self.sheets.append(sheet)
        logger.debug("Opened sheet %d for %s", sheet.index, material)
        return sheet

    def place(
        self,
        sheet: SheetDraft,
        copy: PanelCopy,
        x: float,
        y: float,
        rotated: bool = False,
    ) -> PlacedRect:
        """Record a copy at ``(x, y)`` on ``sheet``.

        Args:
            sheet: Sheet receiving the copy; must hold the copy's material.
            copy: The copy to place.
            x: Left edge.
            y: Top edge.
            rotated: Whether the copy is turned 90 degrees.

        Returns:
            The recorded placement.
        """
        if sheet.material != copy.material:
            raise ValueError(
                f"Copy {copy.label} ({copy.material}) cannot go on a "
                f"{sheet.material} sheet"
            )
        width, height = (copy.height, copy.width) if rotated else (copy.width, copy.height)
        rect = PlacedRect(
            rect_id=f"s{sheet.index}-i{copy.index}",
            copy=copy,
            x=x,
            y=y,
            width=width,
            height=height,
            rotated=rotated,
        )
        sheet.rects.append(rect)
        logger.debug(
            "Placed %s at (%s, %s) on sheet %d as %sx%s%s",
            copy.label,
            x,
            y,
            sheet.index,
            width,
            height,
            " (rotated)" if rotated else "",
        )
        return rect

    def reject(self, copy: PanelCopy, reason: str) -> None:
        """Record a copy that cannot be placed."""
        logger.warning(
            "Panel %s (%sx%s %s) not placed: %s",
            copy.label,
            copy.width,
            copy.height,
            copy.material,
            reason,
        )
        self.unplaced.append(UnplacedCopy(copy=copy, reason=reason))

    def snapshot(self, strategy: str, total_panel_area: float) -> PackResult:
        """Freeze the run into a PackResult.

        Sheets left empty are dropped and the remaining sheets renumbered.
        """
        layouts: list[SheetLayout] = []
        for draft in self.sheets:
            if not draft.rects:
                continue
            index = len(layouts)
            rects = tuple(
                rect
                if index == draft.index
                else replace(rect, rect_id=f"s{index}-i{rect.copy.index}")
                for rect in draft.rects
            )
            layouts.append(SheetLayout(index=index, material=draft.material, rects=rects))

        return PackResult(
            sheets=tuple(layouts),
            sheet_width=self.config.sheet.width,
            sheet_height=self.config.sheet.height,
            total_panel_area=total_panel_area,
            unplaced=tuple(sorted(self.unplaced, key=lambda u: u.copy.index)),
            strategy=strategy,
        )


def fits(width: float, height: float, avail_width: float, avail_height: float) -> bool:
    """Check whether a footprint fits an available extent."""
    return width <= avail_width + EPSILON and height <= avail_height + EPSILON


class PackingStrategy(ABC):
    """Base class for placement strategies.

    ``pack`` expands the panel specs, partitions them by material and hands
    each group to ``_pack_group``. Copies that fit on no empty sheet are
    reported as unplaced before the strategy sees them.

    Attributes:
        name: Registry name of the strategy.
        sorts_copies: Whether copies are sorted by ``config.sort`` before
            placement.
        config: Packing configuration.
    """

    name: ClassVar[str] = ""
    sorts_copies: ClassVar[bool] = True

    def __init__(self, config: PackingConfig | None = None) -> None:
        self.config = config or PackingConfig()

    def pack(self, panels: Sequence[PanelSpec]) -> PackResult:
        """Pack panels onto sheets.

        Args:
            panels: Panel specs to cut (quantity may be > 1).

        Returns:
            PackResult with one or more single-material sheets and any
            copies that could not be placed.
        """
        copies = expand_copies(panels)
        total_panel_area = sum(copy.area for copy in copies)
        run = PackingRun(config=self.config)

        for material, group in group_by_material(copies).items():
            ordered = self._order(group)
            placeable: list[PanelCopy] = []
            for copy in ordered:
                if self._fits_empty_sheet(copy):
                    placeable.append(copy)
                else:
                    run.reject(copy, self._oversize_reason())
            logger.debug(
                "%s: packing %d %s copies", self.name, len(placeable), material
            )
            self._pack_group(run, material, placeable)

        result = run.snapshot(self.name, total_panel_area)
        logger.info(
            "%s: %d copies -> %d sheets (%d unplaced)",
            self.name,
            len(copies),
            result.total_sheets,
            len(result.unplaced),
        )
        return result

    @abstractmethod
    def _pack_group(
        self, run: PackingRun, material: str, copies: list[PanelCopy]
    ) -> None:
        """Place one material group's copies onto sheets of that material."""

    def _order(self, copies: list[PanelCopy]) -> list[PanelCopy]:
        if not self.sorts_copies:
            return list(copies)
        return sort_copies(copies, self.config.sort)

    def _orientations(self, copy: PanelCopy) -> list[tuple[float, float, bool]]:
        """Allowed ``(width, height, rotated)`` footprints for a copy."""
        return candidate_orientations(copy, self.config.allow_rotate)

    def _fits_empty_sheet(self, copy: PanelCopy) -> bool:
        sheet = self.config.sheet
        return any(
            fits(w, h, sheet.width, sheet.height)
            for w, h, _ in self._orientations(copy)
        )

    def _oversize_reason(self) -> str:
        sheet = self.config.sheet
        return (
            f"does not fit a {sheet.width}x{sheet.height} sheet "
            f"in any allowed orientation"
        )
