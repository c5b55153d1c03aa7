"""Skyline packer with bottom-left placement.

The skyline is the filled depth profile of a sheet measured from its top
edge: a list of nodes ``(x, y, width)`` that together cover the sheet width.
A node's ``y`` already includes the kerf below the copies above it. Copies
go to the lowest, then leftmost, position the profile admits.
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
)

logger = logging.getLogger(__name__)

# Sheets whose skyline fragments beyond this many nodes are closed.
MAX_SKYLINE_NODES = 256


@dataclass
class SkylineNode:
    """A horizontal segment of the skyline.

    Attributes:
        x: Left edge of the segment.
        y: Depth from the sheet's top edge at which free space starts.
        width: Segment width.
    """

    x: float
    y: float
    width: float

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass
class _SkylineState:
    """Mutable state of a skyline run for one material group."""

    sheet: SheetDraft | None = None
    nodes: list[SkylineNode] = field(default_factory=list)
    closed: bool = False


@dataclass(frozen=True)
class _Candidate:
    anchor: int
    x: float
    y: float
    width: float
    height: float
    rotated: bool


class SkylinePacker(PackingStrategy):
    """Bottom-left skyline packer.

    For every allowed orientation each skyline node is tried as the left
    anchor. The candidate with the lowest resulting y wins, then the lowest
    x. After placement the overlapped nodes are trimmed, a node is inserted
    below the new copy and equal-depth neighbours are merged.
    """

    name = "skyline"

    def _pack_group(
        self, run: PackingRun, material: str, copies: list[PanelCopy]
    ) -> None:
        state = _SkylineState()
        for copy in copies:
            candidate = None
            if state.sheet is not None and not state.closed:
                candidate = self._find_position(state.nodes, copy)
            if candidate is None:
                self._new_sheet(run, material, state)
                candidate = self._find_position(state.nodes, copy)
            if candidate is None:
                run.reject(copy, "no skyline position on an empty sheet")
                continue

            run.place(state.sheet, copy, candidate.x, candidate.y, candidate.rotated)
            state.nodes = self._update_skyline(state.nodes, candidate)
            if len(state.nodes) > MAX_SKYLINE_NODES:
                logger.debug(
                    "Skyline on sheet %d has %d nodes, closing sheet",
                    state.sheet.index,
                    len(state.nodes),
                )
                state.closed = True

    def _new_sheet(self, run: PackingRun, material: str, state: _SkylineState) -> None:
        state.sheet = run.open_sheet(material)
        state.nodes = [SkylineNode(x=0.0, y=0.0, width=self.config.sheet.width)]
        state.closed = False

    def _find_position(
        self, nodes: list[SkylineNode], copy: PanelCopy
    ) -> _Candidate | None:
        """Find the bottom-left position for a copy on the current skyline."""
        must_rotate = allowed_orientation(copy, self.config.allow_rotate).must_rotate
        best: _Candidate | None = None
        best_key = None
        for w, h, rotated in self._orientations(copy):
            for anchor in range(len(nodes)):
                candidate = self._fit_at(nodes, anchor, w, h, rotated)
                if candidate is None:
                    continue
                key = (
                    candidate.y,
                    candidate.x,
                    rotated != must_rotate,
                    rotated,
                )
                if best_key is None or key < best_key:
                    best = candidate
                    best_key = key
        return best

    def _fit_at(
        self,
        nodes: list[SkylineNode],
        anchor: int,
        width: float,
        height: float,
        rotated: bool,
    ) -> _Candidate | None:
        """Try to rest a ``width`` x ``height`` copy on the skyline at ``anchor``.

        The copy is offset one kerf from the anchor unless the anchor is
        flush with the sheet's left edge. Returns None if it would leave the
        sheet.
        """
        sheet = self.config.sheet
        start = nodes[anchor].x
        gap = self.config.kerf if start > EPSILON else 0.0
        x = start + gap
        if x + width > sheet.width + EPSILON:
            return None

        needed = gap + width
        covered = 0.0
        y = 0.0
        index = anchor
        while covered < needed - EPSILON:
            if index >= len(nodes):
                return None
            node = nodes[index]
            y = max(y, node.y)
            if y + height > sheet.height + EPSILON:
                return None
            covered += node.width
            index += 1

        return _Candidate(
            anchor=anchor, x=x, y=y, width=width, height=height, rotated=rotated
        )

    def _update_skyline(
        self, nodes: list[SkylineNode], placed: _Candidate
    ) -> list[SkylineNode]:
        """Raise the skyline under a newly placed copy.

        The new node spans the kerf gap at the anchor as well as the copy
        itself, so later copies keep their distance on the left side.
        """
        start = nodes[placed.anchor].x
        end = placed.x + placed.width
        new_node = SkylineNode(
            x=start, y=placed.y + placed.height + self.config.kerf, width=end - start
        )

        updated: list[SkylineNode] = []
        inserted = False
        for node in nodes:
            if node.right <= start + EPSILON or node.x >= end - EPSILON:
                if not inserted and node.x >= end - EPSILON:
                    updated.append(new_node)
                    inserted = True
                updated.append(node)
                continue
            if node.x < start - EPSILON:
                updated.append(SkylineNode(x=node.x, y=node.y, width=start - node.x))
            if not inserted:
                updated.append(new_node)
                inserted = True
            if node.right > end + EPSILON:
                updated.append(SkylineNode(x=end, y=node.y, width=node.right - end))
        if not inserted:
            updated.append(new_node)

        return self._merge(updated)

    @staticmethod
    def _merge(nodes: list[SkylineNode]) -> list[SkylineNode]:
        """Merge adjacent nodes of equal depth and drop slivers."""
        merged: list[SkylineNode] = []
        for node in nodes:
            if node.width <= EPSILON:
                continue
            if merged and abs(merged[-1].y - node.y) <= EPSILON:
                last = merged[-1]
                merged[-1] = SkylineNode(x=last.x, y=last.y, width=node.right - last.x)
            else:
                merged.append(node)
        return merged
