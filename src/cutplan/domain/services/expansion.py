"""Panel expansion, material partitioning and copy ordering."""

from __future__ import annotations

import logging
from typing import Sequence

from cutplan.domain.value_objects import PanelCopy, PanelSpec, SortKey

logger = logging.getLogger(__name__)


def expand_copies(panels: Sequence[PanelSpec]) -> list[PanelCopy]:
    """Expand every panel spec into individual copies.

    Copies keep the input order: all copies of the first spec, then all
    copies of the second, and so on. Specs without an identity get a
    sequential ``p<n>`` id so results stay reproducible.

    Args:
        panels: Panel specs in caller order.

    Returns:
        One PanelCopy per physical panel.
    """
    copies: list[PanelCopy] = []
    for base_index, panel in enumerate(panels):
        base_id = panel.panel_id or f"p{base_index + 1}"
        for copy_index in range(panel.quantity):
            copies.append(
                PanelCopy(
                    base_id=base_id,
                    base_index=base_index,
                    copy_index=copy_index,
                    index=len(copies),
                    width=panel.width,
                    height=panel.height,
                    material=panel.material,
                    display_label=panel.label,
                )
            )
    logger.debug("Expanded %d panel specs into %d copies", len(panels), len(copies))
    return copies


def group_by_material(copies: Sequence[PanelCopy]) -> dict[str, list[PanelCopy]]:
    """Partition copies by material tag.

    Groups are returned in first-seen order and keep the relative order of
    their copies.
    """
    groups: dict[str, list[PanelCopy]] = {}
    for copy in copies:
        groups.setdefault(copy.material, []).append(copy)
    return groups


def sort_key_for(key: SortKey):
    """Return a sort key function giving a total order for ``key``.

    Ties on the primary dimension fall back to the other dimensions and
    finally to the copy's expansion index, so equal inputs always sort
    identically.
    """
    if key == SortKey.AREA:
        return lambda c: (-c.area, -c.width, -c.height, c.index)
    if key == SortKey.WIDTH:
        return lambda c: (-c.width, -c.height, -c.area, c.index)
    return lambda c: (-c.height, -c.width, -c.area, c.index)


def sort_copies(copies: Sequence[PanelCopy], key: SortKey) -> list[PanelCopy]:
    """Sort copies largest first by the selected key."""
    return sorted(copies, key=sort_key_for(SortKey(key)))
