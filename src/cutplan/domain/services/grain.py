"""Grain and orientation policy.

Grained materials restrict which axis a panel's longer side may follow:

- ``wood-h`` (horizontal grain): the longer side lies along the sheet width.
  A panel specified taller than wide must therefore be rotated, even when
  rotation is globally disabled.
- ``wood-v`` (vertical grain): the longer side lies along the sheet height.

Square panels and non-grained materials follow the global rotation toggle.
"""

from __future__ import annotations

from typing import Protocol

from cutplan.domain.value_objects import GrainDirection, MaterialType, OrientationAllowance

GRAIN_BY_MATERIAL: dict[str, GrainDirection] = {
    MaterialType.WOOD_HORIZONTAL.value: GrainDirection.HORIZONTAL,
    MaterialType.WOOD_VERTICAL.value: GrainDirection.VERTICAL,
}


class _Sized(Protocol):
    width: float
    height: float
    material: str | None

    @property
    def is_square(self) -> bool: ...


def grain_for(material: str | None) -> GrainDirection:
    """Grain direction of a material tag; unknown tags have no grain."""
    if material is None:
        return GrainDirection.NONE
    return GRAIN_BY_MATERIAL.get(material, GrainDirection.NONE)


def allowed_orientation(panel: _Sized, allow_rotate: bool) -> OrientationAllowance:
    """Determine the orientations a panel may be placed in.

    Args:
        panel: Anything with width, height and material (spec or copy).
        allow_rotate: Global rotation toggle.

    Returns:
        The orientation allowance. Grain constraints take precedence over
        the global toggle.
    """
    free = OrientationAllowance(allow_normal=True, allow_rotated=allow_rotate)
    grain = grain_for(panel.material)
    if grain == GrainDirection.NONE or panel.is_square:
        return free

    longer_is_horizontal = panel.width > panel.height
    if (grain == GrainDirection.HORIZONTAL) == longer_is_horizontal:
        return OrientationAllowance(allow_normal=True, allow_rotated=False)
    return OrientationAllowance(allow_normal=False, allow_rotated=True, must_rotate=True)


def min_height_allowed(panel: _Sized) -> float:
    """Smallest height the panel can occupy on a sheet.

    Used to decide whether a panel could still fit below the last row
    before opening a new row or sheet.
    """
    grain = grain_for(panel.material)
    if grain == GrainDirection.VERTICAL:
        return max(panel.width, panel.height)
    return min(panel.width, panel.height)


def candidate_orientations(
    panel: _Sized, allow_rotate: bool
) -> list[tuple[float, float, bool]]:
    """List allowed ``(width, height, rotated)`` footprints, normal first.

    A square panel is only offered in its normal orientation since turning
    it changes nothing.
    """
    allowance = allowed_orientation(panel, allow_rotate)
    options: list[tuple[float, float, bool]] = []
    if allowance.allow_normal:
        options.append((panel.width, panel.height, False))
    if allowance.allow_rotated and not (
        allowance.allow_normal and panel.is_square
    ):
        options.append((panel.height, panel.width, True))
    return options
