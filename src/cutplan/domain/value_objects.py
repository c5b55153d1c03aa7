"""Value objects for the sheet cutting domain.

Panels are described by the caller as ``PanelSpec`` instances and expanded
into individual ``PanelCopy`` units before placement. Both are frozen so a
packing run can never mutate its input snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_MATERIAL = "plywood"


class MaterialType(str, Enum):
    """Sheet materials known to the planner.

    Any other material tag is accepted and treated as non-grained.
    """

    PLYWOOD = "plywood"
    MDF = "mdf"
    WOOD_HORIZONTAL = "wood-h"
    WOOD_VERTICAL = "wood-v"
    ACRYLIC = "acrylic"


class GrainDirection(str, Enum):
    """Direction the grain runs on a sheet of material.

    Attributes:
        NONE: No grain, panels may be rotated whenever rotation is enabled.
        HORIZONTAL: Grain runs along the sheet width; a panel's longer side
            must lie horizontally.
        VERTICAL: Grain runs along the sheet height; a panel's longer side
            must lie vertically.
    """

    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class SortKey(str, Enum):
    """Primary ordering applied to copies before placement."""

    HEIGHT = "height"
    AREA = "area"
    WIDTH = "width"


@dataclass(frozen=True)
class OrientationAllowance:
    """Which orientations a copy may be placed in.

    Attributes:
        allow_normal: The copy may be placed as specified (width x height).
        allow_rotated: The copy may be placed turned 90 degrees.
        must_rotate: Only the rotated orientation satisfies the grain.
    """

    allow_normal: bool
    allow_rotated: bool
    must_rotate: bool = False


@dataclass(frozen=True)
class PanelSpec:
    """A panel the caller wants cut, possibly in several copies.

    Attributes:
        width: Panel width in sheet units (usually millimetres).
        height: Panel height in sheet units.
        quantity: Number of identical copies to cut.
        material: Material tag; copies are only packed with the same tag.
        label: Optional display label.
        panel_id: Optional caller identity. Expansion assigns ``p<n>`` when
            missing.
    """

    width: float
    height: float
    quantity: int = 1
    material: str | None = DEFAULT_MATERIAL
    label: str | None = None
    panel_id: str | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Panel dimensions must be positive")
        if self.quantity < 1:
            raise ValueError("Quantity must be at least 1")
        if not self.material:
            object.__setattr__(self, "material", DEFAULT_MATERIAL)

    @property
    def area(self) -> float:
        """Total area for all copies of this panel."""
        return self.width * self.height * self.quantity

    @property
    def is_square(self) -> bool:
        return self.width == self.height


@dataclass(frozen=True)
class PanelCopy:
    """A single physical copy of a PanelSpec.

    Attributes:
        base_id: Identity of the owning spec.
        base_index: Zero-based position of the owning spec in the input.
        copy_index: Zero-based copy number within the owning panel spec.
        index: Zero-based position of this copy in the full expansion.
        width: Copy width as specified (before any rotation).
        height: Copy height as specified (before any rotation).
        material: Material tag inherited from the panel spec.
        display_label: Optional label inherited from the panel spec.
    """

    base_id: str
    base_index: int
    copy_index: int
    index: int
    width: float
    height: float
    material: str = DEFAULT_MATERIAL
    display_label: str | None = None

    @property
    def label(self) -> str:
        """Short ``<spec number>-<copy number>`` label, both 1-based."""
        return f"{self.base_index + 1}-{self.copy_index + 1}"

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_square(self) -> bool:
        return self.width == self.height
