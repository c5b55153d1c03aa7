"""Domain layer - panel value objects and packing rules."""

from .value_objects import (
    DEFAULT_MATERIAL,
    GrainDirection,
    MaterialType,
    OrientationAllowance,
    PanelCopy,
    PanelSpec,
    SortKey,
)

__all__ = [
    "DEFAULT_MATERIAL",
    "GrainDirection",
    "MaterialType",
    "OrientationAllowance",
    "PanelCopy",
    "PanelSpec",
    "SortKey",
]
