"""Domain services for panel preparation and orientation rules."""

from .expansion import expand_copies, group_by_material, sort_copies, sort_key_for
from .grain import (
    GRAIN_BY_MATERIAL,
    allowed_orientation,
    candidate_orientations,
    grain_for,
    min_height_allowed,
)

__all__ = [
    "GRAIN_BY_MATERIAL",
    "allowed_orientation",
    "candidate_orientations",
    "expand_copies",
    "grain_for",
    "group_by_material",
    "min_height_allowed",
    "sort_copies",
    "sort_key_for",
]
