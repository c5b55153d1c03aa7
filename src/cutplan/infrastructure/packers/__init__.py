"""Placement strategies sharing the PackingStrategy contract."""

from .guillotine import FreeRect, GuillotinePacker
from .naive import NaivePacker
from .shelf import BestFitShelfPacker, ShelfPacker
from .skyline import MAX_SKYLINE_NODES, SkylineNode, SkylinePacker

__all__ = [
    "BestFitShelfPacker",
    "FreeRect",
    "GuillotinePacker",
    "MAX_SKYLINE_NODES",
    "NaivePacker",
    "ShelfPacker",
    "SkylineNode",
    "SkylinePacker",
]
