"""Infrastructure layer - placement strategies, metrics and output formats."""

from .bin_packing import (
    PackingConfig,
    PackingStrategy,
    PackResult,
    PlacedRect,
    SheetConfig,
    SheetLayout,
    UnplacedCopy,
)
from .cut_diagram_renderer import CutDiagramRenderer
from .formatters import CsvFormatter, JsonFormatter
from .packers import (
    BestFitShelfPacker,
    GuillotinePacker,
    NaivePacker,
    ShelfPacker,
    SkylinePacker,
)
from .waste import (
    WasteSummary,
    requested_waste_percent,
    sheet_waste_percent,
    summarize_waste,
    total_waste_percent,
)

__all__ = [
    # Packing models
    "PackingConfig",
    "PackingStrategy",
    "PackResult",
    "PlacedRect",
    "SheetConfig",
    "SheetLayout",
    "UnplacedCopy",
    # Strategies
    "BestFitShelfPacker",
    "GuillotinePacker",
    "NaivePacker",
    "ShelfPacker",
    "SkylinePacker",
    # Waste
    "WasteSummary",
    "requested_waste_percent",
    "sheet_waste_percent",
    "summarize_waste",
    "total_waste_percent",
    # Output
    "CsvFormatter",
    "CutDiagramRenderer",
    "JsonFormatter",
]
