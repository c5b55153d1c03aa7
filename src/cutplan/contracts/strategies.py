"""Strategy protocol for sheet placement.

The Strategy pattern lets the service and the CLI select a placement
heuristic by name at runtime. Every strategy consumes the same panel specs
and produces the same PackResult structure, so results can be compared
directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from cutplan.domain.value_objects import PanelSpec
    from cutplan.infrastructure.bin_packing import PackResult


@runtime_checkable
class PackingStrategyProtocol(Protocol):
    """Protocol for placement strategies.

    Implementations:
    - NaivePacker: input-order rows, no rotation (baseline)
    - ShelfPacker / BestFitShelfPacker: sorted row filling
    - SkylinePacker: bottom-left skyline
    - GuillotinePacker: best-area-fit free rectangles

    Attributes:
        name: Registry name used to select the strategy.
    """

    name: ClassVar[str]

    def pack(self, panels: Sequence["PanelSpec"]) -> "PackResult":
        """Place every copy of ``panels`` onto sheets."""
        ...


__all__ = [
    "PackingStrategyProtocol",
]
