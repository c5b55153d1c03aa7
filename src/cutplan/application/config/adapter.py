"""Conversion from validated job configuration to domain objects."""

from __future__ import annotations

from cutplan.application.config.schema import JobConfiguration
from cutplan.domain.value_objects import PanelSpec, SortKey
from cutplan.infrastructure.bin_packing import PackingConfig, SheetConfig


def config_to_packing_config(
    config: JobConfiguration,
    *,
    kerf: float | None = None,
    allow_rotate: bool | None = None,
    sort: SortKey | str | None = None,
) -> PackingConfig:
    """Build a PackingConfig, letting explicit arguments override the job file."""
    return PackingConfig(
        sheet=SheetConfig(width=config.sheet.width, height=config.sheet.height),
        kerf=config.kerf if kerf is None else kerf,
        allow_rotate=config.allow_rotate if allow_rotate is None else allow_rotate,
        sort=SortKey(sort) if sort is not None else config.sort,
    )


def config_to_panel_specs(config: JobConfiguration) -> list[PanelSpec]:
    """Convert the job's panels to PanelSpec value objects, keeping order."""
    return [
        PanelSpec(
            width=panel.width,
            height=panel.height,
            quantity=panel.quantity,
            material=panel.material,
            label=panel.label,
            panel_id=panel.id,
        )
        for panel in config.panels
    ]
