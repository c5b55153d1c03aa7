"""Pydantic models for JSON packing job files.

A job file describes the sheet, the cutting options and the panels to cut.
All models forbid unknown keys so typos surface as validation errors.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cutplan.domain.value_objects import DEFAULT_MATERIAL, SortKey

# Supported schema versions for job files
# Version 1.0: Initial schema
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class SheetSizeConfigSchema(BaseModel):
    """Sheet dimensions.

    Attributes:
        width: Sheet width (default 2440, a standard board).
        height: Sheet height (default 1220).
    """

    model_config = ConfigDict(extra="forbid")

    width: float = Field(default=2440.0, gt=0, description="Sheet width")
    height: float = Field(default=1220.0, gt=0, description="Sheet height")


class PanelConfigSchema(BaseModel):
    """A panel to cut.

    ``qty`` is accepted as an alias for ``quantity``.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str | None = Field(default=None, description="Panel identity")
    width: float = Field(..., gt=0, description="Panel width")
    height: float = Field(..., gt=0, description="Panel height")
    quantity: int = Field(default=1, ge=1, alias="qty", description="Number of copies")
    material: str = Field(default=DEFAULT_MATERIAL, min_length=1, description="Material tag")
    label: str | None = Field(default=None, description="Display label")


class JobConfiguration(BaseModel):
    """Root model of a packing job file.

    Attributes:
        schema_version: Job file schema version.
        sheet: Sheet dimensions.
        kerf: Saw kerf; panels are kept at least this far apart.
        allow_rotate: Whether panels may be rotated (grain rules still apply).
        sort: Ordering used by the sorting strategies.
        strategy: Default strategy name for this job.
        panels: Panels to cut.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", description="Schema version")
    sheet: SheetSizeConfigSchema = Field(default_factory=SheetSizeConfigSchema)
    kerf: float = Field(default=3.2, ge=0, description="Saw kerf width")
    allow_rotate: bool = Field(default=True, description="Allow panel rotation")
    sort: SortKey = Field(default=SortKey.HEIGHT, description="Sort key")
    strategy: str = Field(default="guillotine", description="Placement strategy")
    panels: list[PanelConfigSchema] = Field(default_factory=list)

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, value: str) -> str:
        if value not in SUPPORTED_VERSIONS:
            supported = ", ".join(sorted(SUPPORTED_VERSIONS))
            raise ValueError(
                f"Unsupported schema version '{value}'. Supported versions: {supported}"
            )
        return value
