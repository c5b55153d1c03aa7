"""Job configuration loading and validation.

Public API:
    - JobConfiguration: Root job model
    - SheetSizeConfigSchema: Sheet dimensions model
    - PanelConfigSchema: Panel model
    - load_config: Load a job from a JSON file
    - load_config_from_dict: Load a job from a dictionary
    - ConfigError: Exception for configuration errors
    - config_to_packing_config: Build the PackingConfig for a job
    - config_to_panel_specs: Build the PanelSpec list for a job

Example:
    >>> from pathlib import Path
    >>> from cutplan.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     job = load_config(Path("kitchen.json"))
    ...     print(f"{len(job.panels)} panels on {job.sheet.width}x{job.sheet.height}")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from cutplan.application.config.adapter import (
    config_to_packing_config,
    config_to_panel_specs,
)
from cutplan.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from cutplan.application.config.schema import (
    SUPPORTED_VERSIONS,
    JobConfiguration,
    PanelConfigSchema,
    SheetSizeConfigSchema,
)

__all__ = [
    "ConfigError",
    "JobConfiguration",
    "PanelConfigSchema",
    "SUPPORTED_VERSIONS",
    "SheetSizeConfigSchema",
    "config_to_packing_config",
    "config_to_panel_specs",
    "load_config",
    "load_config_from_dict",
]
