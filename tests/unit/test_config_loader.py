"""Unit tests for job file schema, loader and adapter.

These tests verify:
- Valid job files are loaded correctly
- Invalid values and unknown fields are rejected with clear errors
- Schema version validation
- Loader error handling (file not found, JSON parse errors)
- Conversion to PackingConfig and PanelSpec objects
"""

import json
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from cutplan.application.config import (
    SUPPORTED_VERSIONS,
    ConfigError,
    JobConfiguration,
    PanelConfigSchema,
    SheetSizeConfigSchema,
    config_to_packing_config,
    config_to_panel_specs,
    load_config,
    load_config_from_dict,
)
from cutplan.application.config.loader import _format_json_path
from cutplan.domain.value_objects import SortKey

# Get path to test fixtures
FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "jobs"


class TestSheetSizeConfigSchema:
    """Tests for SheetSizeConfigSchema model."""

    def test_defaults(self) -> None:
        sheet = SheetSizeConfigSchema()

        assert sheet.width == 2440.0
        assert sheet.height == 1220.0

    def test_rejects_zero(self) -> None:
        with pytest.raises(PydanticValidationError):
            SheetSizeConfigSchema(width=0)


class TestPanelConfigSchema:
    """Tests for PanelConfigSchema model."""

    def test_qty_alias(self) -> None:
        panel = PanelConfigSchema.model_validate({"width": 10, "height": 20, "qty": 3})

        assert panel.quantity == 3

    def test_quantity_by_name(self) -> None:
        panel = PanelConfigSchema.model_validate({"width": 10, "height": 20, "quantity": 2})

        assert panel.quantity == 2

    def test_defaults(self) -> None:
        panel = PanelConfigSchema.model_validate({"width": 10, "height": 20})

        assert panel.quantity == 1
        assert panel.material == "plywood"
        assert panel.id is None

    @pytest.mark.parametrize(
        "data",
        [
            {"width": 0, "height": 20},
            {"width": 10, "height": -1},
            {"width": 10, "height": 20, "qty": 0},
            {"width": 10, "height": 20, "material": ""},
            {"width": 10, "height": 20, "colour": "red"},
        ],
    )
    def test_invalid(self, data: dict[str, Any]) -> None:
        with pytest.raises(PydanticValidationError):
            PanelConfigSchema.model_validate(data)


class TestJobConfiguration:
    """Tests for the root job model."""

    def test_defaults(self) -> None:
        job = JobConfiguration()

        assert job.schema_version == "1.0"
        assert job.kerf == 3.2
        assert job.allow_rotate is True
        assert job.sort == SortKey.HEIGHT
        assert job.strategy == "guillotine"
        assert job.panels == []

    def test_supported_versions(self) -> None:
        assert "1.0" in SUPPORTED_VERSIONS

    def test_unsupported_version(self) -> None:
        with pytest.raises(PydanticValidationError, match="Unsupported schema version"):
            JobConfiguration(schema_version="2.0")

    def test_zero_kerf_allowed(self) -> None:
        assert JobConfiguration(kerf=0).kerf == 0

    def test_negative_kerf_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            JobConfiguration(kerf=-0.5)

    def test_unknown_sort_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            JobConfiguration.model_validate({"sort": "diagonal"})


class TestFormatJsonPath:
    """Tests for validation error location formatting."""

    def test_nested(self) -> None:
        assert _format_json_path(("sheet", "width")) == "sheet.width"

    def test_list_index(self) -> None:
        assert _format_json_path(("panels", 2, "qty")) == "panels[2].qty"

    def test_leading_index(self) -> None:
        assert _format_json_path((0, "width")) == "[0].width"

    def test_empty_location_is_root(self) -> None:
        assert _format_json_path(()) == "<root>"


class TestLoadConfig:
    """Tests for load_config()."""

    def test_valid_file(self) -> None:
        job = load_config(FIXTURES_PATH / "kitchen.json")

        assert len(job.panels) == 5
        assert job.panels[0].id == "side"
        assert job.panels[0].quantity == 2
        assert job.panels[1].label == "Top & Bottom"

    def test_minimal_file(self) -> None:
        job = load_config(FIXTURES_PATH / "minimal.json")

        assert job.sheet.width == 2440.0
        assert len(job.panels) == 1

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.json")

        assert exc_info.value.error_type == "file_not_found"
        assert "not found" in str(exc_info.value)

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "invalid_syntax.json")

        error = exc_info.value
        assert error.error_type == "json_parse"
        assert error.details[0]["line"] == 4

    def test_validation_error_details(self, tmp_path: Path) -> None:
        job_file = tmp_path / "bad.json"
        job_file.write_text('{"panels": [{"width": 10, "height": -5}]}')

        with pytest.raises(ConfigError) as exc_info:
            load_config(job_file)

        error = exc_info.value
        assert error.error_type == "validation"
        assert error.path == job_file
        assert error.details[0]["path"] == "panels[0].height"
        assert str(error).startswith("Job validation failed:")

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        job_file = tmp_path / "list.json"
        job_file.write_text("[1, 2, 3]")

        with pytest.raises(ConfigError) as exc_info:
            load_config(job_file)

        error = exc_info.value
        assert error.error_type == "validation"
        assert error.details[0]["path"] == "<root>"
        assert "  - <root>: " in str(error)

    def test_file_and_dict_report_the_same_problems(self, tmp_path: Path) -> None:
        data = {"kerf": -1, "panels": [{"width": 10, "height": 0}]}
        job_file = tmp_path / "bad.json"
        job_file.write_text(json.dumps(data))

        with pytest.raises(ConfigError) as from_file:
            load_config(job_file)
        with pytest.raises(ConfigError) as from_dict:
            load_config_from_dict(data)

        assert from_file.value.details == from_dict.value.details
        assert str(from_file.value) == str(from_dict.value)
        assert from_file.value.path == job_file
        assert from_dict.value.path is None


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict()."""

    def test_valid(self) -> None:
        job = load_config_from_dict({"kerf": 0, "panels": [{"width": 1, "height": 2}]})

        assert job.kerf == 0

    def test_invalid(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict({"kerf": "thick"})

        assert exc_info.value.error_type == "validation"
        assert exc_info.value.details[0]["path"] == "kerf"


class TestAdapter:
    """Tests for job to domain conversion."""

    @pytest.fixture
    def job(self) -> JobConfiguration:
        return load_config(FIXTURES_PATH / "kitchen.json")

    def test_packing_config_from_job(self, job: JobConfiguration) -> None:
        config = config_to_packing_config(job)

        assert config.sheet.width == 2440
        assert config.sheet.height == 1220
        assert config.kerf == 3.2
        assert config.allow_rotate is True
        assert config.sort == SortKey.HEIGHT

    def test_overrides(self, job: JobConfiguration) -> None:
        config = config_to_packing_config(job, kerf=0, allow_rotate=False, sort="area")

        assert config.kerf == 0
        assert config.allow_rotate is False
        assert config.sort == SortKey.AREA

    def test_panel_specs_keep_order(self, job: JobConfiguration) -> None:
        specs = config_to_panel_specs(job)

        assert [s.panel_id for s in specs] == ["side", "top", "drawer", "shelf", "door"]
        assert specs[2].quantity == 3
        assert specs[2].material == "mdf"
        assert specs[0].label == "Side"
