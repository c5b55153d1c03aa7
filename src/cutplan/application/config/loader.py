"""Reading packing jobs from disk.

A job goes through three stages: the file is read, its text is parsed as
JSON, and the parsed value is validated as a ``JobConfiguration``. A failure
at any stage surfaces as ``ConfigError``; its ``error_type`` tells the CLI
which stage failed.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from cutplan.application.config.schema import JobConfiguration

ROOT_PATH = "<root>"


class ConfigError(Exception):
    """A job that cannot be loaded.

    Attributes:
        message: Text shown to the user.
        error_type: ``file_not_found``, ``permission_denied``,
            ``file_read_error``, ``json_parse`` or ``validation``.
        path: The job file, or None for in-memory jobs.
        details: One record per problem. JSON errors carry ``line``,
            ``column`` and ``message``; validation errors carry ``path``,
            ``message``, ``value`` and ``error_type``.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_validation(
        cls, error: PydanticValidationError, path: Path | None = None
    ) -> "ConfigError":
        details = [
            {
                "path": _format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
            for err in error.errors()
        ]
        summary = "\n".join(
            ["Job validation failed:", *(_describe_problem(d) for d in details)]
        )
        return cls(summary, error_type="validation", path=path, details=details)


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Render a Pydantic location such as ``("panels", 2, "qty")`` as
    ``panels[2].qty``. An empty location names the document root.
    """
    rendered = ""
    for segment in loc:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = str(segment)
    return rendered or ROOT_PATH


def _describe_problem(detail: dict[str, Any]) -> str:
    line = f"  - {detail['path']}: {detail['message']}"
    value = detail.get("value")
    # Containers are echoed back by pydantic in full; only quote scalars.
    if value is None or isinstance(value, (dict, list)):
        return line
    return f"{line} (got: {value!r})"


def _read_job_text(path: Path) -> str:
    if not path.exists():
        raise ConfigError(
            f"Job file not found: {path}", error_type="file_not_found", path=path
        )
    try:
        return path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            f"Permission denied reading job file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            f"Error reading job file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )


def _parse_job_text(content: str, path: Path) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in job file: {path} "
            f"(line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )


def _validate_job(data: Any, path: Path | None = None) -> JobConfiguration:
    try:
        return JobConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError.from_validation(e, path)


def load_config(path: Path) -> JobConfiguration:
    """Load and validate a packing job from a JSON file.

    Raises:
        ConfigError: The file is missing or unreadable, is not valid JSON,
            or does not describe a valid job.
    """
    return _validate_job(_parse_job_text(_read_job_text(path), path), path)


def load_config_from_dict(data: dict[str, Any]) -> JobConfiguration:
    """Validate an already parsed job.

    Raises:
        ConfigError: The data does not describe a valid job.
    """
    return _validate_job(data)
