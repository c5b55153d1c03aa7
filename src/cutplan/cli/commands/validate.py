"""Validate command for checking job files.

This module provides the `validate` command that checks a JSON job file for
syntax and schema errors and warns about panels that cannot fit the sheet.
"""

from pathlib import Path
from typing import Annotated

import typer

from cutplan.application.config import (
    ConfigError,
    config_to_packing_config,
    config_to_panel_specs,
    load_config,
)
from cutplan.domain.services import candidate_orientations


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Validate a packing job file.

    Exit codes:
        0 - Job is valid with no warnings
        1 - Job has errors (cannot be used)
        2 - Job is valid but some panels can never fit the sheet

    Example:
        cutplan validate kitchen.json
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config = load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    packing_config = config_to_packing_config(config)
    sheet = packing_config.sheet
    warnings: list[str] = []
    for index, spec in enumerate(config_to_panel_specs(config)):
        options = candidate_orientations(spec, packing_config.allow_rotate)
        if not any(w <= sheet.width and h <= sheet.height for w, h, _ in options):
            warnings.append(
                f"panels[{index}]: {spec.width:g}x{spec.height:g} {spec.material} "
                f"does not fit a {sheet.width:g}x{sheet.height:g} sheet"
            )

    if warnings:
        typer.echo("Warnings:")
        for warning in warnings:
            typer.echo(f"  - {warning}")
        raise typer.Exit(code=2)

    typer.echo(f"Job is valid: {len(config.panels)} panel specs.")


def display_load_error(error: ConfigError) -> None:
    """Display a job loading error on stderr."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            typer.echo(f"    Line {line}, column {column}: {detail.get('message')}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            typer.echo(f"  {detail['path']}: {detail['message']}", err=True)
    else:
        typer.echo(f"  {error}", err=True)
