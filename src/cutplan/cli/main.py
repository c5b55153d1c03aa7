"""Typer CLI for sheet cut planning."""

import logging
import zipfile
from pathlib import Path
from typing import Annotated

import typer

from cutplan.application import PackingService, available_strategies
from cutplan.application.config import (
    ConfigError,
    JobConfiguration,
    config_to_packing_config,
    config_to_panel_specs,
    load_config,
)
from cutplan.cli.commands import display_load_error, validate_command
from cutplan.domain.value_objects import SortKey
from cutplan.infrastructure import (
    CsvFormatter,
    CutDiagramRenderer,
    JsonFormatter,
    PackResult,
    total_waste_percent,
)

OUTPUT_FORMATS = ("summary", "ascii", "csv", "json", "svg")

app = typer.Typer(
    name="cutplan",
    help="Plan how rectangular panels are cut from stock sheets.",
)

app.command(name="validate")(validate_command)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


def _load_job(job_file: Path) -> JobConfiguration:
    try:
        return load_config(job_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)


def _build_service(
    job: JobConfiguration,
    kerf: float | None,
    sort: SortKey | None,
    no_rotate: bool,
) -> PackingService:
    try:
        packing_config = config_to_packing_config(
            job,
            kerf=kerf,
            allow_rotate=False if no_rotate else None,
            sort=sort,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    return PackingService(packing_config)


def _svg_name(index: int) -> str:
    return f"sheet_{index + 1}.svg"


def _write_svg(result: PackResult, output: Path | None) -> None:
    """Write one SVG per sheet into ``output`` or print them all.

    An ``output`` ending in ``.zip`` receives every sheet as a single archive;
    any other path is treated as a directory.
    """
    documents = CutDiagramRenderer().render_all_svg(result)
    if output is None:
        typer.echo("\n\n".join(documents))
        return
    if output.suffix.lower() == ".zip":
        output.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for index, document in enumerate(documents):
                archive.writestr(_svg_name(index), document)
        typer.echo(f"Wrote {len(documents)} sheet(s) to {output}")
        return
    output.mkdir(parents=True, exist_ok=True)
    for index, document in enumerate(documents):
        path = output / _svg_name(index)
        path.write_text(document, encoding="utf-8")
        typer.echo(f"Wrote {path}")


def _render(result: PackResult, output_format: str) -> str:
    if output_format == "ascii":
        return CutDiagramRenderer().render_all_ascii(result)
    if output_format == "csv":
        return CsvFormatter().format(result)
    if output_format == "json":
        return JsonFormatter().format(result)
    return CutDiagramRenderer().render_waste_summary(result)


@app.command()
def pack(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file"),
    ],
    strategy: Annotated[
        str | None,
        typer.Option("--strategy", "-s", help="Placement strategy (default: the job's)"),
    ] = None,
    sort: Annotated[
        SortKey | None,
        typer.Option("--sort", help="Sort key for sorting strategies"),
    ] = None,
    kerf: Annotated[
        float | None,
        typer.Option("--kerf", "-k", help="Saw kerf width"),
    ] = None,
    no_rotate: Annotated[
        bool,
        typer.Option("--no-rotate", help="Disable optional rotation (grain may still rotate)"),
    ] = False,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: summary, ascii, csv, json, svg"),
    ] = "summary",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (directory or .zip archive for svg)"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with code 2 when panels are left unplaced"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Pack the panels of a job onto sheets."""
    _configure_logging(verbose)

    output_format = output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        typer.echo(f"Unknown format: {output_format}", err=True)
        typer.echo(f"Available formats: {', '.join(OUTPUT_FORMATS)}", err=True)
        raise typer.Exit(code=1)

    job = _load_job(job_file)
    service = _build_service(job, kerf, sort, no_rotate)

    try:
        result = service.pack(config_to_panel_specs(job), strategy or job.strategy)
    except KeyError as e:
        typer.echo(f"Error: {e.args[0]}", err=True)
        raise typer.Exit(code=1)

    if output_format == "svg":
        _write_svg(result, output)
    else:
        text = _render(result, output_format)
        if output is None:
            typer.echo(text)
        else:
            output.write_text(text, encoding="utf-8")
            typer.echo(f"Wrote {output}")

    if not result.is_complete:
        typer.echo(
            f"Warning: {len(result.unplaced)} panel(s) could not be placed: "
            f"{', '.join(result.unplaced_ids)}",
            err=True,
        )
        if strict:
            raise typer.Exit(code=2)


@app.command()
def compare(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file"),
    ],
    sort: Annotated[
        SortKey | None,
        typer.Option("--sort", help="Sort key for sorting strategies"),
    ] = None,
    kerf: Annotated[
        float | None,
        typer.Option("--kerf", "-k", help="Saw kerf width"),
    ] = None,
    no_rotate: Annotated[
        bool,
        typer.Option("--no-rotate", help="Disable optional rotation"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Pack a job with every strategy and compare the results."""
    _configure_logging(verbose)

    job = _load_job(job_file)
    service = _build_service(job, kerf, sort, no_rotate)
    results = service.compare(config_to_panel_specs(job))
    best = service.best_of(results)

    typer.echo(f"{'Strategy':<16} {'Sheets':>6} {'Waste':>8} {'Unplaced':>9}")
    typer.echo("-" * 42)
    for name, result in results.items():
        marker = "  *" if name == best else ""
        typer.echo(
            f"{name:<16} {result.total_sheets:>6} "
            f"{total_waste_percent(result):>7.1f}% {len(result.unplaced):>9}{marker}"
        )
    typer.echo()
    typer.echo(f"Best: {best}")


@app.command()
def strategies() -> None:
    """List the available placement strategies."""
    for name in available_strategies():
        typer.echo(name)


if __name__ == "__main__":
    app()
