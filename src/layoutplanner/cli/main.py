"""Typer CLI for sheet layout planning."""

import json
import logging
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from layoutplanner.application import PlanLayoutCommand, PlanOutput
from layoutplanner.application.config import (
    ConfigError,
    PlannerConfiguration,
    config_to_document_client,
    load_config,
    load_designs,
    merge_config_overrides,
)
from layoutplanner.cli.commands import validate_command
from layoutplanner.domain.value_objects import SheetFormat, SheetOrientation
from layoutplanner.infrastructure import DocumentServiceError
from layoutplanner.infrastructure.export_client import render_document_sync
from layoutplanner.infrastructure.export_payload import export_timestamp
from layoutplanner.infrastructure.exporters import (
    ExporterRegistry,
    ExportManager,
    build_payload,
    summary_data,
)

app = typer.Typer(
    name="layoutplanner",
    help="Arrange design canvases onto printable sheets and export the layout.",
)

app.command(name="validate")(validate_command)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log packing and export details"),
    ] = False,
) -> None:
    """Arrange design canvases onto printable sheets."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _exit_with_config_error(error: ConfigError) -> NoReturn:
    typer.echo(f"Error: {error.message}", err=True)
    raise typer.Exit(code=1)


def _resolve_config(
    config_file: Path | None,
    sheet_format: SheetFormat | None,
    orientation: SheetOrientation | None,
    spacing: float | None,
    width: float | None,
    height: float | None,
    group_by_material: bool | None,
) -> PlannerConfiguration:
    """Load the configuration file (if any) and apply CLI overrides.

    Overrides are validated against the same schema as the file.
    """
    try:
        config = load_config(config_file) if config_file else PlannerConfiguration()
        return merge_config_overrides(
            config,
            sheet_format=sheet_format,
            orientation=orientation,
            spacing_mm=spacing,
            width=width,
            height=height,
            group_by_material=group_by_material,
        )
    except ConfigError as e:
        _exit_with_config_error(e)


def _plan(designs_file: Path, config: PlannerConfiguration) -> PlanOutput:
    try:
        designs = load_designs(designs_file)
    except ConfigError as e:
        _exit_with_config_error(e)
    command = PlanLayoutCommand.from_config(config)
    return command.execute_with_config(designs, config)


def _plan_json(output: PlanOutput) -> dict[str, Any]:
    data = summary_data(output)
    for sheet_data, sheet in zip(data["sheets"], output.sheets):
        sheet_data["placements"] = [
            {
                "id": p.id,
                "name": p.name,
                "x": p.x,
                "y": p.y,
                "width": p.width,
                "height": p.height,
                "rotated": p.rotated,
            }
            for p in sheet.placements
        ]
    return data


def _print_plan(output: PlanOutput) -> None:
    size = output.sheet_size
    summary = output.summary
    typer.echo(
        f"Layout: {output.sheet_label} {output.orientation.value} "
        f"({size.width:g} x {size.height:g} mm), spacing {output.result.spacing:g} mm"
    )
    typer.echo(
        f"Sheets: {summary.sheet_count} | "
        f"Placed: {summary.placed_copies}/{summary.requested_copies} | "
        f"Coverage: {summary.coverage_percent}%"
    )

    for index, sheet in enumerate(output.sheets, start=1):
        typer.echo()
        typer.echo(
            f"Sheet {index} ({len(sheet.placements)} items, "
            f"{round(sheet.coverage * 100)}% used)"
        )
        for p in sheet.placements:
            rotated = " [rotated]" if p.rotated else ""
            typer.echo(
                f"  - {p.name}: x={p.x:.1f} y={p.y:.1f} "
                f"{p.width:.1f} x {p.height:.1f} mm{rotated}"
            )

    if output.leftovers:
        typer.echo()
        typer.echo(f"Did not fit ({len(output.leftovers)}):", err=True)
        for entry in output.leftovers:
            typer.echo(
                f"  - {entry.label}: {entry.width_mm:.1f} x {entry.height_mm:.1f} mm",
                err=True,
            )


ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to JSON configuration file"),
]
FormatOption = Annotated[
    SheetFormat | None,
    typer.Option("--format", "-f", help="Sheet format", case_sensitive=False),
]
OrientationOption = Annotated[
    SheetOrientation | None,
    typer.Option("--orientation", "-o", help="Sheet orientation", case_sensitive=False),
]
SpacingOption = Annotated[
    float | None,
    typer.Option("--spacing", "-s", help="Spacing between items and rows in mm"),
]
WidthOption = Annotated[
    float | None,
    typer.Option("--width", help="Custom sheet width in mm"),
]
HeightOption = Annotated[
    float | None,
    typer.Option("--height", help="Custom sheet height in mm"),
]
GroupOption = Annotated[
    bool | None,
    typer.Option(
        "--group-by-material/--no-group-by-material",
        help="Keep designs of different materials on separate sheets",
    ),
]
DesignsArgument = Annotated[
    Path,
    typer.Argument(help="JSON file with a list of designs"),
]


@app.command()
def plan(
    designs_file: DesignsArgument,
    config_file: ConfigOption = None,
    sheet_format: FormatOption = None,
    orientation: OrientationOption = None,
    spacing: SpacingOption = None,
    width: WidthOption = None,
    height: HeightOption = None,
    group_by_material: GroupOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the plan as JSON"),
    ] = False,
) -> None:
    """Plan a sheet layout and print it."""
    config = _resolve_config(
        config_file, sheet_format, orientation, spacing, width, height, group_by_material
    )
    output = _plan(designs_file, config)

    if as_json:
        typer.echo(json.dumps(_plan_json(output), indent=2))
    else:
        _print_plan(output)


@app.command()
def export(
    designs_file: DesignsArgument,
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-d", help="Directory for exported files"),
    ],
    formats: Annotated[
        str,
        typer.Option(
            "--formats",
            help="Comma-separated export formats: payload,items,sheets,summary (or 'all')",
        ),
    ] = "all",
    project_name: Annotated[
        str,
        typer.Option("--project-name", help="Project name for output file naming"),
    ] = "layout",
    config_file: ConfigOption = None,
    sheet_format: FormatOption = None,
    orientation: OrientationOption = None,
    spacing: SpacingOption = None,
    width: WidthOption = None,
    height: HeightOption = None,
    group_by_material: GroupOption = None,
) -> None:
    """Plan a layout and write export files."""
    available = ExporterRegistry.available_formats()
    if formats.strip().lower() == "all":
        selected = available
    else:
        selected = [f.strip().lower() for f in formats.split(",") if f.strip()]

    invalid = [f for f in selected if f not in available]
    if invalid:
        typer.echo(f"Unknown formats: {', '.join(invalid)}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)
    if not selected:
        typer.echo("No valid formats to export.", err=True)
        raise typer.Exit(code=1)

    config = _resolve_config(
        config_file, sheet_format, orientation, spacing, width, height, group_by_material
    )
    output = _plan(designs_file, config)

    manager = ExportManager(
        output_dir,
        exporter_options={"payload": {"inline_markup": config.export.inline_markup}},
    )
    try:
        files = manager.export_all(selected, output, project_name)
    except OSError as e:
        typer.echo(f"Export error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo("Exported files:")
    for fmt, path in files.items():
        typer.echo(f"  {fmt.upper()}: {path}")


@app.command()
def render(
    designs_file: DesignsArgument,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", help="Where to write the rendered document"),
    ] = None,
    endpoint: Annotated[
        str | None,
        typer.Option("--endpoint", help="Document service endpoint URL"),
    ] = None,
    config_file: ConfigOption = None,
    sheet_format: FormatOption = None,
    orientation: OrientationOption = None,
    spacing: SpacingOption = None,
    width: WidthOption = None,
    height: HeightOption = None,
    group_by_material: GroupOption = None,
) -> None:
    """Plan a layout and have the document service render it."""
    config = _resolve_config(
        config_file, sheet_format, orientation, spacing, width, height, group_by_material
    )
    output = _plan(designs_file, config)

    if not output.sheets:
        typer.echo("Nothing to render: no design fits on a sheet.", err=True)
        raise typer.Exit(code=1)

    timestamp = export_timestamp()
    payload = build_payload(
        output,
        inline_markup=config.export.inline_markup,
        timestamp=timestamp,
    )
    client = config_to_document_client(config, endpoint=endpoint)

    try:
        document = render_document_sync(payload, client)
    except DocumentServiceError as e:
        typer.echo(f"Export failed: {e.message}", err=True)
        raise typer.Exit(code=1)

    target = output_file or Path(f"layout-{output.sheet_label}-{timestamp}.pdf")
    target.write_bytes(document)
    typer.echo(f"Wrote {target} ({len(output.sheets)} sheets)")


@app.command(name="formats")
def list_formats() -> None:
    """List available sheet formats."""
    for fmt in SheetFormat:
        width, height = fmt.dimensions
        typer.echo(f"{fmt.value:<12} {fmt.label:<12} {width:g} x {height:g} mm")


if __name__ == "__main__":
    app()
