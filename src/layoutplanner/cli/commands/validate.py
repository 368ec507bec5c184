"""Validate command for checking planner configuration files.

Checks a JSON configuration file for syntax and schema errors and reports
advisories about settings that are valid but unlikely to be intended.
"""

from pathlib import Path
from typing import Annotated

import typer

from layoutplanner.application.config import (
    ConfigError,
    PlannerConfiguration,
    config_to_sheet_size,
    load_config,
)


def config_warnings(config: PlannerConfiguration) -> list[str]:
    """Advisories for a valid configuration.

    Args:
        config: Validated configuration.

    Returns:
        Warning messages, empty if there is nothing to report.
    """
    warnings: list[str] = []
    sheet = config.sheet
    size = config_to_sheet_size(config)

    if (sheet.width is None) != (sheet.height is None):
        overridden = "width" if sheet.width is not None else "height"
        warnings.append(
            f"sheet.{overridden} overrides only one side of {sheet.format.value}; "
            f"resulting sheet is {size.width:g} x {size.height:g} mm"
        )

    if sheet.spacing_mm >= min(size.width, size.height) / 2:
        warnings.append(
            f"sheet.spacing_mm ({sheet.spacing_mm:g}) is at least half the "
            f"shorter sheet side; at most one row or column will fit"
        )

    return warnings


def _error_lines(error: ConfigError) -> list[str]:
    """Lines describing why ``error`` makes the file unusable."""
    if error.error_type == "file_not_found":
        return [f"File not found: {error.path}"]
    if error.error_type == "json_parse":
        return ["Invalid JSON syntax"] + [
            f"  Line {d.get('line', '?')}, Column {d.get('column', '?')}: {d.get('message', '')}"
            for d in error.details
        ]
    if error.error_type != "validation":
        return [error.message]

    lines: list[str] = []
    for detail in error.details:
        lines.append(f"{detail.get('path', 'unknown')}: {detail.get('message', '')}")
        if detail.get("value") is not None:
            lines.append(f"  Value: {detail['value']!r}")
    return lines


def _display_load_error(error: ConfigError) -> None:
    typer.echo("Errors:", err=True)
    for line in _error_lines(error):
        typer.echo(f"  {line}", err=True)
    typer.echo()
    typer.echo("Validation failed.", err=True)


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON configuration file to validate"),
    ],
) -> None:
    """Validate a planner configuration file.

    Exit codes:
        0 - Configuration is valid with no warnings
        1 - Configuration has errors (cannot be used)
        2 - Configuration is valid but has warnings

    Example:
        layoutplanner validate planner.json
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config = load_config(config_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    warnings = config_warnings(config)
    if warnings:
        typer.echo("Warnings:")
        for warning in warnings:
            typer.echo(f"  {warning}")
        typer.echo()
        typer.echo("Configuration is valid with warnings.")
        raise typer.Exit(code=2)

    size = config_to_sheet_size(config)
    typer.echo(
        f"Configuration is valid: {config.sheet.format.label} "
        f"{config.sheet.orientation.value} ({size.width:g} x {size.height:g} mm)"
    )
