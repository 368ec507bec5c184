"""Conversion of configuration sections into runtime objects.

Each function takes the validated Pydantic configuration and builds the
domain value object or infrastructure component it describes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from layoutplanner.application.config.schema import PlannerConfiguration
from layoutplanner.domain.value_objects import RenderStyle, SheetSize, resolve_sheet_size

if TYPE_CHECKING:
    from layoutplanner.infrastructure.bin_packing import PackingConfig
    from layoutplanner.infrastructure.export_client import DocumentServiceClient


def config_to_sheet_size(config: PlannerConfiguration) -> SheetSize:
    """Resolve the sheet size from format, orientation and custom size."""
    sheet = config.sheet
    return resolve_sheet_size(
        sheet.format,
        sheet.orientation,
        width=sheet.width,
        height=sheet.height,
    )


def config_to_packing_config(config: PlannerConfiguration) -> "PackingConfig":
    """Convert the packing section to the packer's dataclass."""
    # Lazy import to avoid circular dependencies
    from layoutplanner.infrastructure.bin_packing import PackingConfig

    packing = config.packing
    return PackingConfig(
        square_tolerance=packing.square_tolerance,
        row_height_tolerance=packing.row_height_tolerance,
        fit_epsilon=packing.fit_epsilon,
        group_by_material=packing.group_by_material,
    )


def config_to_render_style(config: PlannerConfiguration) -> RenderStyle:
    """Convert the render section to a RenderStyle."""
    render = config.render
    return RenderStyle(
        highlight_color=render.highlight_color,
        outline_color=render.outline_color,
        text_stroke_color=render.text_stroke_color,
        text_stroke_width=render.text_stroke_width,
    )


def config_to_document_client(
    config: PlannerConfiguration,
    endpoint: str | None = None,
) -> "DocumentServiceClient":
    """Build a document service client from the export section.

    Args:
        config: Planner configuration.
        endpoint: Optional endpoint overriding the configured one.
    """
    from layoutplanner.infrastructure.export_client import DocumentServiceClient

    export = config.export
    return DocumentServiceClient(
        endpoint=endpoint or export.endpoint,
        timeout=export.timeout_seconds,
        compress=export.compress,
        max_sheets=export.max_sheets,
    )


__all__ = [
    "config_to_document_client",
    "config_to_packing_config",
    "config_to_render_style",
    "config_to_sheet_size",
]
