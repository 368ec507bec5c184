"""Application commands (use cases) for layout planning."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from layoutplanner.domain.summary import summarize
from layoutplanner.domain.value_objects import (
    RenderStyle,
    SheetFormat,
    SheetOrientation,
    resolve_sheet_size,
)
from layoutplanner.infrastructure.bin_packing import PackingService

from .config import (
    PlannerConfiguration,
    config_to_packing_config,
    config_to_render_style,
)
from .dtos import DesignInput, PlanOutput
from .normalizer import normalize_designs

logger = logging.getLogger(__name__)


class PlanLayoutCommand:
    """Command to plan a sheet layout for a set of designs.

    Normalizes the designs, packs every copy onto sheets and summarizes
    the result. The planning pass is recomputed from scratch on each call.
    """

    def __init__(
        self,
        packing_service: PackingService | None = None,
        style: RenderStyle | None = None,
    ) -> None:
        self.packing_service = packing_service or PackingService()
        self.style = style or RenderStyle()

    @classmethod
    def from_config(cls, config: PlannerConfiguration) -> PlanLayoutCommand:
        """Create a command using the packing and render sections of a config."""
        return cls(
            packing_service=PackingService(config_to_packing_config(config)),
            style=config_to_render_style(config),
        )

    def execute(
        self,
        designs: Iterable[DesignInput | Mapping[str, Any]] | None,
        sheet_format: SheetFormat | str = SheetFormat.A4,
        orientation: SheetOrientation | str = SheetOrientation.PORTRAIT,
        spacing: float = 0.0,
        width: float | None = None,
        height: float | None = None,
    ) -> PlanOutput:
        """Execute the planning command.

        Args:
            designs: Raw design records.
            sheet_format: Named sheet format.
            orientation: Sheet orientation.
            spacing: Gap between items and rows in mm.
            width: Optional custom sheet width in mm.
            height: Optional custom sheet height in mm.

        Returns:
            PlanOutput with items, packing result and summary.

        Raises:
            ValueError: If the format or orientation name is unknown.
        """
        fmt = SheetFormat(sheet_format)
        orient = SheetOrientation(orientation)
        sheet_size = resolve_sheet_size(fmt, orient, width=width, height=height)

        items = normalize_designs(designs)
        result = self.packing_service.plan(items, sheet_size, spacing)
        summary = summarize(items, result.sheets, result.leftovers)

        logger.info(
            f"Planned {len(items)} items on {fmt.label} {orient.value} sheets: "
            f"{summary.sheet_count} sheets, {summary.coverage_percent}% coverage, "
            f"{summary.leftover_count} left over"
        )

        return PlanOutput(
            items=items,
            result=result,
            summary=summary,
            sheet_size=sheet_size,
            sheet_format=fmt,
            orientation=orient,
            style=self.style,
        )

    def execute_with_config(
        self,
        designs: Iterable[DesignInput | Mapping[str, Any]] | None,
        config: PlannerConfiguration,
    ) -> PlanOutput:
        """Execute using the sheet section of a configuration."""
        sheet = config.sheet
        return self.execute(
            designs,
            sheet_format=sheet.format,
            orientation=sheet.orientation,
            spacing=sheet.spacing_mm,
            width=sheet.width,
            height=sheet.height,
        )
