"""JSON summary exporter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from layoutplanner.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from layoutplanner.application.dtos import PlanOutput


def summary_data(output: PlanOutput) -> dict[str, Any]:
    """Summary statistics plus per-sheet and leftover details."""
    return {
        "format": output.sheet_format.value if output.sheet_format else None,
        "orientation": output.orientation.value,
        "sheetSize": {
            "width": output.sheet_size.width,
            "height": output.sheet_size.height,
        },
        "spacingMm": output.result.spacing,
        "summary": output.summary.to_dict(),
        "sheets": [
            {
                "index": index,
                "placements": len(sheet.placements),
                "rows": len(sheet.rows),
                "coverage": sheet.coverage,
            }
            for index, sheet in enumerate(output.sheets)
        ],
        "leftovers": [
            {
                "id": entry.id,
                "name": entry.label,
                "width": entry.width_mm,
                "height": entry.height_mm,
            }
            for entry in output.leftovers
        ],
    }


@ExporterRegistry.register("summary")
class SummaryExporter:
    """Exports layout statistics as JSON.

    Attributes:
        format_name: Identifier for this export format.
        file_extension: File extension for summary files.
    """

    format_name: ClassVar[str] = "summary"
    file_extension: ClassVar[str] = "json"

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def export(self, output: PlanOutput, path: Path) -> None:
        path.write_text(self.export_string(output), encoding="utf-8")

    def export_string(self, output: PlanOutput) -> str:
        return json.dumps(summary_data(output), indent=self.indent)
