"""SVG exporters: per-item vector files and sheet previews.

Both exporters write a directory rather than a single file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from layoutplanner.infrastructure.export_payload import item_files
from layoutplanner.infrastructure.exporters.base import ExporterRegistry, safe_filename
from layoutplanner.infrastructure.sheet_renderer import SheetPreviewRenderer
from layoutplanner.infrastructure.svg_normalizer import SvgContentNormalizer

if TYPE_CHECKING:
    from layoutplanner.application.dtos import PlanOutput


logger = logging.getLogger(__name__)


@ExporterRegistry.register("items")
class ItemFilesExporter:
    """Writes one export SVG per placed item.

    Files are named after the item id. Items without vector content
    produce no file.

    Attributes:
        format_name: Identifier for this export format.
        file_extension: Empty, the exporter writes a directory.
    """

    format_name: ClassVar[str] = "items"
    file_extension: ClassVar[str] = ""

    def export(self, output: PlanOutput, path: Path) -> None:
        """Write item files into the directory at ``path``.

        Args:
            output: The plan output containing placements.
            path: Directory to create and fill.
        """
        path.mkdir(parents=True, exist_ok=True)
        files = item_files(output.result, SvgContentNormalizer(output.style))
        for file_name, markup in files.items():
            stem = file_name[: -len(".svg")] if file_name.endswith(".svg") else file_name
            target = path / f"{safe_filename(stem)}.svg"
            target.write_text(markup, encoding="utf-8")
        logger.info(f"Wrote {len(files)} item files to {path}")

    def export_string(self, output: PlanOutput) -> str:
        raise NotImplementedError("Format 'items' does not support string export")


@ExporterRegistry.register("sheets")
class SheetPreviewExporter:
    """Writes a preview SVG for each sheet.

    Files are named ``sheet_1.svg``, ``sheet_2.svg``, and so on.

    Attributes:
        format_name: Identifier for this export format.
        file_extension: Empty, the exporter writes a directory.
    """

    format_name: ClassVar[str] = "sheets"
    file_extension: ClassVar[str] = ""

    def __init__(self, scale: float = 2.0, show_labels: bool = True) -> None:
        self.scale = scale
        self.show_labels = show_labels

    def _renderer(self, output: PlanOutput) -> SheetPreviewRenderer:
        return SheetPreviewRenderer(
            scale=self.scale,
            normalizer=SvgContentNormalizer(output.style),
            show_labels=self.show_labels,
        )

    def export(self, output: PlanOutput, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)
        documents = self._renderer(output).render_all_svg(output.result)
        for index, document in enumerate(documents, start=1):
            (path / f"sheet_{index}.svg").write_text(document, encoding="utf-8")
        logger.info(f"Wrote {len(documents)} sheet previews to {path}")

    def export_string(self, output: PlanOutput) -> str:
        """Export all sheet previews, separated by blank lines."""
        return "\n\n".join(self._renderer(output).render_all_svg(output.result))
