"""Document service payload exporter.

Writes the exact JSON document that would be posted to the document
service, so a layout can be rendered later or inspected offline.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from layoutplanner.infrastructure.export_payload import ExportPayloadBuilder
from layoutplanner.infrastructure.exporters.base import ExporterRegistry
from layoutplanner.infrastructure.svg_normalizer import SvgContentNormalizer

if TYPE_CHECKING:
    from layoutplanner.application.dtos import PlanOutput


def build_payload(
    output: PlanOutput,
    inline_markup: bool = False,
    timestamp: str | None = None,
) -> dict[str, Any]:
    """Build the document service payload for a plan output."""
    builder = ExportPayloadBuilder(
        normalizer=SvgContentNormalizer(output.style),
        inline_markup=inline_markup,
    )
    return builder.build(
        output.result,
        sheet_format=output.sheet_format,
        sheet_label=output.sheet_label,
        timestamp=timestamp,
    )


@ExporterRegistry.register("payload")
class PayloadExporter:
    """JSON exporter for the document service payload.

    Attributes:
        format_name: Identifier for this export format.
        file_extension: File extension for payload files.
    """

    format_name: ClassVar[str] = "payload"
    file_extension: ClassVar[str] = "json"

    def __init__(self, inline_markup: bool = False, indent: int | None = 2) -> None:
        self.inline_markup = inline_markup
        self.indent = indent

    def export(self, output: PlanOutput, path: Path) -> None:
        path.write_text(self.export_string(output), encoding="utf-8")

    def export_string(self, output: PlanOutput) -> str:
        payload = build_payload(output, inline_markup=self.inline_markup)
        return json.dumps(payload, indent=self.indent, ensure_ascii=False)
