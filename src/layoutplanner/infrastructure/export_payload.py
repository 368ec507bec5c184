"""Export payload assembly for the document service.

The document service receives one JSON document describing every sheet
and placement. Vector markup is deduplicated: each distinct export markup
is stored once in ``svgAssets`` under an ``svg-{n}`` key and placements
refer to it through ``svgAssetKey``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from layoutplanner.domain.entities import Placement
from layoutplanner.domain.value_objects import SheetFormat
from layoutplanner.infrastructure.bin_packing import PackingResult
from layoutplanner.infrastructure.svg_normalizer import (
    AssetKind,
    SvgContentNormalizer,
)

logger = logging.getLogger(__name__)

DEFAULT_SHEET_LABEL = "sheet"


def export_timestamp(moment: datetime | None = None) -> str:
    """Timestamp in ``YYYY-MM-DD-HH-MM-SS`` form, safe for file names."""
    moment = moment or datetime.now(timezone.utc)
    return moment.strftime("%Y-%m-%d-%H-%M-%S")


class ExportPayloadBuilder:
    """Builds the document service payload from a packing result.

    Attributes:
        normalizer: Content normalizer producing export markup.
        inline_markup: Put markup in each placement's ``svgMarkup`` instead
            of the shared ``svgAssets`` table.
    """

    def __init__(
        self,
        normalizer: SvgContentNormalizer | None = None,
        inline_markup: bool = False,
    ) -> None:
        self.normalizer = normalizer or SvgContentNormalizer()
        self.inline_markup = inline_markup

    def build(
        self,
        result: PackingResult,
        sheet_format: SheetFormat | str | None = None,
        sheet_label: str | None = None,
        timestamp: str | None = None,
    ) -> dict[str, Any]:
        """Assemble the payload.

        Args:
            result: Packing result to export.
            sheet_format: Format the sheets were planned for, if any.
            sheet_label: Label used by the service for file naming;
                defaults to the format label.
            timestamp: Export timestamp; defaults to now.

        Returns:
            JSON-serializable payload mapping.
        """
        fmt = SheetFormat(sheet_format) if sheet_format is not None else None
        label = sheet_label or (fmt.label if fmt is not None else DEFAULT_SHEET_LABEL)

        svg_assets: dict[str, str] = {}
        asset_keys: dict[str, str] = {}

        sheets = []
        for index, sheet in enumerate(result.sheets):
            placements = [
                self._placement_payload(placement, svg_assets, asset_keys)
                for placement in sheet.placements
            ]
            sheets.append(
                {
                    "index": index,
                    "width": sheet.width,
                    "height": sheet.height,
                    "placements": placements,
                }
            )

        logger.debug(
            f"Built export payload: {len(sheets)} sheets, "
            f"{len(svg_assets)} distinct vector assets"
        )

        return {
            "sheetLabel": label,
            "timestamp": timestamp or export_timestamp(),
            "formatKey": fmt.value if fmt is not None else None,
            "spacingMm": result.spacing,
            "svgAssets": svg_assets,
            "sheets": sheets,
        }

    def _placement_payload(
        self,
        placement: Placement,
        svg_assets: dict[str, str],
        asset_keys: dict[str, str],
    ) -> dict[str, Any]:
        asset_key = None
        inline = None

        asset = self.normalizer.prepare(placement)
        if asset is not None and asset.kind is AssetKind.SVG and asset.export_markup:
            markup = asset.export_markup
            if self.inline_markup:
                inline = markup
            else:
                asset_key = asset_keys.get(markup)
                if asset_key is None:
                    asset_key = f"svg-{len(asset_keys) + 1}"
                    asset_keys[markup] = asset_key
                    svg_assets[asset_key] = markup

        material = placement.material
        return {
            "id": placement.id,
            "baseId": placement.base_id,
            "name": placement.name,
            "x": placement.x,
            "y": placement.y,
            "width": placement.width,
            "height": placement.height,
            "rotated": placement.rotated,
            "copyIndex": placement.copy_index,
            "copies": placement.copies,
            "svgAssetKey": asset_key,
            "svgMarkup": inline,
            "sourceWidth": placement.source_width,
            "sourceHeight": placement.source_height,
            "themeStrokeColor": placement.theme_stroke_color,
            "materialColor": material.color,
            "materialThicknessMm": material.thickness_mm,
            "isAdhesiveTape": bool(material.adhesive_tape),
        }


def item_files(
    result: PackingResult,
    normalizer: SvgContentNormalizer | None = None,
) -> dict[str, str]:
    """Per-item vector files keyed by file name.

    Each placed item contributes one ``{base_id}.svg`` file; later copies of
    the same item overwrite earlier ones.
    """
    normalizer = normalizer or SvgContentNormalizer()
    files: dict[str, str] = {}
    for placement in result.placements:
        asset = normalizer.prepare(placement)
        if asset is None or asset.kind is not AssetKind.SVG:
            continue
        if asset.file_name and asset.export_markup:
            files[asset.file_name] = asset.export_markup
    return files
