"""Sheet thumbnail rendering.

Draws each packed sheet as an SVG: a header with the sheet number and
coverage, the sheet outline, and every placement as an embedded image of
its render asset. Placements without usable content get a labelled
placeholder rectangle instead.
"""

from __future__ import annotations

from xml.sax.saxutils import escape, quoteattr

from layoutplanner.domain.entities import Placement, Sheet
from layoutplanner.infrastructure.bin_packing import PackingResult
from layoutplanner.infrastructure.svg_normalizer import SvgContentNormalizer


class SheetPreviewRenderer:
    """Renders scaled sheet previews in SVG format.

    Attributes:
        scale: Pixels per millimetre.
        normalizer: Content normalizer producing placement assets.
        sheet_fill: Fill color of the sheet background.
        sheet_stroke: Stroke color of the sheet outline.
        placeholder_fill: Fill color for placements without content.
        text_color: Color for header and placeholder labels.
        show_labels: Whether placeholder rectangles are labelled.
    """

    def __init__(
        self,
        scale: float = 2.0,
        normalizer: SvgContentNormalizer | None = None,
        sheet_fill: str = "#FFFFFF",
        sheet_stroke: str = "#333333",
        placeholder_fill: str = "#E0E0E0",
        text_color: str = "#000000",
        show_labels: bool = True,
    ) -> None:
        self.scale = scale
        self.normalizer = normalizer or SvgContentNormalizer()
        self.sheet_fill = sheet_fill
        self.sheet_stroke = sheet_stroke
        self.placeholder_fill = placeholder_fill
        self.text_color = text_color
        self.show_labels = show_labels

    def render_svg(self, sheet: Sheet, index: int = 0, total: int = 1) -> str:
        """Generate the preview SVG for one sheet.

        Args:
            sheet: Packed sheet.
            index: Zero-based sheet index.
            total: Total number of sheets (for header display).

        Returns:
            SVG document as a string.
        """
        header_height = 24
        svg_width = sheet.width * self.scale
        svg_height = sheet.height * self.scale + header_height

        parts: list[str] = [
            f'<svg width="{svg_width:g}" height="{svg_height:g}" '
            f'viewBox="0 0 {svg_width:g} {svg_height:g}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            self._render_header(sheet, index, total, svg_width, header_height),
            f'  <rect x="0" y="{header_height}" width="{svg_width:g}" '
            f'height="{sheet.height * self.scale:g}" fill="{self.sheet_fill}" '
            f'stroke="{self.sheet_stroke}" stroke-width="1"/>',
        ]

        for placement in sheet.placements:
            parts.append(self._render_placement(placement, header_height))

        parts.append("</svg>")
        return "\n".join(parts)

    def render_all_svg(self, result: PackingResult) -> list[str]:
        """Generate preview SVGs for all sheets of a packing result."""
        total = len(result.sheets)
        return [
            self.render_svg(sheet, index, total)
            for index, sheet in enumerate(result.sheets)
        ]

    def _render_header(
        self,
        sheet: Sheet,
        index: int,
        total: int,
        svg_width: float,
        header_height: float,
    ) -> str:
        coverage = round(sheet.coverage * 100)
        header_text = (
            f"Sheet {index + 1} of {total} - "
            f"{len(sheet.placements)} items - {coverage}% used"
        )
        return (
            f'  <rect x="0" y="0" width="{svg_width:g}" height="{header_height}" '
            f'fill="#F0F0F0"/>\n'
            f'  <text x="8" y="{header_height - 8}" '
            f'font-family="Arial, sans-serif" font-size="12" '
            f'fill="{self.text_color}">{escape(header_text)}</text>'
        )

    def _render_placement(self, placement: Placement, header_height: float) -> str:
        x = placement.x * self.scale
        y = header_height + placement.y * self.scale
        w = placement.width * self.scale
        h = placement.height * self.scale

        asset = self.normalizer.prepare(placement)
        if asset is not None:
            return (
                f'  <image x="{x:g}" y="{y:g}" width="{w:g}" height="{h:g}" '
                f'preserveAspectRatio="none" href={quoteattr(asset.url)}/>'
            )

        svg_parts = [
            "  <g>",
            f'    <rect x="{x:g}" y="{y:g}" width="{w:g}" height="{h:g}" '
            f'fill="{self.placeholder_fill}" stroke="{self.sheet_stroke}" '
            f'stroke-dasharray="4,2"/>',
        ]
        font_size = min(12, min(w, h) / 4)
        if self.show_labels and font_size >= 6:
            svg_parts.append(
                f'    <text x="{x + w / 2:g}" y="{y + h / 2:g}" '
                f'text-anchor="middle" dominant-baseline="middle" '
                f'font-family="Arial, sans-serif" font-size="{font_size:g}" '
                f'fill="{self.text_color}">{escape(placement.name)}</text>'
            )
        svg_parts.append("  </g>")
        return "\n".join(svg_parts)
