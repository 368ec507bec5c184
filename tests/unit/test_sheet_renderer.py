"""Unit tests for sheet preview rendering."""

from __future__ import annotations

from typing import Callable
from xml.etree import ElementTree as ET

import pytest

from layoutplanner.domain.entities import NormalizedItem
from layoutplanner.domain.value_objects import SheetSize
from layoutplanner.infrastructure.bin_packing import PackingResult, pack
from layoutplanner.infrastructure.sheet_renderer import SheetPreviewRenderer

SVG_NS = "http://www.w3.org/2000/svg"
NS = {"svg": SVG_NS}

LOGO_SVG = (
    f'<svg xmlns="{SVG_NS}" viewBox="0 0 10 10"><circle cx="5" cy="5" r="4" '
    'stroke="#000"/></svg>'
)


@pytest.fixture
def result(item_factory: Callable[..., NormalizedItem]) -> PackingResult:
    items = [
        item_factory("logo", 50, 50, svg=LOGO_SVG),
        item_factory("photo", 40, 30, preview="https://cdn.example/p.png"),
        item_factory("blank", 60, 30, name="Blank <card>"),
    ]
    return pack(items, SheetSize(210, 297), spacing=5)


class TestSheetPreviewRenderer:
    """Tests for SheetPreviewRenderer."""

    def test_document_size(self, result: PackingResult) -> None:
        svg = SheetPreviewRenderer(scale=2.0).render_svg(result.sheets[0])
        root = ET.fromstring(svg)
        assert root.get("width") == "420"
        assert root.get("height") == str(297 * 2 + 24)

    def test_header_text(self, result: PackingResult) -> None:
        svg = SheetPreviewRenderer().render_svg(result.sheets[0], index=0, total=2)
        assert "Sheet 1 of 2 - 3 items" in svg

    def test_vector_and_raster_assets_embedded(self, result: PackingResult) -> None:
        root = ET.fromstring(SheetPreviewRenderer().render_svg(result.sheets[0]))
        hrefs = [image.get("href") for image in root.findall("svg:image", NS)]

        assert len(hrefs) == 2
        assert hrefs[0].startswith("data:image/svg+xml;charset=utf-8,")
        assert hrefs[1] == "https://cdn.example/p.png"

    def test_placeholder_for_missing_content(self, result: PackingResult) -> None:
        svg = SheetPreviewRenderer().render_svg(result.sheets[0])
        assert 'stroke-dasharray="4,2"' in svg
        assert "Blank &lt;card&gt;" in svg

    def test_labels_can_be_hidden(self, result: PackingResult) -> None:
        svg = SheetPreviewRenderer(show_labels=False).render_svg(result.sheets[0])
        assert "Blank" not in svg

    def test_placement_positions_scaled(self, result: PackingResult) -> None:
        root = ET.fromstring(SheetPreviewRenderer(scale=1.0).render_svg(result.sheets[0]))
        first = root.findall("svg:image", NS)[0]
        assert (first.get("x"), first.get("y")) == ("0", "24")
        assert (first.get("width"), first.get("height")) == ("50", "50")

    def test_render_all(self, item_factory: Callable[..., NormalizedItem]) -> None:
        result = pack([item_factory("page", 210, 297, copies=2)], SheetSize(210, 297))
        documents = SheetPreviewRenderer().render_all_svg(result)
        assert len(documents) == 2
        assert "Sheet 2 of 2" in documents[1]
