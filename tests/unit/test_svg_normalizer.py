"""Unit tests for vector content normalization.

Tests cover:
- Attribute parsing helpers
- viewBox origin fix and implicit viewBox
- Percentage resolution
- Theme color outlining, black stroke recoloring and text outlining
- Quarter-turn rotation of rotated placements
- Preview and export documents, data URIs and fallbacks
"""

from __future__ import annotations

from typing import Callable
from urllib.parse import unquote
from xml.etree import ElementTree as ET

import pytest

from layoutplanner.domain.entities import Placement
from layoutplanner.domain.value_objects import RenderStyle
from layoutplanner.infrastructure.svg_normalizer import (
    DATA_URI_PREFIX,
    SVG_NS,
    AssetKind,
    SvgContentNormalizer,
    format_number,
    normalize_view_box,
    outline_text,
    outline_theme_colored,
    parse_length,
    parse_style,
    parse_view_box,
    prepare_for_render,
    recolor_black_strokes,
    resolve_percentages,
    rotate_quarter_turn,
)

PlacementFactory = Callable[..., Placement]

NS = {"svg": SVG_NS}


def _svg(body: str, attrs: str = 'width="100" height="50" viewBox="0 0 100 50"') -> str:
    return f'<svg xmlns="{SVG_NS}" {attrs}>{body}</svg>'


def _tree(body: str, attrs: str = 'width="100" height="50" viewBox="0 0 100 50"') -> ET.Element:
    return ET.fromstring(_svg(body, attrs))


def _find(root: ET.Element, tag: str) -> ET.Element:
    element = root.find(f".//svg:{tag}", NS)
    assert element is not None, f"<{tag}> not found"
    return element


# =============================================================================
# Parsing helpers
# =============================================================================


class TestParsingHelpers:
    """Tests for number, length, viewBox and style parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [(2.0, "2"), (1.5, "1.5"), (-10.0, "-10"), (1 / 3, "0.333333")],
    )
    def test_format_number(self, value: float, expected: str) -> None:
        assert format_number(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("12", 12.0), ("12px", 12.0), ("3.5mm", 3.5), (" -4 ", -4.0), ("1e2", 100.0)],
    )
    def test_parse_length(self, value: str, expected: float) -> None:
        assert parse_length(value) == expected

    @pytest.mark.parametrize("value", [None, "", "50%", "auto"])
    def test_parse_length_unusable(self, value: str | None) -> None:
        assert parse_length(value) is None

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_format_number_rejects_non_finite(self, value: float) -> None:
        with pytest.raises(ValueError):
            format_number(value)

    def test_parse_view_box(self) -> None:
        assert parse_view_box("0 0 100 50") == (0.0, 0.0, 100.0, 50.0)
        assert parse_view_box("-5,10, 20 30") == (-5.0, 10.0, 20.0, 30.0)

    @pytest.mark.parametrize("value", [None, "", "0 0 10", "a b c d", "0 0 10 inf"])
    def test_parse_view_box_invalid(self, value: str | None) -> None:
        assert parse_view_box(value) is None

    def test_parse_style(self) -> None:
        assert parse_style("fill: red;Stroke:blue; ;junk") == {
            "fill": "red",
            "stroke": "blue",
        }


# =============================================================================
# Geometry passes
# =============================================================================


class TestNormalizeViewBox:
    """Tests for normalize_view_box."""

    def test_zero_origin_untouched(self) -> None:
        root = _tree('<rect width="10" height="10"/>')
        assert normalize_view_box(root, 1, 1) == (100.0, 50.0)
        assert root.get("viewBox") == "0 0 100 50"
        assert root.find("svg:g", NS) is None

    def test_offset_origin_wrapped_in_translate(self) -> None:
        root = _tree(
            '<defs><linearGradient id="g"/></defs><title>t</title>'
            '<rect width="10" height="10"/><circle r="2"/>',
            attrs='viewBox="10 -20 100 50"',
        )
        assert normalize_view_box(root, 1, 1) == (100.0, 50.0)
        assert root.get("viewBox") == "0 0 100 50"

        children = [child.tag.split("}")[1] for child in root]
        assert children == ["defs", "title", "g"]
        group = root.find("svg:g", NS)
        assert group is not None
        assert group.get("transform") == "translate(-10,20)"
        assert [child.tag.split("}")[1] for child in group] == ["rect", "circle"]

    def test_missing_view_box_from_size_attributes(self) -> None:
        root = _tree("", attrs='width="120px" height="80"')
        assert normalize_view_box(root, 1, 1) == (120.0, 80.0)
        assert root.get("viewBox") == "0 0 120 80"

    def test_missing_view_box_falls_back(self) -> None:
        root = _tree("", attrs='width="100%"')
        assert normalize_view_box(root, 30.0, 40.5) == (30.0, 40.5)
        assert root.get("viewBox") == "0 0 30 40.5"

    def test_invalid_view_box_treated_as_missing(self) -> None:
        root = _tree("", attrs='viewBox="broken" width="10" height="20"')
        assert normalize_view_box(root, 1, 1) == (10.0, 20.0)
        assert root.get("viewBox") == "0 0 10 20"


class TestResolvePercentages:
    """Tests for resolve_percentages."""

    def test_axis_relative_attributes(self) -> None:
        root = _tree(
            '<rect x="10%" y="10%" width="50%" height="50%" rx="5%" ry="10%"/>',
            attrs='viewBox="0 0 200 100"',
        )
        resolve_percentages(root, 200, 100)
        rect = _find(root, "rect")
        assert rect.get("x") == "20"
        assert rect.get("y") == "10"
        assert rect.get("width") == "100"
        assert rect.get("height") == "50"
        assert rect.get("rx") == "10"
        assert rect.get("ry") == "10"

    def test_radius_uses_shorter_side(self) -> None:
        root = _tree('<circle cx="50%" cy="50%" r="10%"/>', attrs='viewBox="0 0 200 100"')
        resolve_percentages(root, 200, 100)
        circle = _find(root, "circle")
        assert (circle.get("cx"), circle.get("cy"), circle.get("r")) == ("100", "50", "10")

    def test_other_attributes_untouched(self) -> None:
        root = _tree('<rect width="10" opacity="50%" x="bad%"/>')
        resolve_percentages(root, 100, 50)
        rect = _find(root, "rect")
        assert rect.get("width") == "10"
        assert rect.get("opacity") == "50%"
        assert rect.get("x") == "bad%"

    def test_overflowing_result_keeps_percentage(self) -> None:
        root = _tree('<rect width="200%" height="50%"/>', attrs='viewBox="0 0 1e308 1e308"')
        resolve_percentages(root, 1e308, 1e308)
        rect = _find(root, "rect")
        assert rect.get("width") == "200%"
        assert not rect.get("height", "").endswith("%")


class TestRotateQuarterTurn:
    """Tests for rotate_quarter_turn."""

    def test_wraps_content_and_swaps_extent(self) -> None:
        root = _tree('<defs/><rect width="100" height="50"/>')
        rotate_quarter_turn(root, 100, 50)

        assert root.get("viewBox") == "0 0 50 100"
        assert root.get("width") == "50"
        assert root.get("height") == "100"
        assert [child.tag.split("}")[1] for child in root] == ["defs", "g"]
        group = root.find("svg:g", NS)
        assert group is not None
        assert group.get("transform") == "translate(50,0) rotate(90)"

    def test_non_numeric_size_left_alone(self) -> None:
        root = _tree("<rect/>", attrs='width="100%" height="100%" viewBox="0 0 10 20"')
        rotate_quarter_turn(root, 10, 20)
        assert root.get("viewBox") == "0 0 20 10"
        assert root.get("width") == "100%"

    def test_zero_extent_is_noop(self) -> None:
        root = _tree("<rect/>")
        rotate_quarter_turn(root, 0, 50)
        assert root.find("svg:g", NS) is None


# =============================================================================
# Color passes
# =============================================================================


class TestOutlineThemeColored:
    """Tests for outline_theme_colored."""

    def test_fill_match_becomes_outline(self) -> None:
        root = _tree('<rect fill="#008181"/>')
        count = outline_theme_colored(root, "#008181", RenderStyle(highlight_color="#00ff00"))

        rect = _find(root, "rect")
        assert count == 1
        assert rect.get("fill") == "none"
        assert rect.get("stroke") == "#00ff00"
        assert rect.get("stroke-width") == "1"
        assert rect.get("stroke-linejoin") == "round"
        assert rect.get("stroke-linecap") == "round"

    def test_match_across_notations(self) -> None:
        root = _tree('<path stroke="rgb(0, 129, 129)"/>')
        assert outline_theme_colored(root, "#008181", RenderStyle()) == 1

    def test_style_declarations_rewritten(self) -> None:
        root = _tree('<rect style="fill:#008181;stroke-width:3"/>')
        outline_theme_colored(root, "#008181", RenderStyle())

        rect = _find(root, "rect")
        declarations = parse_style(rect.get("style"))
        assert declarations["fill"] == "none"
        assert declarations["stroke-width"] == "3"
        assert rect.get("stroke-width") is None

    def test_existing_join_and_cap_kept(self) -> None:
        root = _tree('<path fill="#008181" stroke-linejoin="miter" stroke-linecap="butt"/>')
        outline_theme_colored(root, "#008181", RenderStyle())
        path = _find(root, "path")
        assert path.get("stroke-linejoin") == "miter"
        assert path.get("stroke-linecap") == "butt"

    def test_text_and_paint_servers_skipped(self) -> None:
        root = _tree('<text fill="#008181">a</text><rect fill="url(#g)"/><rect fill="#111"/>')
        assert outline_theme_colored(root, "#008181", RenderStyle()) == 0
        assert _find(root, "text").get("fill") == "#008181"


class TestRecolorBlackStrokes:
    """Tests for recolor_black_strokes."""

    def test_attribute_and_style(self) -> None:
        root = _tree(
            '<path stroke="#000"/>'
            '<rect style="fill: black; stroke: rgb(0,0,0); stroke-width: 2"/>'
            '<circle stroke="rgba(0,0,0,0)"/>'
        )
        assert recolor_black_strokes(root, "#0000FF") == 2

        assert _find(root, "path").get("stroke") == "#0000FF"
        style = _find(root, "rect").get("style")
        assert "stroke: #0000FF" in style
        assert "fill: black" in style
        assert "stroke-width: 2" in style
        assert _find(root, "circle").get("stroke") == "rgba(0,0,0,0)"

    def test_fill_black_untouched(self) -> None:
        root = _tree('<rect fill="#000000"/>')
        assert recolor_black_strokes(root, "#0000FF") == 0


class TestOutlineText:
    """Tests for outline_text."""

    def test_text_gets_stroke_and_default_fill(self) -> None:
        root = _tree('<text style="stroke:red;font-size:4">Hi</text>')
        outline_text(root, RenderStyle())

        text = _find(root, "text")
        assert text.get("fill") == "#000000"
        assert text.get("stroke") == "#008181"
        assert text.get("stroke-width") == "0.5"
        assert parse_style(text.get("style")) == {"font-size": "4"}

    def test_declared_fill_kept(self) -> None:
        root = _tree('<text style="fill:#ff0000">Hi</text>')
        outline_text(root, RenderStyle())
        text = _find(root, "text")
        assert text.get("fill") is None
        assert parse_style(text.get("style"))["fill"] == "#ff0000"

    def test_tspan_inherits_enclosing_fill(self) -> None:
        root = _tree('<text fill="red"><tspan>a</tspan></text>')
        outline_text(root, RenderStyle())
        tspan = _find(root, "tspan")
        assert tspan.get("fill") is None
        assert tspan.get("stroke") == "#008181"


# =============================================================================
# SvgContentNormalizer
# =============================================================================


class TestSvgContentNormalizer:
    """Tests for SvgContentNormalizer.prepare."""

    def test_svg_asset(self, placement_factory: PlacementFactory) -> None:
        asset = SvgContentNormalizer().prepare(placement_factory(item_id="logo"))

        assert asset is not None
        assert asset.kind is AssetKind.SVG
        assert asset.file_name == "logo.svg"
        assert asset.url.startswith(DATA_URI_PREFIX)
        assert unquote(asset.url[len(DATA_URI_PREFIX):]) == asset.preview_markup

    def test_preview_fills_container(self, placement_factory: PlacementFactory) -> None:
        asset = prepare_for_render(placement_factory())
        assert asset is not None

        preview = ET.fromstring(asset.preview_markup)
        export = ET.fromstring(asset.export_markup)
        assert (preview.get("width"), preview.get("height")) == ("100%", "100%")
        assert (export.get("width"), export.get("height")) == ("100", "50")
        assert preview.get("preserveAspectRatio") == "xMidYMid meet"

    def test_declared_aspect_ratio_kept(self, placement_factory: PlacementFactory) -> None:
        svg = _svg("<rect/>", attrs='viewBox="0 0 10 10" preserveAspectRatio="none"')
        asset = prepare_for_render(placement_factory(svg=svg))
        assert asset is not None
        assert ET.fromstring(asset.export_markup).get("preserveAspectRatio") == "none"

    def test_unqualified_markup_gets_namespace(
        self, placement_factory: PlacementFactory
    ) -> None:
        asset = prepare_for_render(placement_factory(svg='<svg><rect width="5"/></svg>'))
        assert asset is not None
        assert f'xmlns="{SVG_NS}"' in asset.export_markup
        assert ET.fromstring(asset.export_markup).find("svg:rect", NS) is not None

    def test_implicit_view_box_from_source_size(
        self, placement_factory: PlacementFactory
    ) -> None:
        placement = placement_factory(svg="<svg><rect/></svg>", width_mm=25.4, height_mm=50.8)
        asset = prepare_for_render(placement)
        assert asset is not None
        assert ET.fromstring(asset.export_markup).get("viewBox") == "0 0 72 144"

    def test_theme_color_outlined(self, placement_factory: PlacementFactory) -> None:
        svg = _svg('<rect width="10" height="10" fill="#ABCDEF"/>')
        asset = prepare_for_render(placement_factory(svg=svg, theme_stroke_color="#abcdef"))
        assert asset is not None

        for markup in (asset.export_markup, asset.preview_markup):
            rect = _find(ET.fromstring(markup), "rect")
            assert rect.get("fill") == "none"
            assert rect.get("stroke") == "#008181"
            assert rect.get("stroke-width") == "1"

    def test_custom_style(self, placement_factory: PlacementFactory) -> None:
        svg = _svg('<path stroke="black"/>')
        style = RenderStyle(outline_color="#123456")
        asset = SvgContentNormalizer(style).prepare(placement_factory(svg=svg))
        assert asset is not None
        assert _find(ET.fromstring(asset.export_markup), "path").get("stroke") == "#123456"

    def test_rotated_placement(self, placement_factory: PlacementFactory) -> None:
        asset = prepare_for_render(placement_factory(rotated=True))
        assert asset is not None

        export = ET.fromstring(asset.export_markup)
        assert export.get("viewBox") == "0 0 50 100"
        assert (export.get("width"), export.get("height")) == ("50", "100")
        group = export.find("svg:g", NS)
        assert group is not None
        assert group.get("transform") == "translate(50,0) rotate(90)"

        preview = ET.fromstring(asset.preview_markup)
        assert preview.get("viewBox") == "0 0 50 100"
        assert preview.get("width") == "100%"

    def test_documents_are_independent(self, placement_factory: PlacementFactory) -> None:
        """Origin wrapping happens once per document, not twice."""
        svg = _svg("<rect/>", attrs='viewBox="5 5 10 10"')
        asset = prepare_for_render(placement_factory(svg=svg))
        assert asset is not None
        for markup in (asset.export_markup, asset.preview_markup):
            root = ET.fromstring(markup)
            assert len(root.findall(".//svg:g", NS)) == 1

    def test_preparing_twice_is_stable(self, placement_factory: PlacementFactory) -> None:
        placement = placement_factory(rotated=True)
        first = prepare_for_render(placement)
        second = prepare_for_render(placement)
        assert first == second

    def test_unparseable_markup_falls_back_to_raster(
        self, placement_factory: PlacementFactory
    ) -> None:
        placement = placement_factory(svg="<svg", preview="https://cdn.example/a.png")
        asset = prepare_for_render(placement)
        assert asset is not None
        assert asset.kind is AssetKind.RASTER
        assert asset.url == "https://cdn.example/a.png"
        assert asset.export_markup is None

    def test_non_svg_root_without_preview(
        self, placement_factory: PlacementFactory
    ) -> None:
        assert prepare_for_render(placement_factory(svg="<html/>")) is None

    def test_huge_view_box_does_not_raise(
        self, placement_factory: PlacementFactory
    ) -> None:
        svg = _svg('<rect width="200%" height="10"/>', attrs='viewBox="0 0 1e308 1e308"')
        asset = prepare_for_render(placement_factory(svg=svg, width_mm=50, height_mm=50))
        assert asset is not None
        assert asset.kind is AssetKind.SVG
        assert 'width="200%"' in asset.export_markup

    def test_huge_view_box_rotated(self, placement_factory: PlacementFactory) -> None:
        svg = _svg('<rect width="200%" height="10"/>', attrs='viewBox="0 0 1e308 1e308"')
        placement = placement_factory(svg=svg, width_mm=50, height_mm=50, rotated=True)
        asset = prepare_for_render(placement)
        assert asset is not None
        assert asset.kind is AssetKind.SVG

    def test_no_content(self, placement_factory: PlacementFactory) -> None:
        assert prepare_for_render(placement_factory(svg=None)) is None

    def test_parse_failure_logged(
        self, placement_factory: PlacementFactory, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("WARNING", logger="layoutplanner.infrastructure.svg_normalizer"):
            prepare_for_render(placement_factory(svg="<svg><g></svg>", item_id="broken"))
        assert "broken" in caplog.text
