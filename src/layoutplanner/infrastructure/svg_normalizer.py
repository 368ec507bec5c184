"""Vector content normalization for placement previews and export.

Each placement's SVG markup is parsed once and turned into two independent
documents: an export document handed to the document service and written
as a per-item file, and a preview document displayed on screen. Both go
through the same pipeline on their own copy of the tree:

1. viewBox origin is moved to (0, 0) by wrapping the drawable children in a
   translating group;
2. a missing viewBox is synthesized from the width/height attributes or
   the item's source size;
3. percentage geometry is resolved against the viewBox extent;
4. theme-colored elements become outlines, black strokes get the outline
   color, and text is given a stroke;
5. rotated placements are wrapped in a rotating group.

Parse failures are logged and never raised; callers get a raster asset or
None and render a placeholder.
"""

from __future__ import annotations

import copy
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable
from urllib.parse import quote
from xml.etree import ElementTree as ET

from layoutplanner.domain.colors import (
    colors_match,
    is_black_stroke,
    is_paint_server,
)
from layoutplanner.domain.entities import Placement
from layoutplanner.domain.value_objects import RenderStyle, mm_to_px

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

# Elements that carry no drawable content and stay outside wrapper groups.
METADATA_TAGS = frozenset({"defs", "style", "title", "desc", "metadata"})
TEXT_TAGS = frozenset({"text", "tspan"})

DATA_URI_PREFIX = "data:image/svg+xml;charset=utf-8,"

_NUMBER_PATTERN = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_STYLE_STROKE_PATTERN = re.compile(r"(?<![\w-])(stroke\s*:\s*)([^;]+)", re.IGNORECASE)

_PERCENT_HANDLERS: dict[str, Callable[[float, float, float], float]] = {
    "width": lambda pct, w, h: pct / 100 * w,
    "x": lambda pct, w, h: pct / 100 * w,
    "cx": lambda pct, w, h: pct / 100 * w,
    "rx": lambda pct, w, h: pct / 100 * w,
    "height": lambda pct, w, h: pct / 100 * h,
    "y": lambda pct, w, h: pct / 100 * h,
    "cy": lambda pct, w, h: pct / 100 * h,
    "ry": lambda pct, w, h: pct / 100 * h,
    "r": lambda pct, w, h: pct / 100 * min(w, h),
}


class AssetKind(str, Enum):
    """Kind of render asset."""

    SVG = "svg"
    RASTER = "raster"


@dataclass(frozen=True)
class RenderAsset:
    """Renderable content for one placement.

    Attributes:
        kind: SVG asset or raster passthrough.
        url: URL usable as an image source (data URI for SVG assets).
        preview_markup: Preview SVG document (SVG assets only).
        export_markup: Export SVG document (SVG assets only).
        file_name: File name for the per-item export file (SVG assets only).
    """

    kind: AssetKind
    url: str
    preview_markup: str | None = None
    export_markup: str | None = None
    file_name: str | None = None


# -----------------------------------------------------------------------------
# Tree helpers
# -----------------------------------------------------------------------------


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _namespace_of(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


def _qualified(root: ET.Element, name: str) -> str:
    ns = _namespace_of(root.tag)
    return f"{{{ns}}}{name}" if ns else name


def _qualify_tree(root: ET.Element) -> None:
    """Put un-namespaced documents into the SVG namespace.

    Serialized previews are used as data URIs, which browsers only render
    when the SVG namespace is declared.
    """
    if _namespace_of(root.tag):
        return
    for element in root.iter():
        if isinstance(element.tag, str) and not element.tag.startswith("{"):
            element.tag = f"{{{SVG_NS}}}{element.tag}"


def format_number(value: float) -> str:
    """Compact decimal representation used in rewritten attributes.

    Raises:
        ValueError: The value is infinite or NaN.
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot write non-finite number {value!r}")
    if value == int(value):
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


def parse_length(value: str | None) -> float | None:
    """Leading number of a length attribute, ignoring units.

    Percentages and non-numeric values return None.
    """
    if not value or value.strip().endswith("%"):
        return None
    match = _NUMBER_PATTERN.match(value)
    if match is None:
        return None
    number = float(match.group(1))
    return number if math.isfinite(number) else None


def parse_view_box(value: str | None) -> tuple[float, float, float, float] | None:
    """Parse a viewBox attribute into (min_x, min_y, width, height)."""
    if not value:
        return None
    parts = [p for p in re.split(r"[\s,]+", value.strip()) if p]
    if len(parts) != 4:
        return None
    try:
        numbers = [float(p) for p in parts]
    except ValueError:
        return None
    if not all(math.isfinite(n) for n in numbers):
        return None
    min_x, min_y, width, height = numbers
    return min_x, min_y, width, height


def parse_style(style: str | None) -> dict[str, str]:
    """Parse an inline style attribute into ordered declarations."""
    declarations: dict[str, str] = {}
    if not style:
        return declarations
    for chunk in style.split(";"):
        prop, sep, value = chunk.partition(":")
        if not sep or not prop.strip():
            continue
        declarations[prop.strip().lower()] = value.strip()
    return declarations


def _write_style(element: ET.Element, declarations: dict[str, str]) -> None:
    if declarations:
        element.set("style", "; ".join(f"{k}: {v}" for k, v in declarations.items()))
    elif "style" in element.attrib:
        del element.attrib["style"]


def _has_property(element: ET.Element, declarations: dict[str, str], name: str) -> bool:
    return bool(element.get(name)) or name in declarations


# -----------------------------------------------------------------------------
# Geometry passes
# -----------------------------------------------------------------------------


def _wrap_children(
    root: ET.Element,
    transform: str,
    keep: Callable[[ET.Element], bool],
    extra: dict[str, str] | None = None,
) -> bool:
    """Move children not selected by ``keep`` into a new group.

    Returns False (and leaves the tree alone) when nothing would be wrapped.
    """
    to_wrap = [child for child in list(root) if not keep(child)]
    if not to_wrap:
        return False
    wrapper = ET.Element(_qualified(root, "g"), extra or {})
    wrapper.set("transform", transform)
    for child in to_wrap:
        root.remove(child)
        wrapper.append(child)
    root.append(wrapper)
    return True


def normalize_view_box(
    root: ET.Element,
    fallback_width: float,
    fallback_height: float,
) -> tuple[float, float]:
    """Anchor the document's coordinate space at (0, 0).

    A viewBox with a non-zero origin gets its drawable children wrapped in
    a translating group and is rewritten to start at (0, 0). A missing or
    unreadable viewBox is synthesized from numeric width/height attributes,
    falling back to the given dimensions.

    Args:
        root: Root ``svg`` element (modified in place).
        fallback_width: Width to use when the document declares none.
        fallback_height: Height to use when the document declares none.

    Returns:
        The (width, height) extent of the resulting viewBox.
    """
    view_box = parse_view_box(root.get("viewBox"))
    if view_box is None:
        width = parse_length(root.get("width"))
        height = parse_length(root.get("height"))
        width = width if width is not None else fallback_width
        height = height if height is not None else fallback_height
        root.set("viewBox", f"0 0 {format_number(width)} {format_number(height)}")
        return width, height

    min_x, min_y, width, height = view_box
    if min_x != 0 or min_y != 0:
        _wrap_children(
            root,
            f"translate({format_number(-min_x)},{format_number(-min_y)})",
            keep=lambda child: _local_name(child.tag) in METADATA_TAGS,
        )
        root.set("viewBox", f"0 0 {format_number(width)} {format_number(height)}")
    return width, height


def resolve_percentages(root: ET.Element, width: float, height: float) -> None:
    """Replace percentage geometry attributes with absolute values.

    Walks every descendant of ``root`` (and ``root`` itself). ``width``,
    ``x``, ``cx`` and ``rx`` resolve against the viewBox width; ``height``,
    ``y``, ``cy`` and ``ry`` against its height; ``r`` against the smaller
    of the two. Other attributes are left untouched.
    """
    for element in root.iter():
        for name, value in list(element.attrib.items()):
            handler = _PERCENT_HANDLERS.get(name)
            if handler is None or not isinstance(value, str):
                continue
            text = value.strip()
            if not text.endswith("%"):
                continue
            try:
                pct = float(text[:-1])
            except ValueError:
                continue
            resolved = handler(pct, width, height)
            # Overflowing results keep their percentage form
            if not math.isfinite(resolved):
                continue
            element.set(name, format_number(resolved))


def rotate_quarter_turn(root: ET.Element, width: float, height: float) -> None:
    """Rotate document content by 90 degrees clockwise.

    Content is wrapped in a rotating group, the viewBox extent is swapped
    and numeric width/height attributes are swapped as well.
    """
    if not (width > 0 and height > 0):
        return
    _wrap_children(
        root,
        f"translate({format_number(height)},0) rotate(90)",
        keep=lambda child: _local_name(child.tag) == "defs",
        extra={"data-layout-rotated": "true"},
    )
    root.set("viewBox", f"0 0 {format_number(height)} {format_number(width)}")
    raw_width = parse_length(root.get("width"))
    raw_height = parse_length(root.get("height"))
    if raw_width is not None and raw_height is not None:
        root.set("width", format_number(raw_height))
        root.set("height", format_number(raw_width))


# -----------------------------------------------------------------------------
# Color passes
# -----------------------------------------------------------------------------


def _matches_theme(value: str | None, theme_color: str) -> bool:
    return bool(value) and not is_paint_server(value) and colors_match(value, theme_color)


def outline_theme_colored(root: ET.Element, theme_color: str, style: RenderStyle) -> int:
    """Turn elements painted in the theme color into outlines.

    Any non-text element whose stroke or fill (attribute or inline style)
    equals ``theme_color`` loses its fill and gets the highlight stroke,
    with default stroke width, line join and line cap where not set.

    Returns:
        Number of elements rewritten.
    """
    rewritten = 0
    for element in root.iter():
        if _local_name(element.tag) in TEXT_TAGS:
            continue
        declarations = parse_style(element.get("style"))
        matched = (
            _matches_theme(element.get("stroke"), theme_color)
            or _matches_theme(element.get("fill"), theme_color)
            or _matches_theme(declarations.get("stroke"), theme_color)
            or _matches_theme(declarations.get("fill"), theme_color)
        )
        if not matched:
            continue

        element.set("fill", "none")
        element.set("stroke", style.highlight_color)
        if "fill" in declarations:
            declarations["fill"] = "none"
        if "stroke" in declarations:
            declarations["stroke"] = style.highlight_color

        defaults = {
            "stroke-width": format_number(style.default_stroke_width),
            "stroke-linejoin": "round",
            "stroke-linecap": "round",
        }
        for name, value in defaults.items():
            if not _has_property(element, declarations, name):
                element.set(name, value)
        _write_style(element, declarations)
        rewritten += 1
    return rewritten


def recolor_black_strokes(root: ET.Element, outline_color: str) -> int:
    """Give pure black strokes the outline color.

    Both the ``stroke`` attribute and ``stroke:`` declarations inside an
    inline style are rewritten.

    Returns:
        Number of elements rewritten.
    """

    def replace(match: re.Match[str]) -> str:
        if is_black_stroke(match.group(2)):
            return f"{match.group(1)}{outline_color}"
        return match.group(0)

    rewritten = 0
    for element in root.iter():
        changed = False
        if is_black_stroke(element.get("stroke")):
            element.set("stroke", outline_color)
            changed = True
        inline = element.get("style")
        if inline:
            updated = _STYLE_STROKE_PATTERN.sub(replace, inline)
            if updated != inline:
                element.set("style", updated)
                changed = True
        rewritten += changed
    return rewritten


def outline_text(root: ET.Element, style: RenderStyle) -> None:
    """Stroke all text so it is both filled and outlined.

    ``text`` and ``tspan`` elements get the text stroke color and width.
    Fill is kept when the element or an enclosing text element declares
    one, and defaults to solid black otherwise.
    """

    def visit(element: ET.Element, fill_inherited: bool) -> None:
        is_text = _local_name(element.tag) in TEXT_TAGS
        if is_text:
            declarations = parse_style(element.get("style"))
            declarations.pop("stroke", None)
            declarations.pop("stroke-width", None)
            has_fill = _has_property(element, declarations, "fill")
            if not has_fill and not fill_inherited:
                element.set("fill", style.text_fill_color)
            element.set("stroke", style.text_stroke_color)
            element.set("stroke-width", format_number(style.text_stroke_width))
            _write_style(element, declarations)
            fill_inherited = True
        for child in element:
            visit(child, fill_inherited)

    visit(root, False)


# -----------------------------------------------------------------------------
# Normalizer
# -----------------------------------------------------------------------------


class SvgContentNormalizer:
    """Prepares placement content for preview and export.

    Attributes:
        style: Colors and stroke widths used by the color passes.
    """

    def __init__(self, style: RenderStyle | None = None) -> None:
        self.style = style or RenderStyle()

    def prepare(self, placement: Placement) -> RenderAsset | None:
        """Build the render asset for a placement.

        Args:
            placement: Placement whose content should be rendered.

        Returns:
            An SVG asset when the placement carries readable markup, a
            raster asset when it only has a preview URL, otherwise None.
        """
        if placement.svg:
            asset = self._prepare_svg(placement)
            if asset is not None:
                return asset

        if placement.preview:
            return RenderAsset(kind=AssetKind.RASTER, url=placement.preview)

        return None

    def _prepare_svg(self, placement: Placement) -> RenderAsset | None:
        try:
            source = ET.fromstring(placement.svg)
        except ET.ParseError as e:
            logger.warning(f"Could not parse markup for '{placement.id}': {e}")
            return None

        if _local_name(source.tag) != "svg":
            logger.warning(
                f"Markup for '{placement.id}' has root "
                f"<{_local_name(source.tag)}>, expected <svg>"
            )
            return None

        try:
            base = copy.deepcopy(source)
            _qualify_tree(base)
            width, height = normalize_view_box(
                base,
                mm_to_px(placement.source_width),
                mm_to_px(placement.source_height),
            )
            if not base.get("preserveAspectRatio"):
                base.set("preserveAspectRatio", "xMidYMid meet")

            export_root = self._transform(copy.deepcopy(base), placement, width, height)
            preview_root = self._transform(copy.deepcopy(base), placement, width, height)
            preview_root.set("width", "100%")
            preview_root.set("height", "100%")

            export_markup = ET.tostring(export_root, encoding="unicode")
            preview_markup = ET.tostring(preview_root, encoding="unicode")
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning(f"Could not normalize markup for '{placement.id}': {e}")
            return None

        return RenderAsset(
            kind=AssetKind.SVG,
            url=DATA_URI_PREFIX + quote(preview_markup, safe="-_.!~*'()"),
            preview_markup=preview_markup,
            export_markup=export_markup,
            file_name=f"{placement.base_id}.svg",
        )

    def _transform(
        self,
        root: ET.Element,
        placement: Placement,
        width: float,
        height: float,
    ) -> ET.Element:
        """Run the geometry and color passes on an owned tree."""
        resolve_percentages(root, width, height)
        if placement.theme_stroke_color:
            outline_theme_colored(root, placement.theme_stroke_color, self.style)
        recolor_black_strokes(root, self.style.outline_color)
        outline_text(root, self.style)
        if placement.rotated:
            rotate_quarter_turn(root, width, height)
        return root


def prepare_for_render(
    placement: Placement,
    style: RenderStyle | None = None,
) -> RenderAsset | None:
    """Build the render asset for a placement with the given style."""
    return SvgContentNormalizer(style).prepare(placement)
