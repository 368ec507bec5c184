"""Data transfer objects: design input schema and planning output.

Designs arrive from the editor with optional, possibly nested fields of
uncertain shape. ``DesignInput`` names the fields the planner reads and
keeps everything else; the ``resolve_*`` functions look values up in the
places they may live and return an explicit default when none is usable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from layoutplanner.domain.entities import (
    NormalizedItem,
    PackingQueueEntry,
    Placement,
    Sheet,
)
from layoutplanner.domain.summary import LayoutSummary
from layoutplanner.domain.value_objects import (
    RenderStyle,
    SheetFormat,
    SheetOrientation,
    SheetSize,
)

if TYPE_CHECKING:
    from layoutplanner.infrastructure.bin_packing import PackingResult
    from layoutplanner.infrastructure.svg_normalizer import RenderAsset


class DesignInput(BaseModel):
    """A design canvas as supplied by the surrounding application.

    Every field is optional and loosely typed so that one malformed record
    never fails validation of a whole batch; the normalizer decides what is
    usable.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Any = None
    name: Any = None
    width: Any = None
    height: Any = None
    preview: Any = None
    svg: Any = Field(default=None, validation_alias=AliasChoices("svg", "previewSvg"))
    copies_count: Any = Field(
        default=None, validation_alias=AliasChoices("copies_count", "copiesCount")
    )
    toolbar_state: Any = Field(
        default=None, validation_alias=AliasChoices("toolbar_state", "toolbarState")
    )
    meta: Any = None
    theme_stroke_color: Any = Field(
        default=None,
        validation_alias=AliasChoices("theme_stroke_color", "themeStrokeColor"),
    )
    background_color: Any = Field(
        default=None,
        validation_alias=AliasChoices("background_color", "backgroundColor"),
    )
    thickness: Any = None
    is_adhesive_tape: Any = Field(
        default=None,
        validation_alias=AliasChoices("is_adhesive_tape", "isAdhesiveTape"),
    )

    @property
    def toolbar(self) -> dict[str, Any]:
        """Toolbar state as a mapping (empty when absent or malformed)."""
        return self.toolbar_state if isinstance(self.toolbar_state, dict) else {}

    @property
    def meta_dict(self) -> dict[str, Any]:
        """Metadata as a mapping (empty when absent or malformed)."""
        return self.meta if isinstance(self.meta, dict) else {}

    @property
    def global_colors(self) -> dict[str, Any]:
        colors = self.toolbar.get("globalColors")
        return colors if isinstance(colors, dict) else {}


def _positive_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric) or numeric <= 0:
        return None
    return numeric


def _non_empty_string(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def resolve_copies(design: DesignInput) -> int:
    """Copy count from the design, its toolbar state, or its metadata.

    The first candidate that parses to a finite number greater than zero is
    floored to an integer; otherwise the design gets one copy.
    """
    candidates = (
        design.copies_count,
        design.toolbar.get("copiesCount"),
        design.meta_dict.get("copiesCount"),
    )
    for candidate in candidates:
        numeric = _positive_number(candidate)
        if numeric is not None:
            return max(1, math.floor(numeric))
    return 1


def resolve_theme_stroke_color(design: DesignInput) -> str | None:
    """Declared theme stroke color, if any."""
    return _non_empty_string(design.theme_stroke_color) or _non_empty_string(
        design.global_colors.get("strokeColor")
    )


def resolve_material_color(design: DesignInput) -> str | None:
    """Material (background) color of the design."""
    for candidate in (
        design.global_colors.get("backgroundColor"),
        design.background_color,
        design.meta_dict.get("backgroundColor"),
    ):
        text = _non_empty_string(candidate)
        if text is not None:
            return text.strip()
    return None


def resolve_thickness(design: DesignInput) -> float | None:
    """Material thickness in mm, rounded to two decimals."""
    for candidate in (
        design.toolbar.get("thickness"),
        design.thickness,
        design.meta_dict.get("thickness"),
    ):
        numeric = _positive_number(candidate)
        if numeric is not None:
            return round(numeric, 2)
    return None


def parse_flag(value: Any) -> bool | None:
    """Parse a loosely typed boolean flag.

    Accepts booleans, 0/1 and the strings true/false/1/0/yes/no.
    Returns None for anything else.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return value == 1
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1", "yes"):
            return True
        if text in ("false", "0", "no"):
            return False
    return None


def resolve_adhesive_tape(design: DesignInput) -> bool | None:
    """Adhesive tape flag from toolbar state, design, or metadata."""
    for candidate in (
        design.toolbar.get("isAdhesiveTape"),
        design.is_adhesive_tape,
        design.meta_dict.get("isAdhesiveTape"),
    ):
        parsed = parse_flag(candidate)
        if parsed is not None:
            return parsed
    return None


@dataclass
class PlanOutput:
    """Output DTO of a planning run.

    Render assets are not stored; ``render_asset`` computes them on demand
    with the run's render style.

    Attributes:
        items: Normalized items in packing order.
        result: Sheets and leftovers from the packer.
        summary: Aggregate statistics.
        sheet_size: Sheet dimensions used.
        sheet_format: Named format used, if any.
        orientation: Sheet orientation used.
        style: Colors used for content normalization.
    """

    items: list[NormalizedItem]
    result: PackingResult
    summary: LayoutSummary
    sheet_size: SheetSize
    sheet_format: SheetFormat | None = None
    orientation: SheetOrientation = SheetOrientation.PORTRAIT
    style: RenderStyle = field(default_factory=RenderStyle)

    @property
    def sheet_label(self) -> str:
        if self.sheet_format is None:
            return "sheet"
        return self.sheet_format.label

    @property
    def sheets(self) -> tuple[Sheet, ...]:
        return self.result.sheets

    @property
    def leftovers(self) -> tuple[PackingQueueEntry, ...]:
        return self.result.leftovers

    def render_asset(self, placement: Placement) -> RenderAsset | None:
        """Compute the render asset for one placement."""
        from layoutplanner.infrastructure.svg_normalizer import prepare_for_render

        return prepare_for_render(placement, self.style)
