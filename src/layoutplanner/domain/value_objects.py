"""Value objects for the layout planning domain.

Sheet formats, orientations and the pixel/millimetre conversion shared by
the packer, the content normalizer and the export payload. All measurements
in the domain are millimetres unless a name says otherwise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

# 72 device pixels per inch, 25.4 mm per inch.
PX_PER_MM: float = 72 / 25.4


def px_to_mm(value: Any) -> float:
    """Convert a pixel value to millimetres.

    Non-numeric input converts to 0.0, matching how missing design
    dimensions are treated (the item is then dropped as unrepresentable).
    """
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(numeric):
        return 0.0
    return numeric / PX_PER_MM


def mm_to_px(value: float) -> float:
    """Convert millimetres to pixels."""
    return value * PX_PER_MM


class SheetOrientation(str, Enum):
    """Orientation of the output sheet."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class SheetFormat(str, Enum):
    """Named sheet formats with their portrait dimensions in mm."""

    A5 = "A5"
    A4 = "A4"
    A3 = "A3"
    MJ_295X600 = "MJ_295x600"

    @property
    def dimensions(self) -> tuple[float, float]:
        """Portrait (width, height) in millimetres."""
        return _FORMAT_DIMENSIONS[self]

    @property
    def label(self) -> str:
        """Human-readable label."""
        return _FORMAT_LABELS[self]


_FORMAT_DIMENSIONS: dict[SheetFormat, tuple[float, float]] = {
    SheetFormat.A5: (148.0, 210.0),
    SheetFormat.A4: (210.0, 297.0),
    SheetFormat.A3: (297.0, 420.0),
    SheetFormat.MJ_295X600: (295.0, 600.0),
}

_FORMAT_LABELS: dict[SheetFormat, str] = {
    SheetFormat.A5: "A5",
    SheetFormat.A4: "A4",
    SheetFormat.A3: "A3",
    SheetFormat.MJ_295X600: "MJ 295x600",
}


@dataclass(frozen=True)
class SheetSize:
    """Dimensions of one output sheet.

    No validation is performed here: the packer treats non-positive
    dimensions as a degenerate sheet that can hold nothing.

    Attributes:
        width: Sheet width in millimetres.
        height: Sheet height in millimetres.
    """

    width: float
    height: float

    @property
    def area(self) -> float:
        """Sheet area in square millimetres."""
        return self.width * self.height

    @property
    def is_degenerate(self) -> bool:
        """True if the sheet cannot hold anything."""
        return not (self.width > 0 and self.height > 0)


def resolve_sheet_size(
    sheet_format: SheetFormat | str = SheetFormat.A4,
    orientation: SheetOrientation | str = SheetOrientation.PORTRAIT,
    width: float | None = None,
    height: float | None = None,
) -> SheetSize:
    """Resolve the sheet size for a format and orientation.

    Explicit ``width``/``height`` override the format dimensions. Landscape
    orientation puts the longer side horizontally.

    Args:
        sheet_format: Named sheet format.
        orientation: Portrait or landscape.
        width: Optional custom width in mm.
        height: Optional custom height in mm.

    Returns:
        The resolved SheetSize.

    Raises:
        ValueError: If the format or orientation name is unknown.
    """
    fmt = SheetFormat(sheet_format)
    orient = SheetOrientation(orientation)

    base_width, base_height = fmt.dimensions
    if width is not None:
        base_width = width
    if height is not None:
        base_height = height

    if orient is SheetOrientation.LANDSCAPE:
        return SheetSize(
            width=max(base_width, base_height),
            height=min(base_width, base_height),
        )
    return SheetSize(width=base_width, height=base_height)


@dataclass(frozen=True)
class Orientation:
    """One candidate orientation of an item.

    Attributes:
        width: Placed width in mm.
        height: Placed height in mm.
        rotated: True if this is the 90 degree rotated orientation.
    """

    width: float
    height: float
    rotated: bool = False


@dataclass(frozen=True)
class RenderStyle:
    """Colors used when reclassifying vector content.

    Attributes:
        highlight_color: Stroke applied to theme-colored elements.
        outline_color: Replacement for pure black strokes.
        text_stroke_color: Stroke applied to all text.
        text_stroke_width: Stroke width applied to all text.
        text_fill_color: Fill given to text that declares none.
        default_stroke_width: Stroke width for theme-colored elements.
    """

    highlight_color: str = "#008181"
    outline_color: str = "#0000FF"
    text_stroke_color: str = "#008181"
    text_stroke_width: float = 0.5
    text_fill_color: str = "#000000"
    default_stroke_width: float = 1.0
