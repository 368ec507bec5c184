"""Domain layer - layout entities, value objects and pure derivations."""

from .colors import colors_match, is_black_stroke, to_canonical_hex
from .entities import (
    MaterialInfo,
    NormalizedItem,
    PackingQueueEntry,
    Placement,
    Row,
    Sheet,
)
from .summary import LayoutSummary, summarize
from .value_objects import (
    PX_PER_MM,
    Orientation,
    RenderStyle,
    SheetFormat,
    SheetOrientation,
    SheetSize,
    mm_to_px,
    px_to_mm,
    resolve_sheet_size,
)

__all__ = [
    "PX_PER_MM",
    "LayoutSummary",
    "MaterialInfo",
    "NormalizedItem",
    "Orientation",
    "PackingQueueEntry",
    "Placement",
    "RenderStyle",
    "Row",
    "Sheet",
    "SheetFormat",
    "SheetOrientation",
    "SheetSize",
    "colors_match",
    "is_black_stroke",
    "mm_to_px",
    "px_to_mm",
    "resolve_sheet_size",
    "summarize",
    "to_canonical_hex",
]
