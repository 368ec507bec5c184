"""Domain entities for sheet layout planning.

NormalizedItem, PackingQueueEntry and Placement are frozen: once produced
they are shared between the packer, the summary and the content normalizer.
Row and Sheet are the packer's mutable accumulators and only live for the
duration of one packing run (callers receive them as part of the result and
must treat them as read-only).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .value_objects import Orientation

UNKNOWN_MATERIAL = "unknown"


@dataclass(frozen=True)
class MaterialInfo:
    """Material attributes of a design, used to group sheets.

    Attributes:
        color: Material (background) color label, or None if unknown.
        thickness_mm: Material thickness in mm, or None if unknown.
        adhesive_tape: Adhesive tape flag, or None if unknown.
    """

    color: str | None = None
    thickness_mm: float | None = None
    adhesive_tape: bool | None = None

    @property
    def key(self) -> str:
        """Grouping key in ``color::thickness::tape`` form."""
        color = self.color or UNKNOWN_MATERIAL
        thickness = (
            f"{self.thickness_mm:g}"
            if self.thickness_mm is not None
            else UNKNOWN_MATERIAL
        )
        if self.adhesive_tape is True:
            tape = "tape"
        elif self.adhesive_tape is False:
            tape = "no-tape"
        else:
            tape = "unknown-tape"
        return f"{color}::{thickness}::{tape}"


@dataclass(frozen=True)
class NormalizedItem:
    """A design converted to millimetres with a resolved copy count.

    Attributes:
        id: Unique design identifier.
        name: Display name.
        width_mm: Width in millimetres (> 0).
        height_mm: Height in millimetres (> 0).
        copies: Number of copies to place (>= 1).
        svg: Optional vector markup.
        preview: Optional raster preview URL.
        theme_stroke_color: Optional theme stroke color of the design.
        meta: Arbitrary design metadata, passed through.
        material: Material attributes for sheet grouping.
    """

    id: str
    name: str
    width_mm: float
    height_mm: float
    copies: int = 1
    svg: str | None = None
    preview: str | None = None
    theme_stroke_color: str | None = None
    meta: dict[str, Any] = field(default_factory=dict, compare=False)
    material: MaterialInfo = field(default_factory=MaterialInfo)

    @property
    def area(self) -> float:
        """Item area in square millimetres."""
        return self.width_mm * self.height_mm

    @property
    def longest_side(self) -> float:
        """Length of the longer side in mm."""
        return max(self.width_mm, self.height_mm)


@dataclass(frozen=True)
class PackingQueueEntry:
    """One concrete copy of a NormalizedItem awaiting placement.

    Attributes:
        item: The parent item.
        copy_index: 1-based index of this copy.
    """

    item: NormalizedItem
    copy_index: int

    @property
    def id(self) -> str:
        return f"{self.item.id}::{self.copy_index}"

    @property
    def base_id(self) -> str:
        return self.item.id

    @property
    def copies(self) -> int:
        return self.item.copies

    @property
    def label(self) -> str:
        """Display label, numbered when the item has several copies."""
        if self.item.copies > 1:
            return f"{self.item.name} #{self.copy_index}"
        return self.item.name

    @property
    def width_mm(self) -> float:
        return self.item.width_mm

    @property
    def height_mm(self) -> float:
        return self.item.height_mm

    @property
    def area(self) -> float:
        return self.item.area


@dataclass(frozen=True)
class Placement:
    """A copy placed at a position on a sheet.

    Coordinates are millimetres from the sheet's top-left corner.

    Attributes:
        entry: The queue entry that was placed.
        x: Left offset in mm.
        y: Top offset in mm.
        width: Placed width (after rotation) in mm.
        height: Placed height (after rotation) in mm.
        rotated: True if placed rotated by 90 degrees.
    """

    entry: PackingQueueEntry
    x: float
    y: float
    width: float
    height: float
    rotated: bool = False

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def name(self) -> str:
        return self.entry.label

    @property
    def base_id(self) -> str:
        return self.entry.base_id

    @property
    def copy_index(self) -> int:
        return self.entry.copy_index

    @property
    def copies(self) -> int:
        return self.entry.copies

    @property
    def source_width(self) -> float:
        """Original (pre-rotation) width in mm."""
        return self.entry.width_mm

    @property
    def source_height(self) -> float:
        """Original (pre-rotation) height in mm."""
        return self.entry.height_mm

    @property
    def svg(self) -> str | None:
        return self.entry.item.svg

    @property
    def preview(self) -> str | None:
        return self.entry.item.preview

    @property
    def theme_stroke_color(self) -> str | None:
        return self.entry.item.theme_stroke_color

    @property
    def material(self) -> MaterialInfo:
        return self.entry.item.material

    @property
    def right(self) -> float:
        """X coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Y coordinate of the bottom edge."""
        return self.y + self.height


@dataclass
class Row:
    """A horizontal shelf on a sheet.

    The height is fixed by the orientation that started the row.

    Attributes:
        y: Top offset of the row in mm.
        height: Fixed row height in mm.
        used_width: Width consumed so far, including spacing.
        placements: Placements in left-to-right order.
    """

    y: float
    height: float
    used_width: float = 0.0
    placements: list[Placement] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.placements


@dataclass
class Sheet:
    """A sheet being filled by the packer.

    Attributes:
        width: Sheet width in mm.
        height: Sheet height in mm.
        rows: Rows in creation (top-to-bottom) order.
        placements: All placements in placement order.
        next_row_y: Offset at which a new row would start.
        used_area: Sum of placed item areas (spacing excluded).
    """

    width: float
    height: float
    rows: list[Row] = field(default_factory=list)
    placements: list[Placement] = field(default_factory=list)
    next_row_y: float = 0.0
    used_area: float = 0.0

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def coverage(self) -> float:
        """Fraction of the sheet area covered by placed items."""
        if self.area <= 0:
            return 0.0
        return self.used_area / self.area

    @property
    def available_height(self) -> float:
        """Height remaining for new rows."""
        return self.height - self.next_row_y

    def add(
        self,
        row: Row,
        entry: PackingQueueEntry,
        orientation: Orientation,
        spacing: float,
    ) -> Placement:
        """Append an entry to the right edge of one of this sheet's rows.

        Args:
            row: Target row (must belong to this sheet).
            entry: Copy being placed.
            orientation: Orientation it is placed in.
            spacing: Gap inserted before the entry unless it is the row's first.

        Returns:
            The created placement.
        """
        gap = spacing if row.placements else 0.0
        placement = Placement(
            entry=entry,
            x=row.used_width + gap,
            y=row.y,
            width=orientation.width,
            height=orientation.height,
            rotated=orientation.rotated,
        )
        row.used_width += gap + orientation.width
        row.placements.append(placement)
        self.placements.append(placement)
        self.used_area += entry.area
        return placement

    def open_row(self, height: float, spacing: float) -> Row:
        """Start a new row at ``next_row_y``."""
        row = Row(y=self.next_row_y, height=height)
        self.rows.append(row)
        self.next_row_y = row.y + height + spacing
        return row
