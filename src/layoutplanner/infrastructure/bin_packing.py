"""Shelf bin packing of design copies onto output sheets.

Items are expanded into individual copies and placed greedily, in item
order, onto horizontal rows (shelves). Each row's height is fixed by the
first copy placed on it; later copies join a row only if their height
matches. Copies are tried unrotated first and rotated by 90 degrees second.

Placement search per copy, first success wins:

1. each existing sheet, in creation order: any orientation appended to any
   existing row, then any orientation starting a new row;
2. a fresh sheet, starting its first row;
3. otherwise the copy is reported as a leftover.

The heuristic is order dependent and intentionally not globally optimal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from layoutplanner.domain.entities import (
    NormalizedItem,
    PackingQueueEntry,
    Placement,
    Row,
    Sheet,
)
from layoutplanner.domain.value_objects import Orientation, SheetSize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackingConfig:
    """Tolerances and options for the shelf packer.

    Attributes:
        square_tolerance: Items whose sides differ by no more than this
            (mm) are treated as square and never tried rotated.
        row_height_tolerance: Maximum difference (mm) between an
            orientation's height and a row's fixed height for the
            orientation to join the row. A taller orientation joins only
            while it stays clear of the next row and the sheet edge.
        fit_epsilon: Slack (mm) allowed in width/height fit checks to
            absorb rounding from the pixel to millimetre conversion.
        group_by_material: Pack each material group onto its own sheets.
    """

    square_tolerance: float = 0.01
    row_height_tolerance: float = 0.01
    fit_epsilon: float = 0.001
    group_by_material: bool = False

    def __post_init__(self) -> None:
        if self.square_tolerance < 0:
            raise ValueError("Square tolerance must be non-negative")
        if self.row_height_tolerance < 0:
            raise ValueError("Row height tolerance must be non-negative")
        if self.fit_epsilon < 0:
            raise ValueError("Fit epsilon must be non-negative")


@dataclass(frozen=True)
class PackingResult:
    """Outcome of a packing run.

    Attributes:
        sheets: Sheets in creation order.
        leftovers: Copies that could not be placed on any sheet.
        sheet_size: Sheet size the run was made for.
        spacing: Spacing between items and rows in mm.
    """

    sheets: tuple[Sheet, ...]
    leftovers: tuple[PackingQueueEntry, ...]
    sheet_size: SheetSize
    spacing: float = 0.0

    @property
    def placements(self) -> list[Placement]:
        """All placements across sheets, in sheet then placement order."""
        return [p for sheet in self.sheets for p in sheet.placements]

    @property
    def placed_count(self) -> int:
        return sum(len(sheet.placements) for sheet in self.sheets)


def expand_copies(items: Iterable[NormalizedItem]) -> list[PackingQueueEntry]:
    """Expand items into one queue entry per copy.

    Item order is preserved and copies follow 1..N within each item.
    """
    queue: list[PackingQueueEntry] = []
    for item in items:
        for index in range(max(1, int(item.copies))):
            queue.append(PackingQueueEntry(item=item, copy_index=index + 1))
    return queue


class RowSheetPacker:
    """Greedy row (shelf) packer with 90 degree rotation.

    Attributes:
        config: Packing tolerances.
    """

    def __init__(self, config: PackingConfig | None = None) -> None:
        self.config = config or PackingConfig()

    def pack(
        self,
        items: Sequence[NormalizedItem],
        sheet_size: SheetSize,
        spacing: float = 0.0,
    ) -> PackingResult:
        """Pack every copy of every item onto as few sheets as the rule allows.

        Items are packed in the order given; callers pass the sorted output
        of the item normalizer.

        Args:
            items: Normalized items to pack.
            sheet_size: Dimensions of each sheet in mm.
            spacing: Gap in mm between items in a row and between rows.

        Returns:
            PackingResult with sheets and leftovers. Never raises for
            unplaceable items; they are reported as leftovers.
        """
        spacing = max(0.0, float(spacing or 0.0))
        queue = expand_copies(items)

        if sheet_size.is_degenerate:
            logger.debug(
                f"Degenerate sheet {sheet_size.width}x{sheet_size.height}, "
                f"{len(queue)} copies left over"
            )
            return PackingResult(
                sheets=(),
                leftovers=tuple(queue),
                sheet_size=sheet_size,
                spacing=spacing,
            )

        sheets: list[Sheet] = []
        leftovers: list[PackingQueueEntry] = []

        for entry in queue:
            orientations = self._orientations_for(entry)

            if any(
                self._place_on_sheet(sheet, entry, orientations, spacing)
                for sheet in sheets
            ):
                continue

            sheet = Sheet(width=sheet_size.width, height=sheet_size.height)
            if self._place_in_new_row(sheet, entry, orientations, spacing):
                sheets.append(sheet)
                logger.debug(f"Opened sheet {len(sheets)} for '{entry.id}'")
                continue

            logger.debug(
                f"'{entry.id}' ({entry.width_mm:.2f}x{entry.height_mm:.2f} mm) "
                f"does not fit on a {sheet_size.width:.2f}x{sheet_size.height:.2f} mm sheet"
            )
            leftovers.append(entry)

        logger.info(
            f"Packed {len(queue) - len(leftovers)} copies onto {len(sheets)} sheets, "
            f"{len(leftovers)} left over"
        )

        return PackingResult(
            sheets=tuple(sheets),
            leftovers=tuple(leftovers),
            sheet_size=sheet_size,
            spacing=spacing,
        )

    def _orientations_for(self, entry: PackingQueueEntry) -> list[Orientation]:
        """Candidate orientations, unrotated first.

        Square items (within ``square_tolerance``) only get one candidate.
        """
        width, height = entry.width_mm, entry.height_mm
        orientations = [Orientation(width=width, height=height, rotated=False)]
        if abs(width - height) > self.config.square_tolerance:
            orientations.append(Orientation(width=height, height=width, rotated=True))
        return orientations

    def _place_on_sheet(
        self,
        sheet: Sheet,
        entry: PackingQueueEntry,
        orientations: list[Orientation],
        spacing: float,
    ) -> bool:
        """Try existing rows, then a new row, on one sheet."""
        for orientation in orientations:
            for row in sheet.rows:
                if self._fits_in_row(sheet, row, orientation, spacing):
                    placement = sheet.add(row, entry, orientation, spacing)
                    self._log_placement(placement)
                    return True

        return self._place_in_new_row(sheet, entry, orientations, spacing)

    def _place_in_new_row(
        self,
        sheet: Sheet,
        entry: PackingQueueEntry,
        orientations: list[Orientation],
        spacing: float,
    ) -> bool:
        """Start a new row at the sheet's next row offset if possible."""
        for orientation in orientations:
            if self._fits_new_row(sheet, orientation):
                row = sheet.open_row(orientation.height, spacing)
                placement = sheet.add(row, entry, orientation, spacing)
                self._log_placement(placement)
                return True
        return False

    def _fits_in_row(
        self,
        sheet: Sheet,
        row: Row,
        orientation: Orientation,
        spacing: float,
    ) -> bool:
        if abs(orientation.height - row.height) > self.config.row_height_tolerance:
            return False
        if orientation.height > row.height and not self._has_room_below(
            sheet, row, orientation.height
        ):
            return False
        gap = spacing if row.placements else 0.0
        needed = row.used_width + gap + orientation.width
        return needed <= sheet.width + self.config.fit_epsilon

    def _has_room_below(self, sheet: Sheet, row: Row, height: float) -> bool:
        """Whether a placement slightly taller than ``row`` stays clear of the
        following row and inside the sheet.
        """
        later = [r.y for r in sheet.rows if r.y > row.y]
        next_y = min(later) if later else sheet.next_row_y
        bottom = row.y + height
        return bottom <= next_y and bottom <= sheet.height + self.config.fit_epsilon

    def _fits_new_row(self, sheet: Sheet, orientation: Orientation) -> bool:
        eps = self.config.fit_epsilon
        return (
            orientation.width <= sheet.width + eps
            and sheet.next_row_y + orientation.height <= sheet.height + eps
        )

    @staticmethod
    def _log_placement(placement: Placement) -> None:
        rotated = " (rotated)" if placement.rotated else ""
        logger.debug(
            f"Placed '{placement.id}' at ({placement.x:.2f}, {placement.y:.2f}) "
            f"as {placement.width:.2f}x{placement.height:.2f}{rotated}"
        )


def pack(
    items: Sequence[NormalizedItem],
    sheet_size: SheetSize,
    spacing: float = 0.0,
    config: PackingConfig | None = None,
) -> PackingResult:
    """Pack items with a default-configured RowSheetPacker."""
    return RowSheetPacker(config).pack(items, sheet_size, spacing)


@dataclass
class _MaterialGroup:
    key: str
    items: list[NormalizedItem] = field(default_factory=list)


class PackingService:
    """Coordinates packing, optionally per material group.

    Designs cut from different materials cannot share a sheet. With
    ``group_by_material`` enabled, items are grouped by material key in
    first-seen order, each group is packed separately, and the sheets and
    leftovers of all groups are concatenated.

    Attributes:
        config: Packing configuration.
        packer: RowSheetPacker used for each group.
    """

    def __init__(self, config: PackingConfig | None = None) -> None:
        self.config = config or PackingConfig()
        self.packer = RowSheetPacker(self.config)

    def plan(
        self,
        items: Sequence[NormalizedItem],
        sheet_size: SheetSize,
        spacing: float = 0.0,
    ) -> PackingResult:
        """Pack items, grouping by material when configured.

        Args:
            items: Sorted normalized items.
            sheet_size: Sheet dimensions in mm.
            spacing: Item and row spacing in mm.

        Returns:
            Combined PackingResult.
        """
        if not self.config.group_by_material:
            return self.packer.pack(items, sheet_size, spacing)

        groups = self._group_by_material(items)
        logger.info(f"Packing {len(items)} items across {len(groups)} material groups")

        spacing = max(0.0, float(spacing or 0.0))
        sheets: list[Sheet] = []
        leftovers: list[PackingQueueEntry] = []
        for group in groups:
            result = self.packer.pack(group.items, sheet_size, spacing)
            logger.debug(
                f"Material {group.key}: {len(group.items)} items -> "
                f"{len(result.sheets)} sheets"
            )
            sheets.extend(result.sheets)
            leftovers.extend(result.leftovers)

        return PackingResult(
            sheets=tuple(sheets),
            leftovers=tuple(leftovers),
            sheet_size=sheet_size,
            spacing=spacing,
        )

    def _group_by_material(
        self,
        items: Sequence[NormalizedItem],
    ) -> list[_MaterialGroup]:
        groups: dict[str, _MaterialGroup] = {}
        for item in items:
            key = item.material.key
            if key not in groups:
                groups[key] = _MaterialGroup(key=key)
            groups[key].items.append(item)
        return list(groups.values())
