"""Aggregate statistics over a packing result."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .entities import NormalizedItem, PackingQueueEntry, Sheet


@dataclass(frozen=True)
class LayoutSummary:
    """Statistics shown alongside a layout.

    Attributes:
        sheet_count: Number of sheets used.
        requested_copies: Copies requested across all items.
        placed_copies: Copies placed on sheets.
        leftover_count: Copies that could not be placed.
        used_area: Placed item area in mm2.
        sheet_area: Total area of all sheets in mm2.
        sheet_coverage: Per-sheet coverage ratios, in sheet order.
    """

    sheet_count: int
    requested_copies: int
    placed_copies: int
    leftover_count: int
    used_area: float
    sheet_area: float
    sheet_coverage: tuple[float, ...] = ()

    @property
    def coverage(self) -> float:
        """Used area over total sheet area (0.0 when there are no sheets)."""
        if self.sheet_count == 0 or self.sheet_area <= 0:
            return 0.0
        return self.used_area / self.sheet_area

    @property
    def coverage_percent(self) -> int:
        """Coverage rounded to a whole percentage."""
        return round(self.coverage * 100)

    @property
    def is_complete(self) -> bool:
        """True if every requested copy was placed."""
        return self.leftover_count == 0

    def to_dict(self) -> dict[str, object]:
        return {
            "sheetCount": self.sheet_count,
            "requestedCopies": self.requested_copies,
            "placedCopies": self.placed_copies,
            "leftoverCount": self.leftover_count,
            "usedArea": self.used_area,
            "sheetArea": self.sheet_area,
            "coverage": self.coverage,
            "coveragePercent": self.coverage_percent,
            "sheetCoverage": list(self.sheet_coverage),
        }


def summarize(
    items: Sequence[NormalizedItem],
    sheets: Sequence[Sheet],
    leftovers: Sequence[PackingQueueEntry],
) -> LayoutSummary:
    """Derive summary statistics from a packing run.

    Args:
        items: The normalized items that were packed.
        sheets: Sheets produced by the packer.
        leftovers: Copies the packer could not place.

    Returns:
        LayoutSummary for the run.
    """
    return LayoutSummary(
        sheet_count=len(sheets),
        requested_copies=sum(max(1, item.copies) for item in items),
        placed_copies=sum(len(sheet.placements) for sheet in sheets),
        leftover_count=len(leftovers),
        used_area=sum(sheet.used_area for sheet in sheets),
        sheet_area=sum(sheet.area for sheet in sheets),
        sheet_coverage=tuple(sheet.coverage for sheet in sheets),
    )
