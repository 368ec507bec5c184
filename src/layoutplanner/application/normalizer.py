"""Conversion of raw design records into packable items."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from layoutplanner.application.dtos import (
    DesignInput,
    resolve_adhesive_tape,
    resolve_copies,
    resolve_material_color,
    resolve_theme_stroke_color,
    resolve_thickness,
)
from layoutplanner.domain.entities import MaterialInfo, NormalizedItem
from layoutplanner.domain.value_objects import px_to_mm

logger = logging.getLogger(__name__)


def _coerce_design(raw: DesignInput | Mapping[str, Any]) -> DesignInput | None:
    if isinstance(raw, DesignInput):
        return raw
    if not isinstance(raw, Mapping):
        return None
    try:
        return DesignInput.model_validate(dict(raw))
    except ValidationError as e:
        logger.debug(f"Skipping unreadable design record: {e}")
        return None


def _item_id(design: DesignInput, index: int) -> str:
    if design.id is None or (isinstance(design.id, str) and not design.id.strip()):
        return f"design-{index}"
    return str(design.id)


def _item_name(design: DesignInput, index: int) -> str:
    if isinstance(design.name, str) and design.name.strip():
        return design.name
    return f"Canvas {index + 1}"


def normalize_design(
    raw: DesignInput | Mapping[str, Any],
    index: int,
) -> NormalizedItem | None:
    """Normalize one design record.

    Args:
        raw: Design record (schema instance or plain mapping).
        index: Position of the record in the input, used for fallback
            ids and names.

    Returns:
        The normalized item, or None if the design has no usable size.
    """
    design = _coerce_design(raw)
    if design is None:
        logger.debug(f"Design {index} is not a record, skipping")
        return None

    width_mm = px_to_mm(design.width)
    height_mm = px_to_mm(design.height)
    if not (width_mm > 0 and height_mm > 0):
        logger.debug(
            f"Design {index} has unusable size {design.width!r} x {design.height!r}, skipping"
        )
        return None

    svg = design.svg if isinstance(design.svg, str) and design.svg.strip() else None
    preview = design.preview if isinstance(design.preview, str) and design.preview else None

    return NormalizedItem(
        id=_item_id(design, index),
        name=_item_name(design, index),
        width_mm=width_mm,
        height_mm=height_mm,
        copies=resolve_copies(design),
        svg=svg,
        preview=preview,
        theme_stroke_color=resolve_theme_stroke_color(design),
        meta=dict(design.meta_dict),
        material=MaterialInfo(
            color=resolve_material_color(design),
            thickness_mm=resolve_thickness(design),
            adhesive_tape=resolve_adhesive_tape(design),
        ),
    )


def sort_items(items: Iterable[NormalizedItem]) -> list[NormalizedItem]:
    """Sort items biggest first.

    Descending by longer side, then descending by area; the id breaks any
    remaining tie so the order does not depend on input order.
    """
    return sorted(items, key=lambda item: (-item.longest_side, -item.area, item.id))


def normalize_designs(
    designs: Iterable[DesignInput | Mapping[str, Any]] | None,
) -> list[NormalizedItem]:
    """Normalize designs into a sorted list of packable items.

    Designs with missing or invalid dimensions are dropped silently.

    Args:
        designs: Design records in input order.

    Returns:
        Items sorted for packing (see ``sort_items``).
    """
    items: list[NormalizedItem] = []
    total = 0
    for index, raw in enumerate(designs or ()):
        total += 1
        item = normalize_design(raw, index)
        if item is not None:
            items.append(item)

    logger.debug(f"Normalized {total} designs into {len(items)} items")
    return sort_items(items)
