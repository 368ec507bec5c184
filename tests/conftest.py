"""Pytest configuration and shared fixtures for layout planner tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from layoutplanner.domain.entities import (
    MaterialInfo,
    NormalizedItem,
    PackingQueueEntry,
    Placement,
)
from layoutplanner.domain.value_objects import mm_to_px


# =============================================================================
# pytest-httpx fixture integration
# =============================================================================

# pytest-httpx provides the httpx_mock fixture automatically once installed.


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests exercising several layers end to end"
    )
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Shared factories
# =============================================================================


SIMPLE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="50" '
    'viewBox="0 0 100 50"><rect x="0" y="0" width="100" height="50" '
    'fill="#ff0000"/></svg>'
)


@pytest.fixture
def design_factory() -> Callable[..., dict[str, Any]]:
    """Build raw design records sized in millimetres.

    Width and height are converted to the pixel units designs carry.
    """

    def make(
        design_id: str,
        width_mm: float,
        height_mm: float,
        **extra: Any,
    ) -> dict[str, Any]:
        design: dict[str, Any] = {
            "id": design_id,
            "name": extra.pop("name", design_id.title()),
            "width": mm_to_px(width_mm),
            "height": mm_to_px(height_mm),
        }
        design.update(extra)
        return design

    return make


@pytest.fixture
def item_factory() -> Callable[..., NormalizedItem]:
    """Build normalized items directly in millimetres."""

    def make(
        item_id: str,
        width_mm: float,
        height_mm: float,
        copies: int = 1,
        **extra: Any,
    ) -> NormalizedItem:
        return NormalizedItem(
            id=item_id,
            name=extra.pop("name", item_id),
            width_mm=width_mm,
            height_mm=height_mm,
            copies=copies,
            **extra,
        )

    return make


@pytest.fixture
def placement_factory() -> Callable[..., Placement]:
    """Build a placement of a single-copy item at the sheet origin."""

    def make(
        svg: str | None = SIMPLE_SVG,
        width_mm: float = 100.0,
        height_mm: float = 50.0,
        rotated: bool = False,
        item_id: str = "item",
        preview: str | None = None,
        theme_stroke_color: str | None = None,
        material: MaterialInfo | None = None,
    ) -> Placement:
        item = NormalizedItem(
            id=item_id,
            name=item_id,
            width_mm=width_mm,
            height_mm=height_mm,
            svg=svg,
            preview=preview,
            theme_stroke_color=theme_stroke_color,
            material=material or MaterialInfo(),
        )
        entry = PackingQueueEntry(item=item, copy_index=1)
        width, height = (height_mm, width_mm) if rotated else (width_mm, height_mm)
        return Placement(
            entry=entry,
            x=0.0,
            y=0.0,
            width=width,
            height=height,
            rotated=rotated,
        )

    return make
