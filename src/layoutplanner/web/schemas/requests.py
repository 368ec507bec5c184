"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from layoutplanner.domain.value_objects import SheetFormat, SheetOrientation


class PlanRequest(BaseModel):
    """Request for planning a sheet layout.

    Sheet options override the corresponding values of ``config``, which
    in turn overrides the server's default configuration.
    """

    designs: list[Any] = Field(..., description="Design records to place")
    config: dict[str, Any] | None = Field(
        default=None, description="Planner configuration JSON"
    )
    format: SheetFormat | None = Field(default=None, description="Sheet format")
    orientation: SheetOrientation | None = Field(
        default=None, description="Sheet orientation"
    )
    spacing_mm: float | None = Field(
        default=None, ge=0, description="Spacing between items and rows in mm"
    )
    width: float | None = Field(default=None, gt=0, description="Custom sheet width in mm")
    height: float | None = Field(default=None, gt=0, description="Custom sheet height in mm")
    group_by_material: bool | None = Field(
        default=None, description="Keep materials on separate sheets"
    )
    include_assets: bool = Field(
        default=False, description="Include preview image URLs for placements"
    )


class PayloadRequest(PlanRequest):
    """Request for building the document service payload."""

    inline_markup: bool | None = Field(
        default=None, description="Embed markup per placement instead of a shared table"
    )
