"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class PlacementSchema(BaseModel):
    """A copy placed on a sheet."""

    id: str = Field(..., description="Copy id ({base_id}::{copy_index})")
    base_id: str = Field(..., description="Design id")
    name: str = Field(..., description="Display label")
    x: float = Field(..., description="Left offset in mm")
    y: float = Field(..., description="Top offset in mm")
    width: float = Field(..., description="Placed width in mm")
    height: float = Field(..., description="Placed height in mm")
    rotated: bool = Field(..., description="Placed rotated by 90 degrees")
    copy_index: int = Field(..., description="1-based copy index")
    copies: int = Field(..., description="Total copies of the design")
    asset_kind: str | None = Field(default=None, description="svg or raster")
    asset_url: str | None = Field(default=None, description="Preview image URL")


class SheetSchema(BaseModel):
    """One packed sheet."""

    index: int = Field(..., description="Zero-based sheet index")
    width: float = Field(..., description="Sheet width in mm")
    height: float = Field(..., description="Sheet height in mm")
    coverage: float = Field(..., description="Covered fraction of the sheet area")
    placements: list[PlacementSchema] = Field(default_factory=list)


class LeftoverSchema(BaseModel):
    """A copy that did not fit on any sheet."""

    id: str = Field(..., description="Copy id")
    name: str = Field(..., description="Display label")
    width: float = Field(..., description="Width in mm")
    height: float = Field(..., description="Height in mm")


class SummarySchema(BaseModel):
    """Layout statistics."""

    sheet_count: int
    requested_copies: int
    placed_copies: int
    leftover_count: int
    used_area: float = Field(..., description="Placed item area in mm2")
    sheet_area: float = Field(..., description="Total sheet area in mm2")
    coverage: float = Field(..., description="Used over total sheet area")
    coverage_percent: int


class PlanResponseSchema(BaseModel):
    """Response for layout planning."""

    format: str | None = Field(default=None, description="Sheet format key")
    orientation: str = Field(..., description="Sheet orientation")
    sheet_width: float = Field(..., description="Sheet width in mm")
    sheet_height: float = Field(..., description="Sheet height in mm")
    spacing_mm: float = Field(..., description="Spacing used in mm")
    sheets: list[SheetSchema] = Field(default_factory=list)
    leftovers: list[LeftoverSchema] = Field(default_factory=list)
    summary: SummarySchema


class SheetFormatSchema(BaseModel):
    """A named sheet format."""

    key: str = Field(..., description="Format key")
    label: str = Field(..., description="Display label")
    width: float = Field(..., description="Portrait width in mm")
    height: float = Field(..., description="Portrait height in mm")


class SheetFormatsSchema(BaseModel):
    """Response for available sheet formats."""

    formats: list[SheetFormatSchema] = Field(..., description="Available formats")


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )
