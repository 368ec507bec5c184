"""Sheet format endpoints."""

from fastapi import APIRouter

from layoutplanner.domain.value_objects import SheetFormat
from layoutplanner.web.schemas.responses import SheetFormatSchema, SheetFormatsSchema

router = APIRouter(tags=["formats"])


@router.get("/formats", response_model=SheetFormatsSchema)
async def list_formats() -> SheetFormatsSchema:
    """List the named sheet formats with their portrait dimensions."""
    return SheetFormatsSchema(
        formats=[
            SheetFormatSchema(
                key=fmt.value,
                label=fmt.label,
                width=fmt.dimensions[0],
                height=fmt.dimensions[1],
            )
            for fmt in SheetFormat
        ]
    )
