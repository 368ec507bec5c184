"""Pydantic schemas for the REST API."""

from layoutplanner.web.schemas.requests import PayloadRequest, PlanRequest
from layoutplanner.web.schemas.responses import (
    ErrorResponseSchema,
    LeftoverSchema,
    PlacementSchema,
    PlanResponseSchema,
    SheetFormatSchema,
    SheetFormatsSchema,
    SheetSchema,
    SummarySchema,
)

__all__ = [
    # Requests
    "PayloadRequest",
    "PlanRequest",
    # Responses
    "ErrorResponseSchema",
    "LeftoverSchema",
    "PlacementSchema",
    "PlanResponseSchema",
    "SheetFormatSchema",
    "SheetFormatsSchema",
    "SheetSchema",
    "SummarySchema",
]
