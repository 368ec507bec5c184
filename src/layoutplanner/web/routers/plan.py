"""Layout planning endpoints."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response

from layoutplanner.application import PlanLayoutCommand, PlanOutput
from layoutplanner.application.config import (
    PlannerConfiguration,
    config_to_document_client,
    load_config_from_dict,
    merge_config_overrides,
)
from layoutplanner.domain.entities import Placement
from layoutplanner.infrastructure.export_payload import export_timestamp
from layoutplanner.infrastructure.exporters import build_payload
from layoutplanner.web.dependencies import BaseConfigDep
from layoutplanner.web.schemas.requests import PayloadRequest, PlanRequest
from layoutplanner.web.schemas.responses import (
    LeftoverSchema,
    PlacementSchema,
    PlanResponseSchema,
    SheetSchema,
    SummarySchema,
)

router = APIRouter(prefix="/plan", tags=["plan"])


def _resolve_config(
    request: PlanRequest,
    base_config: PlannerConfiguration,
) -> PlannerConfiguration:
    """Request config (or the server default) with request overrides applied."""
    config = (
        load_config_from_dict(request.config)
        if request.config is not None
        else base_config
    )
    return merge_config_overrides(
        config,
        sheet_format=request.format,
        orientation=request.orientation,
        spacing_mm=request.spacing_mm,
        width=request.width,
        height=request.height,
        group_by_material=request.group_by_material,
    )


def _run_plan(
    request: PlanRequest,
    base_config: PlannerConfiguration,
) -> tuple[PlanOutput, PlannerConfiguration]:
    config = _resolve_config(request, base_config)
    output = PlanLayoutCommand.from_config(config).execute_with_config(
        request.designs, config
    )
    return output, config


def _placement_schema(
    output: PlanOutput,
    placement: Placement,
    include_assets: bool,
) -> PlacementSchema:
    asset = output.render_asset(placement) if include_assets else None
    return PlacementSchema(
        id=placement.id,
        base_id=placement.base_id,
        name=placement.name,
        x=placement.x,
        y=placement.y,
        width=placement.width,
        height=placement.height,
        rotated=placement.rotated,
        copy_index=placement.copy_index,
        copies=placement.copies,
        asset_kind=asset.kind.value if asset else None,
        asset_url=asset.url if asset else None,
    )


def _to_response(output: PlanOutput, include_assets: bool) -> PlanResponseSchema:
    summary = output.summary
    return PlanResponseSchema(
        format=output.sheet_format.value if output.sheet_format else None,
        orientation=output.orientation.value,
        sheet_width=output.sheet_size.width,
        sheet_height=output.sheet_size.height,
        spacing_mm=output.result.spacing,
        sheets=[
            SheetSchema(
                index=index,
                width=sheet.width,
                height=sheet.height,
                coverage=sheet.coverage,
                placements=[
                    _placement_schema(output, p, include_assets)
                    for p in sheet.placements
                ],
            )
            for index, sheet in enumerate(output.sheets)
        ],
        leftovers=[
            LeftoverSchema(
                id=entry.id,
                name=entry.label,
                width=entry.width_mm,
                height=entry.height_mm,
            )
            for entry in output.leftovers
        ],
        summary=SummarySchema(
            sheet_count=summary.sheet_count,
            requested_copies=summary.requested_copies,
            placed_copies=summary.placed_copies,
            leftover_count=summary.leftover_count,
            used_area=summary.used_area,
            sheet_area=summary.sheet_area,
            coverage=summary.coverage,
            coverage_percent=summary.coverage_percent,
        ),
    )


@router.post("", response_model=PlanResponseSchema)
async def plan_layout(
    request: PlanRequest,
    base_config: BaseConfigDep,
) -> PlanResponseSchema:
    """Plan a sheet layout.

    Args:
        request: Designs and sheet options.
        base_config: Injected server default configuration.

    Returns:
        Sheets with placements, leftovers and summary statistics.
    """
    output, _ = _run_plan(request, base_config)
    return _to_response(output, request.include_assets)


@router.post("/payload")
async def plan_payload(
    request: PayloadRequest,
    base_config: BaseConfigDep,
) -> dict[str, Any]:
    """Plan a layout and return the document service payload."""
    output, config = _run_plan(request, base_config)
    inline = (
        request.inline_markup
        if request.inline_markup is not None
        else config.export.inline_markup
    )
    return build_payload(output, inline_markup=inline)


@router.post("/document")
async def plan_document(
    request: PayloadRequest,
    base_config: BaseConfigDep,
) -> Response:
    """Plan a layout and return the document rendered by the document service.

    Document service failures surface as 502 responses; payloads over the
    sheet limit are refused with 400 before the service is contacted.
    """
    output, config = _run_plan(request, base_config)
    inline = (
        request.inline_markup
        if request.inline_markup is not None
        else config.export.inline_markup
    )
    timestamp = export_timestamp()
    payload = build_payload(output, inline_markup=inline, timestamp=timestamp)

    client = config_to_document_client(config)
    document = await client.render_document(payload)

    filename = f"layout-{output.sheet_label}-{timestamp}.pdf".replace(" ", "-")
    return Response(
        content=document,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
