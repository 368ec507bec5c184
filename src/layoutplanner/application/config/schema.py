"""Pydantic configuration schema for layout planning.

This module defines the schema for JSON-based planner configuration files.
It uses Pydantic v2 for validation and serialization. Every section has
defaults, so an empty document (or no file at all) yields the standard
configuration.

The sheet format and orientation enums are reused from the domain layer
to keep the accepted names in one place.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from layoutplanner.domain.value_objects import SheetFormat, SheetOrientation

# Supported schema versions for configuration files
# Version 1.0: Initial schema with sheet, packing, render and export sections
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"


class SheetConfig(BaseModel):
    """Output sheet configuration.

    Attributes:
        format: Named sheet format.
        orientation: Portrait or landscape.
        width: Optional custom width in mm, overriding the format.
        height: Optional custom height in mm, overriding the format.
        spacing_mm: Gap between items and between rows in mm.
    """

    model_config = ConfigDict(extra="forbid")

    format: SheetFormat = SheetFormat.A4
    orientation: SheetOrientation = SheetOrientation.PORTRAIT
    width: float | None = Field(default=None, gt=0, description="Custom width in mm")
    height: float | None = Field(default=None, gt=0, description="Custom height in mm")
    spacing_mm: float = Field(default=5.0, ge=0, description="Item and row spacing in mm")


class PackingConfigSchema(BaseModel):
    """Packer tolerances and grouping options.

    Attributes:
        square_tolerance: Side difference (mm) under which items are square.
        row_height_tolerance: Allowed height mismatch (mm) within a row.
        fit_epsilon: Slack (mm) in fit checks.
        group_by_material: Keep each material on its own sheets.
    """

    model_config = ConfigDict(extra="forbid")

    square_tolerance: float = Field(default=0.01, ge=0)
    row_height_tolerance: float = Field(default=0.01, ge=0)
    fit_epsilon: float = Field(default=0.001, ge=0)
    group_by_material: bool = False


class RenderConfigSchema(BaseModel):
    """Colors applied when normalizing item content."""

    model_config = ConfigDict(extra="forbid")

    highlight_color: str = Field(default="#008181", pattern=HEX_COLOR_PATTERN)
    outline_color: str = Field(default="#0000FF", pattern=HEX_COLOR_PATTERN)
    text_stroke_color: str = Field(default="#008181", pattern=HEX_COLOR_PATTERN)
    text_stroke_width: float = Field(default=0.5, ge=0)


class ExportConfigSchema(BaseModel):
    """Document service connection settings.

    Attributes:
        endpoint: URL of the render endpoint.
        timeout_seconds: Request timeout.
        max_sheets: Maximum sheets per export.
        compress: Gzip request bodies when it saves space.
        inline_markup: Embed markup per placement instead of a shared table.
    """

    model_config = ConfigDict(extra="forbid")

    endpoint: str = Field(
        default="http://localhost:4177/api/layout-pdf",
        min_length=1,
        description="Document service render endpoint",
    )
    timeout_seconds: float = Field(default=60.0, gt=0)
    max_sheets: int = Field(default=10, ge=1)
    compress: bool = True
    inline_markup: bool = False

    @field_validator("endpoint")
    @classmethod
    def validate_http_endpoint(cls, v: str) -> str:
        """Ensure the endpoint is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("endpoint must start with http:// or https://")
        return v


class PlannerConfiguration(BaseModel):
    """Root configuration model.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        sheet: Sheet format, orientation and spacing
        packing: Packer tolerances
        render: Content normalization colors
        export: Document service settings

    Example:
        >>> config = PlannerConfiguration(
        ...     sheet=SheetConfig(format=SheetFormat.A5, spacing_mm=2.0)
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    sheet: SheetConfig = Field(default_factory=SheetConfig)
    packing: PackingConfigSchema = Field(default_factory=PackingConfigSchema)
    render: RenderConfigSchema = Field(default_factory=RenderConfigSchema)
    export: ExportConfigSchema = Field(default_factory=ExportConfigSchema)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Validate that schema version is supported.

        Newer minor versions of a supported major version are accepted.
        """
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        supported = ", ".join(sorted(SUPPORTED_VERSIONS))
        raise ValueError(
            f"Unsupported schema version '{v}'. Supported versions: {supported}"
        )
