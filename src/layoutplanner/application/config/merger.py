"""Configuration merging for CLI and request overrides.

Precedence: explicit overrides > configuration values > defaults. Only
non-None overrides replace configuration values, and the merged result is
validated against the schema again.
"""

from typing import Any

from layoutplanner.application.config.loader import load_config_from_dict
from layoutplanner.application.config.schema import PlannerConfiguration
from layoutplanner.domain.value_objects import SheetFormat, SheetOrientation


def merge_config_overrides(
    config: PlannerConfiguration,
    *,
    sheet_format: SheetFormat | str | None = None,
    orientation: SheetOrientation | str | None = None,
    spacing_mm: float | None = None,
    width: float | None = None,
    height: float | None = None,
    group_by_material: bool | None = None,
) -> PlannerConfiguration:
    """Merge override values into a configuration.

    Args:
        config: The base configuration
        sheet_format: Override for sheet.format (if not None)
        orientation: Override for sheet.orientation (if not None)
        spacing_mm: Override for sheet.spacing_mm (if not None)
        width: Override for sheet.width (if not None)
        height: Override for sheet.height (if not None)
        group_by_material: Override for packing.group_by_material (if not None)

    Returns:
        A new PlannerConfiguration with merged values

    Raises:
        ConfigError: If an override is invalid.

    Example:
        >>> merged = merge_config_overrides(PlannerConfiguration(), spacing_mm=2.0)
        >>> merged.sheet.spacing_mm
        2.0
    """
    data = config.model_dump(mode="json")

    sheet_overrides: dict[str, Any] = {
        "format": _enum_value(sheet_format),
        "orientation": _enum_value(orientation),
        "spacing_mm": spacing_mm,
        "width": width,
        "height": height,
    }
    data["sheet"].update({k: v for k, v in sheet_overrides.items() if v is not None})

    if group_by_material is not None:
        data["packing"]["group_by_material"] = group_by_material

    return load_config_from_dict(data)


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)
