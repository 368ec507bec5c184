"""Configuration schema and loading for the layout planner.

Public API:
    - PlannerConfiguration: Root configuration model
    - SheetConfig, PackingConfigSchema, RenderConfigSchema, ExportConfigSchema
    - load_config: Load configuration from a JSON file
    - load_config_from_dict: Load configuration from a dictionary
    - load_designs: Load design records from a JSON file
    - merge_config_overrides: Apply CLI or request overrides to a configuration
    - ConfigError: Exception for configuration and input file errors
    - config_to_*: Adapters building runtime objects from configuration

Example:
    >>> from pathlib import Path
    >>> from layoutplanner.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("planner.json"))
    ...     print(config.sheet.format.label)
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from layoutplanner.application.config.adapter import (
    config_to_document_client,
    config_to_packing_config,
    config_to_render_style,
    config_to_sheet_size,
)
from layoutplanner.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
    load_designs,
)
from layoutplanner.application.config.merger import merge_config_overrides
from layoutplanner.application.config.schema import (
    SUPPORTED_VERSIONS,
    ExportConfigSchema,
    PackingConfigSchema,
    PlannerConfiguration,
    RenderConfigSchema,
    SheetConfig,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "ConfigError",
    "ExportConfigSchema",
    "PackingConfigSchema",
    "PlannerConfiguration",
    "RenderConfigSchema",
    "SheetConfig",
    "config_to_document_client",
    "config_to_packing_config",
    "config_to_render_style",
    "config_to_sheet_size",
    "load_config",
    "load_config_from_dict",
    "load_designs",
    "merge_config_overrides",
]
