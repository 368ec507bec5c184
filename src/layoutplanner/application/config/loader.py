"""Loading of planner configuration and design files.

Every failure (missing file, unreadable file, broken JSON, schema
violation) surfaces as a ``ConfigError`` whose ``error_type`` tells the
CLI and the API how to present it.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from layoutplanner.application.config.schema import PlannerConfiguration


class ConfigError(Exception):
    """A configuration or input file could not be used.

    Attributes:
        message: Human readable summary.
        error_type: One of ``file_not_found``, ``permission_denied``,
            ``file_read_error``, ``json_parse`` or ``validation``.
        path: File the error refers to, when there is one.
        details: Structured entries. JSON errors carry ``line``/``column``;
            validation errors carry ``path``, ``message``, ``value`` and
            ``error_type``.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_validation(
        cls, error: PydanticValidationError, path: Path | None = None
    ) -> "ConfigError":
        details = [
            {
                "path": json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
            for err in error.errors()
        ]
        lines = ["Configuration validation failed:"]
        for detail in details:
            suffix = "" if detail["value"] is None else f" (got: {detail['value']!r})"
            lines.append(f"  - {detail['path']}: {detail['message']}{suffix}")
        return cls("\n".join(lines), error_type="validation", path=path, details=details)


def json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location as a dotted path.

    >>> json_path(("sheet", "spacing_mm"))
    'sheet.spacing_mm'
    >>> json_path(("designs", 0, "width"))
    'designs[0].width'
    """
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path = f"{path}.{segment}" if path else str(segment)
    return path


def _read_text(path: Path, kind: str) -> str:
    if not path.exists():
        raise ConfigError(
            f"{kind.capitalize()} file not found: {path}",
            error_type="file_not_found",
            path=path,
        )
    try:
        return path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            f"Permission denied reading {kind} file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            f"Error reading {kind} file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )


def _parse_json(path: Path, kind: str) -> Any:
    content = _read_text(path, kind)
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in {kind} file: {path} "
            f"(line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )


def load_config(path: Path) -> PlannerConfiguration:
    """Read and validate a JSON configuration file.

    Raises:
        ConfigError: The file is missing, unreadable, not JSON, or does not
            match the schema.
    """
    data = _parse_json(path, "config")
    try:
        return PlannerConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError.from_validation(e, path)


def load_config_from_dict(data: dict[str, Any]) -> PlannerConfiguration:
    """Validate configuration data that did not come from a file (API requests, merged overrides)."""
    try:
        return PlannerConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError.from_validation(e)


def load_designs(path: Path) -> list[Any]:
    """Read the design records from ``path``.

    The file holds a list of designs or an object with a ``designs`` list.
    Records are returned as-is; the item normalizer drops unusable ones.
    """
    data = _parse_json(path, "designs")
    if isinstance(data, dict):
        data = data.get("designs")
    if not isinstance(data, list):
        raise ConfigError(
            f"Designs file must contain a list or an object with a "
            f"'designs' list: {path}",
            error_type="validation",
            path=path,
            details=[
                {
                    "path": "designs",
                    "message": "Expected a list of designs",
                    "value": None,
                    "error_type": "list_type",
                }
            ],
        )
    return data
