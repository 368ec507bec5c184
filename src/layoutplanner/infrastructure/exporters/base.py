"""Exporter protocol, format registry and the export manager.

Each output format of a plan (payload JSON, summary JSON, per-item SVG
files, sheet previews) is one exporter class registered under its format
name. The CLI selects formats by name and hands them to ``ExportManager``.
"""

from __future__ import annotations

import logging
import re
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from layoutplanner.application.dtos import PlanOutput


logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(name: str, default: str = "item") -> str:
    """Replace characters that are unsafe in file names with dashes."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub("-", name).strip("-.")
    return cleaned or default


@runtime_checkable
class Exporter(Protocol):
    """One output format for a plan.

    ``file_extension`` is the extension without the dot. Exporters that
    write several files (item SVGs, sheet previews) leave it empty and
    treat the target path as a directory.
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]

    @abstractmethod
    def export(self, output: PlanOutput, path: Path) -> None:
        """Write ``output`` to ``path``."""
        ...

    def export_string(self, output: PlanOutput) -> str:
        """Render ``output`` as text, for single-document formats only."""
        raise NotImplementedError(
            f"Format '{self.format_name}' does not support string export"
        )


class ExporterRegistry:
    """Format name to exporter class lookup.

    Exporter modules register on import:

        @ExporterRegistry.register("sheets")
        class SheetPreviewExporter:
            ...
    """

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> type:
        """Class decorator adding an exporter under ``format_name``.

        A second registration for the same name replaces the first.
        """

        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            previous = cls._exporters.get(format_name)
            if previous is not None and previous is not exporter_class:
                logger.warning(
                    f"Exporter '{format_name}' replaced: "
                    f"{previous.__name__} -> {exporter_class.__name__}"
                )
            cls._exporters[format_name] = exporter_class
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Look up the exporter class for ``format_name``.

        Raises:
            KeyError: The format is unknown; the message lists known formats.
        """
        try:
            return cls._exporters[format_name]
        except KeyError:
            known = ", ".join(cls.available_formats()) or "none"
            raise KeyError(
                f"Unknown export format '{format_name}'. Available formats: {known}"
            ) from None

    @classmethod
    def available_formats(cls) -> list[str]:
        return sorted(cls._exporters)

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._exporters

    @classmethod
    def clear(cls) -> None:
        """Forget every registered exporter (used by tests)."""
        cls._exporters.clear()


class ExportManager:
    """Writes a plan in several formats into one output directory.

    Targets are named ``{project}_{format}.{ext}``, or ``{project}_{format}``
    for directory formats. ``exporter_options`` maps a format name to the
    keyword arguments its exporter is built with, e.g.
    ``{"payload": {"inline_markup": True}}``.
    """

    def __init__(
        self,
        output_dir: Path,
        exporter_options: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.exporter_options = exporter_options or {}

    def create_exporter(self, format_name: str) -> Exporter:
        exporter_class = ExporterRegistry.get(format_name)
        return exporter_class(**self.exporter_options.get(format_name, {}))

    def target_path(self, exporter: Exporter, project_name: str) -> Path:
        stem = f"{safe_filename(project_name, default='layout')}_{exporter.format_name}"
        if exporter.file_extension:
            stem = f"{stem}.{exporter.file_extension}"
        return self.output_dir / stem

    def export_all(
        self,
        formats: list[str],
        output: PlanOutput,
        project_name: str = "layout",
    ) -> dict[str, Path]:
        """Export ``output`` once per format.

        Every format is resolved before anything is written, so an unknown
        name leaves the output directory untouched.

        Returns:
            Format name to written path.

        Raises:
            KeyError: A format is not registered.
            OSError: Writing failed.
        """
        exporters = [self.create_exporter(name) for name in formats]
        self.output_dir.mkdir(parents=True, exist_ok=True)

        written: dict[str, Path] = {}
        for exporter in exporters:
            target = self.target_path(exporter, project_name)
            logger.info(f"Writing {exporter.format_name} export to {target}")
            exporter.export(output, target)
            written[exporter.format_name] = target
        return written

    def export_single(
        self,
        format_name: str,
        output: PlanOutput,
        project_name: str = "layout",
    ) -> Path:
        return self.export_all([format_name], output, project_name)[format_name]
