"""Output formats for a planned layout.

Importing this package registers the built-in formats with
``ExporterRegistry``: ``payload`` (document service JSON), ``summary``
(statistics JSON), ``items`` (one export SVG per design) and ``sheets``
(one preview SVG per sheet). ``ExportManager`` writes a selection of them
into one directory:

    ExportManager(Path("out")).export_all(["payload", "items"], output, "order-42")
"""

from layoutplanner.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
    safe_filename,
)

# Import exporters to trigger registration
from layoutplanner.infrastructure.exporters.payload import PayloadExporter, build_payload
from layoutplanner.infrastructure.exporters.summary import SummaryExporter, summary_data
from layoutplanner.infrastructure.exporters.svg import (
    ItemFilesExporter,
    SheetPreviewExporter,
)

__all__ = [
    "Exporter",
    "ExporterRegistry",
    "ExportManager",
    "ItemFilesExporter",
    "PayloadExporter",
    "SheetPreviewExporter",
    "SummaryExporter",
    "build_payload",
    "safe_filename",
    "summary_data",
]
