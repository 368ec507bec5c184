"""Infrastructure layer - packing, content rendering and export."""

from .bin_packing import (
    PackingConfig,
    PackingResult,
    PackingService,
    RowSheetPacker,
    expand_copies,
    pack,
)
from .export_client import (
    DocumentServiceClient,
    DocumentServiceError,
    SheetLimitError,
)
from .export_payload import ExportPayloadBuilder, item_files
from .sheet_renderer import SheetPreviewRenderer
from .svg_normalizer import (
    AssetKind,
    RenderAsset,
    SvgContentNormalizer,
    prepare_for_render,
)

# Exporter framework (importing the package registers the exporters)
from .exporters import ExportManager, Exporter, ExporterRegistry

__all__ = [
    "AssetKind",
    "DocumentServiceClient",
    "DocumentServiceError",
    "ExportManager",
    "ExportPayloadBuilder",
    "Exporter",
    "ExporterRegistry",
    "PackingConfig",
    "PackingResult",
    "PackingService",
    "RenderAsset",
    "RowSheetPacker",
    "SheetLimitError",
    "SheetPreviewRenderer",
    "SvgContentNormalizer",
    "expand_copies",
    "item_files",
    "pack",
    "prepare_for_render",
]
