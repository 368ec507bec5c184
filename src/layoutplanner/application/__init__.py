"""Application layer - use cases and orchestration."""

from .commands import PlanLayoutCommand
from .dtos import DesignInput, PlanOutput
from .normalizer import normalize_design, normalize_designs, sort_items

__all__ = [
    "DesignInput",
    "PlanLayoutCommand",
    "PlanOutput",
    "normalize_design",
    "normalize_designs",
    "sort_items",
]
