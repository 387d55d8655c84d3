"""Variant planning and resize/encode engine."""

from .planner import OutputVariant, PlannedVariant, VariantPlanner, output_path_for
from .engine import ResizeEngine, VariantResult, compute_target_size
from .exceptions import ResizeError

__all__ = [
    "OutputVariant",
    "PlannedVariant",
    "VariantPlanner",
    "output_path_for",
    "ResizeEngine",
    "VariantResult",
    "compute_target_size",
    "ResizeError",
]
