"""
Cut list optimizer

Packs rectangular parts onto stock sheets with a guillotine free-rectangle
heuristic, trying several sort orders and split rules and keeping the result
that uses the fewest sheets.
"""

from .models import (
    OptimizationResult,
    OptimizerConfig,
    PartRequest,
    StockSheetSpec,
    UnitPart,
    UnitSheet,
)
from .normalize import InputLimitError, expand_parts, expand_sheets, normalize
from .optimizer import candidate_strategies, optimize, optimize_requests

__all__ = [
    "InputLimitError",
    "OptimizationResult",
    "OptimizerConfig",
    "PartRequest",
    "StockSheetSpec",
    "UnitPart",
    "UnitSheet",
    "candidate_strategies",
    "expand_parts",
    "expand_sheets",
    "normalize",
    "optimize",
    "optimize_requests",
]
