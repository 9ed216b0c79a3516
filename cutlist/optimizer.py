"""
Strategy search over the single-pass packer

Runs the packer once for each (sort order, split heuristic) pair and keeps
the result that uses the fewest sheets, then the least waste. Earlier pairs
win remaining ties, so output is deterministic for a fixed input.
"""

import logging
from functools import reduce
from itertools import product
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import (
    OptimizationResult,
    OptimizerConfig,
    PartRequest,
    SortOrder,
    SplitHeuristic,
    StockSheetSpec,
    Strategy,
    UnitPart,
    UnitSheet,
)
from .normalize import normalize
from .packer import build_result, run_pass

logger = logging.getLogger(__name__)

SORT_ORDERS: Tuple[SortOrder, ...] = (
    SortOrder.AREA,
    SortOrder.WIDTH,
    SortOrder.HEIGHT,
    SortOrder.MAX_SIDE,
)
SPLIT_HEURISTICS: Tuple[SplitHeuristic, ...] = (
    SplitHeuristic.SHORTER_AXIS,
    SplitHeuristic.LONGER_AXIS,
)


def candidate_strategies() -> Tuple[Strategy, ...]:
    """All strategy pairs, sort order outer, split heuristic inner"""
    return tuple(
        Strategy(index=i, sort_order=order, split=split)
        for i, (order, split) in enumerate(product(SORT_ORDERS, SPLIT_HEURISTICS))
    )


def ranking(result: OptimizationResult) -> Tuple[int, float]:
    return result.sheets_used, result.total_waste


def prefer(best: OptimizationResult, challenger: OptimizationResult) -> OptimizationResult:
    """Keep `best` unless `challenger` ranks strictly lower"""
    return challenger if ranking(challenger) < ranking(best) else best


def select_best(results: Iterable[OptimizationResult]) -> Optional[OptimizationResult]:
    """Fold candidate results in enumeration order; None for no candidates"""
    candidates = list(results)
    if not candidates:
        return None
    return reduce(prefer, candidates[1:], candidates[0])


def run_all(
    parts: Sequence[UnitPart],
    sheets: Sequence[UnitSheet],
    kerf: float,
) -> List[OptimizationResult]:
    """One packing result per candidate strategy, in enumeration order"""
    return [run_pass(parts, sheets, kerf, s) for s in candidate_strategies()]


def optimize(
    parts: Sequence[UnitPart],
    sheets: Sequence[UnitSheet],
    config: Optional[OptimizerConfig] = None,
) -> OptimizationResult:
    """
    Compute the best packing of unit parts onto unit sheets.

    Never raises for unsatisfiable input: parts that fit nowhere are
    reported in `unplaced`. Empty parts or sheets give an empty result.
    """
    config = config or OptimizerConfig()
    best = select_best(run_all(parts, sheets, config.kerf))
    if best is None:
        best = build_result([], list(parts))

    logger.info(
        "Optimized %d parts on %d sheets (kerf %s): strategy %s, %d used, "
        "efficiency %.1f%%, %d unplaced",
        len(parts), len(sheets), config.kerf,
        best.strategy.index if best.strategy else "-",
        best.sheets_used, best.total_efficiency, len(best.unplaced),
    )
    return best


def optimize_requests(
    parts: List[PartRequest],
    stock: List[StockSheetSpec],
    config: Optional[OptimizerConfig] = None,
    max_units: Optional[int] = None,
) -> OptimizationResult:
    """Expand user rows and optimize them. Raises InputLimitError."""
    units, unit_sheets = normalize(parts, stock, max_units=max_units)
    return optimize(units, unit_sheets, config)
