"""
Single-pass guillotine packer

Given one sort order and one split heuristic, greedily assigns unit parts to
unit sheets in sheet order. Each sheet keeps a list of free rectangles; a
part goes into the free rectangle that leaves the smallest short-side gap
(long-side gap breaks ties), and the L-shaped remainder of that rectangle is
cut into at most two new free rectangles, each reduced by the kerf.

Free rectangles are never merged or pruned. Rectangles fully contained in
another are possible and are kept; pruning them would change placements.
"""

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .models import (
    OptimizationResult,
    Placement,
    SheetResult,
    SortOrder,
    SplitHeuristic,
    Strategy,
    UnitPart,
    UnitSheet,
)

logger = logging.getLogger(__name__)

EFFICIENCY_STEP = "0.1"
AREA_STEP = "0.01"


@dataclass(frozen=True)
class FreeRect:
    """Unused, axis-aligned region of a sheet"""
    x: float
    y: float
    width: float
    height: float


SORT_KEYS: Dict[SortOrder, Callable[[UnitPart], Tuple[float, ...]]] = {
    SortOrder.AREA: lambda p: (-(p.width * p.height),),
    SortOrder.WIDTH: lambda p: (-p.width, -p.height),
    SortOrder.HEIGHT: lambda p: (-p.height, -p.width),
    SortOrder.MAX_SIDE: lambda p: (-max(p.width, p.height),),
}


def sort_parts(parts: Sequence[UnitPart], order: SortOrder) -> List[UnitPart]:
    """Stable descending sort; equal keys keep input order"""
    return sorted(parts, key=SORT_KEYS[order])


def find_best_fit(part: UnitPart, free_rects: Sequence[FreeRect]) -> Optional[Tuple[int, bool]]:
    """
    Pick the free rectangle and orientation for a part.

    Candidates are compared on (short-side gap, long-side gap); the first
    candidate wins ties, and within one rectangle the unrotated orientation
    is tried before the rotated one.

    Returns: (rect index, rotated) or None when nothing fits
    """
    orientations = [(part.width, part.height, False)]
    if part.allow_rotation:
        orientations.append((part.height, part.width, True))

    best: Optional[Tuple[int, bool]] = None
    best_short = float("inf")
    best_long = float("inf")

    for idx, fr in enumerate(free_rects):
        for w, h, rotated in orientations:
            if w > fr.width or h > fr.height:
                continue
            gap_w = fr.width - w
            gap_h = fr.height - h
            short_fit = min(gap_w, gap_h)
            long_fit = max(gap_w, gap_h)
            if short_fit < best_short or (short_fit == best_short and long_fit < best_long):
                best_short = short_fit
                best_long = long_fit
                best = (idx, rotated)

    return best


def split_free_rect(
    rect: FreeRect,
    placed_w: float,
    placed_h: float,
    kerf: float,
    split: SplitHeuristic,
) -> List[FreeRect]:
    """
    Cut the leftover of `rect` after a placement at its origin.

    A vertical split gives the right-hand piece the full rectangle height and
    the piece below only the placed width. A horizontal split gives the piece
    below the full rectangle width and the right-hand piece only the placed
    height. Pieces that are not wider than the kerf are dropped.
    """
    remaining_w = rect.width - placed_w
    remaining_h = rect.height - placed_h
    if remaining_w <= 0 and remaining_h <= 0:
        return []

    if split is SplitHeuristic.SHORTER_AXIS:
        vertical = remaining_w > remaining_h
    else:
        vertical = remaining_w <= remaining_h

    right_x = rect.x + placed_w + kerf
    below_y = rect.y + placed_h + kerf
    pieces: List[FreeRect] = []

    if vertical:
        if remaining_w > kerf:
            pieces.append(FreeRect(right_x, rect.y, remaining_w - kerf, rect.height))
        if remaining_h > kerf:
            pieces.append(FreeRect(rect.x, below_y, placed_w, remaining_h - kerf))
    else:
        if remaining_h > kerf:
            pieces.append(FreeRect(rect.x, below_y, rect.width, remaining_h - kerf))
        if remaining_w > kerf:
            pieces.append(FreeRect(right_x, rect.y, remaining_w - kerf, placed_h))

    return pieces


def pack_sheet(
    sheet: UnitSheet,
    parts: Sequence[UnitPart],
    kerf: float,
    split: SplitHeuristic,
) -> Tuple[List[Placement], List[UnitPart]]:
    """
    Place as many of `parts` as fit on one sheet, in the given order.

    Returns: (placements, parts left over for later sheets)
    """
    free_rects: List[FreeRect] = [FreeRect(0.0, 0.0, sheet.width, sheet.height)]
    placements: List[Placement] = []
    leftover: List[UnitPart] = []

    for part in parts:
        fit = find_best_fit(part, free_rects)
        if fit is None:
            leftover.append(part)
            continue

        idx, rotated = fit
        rect = free_rects[idx]
        w, h = (part.height, part.width) if rotated else (part.width, part.height)
        placements.append(Placement(
            part=part, x=rect.x, y=rect.y, width=w, height=h, rotated=rotated
        ))
        free_rects = (
            free_rects[:idx]
            + free_rects[idx + 1:]
            + split_free_rect(rect, w, h, kerf, split)
        )

    return placements, leftover


def round_half_up(value: float, step: str) -> float:
    """Round the exact binary value, halves away from zero"""
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(Decimal(step), rounding=ROUND_HALF_UP))


def sheet_efficiency(used_area: float, sheet_area: float) -> float:
    if sheet_area <= 0:
        return 0.0
    return round_half_up(used_area / sheet_area * 100, EFFICIENCY_STEP)


def build_result(
    sheets: List[SheetResult],
    unplaced: List[UnitPart],
    strategy: Optional[Strategy] = None,
) -> OptimizationResult:
    """Attach aggregate metrics to a set of used sheets"""
    used_area = sum(s.used_area for s in sheets)
    stock_area = sum(s.sheet_area for s in sheets)
    efficiency = (
        round_half_up(used_area / stock_area * 100, EFFICIENCY_STEP)
        if stock_area > 0 else 0.0
    )
    return OptimizationResult(
        sheets=sheets,
        unplaced=unplaced,
        total_efficiency=efficiency,
        total_waste=round_half_up(stock_area - used_area, AREA_STEP),
        total_used_area=round_half_up(used_area, AREA_STEP),
        total_stock_area=round_half_up(stock_area, AREA_STEP),
        sheets_used=len(sheets),
        strategy=strategy,
    )


def run_pass(
    parts: Sequence[UnitPart],
    sheets: Sequence[UnitSheet],
    kerf: float,
    strategy: Strategy,
) -> OptimizationResult:
    """
    Pack all parts onto sheets with one strategy.

    Sheets are filled in input order; only sheets that receive at least one
    placement appear in the result. Parts that fit nowhere end up in
    `unplaced`, in sorted order.
    """
    remaining = sort_parts(parts, strategy.sort_order)
    used: List[SheetResult] = []

    for sheet_index, sheet in enumerate(sheets):
        if not remaining:
            break
        placements, remaining = pack_sheet(sheet, remaining, kerf, strategy.split)
        if placements:
            used_area = sum(p.area for p in placements)
            used.append(SheetResult(
                sheet=sheet,
                sheet_index=sheet_index,
                placements=placements,
                efficiency=sheet_efficiency(used_area, sheet.area),
            ))

    result = build_result(used, remaining, strategy)
    logger.debug(
        "Pass %d (%s/%s): %d sheets, waste %.2f, %d unplaced",
        strategy.index, strategy.sort_order.value, strategy.split.value,
        result.sheets_used, result.total_waste, len(result.unplaced),
    )
    return result
