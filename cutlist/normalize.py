"""
Quantity expansion of user rows into unit items

Each part or stock row is turned into `quantity` independent unit items
before the optimizer sees them. Unit ids take the form ``<row id>#<n>`` and
keep the row id in ``original_id``.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .models import PartRequest, StockSheetSpec, UnitPart, UnitSheet

logger = logging.getLogger(__name__)


class InputLimitError(ValueError):
    """Raised when expansion would produce more unit items than allowed"""


def expand_parts(rows: Iterable[PartRequest]) -> List[UnitPart]:
    """Expand part rows into unit parts, in row order"""
    expanded: List[UnitPart] = []
    for row in rows:
        for n in range(1, row.quantity + 1):
            expanded.append(UnitPart(
                id=f"{row.id}#{n}",
                name=row.name,
                width=row.width,
                height=row.height,
                allow_rotation=row.allow_rotation,
                original_id=row.id,
            ))
    return expanded


def expand_sheets(rows: Iterable[StockSheetSpec]) -> List[UnitSheet]:
    """Expand stock rows into unit sheets, in row order"""
    expanded: List[UnitSheet] = []
    for row in rows:
        for n in range(1, row.quantity + 1):
            expanded.append(UnitSheet(
                id=f"{row.id}#{n}",
                name=row.name,
                width=row.width,
                height=row.height,
                original_id=row.id,
            ))
    return expanded


def count_units(parts: Iterable[PartRequest], stock: Iterable[StockSheetSpec]) -> int:
    return sum(p.quantity for p in parts) + sum(s.quantity for s in stock)


def normalize(
    parts: List[PartRequest],
    stock: List[StockSheetSpec],
    max_units: Optional[int] = None,
) -> Tuple[List[UnitPart], List[UnitSheet]]:
    """
    Expand both row lists.

    Raises InputLimitError when the combined unit count exceeds max_units,
    so an oversized request never reaches the packer.
    """
    total = count_units(parts, stock)
    if max_units is not None and total > max_units:
        raise InputLimitError(
            f"Too many unit items ({total}); the limit is {max_units}"
        )

    units = expand_parts(parts)
    sheets = expand_sheets(stock)
    logger.debug("Expanded %d part rows into %d units, %d stock rows into %d sheets",
                 len(parts), len(units), len(stock), len(sheets))
    return units, sheets
