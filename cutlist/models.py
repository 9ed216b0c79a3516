"""
Data models for the cut list optimizer

Pydantic models for user-entered rows, the unit items the packer works on,
and the results it produces.
"""

from enum import Enum
from typing import Iterator, List, Optional, Union

from pydantic import BaseModel, Field

from .settings import settings


RowId = Union[int, str]


class SortOrder(str, Enum):
    """Order in which unit parts are offered to the packer"""
    AREA = "area"
    WIDTH = "width"
    HEIGHT = "height"
    MAX_SIDE = "max_side"


class SplitHeuristic(str, Enum):
    """Which leftover axis the guillotine cut favours"""
    SHORTER_AXIS = "shorter_axis"
    LONGER_AXIS = "longer_axis"


class Strategy(BaseModel):
    """One (sort order, split heuristic) packing attempt"""
    index: int
    sort_order: SortOrder
    split: SplitHeuristic

    class Config:
        frozen = True


# ============================================================================
# INPUT ROWS
# ============================================================================

class PartRequest(BaseModel):
    """A part row as entered by the user"""
    id: RowId
    name: str
    width: float = Field(gt=0, description="Width must be positive")
    height: float = Field(gt=0, description="Height must be positive")
    quantity: int = Field(default=1, ge=0)
    allow_rotation: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Side L",
                "width": 24,
                "height": 30,
                "quantity": 1,
                "allow_rotation": True
            }
        }


class StockSheetSpec(BaseModel):
    """A stock sheet row as entered by the user"""
    id: RowId
    name: str
    width: float = Field(gt=0, description="Width must be positive")
    height: float = Field(gt=0, description="Height must be positive")
    quantity: int = Field(default=1, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "id": 101,
                "name": "Plywood 3/4",
                "width": 96,
                "height": 48,
                "quantity": 1
            }
        }


class OptimizerConfig(BaseModel):
    """Per-call optimizer options"""
    kerf: float = Field(
        default_factory=lambda: settings.default_kerf,
        ge=0,
        description="Blade width lost at every cut"
    )
    units: str = "in"

    class Config:
        frozen = True


# ============================================================================
# UNIT ITEMS
# ============================================================================

class UnitPart(BaseModel):
    """One physical part instance. Dimensions are taken as given."""
    id: RowId
    name: str
    width: float
    height: float
    allow_rotation: bool = True
    original_id: Optional[RowId] = None
    quantity: int = 1

    class Config:
        frozen = True

    @property
    def area(self) -> float:
        return self.width * self.height


class UnitSheet(BaseModel):
    """One physical stock sheet instance"""
    id: RowId
    name: str
    width: float
    height: float
    original_id: Optional[RowId] = None
    quantity: int = 1

    class Config:
        frozen = True

    @property
    def area(self) -> float:
        return self.width * self.height


# ============================================================================
# RESULTS
# ============================================================================

class Placement(BaseModel):
    """A unit part placed on a sheet at an absolute position"""
    part: UnitPart
    x: float
    y: float
    width: float
    height: float
    rotated: bool = False

    class Config:
        frozen = True

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def overlaps(self, other: "Placement") -> bool:
        """True when the two rectangles share interior area"""
        return (
            self.x < other.x2 and other.x < self.x2
            and self.y < other.y2 and other.y < self.y2
        )


class SheetResult(BaseModel):
    """Placements made on one unit sheet"""
    sheet: UnitSheet
    sheet_index: int
    placements: List[Placement]
    efficiency: float = 0.0

    class Config:
        frozen = True

    @property
    def used_area(self) -> float:
        return sum(p.area for p in self.placements)

    @property
    def sheet_area(self) -> float:
        return self.sheet.area

    @property
    def waste(self) -> float:
        return self.sheet_area - self.used_area


class OptimizationResult(BaseModel):
    """Outcome of a packing run"""
    sheets: List[SheetResult] = Field(default_factory=list)
    unplaced: List[UnitPart] = Field(default_factory=list)
    total_efficiency: float = 0.0
    total_waste: float = 0.0
    total_used_area: float = 0.0
    total_stock_area: float = 0.0
    sheets_used: int = 0
    strategy: Optional[Strategy] = None

    class Config:
        frozen = True

    @property
    def placed_count(self) -> int:
        return sum(len(s.placements) for s in self.sheets)

    def placements(self) -> Iterator[Placement]:
        for sheet in self.sheets:
            yield from sheet.placements


# ============================================================================
# API
# ============================================================================

class OptimizeRequest(BaseModel):
    """Request body for an optimization run"""
    parts: List[PartRequest]
    stock: List[StockSheetSpec]
    config: OptimizerConfig = Field(default_factory=OptimizerConfig)


class ErrorResponse(BaseModel):
    """Error response format"""
    success: bool = False
    error: str
    detail: Optional[str] = None
