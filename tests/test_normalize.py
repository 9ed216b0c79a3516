"""Tests for row validation and quantity expansion."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cutlist.models import OptimizerConfig, PartRequest, StockSheetSpec, UnitPart
from cutlist.normalize import (
    InputLimitError,
    count_units,
    expand_parts,
    expand_sheets,
    normalize,
)
from cutlist.settings import settings


@pytest.fixture
def part_rows():
    return [
        PartRequest(id=1, name="Side", width=24, height=30, quantity=2, allow_rotation=False),
        PartRequest(id="shelf", name="Shelf", width=22.5, height=23, quantity=3),
        PartRequest(id=3, name="Spare", width=10, height=10, quantity=0),
    ]


@pytest.fixture
def stock_rows():
    return [
        StockSheetSpec(id=101, name="Plywood 3/4", width=96, height=48, quantity=2),
        StockSheetSpec(id=102, name="MDF", width=60, height=30),
    ]


def test_expand_parts(part_rows):
    units = expand_parts(part_rows)
    assert [u.id for u in units] == ["1#1", "1#2", "shelf#1", "shelf#2", "shelf#3"]
    assert [u.original_id for u in units] == [1, 1, "shelf", "shelf", "shelf"]
    assert all(u.quantity == 1 for u in units)
    assert units[0].allow_rotation is False
    assert units[2].allow_rotation is True
    assert (units[2].width, units[2].height) == (22.5, 23)


def test_expand_sheets(stock_rows):
    sheets = expand_sheets(stock_rows)
    assert [s.id for s in sheets] == ["101#1", "101#2", "102#1"]
    assert [s.name for s in sheets] == ["Plywood 3/4", "Plywood 3/4", "MDF"]


def test_zero_quantity_expands_to_nothing():
    assert expand_parts([PartRequest(id=1, name="x", width=1, height=1, quantity=0)]) == []
    assert expand_sheets([]) == []


def test_count_units(part_rows, stock_rows):
    assert count_units(part_rows, stock_rows) == 8


def test_normalize(part_rows, stock_rows):
    units, sheets = normalize(part_rows, stock_rows)
    assert len(units) == 5
    assert len(sheets) == 3


def test_normalize_limit(part_rows, stock_rows):
    normalize(part_rows, stock_rows, max_units=8)
    with pytest.raises(InputLimitError, match="limit is 7"):
        normalize(part_rows, stock_rows, max_units=7)


def test_limit_error_is_value_error():
    assert issubclass(InputLimitError, ValueError)


@pytest.mark.parametrize("field, value", [
    ("width", 0),
    ("height", -5),
    ("quantity", -1),
])
def test_part_rows_are_validated(field, value):
    data = {"id": 1, "name": "Side", "width": 24, "height": 30, "quantity": 1}
    data[field] = value
    with pytest.raises(ValidationError):
        PartRequest(**data)


def test_stock_rows_are_validated():
    with pytest.raises(ValidationError):
        StockSheetSpec(id=1, name="Bad", width=0, height=48)


def test_unit_items_accept_any_dimensions():
    part = UnitPart(id="x#1", name="x", width=-1, height=0)
    assert part.area == 0


def test_unit_items_are_frozen():
    part = UnitPart(id="x#1", name="x", width=1, height=2)
    with pytest.raises(ValidationError):
        part.width = 5


def test_config_kerf_defaults_to_settings(monkeypatch):
    monkeypatch.setattr(settings, "default_kerf", 0.25)
    assert OptimizerConfig().kerf == 0.25
    assert OptimizerConfig(kerf=0).kerf == 0
