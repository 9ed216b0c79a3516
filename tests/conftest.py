"""Shared fixtures and builders for the optimizer tests."""

from __future__ import annotations

from typing import List

import pytest

from cutlist.models import UnitPart, UnitSheet
from cutlist.packer import FreeRect


def make_part(pid, width, height, rotate=True, name=None) -> UnitPart:
    return UnitPart(
        id=pid,
        name=name or f"P{pid}",
        width=width,
        height=height,
        allow_rotation=rotate,
        original_id=pid,
    )


def make_sheet(sid, width=96.0, height=48.0, name="Plywood") -> UnitSheet:
    return UnitSheet(id=sid, name=name, width=width, height=height, original_id=sid)


def make_parts(count, width, height, rotate=True) -> List[UnitPart]:
    return [make_part(i, width, height, rotate) for i in range(1, count + 1)]


def free_rects_overlap(a: FreeRect, b: FreeRect) -> bool:
    return (
        a.x < b.x + b.width and b.x < a.x + a.width
        and a.y < b.y + b.height and b.y < a.y + a.height
    )


@pytest.fixture
def plywood() -> UnitSheet:
    """A single 8'x4' sheet."""
    return make_sheet("ply#1")


@pytest.fixture
def cabinet_parts() -> List[UnitPart]:
    """Parts of a small base cabinet, already expanded."""
    return [
        make_part("side-l", 24, 30, name="Side L"),
        make_part("side-r", 24, 30, name="Side R"),
        make_part("top", 24, 24, name="Top"),
        make_part("bottom", 24, 24, name="Bottom"),
        make_part("shelf#1", 22.5, 23, name="Shelf"),
        make_part("shelf#2", 22.5, 23, name="Shelf"),
        make_part("shelf#3", 22.5, 23, name="Shelf"),
    ]


@pytest.fixture
def mixed_parts() -> List[UnitPart]:
    """Assorted sizes, some locked against rotation."""
    sizes = [
        (30, 20, True), (12, 40, False), (45, 10, True), (8, 8, True),
        (60, 15, False), (18, 18, True), (25, 35, True), (5, 44, True),
        (33, 12, False), (10, 10, True), (70, 30, True), (14, 22, True),
    ]
    return [make_part(i, w, h, r) for i, (w, h, r) in enumerate(sizes)]


@pytest.fixture
def stock_pile() -> List[UnitSheet]:
    return [
        make_sheet("a#1", 96, 48),
        make_sheet("b#1", 60, 30),
        make_sheet("a#2", 96, 48),
    ]
