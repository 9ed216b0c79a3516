"""Tests for the REST API.

Uses FastAPI's TestClient, so no server needs to be running.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cutlist import main
from cutlist.main import app
from cutlist.settings import settings


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def cabinet_request():
    return {
        "parts": [
            {"id": 1, "name": "Side L", "width": 24, "height": 30, "quantity": 1, "allow_rotation": True},
            {"id": 2, "name": "Side R", "width": 24, "height": 30, "quantity": 1, "allow_rotation": True},
            {"id": 3, "name": "Top", "width": 24, "height": 24, "quantity": 1, "allow_rotation": True},
            {"id": 4, "name": "Bottom", "width": 24, "height": 24, "quantity": 1, "allow_rotation": True},
            {"id": 5, "name": "Shelf", "width": 22.5, "height": 23, "quantity": 3, "allow_rotation": True},
        ],
        "stock": [
            {"id": 101, "name": "Plywood 3/4", "width": 96, "height": 48, "quantity": 2},
        ],
        "config": {"kerf": 0.125},
    }


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "strategies": 8}


def test_strategies(client):
    response = client.get("/api/strategies")
    assert response.status_code == 200
    body = response.json()
    assert len(body) == 8
    assert body[0] == {"index": 0, "sort_order": "area", "split": "shorter_axis"}
    assert body[7] == {"index": 7, "sort_order": "max_side", "split": "longer_axis"}


def test_optimize_single_part(client):
    response = client.post("/api/optimize", json={
        "parts": [{"id": 1, "name": "Side", "width": 24, "height": 30}],
        "stock": [{"id": 101, "name": "Plywood", "width": 96, "height": 48}],
        "config": {"kerf": 0.125},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["sheets_used"] == 1
    assert body["total_efficiency"] == 15.7
    assert body["total_waste"] == 3888.0
    assert body["unplaced"] == []
    placement = body["sheets"][0]["placements"][0]
    assert (placement["x"], placement["y"], placement["rotated"]) == (0, 0, False)
    assert placement["part"]["id"] == "1#1"
    assert placement["part"]["original_id"] == 1


def test_optimize_cabinet(client, cabinet_request):
    response = client.post("/api/optimize", json=cabinet_request)
    assert response.status_code == 200
    body = response.json()
    placed = sum(len(s["placements"]) for s in body["sheets"])
    assert placed + len(body["unplaced"]) == 7
    assert body["sheets_used"] == len(body["sheets"])
    assert 1 <= body["sheets_used"] <= 2


def test_optimize_unplaceable_part_is_not_an_error(client):
    response = client.post("/api/optimize", json={
        "parts": [{"id": 1, "name": "Huge", "width": 100, "height": 100}],
        "stock": [{"id": 101, "name": "Plywood", "width": 96, "height": 48}],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["sheets_used"] == 0
    assert body["total_waste"] == 0.0
    assert len(body["unplaced"]) == 1


def test_optimize_default_kerf(client):
    response = client.post("/api/optimize", json={
        "parts": [{"id": 1, "name": "A", "width": 10, "height": 10, "quantity": 2, "allow_rotation": False}],
        "stock": [{"id": 101, "name": "Strip", "width": 100, "height": 10}],
    })
    xs = [p["x"] for p in response.json()["sheets"][0]["placements"]]
    assert xs == [0, 10.125]


def test_optimize_default_kerf_follows_settings(client, monkeypatch):
    monkeypatch.setattr(settings, "default_kerf", 0.5)
    response = client.post("/api/optimize", json={
        "parts": [{"id": 1, "name": "A", "width": 10, "height": 10, "quantity": 2, "allow_rotation": False}],
        "stock": [{"id": 101, "name": "Strip", "width": 100, "height": 10}],
    })
    xs = [p["x"] for p in response.json()["sheets"][0]["placements"]]
    assert xs == [0, 10.5]


def test_optimize_rejects_invalid_rows(client):
    response = client.post("/api/optimize", json={
        "parts": [{"id": 1, "name": "Bad", "width": 0, "height": 10}],
        "stock": [{"id": 101, "name": "Plywood", "width": 96, "height": 48}],
    })
    assert response.status_code == 422


def test_optimize_rejects_negative_kerf(client):
    response = client.post("/api/optimize", json={
        "parts": [],
        "stock": [],
        "config": {"kerf": -1},
    })
    assert response.status_code == 422


def test_optimize_unit_limit(client, cabinet_request, monkeypatch):
    monkeypatch.setattr(main.settings, "max_units", 3)
    response = client.post("/api/optimize", json=cabinet_request)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "limit is 3" in body["error"]
