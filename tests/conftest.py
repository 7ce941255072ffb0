"""Shared pytest configuration and fixtures for rowframe tests."""

from typing import Any, Dict, List

import pytest

Rows = List[Dict[str, Any]]


@pytest.fixture
def ships() -> Rows:
    return [
        {"id": 1, "name": "Enterprise", "group_id": 1},
        {"id": 2, "name": "Defiant", "group_id": 2},
        {"id": 3, "name": "Voyager", "group_id": 1},
        {"id": 4, "name": "Orphan", "group_id": 9},
    ]


@pytest.fixture
def groups() -> Rows:
    return [
        {"id": 1, "class": "Galaxy"},
        {"id": 2, "class": "Escort"},
        {"id": 3, "class": "Shuttle"},
    ]


@pytest.fixture
def airports() -> Rows:
    return [
        {"name": "Heathrow", "country": "UK", "city": "London"},
        {"name": "Gatwick", "country": "UK", "city": "London"},
        {"name": "Manchester", "country": "UK", "city": "Manchester"},
        {"name": "JFK", "country": "US", "city": "New York"},
        {"name": "LAX", "country": "US", "city": "Los Angeles"},
        {"name": "CDG", "country": "FR", "city": "Paris"},
    ]


@pytest.fixture
def team_scores() -> Rows:
    return [
        {"team": "A", "period": "first", "score": 10},
        {"team": "A", "period": "second", "score": 12},
        {"team": "B", "period": "first", "score": 7},
        {"team": "C", "period": "third", "score": 4},
    ]


@pytest.fixture
def items() -> Rows:
    return [
        {"sku": "apple", "price": 9.99, "qty": 3, "active": True},
        {"sku": "pear", "price": 4.5, "qty": 0, "active": False},
        {"sku": "plum", "price": None, "qty": 7, "active": True},
    ]
