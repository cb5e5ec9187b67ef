import random
from datetime import datetime

import pytest

from study_deck.catalog import build_catalog


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_study_deck.db")
    return db_path


@pytest.fixture
def small_catalog():
    return build_catalog({
        "History": [{"name": "A", "weight": 3}],
        "Polity": [{"name": "B", "weight": 2}],
    })


@pytest.fixture
def catalog():
    return build_catalog({
        "History": [
            {"name": "Mughals", "weight": 3},
            {"name": "Vedic Age", "weight": 1},
        ],
        "Polity": [
            {"name": "Fundamental Rights", "weight": 2},
            {"name": "Panchayati Raj", "weight": 1},
        ],
        "Economy": [
            {"name": "Inflation", "weight": 2},
        ],
    })


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def fixed_now():
    # A Saturday afternoon
    return datetime(2026, 2, 14, 15, 30)
