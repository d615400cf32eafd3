"""
Pytest configuration and fixtures for the player cleanup tests
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from database.memory_store import InMemoryPlayerStore
from player_cleanup.config import CleanupConfig


@pytest.fixture(scope="function")
def dry_run_config():
    """Default (non-destructive) configuration"""
    return CleanupConfig(dry_run=True)


@pytest.fixture(scope="function")
def execute_config():
    """Configuration with the destructive-run gate open"""
    return CleanupConfig(dry_run=False)


@pytest.fixture(scope="function")
def sample_player_rows():
    """Player rows with one duplicate of every kind"""
    return [
        # Phase 1: abbreviated vs full name
        {"id": "p1", "name": "J. Silva", "team": "Benfica", "age": 24},
        {"id": "p2", "name": "Joao Silva", "team": "Benfica", "age": 24},
        # Phase 2: same team, one typo, age within a year
        {"id": "p3", "name": "Bruno Fernandes", "team": "Man Utd", "age": 29},
        {"id": "p4", "name": "Bruno Fernandess", "team": "Man Utd", "age": 30},
        # Different team: never merged
        {"id": "p5", "name": "Bruno Fernandes", "team": "Sporting", "age": 29},
        # Phase 4: invalid names
        {"id": "p6", "name": "   ", "team": "Benfica", "age": 20},
        {"id": "p7", "name": None, "team": "Porto", "age": 21},
        {"id": "p8", "team": "Porto", "age": 22},
        # Unique players
        {"id": "p9", "name": "Rafael Leao", "team": "Milan", "age": 25},
        {"id": "p10", "name": "Kylian Mbappe", "team": "Real Madrid", "age": 26},
    ]


@pytest.fixture(scope="function")
def sample_store(sample_player_rows):
    """In-memory store loaded with the sample rows"""
    return InMemoryPlayerStore(sample_player_rows)
