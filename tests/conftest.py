"""Shared fixtures for draft assistant tests."""

from pathlib import Path
from typing import Any, Callable

import pytest

from draft_assist.config import DraftConfig
from draft_assist.data_io import load_player_records
from draft_assist.draft import DraftSession
from draft_assist.models import Player

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def players_path() -> Path:
    """Path to the eight-player fixture file."""
    return FIXTURES_DIR / "players.json"


@pytest.fixture
def updates_path() -> Path:
    """Path to the sync update fixture file."""
    return FIXTURES_DIR / "updates.json"


@pytest.fixture
def baseline(players_path: Path) -> list[Player]:
    """Baseline records loaded from the fixture file."""
    return load_player_records(players_path)


@pytest.fixture
def session(baseline: list[Player]) -> DraftSession:
    """Four-team, two-round session over the fixture pool (8 picks, 8 players)."""
    return DraftSession(baseline, DraftConfig(num_teams=4, draft_position=1, rounds=2))


@pytest.fixture
def make_player() -> Callable[..., Player]:
    """Factory for players with sensible defaults."""
    counter = iter(range(1000, 10000))

    def _make(name: str = "Test Player", position: str = "WR", **kwargs: Any) -> Player:
        kwargs.setdefault("id", next(counter))
        kwargs.setdefault("team", "TST")
        return Player(name=name, position=position, **kwargs)

    return _make
