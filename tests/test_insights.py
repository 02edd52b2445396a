"""Tests for value picks, tier drops and player outlooks."""

from typing import Callable

from draft_assist.draft import DraftSession
from draft_assist.insights import (
    player_outlook,
    risk_reward_score,
    tier_drops,
    value_board,
    value_margin,
)
from draft_assist.models import Player


def test_value_margin_defaults(make_player: Callable[..., Player]) -> None:
    """Missing ADP or rank falls back to 200."""
    player = make_player(adp=None, projection_rank=20)

    assert value_margin(player) == 180


def test_value_board_orders_by_margin(session: DraftSession) -> None:
    board = value_board(session.available_players)

    assert [(p.name, margin) for p, margin in board] == [
        ("Echo Rookie", 54.0),
        ("Delta Tight End", 35.0),
        ("Hotel Receiver", 26.0),
        ("Alpha Quarterback", 8.0),
        ("Charlie Receiver", 2.0),
    ]


def test_value_board_skips_overvalued_and_special_teams(
    make_player: Callable[..., Player],
) -> None:
    reach = make_player("Reach", adp=5.0, projection_rank=30)
    kicker = make_player("Kicker", position="K", adp=100.0, projection_rank=10)

    assert value_board([reach, kicker]) == []


def test_tier_drops(make_player: Callable[..., Player]) -> None:
    """A position is flagged when two or fewer players remain in its best tier."""
    available = [
        make_player("RB A", position="RB", tier=2),
        make_player("RB B", position="RB", tier=2),
        make_player("RB C", position="RB", tier=2),
        make_player("WR A", position="WR", tier=3),
        make_player("WR B", position="WR", tier=4),
    ]

    drops = tier_drops(available)

    assert [(d.position, d.tier) for d in drops] == [("WR", 3)]
    assert [p.name for p in drops[0].players] == ["WR A"]


def test_risk_reward_score_is_clamped(make_player: Callable[..., Player]) -> None:
    safe = make_player(injury_risk="Low", opportunity_share="High", catalysts=["a"] * 8)
    volatile = make_player(injury_risk="High", opportunity_share="Low", concerns=["a"] * 3)

    assert risk_reward_score(safe) == 1
    assert risk_reward_score(volatile) == 10


def test_outlook_for_value_pick(session: DraftSession) -> None:
    outlook = player_outlook(session.get_player(5))

    assert outlook.verdict == "Value pick: projected 54 spots better than ADP."
    assert "10.1 PPG over 14 games" in outlook.summary
    assert outlook.risk_reward_score == 9
    assert outlook.expert_consensus == "ADP 60, expert rank N/A, draft grade C-."


def test_outlook_uses_catalysts(session: DraftSession) -> None:
    outlook = player_outlook(session.get_player(8))

    assert outlook.upside == "New scheme"
    assert "Low injury risk" in outlook.downside


def test_outlook_for_kicker(session: DraftSession) -> None:
    outlook = player_outlook(session.get_player(6))

    assert outlook.verdict == "Draft in the final rounds."
