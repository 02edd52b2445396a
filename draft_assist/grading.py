"""Positional ranking, composite scoring and letter grades."""

import copy
import logging
from collections.abc import Iterable

from .config import (
    DEFAULT_ADP,
    DEFAULT_OPPORTUNITY_SCORE,
    DEFAULT_RISK_SCORE,
    DEFAULT_TIER_SCORE,
    FAILING_GRADE,
    GRADE_BREAKPOINTS,
    GRADE_WEIGHTS,
    NOT_GRADED,
    OPPORTUNITY_SCORES,
    RISK_SCORES,
    TIER_SCORES,
    UNGRADED_POSITIONS,
    VALUE_SCORE_MULTIPLIER,
)
from .models import Player
from .projection import project
from .scoring import per_game, points_for

logger = logging.getLogger(__name__)


def tier_score(tier: int) -> int:
    """Score an expert tier (tier 1 or better is 100)."""
    if tier <= 1:
        return 100
    return TIER_SCORES.get(tier, DEFAULT_TIER_SCORE)


def risk_score(injury_risk: str) -> int:
    """Score injury risk (lower risk scores higher)."""
    return RISK_SCORES.get(injury_risk, DEFAULT_RISK_SCORE)


def sos_score(strength_of_schedule: int) -> float:
    """Score schedule difficulty, 100 for the easiest and 0 for the hardest."""
    return (32 - strength_of_schedule) / 31 * 100


def opportunity_score(opportunity_share: str) -> int:
    """Score expected usage share."""
    return OPPORTUNITY_SCORES.get(opportunity_share, DEFAULT_OPPORTUNITY_SCORE)


def value_score(adp: float | None, projection_rank: int) -> float:
    """Score how far a player's projection rank beats their market ADP.

    Args:
        adp: Average draft position (DEFAULT_ADP when unknown)
        projection_rank: Rank by projected PPG across the whole pool

    Returns:
        Score clamped to 0..100, 50 when rank equals ADP
    """
    value_diff = (adp if adp is not None else DEFAULT_ADP) - projection_rank
    return min(100.0, max(0.0, 50 + value_diff * VALUE_SCORE_MULTIPLIER))


def score_to_grade(score: float) -> str:
    """Map a composite score to a letter grade."""
    for minimum, grade in GRADE_BREAKPOINTS:
        if score >= minimum:
            return grade
    return FAILING_GRADE


def assign_projection_ranks(players: list[Player]) -> None:
    """Rank every player by descending projected PPG.

    The sort is stable, so players with identical PPG keep their input order.
    """
    ranked = sorted(players, key=lambda p: p.projected_ppg, reverse=True)
    for rank, player in enumerate(ranked, start=1):
        player.projection_rank = rank


def max_ppg_by_position(players: Iterable[Player]) -> dict[str, float]:
    """Find the best projected PPG at each position.

    Args:
        players: Player pool with projections

    Returns:
        Dictionary mapping position -> highest projected PPG
    """
    best: dict[str, float] = {}
    for player in players:
        if player.position not in best or player.projected_ppg > best[player.position]:
            best[player.position] = player.projected_ppg
    return best


def composite_score(player: Player, max_ppg: dict[str, float]) -> float | None:
    """Calculate the weighted 0-100 composite score for a player.

    Args:
        player: Ranked player
        max_ppg: Highest projected PPG per position

    Returns:
        Composite score, or None for kickers, defenses and unranked players
    """
    if player.position in UNGRADED_POSITIONS or not player.projection_rank:
        return None

    # Zero or missing ceiling falls back to 1 so the ratio stays finite
    ceiling = max_ppg.get(player.position) or 1
    sub_scores = {
        "points": player.projected_ppg / ceiling * 100,
        "value": value_score(player.adp, player.projection_rank),
        "tier": tier_score(player.tier),
        "risk": risk_score(player.injury_risk),
        "sos": sos_score(player.strength_of_schedule),
        "opportunity": opportunity_score(player.opportunity_share),
    }

    return sum(sub_scores[name] * weight for name, weight in GRADE_WEIGHTS.items())


def rank_and_grade(players: list[Player]) -> list[Player]:
    """Annotate projection rank, composite score and draft grade.

    Running this twice on an unchanged pool produces identical results.

    Args:
        players: Player pool with projections applied

    Returns:
        The same list, with every player annotated
    """
    assign_projection_ranks(players)
    max_ppg = max_ppg_by_position(players)

    for player in players:
        score = composite_score(player, max_ppg)
        player.composite_score = score
        player.draft_grade = NOT_GRADED if score is None else score_to_grade(score)

    return players


def apply_projection(player: Player) -> None:
    """Fill historical and projected points for a single player."""
    player.fantasy_points = points_for(
        player.stats, player.position, player.games_played
    )
    player.fantasy_ppg = per_game(player.fantasy_points, player.games_played)

    projection = project(player)
    player.projected_points = projection.total
    player.expected_games = projection.games
    player.projected_ppg = projection.per_game


def build_player_pool(records: Iterable[Player]) -> list[Player]:
    """Run the full valuation pipeline over copies of baseline records.

    Args:
        records: Baseline players (left untouched)

    Returns:
        Fresh, undrafted players with points, projections, ranks and grades
    """
    players = [copy.deepcopy(record) for record in records]

    for player in players:
        player.drafted = False
        player.draft_pick = None
        player.team_number = None
        apply_projection(player)

    rank_and_grade(players)

    graded = sum(1 for p in players if p.composite_score is not None)
    logger.info(f"Built player pool: {len(players)} players, {graded} graded")
    return players
