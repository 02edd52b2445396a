"""Forward projection of fantasy points with fallback heuristics."""

import logging

from .config import (
    CATALYST_BONUS,
    CONCERN_PENALTY,
    DEFAULT_FLOOR_POINTS,
    FULL_SEASON_GAMES,
    INJURY_RISK_GAMES,
    POSITION_FLOOR_POINTS,
    REGRESSION_FACTOR,
)
from .models import Player, Projection
from .scoring import per_game, points_for

logger = logging.getLogger(__name__)


def fallback_games(injury_risk: str) -> int:
    """Projected games for a player without a supplied projection."""
    return INJURY_RISK_GAMES.get(injury_risk, FULL_SEASON_GAMES)


def floor_points(position: str) -> float:
    """Season point floor substituted when a player has no usable history."""
    return POSITION_FLOOR_POINTS.get(position, DEFAULT_FLOOR_POINTS)


def modifier_factor(catalysts: int, concerns: int) -> float:
    """Multiplicative adjustment from catalyst and concern counts.

    Args:
        catalysts: Number of positive factors
        concerns: Number of negative factors

    Returns:
        Factor applied to projected points, floored at zero
    """
    return max(0.0, 1 + catalysts * CATALYST_BONUS - concerns * CONCERN_PENALTY)


def has_supplied_projection(player: Player) -> bool:
    """Check whether a player carries a usable external projection."""
    return player.projected_stats is not None and player.projected_games is not None


def fallback_projection_total(player: Player, games: int) -> float:
    """Extrapolate last season's scoring pace over the projected games.

    Players with no positive history (rookies, new entrants) get the
    position floor spread over a full season instead.

    Args:
        player: Player to project
        games: Projected games played

    Returns:
        Projected season total before modifiers
    """
    base_points = points_for(player.stats, player.position, player.games_played)
    games_factor = player.games_played if player.games_played > 0 else FULL_SEASON_GAMES

    if base_points <= 0:
        base_points = floor_points(player.position)
        games_factor = FULL_SEASON_GAMES
        logger.debug(f"{player.name}: no scoring history, using {base_points} floor")

    return (base_points / games_factor) * games * REGRESSION_FACTOR


def project(player: Player) -> Projection:
    """Produce the finalized projection for a player.

    Trusts the supplied forecast when both stats and games are present,
    otherwise falls back to injury-adjusted extrapolation. Catalyst and
    concern modifiers apply on both paths.

    Args:
        player: Player with historical and optional projected data

    Returns:
        Projection with total points, games and points per game
    """
    if has_supplied_projection(player):
        games = player.projected_games
        total = points_for(player.projected_stats, player.position, games)
    else:
        games = fallback_games(player.injury_risk)
        total = fallback_projection_total(player, games)

    total *= modifier_factor(len(player.catalysts), len(player.concerns))

    return Projection(total=total, games=games, per_game=per_game(total, games))
