"""Conversion of raw stat records into fantasy points."""

from collections.abc import Mapping

from .config import DEFENSE_SCORING, KICKER_SCORING, OFFENSE_SCORING

OFFENSE_POSITIONS = {"QB", "RB", "WR", "TE"}


def scoring_table(position: str) -> dict[str, float]:
    """Get the per-category weights that apply to a position.

    Args:
        position: Player position

    Returns:
        Mapping of stat category -> points per unit (empty for unknown positions)
    """
    if position in OFFENSE_POSITIONS:
        return OFFENSE_SCORING
    if position == "K":
        return KICKER_SCORING
    if position == "DST":
        return DEFENSE_SCORING
    return {}


def points_for(
    stats: Mapping[str, float] | None, position: str, games_played: int = 0
) -> float:
    """Calculate total fantasy points for a stat record.

    Only the categories in the position's scoring table are read, so a
    category that happens to be present for another position is ignored.

    Args:
        stats: Sparse stat record, missing categories count as zero
        position: Player position
        games_played: Games the record covers (not used to divide)

    Returns:
        Total fantasy points, never negative
    """
    if not stats:
        return 0.0

    total = 0.0
    for category, weight in scoring_table(position).items():
        total += (stats.get(category) or 0) * weight

    return max(0.0, total)


def per_game(total: float, games: int | None) -> float:
    """Points per game rounded to two decimals (0 when no games)."""
    if not games or games <= 0:
        return 0.0
    return round(total / games, 2)
