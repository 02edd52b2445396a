"""Board insights: value picks, tier drops and single-player outlooks."""

from dataclasses import dataclass

from .config import DEFAULT_ADP, SKILL_POSITIONS, UNGRADED_POSITIONS
from .models import Player, PlayerOutlook

VALUE_WINDOW = 10
VALUE_LIMIT = 5
TIER_DROP_THRESHOLD = 2
VALUE_MARGIN = 10

RISK_ADJUSTMENT = {"Low": -1, "Medium": 1, "High": 3}
OPPORTUNITY_ADJUSTMENT = {"High": -1, "Medium": 0, "Low": 1}


@dataclass
class TierDrop:
    """Skill position whose best remaining tier is nearly gone."""

    position: str
    tier: int
    players: list[Player]


def value_margin(player: Player) -> float:
    """ADP minus projection rank (positive means the market is late)."""
    adp = player.adp if player.adp is not None else DEFAULT_ADP
    rank = player.projection_rank if player.projection_rank is not None else DEFAULT_ADP
    return adp - rank


def value_board(
    available_players: list[Player],
    window: int = VALUE_WINDOW,
    limit: int = VALUE_LIMIT,
) -> list[tuple[Player, float]]:
    """Find the biggest bargains near the top of the board.

    Args:
        available_players: Undrafted players in board (ADP) order
        window: How many players from the top of the board to consider
        limit: Maximum number of players to return

    Returns:
        List of (player, margin) tuples sorted by margin descending
    """
    candidates = [
        (player, value_margin(player))
        for player in available_players[:window]
        if player.position not in UNGRADED_POSITIONS
    ]
    bargains = [(player, margin) for player, margin in candidates if margin > 0]
    bargains.sort(key=lambda item: item[1], reverse=True)
    return bargains[:limit]


def tier_drops(available_players: list[Player]) -> list[TierDrop]:
    """Flag positions where the top remaining tier is about to run out.

    Args:
        available_players: Undrafted players in board (ADP) order

    Returns:
        One TierDrop per skill position with at most two players left in its
        best available tier
    """
    drops = []
    for pos in SKILL_POSITIONS:
        at_position = [p for p in available_players if p.position == pos]
        if not at_position:
            continue
        top_tier = at_position[0].tier
        in_tier = [p for p in at_position if p.tier == top_tier]
        if len(in_tier) <= TIER_DROP_THRESHOLD:
            drops.append(TierDrop(position=pos, tier=top_tier, players=in_tier))
    return drops


def risk_reward_score(player: Player) -> int:
    """Score volatility from 1 (safe) to 10 (boom or bust)."""
    score = (
        5
        + RISK_ADJUSTMENT.get(player.injury_risk, 0)
        + OPPORTUNITY_ADJUSTMENT.get(player.opportunity_share, 0)
        + len(player.concerns)
        - len(player.catalysts)
    )
    return max(1, min(10, score))


def player_outlook(player: Player) -> PlayerOutlook:
    """Summarize a player's projection, upside, downside and draft verdict.

    Args:
        player: Valued player

    Returns:
        PlayerOutlook built from the player's data
    """
    summary = (
        f"{player.name} ({player.position}, {player.team}) projects for "
        f"{player.projected_ppg:.1f} PPG over {player.expected_games} games, "
        f"overall projection rank {player.projection_rank or 'N/A'}."
    )

    if player.catalysts:
        upside = "; ".join(player.catalysts)
    else:
        upside = f"Repeats last season's {player.fantasy_ppg:.1f} PPG pace."

    if player.concerns:
        downside = "; ".join(player.concerns)
    else:
        downside = f"{player.injury_risk} injury risk is the main threat to volume."

    margin = value_margin(player)
    if player.position in UNGRADED_POSITIONS:
        verdict = "Draft in the final rounds."
    elif margin >= VALUE_MARGIN:
        verdict = f"Value pick: projected {margin:.0f} spots better than ADP."
    elif margin <= -VALUE_MARGIN:
        verdict = f"Reach at ADP: projected {-margin:.0f} spots worse than the market."
    else:
        verdict = "Fairly priced at ADP."

    adp = f"{player.adp:g}" if player.adp is not None else "N/A"
    rank = player.external_rank if player.external_rank is not None else "N/A"
    consensus = f"ADP {adp}, expert rank {rank}, draft grade {player.draft_grade or 'N/A'}."

    return PlayerOutlook(
        summary=summary,
        upside=upside,
        downside=downside,
        verdict=verdict,
        risk_reward_score=risk_reward_score(player),
        expert_consensus=consensus,
    )
