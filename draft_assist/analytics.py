"""Post-draft team analytics: positional strength and roster identity."""

import logging
from collections import Counter
from collections.abc import Iterable

from .config import (
    SKILL_POSITIONS,
    TEAM_FAILING_GRADE,
    TEAM_GRADE_THRESHOLDS,
)
from .models import Player, PositionalAdvantage, TeamAnalytics, TeamSummary

logger = logging.getLogger(__name__)

BYE_WEEK_CLUSTER_SIZE = 3


def team_position_totals(
    players: Iterable[Player], total_teams: int
) -> dict[int, dict[str, float]]:
    """Sum drafted players' projected PPG per team and skill position.

    Args:
        players: Full player pool
        total_teams: Number of teams in the league

    Returns:
        Dictionary mapping team number -> {position: projected PPG}
    """
    totals = {
        team: {pos: 0.0 for pos in SKILL_POSITIONS}
        for team in range(1, total_teams + 1)
    }
    for player in players:
        if not player.drafted or player.position not in SKILL_POSITIONS:
            continue
        team_totals = totals.get(player.team_number)
        if team_totals is not None:
            team_totals[player.position] += player.projected_ppg
    return totals


def league_averages(totals: dict[int, dict[str, float]]) -> dict[str, float]:
    """Mean positional PPG across every team, drafted or not."""
    num_teams = len(totals) or 1
    return {
        pos: sum(team[pos] for team in totals.values()) / num_teams
        for pos in SKILL_POSITIONS
    }


def position_rank(value: float, all_values: list[float]) -> int:
    """Rank a team's value among all teams (1 = best).

    Tied teams share the better rank, because the first matching entry in
    the descending list is used.
    """
    ordered = sorted(all_values, reverse=True)
    return ordered.index(value) + 1


def archetype_counts(roster: Iterable[Player]) -> dict[str, int]:
    """Count archetype labels across a roster, most common first."""
    counts = Counter(p.archetype for p in roster if p.archetype)
    return dict(counts.most_common())


def team_grade(average_rank: float, total_teams: int) -> str:
    """Letter grade from the average positional rank."""
    for fraction, grade in TEAM_GRADE_THRESHOLDS:
        if average_rank <= total_teams * fraction:
            return grade
    return TEAM_FAILING_GRADE


def bye_week_clusters(roster: Iterable[Player]) -> dict[int, int]:
    """Bye weeks shared by at least BYE_WEEK_CLUSTER_SIZE roster players."""
    counts = Counter(p.bye_week for p in roster if p.bye_week)
    return {week: n for week, n in sorted(counts.items()) if n >= BYE_WEEK_CLUSTER_SIZE}


def summarize_team(
    roster: list[Player],
    advantages: list[PositionalAdvantage],
    total_teams: int,
) -> TeamSummary:
    """Build the overall grade, title and insights for a roster.

    Args:
        roster: My drafted players
        advantages: My positional advantages against the league
        total_teams: Number of teams in the league

    Returns:
        TeamSummary for the roster
    """
    average_rank = sum(a.rank for a in advantages) / len(advantages)
    grade = team_grade(average_rank, total_teams)
    counts = archetype_counts(roster)

    if counts:
        dominant = next(iter(counts))
        title = f"The {dominant} Blueprint"
    else:
        title = "Blank Slate"

    summary = (
        f"{len(roster)} players drafted with an average positional rank of "
        f"{average_rank:.1f} out of {total_teams} teams."
    )

    insights = []
    if roster:
        by_margin = sorted(
            advantages, key=lambda a: a.your_ppg - a.league_average_ppg, reverse=True
        )
        best, worst = by_margin[0], by_margin[-1]
        insights.append(
            f"Strongest position: {best.position} "
            f"({best.your_ppg:.1f} PPG vs {best.league_average_ppg:.1f} league average, "
            f"rank {best.rank})."
        )
        if worst.position != best.position:
            insights.append(
                f"Weakest position: {worst.position} "
                f"({worst.your_ppg:.1f} PPG vs {worst.league_average_ppg:.1f} league "
                f"average, rank {worst.rank})."
            )
    for week, n in bye_week_clusters(roster).items():
        insights.append(f"{n} players share a week {week} bye.")

    return TeamSummary(
        grade=grade,
        title=title,
        summary=summary,
        insights=insights,
        archetype_counts=counts,
    )


def analyze_team(
    players: list[Player], my_team_number: int, total_teams: int
) -> TeamAnalytics:
    """Compare my roster against the league at each skill position.

    Args:
        players: Full player pool with draft assignments
        my_team_number: My team's number (1-based)
        total_teams: Number of teams in the league

    Returns:
        Positional advantages and an overall team summary

    Raises:
        ValueError: If my_team_number is not a team in the league
    """
    if not 1 <= my_team_number <= total_teams:
        raise ValueError(f"Team {my_team_number} is not in a {total_teams}-team league")

    totals = team_position_totals(players, total_teams)
    averages = league_averages(totals)
    mine = totals[my_team_number]

    advantages = []
    for pos in SKILL_POSITIONS:
        all_values = [team[pos] for team in totals.values()]
        advantages.append(
            PositionalAdvantage(
                position=pos,
                your_ppg=mine[pos],
                league_average_ppg=averages[pos],
                rank=position_rank(mine[pos], all_values),
            )
        )

    roster = sorted(
        (p for p in players if p.drafted and p.team_number == my_team_number),
        key=lambda p: p.draft_pick,
    )
    summary = summarize_team(roster, advantages, total_teams)

    logger.info(
        f"Team {my_team_number} analysis: grade {summary.grade}, "
        f"ranks {[a.rank for a in advantages]}"
    )
    return TeamAnalytics(positional_advantages=advantages, team_summary=summary)
