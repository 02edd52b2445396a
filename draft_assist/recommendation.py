"""Pick recommendations behind a pluggable, failure-tolerant interface."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field

from .config import NEUTRAL_POSITIONAL_SPLIT, SKILL_POSITIONS
from .draft import DraftSession
from .grading import max_ppg_by_position
from .models import DraftAnalysis, Player, Recommendation

logger = logging.getLogger(__name__)

# Starters a roster wants at each skill position before depth matters
STARTER_TARGETS = {"QB": 1, "RB": 2, "WR": 2, "TE": 1}
DEPTH_MULTIPLIER = 0.5
SINGLE_STARTER_DEPTH_MULTIPLIER = 0.25  # QB/TE depth is worth less
CANDIDATE_WINDOW = 15
MAX_ALTERNATIVES = 2
MAX_PREDICTIONS = 3

RATE_LIMIT_MARKERS = ("429", "RESOURCE_EXHAUSTED")


@dataclass
class DraftContext:
    """Everything a recommender sees about the draft.

    Attributes:
        my_roster: Players on my team
        available_players: Undrafted players, best first
        drafted_players: Drafted players in pick order
        current_pick: Overall pick on the clock
        my_next_pick: My next pick after the current one (-1 if none)
        teams_before_next_turn: Teams picking before my next turn
    """

    my_roster: list[Player]
    available_players: list[Player]
    drafted_players: list[Player] = field(default_factory=list)
    current_pick: int = 1
    my_next_pick: int = -1
    teams_before_next_turn: list[int] = field(default_factory=list)

    @classmethod
    def from_session(cls, session: DraftSession) -> "DraftContext":
        """Snapshot the parts of a session a recommender needs."""
        return cls(
            my_roster=session.my_team,
            available_players=session.available_players,
            drafted_players=session.drafted_players,
            current_pick=session.current_pick,
            my_next_pick=session.my_next_pick,
            teams_before_next_turn=session.teams_picking_before_next_turn,
        )


class Recommender(ABC):
    """Produces pick advice for a draft context."""

    @abstractmethod
    async def recommend(self, context: DraftContext) -> DraftAnalysis:
        """Return advice for the current pick."""


def normalize_positional_analysis(weights: Mapping[str, float] | None) -> dict[str, int]:
    """Convert positional weights into integer percentages summing to 100.

    Rounding drift is absorbed by the largest bucket. Empty or all-zero
    input yields the neutral split.

    Args:
        weights: Non-negative weight per skill position (other keys ignored)

    Returns:
        Dictionary mapping QB/RB/WR/TE -> percentage
    """
    weights = weights or {}
    values = {pos: max(0.0, float(weights.get(pos) or 0)) for pos in SKILL_POSITIONS}
    total = sum(values.values())
    if total <= 0:
        return dict(NEUTRAL_POSITIONAL_SPLIT)

    percentages = {pos: round(value / total * 100) for pos, value in values.items()}
    drift = 100 - sum(percentages.values())
    if drift:
        largest = max(SKILL_POSITIONS, key=lambda pos: percentages[pos])
        percentages[largest] += drift
    return percentages


def no_players_left() -> DraftAnalysis:
    """Sentinel advice once the pool is empty."""
    return DraftAnalysis(
        primary=Recommendation(
            name="No players left", reasoning="Every player has been drafted."
        ),
        positional_analysis=dict(NEUTRAL_POSITIONAL_SPLIT),
        strategic_narrative="The draft is complete.",
    )


def is_rate_limited(error: BaseException) -> bool:
    """Check whether a recommender error looks like rate limiting."""
    text = str(error)
    return any(marker in text for marker in RATE_LIMIT_MARKERS)


def fallback_analysis(
    available_players: list[Player], error: BaseException | None = None
) -> DraftAnalysis:
    """Deterministic advice used when the recommender cannot answer.

    Args:
        available_players: Undrafted players
        error: The failure that triggered the fallback, if any

    Returns:
        Best remaining players by projected PPG with a neutral positional split
    """
    if not available_players:
        return no_players_left()

    by_projection = sorted(
        available_players, key=lambda p: p.projected_ppg, reverse=True
    )
    best = by_projection[0]

    if error is not None and is_rate_limited(error):
        reasoning = (
            "Pick analysis is temporarily unavailable due to high traffic. "
            "We're still recommending the top projected player."
        )
    else:
        reasoning = (
            f"Unable to generate a full analysis. However, {best.name} is the best "
            "player available based on projections and would be a solid pick here."
        )

    return DraftAnalysis(
        primary=Recommendation(name=best.name, reasoning=reasoning),
        alternatives=[
            Recommendation(
                name=p.name, reasoning="A strong value pick based on projections."
            )
            for p in by_projection[1 : 1 + MAX_ALTERNATIVES]
        ],
        predictions=[],
        positional_analysis=dict(NEUTRAL_POSITIONAL_SPLIT),
        strategic_narrative="Falling back to best available by projection.",
    )


def roster_need_multipliers(roster: list[Player]) -> dict[str, float]:
    """Weight each skill position by how much the roster still needs it."""
    counts = {pos: 0 for pos in SKILL_POSITIONS}
    for player in roster:
        if player.position in counts:
            counts[player.position] += 1

    multipliers = {}
    for pos, target in STARTER_TARGETS.items():
        if counts[pos] < target:
            multipliers[pos] = 1.0
        elif target == 1:
            multipliers[pos] = SINGLE_STARTER_DEPTH_MULTIPLIER
        else:
            multipliers[pos] = DEPTH_MULTIPLIER
    return multipliers


class LocalRecommender(Recommender):
    """Template-based recommender driven by projections and roster needs."""

    def __init__(self, candidate_window: int = CANDIDATE_WINDOW):
        self.candidate_window = candidate_window

    async def recommend(self, context: DraftContext) -> DraftAnalysis:
        return self.analyze(context)

    def analyze(self, context: DraftContext) -> DraftAnalysis:
        """Build advice synchronously.

        Args:
            context: Current draft context

        Returns:
            DraftAnalysis for the current pick
        """
        available = context.available_players
        if not available:
            return no_players_left()

        multipliers = roster_need_multipliers(context.my_roster)
        candidates = available[: self.candidate_window]
        skill_candidates = [p for p in candidates if p.position in multipliers]
        if not skill_candidates:
            skill_candidates = candidates

        ranked = sorted(
            skill_candidates,
            key=lambda p: p.projected_ppg * multipliers.get(p.position, 1.0),
            reverse=True,
        )
        primary = ranked[0]
        alternatives = ranked[1 : 1 + MAX_ALTERNATIVES]

        prediction_count = min(MAX_PREDICTIONS, len(context.teams_before_next_turn))
        predictions = [p.name for p in available if p is not primary][:prediction_count]

        best_by_position = max_ppg_by_position(
            p for p in available if p.position in multipliers
        )
        weights = {
            pos: best_by_position.get(pos, 0.0) * multipliers[pos]
            for pos in SKILL_POSITIONS
        }

        return DraftAnalysis(
            primary=Recommendation(
                name=primary.name, reasoning=self._primary_reasoning(primary, multipliers)
            ),
            alternatives=[
                Recommendation(
                    name=p.name,
                    reasoning=(
                        f"{p.position} projected for {p.projected_ppg:.1f} PPG "
                        f"with {p.injury_risk.lower()} injury risk."
                    ),
                )
                for p in alternatives
            ],
            predictions=predictions,
            positional_analysis=normalize_positional_analysis(weights),
            strategic_narrative=self._narrative(context, primary),
        )

    @staticmethod
    def _primary_reasoning(player: Player, multipliers: dict[str, float]) -> str:
        need = "fills a starting need" if multipliers.get(player.position) == 1.0 else "adds depth"
        grade = player.draft_grade or "N/A"
        return (
            f"{player.name} leads the available pool for your roster at "
            f"{player.projected_ppg:.1f} projected PPG and {need} at {player.position}. "
            f"Draft grade {grade} with {player.injury_risk.lower()} injury risk."
        )

    @staticmethod
    def _narrative(context: DraftContext, primary: Player) -> str:
        if context.my_next_pick == -1:
            return f"This is your last pick of the draft; take {primary.name}."
        waiting = context.my_next_pick - context.current_pick - 1
        return (
            f"{waiting} picks happen before you are back on the clock at pick "
            f"{context.my_next_pick}, so prioritise players unlikely to last."
        )


class DraftAdvisor:
    """Requests advice for a session and guards the draft against failures.

    Each call to advise() takes a new generation token; a response that
    arrives after a newer request was issued is discarded.
    """

    def __init__(self, recommender: Recommender):
        self.recommender = recommender
        self.generation = 0

    def invalidate(self) -> None:
        """Mark any in-flight request as stale."""
        self.generation += 1

    async def advise(self, session: DraftSession) -> DraftAnalysis | None:
        """Get advice for the session's current pick.

        Args:
            session: Draft session (never mutated)

        Returns:
            Normalized advice, or None if a newer request superseded this one
        """
        self.generation += 1
        token = self.generation
        context = DraftContext.from_session(session)

        if not context.available_players:
            return no_players_left()

        try:
            analysis = await self.recommender.recommend(context)
            analysis.alternatives = analysis.alternatives[:MAX_ALTERNATIVES]
            analysis.positional_analysis = normalize_positional_analysis(
                analysis.positional_analysis
            )
        except Exception as e:
            logger.warning(f"Recommender failed, using local fallback: {e}")
            analysis = fallback_analysis(context.available_players, e)

        if token != self.generation:
            logger.debug(f"Discarding stale recommendation for pick {context.current_pick}")
            return None

        return analysis
