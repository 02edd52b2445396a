"""Data structures for players, projections and draft analysis results."""

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from .config import LEVELS, POSITIONS

# Fields computed by the valuation pipeline rather than read from source data
DERIVED_FIELDS = (
    "fantasy_points",
    "fantasy_ppg",
    "projected_points",
    "expected_games",
    "projected_ppg",
    "projection_rank",
    "composite_score",
    "draft_grade",
)

DRAFT_FIELDS = ("drafted", "draft_pick", "team_number")

INT_FIELDS = ("id", "bye_week", "tier", "strength_of_schedule", "games_played")
STR_FIELDS = ("name", "team", "archetype")
LEVEL_FIELDS = ("injury_risk", "opportunity_share")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_stat_record(value: Any) -> bool:
    """Check for a category -> number mapping (None values allowed)."""
    return isinstance(value, dict) and all(
        isinstance(key, str) and (count is None or _is_number(count))
        for key, count in value.items()
    )


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


@dataclass
class Player:
    """Fantasy football player with source data, valuation and draft state.

    Attributes:
        id: Unique, season-stable identifier
        name: Player's full name
        position: Position (QB, RB, WR, TE, K, DST)
        team: NFL team abbreviation
        bye_week: Bye week number
        tier: Expert tier bucket (lower is better)
        archetype: Free-text role label (e.g. "Possession Receiver")
        injury_risk: Low, Medium or High
        strength_of_schedule: Schedule rank from 1 (easiest) to 32 (hardest)
        opportunity_share: Low, Medium or High
        adp: Average draft position, if known
        external_rank: Expert consensus rank, if known
        notes: Free-text notes
        stats: Completed-season stat record (category -> count)
        games_played: Games played in the completed season
        projected_stats: Externally supplied projection for the coming season
        projected_games: Games played in the supplied projection
        catalysts: Positive projection factors
        concerns: Negative projection factors
    """

    id: int
    name: str
    position: str
    team: str
    bye_week: int = 0
    tier: int = 10
    archetype: str = ""
    injury_risk: str = "Low"
    strength_of_schedule: int = 16
    opportunity_share: str = "Medium"
    adp: float | None = None
    external_rank: int | None = None
    notes: str | None = None
    stats: dict[str, float] = field(default_factory=dict)
    games_played: int = 0
    projected_stats: dict[str, float] | None = None
    projected_games: int | None = None
    catalysts: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)

    # Derived by the valuation pipeline
    fantasy_points: float = 0.0
    fantasy_ppg: float = 0.0
    projected_points: float = 0.0
    expected_games: int = 0
    projected_ppg: float = 0.0
    projection_rank: int | None = None
    composite_score: float | None = None
    draft_grade: str | None = None

    # Draft assignment
    drafted: bool = False
    draft_pick: int | None = None
    team_number: int | None = None

    def __post_init__(self) -> None:
        """Validate source fields so bad records never reach the pipeline.

        Raises:
            ValueError: If the position is unknown or a source field has the
                wrong type
        """
        if self.position not in POSITIONS:
            raise ValueError(f"Unknown position {self.position!r} for {self.name}")

        for name in INT_FIELDS:
            if not _is_int(getattr(self, name)):
                raise ValueError(f"{self.name}: {name} must be an integer")
        for name in STR_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{self.name}: {name} must be a string")
        for name in LEVEL_FIELDS:
            if getattr(self, name) not in LEVELS:
                raise ValueError(f"{self.name}: {name} must be one of {LEVELS}")

        if self.adp is not None and not _is_number(self.adp):
            raise ValueError(f"{self.name}: adp must be a number")
        if self.external_rank is not None and not _is_int(self.external_rank):
            raise ValueError(f"{self.name}: external_rank must be an integer")
        if self.notes is not None and not isinstance(self.notes, str):
            raise ValueError(f"{self.name}: notes must be a string")
        if self.projected_games is not None and not _is_int(self.projected_games):
            raise ValueError(f"{self.name}: projected_games must be an integer")

        if not _is_stat_record(self.stats):
            raise ValueError(f"{self.name}: stats must map categories to numbers")
        if self.projected_stats is not None and not _is_stat_record(self.projected_stats):
            raise ValueError(f"{self.name}: projected_stats must map categories to numbers")
        for name in ("catalysts", "concerns"):
            if not _is_string_list(getattr(self, name)):
                raise ValueError(f"{self.name}: {name} must be a list of strings")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Player":
        """Create a player from a source record.

        Args:
            data: Mapping with snake_case keys matching the dataclass fields

        Returns:
            New Player instance

        Raises:
            ValueError: If the record has unknown keys or lacks required ones
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown player fields: {sorted(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ValueError(f"Invalid player record {data.get('id')}: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert player to a dictionary."""
        return dataclasses.asdict(self)

    def source_record(self) -> dict[str, Any]:
        """Return only the source fields, dropping derived and draft state."""
        record = self.to_dict()
        for name in DERIVED_FIELDS + DRAFT_FIELDS:
            record.pop(name)
        return record


@dataclass
class Projection:
    """Finalized forward projection for one player."""

    total: float
    games: int
    per_game: float


@dataclass
class Recommendation:
    """A single recommended player with its reasoning."""

    name: str
    reasoning: str


@dataclass
class DraftAnalysis:
    """Structured pick advice returned by a recommender.

    Attributes:
        primary: Best pick right now
        alternatives: Up to two other strong options
        predictions: Player names expected to be gone before my next pick
        positional_analysis: QB/RB/WR/TE percentages summing to 100
        strategic_narrative: Free-text summary
    """

    primary: Recommendation
    alternatives: list[Recommendation] = field(default_factory=list)
    predictions: list[str] = field(default_factory=list)
    positional_analysis: dict[str, int] = field(default_factory=dict)
    strategic_narrative: str = ""


@dataclass
class PositionalAdvantage:
    """My team's projected PPG at one position against the league."""

    position: str
    your_ppg: float
    league_average_ppg: float
    rank: int


@dataclass
class TeamSummary:
    """Overall roster grade and identity."""

    grade: str
    title: str
    summary: str
    insights: list[str] = field(default_factory=list)
    archetype_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class TeamAnalytics:
    """Post-draft analytics for one team."""

    positional_advantages: list[PositionalAdvantage]
    team_summary: TeamSummary


@dataclass
class PlayerOutlook:
    """Text outlook for a single player."""

    summary: str
    upside: str
    downside: str
    verdict: str
    risk_reward_score: int
    expert_consensus: str
