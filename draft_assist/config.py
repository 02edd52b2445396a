"""Configuration data structures and settings for the draft assistant."""

from dataclasses import dataclass

# Positions that exist in the player pool
POSITIONS = ("QB", "RB", "WR", "TE", "K", "DST")

# Skill positions used for grading, analytics and positional advice
SKILL_POSITIONS = ("QB", "RB", "WR", "TE")

# Positions the composite grade does not model
UNGRADED_POSITIONS = {"K", "DST"}

# Allowed values for injury_risk and opportunity_share
LEVELS = ("Low", "Medium", "High")

# Positions eligible for the FLEX board filter
FLEX_POSITIONS = {"RB", "WR", "TE"}
FLEX = "FLEX"

# PPR scoring weights per stat category
OFFENSE_SCORING = {
    "passing_yards": 0.04,
    "passing_tds": 4.0,
    "interceptions": -2.0,
    "rushing_yards": 0.1,
    "rushing_tds": 6.0,
    "receptions": 1.0,
    "receiving_yards": 0.1,
    "receiving_tds": 6.0,
    "fumbles_lost": -2.0,
}

KICKER_SCORING = {
    "fg_made_0_39": 3.0,
    "fg_made_40_49": 4.0,
    "fg_made_50_plus": 5.0,
    "extra_points_made": 1.0,
}

# points_allowed is carried in DST stat records but not scored
DEFENSE_SCORING = {
    "sacks": 1.0,
    "defensive_interceptions": 2.0,
    "fumbles_recovered": 2.0,
    "safeties": 2.0,
    "defensive_tds": 6.0,
    "blocked_kicks": 2.0,
}

# Fallback projection settings
FULL_SEASON_GAMES = 17
INJURY_RISK_GAMES = {
    "High": 14,
    "Medium": 16,
}
POSITION_FLOOR_POINTS = {
    "QB": 250.0,
    "RB": 180.0,
    "WR": 180.0,
    "TE": 100.0,
    "K": 120.0,
    "DST": 100.0,
}
DEFAULT_FLOOR_POINTS = 50.0
REGRESSION_FACTOR = 0.95  # Discount applied to naive per-game extrapolation

# Projection modifier weights (per list entry)
CATALYST_BONUS = 0.02
CONCERN_PENALTY = 0.025

# Composite grade weights
GRADE_WEIGHTS = {
    "points": 0.30,
    "value": 0.20,
    "tier": 0.20,
    "risk": 0.10,
    "sos": 0.10,
    "opportunity": 0.10,
}
DEFAULT_ADP = 200  # Used for value score when a player has no ADP
VALUE_SCORE_MULTIPLIER = 2

TIER_SCORES = {1: 100, 2: 95, 3: 90, 4: 85, 5: 80, 6: 75}
DEFAULT_TIER_SCORE = 70

RISK_SCORES = {"Low": 100, "Medium": 70, "High": 40}
DEFAULT_RISK_SCORE = 60

OPPORTUNITY_SCORES = {"High": 100, "Medium": 80, "Low": 50}
DEFAULT_OPPORTUNITY_SCORE = 75

# (minimum score, letter) checked top-down
GRADE_BREAKPOINTS = [
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (65, "D+"),
    (60, "D"),
]
FAILING_GRADE = "F"
NOT_GRADED = "N/A"

# Board ordering for players without an ADP
UNRANKED_ADP = 999

# Team grade thresholds as a fraction of league size (average positional rank)
TEAM_GRADE_THRESHOLDS = [
    (0.25, "A"),
    (0.40, "B"),
    (0.60, "C"),
]
TEAM_FAILING_GRADE = "D"

# Neutral positional split used when no better signal exists
NEUTRAL_POSITIONAL_SPLIT = {"QB": 25, "RB": 35, "WR": 30, "TE": 10}

# Global draft configuration
NUM_TEAMS = 12
TOTAL_ROUNDS = 15
LEAGUE_SIZES = (8, 10, 12, 14)


@dataclass
class DraftConfig:
    """League settings for a draft session.

    Attributes:
        num_teams: Number of teams in the draft
        draft_position: Draft slot of "my" team (1-based)
        rounds: Number of rounds used for mock drafts and board export
    """

    num_teams: int = NUM_TEAMS
    draft_position: int = 1
    rounds: int = TOTAL_ROUNDS

    def __post_init__(self) -> None:
        """Validate league settings."""
        if self.num_teams < 2:
            raise ValueError(f"num_teams must be at least 2, got {self.num_teams}")
        if not 1 <= self.draft_position <= self.num_teams:
            raise ValueError(
                f"draft_position must be between 1 and {self.num_teams}, "
                f"got {self.draft_position}"
            )
        if self.rounds < 1:
            raise ValueError(f"rounds must be positive, got {self.rounds}")

    @property
    def total_picks(self) -> int:
        """Total number of picks across all rounds."""
        return self.num_teams * self.rounds
