"""Snake draft state machine for a single draft session."""

import logging
import math
from collections.abc import Iterable
from typing import Any

from .config import FLEX, FLEX_POSITIONS, UNRANKED_ADP, DraftConfig
from .grading import build_player_pool
from .models import Player

logger = logging.getLogger(__name__)

NO_CHANGES_MESSAGE = "No significant player data changes found."


class InvalidDraftError(ValueError):
    """Raised when a draft action references a missing or drafted player."""


def team_for_pick(pick: int, num_teams: int) -> int:
    """Get the team on the clock for a pick in a snake draft.

    Args:
        pick: Overall pick number (1-based)
        num_teams: Number of teams in the draft

    Returns:
        Team number (1-based)

    Example:
        For 4 teams: picks 1-4 go to teams 1, 2, 3, 4 and picks 5-8 go
        to teams 4, 3, 2, 1.
    """
    round_num = math.ceil(pick / num_teams)
    pick_in_round = (pick - 1) % num_teams
    if round_num % 2 == 1:  # Odd rounds: normal order
        return pick_in_round + 1
    return num_teams - pick_in_round  # Even rounds: reverse order


def round_and_pick(pick: int, num_teams: int) -> tuple[int, int]:
    """Split an overall pick into (round, pick within round), both 1-based."""
    return (pick - 1) // num_teams + 1, (pick - 1) % num_teams + 1


def pick_label(pick: int, num_teams: int) -> str:
    """Format an overall pick as R{round}.{pick}."""
    round_num, pick_in_round = round_and_pick(pick, num_teams)
    return f"R{round_num}.{pick_in_round}"


def board_sort_key(player: Player) -> float:
    """Sort key for the available board (ADP ascending, unknown ADP last)."""
    return player.adp if player.adp is not None else UNRANKED_ADP


def matches_filter(player: Player, position: str | None = None, query: str | None = None) -> bool:
    """Check a player against a board position filter and name search.

    Args:
        player: Player to check
        position: Position, "FLEX" for RB/WR/TE, or None for all
        query: Case-insensitive name substring, or None for all

    Returns:
        True if the player passes both filters
    """
    if position == FLEX:
        if player.position not in FLEX_POSITIONS:
            return False
    elif position is not None and player.position != position:
        return False
    return not query or query.lower() in player.name.lower()


def _format_value(value: Any) -> str:
    """Format a change-log value, dropping a redundant .0."""
    if value is None:
        return "N/A"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def describe_changes(old: Player, new: Player, fields: dict[str, Any]) -> list[str]:
    """Describe what a sync update changed for one player.

    Args:
        old: Player as it was in the pool before the sync
        new: Player after merging the update and rerunning the pipeline
        fields: Fields supplied by the update

    Returns:
        One line per changed field
    """
    changes = []

    if fields.get("adp") is not None and new.adp != old.adp:
        changes.append(
            f"{old.name}: ADP {_format_value(old.adp)} → {_format_value(new.adp)}"
        )
    if fields.get("external_rank") is not None and new.external_rank != old.external_rank:
        changes.append(
            f"{old.name}: ESPN Rank {_format_value(old.external_rank)} → "
            f"{_format_value(new.external_rank)}"
        )
    if fields.get("notes") and new.notes != old.notes:
        changes.append(f"{old.name}: Note updated")

    # Differences below one decimal place are noise
    old_ppg = f"{old.projected_ppg:.1f}"
    new_ppg = f"{new.projected_ppg:.1f}"
    if old_ppg != new_ppg:
        arrow = "↓" if old.projected_ppg > new.projected_ppg else "↑"
        changes.append(f"{old.name}: Proj {arrow} {old_ppg} → {new_ppg} PPG")

    return changes


class DraftSession:
    """Owns the player pool and pick progress for one draft.

    Every mutation of draft state (draft, reset, sync) goes through this
    class so the draft invariants are enforced in one place.

    Attributes:
        baseline: Static source records; reset and sync always start from these
        config: League settings
        players: Valued player pool with draft assignments
        current_pick: Next overall pick number (1-based)
    """

    def __init__(self, baseline: Iterable[Player], config: DraftConfig | None = None):
        """Initialize a session and build the pool from baseline records.

        Args:
            baseline: Source player records
            config: League settings (defaults to DraftConfig())

        Raises:
            ValueError: If two baseline records share an id
        """
        self.baseline = tuple(baseline)
        ids = [record.id for record in self.baseline]
        if len(ids) != len(set(ids)):
            raise ValueError("Baseline player ids must be unique")

        self.config = config if config is not None else DraftConfig()
        self.players: list[Player] = []
        self.current_pick = 1
        self.reset()

    @property
    def num_teams(self) -> int:
        return self.config.num_teams

    @property
    def draft_position(self) -> int:
        return self.config.draft_position

    @property
    def team_on_clock(self) -> int:
        """Team number making the current pick."""
        return team_for_pick(self.current_pick, self.num_teams)

    @property
    def is_my_turn(self) -> bool:
        return self.team_on_clock == self.draft_position

    @property
    def is_complete(self) -> bool:
        """True once no undrafted players remain."""
        return all(player.drafted for player in self.players)

    @property
    def available_players(self) -> list[Player]:
        """Undrafted players ordered by ADP."""
        return sorted(
            (p for p in self.players if not p.drafted), key=board_sort_key
        )

    def board(self, position: str | None = None, query: str | None = None) -> list[Player]:
        """Available players filtered by position and name, in ADP order."""
        return [
            p for p in self.available_players if matches_filter(p, position, query)
        ]

    @property
    def drafted_players(self) -> list[Player]:
        """Drafted players in pick order."""
        return sorted(
            (p for p in self.players if p.drafted), key=lambda p: p.draft_pick
        )

    @property
    def my_team(self) -> list[Player]:
        return self.team_roster(self.draft_position)

    def team_roster(self, team_number: int) -> list[Player]:
        """Players drafted by a team, in pick order."""
        return [p for p in self.drafted_players if p.team_number == team_number]

    def get_player(self, player_id: int) -> Player | None:
        """Look up a player in the pool by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    @property
    def my_next_pick(self) -> int:
        """My first pick after the current one, or -1 if none remains."""
        for pick in range(self.current_pick + 1, len(self.players) + 1):
            if team_for_pick(pick, self.num_teams) == self.draft_position:
                return pick
        return -1

    @property
    def teams_picking_before_next_turn(self) -> list[int]:
        """Teams that pick between the current pick and my next pick."""
        next_pick = self.my_next_pick
        if next_pick == -1:
            return []
        return [
            team_for_pick(pick, self.num_teams)
            for pick in range(self.current_pick + 1, next_pick)
        ]

    def draft_player(self, player_id: int) -> Player:
        """Assign a player to the team on the clock and advance the pick.

        Args:
            player_id: Id of the player being drafted

        Returns:
            The drafted player

        Raises:
            InvalidDraftError: If the player does not exist or is already drafted
        """
        player = self.get_player(player_id)
        if player is None:
            raise InvalidDraftError(f"No player with id {player_id}")
        if player.drafted:
            raise InvalidDraftError(
                f"{player.name} was already drafted at pick {player.draft_pick}"
            )

        team_number = self.team_on_clock
        player.drafted = True
        player.draft_pick = self.current_pick
        player.team_number = team_number
        self.current_pick += 1

        logger.debug(
            f"Pick {player.draft_pick} "
            f"({pick_label(player.draft_pick, self.num_teams)}): Team {team_number} "
            f"drafts {player.name} ({player.position})"
        )
        return player

    def _start(self, records: Iterable[Player]) -> None:
        """Value a fresh pool from source records and restart at pick 1."""
        self.players = build_player_pool(records)
        self.current_pick = 1

    def reset(self) -> None:
        """Rebuild the pool from the static baseline and restart at pick 1.

        Data merged by earlier syncs is discarded.
        """
        self._start(self.baseline)
        logger.info(f"Draft reset: {len(self.players)} players available")

    def sync(self, updates: Iterable[dict[str, Any]]) -> list[str]:
        """Merge partial player updates onto the static baseline and re-seed the draft.

        Each update is matched by id and overwrites only the fields it
        carries. Updates for unknown ids or with invalid fields are skipped
        and the rest of the batch still applies. The baseline itself is never
        modified, so a later sync or reset starts from the original records.
        Drafted flags are cleared and the pick counter returns to 1.

        Args:
            updates: Partial player records, each with an "id" key

        Returns:
            Human-readable change log
        """
        baseline_by_id = {record.id: record for record in self.baseline}
        merged_by_id = dict(baseline_by_id)
        applied: dict[int, dict[str, Any]] = {}

        for update in updates:
            if not isinstance(update, dict):
                logger.warning(f"Skipping non-object update: {update!r}")
                continue
            fields = dict(update)
            player_id = fields.pop("id", None)
            record = baseline_by_id.get(player_id) if isinstance(player_id, int) else None
            if record is None:
                logger.warning(f"Skipping update for unknown player id {player_id}")
                continue
            try:
                merged = Player.from_dict(
                    {**merged_by_id[player_id].source_record(), **fields}
                )
            except ValueError as e:
                logger.warning(f"Skipping malformed update for {record.name}: {e}")
                continue
            if merged.position != record.position:
                logger.warning(f"Skipping update that changes {record.name}'s position")
                continue
            merged_by_id[player_id] = merged
            applied.setdefault(player_id, {}).update(fields)

        previous = {player.id: player for player in self.players}
        self._start([merged_by_id[record.id] for record in self.baseline])

        changes = []
        for player in self.players:
            if player.id in applied:
                changes.extend(
                    describe_changes(previous[player.id], player, applied[player.id])
                )

        logger.info(f"Sync applied {len(applied)} updates, {len(changes)} changes")
        return changes or [NO_CHANGES_MESSAGE]

    def update_league(self, num_teams: int, draft_position: int) -> None:
        """Change league size or my draft slot.

        Raises:
            ValueError: If the settings are invalid
        """
        self.config = DraftConfig(
            num_teams=num_teams,
            draft_position=draft_position,
            rounds=self.config.rounds,
        )


def make_greedy_pick(session: DraftSession) -> Player:
    """Draft the lowest-ADP available player for the team on the clock.

    Args:
        session: Current draft session

    Returns:
        Player that was drafted

    Raises:
        InvalidDraftError: If no players remain
    """
    available = session.available_players
    if not available:
        raise InvalidDraftError(f"No players left for team {session.team_on_clock}")

    # Tie-breaker: highest projected PPG
    selected = min(
        available,
        key=lambda p: (
            p.adp if p.adp is not None else float("inf"),
            -p.projected_ppg,
        ),
    )
    return session.draft_player(selected.id)


def simulate_draft(session: DraftSession, rounds: int | None = None) -> DraftSession:
    """Complete the remaining picks of a mock draft greedily.

    Args:
        session: Draft session to continue from its current pick
        rounds: Rounds to fill (defaults to the session's configured rounds)

    Returns:
        The same session after simulation
    """
    if rounds is None:
        rounds = session.config.rounds
    last_pick = rounds * session.num_teams

    logger.info(f"Simulating draft from pick {session.current_pick} to {last_pick}")
    while session.current_pick <= last_pick:
        try:
            make_greedy_pick(session)
        except InvalidDraftError as e:
            logger.warning(f"Could not complete pick {session.current_pick}: {e}")
            break

    logger.info(f"Draft simulation complete: {len(session.drafted_players)} picks made")
    return session
