"""Data input/output for baseline player records, sync updates and exports."""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from draft_assist.draft import DraftSession, round_and_pick
from draft_assist.models import Player

logger = logging.getLogger(__name__)

RANKINGS_FIELDS = [
    "projection_rank",
    "name",
    "position",
    "team",
    "adp",
    "projected_ppg",
    "projected_points",
    "expected_games",
    "composite_score",
    "draft_grade",
]

DRAFT_BOARD_FIELDS = [
    "draft_pick",
    "round",
    "pick_in_round",
    "team_number",
    "name",
    "position",
    "team",
    "adp",
    "projected_ppg",
    "draft_grade",
]


def _read_json_list(json_path: str | Path, key: str) -> list[Any]:
    """Read a JSON file holding either a list or {key: list}."""
    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"{json_path}: expected a list of {key}")
    return data


def load_player_records(json_path: str | Path) -> list[Player]:
    """Load baseline player records from a JSON file.

    Args:
        json_path: Path to a JSON list of player records (or {"players": [...]})

    Returns:
        List of Player objects in file order

    Records that fail validation or repeat an earlier id are skipped.
    """
    players = []
    seen_ids: set[int] = set()

    for record in _read_json_list(json_path, "players"):
        if not isinstance(record, dict):
            logger.warning(f"Skipping non-object player record: {record!r}")
            continue
        try:
            player = Player.from_dict(record)
        except ValueError as e:
            logger.warning(f"Skipping invalid player record: {e}")
            continue

        if player.id in seen_ids:
            logger.warning(f"Skipping duplicate player id {player.id} ({player.name})")
            continue

        seen_ids.add(player.id)
        players.append(player)

    logger.info(f"Loaded {len(players)} players from {json_path}")
    return players


def load_sync_updates(json_path: str | Path) -> list[dict[str, Any]]:
    """Load partial player updates for a sync.

    Args:
        json_path: Path to a JSON list of updates (or {"updates": [...]})

    Returns:
        List of update dictionaries, each carrying an integer "id"
    """
    updates = []
    for update in _read_json_list(json_path, "updates"):
        if not isinstance(update, dict) or not isinstance(update.get("id"), int):
            logger.warning(f"Skipping update without an integer id: {update!r}")
            continue
        updates.append(update)

    logger.info(f"Loaded {len(updates)} sync updates from {json_path}")
    return updates


def save_rankings_csv(output_file_path: str | Path, players: list[Player]) -> None:
    """Save the valued player pool ordered by projection rank.

    Args:
        output_file_path: Path where to save the CSV file
        players: Valued player pool
    """
    rows = []
    for player in sorted(players, key=lambda p: p.projection_rank or len(players)):
        row = {name: getattr(player, name) for name in RANKINGS_FIELDS}
        row["projected_points"] = round(player.projected_points, 2)
        if player.composite_score is not None:
            row["composite_score"] = round(player.composite_score, 2)
        rows.append(row)

    Path(output_file_path).parent.mkdir(parents=True, exist_ok=True)

    with open(output_file_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RANKINGS_FIELDS)
        writer.writeheader()
        writer.writerows(rows)


def save_draft_board_csv(output_file_path: str | Path, session: DraftSession) -> None:
    """Save every pick made so far with round and team details.

    Args:
        output_file_path: Path where to save the CSV file
        session: Draft session to export
    """
    rows = []
    for player in session.drafted_players:
        round_num, pick_in_round = round_and_pick(player.draft_pick, session.num_teams)
        rows.append(
            {
                "draft_pick": player.draft_pick,
                "round": round_num,
                "pick_in_round": pick_in_round,
                "team_number": player.team_number,
                "name": player.name,
                "position": player.position,
                "team": player.team,
                "adp": player.adp,
                "projected_ppg": player.projected_ppg,
                "draft_grade": player.draft_grade,
            }
        )

    Path(output_file_path).parent.mkdir(parents=True, exist_ok=True)

    with open(output_file_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=DRAFT_BOARD_FIELDS)
        writer.writeheader()
        writer.writerows(rows)
