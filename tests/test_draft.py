"""Tests for the snake draft state machine."""

import logging
from typing import Callable

import pytest

from draft_assist.config import DraftConfig
from draft_assist.draft import (
    NO_CHANGES_MESSAGE,
    DraftSession,
    InvalidDraftError,
    make_greedy_pick,
    pick_label,
    round_and_pick,
    simulate_draft,
    team_for_pick,
)
from draft_assist.models import Player


class TestSnakeOrder:
    """Tests for pick-to-team arithmetic."""

    @pytest.mark.parametrize(
        "pick,team",
        [(1, 1), (12, 12), (13, 12), (24, 1), (25, 1), (36, 12)],
    )
    def test_team_for_pick_twelve_teams(self, pick: int, team: int) -> None:
        assert team_for_pick(pick, 12) == team

    def test_team_for_pick_four_teams(self) -> None:
        """Test snake order for a small draft (4 teams, 3 rounds)."""
        order = [team_for_pick(pick, 4) for pick in range(1, 13)]

        assert order == [1, 2, 3, 4, 4, 3, 2, 1, 1, 2, 3, 4]

    def test_round_and_pick(self) -> None:
        assert round_and_pick(1, 12) == (1, 1)
        assert round_and_pick(13, 12) == (2, 1)
        assert round_and_pick(24, 12) == (2, 12)
        assert pick_label(14, 12) == "R2.2"


class TestDraftPlayer:
    """Tests for drafting and pick progression."""

    def test_new_session_starts_at_pick_one(self, session: DraftSession) -> None:
        assert session.current_pick == 1
        assert session.team_on_clock == 1
        assert session.is_my_turn
        assert not session.drafted_players
        assert len(session.available_players) == 8

    def test_draft_assigns_team_and_pick(self, session: DraftSession) -> None:
        player = session.draft_player(3)

        assert player.drafted
        assert player.draft_pick == 1
        assert player.team_number == 1
        assert session.current_pick == 2
        assert session.team_on_clock == 2
        assert not session.is_my_turn

    def test_snake_turn_assignment(self, session: DraftSession) -> None:
        """Round two runs in reverse order."""
        for player_id in (3, 2, 1, 8, 4):
            session.draft_player(player_id)

        assert session.get_player(8).team_number == 4
        assert session.get_player(4).team_number == 4
        assert session.team_on_clock == 3

    def test_draft_picks_are_unique_and_dense(self, session: DraftSession) -> None:
        for player_id in (5, 7, 1, 3):
            session.draft_player(player_id)

        picks = [p.draft_pick for p in session.drafted_players]
        assert picks == [1, 2, 3, 4]
        assert session.current_pick == len(picks) + 1

    def test_drafting_twice_is_rejected(self, session: DraftSession) -> None:
        session.draft_player(3)

        with pytest.raises(InvalidDraftError):
            session.draft_player(3)
        assert session.current_pick == 2

    def test_drafting_unknown_player_is_rejected(self, session: DraftSession) -> None:
        with pytest.raises(InvalidDraftError):
            session.draft_player(999)
        assert session.current_pick == 1

    def test_available_players_sorted_by_adp(self, session: DraftSession) -> None:
        adps = [p.adp for p in session.available_players]

        assert adps == sorted(adps)

    def test_my_team(self, session: DraftSession) -> None:
        session.draft_player(3)
        session.draft_player(2)

        assert [p.name for p in session.my_team] == ["Charlie Receiver"]
        assert [p.name for p in session.team_roster(2)] == ["Bravo Runner"]


class TestNextPick:
    """Tests for my next pick and teams picking before it."""

    def test_next_pick_from_first_slot(self, session: DraftSession) -> None:
        assert session.my_next_pick == 8
        assert session.teams_picking_before_next_turn == [2, 3, 4, 4, 3, 2]

    def test_no_next_pick_at_last_pick(self, session: DraftSession) -> None:
        for player_id in (1, 2, 3, 4, 5, 6, 7):
            session.draft_player(player_id)

        assert session.current_pick == 8
        assert session.my_next_pick == -1
        assert session.teams_picking_before_next_turn == []

    def test_next_pick_mid_round(self, baseline: list[Player]) -> None:
        session = DraftSession(baseline, DraftConfig(num_teams=4, draft_position=3))

        assert session.my_next_pick == 3
        session.draft_player(1)
        session.draft_player(2)
        session.draft_player(3)
        assert session.my_next_pick == 6


class TestReset:
    """Tests for resetting a draft."""

    def test_reset_clears_draft_state(self, session: DraftSession) -> None:
        for player_id in (3, 2, 1):
            session.draft_player(player_id)

        session.reset()

        assert session.current_pick == 1
        assert all(not p.drafted for p in session.players)
        assert all(p.draft_pick is None and p.team_number is None for p in session.players)

    def test_reset_restores_baseline_valuation(self, session: DraftSession) -> None:
        before = [p.to_dict() for p in session.players]
        session.draft_player(3)

        session.reset()

        assert [p.to_dict() for p in session.players] == before

    def test_duplicate_baseline_ids_rejected(self, make_player: Callable[..., Player]) -> None:
        with pytest.raises(ValueError):
            DraftSession([make_player(id=1), make_player(id=1)])


class TestSync:
    """Tests for merging updates into the baseline."""

    def test_adp_change_is_logged(self, session: DraftSession) -> None:
        log = session.sync([{"id": 2, "adp": 4.0}])

        assert log == ["Bravo Runner: ADP 5 → 4"]
        assert session.get_player(2).adp == 4.0

    def test_projection_change_is_logged(self, session: DraftSession) -> None:
        log = session.sync(
            [{"id": 4, "notes": "Ankle sprain.", "concerns": ["Ankle sprain"]}]
        )

        assert log == [
            "Delta Tight End: Note updated",
            "Delta Tight End: Proj ↓ 11.5 → 11.2 PPG",
        ]

    def test_external_rank_change_is_logged(self, session: DraftSession) -> None:
        log = session.sync([{"id": 1, "external_rank": 8}])

        assert log == ["Alpha Quarterback: ESPN Rank 12 → 8"]

    def test_sync_resets_draft(self, session: DraftSession) -> None:
        session.draft_player(3)
        session.draft_player(2)

        session.sync([{"id": 2, "adp": 4.0}])

        assert session.current_pick == 1
        assert not session.drafted_players

    def test_reset_discards_synced_values(self, session: DraftSession) -> None:
        """Reset rebuilds from the static baseline, not the synced data."""
        session.sync([{"id": 2, "adp": 4.0}])
        session.reset()

        assert session.get_player(2).adp == 5.0
        assert session.baseline[1].adp == 5.0

    def test_second_sync_starts_from_baseline(self, session: DraftSession) -> None:
        """Fields merged by an earlier sync do not carry into the next one."""
        session.sync([{"id": 2, "adp": 4.0}])

        log = session.sync([{"id": 1, "external_rank": 8}])

        assert log == ["Alpha Quarterback: ESPN Rank 12 → 8"]
        assert session.get_player(2).adp == 5.0
        assert session.get_player(1).external_rank == 8

    def test_repeated_updates_in_one_batch_accumulate(self, session: DraftSession) -> None:
        session.sync([{"id": 2, "adp": 4.0}, {"id": 2, "external_rank": 3}])

        bravo = session.get_player(2)
        assert (bravo.adp, bravo.external_rank) == (4.0, 3)

    def test_mistyped_update_does_not_block_batch(
        self, session: DraftSession, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A wrongly typed field skips that update and the rest still apply."""
        with caplog.at_level(logging.WARNING):
            log = session.sync([{"id": 2, "adp": "early"}, {"id": 1, "external_rank": 8}])

        assert log == ["Alpha Quarterback: ESPN Rank 12 → 8"]
        assert session.get_player(2).adp == 5.0
        assert "Skipping malformed update for Bravo Runner" in caplog.text

    def test_session_recovers_after_bad_sync(self, session: DraftSession) -> None:
        session.sync(
            [
                {"id": 2, "adp": "early"},
                {"id": 3, "injury_risk": "Extreme"},
                {"id": 4, "stats": {"receptions": "many"}},
                {"id": [1], "adp": 1.0},
                "not an update",
            ]
        )
        session.reset()
        session.draft_player(3)

        assert session.current_pick == 2
        assert session.get_player(3).injury_risk == "Low"

    def test_unknown_id_is_skipped(
        self, session: DraftSession, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            log = session.sync([{"id": 42, "adp": 1.0}])

        assert log == [NO_CHANGES_MESSAGE]
        assert "unknown player id 42" in caplog.text

    def test_unchanged_values_report_no_changes(self, session: DraftSession) -> None:
        assert session.sync([{"id": 2, "adp": 5.0}]) == [NO_CHANGES_MESSAGE]
        assert session.sync([]) == [NO_CHANGES_MESSAGE]

    def test_malformed_update_is_skipped(self, session: DraftSession) -> None:
        log = session.sync([{"id": 2, "not_a_field": 1}, {"id": 3, "position": "QB"}])

        assert log == [NO_CHANGES_MESSAGE]
        assert session.get_player(3).position == "WR"

    def test_sync_reranks_pool(self, session: DraftSession) -> None:
        """A new supplied projection moves the player in the rankings."""
        session.sync(
            [
                {
                    "id": 5,
                    "projected_stats": {"rushing_yards": 1500, "rushing_tds": 15},
                    "projected_games": 15,
                }
            ]
        )

        rookie = session.get_player(5)
        assert rookie.projected_ppg == 16.0
        assert rookie.projection_rank == 2


class TestBoard:
    """Tests for filtering the available board."""

    def test_no_filter_is_available_players(self, session: DraftSession) -> None:
        assert session.board() == session.available_players

    def test_position_filter(self, session: DraftSession) -> None:
        assert [p.name for p in session.board("RB")] == ["Bravo Runner", "Echo Rookie"]

    def test_flex_filter(self, session: DraftSession) -> None:
        """FLEX covers RB, WR and TE in ADP order."""
        session.draft_player(3)

        assert [p.name for p in session.board("FLEX")] == [
            "Bravo Runner",
            "Hotel Receiver",
            "Delta Tight End",
            "Echo Rookie",
        ]

    def test_name_search_is_case_insensitive(self, session: DraftSession) -> None:
        assert [p.name for p in session.board(query="RECEIVER")] == [
            "Charlie Receiver",
            "Hotel Receiver",
        ]
        assert [p.name for p in session.board("WR", "hotel")] == ["Hotel Receiver"]
        assert session.board("QB", "hotel") == []


class TestSimulation:
    """Tests for greedy ADP drafting."""

    def test_greedy_pick_takes_lowest_adp(self, session: DraftSession) -> None:
        player = make_greedy_pick(session)

        assert player.name == "Charlie Receiver"

    def test_greedy_tie_break_on_projection(
        self, make_player: Callable[..., Player]
    ) -> None:
        weaker = make_player(
            "Weaker", adp=1.0, projected_stats={"receptions": 100}, projected_games=17
        )
        stronger = make_player(
            "Stronger", adp=1.0, projected_stats={"receptions": 200}, projected_games=17
        )
        session = DraftSession([weaker, stronger])

        assert make_greedy_pick(session).name == "Stronger"

    def test_simulate_full_draft(self, session: DraftSession) -> None:
        simulate_draft(session)

        assert session.is_complete
        assert session.current_pick == 9
        assert [p.name for p in session.my_team] == ["Charlie Receiver", "Golf Defense"]
        assert [p.name for p in session.team_roster(4)] == [
            "Hotel Receiver",
            "Delta Tight End",
        ]

    def test_simulate_stops_when_pool_is_empty(self, session: DraftSession) -> None:
        simulate_draft(session, rounds=3)

        assert session.current_pick == 9

    def test_greedy_pick_on_empty_pool(self, session: DraftSession) -> None:
        simulate_draft(session)

        with pytest.raises(InvalidDraftError):
            make_greedy_pick(session)

    def test_update_league(self, session: DraftSession) -> None:
        session.update_league(num_teams=10, draft_position=10)

        assert session.num_teams == 10
        assert session.draft_position == 10
        with pytest.raises(ValueError):
            session.update_league(num_teams=8, draft_position=9)
