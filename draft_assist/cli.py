"""Command-line interface for the draft assistant."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from draft_assist.analytics import analyze_team
from draft_assist.config import (
    FLEX,
    LEAGUE_SIZES,
    NUM_TEAMS,
    POSITIONS,
    TOTAL_ROUNDS,
    DraftConfig,
)
from draft_assist.data_io import (
    load_player_records,
    load_sync_updates,
    save_draft_board_csv,
    save_rankings_csv,
)
from draft_assist.draft import DraftSession, make_greedy_pick, pick_label, simulate_draft
from draft_assist.insights import player_outlook, tier_drops, value_board
from draft_assist.recommendation import DraftAdvisor, LocalRecommender

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "players_2025.json"
BOARD_SIZE = 10


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    RESET = "\033[0m"


class ColoredFormatter(logging.Formatter):
    """Formatter with colors and emojis for different log levels."""

    LEVEL_COLORS = {
        "DEBUG": Colors.BLUE,
        "INFO": "",
        "WARNING": Colors.YELLOW,
        "ERROR": Colors.RED,
        "CRITICAL": Colors.RED,
    }

    LEVEL_EMOJIS = {
        "DEBUG": "🔍 ",
        "INFO": "",
        "WARNING": "⚠️  ",
        "ERROR": "❌ ",
        "CRITICAL": "💥 ",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and emojis."""
        level_color = self.LEVEL_COLORS.get(record.levelname, "")
        level_emoji = self.LEVEL_EMOJIS.get(record.levelname, "")

        message = record.getMessage()
        if level_color:
            return f"{level_emoji}{level_color}{message}{Colors.RESET}"
        return f"{level_emoji}{message}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application with colors and emojis.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColoredFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()  # Remove any existing handlers
    root_logger.addHandler(handler)


def load_session(data_file: str, num_teams: int, draft_position: int, rounds: int) -> DraftSession:
    """Load baseline records and open a draft session, exiting on bad input."""
    try:
        config = DraftConfig(
            num_teams=num_teams, draft_position=draft_position, rounds=rounds
        )
        return DraftSession(load_player_records(data_file), config)
    except (OSError, ValueError) as e:
        logger.error(f"Could not start draft: {e}")
        sys.exit(1)


data_file_option = click.option(
    "--data-file",
    type=click.Path(exists=True, dir_okay=False),
    default=str(DEFAULT_DATA_FILE),
    show_default=True,
    help="JSON file with baseline player records",
)
num_teams_option = click.option(
    "--num-teams",
    type=click.Choice([str(n) for n in LEAGUE_SIZES]),
    default=str(NUM_TEAMS),
    show_default=True,
    help="Number of teams in the draft",
)
draft_position_option = click.option(
    "--draft-position",
    type=int,
    default=1,
    show_default=True,
    help="Your draft slot (1-based)",
)
rounds_option = click.option(
    "--rounds",
    type=int,
    default=TOTAL_ROUNDS,
    show_default=True,
    help="Rounds in the draft",
)
verbose_option = click.option(
    "--verbose", is_flag=True, help="Enable verbose (DEBUG level) logging"
)


@click.group()
def cli() -> None:
    """Fantasy football draft assistant."""


@cli.command()
@data_file_option
@click.option("--top", type=int, default=25, show_default=True, help="Players to show")
@click.option("--output", type=click.Path(dir_okay=False), help="Write full rankings to CSV")
@verbose_option
def rankings(data_file: str, top: int, output: str | None, verbose: bool) -> None:
    """Show players ranked by projected points per game."""
    setup_logging(verbose)
    session = load_session(data_file, NUM_TEAMS, 1, TOTAL_ROUNDS)

    ranked = sorted(session.players, key=lambda p: p.projection_rank)
    for player in ranked[:top]:
        click.echo(
            f"{player.projection_rank:>3}. {player.name:<24} {player.position:<3} "
            f"{player.team:<4} {player.projected_ppg:>6.2f} PPG  "
            f"grade {player.draft_grade}"
        )

    if output:
        save_rankings_csv(output, session.players)
        logger.info(f"Rankings saved to {output}")


@cli.command()
@data_file_option
@num_teams_option
@draft_position_option
@rounds_option
@click.option("--output", type=click.Path(dir_okay=False), help="Write the draft board to CSV")
@verbose_option
def mock(
    data_file: str,
    num_teams: str,
    draft_position: int,
    rounds: int,
    output: str | None,
    verbose: bool,
) -> None:
    """Run a greedy ADP mock draft and grade your team."""
    setup_logging(verbose)
    session = load_session(data_file, int(num_teams), draft_position, rounds)
    simulate_draft(session)

    click.echo(f"Team {session.draft_position} roster:")
    for player in session.my_team:
        click.echo(
            f"  {pick_label(player.draft_pick, session.num_teams):<7} "
            f"{player.name:<24} {player.position:<3} {player.projected_ppg:>6.2f} PPG"
        )

    analytics = analyze_team(session.players, session.draft_position, session.num_teams)
    summary = analytics.team_summary
    click.echo(f"Grade {summary.grade}: {summary.title}")
    click.echo(summary.summary)
    for advantage in analytics.positional_advantages:
        click.echo(
            f"  {advantage.position:<3} {advantage.your_ppg:>6.2f} PPG "
            f"(league {advantage.league_average_ppg:.2f}, rank {advantage.rank})"
        )
    for insight in summary.insights:
        click.echo(f"  - {insight}")

    if output:
        save_draft_board_csv(output, session)
        logger.info(f"Draft board saved to {output}")


@cli.command()
@data_file_option
@click.argument("updates_file", type=click.Path(exists=True, dir_okay=False))
@verbose_option
def sync(data_file: str, updates_file: str, verbose: bool) -> None:
    """Apply partial player updates and print what changed."""
    setup_logging(verbose)
    session = load_session(data_file, NUM_TEAMS, 1, TOTAL_ROUNDS)

    try:
        updates = load_sync_updates(updates_file)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read updates: {e}")
        sys.exit(1)

    for line in session.sync(updates):
        click.echo(line)


@cli.command()
@data_file_option
@num_teams_option
@draft_position_option
@rounds_option
@click.option(
    "--picks-made",
    type=int,
    default=0,
    show_default=True,
    help="Greedy picks to make before asking for advice",
)
@click.option(
    "--position",
    type=click.Choice(list(POSITIONS) + [FLEX]),
    help="Only show this position on the board (FLEX = RB/WR/TE)",
)
@click.option("--search", help="Only show players whose name contains this text")
@verbose_option
def advise(
    data_file: str,
    num_teams: str,
    draft_position: int,
    rounds: int,
    picks_made: int,
    position: str | None,
    search: str | None,
    verbose: bool,
) -> None:
    """Recommend a pick after a number of greedy ADP picks."""
    setup_logging(verbose)
    session = load_session(data_file, int(num_teams), draft_position, rounds)

    for _ in range(min(picks_made, len(session.players))):
        make_greedy_pick(session)

    advisor = DraftAdvisor(LocalRecommender())
    analysis = asyncio.run(advisor.advise(session))

    click.echo(
        f"Pick {session.current_pick} "
        f"({pick_label(session.current_pick, session.num_teams)}), "
        f"team {session.team_on_clock} on the clock"
    )
    click.echo(f"Recommended: {analysis.primary.name}")
    click.echo(f"  {analysis.primary.reasoning}")
    for alternative in analysis.alternatives:
        click.echo(f"Alternative: {alternative.name} - {alternative.reasoning}")
    if analysis.predictions:
        click.echo(f"Likely gone before your next pick: {', '.join(analysis.predictions)}")
    split = ", ".join(f"{pos} {pct}%" for pos, pct in analysis.positional_analysis.items())
    click.echo(f"Positional focus: {split}")
    click.echo(analysis.strategic_narrative)

    available = session.available_players
    for player, margin in value_board(available):
        click.echo(f"Value: {player.name} ({player.position}) +{margin:g} vs ADP")
    for drop in tier_drops(available):
        names = ", ".join(p.name for p in drop.players)
        click.echo(f"Tier drop: {drop.position} tier {drop.tier} down to {names}")

    board = session.board(position, search)
    click.echo(f"Board ({len(board)} available):")
    for player in board[:BOARD_SIZE]:
        adp = f"{player.adp:g}" if player.adp is not None else "N/A"
        click.echo(
            f"  {player.name:<24} {player.position:<3} ADP {adp:>5}  "
            f"{player.projected_ppg:>6.2f} PPG"
        )


@cli.command()
@data_file_option
@click.argument("player_name")
@verbose_option
def outlook(data_file: str, player_name: str, verbose: bool) -> None:
    """Show the outlook for a single player."""
    setup_logging(verbose)
    session = load_session(data_file, NUM_TEAMS, 1, TOTAL_ROUNDS)

    matches = [p for p in session.players if p.name.lower() == player_name.lower()]
    if not matches:
        logger.error(f"No player named {player_name}")
        sys.exit(1)

    result = player_outlook(matches[0])
    click.echo(result.summary)
    click.echo(f"Upside: {result.upside}")
    click.echo(f"Downside: {result.downside}")
    click.echo(f"Verdict: {result.verdict}")
    click.echo(f"Risk/reward: {result.risk_reward_score}/10")
    click.echo(f"Consensus: {result.expert_consensus}")


if __name__ == "__main__":
    cli()
