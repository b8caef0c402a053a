"""
Data Preparation

Loads one division's tables from the store and turns them into the prepared
dataset used by the rating algorithms.

Tables:
- games: every game played (all divisions)
- teams-<division>: teams that play in the season and any aliases they have
- teams_at_tournaments-<division>: the teams rostered at each tournament.
  Games against unrostered teams (e.g. international teams) still count,
  but those teams are tagged and left out of qualified counts.
"""

from datetime import datetime
from typing import Optional

import pandas as pd

from uku_ranking.config import GAMES_TABLE, REMOVE_DRAWS, TEAMS_AT_TOURNAMENTS_TABLE_PREFIX, TEAMS_TABLE_PREFIX
from uku_ranking.ingestion.settings import AlgorithmConfig
from uku_ranking.models import PreparedData
from uku_ranking.prepare.aliases import build_alias_table, team_names
from uku_ranking.prepare.connectivity import build_adjacency, summarize_tournaments
from uku_ranking.prepare.games import (
    filter_division,
    normalize,
    teams_at_tournaments_from_rows,
    teams_in_games,
)
from uku_ranking.prepare.summary import summarize
from uku_ranking.utils import setup_logging, validate_division

# --- Module Logger ---
logger = setup_logging(__name__)


def teams_table_name(division: str) -> str:
    return TEAMS_TABLE_PREFIX + division


def teams_at_tournaments_table_name(division: str) -> str:
    return TEAMS_AT_TOURNAMENTS_TABLE_PREFIX + division


def prepare_data(
    store,
    config: AlgorithmConfig,
    division: str,
    remove_draws: bool = REMOVE_DRAWS,
    as_if_date: Optional[datetime] = None,
    write_diagnostics: bool = False,
) -> PreparedData:
    """
    Build the prepared dataset for one division.

    Args:
        store: Table store providing load_table/save_table
        config: Algorithm settings (eligibility thresholds)
        division: Division to prepare ('mixed', 'open' or 'women')
        remove_draws: Drop drawn games
        as_if_date: Prepare as if only games up to this date had been played
        write_diagnostics: Save intermediate tables back to the store

    Returns:
        PreparedData for the division

    Raises:
        MissingTableError: If the games, teams or teams-at-tournaments table is missing
        ConfigurationError: If the division is not recognised
    """
    validate_division(division)

    games_rows = store.load_table(GAMES_TABLE)
    teams_rows = store.load_table(teams_table_name(division))[1:]
    rosters_rows = store.load_table(teams_at_tournaments_table_name(division))[1:]

    division_rows = filter_division(games_rows, division)
    logger.info(f"Loaded {len(division_rows)} {division} games of {max(len(games_rows) - 1, 0)} total")

    alias_table = build_alias_table(teams_rows)
    teams = team_names(teams_rows)
    teams_at_tournaments = teams_at_tournaments_from_rows(rosters_rows, alias_table)

    games = normalize(division_rows, alias_table, teams_at_tournaments, remove_draws=remove_draws)
    logger.info(f"  {len(games)} games after normalization")

    if as_if_date is not None:
        games = [g for g in games if g.date is not None and g.date <= as_if_date]
        logger.info(f"  {len(games)} games on or before {as_if_date:%Y-%m-%d}")

    in_games = teams_in_games(games)
    tournament_summaries = summarize_tournaments(games)
    adjacency = build_adjacency(games, in_games)
    team_summaries = summarize(
        games,
        in_games,
        adjacency,
        config.min_tournaments,
        config.min_games,
        config.min_interconnectivity,
    )

    eligible = sum(s.eligible for s in team_summaries)
    logger.info(f"  {len(tournament_summaries)} tournaments, {len(in_games)} teams in games, {eligible} eligible")

    prepared = PreparedData(
        games=games,
        teams=teams,
        teams_at_tournaments=teams_at_tournaments,
        teams_in_games=in_games,
        tournament_summaries=tournament_summaries,
        adjacency=adjacency,
        team_summaries=team_summaries,
    )

    if write_diagnostics:
        write_diagnostic_tables(store, prepared, f"{config.data_set_name} ", f" {division}")

    return prepared


def _frame_rows(df: pd.DataFrame) -> list:
    return [list(df.columns)] + df.values.tolist()


def write_diagnostic_tables(store, prepared: PreparedData, prefix: str, suffix: str) -> None:
    """Save the intermediate tables of a preparation run for inspection."""
    games_df = pd.DataFrame(
        [g.to_row() for g in prepared.games],
        columns=['Tournament', 'Date', 'Team1', 'Team2', 'Score1', 'Score2'],
    )
    tournaments_df = pd.DataFrame(
        [[s.tournament, s.first_date, s.last_date, s.qualified_team_count, s.total_team_count, s.game_count]
         for s in prepared.tournament_summaries],
        columns=['Tournament', 'Date First', 'Date Last', 'Teams Count Qualified', 'Teams Count Total', 'Games Count'],
    )
    summary_df = pd.DataFrame(
        [[s.team, s.tournaments, s.games, s.wins, s.losses, s.win_ratio, s.opponent_win_ratio,
          s.goals_for, s.goals_against, s.avg_point_diff, s.component, s.interconnectivity, s.eligible]
         for s in prepared.team_summaries],
        columns=[
            'Team', 'Tournaments', 'Games', 'Wins', 'Losses', 'Win Ratio', 'Opp Win Ratio',
            'Goals For', 'Goals Against', 'Avg Point Diff', 'Component', 'Interconnectivity', 'Eligible',
        ],
    )

    store.save_table(f"{prefix}Processed Games{suffix}", _frame_rows(games_df))
    store.save_table(f"{prefix}Teams in Games{suffix}", [['Teams in Games']] + [[t] for t in prepared.teams_in_games])
    store.save_table(f"{prefix}Tournament Summaries{suffix}", _frame_rows(tournaments_df))
    store.save_table(f"{prefix}Games Matrix{suffix}", prepared.adjacency.to_rows())
    store.save_table(f"{prefix}Team Summary{suffix}", _frame_rows(summary_df))
    logger.debug(f"Wrote diagnostic tables{suffix}")
