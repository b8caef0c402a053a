"""
Game Normalization

Turns raw games table rows into the canonical game list used by every later
stage:

1. Resolve team aliases
2. Tag teams not rostered at the tournament as "<team> @ <tournament>"
3. Drop games without both scores (and optionally draws)
4. Reorder each game so team1 is the winner
5. Drop 1-0 forfeits
6. Sort by date, tournament, team1, team2

Malformed rows are dropped, never reported as errors.
"""

from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

import numpy as np
import pandas as pd

from uku_ranking.config import DATE_DAYFIRST, GAMES_DIVISION_COLUMN, GUEST_SEPARATOR, REMOVE_DRAWS
from uku_ranking.models import GameRecord, TeamAtTournament
from uku_ranking.prepare.aliases import AliasTable, resolve_team
from uku_ranking.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


# --- Cell Parsing ---
def _naive(value: datetime) -> datetime:
    """Drop the timezone, converting to UTC first so all dates compare."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date(value) -> Optional[datetime]:
    """Parse a date cell, returning None when it is blank or unparseable."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else _naive(value.to_pydatetime())
    if isinstance(value, datetime):
        return _naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if str(value).strip() == "":
        return None
    parsed = pd.to_datetime(str(value).strip(), errors="coerce", dayfirst=DATE_DAYFIRST)
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(None)
    return parsed.to_pydatetime()


def parse_score(value) -> Optional[int]:
    """Parse a score cell, returning None when it is blank, infinite or not a whole number."""
    if value is None or isinstance(value, bool):
        return None
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number) or not np.isfinite(number) or number != int(number):
        return None
    return int(number)


def guest_name(team: str, tournament: str) -> str:
    return f"{team}{GUEST_SEPARATOR}{tournament}"


def is_guest(team: str, tournament: str) -> bool:
    return team.endswith(f"{GUEST_SEPARATOR}{tournament}")


# --- Row Conversion ---
def filter_division(games_rows: List[list], division: str) -> List[list]:
    """
    Keep the data rows of the games table that belong to one division.

    Args:
        games_rows: Full games table including the header row
        division: Division name matched against the Division column

    Returns:
        Data rows for the division (header removed)
    """
    return [
        row for row in games_rows[1:]
        if len(row) > GAMES_DIVISION_COLUMN and str(row[GAMES_DIVISION_COLUMN]).strip() == division
    ]


def games_from_rows(rows: Iterable[list], alias_table: AliasTable) -> List[GameRecord]:
    """
    Convert raw rows (Tournament, Date, Team_1, Team_2, Score_1, Score_2, ...)
    into game records with aliases resolved.
    """
    games = []
    for row in rows:
        if len(row) < 6:
            continue
        games.append(GameRecord(
            tournament=str(row[0]).strip(),
            date=parse_date(row[1]),
            team1=resolve_team(str(row[2]).strip(), alias_table),
            team2=resolve_team(str(row[3]).strip(), alias_table),
            score1=parse_score(row[4]),
            score2=parse_score(row[5]),
        ))
    return games


def teams_at_tournaments_from_rows(rows: Iterable[list], alias_table: AliasTable) -> List[TeamAtTournament]:
    """Convert Team, Tournament rows into roster facts with aliases resolved."""
    return [
        TeamAtTournament(team=resolve_team(str(row[0]).strip(), alias_table), tournament=str(row[1]).strip())
        for row in rows
        if len(row) >= 2
    ]


# --- Normalization Steps ---
def tag_guests(games: List[GameRecord], teams_at_tournaments: Iterable[TeamAtTournament]) -> List[GameRecord]:
    """
    Rename teams that are not on a tournament's roster to "<team> @ <tournament>".

    Their games still count towards the graph, but they are excluded from
    the tournament's qualified team count. A tournament with no roster rows
    tags every participant.
    """
    rosters: Dict[str, Set[str]] = {}
    for entry in teams_at_tournaments:
        rosters.setdefault(entry.tournament, set()).add(entry.team)

    tagged = []
    for game in games:
        roster = rosters.get(game.tournament, set())
        team1 = game.team1 if game.team1 in roster else guest_name(game.team1, game.tournament)
        team2 = game.team2 if game.team2 in roster else guest_name(game.team2, game.tournament)
        tagged.append(GameRecord(
            tournament=game.tournament,
            date=game.date,
            team1=team1,
            team2=team2,
            score1=game.score1,
            score2=game.score2,
        ))
    return tagged


def _is_forfeit(game: GameRecord) -> bool:
    return (game.score1, game.score2) in ((1, 0), (0, 1))


def _sort_key(game: GameRecord):
    return (game.date or datetime.min, game.tournament, game.team1, game.team2)


def process_games(games: List[GameRecord], remove_draws: bool = REMOVE_DRAWS) -> List[GameRecord]:
    """
    Filter, reorder and sort games.

    Args:
        games: Alias-resolved, guest-tagged games
        remove_draws: Drop games with equal scores

    Returns:
        New list of games with score1 >= score2, sorted by
        (date, tournament, team1, team2)
    """
    scored = [g for g in games if g.score1 is not None and g.score2 is not None]
    logger.debug(f"Dropped {len(games) - len(scored)} games without scores")

    if remove_draws:
        decided = [g for g in scored if g.score1 != g.score2]
        logger.debug(f"Dropped {len(scored) - len(decided)} drawn games")
        scored = decided

    ordered = []
    for game in scored:
        if game.score2 > game.score1:
            game = GameRecord(
                tournament=game.tournament,
                date=game.date,
                team1=game.team2,
                team2=game.team1,
                score1=game.score2,
                score2=game.score1,
            )
        ordered.append(game)

    played = [g for g in ordered if not _is_forfeit(g)]
    logger.debug(f"Dropped {len(ordered) - len(played)} forfeits")

    return sorted(played, key=_sort_key)


def normalize(
    raw_games: Iterable[list],
    alias_table: AliasTable,
    teams_at_tournaments: Iterable[TeamAtTournament],
    remove_draws: bool = REMOVE_DRAWS,
) -> List[GameRecord]:
    """
    Run the full normalization over raw game rows.

    Args:
        raw_games: Data rows of the games table for one division
        alias_table: Canonical team name -> aliases
        teams_at_tournaments: Alias-resolved roster facts
        remove_draws: Drop games with equal scores

    Returns:
        Canonical, sorted game list
    """
    games = games_from_rows(raw_games, alias_table)
    games = tag_guests(games, teams_at_tournaments)
    return process_games(games, remove_draws=remove_draws)


def teams_in_games(games: Iterable[GameRecord], as_if_date: Optional[datetime] = None) -> List[str]:
    """
    Distinct team names appearing in games, in first-appearance order.

    Args:
        games: Normalized games
        as_if_date: Only consider games on or before this date

    Returns:
        List of team names
    """
    if as_if_date is not None:
        games = [g for g in games if g.date is not None and g.date <= as_if_date]
    seen: Dict[str, None] = {}
    for game in games:
        seen.setdefault(game.team1, None)
        seen.setdefault(game.team2, None)
    return list(seen)
