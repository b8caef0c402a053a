"""
Tournament summaries and the games graph.

Teams are nodes and games are edges. Distances between teams are only
approximated: teams that played each other are 1 apart, teams that share a
common opponent are 2 apart, and everything further away is capped at 3.
A team's interconnectivity is the sum of its distances of 1 or 2, so many
direct and shared opponents give a higher score while repeated games against
the same few opponents give a low one.
"""

from datetime import datetime
from typing import Dict, List, Optional

import numpy as np

from uku_ranking.config import MAX_PATH_DISTANCE
from uku_ranking.models import AdjacencyMatrix, GameRecord, TournamentSummary
from uku_ranking.prepare.games import is_guest, teams_in_games


def summarize_tournaments(games: List[GameRecord], as_if_date: Optional[datetime] = None) -> List[TournamentSummary]:
    """
    Summarize each tournament in the order it first appears.

    Args:
        games: Normalized games
        as_if_date: Only consider games on or before this date

    Returns:
        One TournamentSummary per tournament
    """
    if as_if_date is not None:
        games = [g for g in games if g.date is not None and g.date <= as_if_date]

    grouped: Dict[str, List[GameRecord]] = {}
    for game in games:
        grouped.setdefault(game.tournament, []).append(game)

    summaries = []
    for tournament, tournament_games in grouped.items():
        teams = teams_in_games(tournament_games)
        qualified = [team for team in teams if not is_guest(team, tournament)]
        dates = [g.date for g in tournament_games if g.date is not None]
        summaries.append(TournamentSummary(
            tournament=tournament,
            first_date=min(dates) if dates else None,
            last_date=max(dates) if dates else None,
            qualified_team_count=len(qualified),
            total_team_count=len(teams),
            game_count=len(tournament_games),
        ))
    return summaries


def build_adjacency(games: List[GameRecord], teams: List[str]) -> AdjacencyMatrix:
    """
    Count head-to-head games between every pair of teams.

    Args:
        games: Normalized games
        teams: Teams indexing the matrix (games with other teams are skipped)

    Returns:
        Symmetric AdjacencyMatrix with a zero diagonal
    """
    index = {team: i for i, team in enumerate(teams)}
    counts = np.zeros((len(teams), len(teams)), dtype=int)
    for game in games:
        i = index.get(game.team1)
        j = index.get(game.team2)
        if i is None or j is None or i == j:
            continue
        counts[i, j] += 1
        counts[j, i] += 1
    return AdjacencyMatrix(teams=list(teams), counts=counts)


def distance_matrix(adjacency: AdjacencyMatrix) -> np.ndarray:
    """
    Approximate graph distance between every pair of teams.

    0 on the diagonal, 1 for teams that played each other, 2 for teams with
    a common opponent, and MAX_PATH_DISTANCE otherwise.
    """
    played = adjacency.counts > 0
    # Shared opponents: any u with played[i, u] and played[j, u]
    shared = (played.astype(int) @ played.astype(int).T) > 0

    distances = np.full(played.shape, MAX_PATH_DISTANCE, dtype=int)
    distances[shared] = 2
    distances[played] = 1
    np.fill_diagonal(distances, 0)
    return distances


def connectivity(team: str, teams: List[str], adjacency: AdjacencyMatrix,
                 distances: Optional[np.ndarray] = None) -> int:
    """
    Interconnectivity score for one team.

    Args:
        team: Team to score
        teams: Teams to measure the distance to
        adjacency: Games matrix
        distances: Precomputed distance_matrix(adjacency), if available

    Returns:
        Sum of the distances to other teams that are exactly 1 or 2
    """
    i = adjacency.index_of(team)
    if i is None:
        return 0
    if distances is None:
        distances = distance_matrix(adjacency)

    index = {name: k for k, name in enumerate(adjacency.teams)}
    score = 0
    for other in teams:
        j = index.get(other)
        if other == team or j is None:
            continue
        distance = int(distances[i, j])
        if 1 <= distance <= 2:
            score += distance
    return score
