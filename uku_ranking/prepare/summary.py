"""
Team Eligibility Summary

Per-team game statistics plus a binary eligibility verdict. A team is
eligible only when it meets all three thresholds: tournaments played,
games played and interconnectivity.
"""

from typing import List

from uku_ranking.config import (
    DEFAULT_MIN_GAMES,
    DEFAULT_MIN_INTERCONNECTIVITY,
    DEFAULT_MIN_TOURNAMENTS,
)
from uku_ranking.models import AdjacencyMatrix, GameRecord, TeamSummary
from uku_ranking.prepare.connectivity import connectivity, distance_matrix


def is_eligible(tournaments, games, interconnectivity, min_tournaments, min_games, min_interconnectivity) -> int:
    """Return 1 if every threshold is met, otherwise 0."""
    if tournaments >= min_tournaments and games >= min_games and interconnectivity >= min_interconnectivity:
        return 1
    return 0


def summarize_team(team: str, games: List[GameRecord], interconnectivity: int,
                   min_tournaments, min_games, min_interconnectivity) -> TeamSummary:
    """
    Build the summary for a single team.

    Args:
        team: Team name
        games: All normalized games (filtered to this team here)
        interconnectivity: The team's connectivity score
        min_tournaments, min_games, min_interconnectivity: Eligibility thresholds

    Returns:
        TeamSummary for the team
    """
    team_games = [g for g in games if g.team1 == team or g.team2 == team]
    played = len(team_games)

    tournaments = len({g.tournament for g in team_games})
    wins = sum(1 for g in team_games if g.team1 == team and g.score1 > g.score2)
    losses = sum(1 for g in team_games if g.team2 == team and g.score1 > g.score2)
    goals_for = sum(g.score1 if g.team1 == team else g.score2 for g in team_games)
    goals_against = sum(g.score2 if g.team1 == team else g.score1 for g in team_games)

    return TeamSummary(
        team=team,
        tournaments=tournaments,
        games=played,
        wins=wins,
        losses=losses,
        win_ratio=wins / played if played else 0,
        # Share of games lost, kept under its historical column name
        opponent_win_ratio=losses / played if played else 0,
        goals_for=goals_for,
        goals_against=goals_against,
        avg_point_diff=(goals_for - goals_against) / played if played else 0,
        component=1,
        interconnectivity=interconnectivity,
        eligible=is_eligible(tournaments, played, interconnectivity,
                             min_tournaments, min_games, min_interconnectivity),
    )


def summarize(
    games: List[GameRecord],
    teams: List[str],
    adjacency: AdjacencyMatrix,
    min_tournaments=DEFAULT_MIN_TOURNAMENTS,
    min_games=DEFAULT_MIN_GAMES,
    min_interconnectivity=DEFAULT_MIN_INTERCONNECTIVITY,
) -> List[TeamSummary]:
    """
    Summarize every team and decide its eligibility.

    Args:
        games: Normalized games
        teams: Teams to summarize (usually the teams in the games)
        adjacency: Games matrix over the teams
        min_tournaments: Minimum distinct tournaments played
        min_games: Minimum games played
        min_interconnectivity: Minimum connectivity score

    Returns:
        One TeamSummary per team, in the order of ``teams``
    """
    distances = distance_matrix(adjacency)
    return [
        summarize_team(
            team,
            games,
            connectivity(team, teams, adjacency, distances),
            min_tournaments,
            min_games,
            min_interconnectivity,
        )
        for team in teams
    ]
