"""Record types shared by data preparation and the rating algorithms."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import numpy as np


@dataclass
class GameRecord:
    """A single game result. After normalization team1 is never the loser."""

    tournament: str
    date: Optional[datetime]
    team1: str
    team2: str
    score1: Optional[int]
    score2: Optional[int]
    rank_diff: Optional[float] = None
    weight: Optional[float] = None

    def to_row(self) -> list:
        return [self.tournament, self.date, self.team1, self.team2, self.score1, self.score2]


@dataclass(frozen=True)
class TeamAtTournament:
    """A team listed on the roster table of a tournament."""

    team: str
    tournament: str


@dataclass
class TournamentSummary:
    tournament: str
    first_date: Optional[datetime]
    last_date: Optional[datetime]
    qualified_team_count: int
    total_team_count: int
    game_count: int


@dataclass
class TeamSummary:
    """Per-team game statistics and the eligibility verdict."""

    team: str
    tournaments: int
    games: int
    wins: int
    losses: int
    win_ratio: float
    opponent_win_ratio: float
    goals_for: int
    goals_against: int
    avg_point_diff: float
    component: int
    interconnectivity: int
    eligible: int


@dataclass
class AdjacencyMatrix:
    """
    Head-to-head game counts between every pair of teams.

    ``counts[i][j]`` is the number of games between ``teams[i]`` and
    ``teams[j]``; the matrix is symmetric with a zero diagonal.
    """

    teams: List[str]
    counts: np.ndarray

    def index_of(self, team: str) -> Optional[int]:
        try:
            return self.teams.index(team)
        except ValueError:
            return None

    def to_rows(self) -> List[list]:
        """Header row of team names followed by one labelled row per team."""
        rows = [["Team", *self.teams]]
        for team, row in zip(self.teams, self.counts):
            rows.append([team, *(int(count) for count in row)])
        return rows


@dataclass(frozen=True)
class TeamRating:
    team: str
    rating: float


@dataclass
class PreparedData:
    """Everything one division's rating run needs, produced by prepare_data."""

    games: List[GameRecord]
    teams: List[str]
    teams_at_tournaments: List[TeamAtTournament]
    teams_in_games: List[str]
    tournament_summaries: List[TournamentSummary]
    adjacency: AdjacencyMatrix
    team_summaries: List[TeamSummary] = field(default_factory=list)
