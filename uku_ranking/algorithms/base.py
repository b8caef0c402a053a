"""Base rating algorithm interface."""

from abc import ABC, abstractmethod
from typing import List

from uku_ranking.ingestion.settings import AlgorithmConfig
from uku_ranking.models import GameRecord, PreparedData, TeamRating, TeamSummary


class RatingAlgorithm(ABC):
    """
    Abstract base class for all rating algorithms.

    A rating run is always the same three stages: a rank difference per game,
    a weight per game, and a fit of team ratings to the weighted games.
    Algorithms differ only in how they implement the stages and hold no
    state between runs.
    """

    def __init__(self, name: str):
        """
        Initialize algorithm.

        Args:
            name: Name of the algorithm
        """
        self.name = name

    def get_ratings(self, data: PreparedData, config: AlgorithmConfig) -> List[TeamRating]:
        """
        Rate every team in a prepared dataset.

        Args:
            data: Prepared dataset for one division (not modified)
            config: Algorithm settings for the run

        Returns:
            One TeamRating per team in data.teams
        """
        ignore_blowouts = config.ignore_blowouts

        games_with_rank_diff = self.rank_diff(data.games)
        games_with_weights = self.game_weight(games_with_rank_diff)

        return self.rank_fit(data.teams, games_with_weights, data.team_summaries, ignore_blowouts)

    @abstractmethod
    def rank_diff(self, games: List[GameRecord]) -> List[GameRecord]:
        """
        Return copies of the games with ``rank_diff`` set.

        Args:
            games: Normalized games

        Returns:
            New list of games
        """
        pass

    @abstractmethod
    def game_weight(self, games: List[GameRecord]) -> List[GameRecord]:
        """
        Return copies of the games with ``weight`` set.

        Args:
            games: Games with rank_diff set

        Returns:
            New list of games
        """
        pass

    @abstractmethod
    def rank_fit(self, teams: List[str], games: List[GameRecord],
                 team_summaries: List[TeamSummary], ignore_blowouts: bool) -> List[TeamRating]:
        """
        Fit team ratings to the weighted games.

        Args:
            teams: Teams to rate
            games: Games with rank_diff and weight set
            team_summaries: Per-team statistics from data preparation
            ignore_blowouts: Whether blowout handling is switched on

        Returns:
            One TeamRating per team
        """
        pass
