"""
Rating Algorithms

Modules:
- base: The RatingAlgorithm interface (rank diff, game weight, rank fit)
- usau: USA Ultimate style algorithm
"""

from uku_ranking.algorithms.base import RatingAlgorithm
from uku_ranking.algorithms.usau import USAUAlgorithm
from uku_ranking.utils import ConfigurationError

ALGORITHMS = {
    "usau": USAUAlgorithm,
}


def get_algorithm(name: str) -> RatingAlgorithm:
    """
    Create a rating algorithm by name.

    Args:
        name: Registered algorithm name (e.g. 'usau')

    Returns:
        RatingAlgorithm instance with default parameters

    Raises:
        ConfigurationError: If no algorithm is registered under the name
    """
    try:
        return ALGORITHMS[name.lower()]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown algorithm: '{name}'. Available: {', '.join(sorted(ALGORITHMS))}"
        ) from None


__all__ = ['ALGORITHMS', 'RatingAlgorithm', 'USAUAlgorithm', 'get_algorithm']
