"""
UKU Ranking Run

Prepares each division's data, rates every team with the configured
algorithm and saves one "<data set> Ratings <division>" table per division.

Usage:
    python -m uku_ranking.ranking [DATA_SET_NAME]
    OR
    from uku_ranking.ranking import run_rankings
"""

import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from uku_ranking.algorithms import RatingAlgorithm, get_algorithm
from uku_ranking.config import (
    DEFAULT_ALGORITHM,
    DEFAULT_DATA_SET_NAME,
    DIVISIONS,
    INPUT_FOLDER,
    OUTPUT_FOLDER,
    RATINGS_HEADER,
)
from uku_ranking.ingestion.settings import AlgorithmConfig, load_config
from uku_ranking.ingestion.tables import CsvTableStore
from uku_ranking.models import PreparedData, TeamRating
from uku_ranking.prepare.pipeline import prepare_data
from uku_ranking.utils import RankingError, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def ratings_table_name(data_set_name: str, division: str) -> str:
    return f"{data_set_name} Ratings {division}"


def calculate_rankings(
    store,
    config: AlgorithmConfig,
    prepared: PreparedData,
    division: str,
    algorithm: Optional[RatingAlgorithm] = None,
) -> List[TeamRating]:
    """
    Rate one division and save the ratings table.

    Args:
        store: Table store the ratings are saved to
        config: Algorithm settings
        prepared: Prepared data for the division
        division: Division name (used in the table name)
        algorithm: Algorithm to use (default: the USAU algorithm)

    Returns:
        List of TeamRating in team table order
    """
    algorithm = algorithm or get_algorithm(DEFAULT_ALGORITHM)
    logger.info(f"Calculating {division} ratings with the '{algorithm.name}' algorithm")

    ratings = algorithm.get_ratings(prepared, config)

    rows = [RATINGS_HEADER] + [[r.team, r.rating] for r in ratings]
    store.save_table(ratings_table_name(config.data_set_name, division), rows)

    if ratings:
        ratings_df = pd.DataFrame(rows[1:], columns=RATINGS_HEADER)
        top = ratings_df.sort_values('Rating', ascending=False).head(20)
        logger.info(f"Top {len(top)} teams by rating ({division}):")
        logger.info("\n" + top.to_string(index=False))

    return ratings


def run_rankings(
    store,
    data_set_name: str = DEFAULT_DATA_SET_NAME,
    divisions: Iterable[str] = DIVISIONS,
    algorithm_name: str = DEFAULT_ALGORITHM,
    write_diagnostics: bool = False,
) -> Dict[str, List[TeamRating]]:
    """
    Prepare and rate every requested division.

    All divisions are prepared before any is rated, so a missing table
    aborts the run before any ratings are written.

    Args:
        store: Table store for inputs and outputs
        data_set_name: Label for output tables
        divisions: Divisions to rate
        algorithm_name: Registered algorithm name
        write_diagnostics: Also save the intermediate preparation tables

    Returns:
        Dict of division -> ratings
    """
    algorithm = get_algorithm(algorithm_name)
    config = load_config(store, data_set_name)

    prepared = {}
    for division in divisions:
        logger.info("=" * 60)
        logger.info(f"Preparing {division} data")
        logger.info("=" * 60)
        prepared[division] = prepare_data(store, config, division, write_diagnostics=write_diagnostics)

    results = {}
    for division, data in prepared.items():
        results[division] = calculate_rankings(store, config, data, division, algorithm)
    return results


def main(data_set_name: Optional[str] = None, folder: Path = INPUT_FOLDER, output_folder: Path = OUTPUT_FOLDER):
    """CLI entry point: rate all divisions of a data set."""
    if data_set_name is None:
        data_set_name = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_DATA_SET_NAME

    logger.info(f"Running ranking algorithm on: {data_set_name}")
    store = CsvTableStore(folder, output_folder)

    try:
        results = run_rankings(store, data_set_name)
    except RankingError as e:
        logger.error(f"Ranking run failed: {e}")
        sys.exit(1)

    for division, ratings in results.items():
        logger.info(f"  {division}: {len(ratings)} teams rated, saved to "
                    f"{store.path_for(ratings_table_name(data_set_name, division), output=True)}")
    return results


if __name__ == "__main__":
    main()
