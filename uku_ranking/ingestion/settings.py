"""
Algorithm Configuration

Settings for a ranking run come from two tables:

    settings:     Name, Value          (e.g. ignore_blowouts, TRUE)
    tournaments:  Name, Weighting      (weighting defaults to 1)

Both are optional. Missing settings fall back to the defaults in
uku_ranking.config.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import pandas as pd

from uku_ranking.config import (
    DEFAULT_MIN_GAMES,
    DEFAULT_MIN_INTERCONNECTIVITY,
    DEFAULT_MIN_TOURNAMENTS,
    DEFAULT_TOURNAMENT_WEIGHTING,
    IGNORE_BLOWOUTS_SETTING,
    MIN_GAMES_SETTING,
    MIN_INTERCONNECTIVITY_SETTING,
    MIN_TOURNAMENTS_SETTING,
    SETTING_TRUE,
    SETTINGS_TABLE,
    TOURNAMENTS_TABLE,
)
from uku_ranking.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class BaseSetting:
    name: str
    value: Union[str, float]


@dataclass(frozen=True)
class TournamentSetting:
    name: str
    weighting: float


@dataclass(frozen=True)
class AlgorithmConfig:
    """Settings for one ranking run. Treated as read-only."""

    data_set_name: str
    algorithm_settings: List[BaseSetting] = field(default_factory=list)
    tournaments: List[TournamentSetting] = field(default_factory=list)

    def setting(self, name: str) -> Optional[Union[str, float]]:
        """Value of the first setting with this name, or None."""
        for s in self.algorithm_settings:
            if s.name == name:
                return s.value
        return None

    def numeric_setting(self, name: str, default: float) -> float:
        """Numeric value of a setting, or the default if missing or not a number."""
        value = self.setting(name)
        if value is None or str(value).strip() == "":
            return default
        number = pd.to_numeric(str(value).strip(), errors="coerce")
        if pd.isna(number):
            return default
        return float(number)

    @property
    def ignore_blowouts(self) -> bool:
        return self.setting(IGNORE_BLOWOUTS_SETTING) == SETTING_TRUE

    @property
    def min_tournaments(self) -> float:
        return self.numeric_setting(MIN_TOURNAMENTS_SETTING, DEFAULT_MIN_TOURNAMENTS)

    @property
    def min_games(self) -> float:
        return self.numeric_setting(MIN_GAMES_SETTING, DEFAULT_MIN_GAMES)

    @property
    def min_interconnectivity(self) -> float:
        return self.numeric_setting(MIN_INTERCONNECTIVITY_SETTING, DEFAULT_MIN_INTERCONNECTIVITY)

    @property
    def tournament_weights(self) -> Dict[str, float]:
        return {t.name: t.weighting for t in self.tournaments}


def settings_from_rows(rows: List[list]) -> List[BaseSetting]:
    """Parse Name, Value data rows, skipping rows without a name."""
    return [
        BaseSetting(name=str(row[0]).strip(), value=str(row[1]).strip() if len(row) > 1 else "")
        for row in rows
        if row and str(row[0]).strip()
    ]


def tournaments_from_rows(rows: List[list]) -> List[TournamentSetting]:
    """Parse Name, Weighting data rows; blank or invalid weightings become 1."""
    tournaments = []
    for row in rows:
        if not row or not str(row[0]).strip():
            continue
        cell = str(row[1]).strip() if len(row) > 1 else ""
        weighting = pd.to_numeric(cell, errors="coerce") if cell else None
        if weighting is None or pd.isna(weighting) or weighting == 0:
            weighting = DEFAULT_TOURNAMENT_WEIGHTING
        tournaments.append(TournamentSetting(name=str(row[0]).strip(), weighting=float(weighting)))
    return tournaments


def load_config(store, data_set_name: str) -> AlgorithmConfig:
    """
    Build the AlgorithmConfig for a data set from the store's settings tables.

    Args:
        store: Table store providing has_table/load_table
        data_set_name: Name used to label output tables

    Returns:
        AlgorithmConfig (with defaults for anything missing)
    """
    settings: List[BaseSetting] = []
    tournaments: List[TournamentSetting] = []

    if store.has_table(SETTINGS_TABLE):
        settings = settings_from_rows(store.load_table(SETTINGS_TABLE)[1:])
    else:
        logger.warning(f"No '{SETTINGS_TABLE}' table found, using default algorithm settings")

    if store.has_table(TOURNAMENTS_TABLE):
        tournaments = tournaments_from_rows(store.load_table(TOURNAMENTS_TABLE)[1:])
    else:
        logger.warning(f"No '{TOURNAMENTS_TABLE}' table found, all tournaments weighted equally")

    logger.info(f"Loaded {len(settings)} settings and {len(tournaments)} tournament weightings for {data_set_name}")
    return AlgorithmConfig(data_set_name=data_set_name, algorithm_settings=settings, tournaments=tournaments)
