"""
Central configuration for the UKU Ranking Engine.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"
INPUT_FOLDER = DATA_FOLDER / "raw"
OUTPUT_FOLDER = DATA_FOLDER / "processed"

# --- Dataset Configuration ---
DEFAULT_DATA_SET_NAME = "UKU"

# Divisions the games table is split into (Division column)
DIVISIONS = ("mixed", "open", "women")
ALLOWED_DIVISIONS = frozenset(DIVISIONS)

# --- Table Names ---
GAMES_TABLE = "games"
TEAMS_TABLE_PREFIX = "teams-"
TEAMS_AT_TOURNAMENTS_TABLE_PREFIX = "teams_at_tournaments-"
SETTINGS_TABLE = "settings"
TOURNAMENTS_TABLE = "tournaments"
RATINGS_HEADER = ["Team", "Rating"]

# Positional columns of the games table
# Tournament, Date, Team_1, Team_2, Score_1, Score_2, Division
GAMES_DIVISION_COLUMN = 6

# Dates in the games table are written day-first (DD/MM/YYYY)
DATE_DAYFIRST = True

# --- Algorithm Settings ---
IGNORE_BLOWOUTS_SETTING = "ignore_blowouts"
MIN_TOURNAMENTS_SETTING = "min_tournaments"
MIN_GAMES_SETTING = "min_games"
MIN_INTERCONNECTIVITY_SETTING = "min_interconnectivity"

# Only this exact value switches blowout handling on
SETTING_TRUE = "TRUE"

DEFAULT_MIN_TOURNAMENTS = 1
DEFAULT_MIN_GAMES = 5
DEFAULT_MIN_INTERCONNECTIVITY = 10
DEFAULT_TOURNAMENT_WEIGHTING = 1.0

# --- Game Normalization ---
# Suffix separator for teams not rostered at a tournament: "<team> @ <tournament>"
GUEST_SEPARATOR = " @ "
REMOVE_DRAWS = False

# --- Connectivity ---
MAX_PATH_DISTANCE = 3  # Distances beyond a shared opponent are not explored

# --- USAU Algorithm Configuration ---
DEFAULT_ALGORITHM = "usau"

# Rank-diff curve
RANK_DIFF_BASE = 125
RANK_DIFF_SPAN = 475

# Game weights
SCORE_WEIGHT_DIVISOR = 19
DATE_WEIGHT_START = 0.5  # w0
DATE_WEIGHT_FIRST_WEEK = 29
DATE_WEIGHT_LAST_WEEK = 42

# Rank fit
RANK_FIT_ITERATIONS = 1000
RATING_START = 0
ROUND_TO_DP = 2
MIN_VALID_GAMES = 5

# Blowouts: score1 > 2 * score2 + 1 between teams already this far apart
BLOWOUT_RATING_GAP = 600
