"""
Shared utilities for the UKU Ranking Engine.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from uku_ranking.config import ALLOWED_DIVISIONS


class RankingError(Exception):
    """Base exception for ranking runs"""
    pass


class MissingTableError(RankingError):
    """Raised when a required input table cannot be found"""

    def __init__(self, table_name: str):
        super().__init__(f'Table named "{table_name}" not found.')
        self.table_name = table_name


class ConfigurationError(RankingError):
    """Raised for an invalid division or algorithm name"""
    pass


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


# --- File Operations ---
def atomic_write_csv(df, path: Path, **kwargs) -> None:
    """
    Write a DataFrame to CSV atomically using a temporary file.

    This prevents a half-written table if the write is interrupted.

    Args:
        df: pandas DataFrame to write
        path: Destination path for the CSV file
        **kwargs: Additional arguments to pass to df.to_csv()
    """
    logger = setup_logging(__name__)

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            delete=False,
            suffix='.csv',
            dir=path.parent  # Same filesystem for atomic move
        ) as tmp:
            tmp_path = Path(tmp.name)
        df.to_csv(tmp_path, **kwargs)

        shutil.move(str(tmp_path), str(path))
        logger.debug(f"Atomically wrote {len(df)} rows to {path}")

    except Exception:
        if 'tmp_path' in locals() and tmp_path.exists():
            tmp_path.unlink()
        raise


# --- Validation ---
def validate_division(division: str) -> None:
    """
    Validate that a division name is allowed.

    Args:
        division: Division name to validate

    Raises:
        ConfigurationError: If division is not in ALLOWED_DIVISIONS
    """
    if division not in ALLOWED_DIVISIONS:
        raise ConfigurationError(
            f"Invalid division: '{division}'. "
            f"Allowed values: {', '.join(sorted(ALLOWED_DIVISIONS))}"
        )


__all__ = [
    # Errors
    'RankingError',
    'MissingTableError',
    'ConfigurationError',
    # Logging
    'setup_logging',
    # File operations
    'atomic_write_csv',
    # Validation
    'validate_division',
]
