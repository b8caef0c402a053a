"""
Table Store

The rating engine reads and writes plain tables: a header row followed by
data rows, with columns addressed by position. This module stores each
table as ``<name>.csv`` in a folder.

Usage:
    from uku_ranking.ingestion.tables import CsvTableStore
    store = CsvTableStore(INPUT_FOLDER, OUTPUT_FOLDER)
    rows = store.load_table("games")
    store.save_table("UKU Ratings mixed", [["Team", "Rating"], ["A", 12.5]])
"""

import csv
from pathlib import Path
from typing import List, Optional

import pandas as pd

from uku_ranking.utils import MissingTableError, atomic_write_csv, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class CsvTableStore:
    """Tables kept as CSV files, one file per table name."""

    def __init__(self, folder: Path, output_folder: Optional[Path] = None):
        """
        Args:
            folder: Folder tables are loaded from
            output_folder: Folder tables are saved to (default: folder)
        """
        self.folder = Path(folder)
        self.output_folder = Path(output_folder) if output_folder else self.folder

    def path_for(self, name: str, output: bool = False) -> Path:
        return (self.output_folder if output else self.folder) / f"{name}.csv"

    def has_table(self, name: str) -> bool:
        return self.path_for(name).exists()

    def load_table(self, name: str) -> List[list]:
        """
        Load a table as a list of rows, header row included.

        Rows may have different lengths (e.g. a variable number of aliases);
        every row is padded with empty strings to the widest row.

        Raises:
            MissingTableError: If no file exists for the table
        """
        path = self.path_for(name)
        if not path.exists():
            raise MissingTableError(name)

        # Widest logical row; quoted cells may span lines
        with open(path, encoding="utf-8", newline="") as f:
            width = max((len(row) for row in csv.reader(f) if row), default=0)
        if width == 0:
            return []

        df = pd.read_csv(
            path,
            header=None,
            names=range(width),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        ).fillna("")
        rows = [[str(cell).strip() for cell in row] for row in df.values.tolist()]
        logger.debug(f"Loaded {len(rows)} rows from {path}")
        return rows

    def save_table(self, name: str, rows: List[list]) -> Path:
        """
        Save a table, replacing any existing one.

        Args:
            name: Table name
            rows: Header row followed by data rows

        Returns:
            Path of the written file
        """
        path = self.path_for(name, output=True)
        header, data = (rows[0], rows[1:]) if rows else ([], [])
        df = pd.DataFrame(data, columns=header)
        atomic_write_csv(df, path, index=False)
        logger.debug(f"Saved table {name} ({len(data)} rows) to {path}")
        return path
