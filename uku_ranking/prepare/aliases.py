"""
Team alias resolution.

Teams can be recorded under several names across tournaments. The teams
table lists each canonical team name followed by any number of aliases:

    TeamName, Alias, Alias, ...

Any name that is not listed as an alias is already canonical.
"""

from typing import Dict, Iterable, List, Set

import pandas as pd

AliasTable = Dict[str, Set[str]]


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return str(value).strip() == ""


def build_alias_table(team_rows: Iterable[list]) -> AliasTable:
    """
    Build the canonical-name -> aliases mapping from teams table data rows.

    Args:
        team_rows: Rows without the header; first cell is the team name,
            remaining cells are aliases (blank cells are ignored)

    Returns:
        Dict mapping each canonical team name to its set of aliases
    """
    table: AliasTable = {}
    for row in team_rows:
        if not row or _is_blank(row[0]):
            continue
        aliases = table.setdefault(str(row[0]).strip(), set())
        aliases.update(str(alias).strip() for alias in row[1:] if not _is_blank(alias))
    return table


def team_names(team_rows: Iterable[list]) -> List[str]:
    """Canonical team names in teams table order."""
    return [str(row[0]).strip() for row in team_rows if row and not _is_blank(row[0])]


def resolve_team(name: str, alias_table: AliasTable) -> str:
    """
    Return the canonical name for a team.

    Entries are scanned in table order and the first one listing ``name`` as an
    alias wins. Unknown names are returned unchanged.
    """
    for canonical, aliases in alias_table.items():
        if name in aliases:
            return canonical
    return name
