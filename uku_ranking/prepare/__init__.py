"""
Data Preparation

Modules:
- aliases: Team alias resolution
- games: Game normalization
- connectivity: Tournament summaries, games matrix and interconnectivity
- summary: Team statistics and eligibility
- pipeline: Loads a division's tables and runs every step
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "prepare_data":
        from uku_ranking.prepare.pipeline import prepare_data
        return prepare_data
    if name == "normalize":
        from uku_ranking.prepare.games import normalize
        return normalize
    if name == "resolve_team":
        from uku_ranking.prepare.aliases import resolve_team
        return resolve_team
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
