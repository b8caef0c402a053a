"""
Table Input/Output

Modules:
- tables: CSV-backed table store
- settings: Algorithm configuration from the settings tables
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "CsvTableStore":
        from uku_ranking.ingestion.tables import CsvTableStore
        return CsvTableStore
    if name == "AlgorithmConfig":
        from uku_ranking.ingestion.settings import AlgorithmConfig
        return AlgorithmConfig
    if name == "load_config":
        from uku_ranking.ingestion.settings import load_config
        return load_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
