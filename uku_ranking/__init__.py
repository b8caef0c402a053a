"""
UKU Ranking Engine - Core Package

This package contains the core modules for:
- Data preparation: aliases, game normalization, connectivity (uku_ranking.prepare)
- Rating algorithms (uku_ranking.algorithms)
- Table store and settings loading (uku_ranking.ingestion)
- Shared configuration and utilities
"""

from uku_ranking.config import *
