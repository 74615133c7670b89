"""
Recommendations Module

Rule-table recommendation generation and product/lifestyle catalogs.
"""
from .engine import RecommendationEngine, dedupe_and_sort
from .catalog import ProductComparison, Season

__all__ = [
    "RecommendationEngine",
    "dedupe_and_sort",
    "ProductComparison",
    "Season",
]
