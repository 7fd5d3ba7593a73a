"""
Search domain module.

Provides KMP substring search with relevance scoring, a stable merge sort
and the catalog query pipeline built from them.
"""

from .matcher import build_failure_table, kmp_match, kmp_search, search_score
from .query import (
    CatalogPage,
    ScoredTrack,
    filter_by_genre,
    rank_search_results,
    search_catalog,
)
from .sorting import compare_values, merge_sort

__all__ = [
    # Matcher
    "build_failure_table",
    "kmp_search",
    "kmp_match",
    "search_score",
    # Sorting
    "compare_values",
    "merge_sort",
    # Query pipeline
    "CatalogPage",
    "ScoredTrack",
    "filter_by_genre",
    "rank_search_results",
    "search_catalog",
]
