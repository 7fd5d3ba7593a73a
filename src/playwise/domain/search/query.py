"""
Catalog query pipeline.

Composes the matcher and the sorter the way the catalog listing uses them:
genre filter, then either relevance-ranked search or a field sort, then
pagination.
"""

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional, Sequence

from loguru import logger

from ...utils.records import get_field
from .matcher import kmp_match, search_score
from .sorting import merge_sort

DEFAULT_SORT_KEY = "created_at"
DEFAULT_ORDER = "desc"


class ScoredTrack(NamedTuple):
    """A search hit paired with its relevance score."""

    track: Any
    score: int


@dataclass(frozen=True)
class CatalogPage:
    """One page of catalog results."""

    items: list[Any] = field(default_factory=list)
    total: int = 0  # Matching tracks before pagination
    limit: Optional[int] = None
    offset: int = 0
    scores: Optional[list[int]] = None  # Parallel to items when searching


def filter_by_genre(tracks: Sequence[Any], genre: Optional[str]) -> list[Any]:
    """Keep tracks whose genre equals the given one (case-insensitive)."""
    if not genre:
        return list(tracks)
    wanted = genre.lower()
    return [t for t in tracks if (get_field(t, "genre") or "").lower() == wanted]


def rank_search_results(tracks: Sequence[Any], query: str) -> list[ScoredTrack]:
    """Return tracks matching query in title or artist, best match first.

    Ties keep catalog order.
    """
    if not query:
        return []

    hits = [
        ScoredTrack(track, search_score(track, query))
        for track in tracks
        if kmp_match(get_field(track, "title") or "", query)
        or kmp_match(get_field(track, "artist") or "", query)
    ]
    return merge_sort(hits, "score", "desc")


def search_catalog(
    tracks: Sequence[Any],
    query: str = "",
    genre: Optional[str] = None,
    sort_by: str = DEFAULT_SORT_KEY,
    order: str = DEFAULT_ORDER,
    limit: Optional[int] = None,
    offset: int = 0,
) -> CatalogPage:
    """
    Filter, search or sort, and paginate a catalog snapshot.

    When a query is given, results are ordered by relevance and sort_by/order
    are ignored.

    Args:
        tracks: Catalog snapshot
        query: Search text matched against title and artist
        genre: Optional genre filter
        sort_by: Field to sort by when not searching
        order: 'asc' or 'desc'
        limit: Page size (None = everything after offset)
        offset: Number of results to skip

    Returns:
        CatalogPage with the requested slice and the unpaginated total
    """
    candidates = filter_by_genre(tracks, genre)
    offset = max(offset, 0)

    if query:
        ranked = rank_search_results(candidates, query)
        end = None if limit is None else offset + max(limit, 0)
        page = ranked[offset:end]
        logger.debug(
            f"Search {query!r}: {len(ranked)} hits of {len(candidates)} tracks"
        )
        return CatalogPage(
            items=[hit.track for hit in page],
            total=len(ranked),
            limit=limit,
            offset=offset,
            scores=[hit.score for hit in page],
        )

    ordered = merge_sort(candidates, sort_by, order)
    end = None if limit is None else offset + max(limit, 0)
    return CatalogPage(
        items=ordered[offset:end],
        total=len(ordered),
        limit=limit,
        offset=offset,
    )
