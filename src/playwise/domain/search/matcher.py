"""
Case-insensitive substring search and relevance scoring for catalog search.

Uses the Knuth-Morris-Pratt prefix function so a search over a title or
artist costs O(n + m) with no regex or library search involved. Matching
folds case per character, which keeps reported offsets aligned with the
original text.
"""

from typing import Any

from loguru import logger

from ...utils.records import get_field

# Relevance weights (title always outweighs artist)
EXACT_WEIGHTS = {"title": 60, "artist": 40}
PREFIX_WEIGHTS = {"title": 25, "artist": 15}
SUBSTRING_WEIGHTS = {"title": 15, "artist": 8}
REPEAT_BONUS = {"title": 2, "artist": 1}  # per extra occurrence
REPEAT_BONUS_CAP = {"title": 6, "artist": 3}
WORD_PREFIX_WEIGHTS = {"title": 5, "artist": 3}  # per matching word
WORD_PREFIX_CAP = {"title": 10, "artist": 6}

MAX_SCORE = 100


def _fold(value: str) -> list[str]:
    """Lower-case each character independently so indices stay stable."""
    return [ch.lower() for ch in value]


def build_failure_table(pattern: str) -> list[int]:
    """Build the KMP failure function (longest proper prefix that is also a suffix).

    Args:
        pattern: Pattern to preprocess

    Returns:
        List where entry i is the length of the longest proper border of pattern[:i + 1]

    Examples:
        build_failure_table("abab")  # [0, 0, 1, 2]
        build_failure_table("aaa")   # [0, 1, 2]
    """
    folded = _fold(pattern)
    failure = [0] * len(folded)
    j = 0

    for i in range(1, len(folded)):
        while j > 0 and folded[i] != folded[j]:
            j = failure[j - 1]
        if folded[i] == folded[j]:
            j += 1
        failure[i] = j

    return failure


def kmp_search(text: str, pattern: str) -> list[int]:
    """Find every start offset of pattern in text, ignoring case.

    Overlapping occurrences are reported.

    Args:
        text: Text to search in
        pattern: Pattern to search for

    Returns:
        Sorted list of start offsets (empty if pattern is empty or absent)

    Examples:
        kmp_search("banana", "ana")  # [1, 3]
        kmp_search("Hello", "HELLO")  # [0]
    """
    if not pattern or not text:
        return []

    folded_text = _fold(text)
    folded_pattern = _fold(pattern)
    failure = build_failure_table(pattern)
    m = len(folded_pattern)
    matches: list[int] = []
    j = 0

    for i, ch in enumerate(folded_text):
        while j > 0 and ch != folded_pattern[j]:
            j = failure[j - 1]
        if ch == folded_pattern[j]:
            j += 1
        if j == m:
            matches.append(i - m + 1)
            j = failure[j - 1]

    return matches


def kmp_match(text: str, pattern: str) -> bool:
    """Return True if pattern occurs anywhere in text (case-insensitive)."""
    return len(kmp_search(text, pattern)) > 0


def _starts_with(value: str, pattern: str) -> bool:
    offsets = kmp_search(value, pattern)
    return bool(offsets) and offsets[0] == 0


def _field_score(value: str, pattern: str, field: str) -> int:
    if not value:
        return 0

    offsets = kmp_search(value, pattern)
    if not offsets:
        return 0

    score = SUBSTRING_WEIGHTS[field]
    score += min(REPEAT_BONUS[field] * (len(offsets) - 1), REPEAT_BONUS_CAP[field])

    if offsets[0] == 0:
        score += PREFIX_WEIGHTS[field]
        if len(value) == len(pattern):
            score += EXACT_WEIGHTS[field]

    word_hits = sum(1 for word in value.split() if _starts_with(word, pattern))
    score += min(WORD_PREFIX_WEIGHTS[field] * word_hits, WORD_PREFIX_CAP[field])

    return score


def search_score(record: Any, pattern: str) -> int:
    """Score how well a track matches a search pattern.

    Combines exact full-string matches, prefix matches, substring matches
    (with a capped bonus for repeated occurrences) and per-word prefix
    matches, on both title and artist. Artist matches weigh less than title
    matches.

    Args:
        record: Track, object or dict exposing 'title' and 'artist'
        pattern: Search query

    Returns:
        Integer relevance from 0 (no match) to 100
    """
    if not pattern:
        return 0

    title = get_field(record, "title") or ""
    artist = get_field(record, "artist") or ""

    total = _field_score(title, pattern, "title") + _field_score(
        artist, pattern, "artist"
    )
    score = min(total, MAX_SCORE)
    logger.debug(f"search_score({pattern!r}) title={title!r} artist={artist!r} -> {score}")
    return score
