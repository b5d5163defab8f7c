"""
Relevance Matcher - keyword overlap retrieval.

Maps a free-text problem statement to a small ranked subset of the corpus.
Pure and synchronous: no I/O, no logging, no shared state. Safe to call from
any number of concurrent requests against the same corpus.

Algorithm:
1. Tokenize the query (lowercase, maximal runs of [A-Za-z0-9_]) into a set.
2. Score each verse by |tokens & verse.keywords|; keep scores above zero.
3. Stable sort by score descending, so equal scores keep corpus order.
4. Return the top `limit` verses.

When the query has no tokens or nothing overlaps, the result is the single
fallback verse: the first verse tagged "general", else the first verse.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from src.core.exceptions import InvalidCorpusError
from src.corpus.models import Verse

# =============================================================================
# Constants
# =============================================================================

DEFAULT_LIMIT: Final[int] = 3

# re.ASCII keeps \w equal to [A-Za-z0-9_]
_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"\w+", re.ASCII)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True, slots=True)
class ScoredMatch:
    """A verse paired with its keyword overlap count."""

    verse: Verse
    score: int


# =============================================================================
# Functions
# =============================================================================


def tokenize(text: str) -> frozenset[str]:
    """Lowercase text and collect its word-character runs into a set."""
    return frozenset(_TOKEN_PATTERN.findall(text.lower()))


def fallback_verse(corpus: Sequence[Verse]) -> Verse:
    """
    Return the verse used when nothing matches.

    Raises:
        InvalidCorpusError: If the corpus is empty.
    """
    if not corpus:
        raise InvalidCorpusError("Cannot select a verse from an empty corpus")
    for verse in corpus:
        if verse.is_general:
            return verse
    return corpus[0]


def score_verses(query: str, corpus: Sequence[Verse]) -> list[ScoredMatch]:
    """
    Score every verse against the query and rank the positive matches.

    Args:
        query: Free-text problem statement.
        corpus: Verses in corpus order.

    Returns:
        Matches with score > 0, highest score first, ties in corpus order.
        Empty when the query has no tokens or overlaps no keywords.
    """
    tokens = tokenize(query)
    if not tokens:
        return []

    matches = [
        ScoredMatch(verse=verse, score=len(tokens & verse.keywords))
        for verse in corpus
    ]
    matches = [m for m in matches if m.score > 0]
    # list.sort is stable
    matches.sort(key=lambda m: m.score, reverse=True)
    return matches


def find_relevant_verses(
    query: str,
    corpus: Sequence[Verse],
    limit: int = DEFAULT_LIMIT,
) -> list[Verse]:
    """
    Find the verses most relevant to a problem statement.

    Args:
        query: Free-text problem statement. Empty or punctuation-only
            queries are answered with the fallback verse.
        corpus: Verses in corpus order.
        limit: Maximum number of verses to return.

    Returns:
        Between 1 and `limit` distinct verses, best match first.

    Raises:
        InvalidCorpusError: If the corpus is empty.
        ValueError: If limit is less than 1.

    Example:
        >>> find_relevant_verses("I am anxious about my duty", corpus)
        [Verse(chapter_number=2, verse_number=47, ...)]
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")
    if not corpus:
        raise InvalidCorpusError("Cannot match verses against an empty corpus")

    matches = score_verses(query, corpus)
    if not matches:
        return [fallback_verse(corpus)]

    return [m.verse for m in matches[:limit]]
