"""Keyword overlap retrieval over the verse corpus."""
from src.matching.relevance import (
    DEFAULT_LIMIT,
    ScoredMatch,
    fallback_verse,
    find_relevant_verses,
    score_verses,
    tokenize,
)

__all__ = [
    "DEFAULT_LIMIT",
    "ScoredMatch",
    "fallback_verse",
    "find_relevant_verses",
    "score_verses",
    "tokenize",
]
