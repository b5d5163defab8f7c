"""
Tests for the Relevance Matcher (keyword overlap retrieval).

Covers:
- TestTokenize: lowercase word-character runs, duplicates collapsed
- TestFallback: empty-token and no-overlap queries
- TestRanking: score order, stable ties, truncation
- TestResultShape: length bounds, no duplicates, determinism
- TestInvalidCorpus: empty corpus and bad limits
"""

from __future__ import annotations

import pytest

from src.core.exceptions import InvalidCorpusError
from src.corpus.models import Verse
from src.matching.relevance import (
    ScoredMatch,
    fallback_verse,
    find_relevant_verses,
    score_verses,
    tokenize,
)

# =============================================================================
# Constants
# =============================================================================

EMPTY_TOKEN_QUERIES = ["", "   ", "!!!", "\n\t", "?! ... --"]


# =============================================================================
# TestTokenize
# =============================================================================


class TestTokenize:
    """Tokenization of the query text."""

    def test_lowercases_tokens(self) -> None:
        assert tokenize("Anger AND Fear") == frozenset({"anger", "and", "fear"})

    def test_collapses_duplicates(self) -> None:
        assert tokenize("fear fear FEAR") == frozenset({"fear"})

    def test_splits_on_punctuation(self) -> None:
        assert tokenize("work-life, balance!") == frozenset({"work", "life", "balance"})

    def test_keeps_digits_and_underscores(self) -> None:
        assert tokenize("exam_2 in 2024") == frozenset({"exam_2", "in", "2024"})

    def test_apostrophe_splits_word(self) -> None:
        assert tokenize("I can't sleep") == frozenset({"i", "can", "t", "sleep"})

    def test_non_ascii_letters_are_not_word_characters(self) -> None:
        """Only [A-Za-z0-9_] form tokens."""
        assert tokenize("café") == frozenset({"caf"})

    @pytest.mark.parametrize("query", EMPTY_TOKEN_QUERIES)
    def test_no_word_characters_gives_empty_set(self, query: str) -> None:
        assert tokenize(query) == frozenset()


# =============================================================================
# TestFallback
# =============================================================================


class TestFallback:
    """Fallback to the first 'general' verse."""

    @pytest.mark.parametrize("query", EMPTY_TOKEN_QUERIES)
    def test_empty_token_query_returns_first_general_verse(
        self, query: str, sample_corpus: tuple[Verse, ...]
    ) -> None:
        result = find_relevant_verses(query, sample_corpus)

        assert result == [sample_corpus[1]]

    def test_no_overlap_equals_empty_token_fallback(
        self, sample_corpus: tuple[Verse, ...]
    ) -> None:
        no_overlap = find_relevant_verses("quantum chromodynamics", sample_corpus)
        empty = find_relevant_verses("", sample_corpus)

        assert no_overlap == empty
        assert len(no_overlap) == 1

    def test_fallback_without_general_verse_uses_first_verse(self, make_verse) -> None:
        corpus = (
            make_verse(1, 1, ["war"]),
            make_verse(1, 2, ["king"]),
        )

        assert find_relevant_verses("nothing here", corpus) == [corpus[0]]
        assert fallback_verse(corpus) is corpus[0]

    def test_general_keyword_itself_matches_like_any_keyword(
        self, sample_corpus: tuple[Verse, ...]
    ) -> None:
        """'general' in the query scores against both general verses."""
        result = find_relevant_verses("general", sample_corpus)

        assert result == [sample_corpus[1], sample_corpus[5]]

    def test_fallback_verse_empty_corpus_raises(self) -> None:
        with pytest.raises(InvalidCorpusError):
            fallback_verse(())


# =============================================================================
# TestRanking
# =============================================================================


class TestRanking:
    """Score ordering, tie-breaks and truncation."""

    def test_single_matching_verse(self, sample_corpus: tuple[Verse, ...]) -> None:
        result = find_relevant_verses("I feel so much grief", sample_corpus)

        assert result == [sample_corpus[0]]

    def test_higher_score_ranks_first(self, sample_corpus: tuple[Verse, ...]) -> None:
        """2.62 overlaps on anger+desire, 2.63 only on anger."""
        result = find_relevant_verses("my anger and desire", sample_corpus)

        assert result == [sample_corpus[2], sample_corpus[3]]

    def test_ties_keep_corpus_order(self, make_verse) -> None:
        v1 = make_verse(1, 1, ["a"])
        v2 = make_verse(1, 2, ["a"])

        assert find_relevant_verses("a", [v1, v2]) == [v1, v2]

    def test_ties_keep_corpus_order_when_reversed(self, make_verse) -> None:
        v1 = make_verse(1, 1, ["a"])
        v2 = make_verse(1, 2, ["a"])

        assert find_relevant_verses("a", [v2, v1]) == [v2, v1]

    def test_truncates_to_top_three_by_score(self, make_verse) -> None:
        words = ["a", "b", "c", "d", "e"]
        # Scores 1..5 in corpus order, so ranking reverses the corpus
        corpus = [make_verse(1, i + 1, words[: i + 1]) for i in range(5)]

        result = find_relevant_verses("a b c d e", corpus)

        assert result == [corpus[4], corpus[3], corpus[2]]

    def test_ties_beyond_limit_are_dropped(self, make_verse) -> None:
        corpus = [make_verse(1, i, ["peace"]) for i in range(1, 6)]

        result = find_relevant_verses("peace", corpus)

        assert result == corpus[:3]

    def test_custom_limit(self, sample_corpus: tuple[Verse, ...]) -> None:
        result = find_relevant_verses("anger anxiety", sample_corpus, limit=1)

        assert result == [sample_corpus[1]]

    def test_matching_is_case_insensitive(self, sample_corpus: tuple[Verse, ...]) -> None:
        assert find_relevant_verses("GRIEF", sample_corpus) == [sample_corpus[0]]

    def test_repeated_query_words_count_once(self, make_verse) -> None:
        once = make_verse(1, 1, ["fear"])
        twice = make_verse(1, 2, ["fear", "doubt"])

        result = find_relevant_verses("fear fear fear doubt", [once, twice])

        assert result == [twice, once]


# =============================================================================
# TestScoreVerses
# =============================================================================


class TestScoreVerses:
    """score_verses exposes the ranked matches with their scores."""

    def test_returns_scored_matches(self, sample_corpus: tuple[Verse, ...]) -> None:
        matches = score_verses("anger desire", sample_corpus)

        assert matches == [
            ScoredMatch(verse=sample_corpus[2], score=2),
            ScoredMatch(verse=sample_corpus[3], score=1),
        ]

    def test_no_match_returns_empty(self, sample_corpus: tuple[Verse, ...]) -> None:
        assert score_verses("xyz", sample_corpus) == []
        assert score_verses("", sample_corpus) == []

    def test_does_not_truncate(self, make_verse) -> None:
        corpus = [make_verse(1, i, ["peace"]) for i in range(1, 6)]

        assert len(score_verses("peace", corpus)) == 5


# =============================================================================
# TestResultShape
# =============================================================================


class TestResultShape:
    """Length bounds, uniqueness and determinism."""

    @pytest.mark.parametrize(
        "query",
        ["", "anxiety", "anger anxiety fear grief", "work results duty anxiety mind", "zzz"],
    )
    def test_length_between_one_and_three_without_duplicates(
        self, query: str, sample_corpus: tuple[Verse, ...]
    ) -> None:
        result = find_relevant_verses(query, sample_corpus)

        assert 1 <= len(result) <= 3
        assert len(set(result)) == len(result)

    def test_deterministic(self, sample_corpus: tuple[Verse, ...]) -> None:
        query = "anxiety about work and anger"

        first = find_relevant_verses(query, sample_corpus)
        second = find_relevant_verses(query, sample_corpus)

        assert first == second

    def test_returns_list_of_verses(self, sample_corpus: tuple[Verse, ...]) -> None:
        result = find_relevant_verses("fear", sample_corpus)

        assert isinstance(result, list)
        assert all(isinstance(v, Verse) for v in result)

    def test_does_not_mutate_corpus(self, make_verse) -> None:
        corpus = [make_verse(1, 1, ["a"]), make_verse(1, 2, ["a", "b"])]
        snapshot = list(corpus)

        find_relevant_verses("a b", corpus)

        assert corpus == snapshot


# =============================================================================
# TestInvalidCorpus
# =============================================================================


class TestInvalidCorpus:
    """Precondition violations."""

    @pytest.mark.parametrize("query", ["", "anger"])
    def test_empty_corpus_raises(self, query: str) -> None:
        with pytest.raises(InvalidCorpusError):
            find_relevant_verses(query, [])

    @pytest.mark.parametrize("limit", [0, -1])
    def test_limit_below_one_raises(
        self, limit: int, sample_corpus: tuple[Verse, ...]
    ) -> None:
        with pytest.raises(ValueError, match="limit"):
            find_relevant_verses("anger", sample_corpus, limit=limit)
