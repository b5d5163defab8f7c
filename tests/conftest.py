"""
Shared fixtures: verse factory, a small ordered corpus, and reset of the
process-wide corpus/client installed by the lifespan handler.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from src.clients.guidance_client import set_guidance_client
from src.corpus.loader import set_corpus
from src.corpus.models import Verse

VerseFactory = Callable[..., Verse]


@pytest.fixture
def make_verse() -> VerseFactory:
    """Factory for Verse records with only the fields a test cares about."""

    def _make(chapter: int, verse: int, keywords: list[str]) -> Verse:
        return Verse(
            chapter_number=chapter,
            verse_number=verse,
            original_text=f"sanskrit {chapter}.{verse}",
            transliteration=f"transliteration {chapter}.{verse}",
            translation=f"translation {chapter}.{verse}",
            keywords=frozenset(keywords),
        )

    return _make


@pytest.fixture
def sample_corpus(make_verse: VerseFactory) -> tuple[Verse, ...]:
    """Ordered corpus; 2.47 is the first verse tagged 'general'."""
    return (
        make_verse(2, 11, ["grief", "loss", "death"]),
        make_verse(2, 47, ["general", "duty", "work", "results", "anxiety"]),
        make_verse(2, 62, ["anger", "desire", "attachment"]),
        make_verse(2, 63, ["anger", "confusion"]),
        make_verse(6, 35, ["mind", "restless", "anxiety"]),
        make_verse(18, 66, ["general", "surrender", "fear"]),
    )


@pytest.fixture(autouse=True)
def reset_process_state() -> Iterator[None]:
    """Keep the module-level corpus and client from leaking between tests."""
    yield
    set_corpus(None)
    set_guidance_client(None)
