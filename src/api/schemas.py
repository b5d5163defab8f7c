"""
Shared response models for verse-returning endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from src.corpus.models import Verse


class VerseResponse(BaseModel):
    """A verse as returned to API clients."""

    reference: str = Field(description="Chapter.verse reference, e.g. '2.47'")
    chapter_number: int = Field(ge=1)
    verse_number: int = Field(ge=1)
    original_text: str = Field(description="Sanskrit text")
    transliteration: str
    translation: str = Field(description="English translation")
    keywords: list[str] = Field(description="Matching keywords, sorted")
    score: int | None = Field(
        default=None,
        ge=0,
        description="Keyword overlap with the query (0 for the fallback verse)",
    )

    @classmethod
    def from_verse(cls, verse: Verse, score: int | None = None) -> VerseResponse:
        return cls(
            reference=verse.reference,
            chapter_number=verse.chapter_number,
            verse_number=verse.verse_number,
            original_text=verse.original_text,
            transliteration=verse.transliteration,
            translation=verse.translation,
            keywords=sorted(verse.keywords),
            score=score,
        )
