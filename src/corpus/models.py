"""
Verse Corpus - Data Models.

A Verse is a single immutable record of the Bhagavad Gita. The JSON fixture
uses the field names of the original verse dataset:

    {
        "chapter_no": 2,
        "verse_no": 47,
        "sanskrit_verse": "...",
        "transliteration": "...",
        "english_translation": "...",
        "keywords": ["duty", "action", "karma"]
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from src.core.exceptions import CorpusLoadError

# =============================================================================
# Constants
# =============================================================================

GENERAL_KEYWORD: Final[str] = "general"

# Fixture field names
FIELD_CHAPTER: Final[str] = "chapter_no"
FIELD_VERSE: Final[str] = "verse_no"
FIELD_ORIGINAL: Final[str] = "sanskrit_verse"
FIELD_TRANSLITERATION: Final[str] = "transliteration"
FIELD_TRANSLATION: Final[str] = "english_translation"
FIELD_KEYWORDS: Final[str] = "keywords"

REQUIRED_FIELDS: Final[tuple[str, ...]] = (
    FIELD_CHAPTER,
    FIELD_VERSE,
    FIELD_ORIGINAL,
    FIELD_TRANSLITERATION,
    FIELD_TRANSLATION,
    FIELD_KEYWORDS,
)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Verse:
    """
    A single verse of the corpus.

    Attributes:
        chapter_number: Chapter (adhyaya), starting at 1.
        verse_number: Verse within the chapter, starting at 1.
        original_text: Sanskrit text in Devanagari.
        transliteration: Romanized Sanskrit.
        translation: English translation.
        keywords: Lowercase keywords used for relevance matching.
    """

    chapter_number: int
    verse_number: int
    original_text: str
    transliteration: str
    translation: str
    keywords: frozenset[str]

    @property
    def reference(self) -> str:
        """Chapter.verse reference, e.g. '2.47'."""
        return f"{self.chapter_number}.{self.verse_number}"

    @property
    def is_general(self) -> bool:
        """True when the verse carries the fallback sentinel keyword."""
        return GENERAL_KEYWORD in self.keywords

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Verse:
        """
        Build a Verse from one fixture record.

        Args:
            data: Mapping with the fixture field names.

        Returns:
            Verse with lowercased keywords.

        Raises:
            CorpusLoadError: If a field is missing or has the wrong shape.
        """
        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            raise CorpusLoadError(f"Verse record missing fields {missing}: {dict(data)}")

        chapter = data[FIELD_CHAPTER]
        verse = data[FIELD_VERSE]
        for name, value in ((FIELD_CHAPTER, chapter), (FIELD_VERSE, verse)):
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise CorpusLoadError(f"{name} must be a positive integer, got {value!r}")

        keywords = data[FIELD_KEYWORDS]
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise CorpusLoadError(
                f"{FIELD_KEYWORDS} must be a list of strings for verse {chapter}.{verse}"
            )

        return cls(
            chapter_number=chapter,
            verse_number=verse,
            original_text=str(data[FIELD_ORIGINAL]),
            transliteration=str(data[FIELD_TRANSLITERATION]),
            translation=str(data[FIELD_TRANSLATION]),
            keywords=frozenset(k.strip().lower() for k in keywords if k.strip()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the fixture format (keywords sorted)."""
        return {
            FIELD_CHAPTER: self.chapter_number,
            FIELD_VERSE: self.verse_number,
            FIELD_ORIGINAL: self.original_text,
            FIELD_TRANSLITERATION: self.transliteration,
            FIELD_TRANSLATION: self.translation,
            FIELD_KEYWORDS: sorted(self.keywords),
        }
