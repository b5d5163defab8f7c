"""
Verse Corpus - Fixture Loader.

The corpus is loaded once at startup (FastAPI lifespan) and held as an
immutable tuple for the lifetime of the process. Request handlers reach it
through get_corpus(), which FastAPI routes use as a dependency.
"""

from __future__ import annotations

import json
from pathlib import Path

from src.core.exceptions import CorpusLoadError, CorpusNotReadyError
from src.core.logging import get_logger
from src.corpus.models import Verse

logger = get_logger(__name__)

# Loaded corpus, set by the lifespan handler
_corpus: tuple[Verse, ...] | None = None


def load_corpus(corpus_path: Path) -> tuple[Verse, ...]:
    """
    Load the verse corpus from a JSON fixture.

    The file must contain a JSON array of verse records (see
    src.corpus.models). Record order is preserved; it decides tie-breaks
    and the fallback verse.

    Args:
        corpus_path: Path to the JSON fixture.

    Returns:
        Tuple of verses in file order.

    Raises:
        CorpusLoadError: If the file is missing, is not valid JSON, is not
            an array, or contains a malformed record.
    """
    if not corpus_path.exists():
        raise CorpusLoadError(f"Verse corpus file not found: {corpus_path}")

    try:
        with corpus_path.open("r", encoding="utf-8") as f:
            raw_data = json.load(f)
    except json.JSONDecodeError as e:
        raise CorpusLoadError(f"Invalid JSON in verse corpus {corpus_path}: {e}") from e

    if not isinstance(raw_data, list):
        raise CorpusLoadError(
            f"Verse corpus must be a JSON array, got {type(raw_data).__name__}"
        )

    verses: list[Verse] = []
    for index, record in enumerate(raw_data):
        if not isinstance(record, dict):
            raise CorpusLoadError(f"Verse record {index} is not an object: {record!r}")
        verses.append(Verse.from_dict(record))

    if verses and not any(v.is_general for v in verses):
        # Matcher still works: it falls back to the first verse
        logger.warning("corpus_missing_general_verse", path=str(corpus_path))

    logger.info("corpus_loaded", path=str(corpus_path), verse_count=len(verses))
    return tuple(verses)


def set_corpus(corpus: tuple[Verse, ...] | None) -> None:
    """Install the process-wide corpus. Called by the lifespan handler."""
    global _corpus
    _corpus = corpus


def get_corpus() -> tuple[Verse, ...]:
    """
    Get the loaded corpus.

    Pattern: Dependency injection per FastAPI patterns

    Raises:
        CorpusNotReadyError: If the corpus has not been loaded yet.
    """
    if _corpus is None:
        raise CorpusNotReadyError("Verse corpus has not been loaded")
    return _corpus


def is_corpus_loaded() -> bool:
    """True once set_corpus() has installed a corpus."""
    return _corpus is not None
