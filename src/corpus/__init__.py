"""Verse corpus: immutable verse records and the JSON fixture loader."""
from src.corpus.loader import get_corpus, is_corpus_loaded, load_corpus, set_corpus
from src.corpus.models import GENERAL_KEYWORD, Verse

__all__ = [
    "GENERAL_KEYWORD",
    "Verse",
    "get_corpus",
    "is_corpus_loaded",
    "load_corpus",
    "set_corpus",
]
