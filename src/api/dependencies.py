"""
FastAPI dependency providers.

Pattern: Dependency injection via Depends() so tests can swap in fakes with
app.dependency_overrides.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, status

from src.clients.guidance_client import (
    GuidanceClientError,
    GuidanceClientProtocol,
    get_guidance_client,
)
from src.core.config import Settings, get_settings
from src.core.exceptions import CorpusNotReadyError
from src.corpus.loader import get_corpus
from src.corpus.models import Verse
from src.services.guidance import GuidanceOrchestrator


def get_loaded_corpus() -> tuple[Verse, ...]:
    """Corpus dependency; 503 until the lifespan handler has loaded it."""
    try:
        return get_corpus()
    except CorpusNotReadyError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e


def get_client() -> GuidanceClientProtocol:
    """Guidance client dependency; 503 until the lifespan handler opens it."""
    try:
        return get_guidance_client()
    except GuidanceClientError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e


def get_orchestrator(
    corpus: Annotated[tuple[Verse, ...], Depends(get_loaded_corpus)],
    client: Annotated[GuidanceClientProtocol, Depends(get_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> GuidanceOrchestrator:
    """Build the orchestrator for a request from the shared corpus and client."""
    return GuidanceOrchestrator(
        corpus=corpus,
        client=client,
        max_verses=settings.max_verses,
    )
