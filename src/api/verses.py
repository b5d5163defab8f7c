"""
Verse Matching API Endpoint

POST /v1/verses/match - Retrieval only: rank verses for a query without
calling the generation service.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.api.dependencies import get_loaded_corpus
from src.api.schemas import VerseResponse
from src.core.exceptions import InvalidCorpusError
from src.corpus.models import Verse
from src.matching.relevance import DEFAULT_LIMIT, fallback_verse, score_verses

# =============================================================================
# Module Constants (S1192 compliance)
# =============================================================================

API_TAG: str = "verses"
MIN_LIMIT: int = 1
MAX_LIMIT: int = 10


# =============================================================================
# Request/Response Models
# =============================================================================


class MatchRequest(BaseModel):
    """Request body for the verse matching endpoint."""

    query: str = Field(
        ...,
        description="Free-text problem statement",
        examples=["I am anxious about the results of my exams"],
    )
    limit: int = Field(
        default=DEFAULT_LIMIT,
        ge=MIN_LIMIT,
        le=MAX_LIMIT,
        description="Maximum number of verses to return",
    )


class MatchResponse(BaseModel):
    """Ranked verses for a query."""

    verses: list[VerseResponse]
    fallback: bool = Field(
        description="True when nothing matched and the general verse was returned"
    )


# =============================================================================
# Router
# =============================================================================

verses_router = APIRouter(prefix="/v1/verses", tags=[API_TAG])


@verses_router.post("/match", response_model=MatchResponse)
async def match_verses(
    request: MatchRequest,
    corpus: Annotated[tuple[Verse, ...], Depends(get_loaded_corpus)],
) -> MatchResponse:
    """Rank verses by keyword overlap with the query.

    Example:
        POST /v1/verses/match
        {"query": "anger and desire", "limit": 2}

        Response:
        {
            "verses": [{"reference": "2.62", "score": 2, ...}, ...],
            "fallback": false
        }
    """
    try:
        matches = score_verses(request.query, corpus)
        if not matches:
            verse = fallback_verse(corpus)
            return MatchResponse(
                verses=[VerseResponse.from_verse(verse, score=0)],
                fallback=True,
            )
    except InvalidCorpusError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    return MatchResponse(
        verses=[
            VerseResponse.from_verse(m.verse, score=m.score)
            for m in matches[: request.limit]
        ],
        fallback=False,
    )
