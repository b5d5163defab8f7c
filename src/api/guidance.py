"""
Guidance API Endpoint

POST /v1/guidance - Retrieve verses for a problem and generate guidance

Patterns Applied:
- FastAPI router pattern with Pydantic request/response models
- Dependency injection of the orchestrator (fakes in tests)
- Processing time tracking in the response

Error mapping:
- Blank problem or unsupported language: 422
- Corpus not loaded or empty: 503
- Generation service failure: 502
"""

from __future__ import annotations

import time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from src.api.dependencies import get_orchestrator
from src.api.schemas import VerseResponse
from src.clients.guidance_client import GuidanceClientError
from src.core.config import Settings, get_settings
from src.core.exceptions import InvalidCorpusError
from src.services.guidance import ERROR_PROBLEM_EMPTY, GuidanceOrchestrator

# =============================================================================
# Constants (S1192 compliance)
# =============================================================================

API_TAG = "guidance"
GUIDANCE_SUMMARY = "Seek guidance from the Bhagavad Gita for a problem"
HTTP_422_UNPROCESSABLE = 422
ERROR_LANGUAGE_UNSUPPORTED = "Unsupported language '{language}'. Supported: {supported}"


# =============================================================================
# Request/Response Models
# =============================================================================


class GuidanceRequest(BaseModel):
    """Request body for guidance."""

    problem: str = Field(
        ...,
        min_length=1,
        description="The problem or question the user is facing",
        examples=["I keep worrying about whether my work will succeed"],
    )
    language: str | None = Field(
        default=None,
        description="Response language; defaults to the configured default",
        examples=["English", "Hindi"],
    )

    @field_validator("problem")
    @classmethod
    def validate_problem_not_whitespace(cls, v: str) -> str:
        """Reject whitespace-only problems."""
        if not v.strip():
            raise ValueError(ERROR_PROBLEM_EMPTY)
        return v


class GuidanceResponse(BaseModel):
    """Guidance and the verses it is grounded on."""

    guidance: str
    language: str
    verses: list[VerseResponse]
    processing_time_ms: float = Field(ge=0)


# =============================================================================
# Router
# =============================================================================

guidance_router = APIRouter(prefix="/v1", tags=[API_TAG])


def _resolve_language(requested: str | None, settings: Settings) -> str:
    """Match the requested language case-insensitively against the supported list."""
    if requested is None:
        return settings.default_language
    for language in settings.supported_languages:
        if language.lower() == requested.strip().lower():
            return language
    raise HTTPException(
        status_code=HTTP_422_UNPROCESSABLE,
        detail=ERROR_LANGUAGE_UNSUPPORTED.format(
            language=requested,
            supported=", ".join(settings.supported_languages),
        ),
    )


@guidance_router.post(
    "/guidance",
    response_model=GuidanceResponse,
    summary=GUIDANCE_SUMMARY,
    responses={
        200: {"description": "Guidance generated"},
        422: {"description": "Blank problem or unsupported language"},
        502: {"description": "Generation service failed"},
        503: {"description": "Corpus or client not ready"},
    },
)
async def seek_guidance(
    request: GuidanceRequest,
    orchestrator: Annotated[GuidanceOrchestrator, Depends(get_orchestrator)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> GuidanceResponse:
    """Retrieve relevant verses and generate guidance in the chosen language."""
    start_time = time.perf_counter()
    language = _resolve_language(request.language, settings)

    try:
        result = await orchestrator.seek_guidance(request.problem, language)
    except InvalidCorpusError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e
    except GuidanceClientError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e

    return GuidanceResponse(
        guidance=result.guidance,
        language=result.language,
        verses=[VerseResponse.from_verse(v) for v in result.verses],
        processing_time_ms=(time.perf_counter() - start_time) * 1000,
    )
