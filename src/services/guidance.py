"""
Guidance Orchestrator.

Retrieval-augmented generation for one problem statement:
1. Retrieval: keyword overlap matcher picks up to `max_verses` verses
2. Generation: the guidance client turns problem + verses into guidance

Generation errors are logged and re-raised unchanged; retries belong to the
client, not to this orchestrator.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from src.clients.guidance_client import (
    DEFAULT_LANGUAGE,
    GuidanceClientError,
    GuidanceClientProtocol,
)
from src.core.logging import get_logger
from src.core.tracing import get_tracer
from src.corpus.models import Verse
from src.matching.relevance import DEFAULT_LIMIT, find_relevant_verses

logger = get_logger(__name__)
tracer = get_tracer(__name__)

ERROR_PROBLEM_EMPTY = "Problem statement cannot be empty or whitespace"


@dataclass(frozen=True, slots=True)
class GuidanceResult:
    """Guidance together with the verses it was grounded on."""

    guidance: str
    verses: tuple[Verse, ...]
    language: str


class GuidanceOrchestrator:
    """Runs verse retrieval then guidance generation.

    Holds no per-request state, so one instance serves concurrent requests.

    Usage:
        orchestrator = GuidanceOrchestrator(corpus=corpus, client=client)
        result = await orchestrator.seek_guidance("I fear failure", "Hindi")
    """

    def __init__(
        self,
        corpus: Sequence[Verse],
        client: GuidanceClientProtocol,
        max_verses: int = DEFAULT_LIMIT,
    ) -> None:
        self._corpus = corpus
        self._client = client
        self._max_verses = max_verses

    def retrieve(self, problem: str) -> list[Verse]:
        """Retrieval stage only."""
        with tracer.start_as_current_span("verse_retrieval") as span:
            verses = find_relevant_verses(problem, self._corpus, limit=self._max_verses)
            span.set_attribute("verse.count", len(verses))
            return verses

    async def seek_guidance(
        self,
        problem: str,
        language: str = DEFAULT_LANGUAGE,
    ) -> GuidanceResult:
        """Retrieve verses for a problem and generate guidance from them.

        Args:
            problem: The user's problem statement
            language: Language the guidance should be written in

        Returns:
            GuidanceResult with guidance text and the source verses

        Raises:
            ValueError: If the problem is blank
            InvalidCorpusError: If the corpus is empty
            GuidanceClientError: If generation fails
        """
        if not problem.strip():
            raise ValueError(ERROR_PROBLEM_EMPTY)

        verses = self.retrieve(problem)
        references = [v.reference for v in verses]
        logger.info("guidance_requested", verses=references, language=language)

        with tracer.start_as_current_span("guidance_generation") as span:
            span.set_attribute("guidance.language", language)
            try:
                generated = await self._client.generate_guidance(problem, verses, language)
            except GuidanceClientError as e:
                logger.error(
                    "guidance_failed",
                    verses=references,
                    error=str(e),
                    status_code=e.status_code,
                )
                raise

        logger.info(
            "guidance_generated",
            verses=references,
            model=generated.model,
            tokens_used=generated.tokens_used,
        )
        return GuidanceResult(
            guidance=generated.text,
            verses=tuple(verses),
            language=language,
        )
