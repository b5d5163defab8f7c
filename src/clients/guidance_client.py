"""Guidance Client - LLM guidance generation.

HTTP client for an OpenAI-compatible chat completions API. Given the user's
problem, the retrieved verses and a response language, it asks the model for
compassionate guidance grounded in those verses.

Patterns Applied:
- Anti-Pattern #12: Connection pooling (reuse httpx.AsyncClient)
- Anti-Pattern #2.3: Retry with exponential backoff
- Anti-Pattern #7/#13: Custom namespaced exceptions
- Protocol-based fakes for tests (FakeGuidanceClient)
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Final, Protocol, runtime_checkable

import httpx

from src.core.logging import get_logger
from src.corpus.models import Verse

logger = get_logger(__name__)

# =============================================================================
# Module Constants (S1192 compliance)
# =============================================================================

DEFAULT_BASE_URL: Final[str] = "https://api.openai.com"
DEFAULT_MODEL: Final[str] = "gpt-4o-mini"
DEFAULT_TIMEOUT: Final[float] = 60.0
DEFAULT_MAX_RETRIES: Final[int] = 2
DEFAULT_RETRY_DELAY: Final[float] = 1.0
DEFAULT_MAX_TOKENS: Final[int] = 1024
DEFAULT_TEMPERATURE: Final[float] = 0.7
DEFAULT_LANGUAGE: Final[str] = "English"

ENDPOINT_CHAT: Final[str] = "/v1/chat/completions"

ERROR_MALFORMED_RESPONSE: Final[str] = "Generation service returned a malformed response"

SYSTEM_PROMPT: Final[str] = """You are a wise and compassionate guide steeped in the Bhagavad Gita.
A person has shared a problem they are facing. Offer gentle, practical guidance grounded
only in the verses provided. Refer to verses by their chapter.verse reference.
Do not claim the verses say anything they do not. Do not give medical, legal or
financial advice; encourage seeking professional help where appropriate."""

GUIDANCE_PROMPT_TEMPLATE: Final[str] = """Problem:
{problem}

Relevant verses from the Bhagavad Gita:
{verses}

Write your guidance in {language}. Start with a short acknowledgement of the
person's situation, explain how the verses speak to it, and close with one or
two concrete steps they can take today."""

VERSE_TEMPLATE: Final[str] = """Chapter {reference}
Transliteration: {transliteration}
Translation: {translation}"""

_THINK_BLOCK = re.compile(r"<think>.*?</think>\s*", re.DOTALL)
_THINK_UNCLOSED = re.compile(r"<think>.*$", re.DOTALL)


# =============================================================================
# Custom Exceptions (Anti-Pattern #7/#13: Namespaced)
# =============================================================================


class GuidanceClientError(Exception):
    """Base exception for GuidanceClient errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class GuidanceTimeoutError(GuidanceClientError):
    """Raised when the guidance request times out."""

    pass


class GuidanceConnectionError(GuidanceClientError):
    """Raised when unable to connect to the generation service."""

    pass


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True, slots=True)
class GuidanceText:
    """Guidance produced by the generation service."""

    text: str
    model: str
    tokens_used: int = 0


# =============================================================================
# Prompt Construction
# =============================================================================


def format_verses(verses: Sequence[Verse]) -> str:
    """Render verses as the context block of the prompt."""
    return "\n\n".join(
        VERSE_TEMPLATE.format(
            reference=verse.reference,
            transliteration=verse.transliteration,
            translation=verse.translation,
        )
        for verse in verses
    )


def build_messages(
    problem: str,
    verses: Sequence[Verse],
    language: str = DEFAULT_LANGUAGE,
) -> list[dict[str, str]]:
    """Build the chat messages for a guidance request.

    Args:
        problem: The user's problem statement
        verses: Verses retrieved for the problem
        language: Language the guidance should be written in

    Returns:
        OpenAI-compatible message list (system + user)
    """
    prompt = GUIDANCE_PROMPT_TEMPLATE.format(
        problem=problem.strip(),
        verses=format_verses(verses),
        language=language,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class GuidanceClientProtocol(Protocol):
    """Protocol for guidance generators.

    Enables dependency injection and test doubles.
    """

    async def generate_guidance(
        self,
        problem: str,
        verses: Sequence[Verse],
        language: str = DEFAULT_LANGUAGE,
    ) -> GuidanceText:
        """Generate guidance for a problem from the given verses."""
        ...


# =============================================================================
# GuidanceClient Implementation
# =============================================================================


class GuidanceClient:
    """HTTP client for an OpenAI-compatible generation service.

    Uses connection pooling (Anti-Pattern #12) and exponential backoff retry.
    Must be entered as an async context manager before use.

    Attributes:
        base_url: Base URL of the generation service
        api_key: Bearer token, omitted from requests when None
        model: Model ID to use for generation
        timeout: Request timeout in seconds
        max_retries: Maximum retry attempts on timeout or 5xx
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self._retry_delay = DEFAULT_RETRY_DELAY

        # Connection pooling: single client instance (Anti-Pattern #12)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GuidanceClient:
        """Async context manager entry."""
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers=headers,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def generate_guidance(
        self,
        problem: str,
        verses: Sequence[Verse],
        language: str = DEFAULT_LANGUAGE,
    ) -> GuidanceText:
        """Generate guidance for the problem from the retrieved verses.

        Args:
            problem: The user's problem statement
            verses: Verses retrieved for the problem
            language: Language the guidance should be written in

        Returns:
            GuidanceText with the generated guidance

        Raises:
            GuidanceClientError: On API errors, a malformed or empty completion
            GuidanceTimeoutError: On timeout after all retries
            GuidanceConnectionError: On connection failure or a dropped connection
        """
        if self._client is None:
            raise GuidanceClientError("Client not initialized. Use async context manager.")

        payload = {
            "model": self.model,
            "messages": build_messages(problem, verses, language),
            "max_tokens": DEFAULT_MAX_TOKENS,
            "temperature": DEFAULT_TEMPERATURE,
        }

        for attempt in range(self.max_retries + 1):
            try:
                response = await self._client.post(ENDPOINT_CHAT, json=payload)
                response.raise_for_status()
                return self._decode_response(response)

            except httpx.TimeoutException as e:
                if attempt == self.max_retries:
                    raise GuidanceTimeoutError(
                        f"Timeout after {self.max_retries + 1} attempts: {e}"
                    ) from e
                logger.warning("guidance_retry", attempt=attempt + 1, reason="timeout")
                await asyncio.sleep(self._retry_delay * (2 ** attempt))

            except httpx.ConnectError as e:
                raise GuidanceConnectionError(
                    f"Failed to connect to generation service at {self.base_url}: {e}"
                ) from e

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code >= 500 and attempt < self.max_retries:
                    logger.warning(
                        "guidance_retry", attempt=attempt + 1, status_code=status_code
                    )
                    await asyncio.sleep(self._retry_delay * (2 ** attempt))
                    continue
                raise GuidanceClientError(
                    f"Generation service error: {e}",
                    status_code=status_code,
                ) from e

            except httpx.TransportError as e:
                # Connection dropped mid-request (ReadError, RemoteProtocolError, ...)
                raise GuidanceConnectionError(
                    f"Connection to generation service at {self.base_url} failed: {e}"
                ) from e

        # Should not reach here
        raise GuidanceClientError("Unexpected error in retry loop")

    def _decode_response(self, response: httpx.Response) -> GuidanceText:
        """Decode and parse a successful response.

        Raises:
            GuidanceClientError: If the body is not JSON or not shaped like a completion
        """
        try:
            return self._parse_response(response.json())
        except (ValueError, AttributeError, TypeError, KeyError) as e:
            raise GuidanceClientError(ERROR_MALFORMED_RESPONSE) from e

    def _parse_response(self, data: dict[str, Any]) -> GuidanceText:
        """Parse a chat completions response.

        Raises:
            GuidanceClientError: If the response carries no guidance text
        """
        choices = data.get("choices") or []
        content = ""
        if choices:
            content = (choices[0].get("message") or {}).get("content") or ""
        content = self._strip_think_tags(content)

        if not content:
            raise GuidanceClientError("Generation service returned an empty response")

        usage = data.get("usage") or {}
        return GuidanceText(
            text=content,
            model=data.get("model", self.model),
            tokens_used=usage.get("total_tokens") or 0,
        )

    @staticmethod
    def _strip_think_tags(content: str) -> str:
        """Strip <think> reasoning blocks, including one cut off by max_tokens."""
        cleaned = _THINK_BLOCK.sub("", content)
        if "<think>" in cleaned:
            cleaned = _THINK_UNCLOSED.sub("", cleaned)
        return cleaned.strip()


# =============================================================================
# Test Double
# =============================================================================


class FakeGuidanceClient:
    """Fake GuidanceClient for testing.

    Returns a canned response without making HTTP requests and records
    every call for assertions.

    Usage:
        fake = FakeGuidanceClient(text="Act without attachment.")
        result = await fake.generate_guidance("worried", verses)
    """

    def __init__(
        self,
        text: str = "Perform your duty without attachment to results.",
        error: GuidanceClientError | None = None,
    ) -> None:
        self._text = text
        self._error = error
        self.calls: list[tuple[str, list[Verse], str]] = []

    async def generate_guidance(
        self,
        problem: str,
        verses: Sequence[Verse],
        language: str = DEFAULT_LANGUAGE,
    ) -> GuidanceText:
        self.calls.append((problem, list(verses), language))
        if self._error:
            raise self._error
        return GuidanceText(text=self._text, model="fake")


# =============================================================================
# Singleton Instance (Anti-Pattern #12)
# =============================================================================

_guidance_client: GuidanceClientProtocol | None = None


def set_guidance_client(client: GuidanceClientProtocol | None) -> None:
    """Install the process-wide client. Called by the lifespan handler."""
    global _guidance_client
    _guidance_client = client


def get_guidance_client() -> GuidanceClientProtocol:
    """Get the process-wide guidance client.

    Raises:
        GuidanceClientError: If the lifespan handler has not opened a client
    """
    if _guidance_client is None:
        raise GuidanceClientError("Guidance client not initialized")
    return _guidance_client
