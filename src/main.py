"""
Gita-Guidance-Service - Main Application Entry Point

- FastAPI app with lifespan handler
- uvicorn src.main:app starts the service

Startup loads the verse corpus once and opens one pooled guidance client;
both live until shutdown.

Patterns Applied:
- Lifespan context manager
- One-time configure_logging() at startup

Anti-Patterns Avoided:
- Deprecated @app.on_event - using modern lifespan pattern
- structlog.configure() per request - one-time at startup
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.guidance import guidance_router
from src.api.health import get_health_service
from src.api.health import router as health_router
from src.api.verses import verses_router
from src.clients.guidance_client import GuidanceClient, set_guidance_client
from src.core.config import get_settings, validate_settings
from src.core.logging import configure_logging, get_logger
from src.core.tracing import configure_tracing
from src.corpus.loader import load_corpus, set_corpus

settings = get_settings()

configure_logging(
    log_level=settings.log_level,
    json_output=settings.log_json,
    service_name=settings.service_name,
)

logger = get_logger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager for startup/shutdown events.

    Raises ConfigurationError at startup on inconsistent language settings,
    and CorpusLoadError if the fixture is missing or malformed, so the
    service never runs without verses.
    """
    # =========================================================================
    # STARTUP
    # =========================================================================
    validate_settings(settings)

    logger.info(
        "startup",
        service=settings.service_name,
        version=settings.version,
        environment=settings.environment,
    )

    if settings.tracing_enabled:
        configure_tracing(
            service_name=settings.service_name,
            service_version=settings.version,
            console_export=settings.tracing_console_export,
        )
        logger.info("tracing_configured")

    if not settings.llm_api_key:
        logger.warning("llm_api_key_missing", base_url=settings.llm_base_url)

    set_corpus(load_corpus(settings.corpus_path))
    get_health_service().configure(
        service_name=settings.service_name,
        version=settings.version,
    )

    app.state.initialized = True
    app.state.environment = settings.environment

    async with GuidanceClient(
        base_url=settings.llm_base_url,
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        timeout=settings.llm_timeout,
        max_retries=settings.llm_max_retries,
    ) as client:
        set_guidance_client(client)
        yield

    # =========================================================================
    # SHUTDOWN
    # =========================================================================
    logger.info("shutdown", service=settings.service_name)

    set_guidance_client(None)
    set_corpus(None)
    app.state.initialized = False


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Gita-Guidance-Service",
    description="Keyword-matched Bhagavad Gita verses with LLM-generated guidance",
    version=settings.version,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "development" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(verses_router)
app.include_router(guidance_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint pointing to docs."""
    return {
        "service": settings.service_name,
        "version": settings.version,
        "docs": "/docs",
    }
