"""HTTP clients for external services."""
from src.clients.guidance_client import (
    FakeGuidanceClient,
    GuidanceClient,
    GuidanceClientError,
    GuidanceClientProtocol,
    GuidanceConnectionError,
    GuidanceText,
    GuidanceTimeoutError,
    build_messages,
    get_guidance_client,
    set_guidance_client,
)

__all__ = [
    "FakeGuidanceClient",
    "GuidanceClient",
    "GuidanceClientError",
    "GuidanceClientProtocol",
    "GuidanceConnectionError",
    "GuidanceText",
    "GuidanceTimeoutError",
    "build_messages",
    "get_guidance_client",
    "set_guidance_client",
]
