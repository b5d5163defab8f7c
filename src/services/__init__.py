"""Application services composing retrieval and generation."""
from src.services.guidance import GuidanceOrchestrator, GuidanceResult

__all__ = ["GuidanceOrchestrator", "GuidanceResult"]
