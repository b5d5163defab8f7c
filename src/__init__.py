"""Gita-Guidance-Service: Bhagavad Gita verse retrieval and guidance.

This package provides:
- Keyword overlap retrieval over a fixed verse corpus
- LLM guidance grounded in the retrieved verses
- A FastAPI surface for both
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
