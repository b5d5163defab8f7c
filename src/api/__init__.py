"""FastAPI routes and endpoints.

Endpoints:
- GET /health: Service health status
- GET /ready: Readiness probe (verse corpus loaded)
- POST /v1/verses/match: Keyword overlap retrieval only
- POST /v1/guidance: Retrieval plus LLM guidance
"""
