"""
Tests for the FastAPI application shell.

Patterns Applied:
- Health Check Pattern
- Lifespan context manager
- structlog one-time config

Anti-Patterns Avoided:
- #16: structlog.configure() per request
- Deprecated @app.on_event
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.api.health import HealthService
from src.clients.guidance_client import GuidanceClient, get_guidance_client
from src.core.config import Settings
from src.core.exceptions import ConfigurationError
from src.corpus.loader import is_corpus_loaded


class TestMainEntryPoint:
    """Verify main.py entry point exists and app starts."""

    def test_main_py_exists(self):
        """main.py must exist at src/main.py."""
        main_file = Path(__file__).parent.parent.parent / "src" / "main.py"
        assert main_file.exists(), f"src/main.py missing at {main_file}"

    def test_app_can_be_imported(self):
        """FastAPI app must be importable from src.main."""
        from src.main import app
        assert app is not None
        assert hasattr(app, "routes")

    def test_app_has_lifespan_handler(self):
        """App must use lifespan context manager pattern."""
        from src.main import app
        assert app.router.lifespan_context is not None

    def test_app_metadata(self):
        """App must have title, version, and description."""
        from src.main import app
        assert app.title == "Gita-Guidance-Service"
        assert app.version is not None
        assert app.description is not None

    def test_routes_registered(self):
        """Health, matching and guidance routes are mounted."""
        from src.main import app
        paths = {route.path for route in app.routes}
        assert {"/", "/health", "/ready", "/v1/verses/match", "/v1/guidance"} <= paths


class TestHealthEndpoint:
    """Verify /health endpoint returns 200 with service info."""

    @pytest.fixture
    def client(self):
        """Create test client without triggering lifespan."""
        from src.main import app
        return TestClient(app, raise_server_exceptions=False)

    def test_health_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_returns_json(self, client):
        response = client.get("/health")
        assert response.headers.get("content-type") == "application/json"

    def test_health_response_fields(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert data["service"] == "gita-guidance-service"

    def test_root_points_to_docs(self, client):
        data = client.get("/").json()
        assert data["service"] == "gita-guidance-service"
        assert data["docs"] == "/docs"

    def test_health_reports_configured_service_name(self):
        service = HealthService(service_name="gita-eu", version="9.9.9")

        data = service.check_health()

        assert data["service"] == "gita-eu"
        assert data["version"] == "9.9.9"


class TestReadyEndpoint:
    """Verify /ready returns 503 until the corpus is loaded."""

    def test_ready_returns_503_without_lifespan(self):
        from src.main import app
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/ready")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "not_ready"
        assert data["checks"]["corpus_loaded"] is False
        assert data["verse_count"] == 0

    def test_guidance_returns_503_without_lifespan(self):
        from src.main import app
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/v1/guidance", json={"problem": "fear"})

        assert response.status_code == 503


class TestLifespan:
    """Startup loads the corpus and opens the guidance client."""

    def test_ready_after_startup(self):
        from src.main import app

        with TestClient(app) as client:
            response = client.get("/ready")

            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "ready"
            assert data["checks"] == {"corpus_loaded": True, "corpus_non_empty": True}
            assert data["verse_count"] > 0

    def test_startup_installs_corpus_and_client(self):
        from src.main import app

        with TestClient(app):
            assert is_corpus_loaded()
            assert isinstance(get_guidance_client(), GuidanceClient)

    def test_startup_rejects_unsupported_default_language(self, monkeypatch):
        import src.main

        bad = Settings(default_language="Klingon", supported_languages=["English"])
        monkeypatch.setattr(src.main, "settings", bad)

        with pytest.raises(ConfigurationError, match="Klingon"):
            with TestClient(src.main.app):
                pass

        assert not is_corpus_loaded()

    def test_shutdown_releases_state(self):
        from src.main import app

        with TestClient(app):
            pass

        assert not is_corpus_loaded()

    def test_match_endpoint_against_bundled_corpus(self):
        from src.main import app

        with TestClient(app) as client:
            response = client.post(
                "/v1/verses/match", json={"query": "I am anxious about my exams"}
            )

            assert response.status_code == 200
            references = [v["reference"] for v in response.json()["verses"]]
            assert references[0] == "2.47"
