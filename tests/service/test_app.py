"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from tokensync import __version__
from tokensync.analytics.report import Recommendation, UsageReport
from tokensync.loader import TokenStructureError
from tokensync.models import GeneratedArtifact
from tokensync.orchestrator import SyncOutcome
from tokensync.service import create_app
from tokensync.validators import TokenValidationError, ValidationResult


def _report() -> UsageReport:
    return UsageReport(
        summary={"total_tokens": 2, "used_tokens": 1, "adoption_rate": 50.0},
        most_used=[
            {
                "token": "colors.primary.500",
                "count": 3,
                "files": ["src/App.tsx"],
                "category": "colors",
                "match_type": "tailwind-color",
            }
        ],
        least_used=[],
        match_types={"tailwind-color": {"tokens": 1, "occurrences": 3}},
        categories={"colors": {"tokens": 1, "occurrences": 3}},
        file_distribution={".tsx": 1},
        unused={"summary": {"total_unused": 1}, "remove": [], "review": [], "keep": [], "indirectly_used": []},
        recommendations=[Recommendation(type="adoption", priority="medium", message="Adopt more tokens")],
        generated_at="2024-01-01T00:00:00Z",
    )


class _StubOrchestrator:
    def __init__(self) -> None:
        self.sync_calls: list[dict[str, object]] = []
        self.skip_next = False
        self.error: Exception | None = None

    def _raise_if_configured(self) -> None:
        if self.error is not None:
            raise self.error

    def run_validate(self, path: str) -> ValidationResult:
        self._raise_if_configured()
        return ValidationResult(
            warnings=["Optional token category not found: typography"],
            summary={"categories": 2, "tokens": 5, "errors": 0, "warnings": 1},
        )

    def run_sync(self, path: str, *, dry_run: bool = False, force: bool = False) -> SyncOutcome:
        self._raise_if_configured()
        self.sync_calls.append({"path": path, "dry_run": dry_run, "force": force})
        if self.skip_next:
            return SyncOutcome(skipped=True)
        artifact = GeneratedArtifact(
            name="css",
            path=str(Path(path) / "src/styles/tokens.css"),
            content=":root {}\n",
            changed=True,
        )
        return SyncOutcome(
            artifacts=[artifact],
            failures={"flutter": "boom"} if force else {},
            warnings=["Token reference not found: {colors.nope}"],
            dry_run=dry_run,
        )

    def run_analyze(self, path: str) -> UsageReport:
        self._raise_if_configured()
        return _report()


@pytest.fixture
def orchestrator() -> _StubOrchestrator:
    return _StubOrchestrator()


@pytest.fixture
def client(orchestrator: _StubOrchestrator) -> TestClient:
    return TestClient(create_app(lambda: orchestrator))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_validate_endpoint(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/validate", json={"path": str(tmp_path)})
    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["errors"] == []
    assert data["summary"]["tokens"] == 5


def test_sync_endpoint_reports_artifacts(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path
) -> None:
    response = client.post("/sync", json={"path": str(tmp_path), "dry_run": True})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["dry_run"] is True
    assert data["artifacts"][0]["name"] == "css"
    assert data["artifacts"][0]["size"] == len(":root {}\n")
    assert data["warnings"] == ["Token reference not found: {colors.nope}"]
    assert orchestrator.sync_calls == [{"path": str(tmp_path), "dry_run": True, "force": False}]


def test_sync_endpoint_partial_on_generator_failure(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/sync", json={"path": str(tmp_path), "force": True})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "partial"
    assert data["failures"] == {"flutter": "boom"}


def test_sync_endpoint_skipped(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path
) -> None:
    orchestrator.skip_next = True
    response = client.post("/sync", json={"path": str(tmp_path)})
    assert response.status_code == 200
    assert response.json()["status"] == "skipped"
    assert response.json()["artifacts"] == []


def test_analyze_endpoint_json(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/analyze", json={"path": str(tmp_path)})
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["adoption_rate"] == 50.0
    assert data["recommendations"][0]["type"] == "adoption"


def test_analyze_endpoint_html(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/analyze", json={"path": str(tmp_path), "format": "html"})
    assert response.status_code == 200
    data = response.json()
    assert data["format"] == "html"
    assert "Design Token Usage Report" in data["content"]


def test_analyze_endpoint_rejects_unknown_format(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/analyze", json={"path": str(tmp_path), "format": "xml"})
    assert response.status_code == 400
    assert "xml" in response.json()["detail"]


def test_missing_project_returns_404(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path
) -> None:
    orchestrator.error = FileNotFoundError("Tokens file not found: tokens.json")
    response = client.post("/validate", json={"path": str(tmp_path)})
    assert response.status_code == 404
    assert "tokens.json" in response.json()["detail"]


def test_structure_error_returns_422(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path
) -> None:
    orchestrator.error = TokenStructureError(["Missing required token category: colors"])
    response = client.post("/sync", json={"path": str(tmp_path)})
    assert response.status_code == 422
    assert response.json()["errors"] == ["Missing required token category: colors"]


def test_validation_error_returns_422(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path
) -> None:
    result = ValidationResult(errors=['Invalid color value: colors.primary.500 = "#12345"'])
    orchestrator.error = TokenValidationError(result)
    response = client.post("/sync", json={"path": str(tmp_path)})
    assert response.status_code == 422
    data = response.json()
    assert data["valid"] is False
    assert data["errors"] == result.errors


def test_runtime_error_returns_400(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path
) -> None:
    orchestrator.error = RuntimeError("bad config")
    response = client.post("/analyze", json={"path": str(tmp_path)})
    assert response.status_code == 400
    assert response.json() == {"detail": "bad config"}
