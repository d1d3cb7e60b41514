"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from apiver.errors import CloneError, ExtractionError, RevertError
from apiver.models import Extracted, Failed, HistoryOutcome, RevisionResult, Version
from apiver.service import create_app
from tests._fixtures.history import make_revision


class _StubOrchestrator:
    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []
        self.outcome = HistoryOutcome()
        self.error: Exception | None = None

    def run_history(self, locator, *, branch=None, language=None, on_result=None):  # type: ignore[no-untyped-def]
        self.calls.append({"locator": locator, "branch": branch, "language": language})
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def orchestrator() -> _StubOrchestrator:
    return _StubOrchestrator()


@pytest.fixture
def client(orchestrator: _StubOrchestrator) -> TestClient:
    return TestClient(create_app(lambda: orchestrator))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_history_endpoint_returns_records(client: TestClient, orchestrator: _StubOrchestrator) -> None:
    orchestrator.outcome = HistoryOutcome(
        results=[
            RevisionResult(make_revision("a" * 40, 0), Extracted({}), Version(0, 0, 0), "repo"),
            RevisionResult(
                make_revision("b" * 40, 1),
                Failed(ExtractionError("bad syntax")),
                Version(0, 0, 1),
                "repo",
            ),
        ]
    )

    response = client.post("/history", json={"repository": "repo", "branch": "main"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "0.0.1"
    assert [record["version"] for record in data["records"]] == ["0.0.0", "0.0.1"]
    assert data["records"][1]["error"] == "bad syntax"
    assert orchestrator.calls == [{"locator": "repo", "branch": "main", "language": None}]


def test_history_endpoint_reports_fatal_failure(client: TestClient, orchestrator: _StubOrchestrator) -> None:
    orchestrator.outcome = HistoryOutcome(results=[], failure=RevertError("locked"))

    data = client.post("/history", json={"repository": "repo"}).json()

    assert data["status"] == "failed"
    assert data["error"] == "locked"
    assert data["records"] == []


def test_history_endpoint_maps_source_errors(client: TestClient, orchestrator: _StubOrchestrator) -> None:
    orchestrator.error = CloneError("failed to clone repo")

    response = client.post("/history", json={"repository": "missing"})

    assert response.status_code == 400
    assert response.json() == {"detail": "failed to clone repo"}


def test_history_endpoint_requires_repository(client: TestClient) -> None:
    response = client.post("/history", json={})
    assert response.status_code == 422
