"""FastAPI application exposing history runs over HTTP."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ApiverConfig
from ..errors import SourceUnavailable
from ..models import HistoryOutcome
from ..orchestrator import Orchestrator
from ..output import record_for


class HistoryRequest(BaseModel):
    repository: str
    branch: Optional[str] = None
    language: Optional[str] = None


class RevisionRecord(BaseModel):
    hash: str
    subject: str
    name: str
    email: str
    date: str
    package: str
    version: str
    error: Optional[str] = None


class HistoryResponse(BaseModel):
    status: str
    version: Optional[str] = None
    error: Optional[str] = None
    records: List[RevisionRecord] = []


class HealthResponse(BaseModel):
    status: str


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = Orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing apiver operations."""

    app = FastAPI(title="apiver", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Each request gets its own orchestrator and therefore its own clone.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/history", response_model=HistoryResponse)
    async def history(
        payload: HistoryRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> HistoryResponse:
        def _run_history() -> HistoryOutcome:
            return orchestrator.run_history(
                payload.repository,
                branch=payload.branch,
                language=payload.language,
            )

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run_history)

        records = [RevisionRecord(**record_for(result)) for result in outcome.results]
        return HistoryResponse(
            status="ok" if outcome.ok else "failed",
            version=str(outcome.version) if outcome.version is not None else None,
            error=str(outcome.failure) if outcome.failure is not None else None,
            records=records,
        )

    @app.exception_handler(SourceUnavailable)
    async def source_unavailable_handler(
        _: Any, exc: SourceUnavailable
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    config: ApiverConfig | None = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(lambda: Orchestrator(config))
    uvicorn.run(app, host=host, port=port)
