"""FastAPI application entrypoint for tokensync service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..analytics.export import EXPORT_FORMATS, render
from ..loader import TokenStructureError
from ..orchestrator import Orchestrator, SyncOutcome
from ..validators import TokenValidationError, ValidationResult


class ProjectRequest(BaseModel):
    path: str


class SyncRequest(BaseModel):
    path: str
    dry_run: bool = False
    force: bool = False


class AnalyzeRequest(BaseModel):
    path: str
    format: str = "json"


class ValidateResponse(BaseModel):
    valid: bool
    errors: List[str]
    warnings: List[str]
    summary: Dict[str, int]


class ArtifactModel(BaseModel):
    name: str
    path: str
    changed: bool
    size: int


class SyncResponse(BaseModel):
    status: str
    dry_run: bool = False
    artifacts: List[ArtifactModel] = []
    failures: Dict[str, str] = {}
    warnings: List[str] = []


class HealthResponse(BaseModel):
    status: str
    version: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def _sync_response(outcome: SyncOutcome) -> SyncResponse:
    if outcome.skipped:
        return SyncResponse(status="skipped")
    return SyncResponse(
        status="partial" if outcome.failures else "ok",
        dry_run=outcome.dry_run,
        artifacts=[
            ArtifactModel(
                name=artifact.name,
                path=artifact.path,
                changed=artifact.changed,
                size=artifact.size,
            )
            for artifact in outcome.artifacts
        ],
        failures=dict(outcome.failures),
        warnings=list(outcome.warnings),
    )


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing tokensync operations."""

    app = FastAPI(title="tokensync Service", version=__version__)
    shared: Dict[str, Orchestrator] = {}

    async def get_orchestrator() -> Orchestrator:
        # One orchestrator per app so the resolution cache is shared across requests.
        if "instance" not in shared:
            shared["instance"] = orchestrator_factory()
        return shared["instance"]

    async def _in_executor(func: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    @app.post("/validate", response_model=ValidateResponse)
    async def validate_tokens(
        payload: ProjectRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ValidateResponse:
        result: ValidationResult = await _in_executor(lambda: orchestrator.run_validate(payload.path))
        return ValidateResponse(**result.to_dict())

    @app.post("/sync", response_model=SyncResponse)
    async def sync_tokens(
        payload: SyncRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> SyncResponse:
        outcome: SyncOutcome = await _in_executor(
            lambda: orchestrator.run_sync(payload.path, dry_run=payload.dry_run, force=payload.force)
        )
        return _sync_response(outcome)

    @app.post("/analyze")
    async def analyze_usage(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Any:
        if payload.format not in EXPORT_FORMATS:
            return JSONResponse(
                status_code=400,
                content={"detail": f"Unsupported report format '{payload.format}'"},
            )
        report = await _in_executor(lambda: orchestrator.run_analyze(payload.path))
        if payload.format == "json":
            return report.to_dict()
        return {"format": payload.format, "content": render(report, payload.format)}

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(TokenStructureError)
    async def structure_error_handler(_: Any, exc: TokenStructureError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.messages})

    @app.exception_handler(TokenValidationError)
    async def validation_error_handler(_: Any, exc: TokenValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc), **exc.result.to_dict()})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)
