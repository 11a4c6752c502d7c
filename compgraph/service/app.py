"""FastAPI application exposing the engine over HTTP."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import EngineConfig
from ..engine import DuplicateFileIdError, Engine
from ..export import result_to_dict
from ..logging import get_logger
from ..parser.source import DIALECTS, SourceLoader


class SourceFilePayload(BaseModel):
    file_id: str
    source: str
    dialect: Optional[str] = None


class AnalyzeRequest(BaseModel):
    files: List[SourceFilePayload] = Field(default_factory=list)
    rules: Optional[List[str]] = None


class HealthResponse(BaseModel):
    status: str


def _default_config() -> EngineConfig:
    return EngineConfig()


def create_app(config_factory: Callable[[], EngineConfig] = _default_config) -> FastAPI:
    """Create the FastAPI application exposing compgraph analysis."""

    app = FastAPI(title="compgraph", version="0.1.0")
    logger = get_logger("service")

    async def get_config() -> EngineConfig:
        # One config per request; handlers may mutate it.
        return config_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze")
    async def analyze(
        payload: AnalyzeRequest,
        config: EngineConfig = Depends(get_config),
    ) -> Dict[str, Any]:
        for item in payload.files:
            if item.dialect is not None and item.dialect not in DIALECTS:
                raise ValueError(f"Unsupported dialect '{item.dialect}' for {item.file_id}")
        if payload.rules:
            config.rules.enabled = list(payload.rules)

        def _run() -> Dict[str, Any]:
            loader = SourceLoader()
            trees = [loader.parse(item.file_id, item.source, item.dialect) for item in payload.files]
            return result_to_dict(Engine(config).run(trees))

        logger.debug("Analyzing %d submitted files", len(payload.files))
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _run)

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        status = 400 if isinstance(exc, DuplicateFileIdError) else 422
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
