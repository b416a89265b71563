"""HTTP query endpoint for the todo service.

``POST /`` accepts ``{"operationName": ..., "variables": {...}}`` and answers
with the resolver payload. The cache, repository and resolver are built by
:func:`build_app` and kept on ``app.state``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.application.services.resolution_service import ResolutionService
from src.config.settings import Settings
from src.infrastructure.ttl_cache import TTLCache
from src.logging_config import LOG_NAME, CacheStats
from src.repositories.cache.todos_cache import TodosRepoCache

logger = logging.getLogger(LOG_NAME)


class QueryRequest(BaseModel):
    operationName: str
    variables: Optional[dict[str, Any]] = None


def build_service(settings: Settings, stats: Optional[CacheStats] = None) -> ResolutionService:
    """Wire a fresh cache, repository and resolver from ``settings``."""
    cache: TTLCache[str, str] = TTLCache(
        settings.ttl_seconds, settings.cache_capacity, stats=stats
    )
    return ResolutionService(TodosRepoCache(cache))


def build_app(
    settings: Settings,
    service: Optional[ResolutionService] = None,
    stats: Optional[CacheStats] = None,
) -> FastAPI:
    """Build the app. An injected ``service`` reports cache stats only if its
    ``stats`` collector is passed along with it."""
    if service is None:
        stats = stats or CacheStats()
        service = build_service(settings, stats)
    app = FastAPI(title="Todo query service")
    app.state.settings = settings
    app.state.stats = stats
    app.state.service = service

    @app.post("/")
    def query(body: QueryRequest, request: Request) -> JSONResponse:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        svc: ResolutionService = request.app.state.service
        payload, status_code = svc.execute_with_status(
            body.operationName, body.variables, request_id=request_id
        )
        if status_code == 200:
            logger.debug(
                "Request resolved",
                extra={"request_id": request_id, "operation": body.operationName},
            )
        return JSONResponse(payload, status_code=status_code, headers={"x-request-id": request_id})

    @app.get("/health")
    def health(request: Request) -> dict[str, Any]:
        svc: ResolutionService = request.app.state.service
        status: dict[str, Any] = {"status": "ok", "operations": svc.operations}
        if request.app.state.stats is not None:
            status["hit_rate"] = request.app.state.stats.hit_rate
        return status

    return app
