"""FastAPI application that exposes the resource registry over HTTP."""
from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import ServiceConfig
from .facade import FAILURE_MESSAGE, Envelope, FacadeResponse, ResourceFacade
from .registry import ResourceRegistry

logger = logging.getLogger("resource_registry.api")

SERVICE_NAME = "Resource Registry"
ENDPOINTS = ["/", "/health", "/resources", "/resources/{id}"]


def to_json_response(response: FacadeResponse, headers: Dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.payload, headers=headers)


def _error_response(status_code: int, error: str, headers: Dict[str, str] | None = None) -> JSONResponse:
    envelope = Envelope(success=False, message=FAILURE_MESSAGE, error=error)
    return JSONResponse(status_code=status_code, content=envelope.to_payload(), headers=headers)


def create_app(
    *,
    registry: ResourceRegistry | None = None,
    config: ServiceConfig | None = None,
) -> FastAPI:
    if registry is None:
        registry = ResourceRegistry()
    if config is None:
        config = ServiceConfig()

    facade = ResourceFacade(registry)

    app = FastAPI(
        title=SERVICE_NAME,
        description="In-memory registry of named resources with sequential identifiers",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.state.registry = registry
    app.state.facade = facade
    app.state.config = config

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s in %.2fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.get("/")
    async def service_info() -> JSONResponse:
        envelope = Envelope(
            success=True,
            message=f"Welcome to the {SERVICE_NAME} service",
            data={
                "name": SERVICE_NAME,
                "version": __version__,
                "endpoints": ENDPOINTS,
            },
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=envelope.to_payload())

    @app.get("/health")
    async def healthcheck() -> JSONResponse:
        envelope = Envelope(
            success=True,
            message="Service is healthy",
            data={
                "status": "ok",
                "server_time": datetime.now(timezone.utc).isoformat(),
                "resources": len(registry),
            },
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=envelope.to_payload())

    async def _create_resource(request: Request) -> JSONResponse:
        raw = await request.body()
        if not raw.strip():
            return to_json_response(facade.malformed_body("Request body must not be empty"))
        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            return to_json_response(facade.malformed_body(f"Request body is not valid JSON: {exc}"))
        return to_json_response(facade.create_resource(payload))

    @app.api_route("/resources", methods=["GET", "POST"])
    async def resource_collection(request: Request) -> JSONResponse:
        if request.method == "POST":
            return await _create_resource(request)
        return to_json_response(facade.list_resources())

    @app.get("/resources/{resource_id}")
    async def read_resource(resource_id: str) -> JSONResponse:
        return to_json_response(facade.get_resource(resource_id))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        headers = dict(exc.headers) if exc.headers else None
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return to_json_response(
                facade.method_not_allowed(request.method, request.url.path),
                headers=headers,
            )
        return _error_response(exc.status_code, str(exc.detail), headers=headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error while serving %s %s", request.method, request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return app


__all__ = ["create_app", "to_json_response"]
