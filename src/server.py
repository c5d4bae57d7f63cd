"""Main FastAPI server for the Gemini live relay and speech synthesis endpoints."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware

from src.state import RuntimeDeps
from src.config.websocket import WS_ENDPOINT_PATH
from src.runtime.logging import configure_logging
from src.runtime.settings_loader import load_settings
from src.handlers.http.tts import handle_generate_tts
from src.runtime.dependencies import build_runtime_deps
from src.handlers.http.generate import handle_generate
from src.handlers.websocket.manager import handle_websocket_connection
from src.config.server import (
    HTTP_ROOT_PATH,
    SERVICE_MESSAGE,
    SERVICE_VERSION,
    HTTP_HEALTH_PATH,
    HTTP_GENERATE_PATH,
    HTTP_GENERATE_TTS_PATH,
)

logger = logging.getLogger(__name__)

configure_logging()


def _get_runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(runtime_deps: RuntimeDeps | None = None) -> FastAPI:
    settings = runtime_deps.settings if runtime_deps is not None else load_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        if getattr(app.state, "runtime_deps", None) is None:
            app.state.runtime_deps = await build_runtime_deps(settings)
        logger.info("runtime: ready (ws=%s)", WS_ENDPOINT_PATH)
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)
    app.state.runtime_deps = runtime_deps
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.server.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get(HTTP_ROOT_PATH)
    async def root() -> dict[str, str]:
        return {"status": "ok", "message": SERVICE_MESSAGE, "version": SERVICE_VERSION}

    @app.get(HTTP_HEALTH_PATH)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(HTTP_GENERATE_PATH)
    async def generate(request: Request) -> ORJSONResponse:
        return await handle_generate(request, _get_runtime_deps(app))

    @app.post(HTTP_GENERATE_TTS_PATH)
    async def generate_tts(request: Request) -> ORJSONResponse:
        return await handle_generate_tts(request, _get_runtime_deps(app))

    @app.websocket(WS_ENDPOINT_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _get_runtime_deps(app))

    return app


app = create_app()
