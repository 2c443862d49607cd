"""FastAPI application for chatrelay."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from chatrelay import __app_name__, __version__
from chatrelay.ai.provider_factory import create_provider
from chatrelay.core.config import RelayConfig, load_config
from chatrelay.core.errors import ChatFailure, ErrorKind
from chatrelay.core.orchestrator import SessionOrchestrator
from chatrelay.memory.history_store import HistoryStore

logger = structlog.get_logger()

_STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UPSTREAM_ERROR: 500,
}


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(_CamelModel):
    user_id: str | None = None
    message: str | None = None


class ChatResponse(_CamelModel):
    success: bool = True
    reply: str
    user_id: str
    history_count: int


class FailureResponse(_CamelModel):
    success: bool = False
    message: str
    timestamp: datetime | None = None


class ClearHistoryResponse(_CamelModel):
    success: bool
    message: str


class DebugConversationsResponse(_CamelModel):
    total_users: int
    history_by_user: dict[str, int]
    server_time: datetime


def failure_response(failure: ChatFailure) -> JSONResponse:
    """Translate an orchestrator failure into its HTTP response."""
    body = FailureResponse(message=failure.message, timestamp=failure.timestamp)
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(failure.kind, 500),
        content=body.model_dump(mode="json", by_alias=True),
    )


def _build_orchestrator(config: RelayConfig) -> SessionOrchestrator:
    return SessionOrchestrator(
        store=HistoryStore(),
        provider=create_provider(config.upstream),
        config=config,
    )


def create_app(
    config: RelayConfig | None = None,
    orchestrator: SessionOrchestrator | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    When no orchestrator is injected, a fresh store and provider are created
    at startup and the provider is closed at shutdown.
    """
    if config is None:
        config = RelayConfig() if orchestrator is not None else load_config()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):  # noqa: ANN001
        owned = orchestrator is None
        app.state.orchestrator = orchestrator or _build_orchestrator(config)
        logger.info("relay_started", provider=config.upstream.provider, model=config.upstream.model)
        try:
            yield
        finally:
            if owned:
                await app.state.orchestrator.provider.aclose()
            logger.info("relay_stopped")

    app = FastAPI(title="chatrelay API", version=__version__, lifespan=_lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials="*" not in config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _get_orchestrator(request: Request) -> SessionOrchestrator:
        return request.app.state.orchestrator

    # -----------------------------------------------------------------------
    # Endpoints
    # -----------------------------------------------------------------------

    @app.post(
        "/chat",
        response_model=ChatResponse,
        responses={400: {"model": FailureResponse}, 500: {"model": FailureResponse}},
    )
    async def chat(req: ChatRequest, request: Request):  # noqa: ANN201
        result = await _get_orchestrator(request).handle_chat(req.user_id, req.message)
        if isinstance(result, ChatFailure):
            return failure_response(result)
        return ChatResponse(
            reply=result.reply,
            user_id=result.user_id,
            history_count=result.history_count,
        )

    @app.get("/clearHistory", response_model=ClearHistoryResponse)
    async def clear_history(userId: str, request: Request) -> ClearHistoryResponse:  # noqa: N803
        result = _get_orchestrator(request).clear_history(userId)
        return ClearHistoryResponse(success=result.cleared, message=result.message)

    @app.get("/debug/conversations", response_model=DebugConversationsResponse)
    async def debug_conversations(request: Request) -> DebugConversationsResponse:
        snap = _get_orchestrator(request).debug_snapshot()
        return DebugConversationsResponse(
            total_users=snap.total_users,
            history_by_user=snap.per_user_counts,
            server_time=snap.server_time,
        )

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "message": f"{__app_name__} is running",
            "time": datetime.now(timezone.utc).isoformat(),
        }

    return app
