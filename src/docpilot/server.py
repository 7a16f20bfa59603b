"""HTTP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the Starlette lifespan context manager
- Validate chat requests and stream chat events as server-sent events
- Start uvicorn
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
import uvicorn
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.responses import JSONResponse, StreamingResponse
from starlette.routing import Route

from docpilot import __version__
from docpilot.cache import ContentCache
from docpilot.config import Settings
from docpilot.errors import DocPilotError, ErrorCode
from docpilot.fetcher import Fetcher, build_http_client
from docpilot.index import build_index, load_corpus
from docpilot.loader import PageLoader
from docpilot.models.chat import ChatRequest
from docpilot.orchestrator import run_chat
from docpilot.provider import OpenAIChatModel, build_model_client
from docpilot.sse import encode_event
from docpilot.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, AsyncIterator, Sequence

    from starlette.requests import Request
    from starlette.responses import Response

    from docpilot.models.chat import ChatMessage

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is left to uvicorn
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# State construction
# ---------------------------------------------------------------------------


def build_state(settings: Settings) -> AppState:
    """Load the corpus, build the index and wire every shared component."""
    corpus_path = settings.docs.corpus_path
    index = build_index(
        load_corpus(Path(corpus_path).expanduser() if corpus_path else None),
        settings.docs.host,
    )

    http_client = build_http_client(settings.fetcher)
    fetcher = Fetcher(
        http_client,
        settings.docs.host,
        max_redirects=settings.fetcher.max_redirects,
    )
    cache = ContentCache(settings.cache.max_entries, settings.cache.ttl_seconds)

    model_client = build_model_client(settings.llm)

    return AppState(
        settings=settings,
        index=index,
        cache=cache,
        loader=PageLoader(fetcher, cache),
        model=OpenAIChatModel(model_client, settings.llm),
        http_client=http_client,
        model_client=model_client,
    )


async def close_state(state: AppState) -> None:
    if state.http_client is not None:
        await state.http_client.aclose()
    if state.model_client is not None:
        await state.model_client.close()


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


async def chat(request: Request) -> Response:
    """Stream a chat answer for ``{"messages": [{role, content}, ...]}``."""
    state: AppState = request.app.state.docpilot

    try:
        payload = await request.json()
        chat_request = ChatRequest.model_validate(payload)
    except (ValueError, ValidationError) as exc:
        error = DocPilotError(
            code=ErrorCode.INVALID_INPUT,
            message="Invalid messages format",
            suggestion='Send {"messages": [{"role": "user", "content": "..."}]}.',
        )
        log.warning("chat_rejected", code=error.code, reason=str(exc))
        return JSONResponse(error.to_dict(), status_code=400)

    return StreamingResponse(
        _event_stream(chat_request.messages, state),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


async def _event_stream(messages: Sequence[ChatMessage], state: AppState) -> AsyncIterator[str]:
    async for event in run_chat(messages, state):
        yield encode_event(event)


async def health(request: Request) -> Response:
    state: AppState = request.app.state.docpilot
    return JSONResponse(
        {
            "status": "ok",
            "version": __version__,
            "categories": len(state.index.categories()),
            "indexed_pages": len(state.index.all_urls()),
        }
    )


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def create_app(state: AppState | None = None, settings: Settings | None = None) -> Starlette:
    """Build the Starlette app.

    With ``state`` given (tests), that state is used as-is and no lifespan
    runs. Otherwise the lifespan builds the state from ``settings`` on startup
    and closes its clients on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncGenerator[None, None]:
        resolved = settings or Settings()
        _setup_logging(resolved)
        log.info("server_starting", version=__version__)

        app.state.docpilot = build_state(resolved)
        log.info(
            "server_started",
            version=__version__,
            categories=len(app.state.docpilot.index.categories()),
            indexed_pages=len(app.state.docpilot.index.all_urls()),
        )
        try:
            yield
        finally:
            await close_state(app.state.docpilot)
            log.info("server_stopping")

    app = Starlette(
        routes=[
            Route("/api/chat", chat, methods=["POST"]),
            Route("/health", health, methods=["GET"]),
        ],
        lifespan=lifespan if state is None else None,
    )
    if state is not None:
        app.state.docpilot = state
    return app


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # Disable uvicorn's default logging; structlog handles it
    )


if __name__ == "__main__":
    main()
