"""Integration test fixtures.

Provides a fully wired AppState with a real content cache, page loader and
fetcher (HTTP mocked per test with respx), plus scripted chat models that
stand in for the provider. Corpus fixtures come from tests/conftest.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import pytest

from docpilot.cache import ContentCache
from docpilot.config import Settings
from docpilot.fetcher import Fetcher
from docpilot.loader import PageLoader
from docpilot.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from docpilot.models.chat import ModelDelta
    from docpilot.models.corpus import DocumentationIndex


class ScriptedModel:
    """Chat model that replays canned turns; the last turn repeats forever.

    Records a snapshot of the conversation passed to every call.
    """

    def __init__(self, turns: list[list[ModelDelta]]) -> None:
        self.turns = turns
        self.calls: list[list[dict[str, Any]]] = []
        self.closed_streams = 0

    async def stream(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> AsyncIterator[ModelDelta]:
        self.calls.append(list(messages))
        turn = self.turns[min(len(self.calls), len(self.turns)) - 1]
        try:
            for delta in turn:
                yield delta
        finally:
            self.closed_streams += 1


class FailingModel:
    """Chat model that yields some deltas, then raises."""

    def __init__(self, deltas: list[ModelDelta], error: Exception) -> None:
        self.deltas = deltas
        self.error = error
        self.calls: list[list[dict[str, Any]]] = []

    async def stream(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> AsyncIterator[ModelDelta]:
        self.calls.append(list(messages))
        for delta in self.deltas:
            yield delta
        raise self.error


@pytest.fixture()
async def app_state(index: DocumentationIndex) -> AsyncIterator[AppState]:
    """Full AppState wired for integration tests."""
    settings = Settings()
    async with httpx.AsyncClient() as client:
        fetcher = Fetcher(client, settings.docs.host)
        cache = ContentCache(settings.cache.max_entries, settings.cache.ttl_seconds)

        yield AppState(
            settings=settings,
            index=index,
            cache=cache,
            loader=PageLoader(fetcher, cache),
            model=ScriptedModel([[]]),
            http_client=client,
        )


@pytest.fixture()
def script_model(app_state: AppState) -> Callable[[list[list[ModelDelta]]], ScriptedModel]:
    """Installs a ScriptedModel with the given turns on ``app_state`` and returns it."""

    def _install(turns: list[list[ModelDelta]]) -> ScriptedModel:
        model = ScriptedModel(turns)
        app_state.model = model
        return model

    return _install


@pytest.fixture()
def fail_model(app_state: AppState) -> Callable[[list[ModelDelta], Exception], FailingModel]:
    """Installs a FailingModel on ``app_state`` and returns it."""

    def _install(deltas: list[ModelDelta], error: Exception) -> FailingModel:
        model = FailingModel(deltas, error)
        app_state.model = model
        return model

    return _install
