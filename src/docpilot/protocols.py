"""Protocol interfaces for swappable components.

The orchestrator, tool handlers and AppState reference these protocols, not
the concrete implementations. Tests use scripted models and in-memory
fetchers without touching the network.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from docpilot.models.chat import ModelDelta


class ChatModelProtocol(Protocol):
    """Streaming chat-completion service with tool calling."""

    def stream(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> AsyncIterator[ModelDelta]: ...


class FetcherProtocol(Protocol):
    """Interface for the HTTP page fetcher."""

    async def fetch(self, url: str) -> str: ...
