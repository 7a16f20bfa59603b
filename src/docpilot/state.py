"""Application state container.

AppState is created once at server startup (inside the Starlette lifespan)
and passed explicitly to the chat loop and every tool handler. The index is
read-only after construction; the content cache carries its own lock and is
shared by all concurrent chat requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx
    from openai import AsyncOpenAI

    from docpilot.cache import ContentCache
    from docpilot.config import Settings
    from docpilot.loader import PageLoader
    from docpilot.models.corpus import DocumentationIndex
    from docpilot.protocols import ChatModelProtocol


@dataclass
class AppState:
    """Holds all shared runtime state."""

    settings: Settings
    index: DocumentationIndex
    cache: ContentCache
    loader: PageLoader
    model: ChatModelProtocol

    # Owned clients, closed on shutdown
    http_client: httpx.AsyncClient | None = None
    model_client: AsyncOpenAI | None = None
