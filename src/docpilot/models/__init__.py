from __future__ import annotations

from docpilot.models.cache import CacheEntry
from docpilot.models.chat import (
    ChatMessage,
    ChatRequest,
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    ModelDelta,
    StreamEvent,
    ToolCallEvent,
    ToolCallFragment,
    ToolResultEvent,
)
from docpilot.models.corpus import Corpus, CorpusEntry, DocumentationIndex, PageDescriptor
from docpilot.models.tools import (
    LoadPagesInput,
    PageOutcome,
    PageSummary,
    SelectCategoryInput,
    SelectCategoryOutput,
)

__all__ = [
    # corpus
    "CorpusEntry",
    "Corpus",
    "PageDescriptor",
    "DocumentationIndex",
    # cache
    "CacheEntry",
    # chat
    "ChatMessage",
    "ChatRequest",
    "ModelDelta",
    "ToolCallFragment",
    "StreamEvent",
    "ContentEvent",
    "ToolCallEvent",
    "ToolResultEvent",
    "ErrorEvent",
    "DoneEvent",
    # tools
    "SelectCategoryInput",
    "SelectCategoryOutput",
    "PageSummary",
    "LoadPagesInput",
    "PageOutcome",
]
