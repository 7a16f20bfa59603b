from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel

# ---------------------------------------------------------------------------
# Inbound request
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat``."""

    messages: list[ChatMessage]


# ---------------------------------------------------------------------------
# Model stream (provider-neutral)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolCallFragment:
    """Partial tool call as streamed by the model.

    ``index`` is positional and stable across fragments of the same call;
    ``id`` and ``name`` usually arrive once, ``arguments`` arrives in pieces.
    """

    index: int
    id: str | None = None
    name: str | None = None
    arguments: str | None = None


@dataclass(frozen=True)
class ModelDelta:
    content: str = ""
    tool_calls: tuple[ToolCallFragment, ...] = field(default_factory=tuple)
    finish_reason: str | None = None  # "stop" | "tool_calls" | other provider values


# ---------------------------------------------------------------------------
# Outbound events
# ---------------------------------------------------------------------------


class ContentEvent(BaseModel):
    type: Literal["content"] = "content"
    content: str


class ToolCallEvent(BaseModel):
    type: Literal["tool_call"] = "tool_call"
    tool_name: str
    tool_args: str  # Raw, complete argument JSON as produced by the model


class ToolResultEvent(BaseModel):
    type: Literal["tool_result"] = "tool_result"
    tool_name: str
    result: Any


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


class DoneEvent(BaseModel):
    """Terminal marker; encoded as the ``[DONE]`` sentinel, never as JSON."""

    type: Literal["done"] = "done"


StreamEvent = ContentEvent | ToolCallEvent | ToolResultEvent | ErrorEvent | DoneEvent
