"""Server-sent event framing for the chat stream."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docpilot.models.chat import DoneEvent

if TYPE_CHECKING:
    from docpilot.models.chat import StreamEvent

DONE_FRAME = "data: [DONE]\n\n"


def encode_event(event: StreamEvent) -> str:
    """Encode one event as a ``data: <json>`` frame; DoneEvent becomes the sentinel."""
    if isinstance(event, DoneEvent):
        return DONE_FRAME
    return f"data: {event.model_dump_json()}\n\n"
