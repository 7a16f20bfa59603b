"""Tool-calling chat loop.

Drives the model through bounded rounds of streaming and tool execution:

  STREAMING      one streaming completion over the whole conversation;
                 text deltas go out immediately, tool-call fragments are
                 merged by positional index
  TOOL_DISPATCH  every named tool call runs in the order received
  CONTINUING     assistant tool-call message and tool results are appended,
                 then back to STREAMING
  DONE           the model finished with "stop" (or without any tool call)
  ABORTED        iteration cap reached, or the provider / loop failed

Every run ends with a DoneEvent, preceded by one ErrorEvent when aborted.
Text already streamed is never retracted. Closing the generator (client
disconnect) stops the loop at the current suspension point.
"""

from __future__ import annotations

import asyncio
import json
import secrets
from contextlib import aclosing
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from docpilot.errors import DocPilotError, ErrorCode
from docpilot.executor import build_tool_schemas, execute_tool
from docpilot.models.chat import (
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from docpilot.prompts import build_system_prompt

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from docpilot.models.chat import ChatMessage, StreamEvent, ToolCallFragment
    from docpilot.state import AppState

ITERATION_CAP_MESSAGE = "Max tool iterations reached."
GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


class LoopState(StrEnum):
    STREAMING = "streaming"
    TOOL_DISPATCH = "tool_dispatch"
    CONTINUING = "continuing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class AccumulatedToolCall:
    id: str = ""
    name: str = ""
    arguments: str = ""

    def to_message(self) -> dict[str, Any]:
        """Tool-call entry for the assistant message sent back to the model."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


class ToolCallAccumulator:
    """Tool calls of one model turn, keyed by the fragment's positional index.

    ``id`` and ``name`` are taken from the first fragment that carries them;
    argument text is concatenated in arrival order and only parsed once the
    turn is over.
    """

    def __init__(self) -> None:
        self._calls: dict[int, AccumulatedToolCall] = {}

    def merge(self, fragment: ToolCallFragment) -> None:
        call = self._calls.setdefault(fragment.index, AccumulatedToolCall())
        if fragment.id and not call.id:
            call.id = fragment.id
        if fragment.name and not call.name:
            call.name = fragment.name
        if fragment.arguments:
            call.arguments += fragment.arguments

    def executable(self) -> list[AccumulatedToolCall]:
        """Calls with a name, ordered by index."""
        return [call for _, call in sorted(self._calls.items()) if call.name]


def build_conversation(messages: Sequence[ChatMessage], categories: list[str]) -> list[dict]:
    """Seed the conversation with the system instruction and the client history."""
    return [
        {"role": "system", "content": build_system_prompt(categories)},
        *(message.model_dump() for message in messages),
    ]


async def run_chat(
    messages: Sequence[ChatMessage],
    state: AppState,
) -> AsyncIterator[StreamEvent]:
    """Run the tool-calling loop for one request, yielding outbound events."""
    log = structlog.get_logger().bind(chat_id=secrets.token_hex(4))

    categories = state.index.categories()
    conversation = build_conversation(messages, categories)
    tools = build_tool_schemas(categories)
    max_iterations = state.settings.orchestrator.max_iterations

    loop_state = LoopState.STREAMING
    log.info("chat_started", history_length=len(messages), max_iterations=max_iterations)

    try:
        for iteration in range(max_iterations):
            loop_state = LoopState.STREAMING
            content_parts: list[str] = []
            accumulator = ToolCallAccumulator()
            finish_reason: str | None = None

            # Snapshot: the model sees the conversation as of this request.
            async with aclosing(state.model.stream(list(conversation), tools)) as stream:
                async for delta in stream:
                    if delta.content:
                        content_parts.append(delta.content)
                        yield ContentEvent(content=delta.content)

                    for fragment in delta.tool_calls:
                        accumulator.merge(fragment)

                    if delta.finish_reason is not None:
                        finish_reason = delta.finish_reason
                        if finish_reason in ("stop", "tool_calls"):
                            break

            calls = accumulator.executable()
            if finish_reason == "stop" or not calls:
                if finish_reason == "tool_calls":
                    log.warning("chat_tool_calls_without_name", iteration=iteration)
                loop_state = LoopState.DONE
                log.info(
                    "chat_complete",
                    iterations=iteration + 1,
                    finish_reason=finish_reason,
                )
                yield DoneEvent()
                return

            loop_state = LoopState.TOOL_DISPATCH
            log.info(
                "tool_dispatch",
                iteration=iteration,
                tools=[call.name for call in calls],
                finish_reason=finish_reason,
            )
            results: list[tuple[AccumulatedToolCall, Any]] = []
            for call in calls:
                yield ToolCallEvent(tool_name=call.name, tool_args=call.arguments)
                result = await execute_tool(call.name, call.arguments, state)
                results.append((call, result))
                yield ToolResultEvent(tool_name=call.name, result=result)

            loop_state = LoopState.CONTINUING
            pre_tool_content = "".join(content_parts)
            conversation.append(
                {
                    "role": "assistant",
                    "content": pre_tool_content or None,
                    "tool_calls": [call.to_message() for call in calls],
                }
            )
            conversation.extend(
                {
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": json.dumps(result),
                }
                for call, result in results
            )

        loop_state = LoopState.ABORTED
        log.warning(
            "chat_iteration_cap_reached",
            code=ErrorCode.ITERATION_CAP_REACHED,
            max_iterations=max_iterations,
        )
        yield ErrorEvent(message=ITERATION_CAP_MESSAGE)
        yield DoneEvent()

    except (asyncio.CancelledError, GeneratorExit):
        log.info("chat_cancelled", state=loop_state)
        raise
    except DocPilotError as exc:
        log.error("chat_provider_failed", state=loop_state, code=exc.code, message=exc.message)
        yield ErrorEvent(message=GENERIC_ERROR_MESSAGE)
        yield DoneEvent()
    except Exception:
        log.error("chat_failed", state=loop_state, exc_info=True)
        yield ErrorEvent(message=GENERIC_ERROR_MESSAGE)
        yield DoneEvent()
