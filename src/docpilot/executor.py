"""Tool dispatch and tool schema definitions.

``execute_tool`` never raises for tool-level problems: unknown tools, bad
argument JSON, argument validation failures and handler errors all come back
as ``{"error": ...}`` data so they can be sent to the model as a tool
message.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog

import docpilot.tools.load_pages as t_load_pages
import docpilot.tools.select_category as t_select_category
from docpilot.errors import DocPilotError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from docpilot.state import AppState

_HANDLERS: dict[str, Callable[[dict[str, Any], AppState], Awaitable[Any]]] = {
    "select_category": t_select_category.handle,
    "load_pages": t_load_pages.handle,
}


def build_tool_schemas(categories: list[str]) -> list[dict[str, Any]]:
    """OpenAI function-tool definitions for the two documentation tools."""
    return [
        {
            "type": "function",
            "function": {
                "name": "select_category",
                "description": (
                    "Selects a documentation category to retrieve a list of relevant page "
                    "URLs and their descriptions. Use this as the first step to find "
                    "documents related to a topic."
                ),
                "parameters": {
                    "type": "object",
                    "properties": {
                        "category": {
                            "type": "string",
                            "description": "The documentation category to explore.",
                            "enum": list(categories),
                        }
                    },
                    "required": ["category"],
                },
            },
        },
        {
            "type": "function",
            "function": {
                "name": "load_pages",
                "description": (
                    "Loads the full content of one or more documentation pages given their "
                    "URLs. Use this after 'select_category' to get the detailed information "
                    "needed to answer a user's question."
                ),
                "parameters": {
                    "type": "object",
                    "properties": {
                        "urls": {
                            "type": "array",
                            "description": "A list of one or more page URLs to load content from.",
                            "items": {
                                "type": "string",
                                "description": "A single URL from the developer documentation.",
                            },
                        }
                    },
                    "required": ["urls"],
                },
            },
        },
    ]


async def execute_tool(name: str, raw_arguments: str, state: AppState) -> Any:
    """Run one tool call and return its JSON-serialisable result."""
    log = structlog.get_logger().bind(tool=name)

    handler = _HANDLERS.get(name)
    if handler is None:
        log.warning("tool_unknown")
        return {"error": "unknown tool"}

    try:
        arguments = json.loads(raw_arguments) if raw_arguments else {}
        if not isinstance(arguments, dict):
            raise TypeError(f"tool arguments must be a JSON object, got {type(arguments).__name__}")
        return await handler(arguments, state)
    except DocPilotError as exc:
        log.warning("tool_error", code=exc.code, message=exc.message)
        return {"error": exc.message}
    except Exception:
        log.error("tool_execution_failed", raw_arguments=raw_arguments, exc_info=True)
        return {"error": "execution failed"}
