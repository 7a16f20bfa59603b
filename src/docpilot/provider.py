"""Language-model provider backed by an OpenAI-compatible chat completions API.

Adapts SDK stream chunks into provider-neutral ModelDelta values so the chat
loop never touches SDK types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import openai
import structlog

from docpilot.errors import DocPilotError, ErrorCode
from docpilot.models.chat import ModelDelta, ToolCallFragment

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from docpilot.config import LLMSettings

log = structlog.get_logger()


def build_model_client(settings: LLMSettings) -> openai.AsyncOpenAI:
    """Create the shared SDK client. Called once at startup."""
    api_key = settings.api_key
    if not api_key:
        # Requests will fail with an auth error and surface as a chat error event
        log.warning("llm_api_key_missing", base_url=settings.base_url)
        api_key = "not-configured"

    return openai.AsyncOpenAI(
        base_url=settings.base_url,
        api_key=api_key,
        default_headers={
            "HTTP-Referer": settings.site_url,
            "X-Title": settings.app_title,
        },
    )


class OpenAIChatModel:
    """Streaming chat model implementing ChatModelProtocol."""

    def __init__(self, client: openai.AsyncOpenAI, settings: LLMSettings) -> None:
        self._client = client
        self._settings = settings

    async def stream(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> AsyncIterator[ModelDelta]:
        """Yield one ModelDelta per SDK chunk.

        Raises DocPilotError(PROVIDER_FAILED) on any SDK error, including
        errors raised mid-stream.
        """
        try:
            response = await self._client.chat.completions.create(
                model=self._settings.model,
                messages=messages,  # type: ignore[arg-type]
                tools=tools,  # type: ignore[arg-type]
                tool_choice="auto",
                stream=True,
                temperature=self._settings.temperature,
            )
            async for chunk in response:
                if not chunk.choices:
                    continue
                choice = chunk.choices[0]
                delta = choice.delta
                fragments = tuple(
                    ToolCallFragment(
                        index=tool_call.index,
                        id=tool_call.id,
                        name=tool_call.function.name if tool_call.function else None,
                        arguments=tool_call.function.arguments if tool_call.function else None,
                    )
                    for tool_call in delta.tool_calls or ()
                )
                yield ModelDelta(
                    content=delta.content or "",
                    tool_calls=fragments,
                    finish_reason=choice.finish_reason,
                )
        except openai.OpenAIError as exc:
            raise DocPilotError(
                code=ErrorCode.PROVIDER_FAILED,
                message=f"Model request failed: {exc}",
                suggestion="Check the model provider configuration and availability.",
                recoverable=True,
            ) from exc
