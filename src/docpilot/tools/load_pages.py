"""Tool handler for load_pages.

Each URL in the batch is validated, looked up and loaded on its own; a
failure becomes that URL's outcome and never aborts the rest of the batch.
URLs are processed sequentially, so a single call has at most one fetch in
flight.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from docpilot.errors import DocPilotError, ErrorCode
from docpilot.matcher import suggest_url
from docpilot.models.tools import LoadPagesInput, PageOutcome
from docpilot.urls import is_allowed_host, normalize_url

if TYPE_CHECKING:
    from docpilot.state import AppState


async def handle(arguments: dict[str, Any], state: AppState) -> list[dict]:
    """Handle a load_pages tool call."""
    log = structlog.get_logger().bind(tool="load_pages")

    raw_urls = arguments.get("urls")
    if not raw_urls:
        raise DocPilotError(
            code=ErrorCode.INVALID_ARGUMENTS,
            message="missing urls",
            suggestion="Call load_pages with a non-empty list of page URLs.",
        )

    try:
        validated = LoadPagesInput(urls=raw_urls)
    except ValidationError as exc:
        raise DocPilotError(
            code=ErrorCode.INVALID_ARGUMENTS,
            message="invalid urls",
            suggestion="urls must be a list of page URLs.",
        ) from exc

    outcomes: list[dict] = []
    for url in validated.urls:
        outcome = await _load_one(url, state)
        outcomes.append(outcome.model_dump(mode="json", exclude_none=True))

    log.info(
        "pages_loaded",
        requested=len(validated.urls),
        failed=sum(1 for outcome in outcomes if "error" in outcome),
    )
    return outcomes


async def _load_one(url: Any, state: AppState) -> PageOutcome:
    log = structlog.get_logger().bind(tool="load_pages", url=url)

    normalized = normalize_url(url)
    if normalized is None:
        log.info("page_rejected", reason="invalid_url")
        return PageOutcome(url=str(url), error="invalid url")

    if not is_allowed_host(normalized, state.settings.docs.host):
        log.info("page_rejected", reason="host_not_allowed")
        return PageOutcome(url=url, normalized_url=normalized, error="host not allowed")

    if state.index.lookup(normalized) is None:
        suggestion = suggest_url(
            normalized,
            state.index.all_urls(),
            min_distance=state.settings.docs.suggestion_min_distance,
            ratio=state.settings.docs.suggestion_ratio,
        )
        log.info("page_rejected", code=ErrorCode.PAGE_NOT_INDEXED, suggestion=suggestion)
        return PageOutcome(
            url=url,
            normalized_url=normalized,
            error="not found",
            suggestion=suggestion,
        )

    try:
        markdown = await state.loader.load(normalized)
    except DocPilotError as exc:
        log.warning("page_load_failed", code=exc.code, message=exc.message)
        return PageOutcome(url=url, normalized_url=normalized, error=exc.message)

    return PageOutcome(url=url, normalized_url=normalized, markdown=markdown)
