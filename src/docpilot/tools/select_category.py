"""Tool handler for select_category.

Receives the parsed tool arguments and AppState, looks the category up in the
documentation index, and returns a structured dict. No orchestration or
transport imports; executor.py handles dispatch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from docpilot.errors import DocPilotError, ErrorCode
from docpilot.models.tools import PageSummary, SelectCategoryInput, SelectCategoryOutput

if TYPE_CHECKING:
    from docpilot.state import AppState


async def handle(arguments: dict[str, Any], state: AppState) -> dict:
    """Handle a select_category tool call."""
    log = structlog.get_logger().bind(tool="select_category")

    category = arguments.get("category")
    if not category:
        raise DocPilotError(
            code=ErrorCode.INVALID_ARGUMENTS,
            message="missing category",
            suggestion="Call select_category with one of the listed categories.",
        )

    try:
        validated = SelectCategoryInput(category=category)
    except ValidationError as exc:
        raise DocPilotError(
            code=ErrorCode.INVALID_ARGUMENTS,
            message="invalid category",
            suggestion="The category must be a string.",
        ) from exc

    # Unknown categories are not an error: the model gets an empty list back.
    pages = state.index.list_by_category(validated.category)
    log.info("category_selected", category=validated.category, page_count=len(pages))

    output = SelectCategoryOutput(
        category=validated.category,
        pages=[PageSummary(url=page.url, description=page.description or "") for page in pages],
    )
    return output.model_dump(mode="json")
