from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SelectCategoryInput(BaseModel):
    category: str = Field(min_length=1)


class PageSummary(BaseModel):
    url: str
    description: str = ""


class SelectCategoryOutput(BaseModel):
    category: str
    pages: list[PageSummary]


class LoadPagesInput(BaseModel):
    # Validated per element by the load_pages handler
    urls: list[Any] = Field(min_length=1)


class PageOutcome(BaseModel):
    """Result for a single URL in a load_pages batch.

    Exactly one of ``markdown`` or ``error`` is set. Dumped with
    ``exclude_none`` so absent fields do not reach the model.
    """

    url: str  # As supplied by the model
    normalized_url: str | None = None
    markdown: str | None = None
    error: str | None = None
    suggestion: str | None = None
