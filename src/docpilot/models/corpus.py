from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CorpusEntry(BaseModel):
    """Single page entry in the documentation corpus JSON."""

    url: str
    description: str | None = Field(
        default=None,
        validation_alias=AliasChoices("description", "content_description"),
    )


class Corpus(BaseModel):
    """Static documentation corpus: category name → page entries."""

    model_config = ConfigDict(extra="ignore")

    categories: dict[str, list[CorpusEntry]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("categories", "topics"),
    )


@dataclass(frozen=True)
class PageDescriptor:
    url: str  # Normalised absolute URL
    description: str | None = None


@dataclass(frozen=True)
class DocumentationIndex:
    """In-memory lookups built from the corpus at startup. Read-only afterwards."""

    # category → pages in corpus order (duplicates within a category kept)
    by_category: dict[str, tuple[PageDescriptor, ...]] = field(default_factory=dict)

    # normalised URL → (category, page); last category wins on duplicates
    by_url: dict[str, tuple[str, PageDescriptor]] = field(default_factory=dict)

    def categories(self) -> list[str]:
        return list(self.by_category)

    def list_by_category(self, category: str) -> tuple[PageDescriptor, ...]:
        """Pages for ``category``; an unknown category yields an empty tuple."""
        return self.by_category.get(category, ())

    def lookup(self, normalized_url: str) -> PageDescriptor | None:
        hit = self.by_url.get(normalized_url)
        return hit[1] if hit is not None else None

    def all_urls(self) -> list[str]:
        return list(self.by_url)
